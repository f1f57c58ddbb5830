"""
Ripartizione mensile del consumo annuo secondo il profilo ARERA.

Alimenta il grafico mensile e la spiegazione "come è calcolato": consumo e
spesa stimati per ogni mese, confronto con la media italiana per famiglia.

Autore: Karica
Versione: 1.0.0
"""

from typing import Dict, Iterable, List, Optional, TypedDict

import pandas as pd

from modules.profilo_arera import ARERA_PROFILE, ETICHETTE_MESI, NOMI_MESI
from modules.proiezione_consumi import arrotonda


# ============================================================================
# COSTANTI (dati ARERA 2023, utenze domestiche residenti 3 kW)
# ============================================================================

PREZZO_KWH_DEFAULT: float = 0.25

# Consumo medio annuo (kWh) per numero di componenti del nucleo familiare
MEDIA_ITALIANA_PER_NUCLEO: Dict[str, int] = {
    "1 persona": 1800,
    "2 persone": 2400,
    "3 persone": 2800,
    "4+ persone": 3200,
}
MEDIA_ITALIANA_KWH: int = 2700

DESCRIZIONI_METODO: Dict[str, str] = {
    "historical_complete": "Dato storico annuale dichiarato in bolletta",
    "historical_partial": "Dati storici con proiezione ARERA",
    "arera_projection": "Proiezione basata sul profilo ARERA",
    "seasonal_projection": "Proiezione basata sul profilo stagionale gas",
    "direct": "Stima semplice (consumo del periodo × 12)",
}


class RigaMese(TypedDict):
    mese: int
    nome: str
    etichetta: str
    consumo_kwh: int
    costo_eur: float
    peso_pct: float
    coperto: bool


class ConfrontoMedia(TypedDict):
    media_italiana_kwh: int
    differenza_kwh: int
    differenza_pct: int
    giudizio: str
    nucleo_piu_vicino: Optional[str]


# ============================================================================
# FUNZIONI
# ============================================================================

def ripartizione_mensile(
    consumo_annuo: Optional[float],
    mesi_coperti: Iterable[int] = (),
    prezzo_kwh: float = PREZZO_KWH_DEFAULT,
) -> List[RigaMese]:
    """
    Distribuisce il consumo annuo sui dodici mesi con i pesi ARERA.

    Args:
        consumo_annuo: Consumo annuo stimato (kWh), None equivale a 0
        mesi_coperti: Mesi per cui la bolletta riporta dati reali
        prezzo_kwh: Prezzo medio dell'energia (€/kWh)

    Returns:
        Dodici righe, da Gennaio a Dicembre
    """
    coperti = set(mesi_coperti)
    righe: List[RigaMese] = []

    for mese, peso in ARERA_PROFILE.items():
        consumo = arrotonda((consumo_annuo or 0) * peso)
        righe.append({
            "mese": mese,
            "nome": NOMI_MESI[mese - 1],
            "etichetta": ETICHETTE_MESI[mese - 1],
            "consumo_kwh": consumo,
            "costo_eur": round(consumo * prezzo_kwh, 2),
            "peso_pct": round(peso * 100, 1),
            "coperto": mese in coperti,
        })

    return righe


def ripartizione_dataframe(
    consumo_annuo: Optional[float],
    mesi_coperti: Iterable[int] = (),
    prezzo_kwh: float = PREZZO_KWH_DEFAULT,
) -> pd.DataFrame:
    """Ripartizione mensile come DataFrame indicizzato per mese."""
    righe = ripartizione_mensile(consumo_annuo, mesi_coperti, prezzo_kwh)
    return pd.DataFrame(righe).set_index("mese")


def riepilogo_consumi(consumo_annuo: Optional[float], prezzo_kwh: float = PREZZO_KWH_DEFAULT) -> Dict[str, float]:
    """Medie mensili e spesa annua stimata."""
    if not consumo_annuo:
        return {"media_mensile_kwh": 0, "media_mensile_eur": 0.0, "spesa_annua_eur": 0}

    media_mensile = arrotonda(consumo_annuo / 12)
    return {
        "media_mensile_kwh": media_mensile,
        "media_mensile_eur": round(media_mensile * prezzo_kwh, 2),
        "spesa_annua_eur": arrotonda(consumo_annuo * prezzo_kwh),
    }


def _giudizio(differenza_pct: float) -> str:
    if differenza_pct < -10:
        return "Ottimo! Consumi meno della media italiana."
    if differenza_pct < 0:
        return "Bene! Sei leggermente sotto la media italiana."
    if differenza_pct < 10:
        return "In linea con la media italiana."
    if differenza_pct < 25:
        return "Consumi un po' più della media italiana."
    return "Consumi significativamente più della media italiana."


def confronto_media_italiana(consumo_annuo: Optional[float]) -> ConfrontoMedia:
    """
    Confronta il consumo annuo con la media nazionale.

    Il nucleo più vicino è quello la cui media dista meno di 300 kWh
    (il più vicino fra questi), None se nessuno.
    """
    consumo = consumo_annuo or 0
    differenza = consumo - MEDIA_ITALIANA_KWH if consumo else 0
    differenza_pct = round(differenza / MEDIA_ITALIANA_KWH * 100) if consumo else 0

    vicini = [
        (abs(consumo - valore), nucleo)
        for nucleo, valore in MEDIA_ITALIANA_PER_NUCLEO.items()
        if consumo and abs(consumo - valore) < 300
    ]

    return {
        "media_italiana_kwh": MEDIA_ITALIANA_KWH,
        "differenza_kwh": round(differenza),
        "differenza_pct": differenza_pct,
        "giudizio": _giudizio(differenza_pct),
        "nucleo_piu_vicino": min(vicini)[1] if vicini else None,
    }
