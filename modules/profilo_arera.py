"""
Profilo ARERA standard per clienti domestici residenti (potenza impegnata 3 kW).

Distribuzione percentuale mensile del consumo annuo di energia elettrica.
Questa è l'unica definizione del profilo nel progetto: proiezione, ripartizione
mensile, grafici e interfaccia importano tutti ARERA_PROFILE da qui.

Autore: Karica
Versione: 1.0.0
"""

import calendar
from datetime import date
from types import MappingProxyType
from typing import Iterable, List, Mapping

# ============================================================================
# COSTANTI
# ============================================================================

ARERA_PROFILE: Mapping[int, float] = MappingProxyType({
    1: 0.092,   # Gennaio 9.2%
    2: 0.085,   # Febbraio 8.5%
    3: 0.080,   # Marzo 8.0%
    4: 0.072,   # Aprile 7.2%
    5: 0.070,   # Maggio 7.0%
    6: 0.083,   # Giugno 8.3%
    7: 0.095,   # Luglio 9.5%
    8: 0.088,   # Agosto 8.8%
    9: 0.078,   # Settembre 7.8%
    10: 0.075,  # Ottobre 7.5%
    11: 0.082,  # Novembre 8.2%
    12: 0.100,  # Dicembre 10.0%
})

TUTTI_I_MESI: tuple = tuple(range(1, 13))

NOMI_MESI: tuple = (
    "Gennaio", "Febbraio", "Marzo", "Aprile", "Maggio", "Giugno",
    "Luglio", "Agosto", "Settembre", "Ottobre", "Novembre", "Dicembre",
)

ETICHETTE_MESI: tuple = (
    "Gen", "Feb", "Mar", "Apr", "Mag", "Giu",
    "Lug", "Ago", "Set", "Ott", "Nov", "Dic",
)


# ============================================================================
# FUNZIONI DI SUPPORTO
# ============================================================================

def _stesso_giorno_mese_successivo(giorno: int, anno: int, mese: int) -> date:
    """Data nel mese successivo, con il giorno limitato alla lunghezza del mese."""
    if mese == 12:
        anno, mese = anno + 1, 1
    else:
        mese += 1
    ultimo_giorno = calendar.monthrange(anno, mese)[1]
    return date(anno, mese, min(giorno, ultimo_giorno))


def get_mesi_coperti(inizio: date, fine: date) -> List[int]:
    """
    Determina i mesi dell'anno (1-12) toccati da un intervallo di date.

    Si parte dalla data di inizio e si avanza di un mese di calendario alla
    volta finché si resta entro la data di fine. Conta solo il mese dell'anno,
    quindi un periodo Dicembre→Gennaio restituisce [12, 1].

    Args:
        inizio: Data di inizio periodo
        fine: Data di fine periodo

    Returns:
        Mesi distinti nell'ordine in cui sono visitati. Se l'intervallo è
        degenere (inizio successivo a fine) restituisce il solo mese di inizio.
    """
    mesi: List[int] = []
    corrente = inizio

    while corrente <= fine and len(mesi) < 12:
        if corrente.month not in mesi:
            mesi.append(corrente.month)
        if corrente.year == date.max.year and corrente.month == 12:
            break
        corrente =_stesso_giorno_mese_successivo(inizio.day, corrente.year, corrente.month)

    if not mesi:
        mesi.append(inizio.month)

    return mesi


def get_peso_profilo(mesi: Iterable[int], profilo: Mapping[int, float] = ARERA_PROFILE) -> float:
    """Somma dei pesi del profilo per i mesi indicati (mesi sconosciuti pesano 0)."""
    return sum(profilo.get(m, 0.0) for m in mesi)


def get_mesi_mancanti(mesi_coperti: Iterable[int]) -> List[int]:
    """Mesi dell'anno non presenti in mesi_coperti, in ordine crescente."""
    coperti = set(mesi_coperti)
    return [m for m in TUTTI_I_MESI if m not in coperti]
