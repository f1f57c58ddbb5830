"""
Proiezione del consumo annuo di gas naturale (Smc) con profili stagionali per zona.

Il consumo di gas è dominato dal riscaldamento, quindi il profilo mensile
dipende dalla zona climatica (DPR 412/1993). Profili normalizzati sui Gradi
Giorno medi:
    - FREDDO     Nord, zone E-F (Milano, Torino, Bologna)
    - TEMPERATO  Centro, zona D (Roma, Firenze)
    - CALDO      Sud e Isole, zone A-B-C (Palermo, Napoli, Bari)

Regole in ordine di priorità:
    1. historical_complete   consumo storico su >= 12 mesi
    2. historical_partial    storico su 6-11 mesi, mesi mancanti in proporzione al peso
    3. seasonal_projection   consumo di periodo / peso stagionale dei mesi coperti
    4. direct                consumo di periodo × 12

Autore: Karica
Versione: 1.0.0
"""

import re
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from modules.profilo_arera import (
    TUTTI_I_MESI,
    get_mesi_coperti,
    get_mesi_mancanti,
    get_peso_profilo,
)
from modules.proiezione_consumi import (
    MESI_ANNO_COMPLETO,
    MESI_MINIMI_STORICO,
    PESO_MINIMO,
    Confidenza,
    DataInput,
    DettagliProiezione,
    MetodoProiezione,
    ProiezioneAnnua,
    arrotonda,
    arrotonda_finito,
    come_data,
    consumo_presente,
)


# ============================================================================
# PROFILI STAGIONALI
# ============================================================================

# Inverno molto rigido, riscaldamento dominante
GAS_PROFILE_COLD: Mapping[int, float] = MappingProxyType({
    1: 0.19, 2: 0.17, 3: 0.13, 4: 0.07, 5: 0.03, 6: 0.02,
    7: 0.01, 8: 0.01, 9: 0.02, 10: 0.05, 11: 0.12, 12: 0.18,
})

# Inverno significativo ma meno estremo
GAS_PROFILE_TEMPERATE: Mapping[int, float] = MappingProxyType({
    1: 0.16, 2: 0.15, 3: 0.12, 4: 0.08, 5: 0.04, 6: 0.02,
    7: 0.02, 8: 0.01, 9: 0.02, 10: 0.06, 11: 0.14, 12: 0.18,
})

# Riscaldamento breve, pesa di più l'acqua calda sanitaria.
# La somma non è 1: le proiezioni lavorano su rapporti di peso.
GAS_PROFILE_WARM: Mapping[int, float] = MappingProxyType({
    1: 0.14, 2: 0.13, 3: 0.09, 4: 0.05, 5: 0.04, 6: 0.04,
    7: 0.03, 8: 0.03, 9: 0.04, 10: 0.05, 11: 0.10, 12: 0.15,
})

ZONE_CALDE = {"SUD", "ISOLE", "CALDO", "A", "B", "C"}
ZONE_TEMPERATE = {"CENTRO", "TEMPERATO", "D"}

# Sotto questo peso i mesi storici coperti sono troppo poco rappresentativi
PESO_MINIMO_STORICO: float = 0.05

SOGLIA_CONFIDENZA_BASSA: float = 0.1
SOGLIA_CONFIDENZA_ALTA: float = 0.4


def get_profilo_gas(zona: Optional[str]) -> Tuple[str, Mapping[int, float]]:
    """
    Seleziona il profilo stagionale in base alla zona climatica o all'area geografica.

    Args:
        zona: Zona climatica (A-F) o area ("Sud", "Centro", ...). None se ignota.

    Returns:
        (nome_profilo, profilo). Senza zona riconosciuta si usa il profilo freddo:
        meglio sovrastimare che sottostimare.
    """
    if not zona:
        return "Profile(Default-Cold)", GAS_PROFILE_COLD

    parole = set(re.findall(r"[A-Z]+", zona.upper()))
    nome = f"Profile({zona})"
    if parole & ZONE_CALDE:
        return nome, GAS_PROFILE_WARM
    if parole & ZONE_TEMPERATE:
        return nome, GAS_PROFILE_TEMPERATE
    return nome, GAS_PROFILE_COLD


# ============================================================================
# FUNZIONE PRINCIPALE
# ============================================================================

def calculate_gas_annual_projection(
    period_consumption: Optional[float],
    period_start: DataInput,
    period_end: DataInput,
    annual_consumption_reported: Optional[float],
    annual_period_start: DataInput,
    annual_period_end: DataInput,
    zona_climatica: Optional[str] = None,
) -> Optional[ProiezioneAnnua]:
    """
    Stima il consumo annuo di gas (Smc) dai dati di bolletta.

    Args:
        period_consumption: Consumo del periodo fatturato (Smc)
        period_start, period_end: Periodo fatturato
        annual_consumption_reported: Consumo storico dichiarato (Smc)
        annual_period_start, annual_period_end: Periodo dello storico
        zona_climatica: Zona o area geografica per la scelta del profilo

    Returns:
        ProiezioneAnnua oppure None se non ci sono consumi utilizzabili.
    """
    nome_profilo, profilo = get_profilo_gas(zona_climatica)

    storico_inizio = come_data(annual_period_start)
    storico_fine = come_data(annual_period_end)

    if consumo_presente(annual_consumption_reported) and storico_inizio and storico_fine:
        coperti = tuple(get_mesi_coperti(storico_inizio, storico_fine))

        if len(coperti) >= MESI_ANNO_COMPLETO:
            return ProiezioneAnnua(
                annual_projection=arrotonda(annual_consumption_reported),
                method=MetodoProiezione.HISTORICAL_COMPLETE,
                months_covered=coperti,
                months_projected=(),
                total_weight=1.0,
                confidence=Confidenza.ALTA,
                details=DettagliProiezione(
                    profilo=profilo,
                    historical_consumption=annual_consumption_reported,
                    nome_profilo=nome_profilo,
                ),
            )

        if len(coperti) >= MESI_MINIMI_STORICO:
            mancanti = tuple(get_mesi_mancanti(coperti))
            peso_coperto = get_peso_profilo(coperti, profilo)

            if peso_coperto < PESO_MINIMO_STORICO:
                # solo mesi estivi: proiettare è rischioso, si tiene il dato dichiarato
                return ProiezioneAnnua(
                    annual_projection=arrotonda(annual_consumption_reported),
                    method=MetodoProiezione.HISTORICAL_PARTIAL,
                    months_covered=coperti,
                    months_projected=(),
                    total_weight=1.0,
                    confidence=Confidenza.BASSA,
                    details=DettagliProiezione(profilo=profilo, nome_profilo=nome_profilo),
                )

            consumo_per_peso = annual_consumption_reported / peso_coperto
            aggiunta = consumo_per_peso * get_peso_profilo(mancanti, profilo)
            totale = arrotonda_finito(annual_consumption_reported + aggiunta)

            if totale is not None:
                return ProiezioneAnnua(
                    annual_projection=totale,
                    method=MetodoProiezione.HISTORICAL_PARTIAL,
                    months_covered=coperti,
                    months_projected=mancanti,
                    total_weight=peso_coperto,
                    confidence=Confidenza.MEDIA,
                    details=DettagliProiezione(
                        profilo=profilo,
                        historical_consumption=annual_consumption_reported,
                        projected_addition=arrotonda(aggiunta),
                        nome_profilo=nome_profilo,
                    ),
                )

    inizio = come_data(period_start)
    fine = come_data(period_end)

    if consumo_presente(period_consumption) and inizio and fine:
        coperti = tuple(get_mesi_coperti(inizio, fine))
        peso_totale = get_peso_profilo(coperti, profilo)

        proiezione = arrotonda_finito(period_consumption / peso_totale) if peso_totale > PESO_MINIMO else None

        if proiezione is not None:
            confidenza = Confidenza.MEDIA
            if peso_totale < SOGLIA_CONFIDENZA_BASSA:
                confidenza = Confidenza.BASSA
            elif peso_totale > SOGLIA_CONFIDENZA_ALTA:
                confidenza = Confidenza.ALTA

            return ProiezioneAnnua(
                annual_projection=proiezione,
                method=MetodoProiezione.SEASONAL_PROJECTION,
                months_covered=coperti,
                months_projected=tuple(get_mesi_mancanti(coperti)),
                total_weight=peso_totale,
                confidence=confidenza,
                details=DettagliProiezione(profilo=profilo, nome_profilo=nome_profilo),
            )

    diretta = arrotonda_finito(period_consumption * 12) if consumo_presente(period_consumption) else None
    if diretta is not None:
        return ProiezioneAnnua(
            annual_projection=diretta,
            method=MetodoProiezione.DIRECT,
            months_covered=(),
            months_projected=TUTTI_I_MESI,
            total_weight=1 / 12,
            confidence=Confidenza.BASSA,
            details=DettagliProiezione(profilo=profilo, nome_profilo="Flat (Fallback)"),
        )

    return None
