"""
Modulo per validazione dei dati di bolletta inseriti a mano.

Previene errori comuni e fornisce messaggi di errore chiari.
"""

import re
from typing import Tuple, Optional
from datetime import datetime, date

from modules.normalizzatore_bolletta import (
    CONSUMO_MAX_KWH,
    POTENZA_MAX_KW,
    PREZZO_MAX_EUR_KWH,
    normalizza_data,
)


class ValidationError(Exception):
    """Eccezione per errori di validazione input."""
    pass


def validate_consumo(
    consumo: float,
    max_value: float = CONSUMO_MAX_KWH,
    campo: str = "Consumo",
    unita: str = "kWh"
) -> Tuple[bool, Optional[str]]:
    """
    Valida consumo di periodo.

    Args:
        consumo: Consumo da validare
        max_value: Valore massimo accettabile (escluso)
        campo: Nome campo per messaggio errore
        unita: Unità di misura

    Returns:
        (valido, messaggio_errore)
    """
    if consumo <= 0:
        return False, f"❌ {campo} deve essere maggiore di zero"

    if consumo >= max_value:
        return False, f"⚠️ {campo} eccessivo (massimo: {max_value:,.0f} {unita}). Verificare valore."

    # Warning per valori sospetti su utenze domestiche
    if consumo > 10000:
        return True, f"⚠️ ATTENZIONE: {campo} molto alto ({consumo:,.0f} {unita}). Confermare il valore."

    return True, None


def validate_potenza(
    potenza: float,
    max_value: float = POTENZA_MAX_KW,
    campo: str = "Potenza impegnata"
) -> Tuple[bool, Optional[str]]:
    """
    Valida potenza impegnata del contatore (kW).

    Returns:
        (valido, messaggio_errore)
    """
    if potenza <= 0:
        return False, f"❌ {campo} deve essere maggiore di zero"

    if potenza >= max_value:
        return False, f"⚠️ {campo} eccessiva (massimo: {max_value} kW). Verificare valore."

    if potenza > 6:
        return True, f"⚠️ ATTENZIONE: {campo} di {potenza} kW insolita per un'utenza domestica."

    return True, None


def validate_prezzo_kwh(
    prezzo: float,
    max_value: float = PREZZO_MAX_EUR_KWH
) -> Tuple[bool, Optional[str]]:
    """
    Valida prezzo dell'energia (€/kWh).

    Returns:
        (valido, messaggio_errore)
    """
    if prezzo <= 0:
        return False, "❌ Prezzo deve essere maggiore di zero"

    if prezzo >= max_value:
        return False, f"❌ Prezzo non plausibile (massimo: {max_value} €/kWh). Inserire il prezzo in €/kWh, non in centesimi."

    return True, None


def validate_data(
    data_input: date | datetime | str,
    data_minima: Optional[date] = None,
    data_massima: Optional[date] = None,
    campo: str = "Data"
) -> Tuple[bool, Optional[str]]:
    """
    Valida input data.

    Args:
        data_input: Data da validare (date, datetime, YYYY-MM-DD o DD/MM/YYYY)
        data_minima: Data minima accettabile (opzionale)
        data_massima: Data massima accettabile (opzionale)
        campo: Nome campo per messaggio errore

    Returns:
        (valido, messaggio_errore)
    """
    data = normalizza_data(data_input)
    if data is None:
        return False, f"❌ {campo} non valida. Formati accettati: YYYY-MM-DD o DD/MM/YYYY"

    if data_minima and data < data_minima:
        return False, f"❌ {campo} non può essere anteriore a {data_minima.strftime('%d/%m/%Y')}"

    if data_massima and data > data_massima:
        return False, f"❌ {campo} non può essere posteriore a {data_massima.strftime('%d/%m/%Y')}"

    # Una bolletta non può riferirsi al futuro
    if data > date.today():
        return True, f"⚠️ ATTENZIONE: {campo} nel futuro. Verificare."

    return True, None


def validate_periodo(
    inizio: date | datetime | str,
    fine: date | datetime | str,
    campo: str = "Periodo"
) -> Tuple[bool, Optional[str]]:
    """
    Valida coerenza del periodo di fatturazione.

    Returns:
        (valido, messaggio_errore)
    """
    data_inizio = normalizza_data(inizio)
    data_fine = normalizza_data(fine)

    if data_inizio is None or data_fine is None:
        return False, f"❌ {campo}: date non valide"

    if data_inizio > data_fine:
        return False, f"❌ {campo}: la data di inizio è successiva alla data di fine"

    if (data_fine - data_inizio).days > 396:
        return True, f"⚠️ ATTENZIONE: {campo} superiore a 13 mesi. Verificare le date."

    return True, None


def validate_pod(pod: str) -> Tuple[bool, Optional[str]]:
    """
    Valida codice POD (IT + 12-13 caratteri alfanumerici).

    Returns:
        (valido, messaggio_errore)
    """
    pod_pulito = re.sub(r"\s", "", pod or "").upper()

    if not pod_pulito:
        return False, "❌ POD obbligatorio"

    if not pod_pulito.startswith("IT"):
        return False, "❌ Il POD deve iniziare con IT"

    if not 14 <= len(pod_pulito) <= 15:
        return False, f"❌ POD di {len(pod_pulito)} caratteri: attesi 14 o 15"

    return True, None
