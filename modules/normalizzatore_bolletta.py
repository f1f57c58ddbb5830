"""
Normalizzazione dei dati estratti dalle bollette luce e gas.

Il modello di estrazione restituisce un JSON poco tipizzato: numeri in formato
italiano ("1.234,56 kWh"), date europee ("31/01/2024"), codici con spazi.
Questo modulo converte ogni campo nel tipo atteso e scarta i valori non
plausibili, così che la proiezione riceva solo dati già validati.

Un campo non valido diventa None: non blocca l'analisi del resto della bolletta.

Autore: Karica
Versione: 1.0.0
"""

import json
import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Union


# ============================================================================
# LIMITI DI PLAUSIBILITÀ
# ============================================================================

CONSUMO_MAX_KWH: float = 50000.0
CONSUMO_ANNUO_MAX_KWH: float = 100000.0
CONSUMO_MAX_SMC: float = 50000.0
POTENZA_MAX_KW: float = 100.0
PREZZO_MAX_EUR_KWH: float = 1.0

POD_LUNGHEZZA_MIN: int = 14
POD_LUNGHEZZA_MAX: int = 15
PDR_LUNGHEZZA: int = 14

TARIFFE_VALIDE = ("monorario", "biorario", "triorario")

_RE_DATA_ISO = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?:T.*)?$")
_RE_DATA_EUROPEA = re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})$")
_RE_FENCE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)


class ErroreEstrazioneBolletta(ValueError):
    """La risposta del modello non contiene un oggetto JSON leggibile."""
    pass


# ============================================================================
# TYPE DEFINITIONS
# ============================================================================

@dataclass(frozen=True)
class DatiBolletta:
    """Dati di una bolletta luce dopo la normalizzazione."""

    period_start: Optional[date] = None
    period_end: Optional[date] = None
    period_consumption: Optional[int] = None
    annual_consumption_reported: Optional[float] = None
    annual_period_start: Optional[date] = None
    annual_period_end: Optional[date] = None
    pod: Optional[str] = None
    supplier: Optional[str] = None
    tariff_type: Optional[str] = None
    power_kw: Optional[float] = None
    customer_code: Optional[str] = None
    price_kwh: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period_start": _iso(self.period_start),
            "period_end": _iso(self.period_end),
            "period_consumption": self.period_consumption,
            "annual_consumption_reported": self.annual_consumption_reported,
            "annual_period_start": _iso(self.annual_period_start),
            "annual_period_end": _iso(self.annual_period_end),
            "pod": self.pod,
            "supplier": self.supplier,
            "tariff_type": self.tariff_type,
            "power_kw": self.power_kw,
            "customer_code": self.customer_code,
            "price_kwh": self.price_kwh,
        }


@dataclass(frozen=True)
class DatiBollettaGas:
    """Dati di una bolletta gas dopo la normalizzazione (consumi in Smc)."""

    period_start: Optional[date] = None
    period_end: Optional[date] = None
    period_consumption: Optional[int] = None
    annual_consumption_reported: Optional[float] = None
    annual_period_start: Optional[date] = None
    annual_period_end: Optional[date] = None
    pdr: Optional[str] = None
    supplier: Optional[str] = None
    municipality: Optional[str] = None
    climate_zone: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period_start": _iso(self.period_start),
            "period_end": _iso(self.period_end),
            "period_consumption": self.period_consumption,
            "annual_consumption_reported": self.annual_consumption_reported,
            "annual_period_start": _iso(self.annual_period_start),
            "annual_period_end": _iso(self.annual_period_end),
            "pdr": self.pdr,
            "supplier": self.supplier,
            "municipality": self.municipality,
            "climate_zone": self.climate_zone,
        }


def _iso(valore: Optional[date]) -> Optional[str]:
    return valore.isoformat() if valore else None


# ============================================================================
# PARSING DI BASE
# ============================================================================

def estrai_json_da_risposta(risposta: Union[str, Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Estrae l'oggetto JSON dalla risposta testuale del modello.

    Rimuove eventuali blocchi markdown (```json) e considera il testo fra la
    prima "{" e l'ultima "}".

    Raises:
        ErroreEstrazioneBolletta: se non c'è un oggetto JSON valido
    """
    if isinstance(risposta, Mapping):
        return dict(risposta)

    testo = _RE_FENCE.sub("", risposta or "").strip()
    inizio = testo.find("{")
    fine = testo.rfind("}")
    if inizio != -1 and fine > inizio:
        testo = testo[inizio:fine + 1]

    try:
        dati = json.loads(testo)
    except json.JSONDecodeError as e:
        raise ErroreEstrazioneBolletta(f"JSON non valido nella risposta: {e}") from e

    if not isinstance(dati, dict):
        raise ErroreEstrazioneBolletta("La risposta non contiene un oggetto JSON")
    return dati


def parse_numero_italiano(valore: Any, separatore_migliaia: bool = True) -> Optional[float]:
    """
    Converte un numero in formato italiano in float.

    Args:
        valore: Numero o stringa ("1.234,56", "850 kWh", "0,245 €/kWh")
        separatore_migliaia: Se True il punto è separatore delle migliaia e viene
            rimosso; se False solo la virgola è convertita (potenze, prezzi)

    Returns:
        Il valore numerico, None se non interpretabile
    """
    if valore is None or isinstance(valore, bool):
        return None

    if isinstance(valore, (int, float)):
        numero = float(valore)
    elif isinstance(valore, str):
        testo = valore.strip()
        if separatore_migliaia:
            testo = testo.replace(".", "")
        testo = re.sub(r"[^\d.\-]", "", testo.replace(",", "."))
        try:
            numero = float(testo)
        except ValueError:
            return None
    else:
        return None

    if math.isnan(numero) or math.isinf(numero):
        return None
    return numero


def normalizza_data(valore: Any) -> Optional[date]:
    """
    Converte una data in datetime.date.

    Formati accettati: YYYY-MM-DD (anche con orario), DD/MM/YYYY, DD-MM-YYYY,
    DD.MM.YYYY. Date inesistenti (es. 31/02/2024) restituiscono None.
    """
    if isinstance(valore, datetime):
        return valore.date()
    if isinstance(valore, date):
        return valore
    if not isinstance(valore, str):
        return None

    testo = valore.strip()
    try:
        corrispondenza = _RE_DATA_ISO.match(testo)
        if corrispondenza:
            anno, mese, giorno = corrispondenza.groups()
            return date(int(anno), int(mese), int(giorno))

        corrispondenza = _RE_DATA_EUROPEA.match(testo)
        if corrispondenza:
            giorno, mese, anno = corrispondenza.groups()
            return date(int(anno), int(mese), int(giorno))
    except ValueError:
        return None

    return None


def _nel_range(numero: Optional[float], massimo: float) -> bool:
    return numero is not None and 0 < numero < massimo


# ============================================================================
# VALIDAZIONE CAMPI
# ============================================================================

def normalizza_consumo(valore: Any, massimo: float = CONSUMO_MAX_KWH) -> Optional[int]:
    """Consumo di periodo, arrotondato all'intero, nell'intervallo (0, massimo)."""
    numero = parse_numero_italiano(valore)
    if not _nel_range(numero, massimo):
        return None
    return int(math.floor(numero + 0.5))


def normalizza_consumo_annuo(valore: Any, massimo: float = CONSUMO_ANNUO_MAX_KWH) -> Optional[float]:
    """Consumo storico dichiarato, a due decimali, nell'intervallo (0, massimo)."""
    numero = parse_numero_italiano(valore)
    if not _nel_range(numero, massimo):
        return None
    return round(numero, 2)


def normalizza_pod(valore: Any) -> Optional[str]:
    """POD italiano: senza spazi, maiuscolo, inizia con IT, 14-15 caratteri."""
    if not valore:
        return None
    pod = re.sub(r"\s", "", str(valore)).upper()
    if pod.startswith("IT") and POD_LUNGHEZZA_MIN <= len(pod) <= POD_LUNGHEZZA_MAX:
        return pod
    return None


def normalizza_pdr(valore: Any) -> Optional[str]:
    """PDR gas: 14 cifre."""
    if not valore:
        return None
    pdr = re.sub(r"\s", "", str(valore))
    if pdr.isdigit() and len(pdr) == PDR_LUNGHEZZA:
        return pdr
    return None


def normalizza_testo(valore: Any, lunghezza_minima: int = 2) -> Optional[str]:
    """Stringa ripulita dagli spazi, None se troppo corta."""
    if not isinstance(valore, str):
        return None
    testo = valore.strip()
    return testo if len(testo) >= lunghezza_minima else None


def normalizza_tariffa(valore: Any) -> Optional[str]:
    if not isinstance(valore, str):
        return None
    tariffa = valore.strip().lower()
    return tariffa if tariffa in TARIFFE_VALIDE else None


def normalizza_potenza(valore: Any) -> Optional[float]:
    """Potenza impegnata (kW) a un decimale, nell'intervallo (0, 100)."""
    numero = parse_numero_italiano(valore, separatore_migliaia=False)
    if not _nel_range(numero, POTENZA_MAX_KW):
        return None
    return round(numero, 1)


def normalizza_prezzo(valore: Any) -> Optional[float]:
    """Prezzo dell'energia (€/kWh) a tre decimali, nell'intervallo (0, 1)."""
    numero = parse_numero_italiano(valore, separatore_migliaia=False)
    if not _nel_range(numero, PREZZO_MAX_EUR_KWH):
        return None
    return round(numero, 3)


# ============================================================================
# NORMALIZZAZIONE COMPLETA
# ============================================================================

def normalizza_dati_luce(grezzi: Mapping[str, Any]) -> DatiBolletta:
    """
    Normalizza i campi estratti da una bolletta luce.

    Args:
        grezzi: Dizionario prodotto dal modello di estrazione

    Returns:
        DatiBolletta con i soli campi validi valorizzati
    """
    return DatiBolletta(
        period_start=normalizza_data(grezzi.get("period_start")),
        period_end=normalizza_data(grezzi.get("period_end")),
        period_consumption=normalizza_consumo(grezzi.get("period_consumption")),
        annual_consumption_reported=normalizza_consumo_annuo(grezzi.get("annual_consumption_reported")),
        annual_period_start=normalizza_data(grezzi.get("annual_period_start")),
        annual_period_end=normalizza_data(grezzi.get("annual_period_end")),
        pod=normalizza_pod(grezzi.get("pod")),
        supplier=normalizza_testo(grezzi.get("supplier")),
        tariff_type=normalizza_tariffa(grezzi.get("tariff_type")),
        power_kw=normalizza_potenza(grezzi.get("power_kw")),
        customer_code=normalizza_testo(grezzi.get("customer_code"), lunghezza_minima=3),
        price_kwh=normalizza_prezzo(grezzi.get("price_kwh")),
    )


def normalizza_dati_gas(grezzi: Mapping[str, Any]) -> DatiBollettaGas:
    """
    Normalizza i campi estratti da una bolletta gas.

    Accetta sia i nomi specifici del gas (period_consumption_smc,
    climate_zone_inferred) sia quelli generici.
    """
    consumo = grezzi.get("period_consumption_smc", grezzi.get("period_consumption"))
    storico = grezzi.get("annual_consumption_reported_smc", grezzi.get("annual_consumption_reported"))
    zona = grezzi.get("climate_zone_inferred", grezzi.get("climate_zone"))

    return DatiBollettaGas(
        period_start=normalizza_data(grezzi.get("period_start")),
        period_end=normalizza_data(grezzi.get("period_end")),
        period_consumption=normalizza_consumo(consumo, massimo=CONSUMO_MAX_SMC),
        annual_consumption_reported=normalizza_consumo_annuo(storico),
        annual_period_start=normalizza_data(grezzi.get("annual_period_start")),
        annual_period_end=normalizza_data(grezzi.get("annual_period_end")),
        pdr=normalizza_pdr(grezzi.get("pdr")),
        supplier=normalizza_testo(grezzi.get("supplier")),
        municipality=normalizza_testo(grezzi.get("municipality")),
        climate_zone=normalizza_testo(zona, lunghezza_minima=1),
    )
