"""
Proiezione del consumo annuo di energia elettrica a partire dai dati di bolletta.

Dai dati estratti da una bolletta (anche parziali o incoerenti) stima il
consumo annuo in kWh usando il profilo mensile ARERA per utenze domestiche.

Le regole sono valutate in ordine di priorità, vince la prima applicabile:
    1. historical_complete  consumo annuo dichiarato in bolletta su >= 12 mesi
    2. historical_partial   consumo storico su 6-11 mesi + proiezione mesi mancanti
    3. arera_projection     consumo di periodo / peso ARERA dei mesi coperti
    4. direct               consumo di periodo senza date × 12

Il modulo è puro: nessun log, nessun I/O, nessuno stato mutabile. Input non
validi (stringhe numeriche, date in formato europeo) vanno normalizzati prima
con modules.normalizzatore_bolletta.

Autore: Karica
Versione: 1.0.0
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from modules.profilo_arera import (
    ARERA_PROFILE,
    TUTTI_I_MESI,
    get_mesi_coperti,
    get_mesi_mancanti,
    get_peso_profilo,
)


# ============================================================================
# COSTANTI
# ============================================================================

MESI_ANNO_COMPLETO: int = 12
MESI_MINIMI_STORICO: int = 6
MESI_MINIMI_CONFIDENZA_MEDIA: int = 3

# Sotto questa soglia il peso dei mesi coperti è considerato nullo
PESO_MINIMO: float = 1e-9


# ============================================================================
# TYPE DEFINITIONS
# ============================================================================

class MetodoProiezione(str, Enum):
    HISTORICAL_COMPLETE = "historical_complete"
    HISTORICAL_PARTIAL = "historical_partial"
    ARERA_PROJECTION = "arera_projection"
    DIRECT = "direct"
    # solo bollette gas, vedi modules.proiezione_gas
    SEASONAL_PROJECTION = "seasonal_projection"


class Confidenza(str, Enum):
    ALTA = "alta"
    MEDIA = "media"
    BASSA = "bassa"


DataInput = Union[date, str, None]


def _profilo_json(profilo: Mapping[int, float]) -> Dict[str, float]:
    return {str(mese): peso for mese, peso in profilo.items()}


def _profilo_da_json(profilo: Mapping[Any, Any]) -> Mapping[int, float]:
    """Ricostruisce un profilo letto da JSON (chiavi stringa) come mapping immutabile."""
    convertito = {int(mese): float(peso) for mese, peso in profilo.items()}
    if convertito == dict(ARERA_PROFILE):
        return ARERA_PROFILE
    return MappingProxyType(convertito)


@dataclass(frozen=True)
class DettagliProiezione:
    """Dati ausiliari per la spiegazione del calcolo lato interfaccia."""

    profilo: Mapping[int, float] = field(default_factory=lambda: ARERA_PROFILE)
    historical_consumption: Optional[float] = None
    projected_addition: Optional[int] = None
    nome_profilo: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        dati: Dict[str, Any] = {}
        if self.historical_consumption is not None:
            dati["historical_consumption"] = self.historical_consumption
        if self.projected_addition is not None:
            dati["projected_addition"] = self.projected_addition
        if self.nome_profilo is None:
            dati["arera_profile"] = _profilo_json(self.profilo)
        else:
            dati["profile_used"] = self.nome_profilo
            dati["seasonal_profile"] = _profilo_json(self.profilo)
        return dati

    @classmethod
    def from_dict(cls, dati: Mapping[str, Any]) -> "DettagliProiezione":
        if dati.get("seasonal_profile") is not None:
            profilo = _profilo_da_json(dati["seasonal_profile"])
            nome_profilo = dati.get("profile_used") or ""
        else:
            profilo = _profilo_da_json(dati.get("arera_profile") or ARERA_PROFILE)
            nome_profilo = None

        storico = dati.get("historical_consumption")
        aggiunta = dati.get("projected_addition")
        return cls(
            profilo=profilo,
            historical_consumption=float(storico) if storico is not None else None,
            projected_addition=int(aggiunta) if aggiunta is not None else None,
            nome_profilo=nome_profilo,
        )


@dataclass(frozen=True)
class ProiezioneAnnua:
    """Risultato della proiezione annua (immutabile)."""

    annual_projection: int
    method: MetodoProiezione
    months_covered: Tuple[int, ...]
    months_projected: Tuple[int, ...]
    total_weight: float
    confidence: Confidenza
    details: DettagliProiezione

    def to_projection_details(self) -> Dict[str, Any]:
        """Forma persistita nel campo projection_details del documento ocr_data."""
        return {
            "months_covered": list(self.months_covered),
            "months_projected": list(self.months_projected),
            "total_weight": float(self.total_weight),
            "confidence": self.confidence.value,
            **self.details.to_dict(),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "annual_projection": self.annual_projection,
            "method": self.method.value,
            **self.to_projection_details(),
        }

    @classmethod
    def from_dict(cls, dati: Mapping[str, Any]) -> "ProiezioneAnnua":
        return cls(
            annual_projection=int(dati["annual_projection"]),
            method=MetodoProiezione(dati["method"]),
            months_covered=tuple(int(m) for m in dati.get("months_covered") or ()),
            months_projected=tuple(int(m) for m in dati.get("months_projected") or ()),
            total_weight=float(dati["total_weight"]),
            confidence=Confidenza(dati["confidence"]),
            details=DettagliProiezione.from_dict(dati),
        )

    @classmethod
    def from_ocr_data(cls, ocr_data: Mapping[str, Any]) -> Optional["ProiezioneAnnua"]:
        """Rilegge la proiezione salvata insieme ai dati di bolletta (None se assente)."""
        dettagli = ocr_data.get("projection_details")
        if not dettagli or ocr_data.get("annual_consumption_projected") is None:
            return None
        return cls.from_dict({
            **dettagli,
            "annual_projection": ocr_data["annual_consumption_projected"],
            "method": ocr_data["projection_method"],
        })


# ============================================================================
# FUNZIONI DI SUPPORTO
# ============================================================================

def arrotonda(valore: float) -> int:
    """Arrotondamento all'intero più vicino, metà verso l'alto."""
    return int(math.floor(valore + 0.5))


def arrotonda_finito(valore: float) -> Optional[int]:
    """Come arrotonda, ma None se il valore non è finito (overflow)."""
    if not math.isfinite(valore):
        return None
    return arrotonda(valore)


def come_data(valore: DataInput) -> Optional[date]:
    """Converte date, datetime o stringa ISO YYYY-MM-DD in date (None se vuoto)."""
    if not valore:
        return None
    if isinstance(valore, datetime):
        return valore.date()
    if isinstance(valore, date):
        return valore
    return date.fromisoformat(valore)


def consumo_presente(consumo: Optional[float]) -> bool:
    """True se il consumo è un numero finito maggiore di zero."""
    # un consumo nullo non porta informazione
    return consumo is not None and math.isfinite(consumo) and consumo > 0


@dataclass(frozen=True)
class _Ingressi:
    period_consumption: Optional[float]
    period_start: Optional[date]
    period_end: Optional[date]
    annual_consumption_reported: Optional[float]
    annual_period_start: Optional[date]
    annual_period_end: Optional[date]
    mesi_storici: Tuple[int, ...]

    @property
    def ha_storico(self) -> bool:
        return (
            consumo_presente(self.annual_consumption_reported)
            and self.annual_period_start is not None
            and self.annual_period_end is not None
        )

    @property
    def ha_periodo(self) -> bool:
        return (
            consumo_presente(self.period_consumption)
            and self.period_start is not None
            and self.period_end is not None
        )


# ============================================================================
# REGOLE DI PROIEZIONE
# ============================================================================

def _applica_storico_completo(ingressi: _Ingressi) -> bool:
    return ingressi.ha_storico and len(ingressi.mesi_storici) >= MESI_ANNO_COMPLETO


def _applica_storico_parziale(ingressi: _Ingressi) -> bool:
    return (
        ingressi.ha_storico
        and MESI_MINIMI_STORICO <= len(ingressi.mesi_storici) < MESI_ANNO_COMPLETO
    )


def _applica_proiezione_arera(ingressi: _Ingressi) -> bool:
    return ingressi.ha_periodo


def _applica_diretta(ingressi: _Ingressi) -> bool:
    return consumo_presente(ingressi.period_consumption)


def _storico_completo(ingressi: _Ingressi) -> ProiezioneAnnua:
    return ProiezioneAnnua(
        annual_projection=arrotonda(ingressi.annual_consumption_reported),
        method=MetodoProiezione.HISTORICAL_COMPLETE,
        months_covered=ingressi.mesi_storici,
        months_projected=(),
        total_weight=1.0,
        confidence=Confidenza.ALTA,
        details=DettagliProiezione(historical_consumption=ingressi.annual_consumption_reported),
    )


def _storico_parziale(ingressi: _Ingressi) -> Optional[ProiezioneAnnua]:
    """
    Completa lo storico parziale stimando i mesi mancanti.

    Ogni mese mancante vale la media mensile nota, scalata dal rapporto fra il
    peso ARERA del mese e il peso medio dei mesi coperti.
    """
    coperti = ingressi.mesi_storici
    mancanti = get_mesi_mancanti(coperti)
    peso_coperto = get_peso_profilo(coperti)

    consumo_medio_mensile = ingressi.annual_consumption_reported / len(coperti)
    peso_medio_coperto = peso_coperto / len(coperti)

    aggiunta = sum(
        consumo_medio_mensile * (ARERA_PROFILE[mese] / peso_medio_coperto)
        for mese in mancanti
    )
    totale = arrotonda_finito(ingressi.annual_consumption_reported + aggiunta)
    if totale is None:
        return None

    return ProiezioneAnnua(
        annual_projection=totale,
        method=MetodoProiezione.HISTORICAL_PARTIAL,
        months_covered=coperti,
        months_projected=tuple(mancanti),
        total_weight=peso_coperto,
        confidence=Confidenza.MEDIA,
        details=DettagliProiezione(
            historical_consumption=ingressi.annual_consumption_reported,
            projected_addition=arrotonda(aggiunta),
        ),
    )


def _proiezione_arera(ingressi: _Ingressi) -> Optional[ProiezioneAnnua]:
    coperti = tuple(get_mesi_coperti(ingressi.period_start, ingressi.period_end))
    peso_totale = get_peso_profilo(coperti)

    if peso_totale <= PESO_MINIMO:
        return None
    proiezione = arrotonda_finito(ingressi.period_consumption / peso_totale)
    if proiezione is None:
        return None

    return ProiezioneAnnua(
        annual_projection=proiezione,
        method=MetodoProiezione.ARERA_PROJECTION,
        months_covered=coperti,
        months_projected=tuple(get_mesi_mancanti(coperti)),
        total_weight=peso_totale,
        confidence=(
            Confidenza.MEDIA if len(coperti) >= MESI_MINIMI_CONFIDENZA_MEDIA
            else Confidenza.BASSA
        ),
        details=DettagliProiezione(),
    )


def _diretta(ingressi: _Ingressi) -> Optional[ProiezioneAnnua]:
    proiezione = arrotonda_finito(ingressi.period_consumption * 12)
    if proiezione is None:
        return None

    return ProiezioneAnnua(
        annual_projection=proiezione,
        method=MetodoProiezione.DIRECT,
        months_covered=(),
        months_projected=TUTTI_I_MESI,
        total_weight=1 / 12,
        confidence=Confidenza.BASSA,
        details=DettagliProiezione(),
    )


Regola = Tuple[
    MetodoProiezione,
    Callable[[_Ingressi], bool],
    Callable[[_Ingressi], Optional[ProiezioneAnnua]],
]

# Ordine = priorità. Una regola applicabile che non produce risultato
# (peso nullo, consumo fuori scala) lascia il passo alla successiva.
REGOLE_PROIEZIONE: Tuple[Regola, ...] = (
    (MetodoProiezione.HISTORICAL_COMPLETE, _applica_storico_completo, _storico_completo),
    (MetodoProiezione.HISTORICAL_PARTIAL, _applica_storico_parziale, _storico_parziale),
    (MetodoProiezione.ARERA_PROJECTION, _applica_proiezione_arera, _proiezione_arera),
    (MetodoProiezione.DIRECT, _applica_diretta, _diretta),
)


# ============================================================================
# FUNZIONE PRINCIPALE
# ============================================================================

def calculate_annual_projection(
    period_consumption: Optional[float],
    period_start: DataInput,
    period_end: DataInput,
    annual_consumption_reported: Optional[float],
    annual_period_start: DataInput,
    annual_period_end: DataInput,
) -> Optional[ProiezioneAnnua]:
    """
    Stima il consumo annuo (kWh) dai dati di bolletta disponibili.

    Args:
        period_consumption: Consumo del periodo fatturato (kWh)
        period_start: Inizio periodo fatturato (date o ISO YYYY-MM-DD)
        period_end: Fine periodo fatturato
        annual_consumption_reported: Consumo storico dichiarato in bolletta (kWh)
        annual_period_start: Inizio del periodo a cui si riferisce lo storico
        annual_period_end: Fine del periodo a cui si riferisce lo storico

    Returns:
        ProiezioneAnnua della prima regola applicabile, oppure None se non c'è
        alcun dato di consumo utilizzabile.
    """
    storico_inizio = come_data(annual_period_start)
    storico_fine = come_data(annual_period_end)
    mesi_storici: Tuple[int, ...] = ()
    if storico_inizio is not None and storico_fine is not None:
        mesi_storici = tuple(get_mesi_coperti(storico_inizio, storico_fine))

    ingressi = _Ingressi(
        period_consumption=period_consumption,
        period_start=come_data(period_start),
        period_end=come_data(period_end),
        annual_consumption_reported=annual_consumption_reported,
        annual_period_start=storico_inizio,
        annual_period_end=storico_fine,
        mesi_storici=mesi_storici,
    )

    for _metodo, applicabile, calcola in REGOLE_PROIEZIONE:
        if applicabile(ingressi):
            risultato = calcola(ingressi)
            if risultato is not None:
                return risultato

    return None


project = calculate_annual_projection
