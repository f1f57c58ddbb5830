"""
Analisi di una bolletta: dalla risposta del modello di estrazione al documento ocr_data.

Flusso:
    risposta modello → estrai_json_da_risposta → normalizza_dati_* →
    calculate_*_annual_projection → documento ocr_data da salvare

La proiezione è pura; tutto il logging del flusso avviene qui.

Autore: Karica
Versione: 1.0.0
"""

import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Union

from modules.normalizzatore_bolletta import (
    DatiBolletta,
    DatiBollettaGas,
    ErroreEstrazioneBolletta,
    estrai_json_da_risposta,
    normalizza_dati_gas,
    normalizza_dati_luce,
)
from modules.proiezione_consumi import ProiezioneAnnua, calculate_annual_projection
from modules.proiezione_gas import calculate_gas_annual_projection

# Configurazione logging
logging.basicConfig(level=logging.INFO, format='%(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


RispostaModello = Union[str, Mapping[str, Any]]


def _campi_proiezione(proiezione: Optional[ProiezioneAnnua]) -> Dict[str, Any]:
    if proiezione is None:
        return {
            "annual_consumption_projected": None,
            "projection_method": None,
            "projection_details": None,
        }
    return {
        "annual_consumption_projected": proiezione.annual_projection,
        "projection_method": proiezione.method.value,
        "projection_details": proiezione.to_projection_details(),
    }


def _leggi_risposta(risposta_modello: RispostaModello) -> Optional[Dict[str, Any]]:
    try:
        return estrai_json_da_risposta(risposta_modello)
    except ErroreEstrazioneBolletta as e:
        logger.error(f"Risposta del modello non interpretabile: {e}")
        logger.debug(f"Contenuto grezzo: {risposta_modello!r}")
        return None


def _log_proiezione(proiezione: Optional[ProiezioneAnnua], unita: str) -> None:
    if proiezione is None:
        logger.info("  Nessun dato di consumo utilizzabile: proiezione non disponibile")
        return
    logger.info(f"  Metodo: {proiezione.method.value}")
    logger.info(f"  Mesi coperti: {list(proiezione.months_covered)}")
    logger.info(f"  Peso totale: {proiezione.total_weight * 100:.1f}%")
    logger.info(f"  Proiezione annua: {proiezione.annual_projection} {unita}/anno "
                f"(confidenza {proiezione.confidence.value})")


def analizza_bolletta_luce(risposta_modello: RispostaModello) -> Dict[str, Any]:
    """
    Analizza la risposta del modello per una bolletta luce.

    Args:
        risposta_modello: Testo restituito dal modello (anche con blocchi
            markdown) oppure dizionario già decodificato

    Returns:
        Documento ocr_data: campi normalizzati (date ISO) più
        annual_consumption_projected, projection_method, projection_details.
        Se la risposta non è leggibile tutti i campi sono None.
    """
    logger.info("=" * 60)
    logger.info("ANALISI BOLLETTA LUCE")
    logger.info("=" * 60)

    grezzi = _leggi_risposta(risposta_modello)
    dati = normalizza_dati_luce(grezzi) if grezzi is not None else DatiBolletta()

    logger.info("\n[STEP 1] Dati normalizzati")
    logger.info(f"  Consumo periodo: {dati.period_consumption} kWh")
    logger.info(f"  Periodo: {dati.period_start} - {dati.period_end}")
    logger.info(f"  Consumo storico: {dati.annual_consumption_reported} kWh")
    logger.info(f"  Periodo storico: {dati.annual_period_start} - {dati.annual_period_end}")
    if dati.period_start and dati.period_end and dati.period_start > dati.period_end:
        logger.warning("  Periodo con data di inizio successiva alla fine")

    logger.info("\n[STEP 2] Proiezione consumo annuo")
    proiezione = calculate_annual_projection(
        dati.period_consumption,
        dati.period_start,
        dati.period_end,
        dati.annual_consumption_reported,
        dati.annual_period_start,
        dati.annual_period_end,
    )
    _log_proiezione(proiezione, "kWh")

    return {**dati.to_dict(), **_campi_proiezione(proiezione)}


def analizza_bolletta_gas(risposta_modello: RispostaModello) -> Dict[str, Any]:
    """
    Analizza la risposta del modello per una bolletta gas.

    Il profilo stagionale è scelto dalla zona climatica estratta.

    Returns:
        Documento ocr_data con bill_type "GAS"
    """
    logger.info("=" * 60)
    logger.info("ANALISI BOLLETTA GAS")
    logger.info("=" * 60)

    grezzi = _leggi_risposta(risposta_modello)
    dati = normalizza_dati_gas(grezzi) if grezzi is not None else DatiBollettaGas()

    logger.info("\n[STEP 1] Dati normalizzati")
    logger.info(f"  Consumo periodo: {dati.period_consumption} Smc")
    logger.info(f"  Periodo: {dati.period_start} - {dati.period_end}")
    logger.info(f"  Zona climatica: {dati.climate_zone or 'sconosciuta'}")

    logger.info("\n[STEP 2] Proiezione consumo annuo")
    proiezione = calculate_gas_annual_projection(
        dati.period_consumption,
        dati.period_start,
        dati.period_end,
        dati.annual_consumption_reported,
        dati.annual_period_start,
        dati.annual_period_end,
        dati.climate_zone,
    )
    _log_proiezione(proiezione, "Smc")

    return {**dati.to_dict(), **_campi_proiezione(proiezione), "bill_type": "GAS"}


def aggiornamento_profilo(ocr_data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Campi del profilo utente da aggiornare dopo l'analisi.

    Contiene sempre updated_at; gli altri campi solo se presenti in ocr_data.
    Le bollette gas non aggiornano il consumo elettrico annuo.
    """
    aggiornamento: Dict[str, Any] = {"updated_at": datetime.now().isoformat()}

    if ocr_data.get("pod"):
        aggiornamento["pod"] = ocr_data["pod"]
    if ocr_data.get("supplier"):
        aggiornamento["energy_supplier"] = ocr_data["supplier"]
    if ocr_data.get("annual_consumption_projected") and ocr_data.get("bill_type") != "GAS":
        aggiornamento["annual_consumption_kwh"] = ocr_data["annual_consumption_projected"]

    return aggiornamento
