"""
Karica - Applicazione Streamlit
Interfaccia web per la stima del consumo annuo a partire dalla bolletta

Funzionalità:
- Incolla la risposta del modello di estrazione (luce o gas)
- Inserimento manuale dei dati di bolletta con validazione
- Proiezione annua, grafico mensile ARERA e spiegazione del calcolo
- Salvataggio dell'analisi nell'archivio locale

Autore: Karica
Versione: 1.0.0
"""

import json
from datetime import date

import streamlit as st

from components.ui_components import render_proiezione, render_spiegazione_arera
from components.validators import (
    validate_consumo,
    validate_periodo,
    validate_prezzo_kwh,
)
from modules.analisi_bolletta import analizza_bolletta_gas, analizza_bolletta_luce
from modules.archivio_bollette import get_archivio_bollette
from modules.proiezione_consumi import ProiezioneAnnua
from modules.ripartizione_mensile import PREZZO_KWH_DEFAULT

# ============================================================================
# CONFIGURAZIONE PAGINA
# ============================================================================

st.set_page_config(
    page_title="Karica - Analisi Bolletta",
    page_icon="⚡",
    layout="wide",
)


def _mostra_messaggio(valido: bool, messaggio) -> bool:
    if messaggio:
        (st.warning if valido else st.error)(messaggio)
    return valido


def sezione_risposta_modello() -> None:
    """Analisi della risposta JSON del modello di estrazione."""
    tipo = st.radio("Tipo bolletta", ["Luce", "Gas"], horizontal=True)
    risposta = st.text_area("Risposta del modello (JSON, anche con blocchi ```json)", height=220)

    if st.button("Analizza", type="primary", disabled=not risposta.strip()):
        if tipo == "Gas":
            st.session_state["ocr_data"] = analizza_bolletta_gas(risposta)
        else:
            st.session_state["ocr_data"] = analizza_bolletta_luce(risposta)
        st.session_state["unita"] = "Smc" if tipo == "Gas" else "kWh"


def sezione_inserimento_manuale() -> None:
    """Inserimento manuale dei dati essenziali della bolletta luce."""
    col1, col2, col3 = st.columns(3)
    with col1:
        consumo = st.number_input("Consumo del periodo (kWh)", min_value=0.0, value=0.0, step=10.0)
    with col2:
        inizio = st.date_input("Inizio periodo", value=None, format="DD/MM/YYYY")
    with col3:
        fine = st.date_input("Fine periodo", value=None, format="DD/MM/YYYY")

    if not st.button("Calcola", type="primary"):
        return

    if not _mostra_messaggio(*validate_consumo(consumo)):
        return
    if inizio and fine and not _mostra_messaggio(*validate_periodo(inizio, fine)):
        return

    dati = {
        "period_consumption": consumo,
        "period_start": inizio.isoformat() if isinstance(inizio, date) else None,
        "period_end": fine.isoformat() if isinstance(fine, date) else None,
    }
    st.session_state["ocr_data"] = analizza_bolletta_luce(dati)
    st.session_state["unita"] = "kWh"


def sezione_risultato(prezzo_kwh: float) -> None:
    ocr_data = st.session_state.get("ocr_data")
    if ocr_data is None:
        return

    unita = st.session_state.get("unita", "kWh")
    proiezione = ProiezioneAnnua.from_ocr_data(ocr_data)

    st.divider()
    render_proiezione(proiezione, prezzo_kwh=prezzo_kwh, unita=unita)

    if unita == "kWh" and proiezione is not None:
        with st.expander("Come è calcolato?"):
            render_spiegazione_arera(proiezione, prezzo_kwh=prezzo_kwh)

    with st.expander("Documento ocr_data"):
        st.code(json.dumps(ocr_data, indent=2, ensure_ascii=False), language="json")

    utente = st.text_input("Salva per l'utente")
    if st.button("Salva analisi", disabled=not utente.strip()):
        successo, messaggio, _ = get_archivio_bollette().salva_analisi(utente, "", ocr_data)
        (st.success if successo else st.error)(messaggio)


def main():
    st.title("⚡ Analisi bolletta")
    st.caption("Stima del consumo annuo con il profilo ARERA per utenze domestiche (3 kW)")

    with st.sidebar:
        prezzo_kwh = st.number_input("Prezzo energia (€/kWh)", value=PREZZO_KWH_DEFAULT, step=0.01, format="%.3f")
        _mostra_messaggio(*validate_prezzo_kwh(prezzo_kwh))

    tab_modello, tab_manuale = st.tabs(["Risposta modello", "Inserimento manuale"])
    with tab_modello:
        sezione_risposta_modello()
    with tab_manuale:
        sezione_inserimento_manuale()

    sezione_risultato(prezzo_kwh)


if __name__ == "__main__":
    main()
