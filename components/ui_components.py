"""
Componenti UI riutilizzabili per Streamlit.

Contiene funzioni per rendering consistente della proiezione dei consumi,
della spiegazione del calcolo e dello stato "nessun dato".
"""

import streamlit as st
import pandas as pd
from typing import Optional

from components.grafici import crea_grafico_mensile
from modules.proiezione_consumi import Confidenza, ProiezioneAnnua
from modules.ripartizione_mensile import (
    DESCRIZIONI_METODO,
    MEDIA_ITALIANA_PER_NUCLEO,
    PREZZO_KWH_DEFAULT,
    confronto_media_italiana,
    riepilogo_consumi,
    ripartizione_mensile,
)

ETICHETTE_CONFIDENZA = {
    Confidenza.ALTA: "🟢 Alta",
    Confidenza.MEDIA: "🟡 Media",
    Confidenza.BASSA: "🔴 Bassa",
}


def _formato_italiano(testo: str) -> str:
    return testo.replace(",", "X").replace(".", ",").replace("X", ".")


def format_currency(valore: float, simbolo: str = "€") -> str:
    """
    Formatta valore come valuta.

    Args:
        valore: Valore numerico
        simbolo: Simbolo valuta

    Returns:
        Stringa formattata
    """
    return f"{_formato_italiano(f'{valore:,.2f}')} {simbolo}"


def format_kwh(valore: float, unita: str = "kWh") -> str:
    """Formatta un consumo con separatore delle migliaia italiano (es. 13.043 kWh)."""
    return f"{_formato_italiano(f'{valore:,.0f}')} {unita}"


def format_percentage(valore: float, decimali: int = 1) -> str:
    """
    Formatta valore come percentuale.

    Args:
        valore: Valore decimale (0.15 = 15%)
        decimali: Numero decimali

    Returns:
        Stringa formattata
    """
    return f"{valore * 100:.{decimali}f}%"


def render_nessun_dato() -> None:
    """Stato mostrato quando la bolletta non contiene consumi utilizzabili."""
    st.info(
        "📄 Nessun dato di consumo ancora disponibile. "
        "Carica una bolletta con il consumo del periodo per vedere la stima annua."
    )


def render_proiezione(
    proiezione: Optional[ProiezioneAnnua],
    prezzo_kwh: float = PREZZO_KWH_DEFAULT,
    unita: str = "kWh",
    key_prefix: str = ""
) -> None:
    """
    Renderizza la proiezione annua con metriche e grafico mensile.

    Args:
        proiezione: Risultato della proiezione (None → stato "nessun dato")
        prezzo_kwh: Prezzo per la stima della spesa
        unita: Unità di misura del consumo
        key_prefix: Prefisso per chiavi Streamlit
    """
    if proiezione is None:
        render_nessun_dato()
        return

    st.success(f"### Consumo annuo stimato: {format_kwh(proiezione.annual_projection, unita)}")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric(label="Metodo", value=DESCRIZIONI_METODO.get(proiezione.method.value, proiezione.method.value))
    with col2:
        st.metric(label="Affidabilità", value=ETICHETTE_CONFIDENZA[proiezione.confidence])
    with col3:
        st.metric(label="Mesi reali", value=f"{len(proiezione.months_covered)}/12")

    if unita == "kWh":
        st.plotly_chart(
            crea_grafico_mensile(proiezione, prezzo_kwh=prezzo_kwh),
            use_container_width=True,
            key=f"{key_prefix}grafico_mensile",
        )

    with st.expander("Dettagli calcolo"):
        st.json(proiezione.to_dict(), expanded=False)


def render_spiegazione_arera(
    proiezione: Optional[ProiezioneAnnua],
    prezzo_kwh: float = PREZZO_KWH_DEFAULT
) -> None:
    """
    Renderizza la spiegazione "come è calcolato" con ripartizione mensile
    e confronto con la media italiana.
    """
    if proiezione is None:
        render_nessun_dato()
        return

    consumo = proiezione.annual_projection
    riepilogo = riepilogo_consumi(consumo, prezzo_kwh)

    st.markdown(
        "**Cos'è il profilo ARERA?** L'Autorità di Regolazione per Energia Reti e Ambiente "
        "definisce quanto consuma tipicamente ogni mese una famiglia con contatore da 3 kW. "
        "Dai mesi presenti in bolletta stimiamo il resto dell'anno con questi pesi."
    )
    st.caption(
        f"Spesa mensile media: ~{format_currency(riepilogo['media_mensile_eur'])} "
        f"({format_kwh(riepilogo['media_mensile_kwh'])}) • "
        f"{len(proiezione.months_covered)}/12 mesi reali"
    )

    righe = ripartizione_mensile(consumo, proiezione.months_covered, prezzo_kwh)
    df = pd.DataFrame([
        {
            "Mese": r["nome"],
            "Consumo": format_kwh(r["consumo_kwh"]),
            "Spesa": format_currency(r["costo_eur"]),
            "Peso ARERA": f"{r['peso_pct']:.1f}%",
            "Dato": "Reale" if r["coperto"] else "Stimato",
        }
        for r in righe
    ])
    st.dataframe(df, hide_index=True, use_container_width=True)

    confronto = confronto_media_italiana(consumo)
    st.subheader("Confronto con la media italiana")
    st.write(confronto["giudizio"])
    st.metric(
        label="Media italiana",
        value=format_kwh(confronto["media_italiana_kwh"]),
        delta=f"{confronto['differenza_pct']:+d}%",
        delta_color="inverse",
    )
    for nucleo, valore in MEDIA_ITALIANA_PER_NUCLEO.items():
        evidenza = " ⬅️" if nucleo == confronto["nucleo_piu_vicino"] else ""
        st.write(f"- {nucleo}: {format_kwh(valore)} ({format_currency(valore * prezzo_kwh)}){evidenza}")
    st.caption("Fonte: ARERA - Dati 2023 per utenze domestiche residenti con potenza 3 kW")
