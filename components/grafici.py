"""
Grafici plotly per la proiezione dei consumi.

Le barre seguono il profilo ARERA: i mesi coperti da dati reali sono
evidenziati rispetto ai mesi stimati.
"""

from typing import Iterable, Optional, Union

import plotly.graph_objects as go

from modules.proiezione_consumi import ProiezioneAnnua
from modules.ripartizione_mensile import PREZZO_KWH_DEFAULT, ripartizione_dataframe

COLORE_COPERTO = "#2E7D32"
COLORE_STIMATO = "#A5D6A7"


def crea_grafico_mensile(
    proiezione: Union[ProiezioneAnnua, float, None],
    mesi_coperti: Optional[Iterable[int]] = None,
    prezzo_kwh: float = PREZZO_KWH_DEFAULT,
    titolo: str = "Consumo mensile stimato (profilo ARERA)",
) -> go.Figure:
    """
    Crea il grafico a barre del consumo mensile.

    Args:
        proiezione: ProiezioneAnnua oppure consumo annuo in kWh
        mesi_coperti: Mesi con dati reali (se proiezione è un numero)
        prezzo_kwh: Prezzo per il tooltip di spesa
        titolo: Titolo del grafico

    Returns:
        Figura plotly con una barra per mese
    """
    if isinstance(proiezione, ProiezioneAnnua):
        consumo_annuo = proiezione.annual_projection
        mesi_coperti = proiezione.months_covered
    else:
        consumo_annuo = proiezione

    df = ripartizione_dataframe(consumo_annuo, mesi_coperti or (), prezzo_kwh)
    colori = [COLORE_COPERTO if coperto else COLORE_STIMATO for coperto in df["coperto"]]

    fig = go.Figure(go.Bar(
        x=df["etichetta"],
        y=df["consumo_kwh"],
        marker_color=colori,
        customdata=df[["costo_eur", "peso_pct"]].to_numpy(),
        hovertemplate=(
            "<b>%{x}</b><br>%{y} kWh<br>"
            "Spesa: %{customdata[0]:.2f} €<br>"
            "Peso ARERA: %{customdata[1]:.1f}%<extra></extra>"
        ),
    ))
    fig.update_layout(
        title=titolo,
        xaxis_title="Mese",
        yaxis_title="kWh",
        showlegend=False,
        height=350,
    )
    return fig
