"""
Componenti UI riutilizzabili per l'analisi delle bollette.

Questo modulo contiene componenti Streamlit, grafici plotly e validatori
dei dati inseriti a mano.
"""

from .ui_components import (
    render_proiezione,
    render_spiegazione_arera,
    render_nessun_dato,
    format_currency,
    format_kwh,
    format_percentage,
)

from .grafici import crea_grafico_mensile

from .validators import (
    validate_consumo,
    validate_potenza,
    validate_prezzo_kwh,
    validate_data,
    validate_periodo,
    validate_pod,
    ValidationError
)

__all__ = [
    # UI Components
    'render_proiezione',
    'render_spiegazione_arera',
    'render_nessun_dato',
    'format_currency',
    'format_kwh',
    'format_percentage',

    # Grafici
    'crea_grafico_mensile',

    # Validators
    'validate_consumo',
    'validate_potenza',
    'validate_prezzo_kwh',
    'validate_data',
    'validate_periodo',
    'validate_pod',
    'ValidationError'
]
