"""
Test per modulo normalizzatore_bolletta.py

Testa l'estrazione del JSON dalla risposta del modello e la
normalizzazione dei campi in formato italiano.
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from datetime import date, datetime

from modules.normalizzatore_bolletta import (
    DatiBolletta,
    ErroreEstrazioneBolletta,
    estrai_json_da_risposta,
    normalizza_consumo,
    normalizza_consumo_annuo,
    normalizza_dati_gas,
    normalizza_dati_luce,
    normalizza_data,
    normalizza_pdr,
    normalizza_pod,
    normalizza_potenza,
    normalizza_prezzo,
    normalizza_tariffa,
    normalizza_testo,
    parse_numero_italiano,
)


class TestEstrazioneJson:
    """Test estrai_json_da_risposta."""

    def test_blocco_markdown(self):
        """JSON dentro un blocco ```json."""
        risposta = '```json\n{"period_consumption": "1.200"}\n```'
        assert estrai_json_da_risposta(risposta) == {"period_consumption": "1.200"}

    def test_testo_attorno(self):
        """Testo prima e dopo l'oggetto."""
        risposta = 'Ecco i dati estratti: {"pod": "IT001E12345678"} Fine.'
        assert estrai_json_da_risposta(risposta) == {"pod": "IT001E12345678"}

    def test_dizionario(self):
        """Un dizionario passa invariato."""
        assert estrai_json_da_risposta({"a": 1}) == {"a": 1}

    def test_json_non_valido(self):
        """JSON malformato."""
        with pytest.raises(ErroreEstrazioneBolletta):
            estrai_json_da_risposta('{"period_consumption": }')

    def test_non_oggetto(self):
        """Una lista non è un oggetto."""
        with pytest.raises(ErroreEstrazioneBolletta):
            estrai_json_da_risposta("[1, 2, 3]")

    def test_vuota(self):
        """Risposta vuota."""
        with pytest.raises(ErroreEstrazioneBolletta):
            estrai_json_da_risposta("")

    def test_errore_e_value_error(self):
        """L'errore è un ValueError."""
        assert issubclass(ErroreEstrazioneBolletta, ValueError)


class TestNumeriItaliani:
    """Test parse_numero_italiano."""

    @pytest.mark.parametrize("valore,atteso", [
        ("1.234,56", 1234.56),
        ("850 kWh", 850.0),
        ("1.200", 1200.0),
        ("2.700,5 kWh", 2700.5),
        (42, 42.0),
        (3.5, 3.5),
    ])
    def test_conversione(self, valore, atteso):
        """Formati comuni in bolletta."""
        assert parse_numero_italiano(valore) == pytest.approx(atteso)

    @pytest.mark.parametrize("valore", [None, "abc", "", True, [1], float("nan"), float("inf")])
    def test_non_interpretabile(self, valore):
        """Valori non numerici."""
        assert parse_numero_italiano(valore) is None

    def test_segno_negativo(self):
        """Il segno è conservato e il consumo negativo scartato."""
        assert parse_numero_italiano("-850 kWh") == -850.0
        assert normalizza_consumo("-850 kWh") is None

    def test_senza_separatore_migliaia(self):
        """Solo la virgola è convertita."""
        assert parse_numero_italiano("3,3", separatore_migliaia=False) == pytest.approx(3.3)
        assert parse_numero_italiano("4.5 kW", separatore_migliaia=False) == pytest.approx(4.5)
        assert parse_numero_italiano("0,245 €/kWh", separatore_migliaia=False) == pytest.approx(0.245)


class TestDate:
    """Test normalizza_data."""

    @pytest.mark.parametrize("valore", [
        "2024-01-31", "31/01/2024", "31-01-2024", "31.01.2024", "2024-01-31T00:00:00Z", " 31/01/2024 ",
    ])
    def test_formati(self, valore):
        """Formati ISO ed europei."""
        assert normalizza_data(valore) == date(2024, 1, 31)

    def test_giorno_mese_singola_cifra(self):
        """1/2/2024 è il primo febbraio."""
        assert normalizza_data("1/2/2024") == date(2024, 2, 1)

    def test_oggetti_data(self):
        """date e datetime."""
        assert normalizza_data(date(2024, 3, 1)) == date(2024, 3, 1)
        assert normalizza_data(datetime(2024, 3, 1, 12, 30)) == date(2024, 3, 1)

    @pytest.mark.parametrize("valore", ["31/02/2024", "2024-13-01", "gennaio 2024", "", None, 20240131])
    def test_non_valide(self, valore):
        """Date inesistenti o formati sconosciuti."""
        assert normalizza_data(valore) is None


class TestCampi:
    """Test normalizzazione dei singoli campi."""

    def test_consumo(self):
        """Consumo intero con arrotondamento metà verso l'alto."""
        assert normalizza_consumo("1.250") == 1250
        assert normalizza_consumo(320.5) == 321
        assert normalizza_consumo("320,4 kWh") == 320

    @pytest.mark.parametrize("valore", [0, "0", -5, "-5", 50000, "60.000", None])
    def test_consumo_fuori_range(self, valore):
        """Consumi nulli, negativi o eccessivi."""
        assert normalizza_consumo(valore) is None

    def test_consumo_annuo(self):
        """Storico a due decimali."""
        assert normalizza_consumo_annuo("2.700,456") == pytest.approx(2700.46)
        assert normalizza_consumo_annuo(100000) is None

    def test_pod(self):
        """POD senza spazi, maiuscolo."""
        assert normalizza_pod("it 001 e 12345678") == "IT001E12345678"
        assert normalizza_pod("IT001E123456789") == "IT001E123456789"

    @pytest.mark.parametrize("valore", ["FR001E12345678", "IT001", "IT001E1234567890", None, ""])
    def test_pod_non_valido(self, valore):
        """Prefisso o lunghezza errati."""
        assert normalizza_pod(valore) is None

    def test_pdr(self):
        """PDR di 14 cifre."""
        assert normalizza_pdr("0012 3456 7890 12") == "00123456789012"
        assert normalizza_pdr("123") is None
        assert normalizza_pdr("0012345678901A") is None

    def test_tariffa(self):
        """Tariffe ammesse."""
        assert normalizza_tariffa(" Biorario ") == "biorario"
        assert normalizza_tariffa("flat") is None
        assert normalizza_tariffa(2) is None

    def test_potenza(self):
        """Potenza a un decimale."""
        assert normalizza_potenza("3,3") == 3.3
        assert normalizza_potenza("4.5") == 4.5
        assert normalizza_potenza(150) is None
        assert normalizza_potenza(0) is None

    def test_prezzo(self):
        """Prezzo in €/kWh a tre decimali."""
        assert normalizza_prezzo("0,245") == 0.245
        assert normalizza_prezzo(1.2) is None
        assert normalizza_prezzo("24,5 c€") is None

    def test_testo(self):
        """Testo ripulito con lunghezza minima."""
        assert normalizza_testo(" Enel Energia ") == "Enel Energia"
        assert normalizza_testo("X") is None
        assert normalizza_testo("12", lunghezza_minima=3) is None
        assert normalizza_testo(123) is None


class TestNormalizzazioneCompleta:
    """Test normalizza_dati_luce e normalizza_dati_gas."""

    def test_luce(self):
        """Bolletta luce con campi misti."""
        dati = normalizza_dati_luce({
            "period_start": "01/01/2024",
            "period_end": "31/01/2024",
            "period_consumption": "1.200 kWh",
            "annual_consumption_reported": "2.700,50",
            "pod": "IT001E12345678",
            "supplier": "Enel Energia",
            "tariff_type": "Monorario",
            "power_kw": "3,0",
            "customer_code": "123456",
            "price_kwh": "0,231",
        })
        assert dati.period_start == date(2024, 1, 1)
        assert dati.period_end == date(2024, 1, 31)
        assert dati.period_consumption == 1200
        assert dati.annual_consumption_reported == 2700.5
        assert dati.tariff_type == "monorario"
        assert dati.power_kw == 3.0
        assert dati.price_kwh == 0.231

        serializzati = dati.to_dict()
        assert serializzati["period_start"] == "2024-01-01"
        assert serializzati["annual_period_start"] is None

    def test_luce_vuota(self):
        """Nessun campo: tutti None."""
        assert normalizza_dati_luce({}) == DatiBolletta()

    def test_luce_campi_non_validi(self):
        """Campi non validi diventano None senza bloccare gli altri."""
        dati = normalizza_dati_luce({"period_consumption": "n.d.", "period_start": "ieri", "pod": "IT001E12345678"})
        assert dati.period_consumption is None
        assert dati.period_start is None
        assert dati.pod == "IT001E12345678"

    def test_gas_nomi_specifici(self):
        """Chiavi _smc e climate_zone_inferred."""
        dati = normalizza_dati_gas({
            "period_consumption_smc": "190",
            "annual_consumption_reported_smc": "1.100",
            "pdr": "00123456789012",
            "municipality": "Milano",
            "climate_zone_inferred": "E",
        })
        assert dati.period_consumption == 190
        assert dati.annual_consumption_reported == 1100.0
        assert dati.climate_zone == "E"
        assert dati.to_dict()["pdr"] == "00123456789012"

    def test_gas_nomi_generici(self):
        """Chiavi generiche."""
        dati = normalizza_dati_gas({"period_consumption": 80, "climate_zone": "Sud"})
        assert dati.period_consumption == 80
        assert dati.climate_zone == "Sud"
