"""
Test per modulo proiezione_gas.py

Testa la scelta del profilo stagionale e le regole di proiezione del gas.
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import json

import pytest

from modules import proiezione_gas
from modules.proiezione_consumi import Confidenza, MetodoProiezione, ProiezioneAnnua
from modules.proiezione_gas import (
    GAS_PROFILE_COLD,
    GAS_PROFILE_TEMPERATE,
    GAS_PROFILE_WARM,
    calculate_gas_annual_projection,
    get_profilo_gas,
)


def proietta_gas(period=None, inizio=None, fine=None, storico=None,
                 storico_inizio=None, storico_fine=None, zona=None):
    return calculate_gas_annual_projection(
        period, inizio, fine, storico, storico_inizio, storico_fine, zona
    )


class TestProfiloGas:
    """Test selezione del profilo per zona climatica."""

    def test_senza_zona(self):
        """Zona ignota: profilo freddo di default."""
        assert get_profilo_gas(None) == ("Profile(Default-Cold)", GAS_PROFILE_COLD)
        assert get_profilo_gas("") == ("Profile(Default-Cold)", GAS_PROFILE_COLD)

    @pytest.mark.parametrize("zona", ["E", "F", "Zona E", "Nord"])
    def test_zone_fredde(self, zona):
        """Nord e zone E-F."""
        nome, profilo = get_profilo_gas(zona)
        assert profilo is GAS_PROFILE_COLD
        assert nome == f"Profile({zona})"

    @pytest.mark.parametrize("zona", ["D", "Zona D", "Centro", "TEMPERATO"])
    def test_zone_temperate(self, zona):
        """Centro e zona D."""
        assert get_profilo_gas(zona)[1] is GAS_PROFILE_TEMPERATE

    @pytest.mark.parametrize("zona", ["A", "b", "Zona C", "Sud", "Isole", "CALDO"])
    def test_zone_calde(self, zona):
        """Sud, Isole e zone A-B-C."""
        assert get_profilo_gas(zona)[1] is GAS_PROFILE_WARM

    def test_profili_dodici_mesi(self):
        """Ogni profilo copre tutti i mesi con pesi positivi."""
        for profilo in (GAS_PROFILE_COLD, GAS_PROFILE_TEMPERATE, GAS_PROFILE_WARM):
            assert sorted(profilo) == list(range(1, 13))
            assert all(peso > 0 for peso in profilo.values())

    def test_inverno_domina(self):
        """Gennaio pesa più di Luglio in ogni profilo."""
        for profilo in (GAS_PROFILE_COLD, GAS_PROFILE_TEMPERATE, GAS_PROFILE_WARM):
            assert profilo[1] > profilo[7]


class TestProiezioneStagionale:
    """Test regola seasonal_projection."""

    def test_gennaio_freddo(self):
        """190 Smc a Gennaio in zona fredda: 190 / 0.19."""
        r = proietta_gas(period=190, inizio="2024-01-01", fine="2024-01-31", zona="E")
        assert r.method == MetodoProiezione.SEASONAL_PROJECTION
        assert r.annual_projection == 1000
        assert r.months_covered == (1,)
        assert r.confidence == Confidenza.MEDIA
        assert r.details.nome_profilo == "Profile(E)"

    def test_inverno_alta_confidenza(self):
        """Novembre-Febbraio pesano più del 40%."""
        r = proietta_gas(period=660, inizio="2023-11-01", fine="2024-02-29", zona="E")
        assert r.months_covered == (11, 12, 1, 2)
        assert r.total_weight == pytest.approx(0.66)
        assert r.annual_projection == 1000
        assert r.confidence == Confidenza.ALTA

    def test_estate_bassa_confidenza(self):
        """Agosto pesa meno del 10%."""
        r = proietta_gas(period=10, inizio="2024-08-01", fine="2024-08-31")
        assert r.annual_projection == 1000
        assert r.confidence == Confidenza.BASSA

    def test_zona_cambia_risultato(self):
        """Stesso consumo, zona diversa, proiezione diversa."""
        fredda = proietta_gas(period=100, inizio="2024-01-01", fine="2024-01-31", zona="E")
        calda = proietta_gas(period=100, inizio="2024-01-01", fine="2024-01-31", zona="Sud")
        assert calda.annual_projection > fredda.annual_projection


class TestStoricoGas:
    """Test regole sullo storico."""

    def test_storico_completo(self):
        """Storico su 12 mesi."""
        r = proietta_gas(storico=1200, storico_inizio="2023-01-01", storico_fine="2023-12-31", zona="E")
        assert r.method == MetodoProiezione.HISTORICAL_COMPLETE
        assert r.annual_projection == 1200
        assert r.confidence == Confidenza.ALTA

    def test_storico_parziale(self):
        """600 Smc su Gennaio-Giugno in zona temperata."""
        r = proietta_gas(storico=600, storico_inizio="2023-01-01", storico_fine="2023-06-30", zona="D")
        assert r.method == MetodoProiezione.HISTORICAL_PARTIAL
        assert r.total_weight == pytest.approx(0.57)
        assert r.annual_projection == 1053
        assert r.details.projected_addition == 453
        assert r.months_projected == (7, 8, 9, 10, 11, 12)
        assert r.confidence == Confidenza.MEDIA

    def test_storico_poco_rappresentativo(self, monkeypatch):
        """Peso dei mesi storici sotto il 5%: si tiene il dato dichiarato."""
        monkeypatch.setattr(proiezione_gas, "get_peso_profilo", lambda mesi, profilo=None: 0.01)
        r = proietta_gas(storico=80, storico_inizio="2023-03-01", storico_fine="2023-09-30")
        assert r.method == MetodoProiezione.HISTORICAL_PARTIAL
        assert r.annual_projection == 80
        assert r.months_projected == ()
        assert r.confidence == Confidenza.BASSA


class TestDirettaGas:
    """Test regola direct e casi limite."""

    def test_senza_date(self):
        """50 Smc senza date: × 12 con profilo piatto."""
        r = proietta_gas(period=50)
        assert r.method == MetodoProiezione.DIRECT
        assert r.annual_projection == 600
        assert r.details.nome_profilo == "Flat (Fallback)"

    def test_nessun_dato(self):
        """Nessun consumo: None."""
        assert proietta_gas(zona="E") is None

    def test_valori_estremi(self):
        """Consumi non finiti o in overflow non sollevano eccezioni."""
        assert proietta_gas(period=float("inf")) is None
        assert proietta_gas(period=1e308) is None
        assert proietta_gas(period=1e308, inizio="2024-08-01", fine="2024-08-31") is None
        r = proietta_gas(period=1200, inizio="2024-01-01", fine="2024-01-31",
                         storico=1.7e308, storico_inizio="2023-03-01", storico_fine="2023-09-30")
        assert r.method == MetodoProiezione.SEASONAL_PROJECTION

    def test_anno_massimo(self):
        """Date nell'ultimo anno rappresentabile."""
        r = proietta_gas(period=180, inizio="9999-12-01", fine="9999-12-31", zona="E")
        assert r.months_covered == (12,)
        assert r.annual_projection == 1000


class TestSerializzazioneGas:
    """Test forma persistita."""

    def test_profilo_stagionale(self):
        """projection_details riporta profilo stagionale e nome."""
        r = proietta_gas(period=190, inizio="2024-01-01", fine="2024-01-31", zona="E")
        dettagli = r.to_projection_details()
        assert dettagli["profile_used"] == "Profile(E)"
        assert dettagli["seasonal_profile"]["1"] == 0.19
        assert "arera_profile" not in dettagli

    def test_ritorno_da_json(self):
        """Dopo un passaggio in JSON il risultato è identico."""
        r = proietta_gas(storico=600, storico_inizio="2023-01-01", storico_fine="2023-06-30", zona="D")
        riletto = ProiezioneAnnua.from_dict(json.loads(json.dumps(r.to_dict())))
        assert riletto == r
