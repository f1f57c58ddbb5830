"""
Test per modulo ripartizione_mensile.py

Testa ripartizione mensile, riepilogo di spesa e confronto con la media italiana.
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from modules.ripartizione_mensile import (
    MEDIA_ITALIANA_KWH,
    confronto_media_italiana,
    riepilogo_consumi,
    ripartizione_dataframe,
    ripartizione_mensile,
)


class TestRipartizioneMensile:
    """Test ripartizione_mensile."""

    def test_dodici_righe(self):
        """Una riga per mese da Gennaio a Dicembre."""
        righe = ripartizione_mensile(10000)
        assert [r["mese"] for r in righe] == list(range(1, 13))
        assert righe[0]["nome"] == "Gennaio"
        assert righe[11]["etichetta"] == "Dic"

    def test_consumi_da_profilo(self):
        """Consumo mensile = annuo × peso ARERA."""
        righe = ripartizione_mensile(10000)
        assert righe[0]["consumo_kwh"] == 920
        assert righe[4]["consumo_kwh"] == 700
        assert righe[11]["consumo_kwh"] == 1000
        assert sum(r["consumo_kwh"] for r in righe) == 10000

    def test_costo_e_peso(self):
        """Spesa al prezzo indicato e peso in percentuale."""
        righe = ripartizione_mensile(10000, prezzo_kwh=0.25)
        assert righe[0]["costo_eur"] == 230.0
        assert righe[0]["peso_pct"] == 9.2

    def test_mesi_coperti(self):
        """I mesi con dati reali sono marcati."""
        righe = ripartizione_mensile(13043, mesi_coperti=(1,))
        assert righe[0]["coperto"] is True
        assert not any(r["coperto"] for r in righe[1:])

    def test_consumo_assente(self):
        """None equivale a zero."""
        righe = ripartizione_mensile(None)
        assert all(r["consumo_kwh"] == 0 and r["costo_eur"] == 0 for r in righe)

    def test_dataframe(self):
        """DataFrame indicizzato per mese."""
        df = ripartizione_dataframe(10000, (12, 1))
        assert list(df.index) == list(range(1, 13))
        assert df.loc[12, "consumo_kwh"] == 1000
        assert bool(df.loc[1, "coperto"]) is True
        assert {"nome", "etichetta", "costo_eur", "peso_pct"} <= set(df.columns)


class TestRiepilogo:
    """Test riepilogo_consumi."""

    def test_media_mensile(self):
        """2700 kWh: 225 kWh al mese."""
        riepilogo = riepilogo_consumi(2700, 0.25)
        assert riepilogo["media_mensile_kwh"] == 225
        assert riepilogo["media_mensile_eur"] == 56.25
        assert riepilogo["spesa_annua_eur"] == 675

    def test_nessun_consumo(self):
        """Consumo assente: tutto zero."""
        assert riepilogo_consumi(None) == {"media_mensile_kwh": 0, "media_mensile_eur": 0.0, "spesa_annua_eur": 0}


class TestConfrontoMedia:
    """Test confronto_media_italiana."""

    def test_in_linea(self):
        """Consumo pari alla media."""
        confronto = confronto_media_italiana(MEDIA_ITALIANA_KWH)
        assert confronto["differenza_kwh"] == 0
        assert confronto["differenza_pct"] == 0
        assert confronto["giudizio"].startswith("In linea")
        assert confronto["nucleo_piu_vicino"] == "3 persone"

    def test_sotto_media(self):
        """1800 kWh: ottimo, vicino a una persona."""
        confronto = confronto_media_italiana(1800)
        assert confronto["differenza_kwh"] == -900
        assert confronto["differenza_pct"] == -33
        assert confronto["giudizio"].startswith("Ottimo")
        assert confronto["nucleo_piu_vicino"] == "1 persona"

    def test_leggermente_sotto(self):
        """Poco sotto la media."""
        assert confronto_media_italiana(2600)["giudizio"].startswith("Bene")

    def test_sopra_media(self):
        """3000 kWh: un po' sopra."""
        confronto = confronto_media_italiana(3000)
        assert confronto["differenza_pct"] == 11
        assert confronto["giudizio"].startswith("Consumi un po'")

    def test_molto_sopra(self):
        """3500 kWh: nessun nucleo entro 300 kWh."""
        confronto = confronto_media_italiana(3500)
        assert confronto["differenza_pct"] == 30
        assert "significativamente" in confronto["giudizio"]
        assert confronto["nucleo_piu_vicino"] is None

    def test_nessun_consumo(self):
        """Consumo assente."""
        confronto = confronto_media_italiana(None)
        assert confronto["differenza_pct"] == 0
        assert confronto["nucleo_piu_vicino"] is None
