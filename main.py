#!/usr/bin/env python3
"""
Karica - Interfaccia CLI per l'analisi delle bollette

Legge la risposta del modello di estrazione (file JSON o testo con blocchi
markdown), normalizza i dati e stima il consumo annuo:
- Bollette luce: profilo ARERA utenze domestiche 3 kW
- Bollette gas: profili stagionali per zona climatica

Uso:
    python main.py risposta.json
    python main.py risposta.json --gas
    python main.py risposta.json --salva UTENTE --file-path bollette/gennaio.pdf
    python main.py risposta.json --json

Autore: Karica
Versione: 1.0.0
"""

import argparse
import json
import os
import sys
from pathlib import Path

# Aggiungi la directory corrente al path per gli import
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from modules.analisi_bolletta import analizza_bolletta_gas, analizza_bolletta_luce
from modules.archivio_bollette import ArchivioBollette
from modules.profilo_arera import ETICHETTE_MESI
from modules.proiezione_consumi import ProiezioneAnnua
from modules.ripartizione_mensile import DESCRIZIONI_METODO, ripartizione_mensile


VERSIONE = "1.0.0"


# ============================================================================
# FUNZIONI DI UTILITÀ CLI
# ============================================================================

def print_header():
    """Stampa l'intestazione del programma."""
    print("\n" + "=" * 70)
    print("  KARICA - ANALISI BOLLETTA v" + VERSIONE)
    print("  Stima del consumo annuo con profilo ARERA")
    print("=" * 70)


def _mesi(mesi) -> str:
    return ", ".join(ETICHETTE_MESI[m - 1] for m in mesi) or "-"


def stampa_risultato(ocr_data: dict, unita: str) -> None:
    """Stampa dati estratti e proiezione in forma leggibile."""
    print("\n[DATI BOLLETTA]")
    print("-" * 40)
    for campo in ("supplier", "pod", "pdr", "tariff_type", "power_kw", "price_kwh",
                  "period_start", "period_end", "period_consumption",
                  "annual_consumption_reported", "climate_zone"):
        if campo in ocr_data and ocr_data[campo] is not None:
            print(f"  {campo:<28} {ocr_data[campo]}")

    proiezione = ProiezioneAnnua.from_ocr_data(ocr_data)

    print("\n[PROIEZIONE ANNUA]")
    print("-" * 40)
    if proiezione is None:
        print("  Dati insufficienti: nessuna proiezione disponibile.")
        return

    print(f"  Consumo annuo stimato:  {proiezione.annual_projection:,} {unita}".replace(",", "."))
    print(f"  Metodo:                 {DESCRIZIONI_METODO.get(proiezione.method.value, proiezione.method.value)}")
    print(f"  Affidabilità:           {proiezione.confidence.value}")
    print(f"  Mesi reali:             {_mesi(proiezione.months_covered)}")
    print(f"  Mesi stimati:           {_mesi(proiezione.months_projected)}")
    print(f"  Peso mesi reali:        {proiezione.total_weight * 100:.1f}%")

    if unita == "kWh":
        print("\n[RIPARTIZIONE MENSILE]")
        print("-" * 40)
        for riga in ripartizione_mensile(proiezione.annual_projection, proiezione.months_covered):
            marcatore = "*" if riga["coperto"] else " "
            print(f"  {riga['etichetta']} {marcatore} {riga['consumo_kwh']:>6} kWh  {riga['costo_eur']:>8.2f} €")
        print("  (* = mese con dati reali)")


def crea_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analisi bolletta e stima del consumo annuo")
    parser.add_argument("risposta", type=Path, help="File con la risposta del modello di estrazione")
    parser.add_argument("--gas", action="store_true", help="Bolletta gas (default: luce)")
    parser.add_argument("--json", action="store_true", help="Stampa il documento ocr_data in JSON")
    parser.add_argument("--salva", metavar="USER_ID", help="Salva l'analisi nell'archivio per l'utente")
    parser.add_argument("--file-path", default="", help="Percorso della bolletta originale da registrare")
    parser.add_argument("--archivio", default=None, help="Directory dell'archivio (default: BOLLETTE_DIR)")
    return parser


def main(argv=None) -> int:
    """Funzione principale del programma."""
    args = crea_parser().parse_args(argv)

    try:
        contenuto = args.risposta.read_text(encoding="utf-8")
    except OSError as e:
        print(f"\n[!] Impossibile leggere {args.risposta}: {e}")
        return 1

    if args.gas:
        ocr_data = analizza_bolletta_gas(contenuto)
    else:
        ocr_data = analizza_bolletta_luce(contenuto)

    if args.json:
        print(json.dumps(ocr_data, indent=2, ensure_ascii=False))
    else:
        print_header()
        stampa_risultato(ocr_data, "Smc" if args.gas else "kWh")

    if args.salva:
        successo, messaggio, _analisi_id = ArchivioBollette(args.archivio).salva_analisi(
            args.salva, args.file_path, ocr_data
        )
        print(f"\n[{'OK' if successo else '!'}] {messaggio}")
        if not successo:
            return 1

    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\nProgramma interrotto dall'utente.")
        sys.exit(0)
