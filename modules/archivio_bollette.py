"""
Archivio locale delle analisi di bolletta su file JSON.

Ogni analisi è salvata come record {user_id, file_path, ocr_data, ...} in un
file dedicato e riletta senza trasformazioni: i campi della proiezione
(mesi come liste di interi, peso come float, metodo e confidenza come
stringhe) tornano identici a come sono stati scritti.

Permette di:
- Salvare l'analisi di una bolletta caricata
- Rileggere un'analisi per id
- Elencare le analisi di un utente
- Recuperare l'ultima proiezione annua di un utente
- Eliminare un'analisi

Versione: 1.0.0
"""

import json
import logging
import os
import re
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from modules.proiezione_consumi import ProiezioneAnnua

# Configurazione logging
logging.basicConfig(level=logging.INFO, format='%(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

DIRECTORY_DEFAULT = "data/bollette"
VERSIONE_RECORD = "1.0.0"


class ArchivioBollette:
    """Gestisce salvataggio e caricamento delle analisi di bolletta."""

    def __init__(self, base_dir: Optional[str] = None):
        """
        Inizializza l'archivio.

        Args:
            base_dir: Directory dei file JSON. Default: variabile d'ambiente
                BOLLETTE_DIR oppure data/bollette
        """
        self.base_dir = Path(base_dir or os.environ.get("BOLLETTE_DIR", DIRECTORY_DEFAULT))
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _sanitize_id(self, valore: str) -> str:
        """Rende un identificativo sicuro come nome di file."""
        return re.sub(r"[^a-zA-Z0-9.\-_]", "_", valore)[:100]

    def _get_path(self, analisi_id: str) -> Path:
        return self.base_dir / f"{self._sanitize_id(analisi_id)}.json"

    def salva_analisi(
        self,
        user_id: str,
        file_path: str,
        ocr_data: Mapping[str, Any],
    ) -> Tuple[bool, str, str]:
        """
        Salva l'analisi di una bolletta.

        Args:
            user_id: Utente proprietario della bolletta
            file_path: Percorso del file originale nello storage
            ocr_data: Documento prodotto da modules.analisi_bolletta

        Returns:
            (successo, messaggio, analisi_id)
        """
        if not user_id or not user_id.strip():
            return False, "Utente obbligatorio", ""

        adesso = datetime.now()
        analisi_id = f"{self._sanitize_id(user_id.strip())}_{adesso.strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"
        record = {
            "versione": VERSIONE_RECORD,
            "analisi_id": analisi_id,
            "user_id": user_id.strip(),
            "file_path": file_path,
            "data_creazione": adesso.isoformat(),
            "ocr_data": dict(ocr_data),
        }

        filepath = self._get_path(analisi_id)
        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(record, f, indent=2, ensure_ascii=False)
        except (OSError, TypeError) as e:
            logger.error(f"Errore salvataggio analisi {analisi_id}: {e}")
            return False, f"Errore salvataggio: {str(e)}", ""

        logger.info(f"Analisi salvata: {filepath.name}")
        return True, f"Analisi salvata: {filepath.name}", analisi_id

    def carica_analisi(self, analisi_id: str) -> Tuple[bool, Optional[Dict[str, Any]], str]:
        """
        Carica un'analisi salvata.

        Returns:
            (successo, record, messaggio)
        """
        filepath = self._get_path(analisi_id)
        if not filepath.exists():
            return False, None, f"Analisi non trovata: {analisi_id}"

        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                record = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"File analisi corrotto {filepath.name}: {e}")
            return False, None, f"Errore formato JSON: {str(e)}"
        except OSError as e:
            logger.error(f"Errore lettura {filepath.name}: {e}")
            return False, None, f"Errore caricamento: {str(e)}"

        return True, record, "Analisi caricata con successo"

    def lista_analisi(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Elenca le analisi salvate, più recenti prima.

        Args:
            user_id: Filtra per utente (opzionale)

        Returns:
            Record completi delle analisi
        """
        analisi = []

        for filepath in self.base_dir.glob("*.json"):
            try:
                with open(filepath, 'r', encoding='utf-8') as f:
                    record = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"File analisi ignorato {filepath.name}: {e}")
                continue

            if user_id is None or record.get("user_id") == user_id:
                analisi.append(record)

        analisi.sort(key=lambda r: (r.get("data_creazione", ""), r.get("analisi_id", "")), reverse=True)
        return analisi

    def ultima_proiezione(self, user_id: str) -> Optional[ProiezioneAnnua]:
        """Proiezione annua dell'analisi più recente dell'utente che ne ha una."""
        for record in self.lista_analisi(user_id):
            proiezione = ProiezioneAnnua.from_ocr_data(record.get("ocr_data") or {})
            if proiezione is not None:
                return proiezione
        return None

    def elimina_analisi(self, analisi_id: str) -> Tuple[bool, str]:
        """
        Elimina un'analisi.

        Returns:
            (successo, messaggio)
        """
        filepath = self._get_path(analisi_id)
        if not filepath.exists():
            return False, "Analisi non trovata"

        try:
            filepath.unlink()
        except OSError as e:
            logger.error(f"Errore eliminazione {filepath.name}: {e}")
            return False, f"Errore eliminazione: {str(e)}"

        return True, "Analisi eliminata"


def get_archivio_bollette() -> ArchivioBollette:
    """Istanza dell'archivio sulla directory configurata."""
    return ArchivioBollette()
