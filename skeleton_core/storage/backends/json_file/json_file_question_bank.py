"""
JSON file question bank.

All entries live in a single JSON array. Reads and writes are serialized by a
lock and writes replace the file atomically, so a crash mid-write never leaves
a truncated bank behind.
"""

import json
import logging
import os
import random
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from skeleton_core.model.sentence_analysis import DifficultyLevel, SentenceAnalysisArtifact
from skeleton_core.storage.interfaces.question_bank_interface import (
    DEFAULT_ENTRY_LEVEL,
    QuestionBankInterface,
)


class JsonFileQuestionBank(QuestionBankInterface):
    """JSON file-based implementation of the QuestionBankInterface."""

    def __init__(self, path: Union[str, Path] = "./questions/bank.json", pretty_print: bool = True):
        """
        Initialize the question bank.

        Args:
            path: Path of the JSON file; created with an empty list if missing
            pretty_print: Whether to format the JSON file for readability
        """
        self.path = Path(path)
        self.pretty_print = pretty_print
        self.logger = logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._ensure_file()

    def _ensure_file(self):
        with self._lock:
            if self.path.exists():
                return
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._write([])
            self.logger.info(f"Created question bank at {self.path}")

    def _read(self) -> List[Dict[str, Any]]:
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"Question bank {self.path} does not contain a JSON array")
        return data

    def _write(self, entries: List[Dict[str, Any]]):
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".bank-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(entries, f, ensure_ascii=False, indent=2 if self.pretty_print else None)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    @staticmethod
    def _entry_level(entry: Dict[str, Any]) -> str:
        return entry.get("level") or DEFAULT_ENTRY_LEVEL.value

    def _filter(self, entries: List[Dict[str, Any]], level) -> List[Dict[str, Any]]:
        if level is None:
            return entries
        wanted = DifficultyLevel.parse(level).value
        return [e for e in entries if self._entry_level(e) == wanted]

    def save(self, artifact: SentenceAnalysisArtifact) -> int:
        with self._lock:
            entries = self._read()
            if any(e.get("originalSentence") == artifact.original_sentence for e in entries):
                self.logger.debug(f"Question already exists: {artifact.original_sentence}")
                return len(entries)

            entries.append(artifact.to_dict())
            self._write(entries)

        self.logger.info(f"Question saved, bank size {len(entries)}")
        return len(entries)

    def get_random(self, level=None, exclude_sentence: Optional[str] = None) -> Optional[SentenceAnalysisArtifact]:
        with self._lock:
            entries = self._read()

        candidates = self._filter(entries, level)
        if exclude_sentence:
            candidates = [e for e in candidates if e.get("originalSentence") != exclude_sentence]
        if not candidates:
            return None

        return SentenceAnalysisArtifact.from_dict(random.choice(candidates))

    def size(self, level=None) -> int:
        with self._lock:
            entries = self._read()
        return len(self._filter(entries, level))
