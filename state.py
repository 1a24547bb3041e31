from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from typing import Iterable, List

from logs import log_event

logger = logging.getLogger(__name__)


class Ledger:
    """Append-only record of article ids that were published.

    The in-memory list is the single owner of the state; every record()
    rewrites the whole JSON array through a temp file and os.replace.
    """

    def __init__(self, path: str, article_ids: Iterable[str] = ()):
        self.path = path
        self._ids: List[str] = []
        self._index = set()
        self._lock = threading.Lock()
        for article_id in article_ids:
            self._add(article_id)

    @classmethod
    def load(cls, path: str) -> "Ledger":
        if not os.path.exists(path):
            return cls(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            log_event(logger, logging.ERROR, "ledger_load_failed", path=path, error=repr(exc))
            return cls(path)
        if not isinstance(data, list):
            log_event(logger, logging.ERROR, "ledger_load_failed", path=path, error="not_a_json_array")
            return cls(path)
        return cls(path, (v for v in data if isinstance(v, str)))

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, article_id: object) -> bool:
        return article_id in self._index

    def contains(self, article_id: str) -> bool:
        return article_id in self._index

    def ids(self) -> List[str]:
        return list(self._ids)

    def _add(self, article_id: str) -> bool:
        if article_id in self._index:
            return False
        self._index.add(article_id)
        self._ids.append(article_id)
        return True

    def record(self, article_id: str) -> bool:
        """Add article_id and persist. Returns False when the write failed."""
        with self._lock:
            self._add(article_id)
            try:
                self._save()
            except OSError as exc:
                log_event(logger, logging.ERROR, "ledger_save_failed", path=self.path, article_id=article_id, error=repr(exc))
                return False
        return True

    def _save(self) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".ledger-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._ids, f, indent=2)
                f.write("\n")
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
