from __future__ import annotations

import datetime
import json
import logging
import os
import tempfile
import threading
import uuid
from dataclasses import asdict
from pathlib import Path
from typing import Any

from .models import AnswerData, AppSettings, HistoryItem


logger = logging.getLogger(__name__)

HISTORY_FILE = "history.json"
SETTINGS_FILE = "settings.json"


# Every Streamlit session runs in the same process and shares one history file.
_write_lock = threading.Lock()


def _write_json(path: Path, payload: Any) -> None:
    """Write to a sibling temp file, then swap it in so readers never see a partial file."""

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=path.name, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


def _parse_history(raw: Any) -> list[HistoryItem]:
    if not isinstance(raw, list):
        raise ValueError(f"expected a list of entries, got {type(raw).__name__}")
    items = []
    for entry in raw:
        if not isinstance(entry, dict) or not isinstance(entry.get("data"), dict):
            raise ValueError(f"malformed history entry: {entry!r}")
        items.append(HistoryItem.from_dict(entry))
    return items


class HistoryStore:
    """Past study guides, most recent first, persisted as JSON on every change.

    The file is the source of truth: `add` re-reads it under a lock before
    writing, so concurrent sessions never drop each other's entries.
    """

    def __init__(self, data_dir: str | Path):
        self.path = Path(data_dir) / HISTORY_FILE
        self.items: list[HistoryItem] = []

    def load(self) -> list[HistoryItem]:
        self.items = self._read()
        return self.items

    def _read(self) -> list[HistoryItem]:
        if not self.path.exists():
            return []
        try:
            return _parse_history(json.loads(self.path.read_text(encoding="utf-8")))
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error("Failed to parse history at %s: %s", self.path, e)
            return []

    def save(self) -> None:
        _write_json(self.path, [item.to_dict() for item in self.items])

    def add(self, file_name: str, data: AnswerData) -> HistoryItem:
        item = HistoryItem(
            id=uuid.uuid4().hex,
            file_name=file_name,
            date=datetime.date.today().isoformat(),
            data=data,
        )
        with _write_lock:
            stored = self._read()
            self.items = [item] + [i for i in stored if i.id != item.id]
            self.save()
        return item

    def get(self, item_id: str) -> HistoryItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def clear(self) -> None:
        with _write_lock:
            self.items = []
            self.path.unlink(missing_ok=True)

    def __len__(self) -> int:
        return len(self.items)


def load_settings(data_dir: str | Path) -> AppSettings:
    path = Path(data_dir) / SETTINGS_FILE
    if not path.exists():
        return AppSettings()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as e:
        logger.warning("Ignoring unreadable settings at %s: %s", path, e)
        return AppSettings()
    if not isinstance(raw, dict):
        return AppSettings()
    return AppSettings.from_dict(raw)


def save_settings(data_dir: str | Path, settings: AppSettings) -> None:
    _write_json(Path(data_dir) / SETTINGS_FILE, asdict(settings))
