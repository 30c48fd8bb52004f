"""Client-side learning state kept as JSON text under fixed keys.

The browser app keeps everything in local storage; here the same data lives
behind a small key-value interface so it can sit in memory (tests), in a
JSON file on disk, or anywhere else that stores strings.
"""
import json
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from log import get_logger

logger = get_logger("englearn.storage")

FLASHCARDS_KEY = "flashcards"
READING_HISTORY_KEY = "readingHistory"
TEST_HISTORY_KEY = "testHistory"
REPORT_HISTORY_KEY = "reportHistory"
READING_FAVORITES_KEY = "readingFavorites"
AI_CONFIG_KEY = "ai-config"

READING_HISTORY_MAX = 10
REPORT_HISTORY_MAX = 10
TEST_HISTORY_MAX = 20


def now_ms() -> int:
    return int(time.time() * 1000)


class KeyValueStore:
    """String-to-string storage, the shape of the browser's localStorage."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """Keeps every key in one JSON object on disk, rewritten on each change."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._data: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._data is None:
            self._data = {}
            if self.path.exists():
                try:
                    data = json.loads(self.path.read_text(encoding="utf-8"))
                    if isinstance(data, dict):
                        self._data = {k: v for k, v in data.items() if isinstance(v, str)}
                except (OSError, ValueError):
                    logger.exception("Failed to load store file", extra={"component": "storage"})
        return self._data

    def _save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._load(), ensure_ascii=False, indent=2), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        self._load()[key] = value
        self._save()

    def remove(self, key: str) -> None:
        if self._load().pop(key, None) is not None:
            self._save()


def read_json(store: KeyValueStore, key: str, default: Any) -> Any:
    """Decode the value under ``key``; fall back to ``default`` on anything odd.

    Missing keys, invalid JSON and values of a different type than the
    default (e.g. a legacy object where a list is expected) all yield the
    default.
    """
    raw = store.get(key)
    if not raw:
        return default
    try:
        value = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring unreadable stored value", extra={"component": "storage", "detail": key})
        return default
    if default is not None and not isinstance(value, type(default)):
        return default
    return value


def write_json(store: KeyValueStore, key: str, value: Any) -> None:
    store.set(key, json.dumps(value, ensure_ascii=False))


class LearningStore:
    """The learner's flashcards, histories, favorites and AI settings."""

    def __init__(self, store: Optional[KeyValueStore] = None):
        self.store = store if store is not None else MemoryStore()

    # --- Flashcards ---

    def flashcards(self) -> List[dict]:
        return read_json(self.store, FLASHCARDS_KEY, [])

    def save_flashcards(self, cards: List[dict]):
        write_json(self.store, FLASHCARDS_KEY, list(cards))

    # --- Reading ---

    def reading_history(self) -> List[dict]:
        return read_json(self.store, READING_HISTORY_KEY, [])

    def add_reading(self, reading: dict) -> dict:
        entry = dict(reading, timestamp=now_ms())
        history = [entry] + self.reading_history()
        write_json(self.store, READING_HISTORY_KEY, history[:READING_HISTORY_MAX])
        return entry

    def favorites(self) -> List[dict]:
        return [f for f in read_json(self.store, READING_FAVORITES_KEY, []) if isinstance(f, dict)]

    def is_favorite(self, reading: dict) -> bool:
        return any(f.get("english") == reading.get("english") for f in self.favorites())

    def toggle_favorite(self, reading: dict) -> bool:
        """Add or remove ``reading`` from favorites; return the new state."""
        favorites = self.favorites()
        if self.is_favorite(reading):
            favorites = [f for f in favorites if f.get("english") != reading.get("english")]
            write_json(self.store, READING_FAVORITES_KEY, favorites)
            return False
        favorites.append(dict(reading, savedAt=now_ms()))
        write_json(self.store, READING_FAVORITES_KEY, favorites)
        return True

    # --- Tests ---

    def test_history(self) -> List[dict]:
        return read_json(self.store, TEST_HISTORY_KEY, [])

    def add_test_result(self, result: dict):
        history = self.test_history() + [dict(result)]
        write_json(self.store, TEST_HISTORY_KEY, history[-TEST_HISTORY_MAX:])

    # --- Reports ---

    def report_history(self) -> List[dict]:
        return read_json(self.store, REPORT_HISTORY_KEY, [])

    def add_report(self, report: dict) -> dict:
        entry = dict(report, timestamp=now_ms())
        history = [entry] + self.report_history()
        write_json(self.store, REPORT_HISTORY_KEY, history[:REPORT_HISTORY_MAX])
        return entry

    def learning_data(self) -> dict:
        return {
            "flashcards": self.flashcards(),
            "readingHistory": self.reading_history(),
            "testHistory": self.test_history(),
        }

    def has_learning_data(self) -> bool:
        return any(self.learning_data().values())

    # --- AI settings ---

    def ai_config(self) -> Optional[dict]:
        """The saved AI settings, or None unless they carry an API key."""
        cfg = read_json(self.store, AI_CONFIG_KEY, {})
        return cfg if cfg.get("apiKey") else None

    def save_ai_config(self, api_key: str, base_url: str, model: str):
        write_json(self.store, AI_CONFIG_KEY, {"apiKey": api_key, "baseUrl": base_url, "model": model})

    def clear_ai_config(self):
        self.store.remove(AI_CONFIG_KEY)
