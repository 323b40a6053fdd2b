"""Persistence for user-defined sequence-to-character mappings."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Union

from .errors import MorseKeyError

logger = logging.getLogger(__name__)

VALID_SYMBOLS = frozenset(".-")


class MappingStore:
    """Key-value store holding the custom table as sequence -> character."""

    def load(self) -> Dict[str, str]:
        """Return the persisted mapping."""
        raise NotImplementedError

    def save(self, mapping: Dict[str, str]) -> None:
        """Persist the full mapping, replacing the previous contents."""
        raise NotImplementedError


class MemoryMappingStore(MappingStore):
    """In-process store, used for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self.save_count = 0

    def load(self) -> Dict[str, str]:
        return dict(self._data)

    def save(self, mapping: Dict[str, str]) -> None:
        self._data = dict(mapping)
        self.save_count += 1


class JsonMappingStore(MappingStore):
    """
    Store backed by a JSON object file.

    Writes are synchronous and go through a temporary file that replaces the
    target, so a reader never sees a partially written file.
    """

    def __init__(self, path: Union[str, Path]):
        """
        Initialize JSON store.

        Args:
            path: Location of the JSON file, created on first save
        """
        self.path = Path(path).expanduser()

    def load(self) -> Dict[str, str]:
        """
        Read the mapping from disk.

        A missing file is an empty mapping. Entries whose key is not a
        dot/dash string or whose value is not a single character are skipped.

        Raises:
            MorseKeyError: If the file exists but is not a JSON object
        """
        if not self.path.exists():
            return {}

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise MorseKeyError(f"Cannot read custom mappings from {self.path}: {e}") from e

        if not isinstance(raw, dict):
            raise MorseKeyError(f"Custom mapping file {self.path} must contain a JSON object")

        mapping: Dict[str, str] = {}
        for sequence, character in raw.items():
            if not sequence or not set(sequence) <= VALID_SYMBOLS:
                logger.warning(f"Skipping persisted mapping with invalid sequence {sequence!r}")
                continue
            if not isinstance(character, str) or len(character) != 1:
                logger.warning(f"Skipping persisted mapping {sequence!r} -> {character!r}")
                continue
            mapping[sequence] = character

        logger.debug(f"Loaded {len(mapping)} custom mappings from {self.path}")
        return mapping

    def save(self, mapping: Dict[str, str]) -> None:
        """Write the mapping to disk, replacing the file atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=self.path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(mapping, f, indent=2, ensure_ascii=False, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.debug(f"Saved {len(mapping)} custom mappings to {self.path}")
