"""Helpers for loading rule documents and caching checked rule sets from disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Tuple, Union

from .document import parse_game_rules
from .errors import DocumentFormatError, RuleNotFoundError
from .rules import CheckedGameRules, UncheckedGameRules

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_from_bytes(data: Union[str, bytes, bytearray]) -> UncheckedGameRules:
    """Parse a rule document held in memory."""

    return UncheckedGameRules(parse_game_rules(data))


def load_from_path(path: PathLike) -> UncheckedGameRules:
    """Read and parse a rule document from disk."""

    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise DocumentFormatError(f"Cannot read rule document '{path}': {exc}") from exc
    try:
        return load_from_bytes(data)
    except DocumentFormatError as exc:
        raise DocumentFormatError(f"{path}: {exc}") from exc


def load_checked(path: PathLike) -> CheckedGameRules:
    return load_from_path(path).check()


class RuleRepository:
    """In-memory registry of checked rule sets keyed by name, with mtime caching."""

    def __init__(self) -> None:
        self._rules: Dict[str, CheckedGameRules] = {}
        self._sources: Dict[Path, Tuple[int, str]] = {}

    # ------------------------------------------------------------------ loading
    def load_from_json(self, path: PathLike, *, force: bool = False) -> CheckedGameRules:
        """Load and check one document, skipping the work if the file is unchanged."""

        path = Path(path)
        try:
            current_timestamp = path.stat().st_mtime_ns
        except OSError as exc:
            raise DocumentFormatError(f"Cannot read rule document '{path}': {exc}") from exc
        cached = self._sources.get(path)
        if not force and cached is not None and cached[0] >= current_timestamp:
            return self._rules[cached[1]]
        rules = load_checked(path)
        if cached is not None and cached[1] != rules.name:
            self._rules.pop(cached[1], None)
        self._rules[rules.name] = rules
        self._sources[path] = (current_timestamp, rules.name)
        logger.info("Loaded rule set %r from %s", rules.name, path)
        return rules

    def load_directory(self, directory: PathLike, *, force: bool = False) -> List[str]:
        """Load every ``*.json`` document in ``directory`` in name order."""

        directory = Path(directory)
        if not directory.is_dir():
            raise DocumentFormatError(f"Rule directory '{directory}' does not exist")
        loaded = []
        for path in sorted(directory.glob("*.json")):
            loaded.append(self.load_from_json(path, force=force).name)
        return loaded

    def register(self, rules: CheckedGameRules) -> None:
        self._rules[rules.name] = rules

    # ------------------------------------------------------------------- access
    def get(self, name: str) -> CheckedGameRules:
        try:
            return self._rules[name]
        except KeyError as exc:
            raise RuleNotFoundError(name) from exc

    def names(self) -> List[str]:
        return sorted(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __len__(self) -> int:
        return len(self._rules)


__all__ = ["RuleRepository", "load_checked", "load_from_bytes", "load_from_path"]
