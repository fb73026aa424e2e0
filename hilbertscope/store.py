"""JSON-backed fingerprint corpus and spatial map metadata.

Both stores follow the same cycle: load the whole file, mutate in memory,
rewrite the whole file. A rewrite goes to a temporary sibling first and is
moved into place with ``os.replace``. The two files are independent, so an
interrupted ingest can leave a subject fingerprinted but not mapped (or the
reverse).
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from .errors import CorruptStoreError
from .fingerprint import Fingerprint

log = logging.getLogger(__name__)


def _read_json(path: Path) -> Any:
    """Parsed content of `path`, None if it does not exist."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except UnicodeDecodeError as exc:
        raise CorruptStoreError(path, f"not UTF-8 text ({exc.reason} at byte {exc.start})") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise CorruptStoreError(path, f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc


def _write_json_atomic(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
        os.replace(tmp, path)
    except BaseException:
        os.unlink(tmp)
        raise


class _JsonStore:
    def __init__(self, path: Path | str, strict: bool = False):
        self.path = Path(path)
        self.strict = strict

    def _recover(self, exc: CorruptStoreError):
        # non-strict: a damaged store reads as empty and is overwritten by the next persist
        if self.strict:
            raise exc
        log.warning("Ignoring unreadable store %s", exc)


class FingerprintStore(_JsonStore):
    """The labelled corpus, persisted as a JSON array of fingerprint records."""

    def load(self) -> list[Fingerprint]:
        try:
            raw = _read_json(self.path)
            if raw is None:
                return []
            if not isinstance(raw, list):
                raise CorruptStoreError(self.path, f"expected a JSON array, found {type(raw).__name__}")
            try:
                return [Fingerprint.from_dict(record) for record in raw]
            except CorruptStoreError as exc:
                raise CorruptStoreError(self.path, exc.reason) from exc
        except CorruptStoreError as exc:
            self._recover(exc)
            return []

    @staticmethod
    def contains(corpus: list[Fingerprint], subject_id: str, category: str) -> bool:
        return any(fp.subject_id == subject_id and fp.category == category for fp in corpus)

    def append(self, corpus: list[Fingerprint], fingerprint: Fingerprint) -> bool:
        """Append unless (subject_id, category) is already present. Returns True if appended."""
        if self.contains(corpus, fingerprint.subject_id, fingerprint.category):
            log.debug("Not appending duplicate %s/%s", fingerprint.category, fingerprint.subject_id)
            return False
        corpus.append(fingerprint)
        return True

    def persist(self, corpus: list[Fingerprint]) -> None:
        _write_json_atomic(self.path, [fp.to_dict() for fp in corpus])
        log.debug("Wrote %d fingerprints to %s", len(corpus), self.path)


class MetadataStore(_JsonStore):
    """Original byte length of every mapped subject: {subject_id: length}."""

    def load(self) -> dict[str, int]:
        try:
            raw = _read_json(self.path)
            if raw is None:
                return {}
            # older maps were written as {"files": {...}}
            if isinstance(raw, dict) and isinstance(raw.get("files"), dict) and len(raw) == 1:
                raw = raw["files"]
            if not isinstance(raw, dict):
                raise CorruptStoreError(self.path, f"expected a JSON object, found {type(raw).__name__}")
            mapping = {}
            for subject_id, length in raw.items():
                if isinstance(length, bool) or not isinstance(length, int) or length < 0:
                    raise CorruptStoreError(self.path, f"invalid length {length!r} for {subject_id!r}")
                mapping[subject_id] = length
            return mapping
        except CorruptStoreError as exc:
            self._recover(exc)
            return {}

    @staticmethod
    def upsert(mapping: dict[str, int], subject_id: str, length: int) -> None:
        mapping[subject_id] = length

    def persist(self, mapping: dict[str, int]) -> None:
        _write_json_atomic(self.path, mapping)
