"""Training (ingest) and identification pipelines built on the core modules."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .classifier import classify
from .config import EngineConfig
from .errors import EmptyCorpusError
from .fingerprint import UNKNOWN_CATEGORY, extract_fingerprint

log = logging.getLogger(__name__)


@dataclass
class IngestSummary:
    label: str
    processed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def ingest_directory(directory: Path | str, label: str, config: EngineConfig) -> IngestSummary:
    """
    Fingerprint and map every regular file directly inside `directory` under `label`.
    Files whose (name, label) pair is already in the corpus are skipped before
    they are read. The corpus is rewritten once, after the whole directory.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Target directory not found: {directory}")

    store = config.fingerprint_store()
    encoder = config.encoder()
    corpus = store.load()
    summary = IngestSummary(label)

    for path in sorted(p for p in directory.iterdir() if p.is_file()):
        name = path.name
        if store.contains(corpus, name, label):
            log.info("Skipping %s: already exists in dataset.", name)
            summary.skipped.append(name)
            continue

        log.info("Processing: %s", name)
        data = path.read_bytes()
        store.append(corpus, extract_fingerprint(data, label, name))
        encoder.encode(data, label, name)
        summary.processed.append(name)

    store.persist(corpus)
    return summary


def ingest_all(config: EngineConfig) -> list[IngestSummary]:
    """Train every subdirectory of the samples root, using the folder name as the label."""
    root = Path(config.samples_dir)
    if not root.is_dir():
        raise FileNotFoundError(f"'{root}' directory not found.")

    summaries = []
    for sub in sorted(p for p in root.iterdir() if p.is_dir()):
        log.info("Automatically training category: %s", sub.name)
        summaries.append(ingest_directory(sub, sub.name, config))
    return summaries


def identify_file(path: Path | str, config: EngineConfig, top: int = 3) -> list[tuple[str, float]]:
    """Best matching categories for the file at `path`, lowest score first."""
    corpus = config.fingerprint_store().load()
    if not corpus:
        raise EmptyCorpusError()
    probe = extract_fingerprint(Path(path).read_bytes(), UNKNOWN_CATEGORY, "mystery")
    return classify(probe, corpus, top=top)
