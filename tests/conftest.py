from pathlib import Path

import pytest

from hilbertscope.config import EngineConfig

TEXT = b"the quick brown fox jumps over the lazy dog. "


@pytest.fixture
def engine(tmp_path: Path) -> EngineConfig:
    return EngineConfig(
        samples_dir=tmp_path / "samples",
        maps_dir=tmp_path / "maps",
        dataset_path=tmp_path / "global_dataset.json",
        metadata_path=tmp_path / "mapping_metadata.json",
    )


@pytest.fixture
def samples(engine: EngineConfig) -> Path:
    """Two labelled folders: english text and mostly-null binary blobs."""
    text = engine.samples_dir / "text"
    zeros = engine.samples_dir / "zeros"
    text.mkdir(parents=True)
    zeros.mkdir(parents=True)
    (text / "a.txt").write_bytes(TEXT * 40)
    (text / "b.txt").write_bytes(b"a lazy dog and a quick fox. " * 60)
    (zeros / "z1.bin").write_bytes(bytes(2000))
    (zeros / "z2.bin").write_bytes(bytes(1500) + bytes(range(256)))
    return engine.samples_dir
