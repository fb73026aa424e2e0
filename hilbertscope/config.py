from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path

from .spatial import SpatialDecoder, SpatialEncoder
from .store import FingerprintStore, MetadataStore


@dataclass
class EngineConfig:
    samples_dir: Path = Path("samples")
    maps_dir: Path = Path("maps")
    dataset_path: Path = Path("global_dataset.json")
    metadata_path: Path = Path("mapping_metadata.json")
    strict_store: bool = False   # raise on an unreadable store instead of starting empty

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "EngineConfig":
        return cls(
            samples_dir=args.samples_dir,
            maps_dir=args.maps_dir,
            dataset_path=args.dataset,
            metadata_path=args.metadata,
            strict_store=args.strict_store,
        )

    def fingerprint_store(self) -> FingerprintStore:
        return FingerprintStore(self.dataset_path, strict=self.strict_store)

    def metadata_store(self) -> MetadataStore:
        return MetadataStore(self.metadata_path, strict=self.strict_store)

    def encoder(self) -> SpatialEncoder:
        return SpatialEncoder(self.maps_dir, self.metadata_store())

    def decoder(self) -> SpatialDecoder:
        return SpatialDecoder(self.metadata_store())
