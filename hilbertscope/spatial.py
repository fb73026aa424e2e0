"""
    Spatial maps: a byte buffer rasterized along the Hilbert curve into a square
    8-bit grayscale PNG, and the exact inverse.

    The image side is a padded upper bound (next power of two whose square holds
    the buffer), so the original length is kept in the metadata store; pixels
    past that length are padding and never read back.
"""
from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image

from .curve import curve_coordinates, side_length
from .errors import CorruptStoreError, InvalidMapError, MissingMetadataError
from .store import MetadataStore

log = logging.getLogger(__name__)

IMAGE_SUFFIX = ".png"


def rasterize(data: bytes) -> np.ndarray:
    """uint8 grid of shape (n, n), indexed [y, x], with data[i] at to_2d(i, n)."""
    buf = np.frombuffer(data, dtype=np.uint8)
    n = side_length(buf.size)
    grid = np.zeros((n, n), dtype=np.uint8)
    xs, ys = curve_coordinates(buf.size, n)
    grid[ys, xs] = buf
    return grid


def unrasterize(grid: np.ndarray, length: int) -> bytes:
    """Read the first `length` cells of `grid` back in curve order."""
    if grid.ndim != 2 or grid.shape[0] != grid.shape[1]:
        raise ValueError(f"Spatial map must be a square single-channel grid, got shape {grid.shape}.")
    n = grid.shape[1]
    xs, ys = curve_coordinates(length, n)
    return grid[ys, xs].astype(np.uint8).tobytes()


def map_path(maps_dir: Path, category: str, subject_id: str) -> Path:
    return maps_dir / category / f"{subject_id}{IMAGE_SUFFIX}"


class SpatialEncoder:
    def __init__(self, maps_dir: Path | str, metadata: MetadataStore):
        self.maps_dir = Path(maps_dir)
        self.metadata = metadata

    def encode(self, data: bytes, category: str, subject_id: str) -> Path:
        """Write <maps_dir>/<category>/<subject_id>.png and record len(data)."""
        out = map_path(self.maps_dir, category, subject_id)
        out.parent.mkdir(parents=True, exist_ok=True)

        grid = rasterize(data)
        Image.fromarray(grid).save(out)
        log.debug("Mapped %s (%d bytes) onto a %dx%d grid", subject_id, len(data), *grid.shape)

        mapping = self.metadata.load()
        self.metadata.upsert(mapping, subject_id, len(data))
        self.metadata.persist(mapping)
        return out


class SpatialDecoder:
    def __init__(self, metadata: MetadataStore):
        self.metadata = metadata

    @staticmethod
    def subject_for(image_path: Path) -> str:
        name = image_path.name
        return name[: -len(IMAGE_SUFFIX)] if name.endswith(IMAGE_SUFFIX) else name

    def decode(self, image_path: Path | str, output_path: Path | str) -> bytes:
        """
        Recover the original bytes of a spatial map and write them to `output_path`.
        Raises MissingMetadataError (and writes nothing) for a subject that was never mapped,
        InvalidMapError for an image that is not a power-of-two square and
        CorruptStoreError when the recorded length does not fit the image.
        """
        image_path = Path(image_path)
        subject_id = self.subject_for(image_path)
        mapping = self.metadata.load()
        if subject_id not in mapping:
            raise MissingMetadataError(subject_id)
        length = mapping[subject_id]

        with Image.open(image_path) as img:
            grid = np.asarray(img.convert("L"))
        height, n = grid.shape
        if height != n or n & (n - 1):
            raise InvalidMapError(image_path, f"{n}x{height} is not a power-of-two square map")
        if length > n * n:
            raise CorruptStoreError(self.metadata.path,
                                    f"length {length} of {subject_id!r} exceeds its {n}x{n} map")
        data = unrasterize(grid, length)

        Path(output_path).write_bytes(data)
        return data
