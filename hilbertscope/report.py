"""
    Fingerprint dashboard: one PNG summarising what the classifier sees in a file.

    1) Hilbert map of the bytes (sections show up as compact blobs),
    2) byte histogram,
    3) top first-order transitions,
    with the entropy in the title.
"""
from __future__ import annotations

from pathlib import Path

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .fingerprint import Fingerprint
from .spatial import rasterize


def render_dashboard(data: bytes, fingerprint: Fingerprint, out_png: Path) -> Path:
    buf = np.frombuffer(data, dtype=np.uint8)
    grid = rasterize(data)

    fig = plt.figure(figsize=(12, 8))

    # 1) Hilbert map
    ax1 = plt.subplot2grid((2, 2), (0, 0), rowspan=2)
    ax1.imshow(grid, cmap="gray", vmin=0, vmax=255, interpolation="nearest")
    ax1.set_title(f"Hilbert map ({grid.shape[0]}x{grid.shape[1]})")
    ax1.set_xticks([])
    ax1.set_yticks([])

    # 2) Byte histogram
    ax2 = plt.subplot2grid((2, 2), (0, 1))
    ax2.plot(np.bincount(buf, minlength=256))
    ax2.set_title("Byte histogram")
    ax2.set_xlabel("Byte value")
    ax2.set_ylabel("Count")

    # 3) Top transitions
    ax3 = plt.subplot2grid((2, 2), (1, 1))
    keys = list(fingerprint.top_transitions)
    ax3.barh(np.arange(len(keys)), list(fingerprint.top_transitions.values()))
    ax3.set_yticks(np.arange(len(keys)))
    ax3.set_yticklabels(keys, fontsize=7)
    ax3.invert_yaxis()
    ax3.set_title("Top byte transitions")
    ax3.set_xlabel("Frequency (count / length)")

    fig.suptitle(
        f"{fingerprint.subject_id} | {len(data)} bytes | entropy={fingerprint.entropy:.4f} bits",
        y=0.98
    )
    plt.tight_layout(rect=[0, 0, 1, 0.96])
    out_png = Path(out_png)
    fig.savefig(out_png, dpi=120)
    plt.close(fig)
    return out_png
