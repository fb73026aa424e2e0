"""
    : Hilbert Analytics & Forensic Engine

    Usage:
    hilbertscope train samples/pdf pdf       # fingerprint + map one labelled folder
    hilbertscope train-all                   # every subfolder of ./samples, label = folder name
    hilbertscope identify mystery.bin        # guess the file type
    hilbertscope reconstruct maps/pdf/a.pdf.png a.pdf   # restore a file from its map
    hilbertscope render mystery.bin -o mystery.png      # fingerprint dashboard

    What it does (numpy + Pillow + matplotlib):
        - Fingerprints each file: byte entropy, byte distribution and the 20 most
        frequent byte transitions, stored in global_dataset.json.
        - Rasterizes the bytes along a Hilbert curve into maps/<label>/<file>.png and
        records the original length in mapping_metadata.json, so the file can be
        rebuilt exactly.
        - Identifies an unknown file by scoring it against every labelled fingerprint
        and averaging per label.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import EngineConfig
from .errors import HilbertscopeError
from .fingerprint import UNKNOWN_CATEGORY, extract_fingerprint
from .pipeline import identify_file, ingest_all, ingest_directory
from .report import render_dashboard


def positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text}")
    return value


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="hilbertscope", description="Hilbert Analytics & Forensic Engine")
    ap.add_argument("--samples-dir", type=Path, default=Path("samples"),
                    help="Root whose subfolders train-all uses (default: samples)")
    ap.add_argument("--maps-dir", type=Path, default=Path("maps"),
                    help="Where spatial maps are written (default: maps)")
    ap.add_argument("--dataset", type=Path, default=Path("global_dataset.json"),
                    help="Fingerprint corpus file (default: global_dataset.json)")
    ap.add_argument("--metadata", type=Path, default=Path("mapping_metadata.json"),
                    help="Spatial map length metadata (default: mapping_metadata.json)")
    ap.add_argument("--strict-store", action="store_true",
                    help="Fail on an unreadable corpus/metadata file instead of starting empty")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = ap.add_subparsers(dest="command", required=True)

    train = sub.add_parser("train", help="Analyze a specific directory")
    train.add_argument("dir", type=Path)
    train.add_argument("label")

    sub.add_parser("train-all", help="Analyze all subdirectories of the samples root")

    identify = sub.add_parser("identify", help="Guess file type")
    identify.add_argument("file", type=Path)
    identify.add_argument("--top", type=positive_int, default=3, help="Categories to report (default: 3)")

    reconstruct = sub.add_parser("reconstruct", help="Restore a file from its map")
    reconstruct.add_argument("image", type=Path)
    reconstruct.add_argument("out", type=Path)

    render = sub.add_parser("render", help="Draw the fingerprint dashboard of a file")
    render.add_argument("file", type=Path)
    render.add_argument("-o", "--out", type=Path, default=None,
                        help="Output PNG (default: <file>.fingerprint.png)")
    return ap


def run(args: argparse.Namespace) -> int:
    cfg = EngineConfig.from_args(args)

    if args.command == "train":
        s = ingest_directory(args.dir, args.label, cfg)
        print(f"[{s.label}] processed {len(s.processed)}, skipped {len(s.skipped)}")

    elif args.command == "train-all":
        for s in ingest_all(cfg):
            print(f"[{s.label}] processed {len(s.processed)}, skipped {len(s.skipped)}")
        print("\n[Batch Training Complete]")

    elif args.command == "identify":
        results = identify_file(args.file, cfg, top=args.top)
        print("\n--- IDENTIFICATION RESULTS ---")
        for cat, score in results:
            print(f"Category: {cat:<12} | Score: {score:.4f}")

    elif args.command == "reconstruct":
        data = cfg.decoder().decode(args.image, args.out)
        print(f"Reconstruction Successful: Saved {len(data)} bytes to {args.out}")

    elif args.command == "render":
        raw = args.file.read_bytes()
        fp = extract_fingerprint(raw, UNKNOWN_CATEGORY, args.file.name)
        out = args.out or args.file.with_name(args.file.name + ".fingerprint.png")
        render_dashboard(raw, fp, out)
        print(f"Wrote {out}")

    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    try:
        return run(args)
    except (HilbertscopeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
