from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import List

import matte_core as core

logger = logging.getLogger("matte_app")


def print_json(data: object) -> None:
    if is_dataclass(data):
        data = asdict(data)
    print(json.dumps(data, indent=2))


def print_error(message: str) -> int:
    print(json.dumps({"error": message}), file=sys.stderr)
    return 1


def _progress(done: int, total: int, path: Path, message: str) -> None:
    logger.info("%d/%d %s: %s", done, total, message, path)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="alpha-matte",
        description="Recover an alpha channel for generated images (chroma key or white/black difference matting)",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Log progress (INFO)")
    ap.add_argument("--debug", action="store_true", help="Log engine details (DEBUG)")
    sub = ap.add_subparsers(dest="command", required=True)

    local = sub.add_parser("local", help="Key out a solid background colour")
    local.add_argument("-i", "--input", type=Path, required=True)
    local.add_argument("-o", "--outdir", type=Path, required=True)
    local.add_argument("--bg-color", dest="bg_color", default="auto",
                       help="white, black, auto (corner average) or #RRGGBB")
    local.add_argument("--tolerance", type=int, default=core.ChromaKeyOptions().tolerance,
                       help="Colour distance keyed fully transparent (0-255, default 30)")
    local.add_argument("--filename", help="Output filename (default: <name>_transparent_<ts>.png)")

    two = sub.add_parser("two-pass", help="Difference-matte a white-background and black-background render")
    two.add_argument("--white", type=Path, required=True, help="Render over pure white")
    two.add_argument("--black", type=Path, required=True, help="Same render over pure black")
    two.add_argument("-o", "--output", type=Path, required=True, help="Output PNG path")

    bl = sub.add_parser("batch-local", help="Chroma key every image in files/folders")
    bl.add_argument("inputs", nargs="+", type=Path)
    bl.add_argument("-o", "--outdir", type=Path, required=True)
    bl.add_argument("--bg-color", dest="bg_color", default="auto")
    bl.add_argument("--tolerance", type=int, default=core.ChromaKeyOptions().tolerance)
    bl.add_argument("--suffix", default="_transparent")
    bl.add_argument("--overwrite", action="store_true")
    bl.add_argument("--stop-on-error", action="store_true")

    bt = sub.add_parser("batch-two-pass", help="Difference-matte paired white/black renders")
    bt.add_argument("--white", type=Path, nargs="+", required=True, help="White-pass files or folders")
    bt.add_argument("--black", type=Path, nargs="+", required=True, help="Black-pass files or folders")
    bt.add_argument("-o", "--outdir", type=Path, required=True)
    bt.add_argument("--mode", choices=["suffix", "folder", "exact"], default="suffix")
    bt.add_argument("--white-suffix", default="_white")
    bt.add_argument("--black-suffix", default="_black")
    bt.add_argument("--suffix", default="_transparent")
    bt.add_argument("--overwrite", action="store_true")
    bt.add_argument("--stop-on-error", action="store_true")

    return ap


def _run(args: argparse.Namespace) -> object:
    if args.command == "local":
        opts = core.ChromaKeyOptions(bg_color=args.bg_color, tolerance=args.tolerance)
        return core.extract_transparency_from_image(
            args.input, args.outdir, method="local", opts=opts, filename=args.filename
        )

    if args.command == "two-pass":
        for p in (args.white, args.black):
            if not p.exists():
                raise core.MissingInput(f"Input file not found: {p}")
        out = core.difference_matte_file(args.white, args.black, args.output)
        return {
            "path": str(out.resolve()),
            "intermediates": {"white": str(args.white.resolve()), "black": str(args.black.resolve())},
            "method": "two-pass",
        }

    if args.command == "batch-local":
        opts = core.ChromaKeyOptions(bg_color=args.bg_color, tolerance=args.tolerance)
        outputs = core.chroma_key_files(
            args.inputs,
            args.outdir,
            opts,
            out_suffix=args.suffix,
            overwrite=args.overwrite,
            continue_on_error=not args.stop_on_error,
            progress_cb=_progress,
        )
        return {"outputs": [str(p) for p in outputs]}

    # batch-two-pass
    rule = core.PairingRule(
        mode=args.mode, white_suffix=args.white_suffix, black_suffix=args.black_suffix
    )
    pairs, unpaired_white, unpaired_black = core.build_pairs(
        core.list_images(args.white), core.list_images(args.black), rule
    )
    for p in unpaired_white + unpaired_black:
        logger.warning("No matching pass for %s", p)
    outputs = core.difference_matte_files(
        pairs,
        args.outdir,
        out_suffix=args.suffix,
        rule=rule,
        overwrite=args.overwrite,
        continue_on_error=not args.stop_on_error,
        progress_cb=_progress,
    )
    return {
        "outputs": [str(p) for p in outputs],
        "unpaired": [str(p) for p in unpaired_white + unpaired_black],
    }


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.debug else logging.INFO if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        result = _run(args)
    except (core.MatteError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        return print_error(str(e))

    print_json(result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
