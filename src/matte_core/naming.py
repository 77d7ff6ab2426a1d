# white-pass / black-pass file pairing rules

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Literal

from .io import expand_inputs, is_image_file


PairingMode = Literal["suffix", "folder", "exact"]


@dataclass(frozen=True)
class PairingRule:
    mode: PairingMode = "suffix"
    # suffix mode: foo_white.png <-> foo_black.png
    white_suffix: str = "_white"
    black_suffix: str = "_black"
    # folder mode: white/foo.png <-> black/foo.png
    white_dir_name: str = "white"
    black_dir_name: str = "black"
    # general
    case_sensitive: bool = False


def _norm(s: str, *, case_sensitive: bool) -> str:
    return s if case_sensitive else s.lower()


def list_images(paths: Iterable[Path]) -> list[Path]:
    return expand_inputs([Path(p) for p in paths])


def base_stem(p: Path, rule: PairingRule, *, is_black: bool = False) -> str:
    """File stem with the pass suffix removed (suffix mode only)."""
    stem = Path(p).stem
    if rule.mode != "suffix":
        return stem
    suffix = rule.black_suffix if is_black else rule.white_suffix
    if suffix:
        if rule.case_sensitive:
            matches = stem.endswith(suffix)
        else:
            matches = stem.lower().endswith(suffix.lower())
        if matches:
            return stem[: -len(suffix)]
    return stem


def relative_stem(p: Path, rule: PairingRule, *, is_black: bool = False) -> Path:
    """
    Extension-less path identifying a pass, shared by its partner.

    Folder mode keeps the sub-path below the white/black folder, so
    ``white/icons/star.png`` and ``white/logos/star.png`` stay distinct.
    """
    p = Path(p)
    if rule.mode == "folder":
        dir_name = rule.black_dir_name if is_black else rule.white_dir_name
        parents = p.parts[:-1]
        if dir_name in parents:
            idx = parents.index(dir_name)
            return Path(*p.parts[idx + 1 :]).with_suffix("")
        return Path(p.stem)
    return Path(base_stem(p, rule, is_black=is_black))


def _key_for_path(p: Path, rule: PairingRule, *, is_black: bool) -> str:
    rel = relative_stem(p, rule, is_black=is_black)
    return _norm(rel.as_posix(), case_sensitive=rule.case_sensitive)


def build_pairs(
    white_paths: list[Path],
    black_paths: list[Path],
    rule: PairingRule,
) -> tuple[list[tuple[Path, Path]], list[Path], list[Path]]:
    """
    Returns:
      pairs: list[(white_path, black_path)]
      unpaired_white: white-pass files that couldn't find a match
      unpaired_black: black-pass files that were not used
    """
    white_map: dict[str, Path] = {}
    black_map: dict[str, Path] = {}

    for p in white_paths:
        if is_image_file(Path(p)):
            k = _key_for_path(Path(p), rule, is_black=False)
            white_map.setdefault(k, Path(p))

    for p in black_paths:
        if is_image_file(Path(p)):
            k = _key_for_path(Path(p), rule, is_black=True)
            black_map.setdefault(k, Path(p))

    pairs: list[tuple[Path, Path]] = []
    used_black: set[str] = set()

    for k, white_p in white_map.items():
        b = black_map.get(k)
        if b is not None:
            pairs.append((white_p, b))
            used_black.add(k)

    unpaired_white = [p for k, p in white_map.items() if k not in black_map]
    unpaired_black = [p for k, p in black_map.items() if k not in used_black]

    pairs.sort(key=lambda t: str(t[0]))
    unpaired_white.sort(key=lambda p: str(p))
    unpaired_black.sort(key=lambda p: str(p))
    return pairs, unpaired_white, unpaired_black
