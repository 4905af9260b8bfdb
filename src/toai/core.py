"""
Core logic for to-ai: the ignoring walker and the output sinks.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import AbstractSet, Iterator, List, Optional, Set, TextIO

import pyperclip

from . import console
from .errors import (
    ClipboardError,
    FileReadError,
    InvalidRootError,
    OutputError,
    ScanError,
)
from .patterns import PatternSet

FENCE = "```"


# Root & exclusions
def resolve_root(root: Path) -> Path:
    """Canonicalize *root* to an absolute directory path."""
    try:
        resolved = Path(root).resolve()
    except (OSError, RuntimeError) as e:
        raise InvalidRootError(f"Could not resolve root path '{root}': {e}")
    if not resolved.exists():
        raise InvalidRootError(f"Root directory '{resolved}' does not exist")
    if not resolved.is_dir():
        raise InvalidRootError(f"Root path '{resolved}' is not a directory")
    return resolved


def output_exclusions(root: Path, out_path: Optional[Path]) -> Set[Path]:
    """Relative paths that must never be listed: the output file itself.

    *out_path* is resolved from the working directory, where it will be
    written, and kept only if it lies under *root*.
    """
    if out_path is None:
        return set()
    try:
        return {Path(out_path).resolve().relative_to(root)}
    except ValueError:
        return set()


# Traversal
def _walk(
    directory: Path,
    root: Path,
    ignore: PatternSet,
    exclude: AbstractSet[Path],
    acc: List[Path],
) -> None:
    try:
        with os.scandir(directory) as it:
            for entry in it:
                path = Path(entry.path)
                rel = path.relative_to(root)

                if rel in exclude:
                    continue
                if ignore.match(rel):
                    continue

                if entry.is_dir(follow_symlinks=False):
                    _walk(path, root, ignore, exclude, acc)
                elif entry.is_file(follow_symlinks=False):
                    acc.append(rel)
    except OSError as e:
        raise ScanError(f"Could not scan directory '{directory}': {e}")


def scan_files(
    root: Path,
    ignore: PatternSet,
    exclude: AbstractSet[Path] = frozenset(),
    verbose: bool = False,
) -> List[Path]:
    """Return the sorted root-relative paths of every file not ignored.

    Ignored directories are pruned before descending, so nothing inside
    them is ever read. Symlinks and special files are skipped.
    """
    root = resolve_root(root)
    if verbose:
        console.info(f"Scanning {root} with {len(ignore)} ignore patterns …")

    files: List[Path] = []
    _walk(root, root, ignore, exclude, files)
    files.sort()

    if verbose:
        console.info(f"{len(files)} files kept after filtering.")
    return files


# Rendering
def render_file(root: Path, rel: Path) -> str:
    """Header line plus fenced, lossily decoded content of one file."""
    try:
        raw = (root / rel).read_bytes()
    except OSError as e:
        raise FileReadError(f"Could not read '{rel.as_posix()}': {e}")
    text = raw.decode("utf-8", errors="replace")
    return f"# {rel.as_posix()}\n{FENCE}\n{text}{FENCE}\n\n"


def iter_rendered(
    paths: List[Path],
    root: Path,
    skip_unreadable: bool = False,
) -> Iterator[str]:
    """Yield one rendered block per path, in order.

    An unreadable file aborts with :class:`FileReadError` unless
    *skip_unreadable* is set, in which case it is left out with a warning.
    """
    for rel in paths:
        try:
            yield render_file(root, rel)
        except FileReadError as e:
            if not skip_unreadable:
                raise
            console.warn(f"Skipping {e}")


# Sinks
def write_to_file(
    paths: List[Path],
    out_path: Path,
    root: Path,
    skip_unreadable: bool = False,
    verbose: bool = False,
) -> int:
    """Write the dump to *out_path*, creating parent directories."""
    try:
        out_path = Path(out_path).resolve()
    except (OSError, RuntimeError) as e:
        raise OutputError(f"Could not resolve output path '{out_path}': {e}")

    if not out_path.parent.exists():
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(f"Could not create directory '{out_path.parent}': {e}")

    if verbose:
        console.info(f"Writing to {out_path} …")

    # render everything before truncating a previous dump
    blocks = list(iter_rendered(paths, root, skip_unreadable))
    count = len(blocks)
    try:
        with out_path.open("w", encoding="utf-8", newline="\n") as out_fh:
            out_fh.writelines(blocks)
    except OSError as e:
        raise OutputError(f"Could not write to output file '{out_path}': {e}")

    if verbose:
        console.success(f"{console.PREFIX} Done → {out_path}. {count} files written.")
    return count


def write_to_stream(
    paths: List[Path],
    stream: TextIO,
    root: Path,
    skip_unreadable: bool = False,
    verbose: bool = False,
) -> int:
    count = 0
    try:
        for block in iter_rendered(paths, root, skip_unreadable):
            stream.write(block)
            count += 1
        stream.flush()
    except OSError as e:
        raise OutputError(f"Could not write to output stream: {e}")

    if verbose:
        console.info(f"{count} files written to stream.")
    return count


def copy_to_clipboard(
    paths: List[Path],
    root: Path,
    skip_unreadable: bool = False,
    verbose: bool = False,
) -> int:
    """Copy the whole dump to the system clipboard."""
    blocks = list(iter_rendered(paths, root, skip_unreadable))
    try:
        pyperclip.copy("".join(blocks))
    except pyperclip.PyperclipException as e:
        raise ClipboardError(f"Failed to copy to clipboard: {e}")
    if verbose:
        console.info(f"{len(blocks)} files collected.")
    console.success("Copied to clipboard!")
    return len(blocks)
