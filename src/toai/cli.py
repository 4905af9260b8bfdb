"""
CLI entrypoint for the to-ai package.
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from colorama import just_fix_windows_console

from . import __version__, console
from .core import (
    copy_to_clipboard,
    output_exclusions,
    resolve_root,
    scan_files,
    write_to_file,
    write_to_stream,
)
from .errors import ToAIError
from .patterns import build_ignore_list, compile_patterns, load_ignore_file


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="to-ai",
        description=(
            "Dump project files to a simple AI-readable format. "
            "Copies to the clipboard unless --output or --stdout is given."
        ),
    )
    p.add_argument(
        "--path",
        type=Path,
        default=Path("."),
        metavar="PATH",
        help="Project root dir (default: current directory)",
    )
    sink = p.add_mutually_exclusive_group()
    sink.add_argument(
        "--output",
        "--out",
        dest="output",
        type=Path,
        metavar="FILE",
        help="Write the dump to FILE, creating parent directories",
    )
    sink.add_argument(
        "--stdout",
        action="store_true",
        help="Write the dump to standard output",
    )
    p.add_argument(
        "--ignore",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Extra ignore pattern or name (repeatable)",
    )
    p.add_argument(
        "--ignore-file",
        type=Path,
        metavar="FILE",
        help="Path to a file with extra ignore patterns (one per line)",
    )
    p.add_argument(
        "--no-ignore-default",
        action="store_true",
        help="Do not apply the built-in ignore list",
    )
    p.add_argument(
        "--skip-unreadable",
        action="store_true",
        help="Skip files that cannot be read instead of aborting",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    just_fix_windows_console()
    try:
        ns = _parse_args(argv)

        extra = list(ns.ignore)
        if ns.ignore_file:
            extra.extend(load_ignore_file(ns.ignore_file))
            if ns.verbose:
                console.info(f"Loaded extra patterns from {ns.ignore_file}")

        tokens = build_ignore_list(extra, use_defaults=not ns.no_ignore_default)
        ignore = compile_patterns(tokens, verbose=ns.verbose)

        root = resolve_root(ns.path)
        exclude = output_exclusions(root, ns.output)
        files = scan_files(root, ignore, exclude, verbose=ns.verbose)

        if ns.output is not None:
            write_to_file(
                files,
                out_path=ns.output,
                root=root,
                skip_unreadable=ns.skip_unreadable,
                verbose=ns.verbose,
            )
        elif ns.stdout:
            write_to_stream(
                files,
                sys.stdout,
                root=root,
                skip_unreadable=ns.skip_unreadable,
                verbose=ns.verbose,
            )
        else:
            copy_to_clipboard(
                files,
                root=root,
                skip_unreadable=ns.skip_unreadable,
                verbose=ns.verbose,
            )

    except ToAIError as e:
        console.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        console.error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
