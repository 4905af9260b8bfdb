"""
Ignore-token normalization and matching.

Tokens come from the built-in defaults, ``--ignore`` and ``--ignore-file``.
Each is turned into one or more gitwildmatch expressions so that a bare name
such as ``node_modules`` ignores that name anywhere in the tree, whether it
is a file or a directory, together with everything below it.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePath
from typing import Iterable, List, Optional, Union

import pathspec

from . import console
from .errors import ConfigFileError, InvalidPatternError

WILDCARD_CHARS = "*?[{"
RECURSIVE_PREFIX = "**/"
GITIGNORE_LEADERS = "!#"

DEFAULT_PATTERNS: List[str] = [
    "node_modules",
    "target",
    "dist",
    "build",
    ".next",
    ".turbo",
    ".git",
    ".idea",
    ".vscode",
    ".DS_Store",
    "package-lock.json",
    "Cargo.lock",
    "LICENSE",
    "__pycache__",
    "*.pyc",
    "*.pyo",
    "*.pyd",
    "*.o",
    "*.obj",
    "*.so",
    "*.dylib",
    "*.dll",
    "*.exe",
    "*.out",
    "*.a",
    "*.lib",
    "*.log",
    "*.tmp",
    "*.swp",
    # images
    "*.png",
    "*.jpg",
    "*.jpeg",
    "*.gif",
    "*.bmp",
    "*.tiff",
    "*.ico",
    "*.svg",
    "*.webp",
    "*.heic",
    "*.heif",
    # 3D assets
    "*.vrm",
    "*.fbx",
    "*.glb",
    "*.gltf",
    "*.blend",
    "*.stl",
    # archives
    "*.zip",
    "*.tar",
    "*.gz",
    "*.bz2",
    "*.xz",
    "*.7z",
    "*.rar",
    # tool caches
    ".pytest_cache",
    ".mypy_cache",
    ".ruff_cache",
    # build systems
    "CMakeFiles",
    "cmake-build-*",
    "buck-out",
    "bazel-*",
    "Pods",
]


def has_wildcards(token: str) -> bool:
    return any(ch in token for ch in WILDCARD_CHARS)


def has_separator(token: str) -> bool:
    return "/" in token or os.sep in token


def normalize_patterns(tokens: Iterable[str]) -> List[str]:
    """Expand raw ignore tokens into gitwildmatch expressions.

    * wildcard token with a separator, or already starting with ``**/``:
      kept as given, with a leading ``!`` or ``#`` escaped so it stays literal
    * bare wildcard token (``*.png``): ``**/*.png``
    * literal token (``node_modules``): ``**/node_modules/**`` and
      ``**/node_modules``
    """
    out: List[str] = []
    for raw in tokens:
        token = raw.strip()
        if os.sep != "/":
            token = token.replace(os.sep, "/")
        if not token:
            continue

        if has_wildcards(token):
            if has_separator(token) or token.startswith(RECURSIVE_PREFIX):
                # a leading ! or # would negate or comment out the pattern
                if token[0] in GITIGNORE_LEADERS:
                    token = "\\" + token
                out.append(token)
            else:
                out.append(RECURSIVE_PREFIX + token)
        else:
            name = token.rstrip("/") or token
            out.append(f"{RECURSIVE_PREFIX}{name}/**")
            out.append(f"{RECURSIVE_PREFIX}{name}")
    return out


def _split_alternates(body: str) -> List[str]:
    """Split the inside of a ``{...}`` group on its top-level commas."""
    parts: List[str] = []
    depth = 0
    start = 0
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(body[start:i])
            start = i + 1
        i += 1
    parts.append(body[start:])
    return parts


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternation into separate patterns.

    gitwildmatch has no alternation, so ``**/*.{png,jpg}`` becomes
    ``["**/*.png", "**/*.jpg"]``. Groups may nest. Braces inside ``[...]``
    or escaped with a backslash are literal.

    Raises:
        InvalidPatternError: if a group is never closed or never opened.
    """
    depth = 0
    start = 0
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "[":
            close = pattern.find("]", i + 2)
            if close != -1:
                i = close + 1
                continue
        elif ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}":
            if depth == 0:
                raise InvalidPatternError(f"unopened alternate group in {pattern!r}")
            depth -= 1
            if depth == 0:
                head = pattern[:start]
                tails = expand_braces(pattern[i + 1:])
                expanded: List[str] = []
                for alt in _split_alternates(pattern[start + 1:i]):
                    for middle in expand_braces(alt):
                        for tail in tails:
                            candidate = head + middle + tail
                            if candidate not in expanded:
                                expanded.append(candidate)
                return expanded
        i += 1

    if depth:
        raise InvalidPatternError(f"unclosed alternate group in {pattern!r}")
    return [pattern]


class PatternSet:
    """Compiled ignore patterns, matched existentially against relative paths."""

    def __init__(self, patterns: Iterable[str] = ()):
        self.patterns: List[str] = list(patterns)
        self._spec = pathspec.GitIgnoreSpec.from_lines(self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)

    def __repr__(self) -> str:
        return f"PatternSet({len(self.patterns)} patterns)"

    def match(self, rel_path: Union[str, PurePath]) -> bool:
        """True if *rel_path* (relative to the root) matches any pattern."""
        if isinstance(rel_path, PurePath):
            rel_path = rel_path.as_posix()
        return self._spec.match_file(rel_path)


def compile_patterns(tokens: Iterable[str], verbose: bool = False) -> PatternSet:
    """Normalize *tokens* and compile them, dropping any that do not compile."""
    compiled: List[str] = []
    for pattern in normalize_patterns(tokens):
        try:
            alternatives = expand_braces(pattern)
            # every alternative must compile on its own
            for alt in alternatives:
                pathspec.GitIgnoreSpec.from_lines([alt])
        except ValueError as e:
            if verbose:
                console.warn(f"Dropping invalid ignore pattern {pattern!r}: {e}")
            continue
        for alt in alternatives:
            if alt not in compiled:
                compiled.append(alt)
    return PatternSet(compiled)


def build_ignore_list(
    extra: Optional[Iterable[str]] = None,
    use_defaults: bool = True,
) -> List[str]:
    """Defaults (unless suppressed) followed by the user's tokens."""
    tokens: List[str] = list(DEFAULT_PATTERNS) if use_defaults else []
    if extra:
        tokens.extend(extra)
    return tokens


def load_ignore_file(config_path: Path) -> List[str]:
    """Read newline-separated ignore tokens from *config_path*."""
    if not config_path.exists():
        raise ConfigFileError(f"Ignore file '{config_path}' does not exist")
    if not config_path.is_file():
        raise ConfigFileError(f"'{config_path}' is not a file")
    try:
        with config_path.open("r", encoding="utf-8") as fh:
            return [
                ln.strip()
                for ln in fh
                if ln.strip() and not ln.lstrip().startswith("#")
            ]
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"Could not read ignore file '{config_path}': {e}")
