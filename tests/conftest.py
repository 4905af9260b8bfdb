"""Shared fixtures for to-ai tests."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Union

import pytest


def make_tree(root: Path, files: Dict[str, Union[str, bytes]]) -> Path:
    """Create *files* (relative path -> content) under *root*."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """The tree used by most scenarios: two kept files, two pruned dirs."""
    root = tmp_path / "project"
    root.mkdir()
    return make_tree(
        root,
        {
            "a.txt": "alpha\n",
            "README.md": "# readme\n",
            "node_modules/lib.js": "module.exports = {};\n",
            "build/out.bin": b"\x00\x01\x02",
        },
    )
