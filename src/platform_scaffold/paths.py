from __future__ import annotations

import posixpath
from pathlib import Path


def normalize_target_path(path: str) -> str:
    """Normalize a scaffold-relative POSIX path like 'helm/app/Chart.yaml'."""
    raw = (path or "").strip()
    if not raw:
        raise ValueError("empty path")
    if "\x00" in raw:
        raise ValueError("invalid path")
    if raw.startswith("/"):
        raise ValueError(f"absolute path not allowed: {raw!r}")

    # normpath collapses "..", so check the original segments too.
    if ".." in raw.split("/"):
        raise ValueError(f"path traversal not allowed: {raw!r}")

    norm = posixpath.normpath(raw)
    if norm in (".", ""):
        raise ValueError("invalid path")
    return norm


def resolve_target(root: Path, path: str) -> Path:
    return Path(root) / normalize_target_path(path)
