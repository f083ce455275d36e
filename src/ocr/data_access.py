from __future__ import annotations

import hashlib
from pathlib import Path, PureWindowsPath

_HASH_CHUNK = 1 << 20


class DataAccessError(Exception):
    """A label image reference points outside the configured data root."""


def _looks_absolute(relpath: str) -> bool:
    return relpath.startswith(("/", "\\")) or bool(PureWindowsPath(relpath).drive)


def resolve_under_data_root(*, data_root: Path, relpath: str) -> Path:
    """
    Turn a label image reference into a path inside `data_root`.

    `data_root` is always caller-provided. Absolute references and anything that
    resolves outside the root (e.g. "../x.png", symlinks out of the tree) are rejected.
    """

    if _looks_absolute(relpath):
        raise DataAccessError(f"Label image must be referenced relative to data_root: {relpath!r}")

    root = data_root.expanduser().resolve()
    target = root.joinpath(relpath).resolve()
    if target != root and root not in target.parents:
        raise DataAccessError(f"Label image reference escapes data_root: {relpath!r}")
    return target


def sha256_file(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as fh:
        while True:
            chunk = fh.read(_HASH_CHUNK)
            if not chunk:
                break
            digest.update(chunk)
    return digest.hexdigest()
