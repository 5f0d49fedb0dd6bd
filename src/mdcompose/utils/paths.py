#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/utils/paths.py
"""Safe resolution of local image references.

Local image references are resolved against a *safe root* directory and
rejected when the normalized result would lie outside of it. This is the
only way the resolver touches the local filesystem.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from mdcompose.exceptions import PathSecurityError

logger = logging.getLogger(__name__)

_WINDOWS_INVALID_PATH_CHARS = frozenset('<>"|?*')

# Filesystems on these platforms are case-insensitive by default
CASE_INSENSITIVE_PLATFORMS = ("win32", "cygwin", "darwin")


def has_invalid_path_characters(reference: str) -> bool:
    """Check a reference for characters that can never appear in a path.

    NUL is rejected everywhere. On Windows the reserved characters
    ``<>"|?*`` and ASCII control characters are rejected as well.
    """
    if "\0" in reference:
        return True
    if os.name == "nt":
        return any(char in _WINDOWS_INVALID_PATH_CHARS or ord(char) < 32 for char in reference)
    return False


def _comparable(path: str) -> str:
    if sys.platform.startswith(CASE_INSENSITIVE_PLATFORMS):
        return path.casefold()
    return path


def is_within_directory(path: str, directory: str) -> bool:
    """Return True if the absolute ``path`` equals or lies below ``directory``.

    Both arguments must already be normalized absolute paths. The check is a
    string prefix test on separator boundaries, so ``/data-other`` is not
    inside ``/data``.
    """
    candidate = _comparable(path)
    root = _comparable(directory.rstrip(os.sep) or os.sep)
    if candidate == root:
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return candidate.startswith(prefix)


def resolve_safe_local_path(reference: str, safe_root: str | Path) -> Path:
    """Resolve an image reference relative to a safe root directory.

    Parameters
    ----------
    reference : str
        Path as written in the document, relative to ``safe_root``
    safe_root : str or Path
        Directory that resolved paths must stay inside

    Returns
    -------
    Path
        Normalized absolute path inside ``safe_root``

    Raises
    ------
    PathSecurityError
        If the reference contains invalid path characters or resolves
        outside of ``safe_root``

    Examples
    --------
    >>> resolve_safe_local_path("subdir/../image.png", "/root")  # doctest: +SKIP
    PosixPath('/root/image.png')

    Notes
    -----
    Normalization (``.`` and ``..`` collapsing) happens before the
    containment check. Symbolic links are not followed.

    """
    if has_invalid_path_characters(reference):
        raise PathSecurityError("Reference contains invalid path characters", reference=reference)

    root = os.path.normpath(os.path.abspath(os.fspath(safe_root)))
    candidate = os.path.normpath(os.path.join(root, reference))

    if not is_within_directory(candidate, root):
        raise PathSecurityError(f"Reference escapes the safe root {root}", reference=reference)

    return Path(candidate)


def try_resolve_safe_local_path(reference: str, safe_root: str | Path) -> Path | None:
    """Resolve a reference inside ``safe_root``, or return None when that is not allowed.

    Parameters
    ----------
    reference : str
        Path as written in the document
    safe_root : str or Path
        Directory that resolved paths must stay inside

    Returns
    -------
    Path or None
        Normalized absolute path, or None if the reference is unsafe

    Examples
    --------
    >>> try_resolve_safe_local_path("./image.png", "/root")  # doctest: +SKIP
    PosixPath('/root/image.png')
    >>> try_resolve_safe_local_path("../image.png", "/root") is None
    True

    """
    try:
        return resolve_safe_local_path(reference, safe_root)
    except PathSecurityError as e:
        logger.debug(f"Rejected local image reference {reference!r}: {e}")
        return None
