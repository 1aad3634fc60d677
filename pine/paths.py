"""Path helpers for directory completion and /cd

All functions here are pure string operations: nothing touches the
filesystem, so they are safe to call on every key press.
"""

import os
import posixpath

SEPARATOR = "/"
HOME_PREFIX = "~/"


def expand_path(path: str, base_directory: str) -> str:
    """Turn a typed path fragment into an absolute path

    Args:
        path: Fragment as typed after the command (may be empty)
        base_directory: Directory relative fragments are resolved against

    Returns:
        ``~/`` expanded to the home directory, absolute paths unchanged,
        anything else joined onto ``base_directory``. A trailing separator
        on ``path`` is preserved.
    """
    if path.startswith(HOME_PREFIX):
        return os.path.expanduser(path)
    if path.startswith(SEPARATOR):
        return path
    return posixpath.join(base_directory, path)


def split_path(path: str) -> tuple[str, str]:
    """Split an expanded path into (directory to list, name prefix)

    An empty path, or one ending with the separator, names a directory whose
    entries should all be offered, so the prefix is empty.
    """
    if not path or path.endswith(SEPARATOR):
        return (path or SEPARATOR, "")

    directory, prefix = posixpath.split(path)
    # posixpath.split keeps trailing separators on the head ("/a//b" -> "/a/")
    directory = directory.rstrip(SEPARATOR) or SEPARATOR
    return directory, prefix


def standardize_path(path: str) -> str:
    """Collapse ``.``, ``..`` and duplicate separators

    Symlinks are not resolved and the path does not need to exist.
    """
    if not path:
        return path

    normalized = posixpath.normpath(path)
    # POSIX lets normpath keep exactly two leading slashes
    if normalized.startswith("//"):
        normalized = SEPARATOR + normalized.lstrip(SEPARATOR)
    return normalized


def join_candidate(directory: str, name: str) -> str:
    """Join a listed directory and a candidate name

    Only the directory is standardized: ``name`` may be a partial name such
    as ``.`` shared by hidden candidates, which must survive as typed.
    """
    return posixpath.join(standardize_path(directory), name)


def is_standardized_absolute(path: str) -> bool:
    """True when ``path`` is absolute and already in standard form"""
    return path.startswith(SEPARATOR) and standardize_path(path) == path
