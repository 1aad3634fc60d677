"""Directory listing for /cd completion"""

import logging
import os

logger = logging.getLogger(__name__)


def _sort_key(name: str) -> tuple[str, str]:
    return (name.casefold(), name)


def list_directories(directory: str, prefix: str) -> list[str]:
    """List subdirectory names of ``directory`` that match ``prefix``

    Args:
        directory: Absolute directory to list
        prefix: Typed name prefix, matched case-insensitively

    Returns:
        Matching directory names sorted case-insensitively. Dot-directories
        are only offered when the prefix itself starts with ``.``. An
        unreadable, missing or non-directory path yields an empty list.
    """
    show_hidden = prefix.startswith(".")
    folded_prefix = prefix.casefold()

    names = []
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                name = entry.name
                if name.startswith(".") and not show_hidden:
                    continue
                if not name.casefold().startswith(folded_prefix):
                    continue
                try:
                    # Follows symlinks: a link to a directory is a candidate
                    if not entry.is_dir():
                        continue
                except OSError:
                    continue
                names.append(name)
    except OSError as e:
        logger.debug("Cannot list %s for completion: %s", directory, e)
        return []

    return sorted(names, key=_sort_key)
