"""Derive a session's working directory from its event log"""

import logging
import os
from collections.abc import Iterable

from .events import DirectoryChangeEvent

logger = logging.getLogger(__name__)


def directory_exists(path: str | None) -> bool:
    """True if ``path`` is non-empty and names an existing directory"""
    return bool(path) and os.path.isdir(path)  # type: ignore[arg-type]


def resolve_working_directory(
    changes: Iterable[DirectoryChangeEvent],
    configured_directory: str | None = None,
    default_directory: str | None = None,
) -> str:
    """Resolve the working directory from recorded directory changes

    Fallback order:
    1. The most recent change whose target still exists. Changes whose
       target has since disappeared are skipped in favour of older ones.
    2. ``configured_directory``, if set and it exists.
    3. ``default_directory`` (the process working directory when None).

    Existence is checked on every call; nothing is cached.

    Args:
        changes: Directory changes in chronological order, already limited
            to the transcript position being resolved (see
            ``EventLog.directory_changes``)
        configured_directory: Directory from session or user configuration
        default_directory: Last resort, assumed valid

    Returns:
        Absolute path of the working directory
    """
    for event in reversed(list(changes)):
        if directory_exists(event.to_directory):
            return event.to_directory
        logger.debug("Recorded directory %s no longer exists, trying older changes", event.to_directory)

    if directory_exists(configured_directory):
        return configured_directory  # type: ignore[return-value]
    if configured_directory:
        logger.debug("Configured directory %s does not exist, using default", configured_directory)

    return default_directory or os.getcwd()
