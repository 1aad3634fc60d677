"""Conversation sessions and their persistence"""

import json
import logging
import os
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from .config import get_config_dir
from .events import DirectoryChangeEvent, EventLog, SessionEvent
from .paths import expand_path, standardize_path
from .working_directory import resolve_working_directory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryChangeOutcome:
    """Result of a /cd request

    ``accepted`` is False when the target was rejected; ``reason`` then says
    why and nothing was recorded.
    """

    accepted: bool
    directory: str
    reason: str = ""
    event: DirectoryChangeEvent | None = None


class Session(BaseModel):
    """A conversation: transcript plus the events recorded alongside it"""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    title: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    # Directory configured when the session was created
    working_directory: str | None = None

    transcript: list[dict[str, Any]] = Field(default_factory=list)
    events: EventLog = Field(default_factory=EventLog)

    @property
    def display_title(self) -> str:
        """Title, or a creation timestamp when untitled"""
        return self.title or f"Session {self.created_at.strftime('%Y-%m-%d %H:%M')}"

    def touch(self):
        """Mark the session as modified"""
        self.updated_at = datetime.now()

    def set_transcript(self, messages: list[dict[str, Any]]):
        """Replace the transcript with the model's latest message list"""
        self.transcript = list(messages)
        self.touch()

    def current_directory(
        self,
        configured_directory: str | None = None,
        default_directory: str | None = None,
        position: int | None = None,
    ) -> str:
        """Working directory derived from the event log

        Args:
            configured_directory: User-level default, used when the session
                has no directory of its own
            default_directory: Last resort (process cwd when None)
            position: Transcript position to resolve at (None for "now")
        """
        return resolve_working_directory(
            self.events.directory_changes(position),
            configured_directory=self.working_directory or configured_directory,
            default_directory=default_directory,
        )

    def change_directory(
        self,
        path: str | None,
        configured_directory: str | None = None,
        default_directory: str | None = None,
    ) -> DirectoryChangeOutcome:
        """Validate a /cd target and record it

        Relative paths resolve against the current directory, ``~/`` against
        the home directory and an empty path means the home directory. Only
        an existing directory is recorded; anything else is declined without
        touching the log or the transcript.
        """
        current = os.path.abspath(self.current_directory(configured_directory, default_directory))

        path = (path or "").strip()
        if not path or path == "~":
            target = os.path.expanduser("~")
        else:
            target = expand_path(path, current)
        target = standardize_path(os.path.abspath(target))

        if not os.path.exists(target):
            return DirectoryChangeOutcome(False, target, f"No such directory: {target}")
        if not os.path.isdir(target):
            return DirectoryChangeOutcome(False, target, f"Not a directory: {target}")

        event = DirectoryChangeEvent(
            from_directory=current,
            to_directory=target,
            transcript_position=len(self.transcript),
        )
        self.events.append(event)
        self.touch()
        logger.info("Session %s changed directory %s -> %s", self.id, current, target)

        return DirectoryChangeOutcome(True, target, event=event)

    def timeline(self) -> list[tuple[str, dict[str, Any] | SessionEvent]]:
        """Transcript entries and events interleaved by position

        Events recorded at position ``i`` come right before transcript entry
        ``i``; events past the end of the transcript come last.
        """
        items: list[tuple[str, dict[str, Any] | SessionEvent]] = []
        events = list(self.events)
        index = 0

        for position, message in enumerate(self.transcript):
            while index < len(events) and events[index].transcript_position <= position:
                items.append(("event", events[index]))
                index += 1
            items.append(("message", message))

        items.extend(("event", event) for event in events[index:])
        return items


class SessionStore:
    """Persist sessions as one JSON file each"""

    def __init__(self, sessions_dir: Path | None = None):
        self.sessions_dir = sessions_dir or get_config_dir() / "sessions"
        self.sessions_dir.mkdir(parents=True, exist_ok=True)

    def _session_file(self, session_id: str) -> Path:
        return self.sessions_dir / f"{self._sanitize_id(session_id)}.json"

    def create(self, working_directory: str | None = None, title: str | None = None) -> Session:
        """Create and save a new session"""
        session = Session(working_directory=working_directory, title=title)
        self.save(session)
        return session

    def save(self, session: Session):
        """Write a session to disk"""
        with open(self._session_file(session.id), "w") as f:
            f.write(session.model_dump_json(indent=2))

    def load(self, session_id: str) -> Session:
        """Load a session by id

        Raises:
            FileNotFoundError: If no such session exists
        """
        session_file = self._session_file(session_id)
        if not session_file.exists():
            raise FileNotFoundError(f"No session with id '{session_id}'")

        with open(session_file) as f:
            return Session.model_validate_json(f.read())

    def delete(self, session_id: str) -> bool:
        """Delete a session; returns False if it did not exist"""
        session_file = self._session_file(session_id)
        if not session_file.exists():
            return False
        session_file.unlink()
        return True

    def list_sessions(self) -> list[Session]:
        """All readable sessions, newest first"""
        sessions = []
        for session_file in self.sessions_dir.glob("*.json"):
            try:
                with open(session_file) as f:
                    sessions.append(Session.model_validate_json(f.read()))
            except (OSError, ValueError, json.JSONDecodeError) as e:
                logger.warning("Skipping unreadable session file %s: %s", session_file, e)

        return sorted(sessions, key=lambda s: s.created_at, reverse=True)

    def latest(self) -> Session | None:
        """Most recently created session, if any"""
        sessions = self.list_sessions()
        return sessions[0] if sessions else None

    @staticmethod
    def _sanitize_id(session_id: str) -> str:
        """Sanitize id for use as filename"""
        return "".join(c if c.isalnum() or c in "-_" else "_" for c in session_id)
