"""Session events recorded alongside the conversation transcript

The working directory of a session is never stored as a mutable field.
Each successful directory change appends a :class:`DirectoryChangeEvent`
to the session's :class:`EventLog`, and the current directory is derived
from the log (see :mod:`pine.working_directory`).
"""

import uuid
from collections.abc import Iterator
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

from .paths import is_standardized_absolute


class DirectoryChangeEvent(BaseModel):
    """The working directory changed at a point in the transcript"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    kind: Literal["directory_change"] = "directory_change"
    from_directory: str | None = None
    to_directory: str
    transcript_position: int = Field(ge=0)
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("to_directory")
    @classmethod
    def _check_to_directory(cls, value: str) -> str:
        if not is_standardized_absolute(value):
            raise ValueError(f"to_directory must be an absolute, standardized path: {value!r}")
        return value


# Future event kinds join this alias as a discriminated union on ``kind``
SessionEvent = DirectoryChangeEvent


class EventLog(RootModel[list[SessionEvent]]):
    """Append-only, chronologically ordered list of session events"""

    root: list[SessionEvent] = Field(default_factory=list)

    def append(self, event: SessionEvent) -> None:
        """Record a new event after all existing ones"""
        if self.root and event.transcript_position < self.root[-1].transcript_position:
            raise ValueError(
                f"Event at position {event.transcript_position} would precede "
                f"the last event at position {self.root[-1].transcript_position}"
            )
        self.root.append(event)

    def events_up_to(self, position: int | None = None) -> list[SessionEvent]:
        """Events recorded at or before transcript ``position`` (all if None)"""
        if position is None:
            return list(self.root)
        return [event for event in self.root if event.transcript_position <= position]

    def directory_changes(self, position: int | None = None) -> list[DirectoryChangeEvent]:
        """Directory change events at or before ``position``, oldest first"""
        return [event for event in self.events_up_to(position) if event.kind == "directory_change"]

    def __iter__(self) -> Iterator[SessionEvent]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> SessionEvent:
        return self.root[index]
