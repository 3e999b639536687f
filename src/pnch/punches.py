"""Punches and the punch store.

A punch is one tracked interval.  It starts **open** (no out time) and is
**closed** exactly once by ``Punch.close``; a closed punch never reopens.
The store keeps punches in chronological order and allows at most one
open punch, which is always the last one.

Record layout (92 bytes, little-endian)::

    date(4) | in(2) | out(2) | tag id(4) | description(80)
"""
from __future__ import annotations

import logging
import struct
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from pnch import codec
from pnch.clock import Date, Time
from pnch.errors import (
    AlreadyClosedError,
    AlreadyOpenError,
    DescriptionAlreadySpecifiedError,
    DescriptionNotSpecifiedError,
    FormatError,
    OutBeforeInError,
    PunchNotFoundError,
)
from pnch.tags import Tag, TagTable

if TYPE_CHECKING:
    from pnch.storage import BlobStorage

logger = logging.getLogger(__name__)

PUNCHES_FILE_NAME: Final[str] = "pnchs.db"

DESCRIPTION_SIZE: Final[int] = 80

_RECORD_STRUCT: Final[struct.Struct] = struct.Struct(
    f"<{codec.DATE_SIZE}s{codec.TIME_SIZE}s{codec.TIME_SIZE}s{codec.TAG_ID_SIZE}s{DESCRIPTION_SIZE}s"
)
PUNCH_SIZE: Final[int] = _RECORD_STRUCT.size


# ---------------------------------------------------------------------------
# tag/description text
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Description:
    """A ``tag/description`` argument split at its first slash.

    Without a slash the whole text is the description and there is no tag.
    """

    description: str
    tag: str | None = None

    FORMAT_HINT = (
        "`tag/description` or `description`, where everything after the first "
        "forward slash is the description"
    )

    @classmethod
    def parse(cls, text: str) -> "Description":
        """Split ``text`` into tag and description.

        Raises
        ------
        FormatError
            If the description part is empty.
        """
        tag, sep, description = text.partition("/")
        if not sep:
            tag, description = "", text
        if not description.strip():
            raise FormatError("description", text, cls.FORMAT_HINT)
        return cls(description=description, tag=tag or None)

    def __str__(self) -> str:
        return f"{self.tag}/{self.description}" if self.tag else self.description


# ---------------------------------------------------------------------------
# Punch
# ---------------------------------------------------------------------------


@dataclass
class Punch:
    """One tracked interval.

    Parameters
    ----------
    id:
        Slot index assigned at load time.  Only stable within one run.
    date:
        Local date the punch was opened; never changes.
    time_in:
        Start time.
    time_out:
        End time, ``None`` while the punch is open.
    tag:
        Copy of the tag resolved at load time.
    description:
        Free text, at most 80 UTF-8 bytes.
    """

    id: int
    date: Date
    time_in: Time
    time_out: Time | None = None
    tag: Tag | None = None
    description: str | None = None

    @property
    def is_open(self) -> bool:
        return self.time_out is None

    @property
    def sort_key(self) -> tuple[Date, Time]:
        return (self.date, self.time_in)

    def duration(self) -> int | None:
        """Return the length in minutes, or ``None`` while open."""
        if self.time_out is None:
            return None
        return self.time_out - self.time_in

    def close(self, time: Time, tag: Tag | None = None, description: str | None = None) -> None:
        """Close the punch at ``time``.

        When ``description`` is given it replaces the missing description
        and ``tag`` replaces the tag.  Nothing is modified if a check fails.

        Raises
        ------
        AlreadyClosedError
            If the punch is already closed.
        OutBeforeInError
            If ``time`` is before the in time.
        DescriptionAlreadySpecifiedError
            If a description is given but the punch already has one.
        DescriptionNotSpecifiedError
            If the punch would be closed without a description.
        TextFieldError
            If the new description does not fit its field.
        """
        if self.time_out is not None:
            raise AlreadyClosedError()
        if time < self.time_in:
            raise OutBeforeInError(self.time_in, time)
        new_tag, new_description = self.tag, self.description
        if description is not None:
            if self.description is not None:
                raise DescriptionAlreadySpecifiedError(
                    tag.text if tag is not None else "", description
                )
            new_tag, new_description = tag, description
        if not new_description:
            raise DescriptionNotSpecifiedError()
        codec.encode_text("pnch", new_description, DESCRIPTION_SIZE)
        self.tag, self.description = new_tag, new_description
        self.time_out = time

    # ------------------------------------------------------------------
    # Binary form
    # ------------------------------------------------------------------

    def to_bytes(self) -> bytes:
        description = self.description or ""
        return b"".join(
            (
                codec.encode_date(self.date),
                codec.encode_time(self.time_in),
                codec.encode_time(self.time_out),
                codec.encode_tag_id(self.tag.id if self.tag is not None else None),
                codec.encode_text("pnch", description, DESCRIPTION_SIZE),
            )
        )

    @classmethod
    def from_bytes(cls, punch_id: int, chunk: bytes, tags: TagTable) -> "Punch":
        """Decode a 92-byte record, resolving its tag through ``tags``."""
        codec.check_length("pnch", chunk, PUNCH_SIZE)
        date_raw, in_raw, out_raw, tag_id_raw, description_raw = _RECORD_STRUCT.unpack(chunk)
        # The in time has no absent form, so it is read without the sentinel check.
        time_in = Time(*codec.TIME_STRUCT.unpack(in_raw))
        time_out = codec.decode_time(out_raw)
        tag_id = codec.decode_tag_id(tag_id_raw)
        description = codec.decode_text("pnch", description_raw)

        tag = None
        if tag_id is not None:
            tag = tags.get(tag_id)
            if tag is None:
                logger.warning("Pnch #%d references unknown tag id %d", punch_id, tag_id)
        return cls(
            id=punch_id,
            date=codec.decode_date(date_raw),
            time_in=time_in,
            time_out=time_out,
            tag=tag,
            description=description or None,
        )

    def __str__(self) -> str:
        if self.time_out is None:
            span = f"Since {self.time_in}"
        else:
            span = f"From {self.time_in} to {self.time_out}"
        tag = str(self.tag) if self.tag is not None else "[---]"
        return f"#{self.id} > {span} {tag} {self.description or 'no description'}"


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


@dataclass
class PunchStore:
    """Chronologically ordered collection of punches."""

    punches: list[Punch] = field(default_factory=list)
    dirty: bool = False

    @classmethod
    def load(cls, storage: "BlobStorage", tags: TagTable) -> "PunchStore":
        """Decode the punches blob and sort it by ``(date, in)``.

        Ids are slot indexes in file order, assigned before sorting.
        """
        blob = storage.load(PUNCHES_FILE_NAME)
        punches = [
            Punch.from_bytes(punch_id, chunk, tags)
            for punch_id, chunk in enumerate(codec.iter_chunks(blob, PUNCH_SIZE))
        ]
        punches.sort(key=lambda punch: punch.sort_key)
        logger.debug("Loaded %d pnch(s)", len(punches))
        return cls(punches)

    def next_id(self) -> int:
        return len(self.punches)

    def punch_in(self, punch: Punch) -> None:
        """Append an open punch.

        Raises
        ------
        AlreadyOpenError
            If the last punch is still open.
        """
        last = self.get_last()
        if last is not None and last.is_open:
            raise AlreadyOpenError()
        # Validate the record before it joins the store.
        punch.to_bytes()
        self.punches.append(punch)
        self.dirty = True

    def get(self, punch_id: int) -> Punch | None:
        for punch in self.punches:
            if punch.id == punch_id:
                return punch
        return None

    def get_last(self) -> Punch | None:
        return self.punches[-1] if self.punches else None

    def edit(
        self,
        punch_id: int | None = None,
        *,
        time_in: Time | None = None,
        time_out: Time | None = None,
        tag: Tag | None = None,
        description: str | None = None,
    ) -> Punch:
        """Overwrite fields of a punch without lifecycle checks.

        ``punch_id`` of ``None`` targets the last punch.  The tag is only
        replaced together with a new description.

        Raises
        ------
        PunchNotFoundError
            If no punch matches.
        """
        punch = self.get_last() if punch_id is None else self.get(punch_id)
        if punch is None:
            raise PunchNotFoundError(punch_id)
        if time_out is not None:
            punch.time_out = time_out
        if time_in is not None:
            punch.time_in = time_in
        if description is not None:
            punch.tag = tag
            punch.description = description
        self.dirty = True
        return punch

    def to_bytes(self) -> bytes:
        return b"".join(punch.to_bytes() for punch in self.punches)

    def save(self, storage: "BlobStorage") -> None:
        """Rewrite the whole blob in current in-memory order."""
        storage.save(PUNCHES_FILE_NAME, self.to_bytes())
        self.dirty = False
        logger.debug("Saved %d pnch(s)", len(self.punches))

    def __len__(self) -> int:
        return len(self.punches)

    def __iter__(self) -> Iterator[Punch]:
        return iter(self.punches)
