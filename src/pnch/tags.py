"""Tags and the tag-interning table.

A tag is a short label that groups punches.  Its id is its index in the
table at creation time; the table only ever grows, so ids never change.
Punches hold copies of ``Tag`` values, never references into the table.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from pnch import codec
from pnch.errors import CorruptRecordError

if TYPE_CHECKING:
    from pnch.storage import BlobStorage

logger = logging.getLogger(__name__)

TAGS_FILE_NAME: Final[str] = "tags.db"


@dataclass(frozen=True, slots=True)
class Tag:
    """An interned label.

    Parameters
    ----------
    id:
        Index of the tag in the table.  ``0xFFFFFFFF`` is reserved.
    text:
        Label text, at most 24 UTF-8 bytes.
    """

    id: int
    text: str

    TEXT_SIZE = 24
    SIZE = codec.TAG_ID_SIZE + TEXT_SIZE

    def to_bytes(self) -> bytes:
        return codec.encode_tag_id(self.id) + codec.encode_text("tag", self.text, self.TEXT_SIZE)

    @classmethod
    def from_bytes(cls, chunk: bytes) -> "Tag":
        """Decode a 28-byte record.

        Raises
        ------
        WrongByteLengthError
            If ``chunk`` is not exactly 28 bytes.
        BadStringError
            If the text is not valid UTF-8.
        CorruptRecordError
            If the stored id is the no-tag sentinel.
        """
        codec.check_length("tag", chunk, cls.SIZE)
        (tag_id,) = codec.U32_STRUCT.unpack(chunk[: codec.TAG_ID_SIZE])
        if tag_id == codec.NO_TAG_ID:
            raise CorruptRecordError("tag", "its id is the reserved no-tag value")
        return cls(tag_id, codec.decode_text("tag", chunk[codec.TAG_ID_SIZE :]))

    def __str__(self) -> str:
        return f"[{self.text}]"


class TagTable:
    """Append-only table of tags, indexed by id.

    Parameters
    ----------
    tags:
        Initial contents, in id order.
    """

    def __init__(self, tags: list[Tag] | None = None) -> None:
        self._tags: list[Tag] = list(tags) if tags is not None else []
        self.dirty: bool = False

    @classmethod
    def load(cls, storage: "BlobStorage") -> "TagTable":
        """Decode every record of the tags blob; any bad record fails the load."""
        blob = storage.load(TAGS_FILE_NAME)
        tags = [Tag.from_bytes(chunk) for chunk in codec.iter_chunks(blob, Tag.SIZE)]
        for slot, tag in enumerate(tags):
            if tag.id != slot:
                raise CorruptRecordError("tag", f"record {slot} holds the id {tag.id}")
        logger.debug("Loaded %d tag(s)", len(tags))
        return cls(tags)

    def get_or_insert(self, text: str) -> Tag:
        """Return the tag named ``text``, creating it if needed."""
        for tag in self._tags:
            if tag.text == text:
                return tag
        tag = Tag(id=len(self._tags), text=text)
        # Validate the record now so a bad tag never reaches the table.
        tag.to_bytes()
        self._tags.append(tag)
        self.dirty = True
        logger.debug("Allocated tag %r with id %d", text, tag.id)
        return tag

    def get(self, tag_id: int) -> Tag | None:
        if 0 <= tag_id < len(self._tags):
            return self._tags[tag_id]
        return None

    def to_bytes(self) -> bytes:
        return b"".join(tag.to_bytes() for tag in self._tags)

    def save(self, storage: "BlobStorage") -> None:
        storage.save(TAGS_FILE_NAME, self.to_bytes())
        self.dirty = False
        logger.debug("Saved %d tag(s)", len(self._tags))

    def __len__(self) -> int:
        return len(self._tags)

    def __iter__(self) -> Iterator[Tag]:
        return iter(self._tags)
