"""Fixed-width little-endian field codecs shared by every stored entity.

Each entity (``Tag``, ``Punch``, ``Config``) owns its record layout and
exposes ``to_bytes()`` / ``from_bytes()``; this module provides the field
helpers they are built from.

Layouts
-------
=========  =======  ==========================================
Field      Bytes    Encoding
=========  =======  ==========================================
Date       4        year u16, month u8, day u8
Time       2        hours u8, minutes u8; ``FF FF`` = absent
Tag id     4        u32; ``FF FF FF FF`` = no tag
Text       n        UTF-8, zero-padded to ``n`` bytes
=========  =======  ==========================================

Text fields must not contain NUL bytes: decoding strips zeros, so an
embedded NUL could not survive a round trip and is rejected on encode.
"""
from __future__ import annotations

import struct
from collections.abc import Iterator
from typing import Final

from pnch.clock import Date, Time
from pnch.errors import BadStringError, SentinelError, TextFieldError, WrongByteLengthError

DATE_STRUCT: Final[struct.Struct] = struct.Struct("<HBB")
TIME_STRUCT: Final[struct.Struct] = struct.Struct("<BB")
U32_STRUCT: Final[struct.Struct] = struct.Struct("<I")

DATE_SIZE: Final[int] = DATE_STRUCT.size
TIME_SIZE: Final[int] = TIME_STRUCT.size
TAG_ID_SIZE: Final[int] = U32_STRUCT.size

U32_MAX: Final[int] = 0xFFFF_FFFF
NO_TAG_ID: Final[int] = U32_MAX
NO_TIME: Final[bytes] = b"\xff\xff"


def check_length(entity: str, chunk: bytes, expected: int) -> None:
    """Raise ``WrongByteLengthError`` unless ``len(chunk) == expected``."""
    if len(chunk) != expected:
        raise WrongByteLengthError(entity, expected, len(chunk))


def iter_chunks(blob: bytes, width: int) -> Iterator[bytes]:
    """Split ``blob`` into consecutive ``width``-byte chunks.

    A trailing partial chunk is yielded as-is so that decoding it fails
    with a length error instead of being silently dropped.
    """
    for offset in range(0, len(blob), width):
        yield blob[offset : offset + width]


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------


def encode_text(entity: str, text: str, width: int) -> bytes:
    """Encode ``text`` as UTF-8 zero-padded to ``width`` bytes."""
    raw = text.encode("utf-8")
    if b"\x00" in raw:
        raise TextFieldError(entity, "text must not contain NUL characters")
    if len(raw) > width:
        raise TextFieldError(entity, f"text is {len(raw)} bytes long, the maximum is {width} bytes")
    return raw.ljust(width, b"\x00")


def decode_text(entity: str, raw: bytes) -> str:
    try:
        return raw.replace(b"\x00", b"").decode("utf-8")
    except UnicodeDecodeError:
        raise BadStringError(entity) from None


# ---------------------------------------------------------------------------
# Date / Time
# ---------------------------------------------------------------------------


def encode_date(value: Date) -> bytes:
    try:
        return DATE_STRUCT.pack(value.year, value.month, value.day)
    except struct.error:
        raise SentinelError("date", f"{value} does not fit its field") from None


def decode_date(chunk: bytes) -> Date:
    check_length("date", chunk, DATE_SIZE)
    return Date(*DATE_STRUCT.unpack(chunk))


def encode_time(value: Time | None) -> bytes:
    """Encode a time; ``None`` writes the absent pattern."""
    if value is None:
        return NO_TIME
    try:
        raw = TIME_STRUCT.pack(value.hours, value.minutes)
    except struct.error:
        raise SentinelError("time", f"{value} does not fit its field") from None
    if raw == NO_TIME:
        raise SentinelError("time", "255:255 is reserved for an absent time")
    return raw


def decode_time(chunk: bytes) -> Time | None:
    check_length("time", chunk, TIME_SIZE)
    if chunk == NO_TIME:
        return None
    return Time(*TIME_STRUCT.unpack(chunk))


# ---------------------------------------------------------------------------
# Tag ids
# ---------------------------------------------------------------------------


def encode_tag_id(tag_id: int | None) -> bytes:
    """Encode a tag reference; ``None`` writes the no-tag sentinel."""
    if tag_id is None:
        return U32_STRUCT.pack(NO_TAG_ID)
    if not 0 <= tag_id < NO_TAG_ID:
        raise SentinelError("tag", f"id {tag_id} is reserved or out of range")
    return U32_STRUCT.pack(tag_id)


def decode_tag_id(chunk: bytes) -> int | None:
    check_length("tag id", chunk, TAG_ID_SIZE)
    (tag_id,) = U32_STRUCT.unpack(chunk)
    return None if tag_id == NO_TAG_ID else tag_id
