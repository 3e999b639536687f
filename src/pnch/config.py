"""User preferences.

The config is a single 5-byte record::

    print_color(1) | ls_default_period in days (u32 LE, 4)

A missing or empty blob yields the defaults.  The period is stored as a
day count, so a loaded config always carries a ``Period`` in days.
"""
from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from pnch import codec
from pnch.clock import Period
from pnch.errors import FormatError, InvalidConfigKeyError, SentinelError

if TYPE_CHECKING:
    from pnch.storage import BlobStorage

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME: Final[str] = "config.db"

_CONFIG_STRUCT: Final[struct.Struct] = struct.Struct("<?I")

PRINT_COLOR_KEY: Final[str] = "print-color"
LS_DEFAULT_PERIOD_KEY: Final[str] = "ls-default-period"
CONFIG_KEYS: Final[tuple[str, ...]] = (PRINT_COLOR_KEY, LS_DEFAULT_PERIOD_KEY)

_BOOL_VALUES: Final[dict[str, bool]] = {"true": True, "false": False}


@dataclass
class Config:
    """Preferences that persist between runs.

    Parameters
    ----------
    print_color:
        Whether terminal output is colorized.
    ls_default_period:
        Window listed by ``pnch ls`` when no date filter is given.
    """

    print_color: bool = True
    ls_default_period: Period = field(default_factory=lambda: Period.days(14))
    dirty: bool = field(default=False, compare=False)

    SIZE = _CONFIG_STRUCT.size

    @classmethod
    def from_bytes(cls, chunk: bytes) -> "Config":
        codec.check_length("config", chunk, cls.SIZE)
        print_color, days = _CONFIG_STRUCT.unpack(chunk)
        return cls(print_color=print_color, ls_default_period=Period.days(days))

    def to_bytes(self) -> bytes:
        days = self.ls_default_period.as_days()
        if days > codec.U32_MAX:
            raise SentinelError("config", f"a period of {days} days does not fit its field")
        return _CONFIG_STRUCT.pack(self.print_color, days)

    @classmethod
    def load(cls, storage: "BlobStorage") -> "Config":
        """Load the stored config, or the defaults if none was saved."""
        blob = storage.load(CONFIG_FILE_NAME)
        if not blob:
            logger.debug("No stored config, using defaults")
            return cls()
        return cls.from_bytes(blob)

    def save(self, storage: "BlobStorage") -> None:
        storage.save(CONFIG_FILE_NAME, self.to_bytes())
        self.dirty = False

    def try_set(self, key: str, value: str) -> None:
        """Set a preference from its textual key and value.

        Raises
        ------
        InvalidConfigKeyError
            If ``key`` is not one of ``CONFIG_KEYS``.
        FormatError
            If ``value`` cannot be parsed for that key.
        """
        if key == LS_DEFAULT_PERIOD_KEY:
            period = Period.parse(value)
            if period.as_days() > codec.U32_MAX:
                raise FormatError("period", value, Period.FORMAT_HINT)
            self.ls_default_period = Period.days(period.as_days())
        elif key == PRINT_COLOR_KEY:
            parsed = _BOOL_VALUES.get(value)
            if parsed is None:
                raise FormatError("bool", value, "one of `true` or `false`")
            self.print_color = parsed
        else:
            raise InvalidConfigKeyError(key, CONFIG_KEYS)
        self.dirty = True
        logger.debug("Config %s set to %r", key, value)
