"""Error types for pnch.

Every failure the core can produce is a ``PnchError``.  Each error carries a
short human-readable message and an optional hint that the CLI prints on a
separate line, so that a failing command always tells the user what to run
next.

Hierarchy
---------
::

    PnchError
    ├── FormatError          bad Period/Date/Time/Description/bool text
    ├── CodecError           binary records that cannot be encoded/decoded
    │   ├── WrongByteLengthError
    │   ├── BadStringError
    │   ├── TextFieldError
    │   └── SentinelError
    ├── StateError           punch lifecycle and query violations
    │   ├── AlreadyOpenError
    │   ├── AlreadyClosedError
    │   ├── OutBeforeInError
    │   ├── DescriptionAlreadySpecifiedError
    │   ├── DescriptionNotSpecifiedError
    │   ├── NoOpenPunchError
    │   ├── PunchNotFoundError
    │   ├── IncompleteRangeError
    │   └── InvalidConfigKeyError
    └── StorageError         the backing directory or file is unusable
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pnch.clock import Time

_BUG_HINT = "This is probably a bug, you should report it to the bug tracker."
_OPEN_HINT = 'To open a new pnch, use `pnch in "my tag/my description"`'


class PnchError(Exception):
    """Base class of every error raised by pnch.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    hint:
        Optional suggestion on how to fix it.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Text grammars
# ---------------------------------------------------------------------------


class FormatError(PnchError, ValueError):
    """A value was given in the wrong textual format.

    Parameters
    ----------
    kind:
        What was being parsed, e.g. ``"date"``.
    found:
        The offending input.
    format_hint:
        Description of the expected format.
    """

    def __init__(self, kind: str, found: str, format_hint: str) -> None:
        super().__init__(
            f"The {kind} was specified with the wrong format. The given value was `{found}`",
            hint=f"The format should be {format_hint}",
        )
        self.kind = kind
        self.found = found


# ---------------------------------------------------------------------------
# Binary codec
# ---------------------------------------------------------------------------


class CodecError(PnchError):
    """A record could not be converted to or from its binary form."""


class WrongByteLengthError(CodecError):
    """A chunk does not have the fixed width of its entity."""

    def __init__(self, entity: str, expected: int, actual: int) -> None:
        super().__init__(
            f"Could not decode the {entity}. Expected {expected} bytes, but got {actual} bytes."
        )
        self.entity = entity
        self.expected = expected
        self.actual = actual


class BadStringError(CodecError):
    """A stored text field is not valid UTF-8."""

    def __init__(self, entity: str) -> None:
        super().__init__(
            f"Could not decode a string from the {entity} database.",
            hint=_BUG_HINT,
        )
        self.entity = entity


class TextFieldError(CodecError):
    """A text value cannot be stored in its fixed-width field."""

    def __init__(self, entity: str, reason: str) -> None:
        super().__init__(f"Could not encode the {entity}: {reason}.")
        self.entity = entity
        self.reason = reason


class SentinelError(CodecError):
    """A numeric value is reserved or does not fit its field."""

    def __init__(self, entity: str, reason: str) -> None:
        super().__init__(f"Could not encode the {entity}: {reason}.")
        self.entity = entity
        self.reason = reason


class CorruptRecordError(CodecError):
    """A stored record decodes but holds a value it can never have been written with."""

    def __init__(self, entity: str, reason: str) -> None:
        super().__init__(f"Could not decode the {entity}: {reason}.", hint=_BUG_HINT)
        self.entity = entity
        self.reason = reason


# ---------------------------------------------------------------------------
# Lifecycle / state violations
# ---------------------------------------------------------------------------


class StateError(PnchError):
    """An operation is not allowed in the current state of the store."""


class AlreadyOpenError(StateError):
    def __init__(self) -> None:
        super().__init__(
            "A pnch is already open.",
            hint="Before pnching in, close the pnch with `pnch out`",
        )


class PunchBeforeLastError(StateError):
    def __init__(self, time_in: "Time", last_in: "Time") -> None:
        super().__init__(
            f"A new pnch cannot start before the last pnch. (in: {time_in}, last in: {last_in})",
            hint="To change the times of an existing pnch, use `pnch edit --in ... --out ...`",
        )
        self.time_in = time_in
        self.last_in = last_in


class AlreadyClosedError(StateError):
    def __init__(self) -> None:
        super().__init__(
            "The entry is already closed.",
            hint="To update the out time of an entry, use `pnch edit --out ...`",
        )


class OutBeforeInError(StateError):
    def __init__(self, time_in: "Time", time_out: "Time") -> None:
        super().__init__(
            f"The `out` time cannot be before the `in` time. (in: {time_in}, out: {time_out})"
        )
        self.time_in = time_in
        self.time_out = time_out


class DescriptionAlreadySpecifiedError(StateError):
    def __init__(self, tag: str, description: str) -> None:
        super().__init__(
            "A tag and description are already linked to the entry.\n"
            f"    tag: {tag}\n    description: {description}",
            hint="To edit the current entry, use `pnch edit tag/description`",
        )


class DescriptionNotSpecifiedError(StateError):
    def __init__(self) -> None:
        super().__init__(
            "No description or tag were specified.",
            hint=(
                "To add a tag or description to the current entry, either use "
                "`pnch edit tag/description` or `pnch out tag/description`.\n"
                'You can also add a description while pnching in with `pnch in "tag/description"`.'
            ),
        )


class NoOpenPunchError(StateError):
    def __init__(self) -> None:
        super().__init__("No pnch seems to be opened.", hint=_OPEN_HINT)


class PunchNotFoundError(StateError):
    def __init__(self, punch_id: int | None = None) -> None:
        message = "No pnch exists." if punch_id is None else f"No pnch exists with the id {punch_id}."
        super().__init__(message, hint=_OPEN_HINT if punch_id is None else "List ids with `pnch ls`")
        self.punch_id = punch_id


class IncompleteRangeError(StateError):
    def __init__(self) -> None:
        super().__init__(
            "The specified range was not complete.",
            hint="When defining a range both the `--from DATE` and `--to DATE` should be specified.",
        )


class InvalidConfigKeyError(StateError):
    def __init__(self, key: str, valid_keys: tuple[str, ...]) -> None:
        super().__init__(
            f"`{key}` is not a valid config key.",
            hint="The key should be one of " + ", ".join(f"`{k}`" for k in valid_keys),
        )
        self.key = key


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


class StorageError(PnchError):
    """The backing directory or file could not be read or written.

    The message only names the action and the target; the underlying
    ``OSError`` is available as ``__cause__``.
    """

    def __init__(self, action: str, target: str) -> None:
        super().__init__(f"Could not {action} the {target} database.", hint=_BUG_HINT)
        self.action = action
        self.target = target
