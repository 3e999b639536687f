"""The state of one pnch run: tags, punches and config loaded together.

A command loads a ``Ledger``, calls one or more operations on it, and then
calls ``save()``.  Operations only mutate memory; if any of them raises,
the caller skips ``save()`` and nothing reaches storage.

Usage
-----
::

    from pnch.clock import SystemClock
    from pnch.ledger import Ledger
    from pnch.punches import Description
    from pnch.storage import DirectoryStorage

    ledger = Ledger.load(DirectoryStorage.default(), SystemClock())
    ledger.punch_in(Description.parse("BUG-1/fix the parser"))
    ledger.save()
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from pnch.clock import Clock, Time
from pnch.config import Config
from pnch.errors import NoOpenPunchError, PunchBeforeLastError
from pnch.punches import Description, Punch, PunchStore
from pnch.query import PunchQuery, filter_punches
from pnch.storage import BlobStorage
from pnch.tags import Tag, TagTable

logger = logging.getLogger(__name__)


@dataclass
class Ledger:
    """Explicit bundle of the three stores for a single run.

    Parameters
    ----------
    storage:
        Where the stores are loaded from and saved to.
    clock:
        Source of today's date and the current time.
    tags, punches, config:
        The loaded stores.
    """

    storage: BlobStorage
    clock: Clock
    tags: TagTable
    punches: PunchStore
    config: Config

    @classmethod
    def load(cls, storage: BlobStorage, clock: Clock) -> "Ledger":
        """Load tags first, then punches (which resolve tags), then config."""
        tags = TagTable.load(storage)
        punches = PunchStore.load(storage, tags)
        config = Config.load(storage)
        return cls(storage=storage, clock=clock, tags=tags, punches=punches, config=config)

    def _resolve(self, entry: Description | None) -> tuple[Tag | None, str | None]:
        if entry is None:
            return None, None
        tag = self.tags.get_or_insert(entry.tag) if entry.tag is not None else None
        return tag, entry.description

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def punch_in(self, entry: Description | None = None, at: Time | None = None) -> Punch:
        """Open a new punch dated today.

        Raises
        ------
        AlreadyOpenError
            If the last punch is still open.
        PunchBeforeLastError
            If the new punch would sort before the last punch.
        """
        date = self.clock.today()
        time_in = at if at is not None else self.clock.now()
        last = self.punches.get_last()
        if last is not None and not last.is_open and (date, time_in) < last.sort_key:
            raise PunchBeforeLastError(time_in, last.time_in)
        tag, description = self._resolve(entry)
        punch = Punch(
            id=self.punches.next_id(),
            date=date,
            time_in=time_in,
            tag=tag,
            description=description,
        )
        self.punches.punch_in(punch)
        logger.debug("Pnched in: %s", punch)
        return punch

    def punch_out(self, entry: Description | None = None, at: Time | None = None) -> Punch:
        """Close the last punch.

        Raises
        ------
        NoOpenPunchError
            If there is no punch at all.
        """
        punch = self.punches.get_last()
        if punch is None:
            raise NoOpenPunchError()
        tag, description = self._resolve(entry)
        punch.close(at if at is not None else self.clock.now(), tag, description)
        self.punches.dirty = True
        logger.debug("Pnched out: %s", punch)
        return punch

    def edit(
        self,
        entry: Description | None = None,
        punch_id: int | None = None,
        time_in: Time | None = None,
        time_out: Time | None = None,
    ) -> Punch:
        """Overwrite fields of ``punch_id`` (or the last punch)."""
        tag, description = self._resolve(entry)
        return self.punches.edit(
            punch_id, time_in=time_in, time_out=time_out, tag=tag, description=description
        )

    def set_config(self, key: str, value: str) -> None:
        self.config.try_set(key, value)

    def query(self, query: PunchQuery) -> list[Punch]:
        """Return the punches matching ``query``; defaults to the configured period."""
        return filter_punches(
            self.punches,
            query,
            today=self.clock.today(),
            default_period=self.config.ls_default_period,
        )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> list[str]:
        """Rewrite every store changed in this run and return their names.

        All records are encoded before anything is written, so an encoding
        failure leaves storage untouched.
        """
        stores: dict[str, TagTable | PunchStore | Config] = {
            "tags": self.tags,
            "pnchs": self.punches,
            "config": self.config,
        }
        pending = {name: store for name, store in stores.items() if store.dirty}
        for store in pending.values():
            store.to_bytes()
        for name, store in pending.items():
            store.save(self.storage)
            logger.debug("Saved the %s store", name)
        return list(pending)
