"""pnch: track your time from the command line.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import pnch

    ledger = pnch.open_ledger()
    ledger.punch_in(pnch.Description.parse("BUG-1/fix the parser"))
    ledger.save()

    recent = ledger.query(pnch.PunchQuery(last=pnch.Period.weeks(2)))
    print(pnch.export.to_csv(recent))
"""
from __future__ import annotations

import os

from pnch import export
from pnch.clock import Clock, Date, FixedClock, Period, SystemClock, Time
from pnch.config import Config
from pnch.errors import PnchError
from pnch.ledger import Ledger
from pnch.punches import Description, Punch, PunchStore
from pnch.query import PunchQuery, filter_punches
from pnch.storage import BlobStorage, DirectoryStorage, MemoryStorage
from pnch.tags import Tag, TagTable

__version__: str = "0.1.0"


def open_ledger(
    data_dir: str | os.PathLike[str] | None = None,
    clock: Clock | None = None,
) -> Ledger:
    """Load the ledger stored in ``data_dir`` (default: the user app directory).

    Parameters
    ----------
    data_dir:
        Directory holding the databases.
    clock:
        Clock used for new pnchs and relative filters; the system clock
        by default.

    Raises
    ------
    pnch.errors.StorageError
        If a database cannot be read.
    pnch.errors.CodecError
        If a database is corrupt.
    """
    storage = DirectoryStorage(data_dir) if data_dir is not None else DirectoryStorage.default()
    return Ledger.load(storage, clock if clock is not None else SystemClock())


__all__ = [
    "__version__",
    "BlobStorage",
    "Clock",
    "Config",
    "Date",
    "Description",
    "DirectoryStorage",
    "FixedClock",
    "Ledger",
    "MemoryStorage",
    "Period",
    "PnchError",
    "Punch",
    "PunchQuery",
    "PunchStore",
    "SystemClock",
    "Tag",
    "TagTable",
    "Time",
    "export",
    "filter_punches",
    "open_ledger",
]
