"""CLI package.

The ``cli`` sub-package contains the Click application and all command
implementations. Commands go through ``pnch.ledger.Ledger`` and never
touch the storage files directly.
"""
from __future__ import annotations
