"""Shared types for the ledgerdb package."""

from typing import Any

Row = dict[str, Any]
Params = tuple | list | dict
