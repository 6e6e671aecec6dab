"""Error taxonomy for the sync cycle."""

from __future__ import annotations


class SyncError(Exception):
    """Base sync error. Aborts the current cycle; never fatal to the scheduler."""

    kind = "sync"


class TransportError(SyncError):
    """Feed unreachable or answered with a non-success status."""

    kind = "transport"


class ParseError(SyncError):
    """Feed payload is structurally invalid."""

    kind = "parse"


class QueryError(SyncError):
    """A read query against the store failed."""

    kind = "query"


class InsertError(SyncError):
    """The store rejected a bulk insert."""

    kind = "insert"
