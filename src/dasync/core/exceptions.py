"""dasync exception hierarchy.

Every error raised by the package carries an
[ErrorKind][dasync.core.exceptions.ErrorKind] tag. The sync loop inspects
the tag through [error_kind()][dasync.core.exceptions.error_kind] to decide
between retrying, swallowing, and terminating, instead of discriminating on
exception types.

Exception hierarchy:

```text
DaSyncError (base -- never raised directly)         kind
├── ConfigurationError   -- bad YAML, missing keys   FATAL
├── MissingElementError  -- referenced record absent MISSING_ELEMENT
├── TransportError       -- remote call failed       TRANSPORT
├── PayloadError         -- remote JSON fails schema FATAL
└── DatabaseError        -- pool/store failures      FATAL
    ├── ConnectionPoolError -- transient             TRANSPORT
    └── QueryError          -- permanent             FATAL
```

Exceptions that are not ``DaSyncError`` subclasses classify as ``FATAL``.

See Also:
    [BaseService.run_forever()][dasync.core.base_service.BaseService.run_forever]:
        Applies the retry/swallow/terminate policy per kind.
"""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar


class ErrorKind(StrEnum):
    """Failure classification consumed by the sync loop.

    Attributes:
        MISSING_ELEMENT: An expected referenced record is absent. Always
            retried on the next pass; never fatal.
        TRANSPORT: A remote or connection-level call failed. Retried up to
            the consecutive failure limit.
        FATAL: Anything else. Swallowed only while shutting down or when
            ``dangerously_catch_all_errors`` is set.
    """

    MISSING_ELEMENT = "missing_element"
    TRANSPORT = "transport"
    FATAL = "fatal"


class DaSyncError(Exception):
    """Base exception for all dasync errors.

    Never raised directly -- always use a specific subclass.

    Attributes:
        kind: Classification used by the sync loop.
        code: Optional machine-readable code included in error logs.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.FATAL

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class ConfigurationError(DaSyncError):
    """Invalid or missing configuration (YAML, env vars, CLI flags)."""


class MissingElementError(DaSyncError):
    """An expected element (e.g. an enqueue entry) could not be found.

    Raised when the local store has not yet ingested a record the current
    window depends on. The window is retried unchanged on the next pass
    because the checkpoint did not advance.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.MISSING_ELEMENT


class TransportError(DaSyncError):
    """A remote data-availability call did not succeed.

    Most call sites convert transport failures into sentinel values; this
    exception is only raised where a sentinel would be mistaken for real
    data (the latest batch index query).
    """

    kind: ClassVar[ErrorKind] = ErrorKind.TRANSPORT


class PayloadError(DaSyncError):
    """The remote layer answered with JSON that does not match the expected schema."""


class DatabaseError(DaSyncError):
    """Base for all database-related errors."""


class ConnectionPoolError(DatabaseError):
    """Transient database error: pool exhausted, connection refused, network blip.

    Callers may retry after a backoff.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.TRANSPORT


class QueryError(DatabaseError):
    """Permanent database error: bad SQL, constraint violation, data integrity.

    Callers should NOT retry -- the query itself is wrong.
    """


def error_kind(exc: BaseException) -> ErrorKind:
    """Return the classification of *exc* (``FATAL`` for foreign exceptions)."""
    if isinstance(exc, DaSyncError):
        return exc.kind
    return ErrorKind.FATAL
