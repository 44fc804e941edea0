"""
Helpers shared by the MongoDB repositories.
"""

from __future__ import annotations

from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError

from errors import DuplicateKeyError


def duplicate_field(exc: MongoDuplicateKeyError) -> str:
    """Return the name of the field whose unique index rejected the write.

    Reads ``keyPattern`` from the server error; falls back to ``keyValue`` and
    finally to the generic ``"field"``.
    """
    details = exc.details or {}
    for key in ("keyPattern", "keyValue"):
        pattern = details.get(key)
        if pattern:
            return next(iter(pattern))
    return "field"


def as_duplicate_key_error(exc: MongoDuplicateKeyError) -> DuplicateKeyError:
    return DuplicateKeyError(duplicate_field(exc))
