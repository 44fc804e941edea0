"""
Index wiring for every collection, run once at application startup.

The TTL index on `verification.created_at` is what expires verification
codes; no application code checks code age.
"""

from __future__ import annotations

from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import OperationFailure

from schemas.models.url import URLS_COLLECTION
from schemas.models.user import USERS_COLLECTION
from schemas.models.verification import VERIFICATION_COLLECTION
from shared.logging import get_logger

log = get_logger(__name__)


async def ensure_indexes(db: AsyncDatabase, code_ttl_seconds: int) -> None:
    users = db[USERS_COLLECTION]
    await users.create_index([("username", ASCENDING)], unique=True)
    await users.create_index([("email", ASCENDING)], unique=True)

    codes = db[VERIFICATION_COLLECTION]
    await codes.create_index([("email", ASCENDING)], unique=True)
    try:
        await codes.create_index(
            [("created_at", ASCENDING)], expireAfterSeconds=code_ttl_seconds
        )
    except OperationFailure as e:
        # An existing TTL index with another expireAfterSeconds: update it in place
        log.warning("verification_ttl_index_conflict", error=str(e))
        await db.command(
            {
                "collMod": VERIFICATION_COLLECTION,
                "index": {
                    "keyPattern": {"created_at": 1},
                    "expireAfterSeconds": code_ttl_seconds,
                },
            }
        )

    urls = db[URLS_COLLECTION]
    await urls.create_index([("shorten", ASCENDING)], unique=True)
    await urls.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])

    log.info("mongo_indexes_ensured", code_ttl_seconds=code_ttl_seconds)
