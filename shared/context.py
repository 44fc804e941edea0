"""
Per-request context passed explicitly into service calls.

The HTTP middleware builds one RequestContext per request and stores it on
``request.state``; routes hand it to services as ``ctx=``. Services log
through ``ctx.log`` so every event carries the request id.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Optional

from structlog.stdlib import BoundLogger

from shared.logging import get_logger


def generate_request_id() -> str:
    """Generate a unique request ID for correlation."""
    return f"req_{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class RequestContext:
    request_id: str
    log: BoundLogger = field(repr=False)

    @classmethod
    def new(
        cls, request_id: Optional[str] = None, logger_name: str = "shortener.request"
    ) -> "RequestContext":
        request_id = request_id or generate_request_id()
        return cls(
            request_id=request_id,
            log=get_logger(logger_name).bind(request_id=request_id),
        )
