"""MailTransport protocol — services depend on this, not the concrete implementation."""

from dataclasses import dataclass, field
from typing import Any, Protocol


class MailDeliveryError(Exception):
    """The transport could not hand the message to the mail provider."""


@dataclass(frozen=True)
class MailMessage:
    to: str
    subject: str
    template: str
    context: dict[str, Any] = field(default_factory=dict)


class MailTransport(Protocol):
    async def send(self, message: MailMessage) -> None:
        """Deliver *message* or raise MailDeliveryError."""
        ...
