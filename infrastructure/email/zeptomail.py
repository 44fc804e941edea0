"""ZeptoMail implementation of MailTransport.

Renders ``templates/<template>.html`` from this package (and ``<template>.txt``
as the plain-text part) with Jinja2 and POSTs the result to the ZeptoMail HTTP API.
"""

import os
from typing import Optional

from jinja2 import (
    Environment,
    FileSystemLoader,
    TemplateError,
    TemplateNotFound,
    select_autoescape,
)

from config import EmailSettings
from infrastructure.email.protocol import MailDeliveryError, MailMessage
from infrastructure.http_client import HttpClient
from shared.logging import get_logger

log = get_logger(__name__)

_ZEPTO_API_URL = "https://api.zeptomail.com/v1.1/email"
_DEFAULT_TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")


class ZeptoMailTransport:
    def __init__(
        self,
        settings: EmailSettings,
        http_client: HttpClient,
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
        api_url: str = _ZEPTO_API_URL,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._api_url = api_url
        self._jinja = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def _render(self, message: MailMessage) -> tuple[str, Optional[str]]:
        html_body = self._jinja.get_template(f"{message.template}.html").render(
            **message.context
        )
        try:
            text_body = self._jinja.get_template(f"{message.template}.txt").render(
                **message.context
            )
        except TemplateNotFound:
            text_body = None
        return html_body, text_body

    def _payload(
        self, message: MailMessage, html_body: str, text_body: Optional[str]
    ) -> dict:
        payload: dict = {
            "from": {
                "address": self._settings.zepto_from_email,
                "name": self._settings.zepto_from_name,
            },
            "to": [{"email_address": {"address": message.to, "name": message.to}}],
            "subject": message.subject,
            "htmlbody": html_body,
        }
        if text_body:
            payload["textbody"] = text_body
        return payload

    async def send(self, message: MailMessage) -> None:
        if not self._settings.zepto_api_token:
            log.error("email_send_failed", to_email=message.to, reason="token_not_configured")
            raise MailDeliveryError("Email API token is not configured")

        try:
            html_body, text_body = self._render(message)
        except TemplateError as e:
            log.error(
                "email_render_failed",
                to_email=message.to,
                template=message.template,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise MailDeliveryError(f"Cannot render template {message.template!r}") from e

        token = self._settings.zepto_api_token
        if not token.startswith("Zoho-enczapikey "):
            token = f"Zoho-enczapikey {token}"
        headers = {"Authorization": token, "Content-Type": "application/json"}

        try:
            response = await self._http.post(
                self._api_url,
                json=self._payload(message, html_body, text_body),
                headers=headers,
            )
        except Exception as e:
            log.error(
                "email_send_error",
                to_email=message.to,
                subject=message.subject,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise MailDeliveryError(str(e)) from e

        if response.status_code not in (200, 201, 202):
            log.error(
                "email_send_failed",
                to_email=message.to,
                subject=message.subject,
                status_code=response.status_code,
                response=response.text[:200],
            )
            raise MailDeliveryError(f"Email API responded {response.status_code}")

        log.info("email_sent_success", to_email=message.to, subject=message.subject)
