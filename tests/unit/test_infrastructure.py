"""Unit tests for the infrastructure layer (HTTP client, mail transport)."""

import os
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from config import EmailSettings
from infrastructure.email.protocol import MailDeliveryError, MailMessage
from infrastructure.email import zeptomail
from infrastructure.email.zeptomail import ZeptoMailTransport
from infrastructure.http_client import HttpClient


def _message(**overrides) -> MailMessage:
    context = {
        "username": "alice",
        "email": "alice@example.com",
        "verification_code": 123456,
        "expires_in_minutes": 5,
        "website_verification_link": "https://app.example.com/verify/abc",
        "direct_verification_link": "https://api.example.com/mail/verify?userId=abc&verificationCode=123456",
    }
    base = dict(
        to="alice@example.com",
        subject="E-mail verification",
        template="email_verification",
        context=context,
    )
    base.update(overrides)
    return MailMessage(**base)


# ── HttpClient ────────────────────────────────────────────────────────────────


class TestHttpClient:
    async def test_post_delegates_to_httpx(self, mocker):
        client = HttpClient()
        fake_resp = MagicMock(status_code=200)
        mocker.patch.object(client._client, "post", return_value=fake_resp)
        resp = await client.post("http://example.com")
        assert resp.status_code == 200
        await client.aclose()

    async def test_post_propagates_exception(self, mocker):
        client = HttpClient()
        mocker.patch.object(client._client, "post", side_effect=Exception("timeout"))
        with pytest.raises(Exception, match="timeout"):
            await client.post("http://example.com")
        await client.aclose()

    async def test_uses_given_transport(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(202))
        async with HttpClient(transport=transport) as client:
            resp = await client.post("http://example.com", json={"a": 1})
        assert resp.status_code == 202

    async def test_context_manager(self):
        async with HttpClient() as client:
            assert client is not None


# ── ZeptoMailTransport ────────────────────────────────────────────────────────


class TestZeptoMailTransport:
    def _make(self, token="test-token", **kwargs):
        settings = EmailSettings(
            zepto_api_token=token,
            zepto_from_email="noreply@example.com",
            zepto_from_name="URL Shortener",
        )
        http = MagicMock()
        http.post = AsyncMock(return_value=MagicMock(status_code=200))
        return ZeptoMailTransport(settings=settings, http_client=http, **kwargs), http

    async def test_send_posts_rendered_template(self):
        transport, http = self._make()
        await transport.send(_message())

        http.post.assert_awaited_once()
        _, kwargs = http.post.call_args
        payload = kwargs["json"]
        assert payload["subject"] == "E-mail verification"
        assert payload["to"][0]["email_address"]["address"] == "alice@example.com"
        assert payload["from"]["address"] == "noreply@example.com"
        assert "123456" in payload["htmlbody"]
        assert "https://app.example.com/verify/abc" in payload["htmlbody"]
        assert "123456" in payload["textbody"]

    async def test_direct_link_escaped_in_html(self):
        transport, http = self._make()
        await transport.send(_message())
        _, kwargs = http.post.call_args
        assert "userId=abc&amp;verificationCode=123456" in kwargs["json"]["htmlbody"]

    async def test_missing_token_raises(self):
        transport, http = self._make(token="")
        with pytest.raises(MailDeliveryError):
            await transport.send(_message())
        http.post.assert_not_awaited()

    async def test_non_2xx_raises(self):
        transport, http = self._make()
        http.post = AsyncMock(return_value=MagicMock(status_code=422, text="Unprocessable"))
        with pytest.raises(MailDeliveryError, match="422"):
            await transport.send(_message())

    async def test_transport_exception_raises(self):
        transport, http = self._make()
        http.post = AsyncMock(side_effect=httpx.ConnectTimeout("timeout"))
        with pytest.raises(MailDeliveryError):
            await transport.send(_message())

    async def test_auth_header_prepends_prefix(self):
        transport, http = self._make(token="rawtoken")
        await transport.send(_message())
        _, kwargs = http.post.call_args
        assert kwargs["headers"]["Authorization"] == "Zoho-enczapikey rawtoken"

    async def test_auth_header_not_double_prefixed(self):
        transport, http = self._make(token="Zoho-enczapikey alreadyprefixed")
        await transport.send(_message())
        _, kwargs = http.post.call_args
        assert kwargs["headers"]["Authorization"].count("Zoho-enczapikey") == 1

    async def test_missing_template_raises_delivery_error(self, tmp_path):
        transport, http = self._make(template_dir=str(tmp_path))
        with pytest.raises(MailDeliveryError, match="email_verification"):
            await transport.send(_message())
        http.post.assert_not_awaited()

    def test_default_templates_ship_inside_package(self):
        package_dir = os.path.dirname(zeptomail.__file__)
        assert os.path.dirname(zeptomail._DEFAULT_TEMPLATE_DIR) == package_dir
        for ext in ("html", "txt"):
            path = os.path.join(zeptomail._DEFAULT_TEMPLATE_DIR, f"email_verification.{ext}")
            assert os.path.isfile(path)
