"""SOLAPI client: lowest level, signs and sends one request. Delivery failures are returned, not raised."""
import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from speetto_monitor.config import Settings
from speetto_monitor.core.errors import MSG_SMS_NOT_CONFIGURED, NotifyError
from speetto_monitor.core.phone import normalize_phone_number
from speetto_monitor.services.sms.config import SolapiConfig

logger = logging.getLogger(__name__)

SEND_PATH = "/messages/v4/send"
BALANCE_PATH = "/cash/v1/balance"
SUCCESS_STATUS_CODE = "2000"


@dataclass(frozen=True)
class SendResult:
    success: bool
    message_id: str | None = None
    error: str | None = None


class SolapiClient:
    """SOLAPI message send and balance check. Pass a transport in tests (httpx.MockTransport)."""

    def __init__(
        self,
        config: SolapiConfig | None = None,
        *,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config or SolapiConfig()
        self._timeout = timeout
        self._transport = transport

    def is_configured(self) -> bool:
        return self._config.is_configured()

    def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        """Signed request. Raises NotifyError on transport errors, non-2xx, or a body that is not a JSON object."""
        body = json.dumps(payload, ensure_ascii=False, separators=(",", ":")) if payload is not None else ""
        headers = self._config.headers(method, path, body)
        url = f"{self._config.base_url}{path}"
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as c:
                r = c.request(method, url, content=body.encode("utf-8") if body else None, headers=headers)
        except httpx.HTTPError as e:
            raise NotifyError(f"SOLAPI request failed: {e}") from e
        if not r.is_success:
            detail = r.text[:300] if r.text else ""
            raise NotifyError(f"SOLAPI error: HTTP {r.status_code} {detail}".strip())
        if not r.content:
            return {}
        try:
            data = r.json()
        except ValueError as e:
            raise NotifyError(f"SOLAPI returned a non-JSON body: {r.text[:200]}") from e
        if not isinstance(data, dict):
            raise NotifyError(f"SOLAPI returned an unexpected body: {r.text[:200]}")
        return data

    def send(self, to: str, from_: str, text: str, type_: str = "LMS") -> SendResult:
        """Send one message. Never raises on delivery failure."""
        if not self.is_configured():
            return SendResult(success=False, error=MSG_SMS_NOT_CONFIGURED)
        to_number = normalize_phone_number(to)
        if not to_number:
            return SendResult(success=False, error="Recipient phone number is empty")
        payload = {
            "message": {
                "to": to_number,
                "from": normalize_phone_number(from_),
                "text": text,
                "type": type_,
            }
        }
        try:
            data = self._request("POST", SEND_PATH, payload)
        except NotifyError as e:
            logger.warning("SMS to %s failed: %s", to_number, e)
            return SendResult(success=False, error=str(e))
        status_code = str(data.get("statusCode") or "")
        if status_code == SUCCESS_STATUS_CODE:
            return SendResult(success=True, message_id=data.get("messageId"))
        error = data.get("statusMessage") or f"SMS send failed (statusCode={status_code or 'missing'})"
        logger.warning("SOLAPI rejected SMS to %s: %s", to_number, error)
        return SendResult(success=False, error=error)

    def validate_credentials(self) -> bool:
        """True when SOLAPI accepts a signed balance query with these credentials."""
        if not self.is_configured():
            return False
        try:
            self._request("GET", BALANCE_PATH)
            return True
        except NotifyError as e:
            logger.warning("SOLAPI credential check failed: %s", e)
            return False


def create_sms_client(settings: Settings, *, transport: httpx.BaseTransport | None = None) -> SolapiClient | None:
    """SolapiClient from settings, or None (with a warning) when credentials are missing."""
    if not settings.sms_configured():
        logger.warning("SOLAPI_API_KEY / SOLAPI_SECRET_KEY not set; SMS alerts are disabled")
        return None
    config = SolapiConfig(
        api_key=settings.solapi_api_key,
        secret_key=settings.solapi_secret_key,
        base_url=settings.solapi_base_url,
    )
    return SolapiClient(config, timeout=settings.sms_timeout_seconds, transport=transport)
