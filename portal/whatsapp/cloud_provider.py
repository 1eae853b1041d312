from __future__ import annotations

import logging
from typing import Any

import httpx

from portal.core.errors import DispatchError
from portal.whatsapp.base import ChannelResult, sanitize_payload

logger = logging.getLogger(__name__)

GRAPH_BASE_URL = "https://graph.facebook.com"


class CloudWhatsAppChannel:
    """WhatsApp Cloud API text sender.

    A non-2xx answer is a failed result; timeouts and network errors are
    raised as ``DispatchError``.
    """

    name = "whatsapp_cloud"

    def __init__(
        self,
        *,
        access_token: str,
        phone_number_id: str,
        api_version: str,
        timeout: float,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._access_token = access_token
        self._phone_number_id = phone_number_id
        self._api_version = api_version
        self._timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{GRAPH_BASE_URL}/{self._api_version}/{self._phone_number_id}/messages"

    def send(self, recipient: str, message: str) -> ChannelResult:
        payload = {
            "messaging_product": "whatsapp",
            "to": recipient,
            "type": "text",
            "text": {"preview_url": False, "body": message},
        }
        headers = {"Authorization": f"Bearer {self._access_token}", "Content-Type": "application/json"}

        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(self.url, headers=headers, json=payload)
        except httpx.TimeoutException as exc:
            raise DispatchError(f"WhatsApp timeout after {self._timeout}s") from exc
        except httpx.HTTPError as exc:
            raise DispatchError(f"WhatsApp transport error: {exc}") from exc

        data = self._parse_body(response)
        if 200 <= response.status_code < 300:
            message_id = None
            messages = data.get("messages") if isinstance(data, dict) else None
            if messages:
                message_id = (messages[0] or {}).get("id")
            return ChannelResult(
                success=True,
                raw={
                    "provider": self.name,
                    "status_code": response.status_code,
                    "message_id": message_id,
                    "response": sanitize_payload(data),
                },
            )

        logger.warning("WhatsApp Cloud rejected message status=%s", response.status_code)
        return ChannelResult(
            success=False,
            raw={
                "provider": self.name,
                "status_code": response.status_code,
                "response": sanitize_payload(data),
            },
        )

    @staticmethod
    def _parse_body(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            return {"raw": response.text}
        if isinstance(data, dict):
            return data
        return {"raw": data}
