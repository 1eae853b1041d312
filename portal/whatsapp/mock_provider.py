from __future__ import annotations

import logging
import uuid

from portal.whatsapp.base import ChannelResult

logger = logging.getLogger(__name__)


class MockWhatsAppChannel:
    name = "mock"

    def send(self, recipient: str, message: str) -> ChannelResult:
        provider_message_id = f"mock-{uuid.uuid4().hex[:10]}"
        logger.info("WhatsApp mock send to=%s id=%s text=%s", recipient, provider_message_id, message)
        return ChannelResult(
            success=True,
            raw={"provider": self.name, "message_id": provider_message_id, "to": recipient},
        )
