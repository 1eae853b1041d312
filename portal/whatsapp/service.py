from __future__ import annotations

import logging

from portal.core import config
from portal.whatsapp.base import NotificationChannel
from portal.whatsapp.cloud_provider import CloudWhatsAppChannel
from portal.whatsapp.mock_provider import MockWhatsAppChannel

logger = logging.getLogger(__name__)


def _cloud_configured() -> bool:
    return bool(config.META_WA_ACCESS_TOKEN and config.META_WA_PHONE_NUMBER_ID)


def get_notification_channel() -> NotificationChannel:
    if config.WHATSAPP_PROVIDER == "cloud":
        if _cloud_configured():
            return CloudWhatsAppChannel(
                access_token=config.META_WA_ACCESS_TOKEN,
                phone_number_id=config.META_WA_PHONE_NUMBER_ID,
                api_version=config.META_API_VERSION,
                timeout=config.WHATSAPP_TIMEOUT_SECONDS,
            )
        logger.warning("WHATSAPP_PROVIDER=cloud without credentials, using mock channel")
    return MockWhatsAppChannel()
