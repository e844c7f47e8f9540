from speetto_monitor.services.sms.client import (
    SendResult,
    SolapiClient,
    create_sms_client,
    normalize_phone_number,
)
from speetto_monitor.services.sms.config import SolapiConfig, sign
from speetto_monitor.services.sms.messages import render_alert_message

__all__ = [
    "SendResult",
    "SolapiClient",
    "SolapiConfig",
    "create_sms_client",
    "normalize_phone_number",
    "render_alert_message",
    "sign",
]
