import re


def normalize_phone_number(number: str | None) -> str:
    """010-1234-5678 -> 01012345678. Stored recipients, dedup keys and SMS payloads all use this form."""
    return re.sub(r"\D", "", number or "")
