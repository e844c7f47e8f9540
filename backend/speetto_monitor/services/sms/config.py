"""SOLAPI config. Credentials from Settings (SOLAPI_API_KEY, SOLAPI_SECRET_KEY) or SolapiConfig args."""
import hashlib
import hmac
import secrets
import string
import time

DEFAULT_BASE_URL = "https://api.solapi.com"
AUTH_SCHEME = "HMAC-SHA256"
SALT_LENGTH = 32
_SALT_ALPHABET = string.ascii_letters + string.digits


def generate_salt(length: int = SALT_LENGTH) -> str:
    return "".join(secrets.choice(_SALT_ALPHABET) for _ in range(length))


def sign(secret_key: str, method: str, path: str, timestamp: str, salt: str, body: str = "") -> str:
    """Hex HMAC-SHA256 of method + path + timestamp + salt + body under the secret key."""
    message = f"{method}{path}{timestamp}{salt}{body}"
    return hmac.new(secret_key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


class SolapiConfig:
    """API credentials and base URL for SOLAPI."""

    __slots__ = ("api_key", "secret_key", "base_url")

    def __init__(
        self,
        *,
        api_key: str = "",
        secret_key: str = "",
        base_url: str = DEFAULT_BASE_URL,
    ) -> None:
        self.api_key = (api_key or "").strip()
        self.secret_key = (secret_key or "").strip()
        self.base_url = base_url.rstrip("/")

    def is_configured(self) -> bool:
        return bool(self.api_key and self.secret_key)

    def headers(self, method: str, path: str, body: str = "") -> dict[str, str]:
        """Signed headers for one request. date is unix time in milliseconds; salt is fresh per request."""
        timestamp = str(int(time.time() * 1000))
        salt = generate_salt()
        signature = sign(self.secret_key, method, path, timestamp, salt, body)
        return {
            "Authorization": (
                f"{AUTH_SCHEME} apiKey={self.api_key}, date={timestamp}, salt={salt}, signature={signature}"
            ),
            "Content-Type": "application/json",
        }
