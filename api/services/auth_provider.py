"""Client for the password sign-in endpoint of the identity provider."""
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional
import aiohttp
from shared.config import settings
from shared.exceptions import AuthError, StoreUnavailable

logger = logging.getLogger(__name__)


# Provider error codes -> sign-in failure kinds
PROVIDER_ERRORS = {
    "EMAIL_NOT_FOUND": AuthError.UNKNOWN_USER,
    "INVALID_PASSWORD": AuthError.INVALID_CREDENTIALS,
    "INVALID_LOGIN_CREDENTIALS": AuthError.INVALID_CREDENTIALS,
    "USER_DISABLED": AuthError.INVALID_CREDENTIALS,
    "MISSING_PASSWORD": AuthError.INVALID_CREDENTIALS,
    "INVALID_EMAIL": AuthError.MALFORMED_ADDRESS,
}


@dataclass
class ProviderSession:
    """Result of a successful password sign-in."""
    uid: str
    address: str
    id_token: str
    expires_in: int


def map_provider_error(message: Optional[str]) -> str:
    """Translate a provider error message into an AuthError kind."""
    # Messages look like "TOO_MANY_ATTEMPTS_TRY_LATER : Access disabled..."
    code = (message or "").split(" : ")[0].strip()
    return PROVIDER_ERRORS.get(code, AuthError.INVALID_CREDENTIALS)


class AuthProviderClient:
    """Thin aiohttp wrapper over accounts:signInWithPassword."""

    def __init__(
        self,
        base_url: str = None,
        api_key: str = None,
        timeout: int = None
    ):
        self.base_url = (base_url or settings.auth_base_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.auth_api_key
        self.timeout = timeout or settings.auth_timeout

    async def sign_in_with_password(self, address: str, secret: str) -> ProviderSession:
        """
        Exchange an email and password for an identity token.

        Raises AuthError for rejected credentials and StoreUnavailable when the
        provider cannot be reached.
        """
        url = f"{self.base_url}/accounts:signInWithPassword"
        payload = {
            "email": address,
            "password": secret,
            "returnSecureToken": True
        }

        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as session:
                async with session.post(url, params={"key": self.api_key}, json=payload) as response:
                    if response.status >= 500:
                        raise StoreUnavailable(f"Identity provider error {response.status}")

                    try:
                        body = await response.json(content_type=None)
                    except ValueError as e:
                        if response.status < 400:
                            raise StoreUnavailable("Identity provider sent an unreadable reply") from e
                        body = None
                    if not isinstance(body, dict):
                        body = {}

                    if response.status >= 400:
                        error = body.get("error")
                        message = error.get("message") if isinstance(error, dict) else None
                        kind = map_provider_error(message)
                        logger.info(f"Sign-in rejected for {address}: {message}")
                        raise AuthError(kind)

                    try:
                        return ProviderSession(
                            uid=body["localId"],
                            address=body.get("email", address),
                            id_token=body["idToken"],
                            expires_in=int(body.get("expiresIn", settings.session_max_ttl))
                        )
                    except (KeyError, TypeError, ValueError) as e:
                        raise StoreUnavailable(f"Identity provider reply is incomplete: {e!r}") from e

        except asyncio.TimeoutError as e:
            raise StoreUnavailable(f"Identity provider timed out after {self.timeout} seconds") from e
        except aiohttp.ClientError as e:
            raise StoreUnavailable(f"Identity provider unreachable: {str(e)}") from e
