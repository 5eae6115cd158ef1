"""Identity gate: session resolution, sign-in/out and the admin predicate."""
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Iterable, List, Optional
import redis.asyncio as redis
from shared.config import settings
from shared.exceptions import AuthError
from shared.utils import token_fingerprint
from shared.validation import validate_email
from api.services.auth_provider import AuthProviderClient

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Session state enumeration."""
    UNRESOLVED = "UNRESOLVED"
    AUTHENTICATED = "AUTHENTICATED"
    ANONYMOUS = "ANONYMOUS"


# Allowed moves; anything else is a programming error
_TRANSITIONS = {
    SessionState.UNRESOLVED: {SessionState.AUTHENTICATED, SessionState.ANONYMOUS},
    SessionState.AUTHENTICATED: {SessionState.ANONYMOUS},
    SessionState.ANONYMOUS: set(),
}


@dataclass(frozen=True)
class Identity:
    """Who is signed in."""
    uid: str
    address: str


@dataclass
class SignInResult:
    token: str
    identity: Identity
    expires_in: int


class InvalidSessionTransition(RuntimeError):
    pass


SessionListener = Callable[["SessionContext"], Awaitable[None]]


class SessionContext:
    """
    Per-session identity state observed by dependent components.

    Starts UNRESOLVED; the first session check moves it to AUTHENTICATED or
    ANONYMOUS, and sign-out moves AUTHENTICATED to ANONYMOUS. Listeners are
    awaited on every transition.
    """

    def __init__(self, token: Optional[str], admin_emails: Iterable[str]):
        self.token = token
        self.admin_emails = {address.lower() for address in admin_emails}
        self._state = SessionState.UNRESOLVED
        self._identity: Optional[Identity] = None
        self._listeners: List[SessionListener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def resolved(self) -> bool:
        return self._state is not SessionState.UNRESOLVED

    def current_identity(self) -> Optional[Identity]:
        return self._identity

    def is_admin(self) -> bool:
        """True iff someone is signed in with an allow-listed address."""
        return self._identity is not None and self._identity.address.lower() in self.admin_emails

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: SessionListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def resolve(self, identity: Optional[Identity]):
        """Complete the first session check."""
        target = SessionState.AUTHENTICATED if identity else SessionState.ANONYMOUS
        await self._transition(target, identity)

    async def end(self):
        """Mark the session as signed out."""
        await self._transition(SessionState.ANONYMOUS, None)

    async def _transition(self, target: SessionState, identity: Optional[Identity]):
        if target not in _TRANSITIONS[self._state]:
            raise InvalidSessionTransition(f"Cannot move session from {self._state.value} to {target.value}")

        self._state = target
        self._identity = identity

        for listener in list(self._listeners):
            await listener(self)


class IdentityGate:
    """Signs administrators in and out and resolves session tokens."""

    def __init__(
        self,
        redis_client: redis.Redis,
        auth_client: Optional[AuthProviderClient] = None,
        admin_emails: Optional[Iterable[str]] = None
    ):
        self.redis = redis_client
        self.auth_client = auth_client or AuthProviderClient()
        self.admin_emails = list(admin_emails if admin_emails is not None else settings.admin_emails)
        self.prefix = settings.redis_session_prefix
        self.channel = settings.redis_session_channel

    def _session_key(self, token: str) -> str:
        return f"{self.prefix}:{token}"

    async def sign_in(self, address: str, secret: str) -> SignInResult:
        """Authenticate with the provider and store the new session."""
        if not validate_email(address).valid:
            raise AuthError(AuthError.MALFORMED_ADDRESS)

        provider_session = await self.auth_client.sign_in_with_password(address, secret)
        identity = Identity(uid=provider_session.uid, address=provider_session.address)
        ttl = max(1, min(provider_session.expires_in, settings.session_max_ttl))

        await self.redis.set(
            self._session_key(provider_session.id_token),
            json.dumps({"uid": identity.uid, "address": identity.address}),
            ex=ttl
        )
        await self._publish(provider_session.id_token, SessionState.AUTHENTICATED)

        logger.info(f"Signed in {identity.address}")
        return SignInResult(token=provider_session.id_token, identity=identity, expires_in=ttl)

    async def sign_out(self, token: str):
        """Drop a session and tell observers it has ended."""
        removed = await self.redis.delete(self._session_key(token))
        if removed:
            await self._publish(token, SessionState.ANONYMOUS)

    async def open_session(self, token: Optional[str]) -> SessionContext:
        """Build a session context for a token and resolve it."""
        context = SessionContext(token, self.admin_emails)
        identity = await self._load_identity(token) if token else None
        await context.resolve(identity)
        return context

    async def _load_identity(self, token: str) -> Optional[Identity]:
        raw = await self.redis.get(self._session_key(token))
        if not raw:
            return None
        try:
            data = json.loads(raw)
            return Identity(uid=data["uid"], address=data["address"])
        except (json.JSONDecodeError, KeyError, TypeError):
            logger.warning("Discarding unreadable session record")
            return None

    async def _publish(self, token: str, state: SessionState):
        update = {
            "type": "session_update",
            "session": token_fingerprint(token),
            "state": state.value
        }
        await self.redis.publish(self.channel, json.dumps(update))
