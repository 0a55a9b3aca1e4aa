import enum
import logging
from typing import Optional

from pydantic import ValidationError

from booker.client import BookerClient
from booker.exceptions import AuthenticationError
from booker.models import AuthRequest, AuthResponse

logger = logging.getLogger(__name__)


class AuthState(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class AuthSession:
    """
    Lazily fetches and caches the API token for one group of tests.

    The token is fetched on first access and whenever it is empty. It is not
    refreshed on its own, and a 403 from the API does not trigger a retry;
    callers that want a fresh token call invalidate() first.
    """

    def __init__(self, client: BookerClient, credentials: AuthRequest):
        self._client = client
        self._credentials = credentials
        self._token: Optional[str] = None
        self.state = AuthState.UNAUTHENTICATED

    @property
    def token(self) -> str:
        if not self._token:
            self._token = self._authenticate()
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self.state is AuthState.AUTHENTICATED and bool(self._token)

    def invalidate(self) -> None:
        self._token = None
        self.state = AuthState.UNAUTHENTICATED

    def _authenticate(self) -> str:
        self.state = AuthState.AUTHENTICATING
        logger.info("authenticating as %s against %s", self._credentials.username, self._client.base_url)
        try:
            response = self._client.authenticate(self._credentials)
            if response.status_code != 200:
                raise AuthenticationError(f"POST /auth returned {response.status_code}")
            try:
                auth = AuthResponse.from_payload(response.json())
            except (ValueError, ValidationError) as exc:
                raise AuthenticationError("POST /auth returned an unreadable body") from exc
            if not auth.succeeded:
                raise AuthenticationError(f"POST /auth gave no token: {auth.reason or 'empty token'}")
        except Exception:
            self.state = AuthState.UNAUTHENTICATED
            raise
        self.state = AuthState.AUTHENTICATED
        logger.info("authentication successful, token obtained")
        return auth.token
