import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEV_MOCK_TOKEN = "dev-mock-token"
# Identity-provider tokens live about an hour; refresh a little early.
TOKEN_TTL_SECONDS = 55 * 60


class TokenProvider:
    def __init__(
        self,
        getter: Optional[Callable[[], Optional[str]]] = None,
        dev_mode: bool = False,
        ttl: float = TOKEN_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.dev_mode = dev_mode
        self.ttl = ttl
        self._clock = clock
        self._getter = getter
        self._token: Optional[str] = None
        self._expires_at = 0.0

    def set_getter(self, getter: Callable[[], Optional[str]]) -> None:
        self._getter = getter
        self.clear()

    def clear(self) -> None:
        self._token = None
        self._expires_at = 0.0

    def get_token(self) -> Optional[str]:
        now = self._clock()
        if self._token and now < self._expires_at:
            return self._token

        if self._getter is not None:
            try:
                token = self._getter()
            except Exception as e:
                logger.error(f"Failed to get auth token: {e}")
                self.clear()
            else:
                if token:
                    self._token = token
                    self._expires_at = now + self.ttl
                    return token

        if self.dev_mode:
            return DEV_MOCK_TOKEN
        return None
