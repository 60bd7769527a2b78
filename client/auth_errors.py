import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Unauthorized: You are logged out. Logging in again..."


class ApiError(Exception):
    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"{status_code}: {body}")
        self.status_code = status_code
        self.body = body


class UnauthorizedError(ApiError):
    """The server answered 401 or 403."""


class AuthenticationHandled(Exception):
    """Raised after an unauthorized error was taken care of by the handler."""


def is_unauthorized_error(error: BaseException) -> bool:
    return isinstance(error, UnauthorizedError)


class AuthErrorHandler:
    """
    Reacts to unauthorized API errors: shows the logged-out notice once and,
    after ``redirect_delay`` seconds, calls ``on_unauthorized`` (for example
    to send the user back to the sign-in screen).

    In development mode nothing is handled, so callers keep working with
    whatever fallback data they have. Each client gets its own instance.
    """

    def __init__(
        self,
        dev_mode: bool = False,
        on_unauthorized: Optional[Callable[[], None]] = None,
        notify: Optional[Callable[[str], None]] = None,
        redirect_delay: float = 2.0,
        timer_factory=threading.Timer,
    ):
        self.dev_mode = dev_mode
        self.on_unauthorized = on_unauthorized or (lambda: None)
        self.notify = notify or (lambda text: logger.warning(text))
        self.redirect_delay = redirect_delay
        self._timer_factory = timer_factory
        self.is_handling_error = False
        self.banner_visible = False

    def handle_error(self, error: BaseException) -> bool:
        if self.dev_mode:
            logger.info("Development mode: ignoring unauthorized error")
            return False
        if not is_unauthorized_error(error):
            return False
        if self.is_handling_error:
            return True

        self.is_handling_error = True
        self.show_unauthorized_banner()
        timer = self._timer_factory(self.redirect_delay, self._redirect)
        timer.daemon = True
        timer.start()
        return True

    def _redirect(self):
        try:
            self.on_unauthorized()
        finally:
            self.is_handling_error = False

    def show_unauthorized_banner(self):
        if self.banner_visible:
            return
        self.banner_visible = True
        self.notify(UNAUTHORIZED_MESSAGE)

    def hide_unauthorized_banner(self):
        self.banner_visible = False

    def reset(self):
        self.is_handling_error = False
        self.hide_unauthorized_banner()


def with_auth_error_handling(handler: Optional[AuthErrorHandler], call: Callable):
    try:
        return call()
    except Exception as e:
        if handler is not None and handler.handle_error(e):
            raise AuthenticationHandled("Authentication error handled") from e
        raise
