"""Email subscription form flow.

States::

    IDLE -> VALIDATING -> LOADING -> SUCCESS
                 |            |
                 +-> ERROR <--+     (ERROR -> IDLE on edit, or resubmit)

``SUCCESS`` is terminal: the confirmation replaces the form.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from pysubway._constants import INVALID_EMAIL_MESSAGE, SUBSCRIBE_FAILURE_MESSAGE, SUBSCRIBE_FALLBACK_MESSAGE
from pysubway._redact import mask_email
from pysubway.client import SubwayClient
from pysubway.exceptions import SubwayError, SubwayValidationError

_logger = logging.getLogger(__name__)


class SubscriptionState(StrEnum):
    IDLE = "idle"
    VALIDATING = "validating"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


def validate_email(email: str) -> str:
    """Minimal syntactic check: non-empty and containing ``@``.

    Raises :class:`SubwayValidationError`; no request is ever made for
    an address that fails.
    """
    candidate = email.strip()
    if not candidate or "@" not in candidate:
        raise SubwayValidationError(INVALID_EMAIL_MESSAGE, field="email")
    return candidate


class SubscriptionFlow:
    """Single-shot subscription request for one line."""

    def __init__(self, client: SubwayClient, line: str, *, email: str = "") -> None:
        self._client = client
        self._line = line
        self._email = email
        self._state = SubscriptionState.IDLE
        self._message = ""
        self._error: SubwayError | None = None

    @property
    def line(self) -> str:
        return self._line

    @property
    def email(self) -> str:
        return self._email

    @property
    def state(self) -> SubscriptionState:
        return self._state

    @property
    def message(self) -> str:
        """Server confirmation on success, user-facing error text on failure."""
        return self._message

    @property
    def error(self) -> SubwayError | None:
        return self._error

    @property
    def can_submit(self) -> bool:
        return self._state in (SubscriptionState.IDLE, SubscriptionState.ERROR)

    def set_email(self, email: str) -> None:
        if self._state is SubscriptionState.SUCCESS:
            raise SubwayError("subscription already confirmed")
        self._email = email
        if self._state is SubscriptionState.ERROR:
            self._state = SubscriptionState.IDLE
            self._message = ""
            self._error = None

    async def submit(self, email: str | None = None) -> SubscriptionState:
        """Validate, then POST once. Returns the resulting state."""
        if email is not None:
            self.set_email(email)
        if not self.can_submit:
            return self._state

        self._state = SubscriptionState.VALIDATING
        try:
            address = validate_email(self._email)
        except SubwayValidationError as exc:
            self._fail(exc, str(exc))
            return self._state

        self._state = SubscriptionState.LOADING
        try:
            response = await self._client.subscribe(address, self._line)
        except SubwayError as exc:
            _logger.warning("Subscription of %s to line %s failed: %s", mask_email(address), self._line, exc)
            self._fail(exc, SUBSCRIBE_FAILURE_MESSAGE)
            return self._state

        self._state = SubscriptionState.SUCCESS
        self._message = response.message or SUBSCRIBE_FALLBACK_MESSAGE
        self._error = None
        return self._state

    def _fail(self, exc: SubwayError, message: str) -> None:
        self._state = SubscriptionState.ERROR
        self._error = exc
        self._message = message
