"""Lead-capture form submission.

The relay is a spreadsheet web app outside our control. Its answer is never
read: delivery is not confirmed, and the absence of a transport error is
treated as success. Only transport failures are reported to the visitor.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import httpx

from cryptocourse.exceptions import LeadValidationError, RelayTransportError
from cryptocourse.logging import get_logger
from cryptocourse.models import LeadFormData

logger = get_logger(__name__)

SUBMIT_FAILED_MESSAGE = "Произошла непредвиденная ошибка. Пожалуйста, попробуйте позже."


class LeadRelay:
    """Best-effort notification to the spreadsheet relay."""

    def __init__(
        self, url: str, http: httpx.AsyncClient, timeout: float = 10.0
    ) -> None:
        self._url = url
        self._http = http
        self._timeout = timeout

    async def notify(self, lead: LeadFormData) -> None:
        """POST the lead once. The response status and body are ignored.

        Raises:
            RelayTransportError: If the request could not be sent.
        """
        try:
            await self._http.post(
                self._url,
                json=lead.to_relay_payload(),
                timeout=self._timeout,
            )
        except httpx.RequestError as e:
            raise RelayTransportError(f"lead relay unreachable: {e}") from e


@dataclass
class SubmitControl:
    """State of the form's submit button."""

    disabled: bool = False
    loading: bool = False

    def begin(self) -> None:
        self.disabled = True
        self.loading = True

    def finish(self) -> None:
        self.disabled = False
        self.loading = False


@dataclass
class Acknowledgement:
    """Success modal that hides itself after dismiss_after seconds."""

    dismiss_after: float = 5.0
    shown_at: float = field(default_factory=time.monotonic)

    def visible(self, now: float | None = None) -> bool:
        now = time.monotonic() if now is None else now
        return now - self.shown_at < self.dismiss_after


@dataclass
class SubmissionOutcome:
    """What the page should show after a submit attempt."""

    success: bool
    alert: str | None = None
    acknowledgement: Acknowledgement | None = None
    form_reset: bool = False


class LeadFormController:
    """Validates a submitted lead form and forwards it to the relay."""

    def __init__(self, relay: LeadRelay, acknowledgement_seconds: float = 5.0) -> None:
        self._relay = relay
        self._acknowledgement_seconds = acknowledgement_seconds

    async def submit(
        self,
        fields: Mapping[str, Any],
        interests: Sequence[str],
        control: SubmitControl,
    ) -> SubmissionOutcome:
        """Handle one submission.

        No interest selected: returns an alert without touching the network.
        Otherwise disables the control for the duration of the relay call and
        always re-enables it afterwards.
        """
        try:
            lead = LeadFormData.from_form(fields, interests)
        except LeadValidationError as e:
            logger.info("lead_rejected", reason="no_interests")
            return SubmissionOutcome(success=False, alert=str(e))

        control.begin()
        try:
            await self._relay.notify(lead)
        except RelayTransportError as e:
            logger.error("lead_submit_failed", error=str(e))
            return SubmissionOutcome(success=False, alert=SUBMIT_FAILED_MESSAGE)
        finally:
            control.finish()

        logger.info(
            "lead_submitted",
            experience=lead.experience,
            interests=len(lead.interests),
        )
        return SubmissionOutcome(
            success=True,
            acknowledgement=Acknowledgement(dismiss_after=self._acknowledgement_seconds),
            form_reset=True,
        )
