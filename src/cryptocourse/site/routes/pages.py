"""Page routes: landing page and lead form submission."""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from cryptocourse.site.countdown import course_badge_text, days_until_course_start
from cryptocourse.site.leads import SubmissionOutcome, SubmitControl

router = APIRouter()

FORM_FIELDS = ("name", "email", "phone", "experience", "message")


def _page_context(
    request: Request,
    control: SubmitControl | None = None,
    outcome: SubmissionOutcome | None = None,
    form_values: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Gather everything landing.html needs from app.state."""
    page = request.app.state.settings.page
    days_left = days_until_course_start(date.today(), page.course_anchor_date)
    return {
        "hero_card": request.app.state.hero_card,
        "badge_text": course_badge_text(days_left),
        "page": page,
        "control": control or SubmitControl(),
        "outcome": outcome,
        "form_values": form_values or {},
    }


@router.get("/", response_class=HTMLResponse)
async def landing_page(request: Request) -> HTMLResponse:
    """Landing page with live price card, countdown badge and lead form."""
    templates: Jinja2Templates = request.app.state.templates
    return templates.TemplateResponse(request, "landing.html", _page_context(request))


@router.post("/lead", response_class=HTMLResponse)
async def submit_lead(request: Request) -> HTMLResponse:
    """Forward the lead form to the relay and re-render the page with the result."""
    templates: Jinja2Templates = request.app.state.templates
    controller = request.app.state.lead_controller

    form = await request.form()
    fields = {name: str(form.get(name) or "") for name in FORM_FIELDS}
    interests = [str(value) for value in form.getlist("interests")]

    control = SubmitControl()
    outcome = await controller.submit(fields, interests, control)

    # A reset form comes back empty; otherwise keep what the visitor typed
    form_values: dict[str, Any] = {}
    if not outcome.form_reset:
        form_values = {**fields, "interests": interests}

    return templates.TemplateResponse(
        request,
        "landing.html",
        _page_context(request, control=control, outcome=outcome, form_values=form_values),
    )
