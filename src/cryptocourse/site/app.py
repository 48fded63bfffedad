"""FastAPI application factory: landing page, lead form, hero card feed and rate endpoint."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from cryptocourse.config import AppSettings
from cryptocourse.rates import handler
from cryptocourse.site.routes import pages, ws
from cryptocourse.site.routes.ws import HeroCardFeed
from cryptocourse.site.widgets import HeroCard

TEMPLATES_DIR = Path(__file__).parent / "templates"


def create_site_app(settings: AppSettings | None = None, lifespan: Any = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings; defaults are loaded from the environment.
        lifespan: Optional async context manager for startup/shutdown.
                  main.py injects one that wires the database, HTTP client and ticker.

    Returns:
        App with templates, hero card and its live feed on app.state and all routers mounted.
        app.state.refresher and app.state.lead_controller are set by the lifespan
        (or directly by tests).
    """
    settings = settings or AppSettings()
    app = FastAPI(title="Crypto Course", lifespan=lifespan)

    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    app.state.templates = templates

    app.state.settings = settings
    app.state.hero_card = HeroCard(pair=settings.page.featured_pair)
    app.state.hero_feed = HeroCardFeed(templates, app.state.hero_card)

    app.include_router(pages.router)
    app.include_router(ws.router)
    app.include_router(handler.router, prefix="/functions/v1")

    return app
