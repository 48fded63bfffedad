"""Live hero card feed for open landing pages.

Pages join through htmx's ws extension. Each push is the hero card partial
wrapped in an out-of-band swap element, so htmx replaces the card in place
without touching the rest of the page. A new subscriber gets the current
card right away, which covers pages rendered before the last poll landed.
"""

from __future__ import annotations

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from fastapi.templating import Jinja2Templates

from cryptocourse.logging import get_logger
from cryptocourse.site.widgets import HeroCard

log = get_logger(__name__)

router = APIRouter()

HERO_CARD_ID = "btcCard"
HERO_CARD_CLASS = "chart-card"


def render_hero_card_fragment(templates: Jinja2Templates, card: HeroCard) -> str:
    """Render the card partial as an out-of-band swap of #btcCard."""
    html = templates.env.get_template("partials/hero_card.html").render(hero_card=card)
    return (
        f'<div id="{HERO_CARD_ID}" class="{HERO_CARD_CLASS}" hx-swap-oob="true">'
        f"{html}</div>"
    )


class HeroCardFeed:
    """Subscribers to hero card updates and the card they are shown."""

    def __init__(self, templates: Jinja2Templates, card: HeroCard) -> None:
        self._templates = templates
        self.card = card
        self._subscribers: set[WebSocket] = set()

    @property
    def subscribers(self) -> int:
        return len(self._subscribers)

    async def subscribe(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._subscribers.add(websocket)
        log.info("hero_card_subscribed", pair=self.card.pair, subscribers=self.subscribers)
        await self._send(websocket, render_hero_card_fragment(self._templates, self.card))

    def unsubscribe(self, websocket: WebSocket) -> None:
        self._subscribers.discard(websocket)
        log.info("hero_card_unsubscribed", subscribers=self.subscribers)

    async def push(self, card: HeroCard) -> int:
        """Send the card to every subscriber. Returns how many received it.

        Sockets that fail to receive are dropped from the feed.
        """
        if not self._subscribers:
            return 0
        html = render_hero_card_fragment(self._templates, card)
        delivered = 0
        for websocket in list(self._subscribers):
            if await self._send(websocket, html):
                delivered += 1
        log.debug("hero_card_pushed", pair=card.pair, delivered=delivered)
        return delivered

    async def _send(self, websocket: WebSocket, html: str) -> bool:
        try:
            await websocket.send_text(html)
        except Exception as e:
            self._subscribers.discard(websocket)
            log.warning("hero_card_push_failed", error=str(e), subscribers=self.subscribers)
            return False
        return True


@router.websocket("/ws")
async def hero_card_feed(websocket: WebSocket) -> None:
    feed: HeroCardFeed = websocket.app.state.hero_feed
    await feed.subscribe(websocket)
    try:
        # Pages never send anything; reading just detects the disconnect
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        feed.unsubscribe(websocket)
