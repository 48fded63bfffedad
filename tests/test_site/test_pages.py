"""Tests for the landing page, lead form route and hero card push."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from cryptocourse.exceptions import RelayTransportError
from cryptocourse.models import NO_INTERESTS_MESSAGE
from cryptocourse.site.app import create_site_app
from cryptocourse.site.leads import SUBMIT_FAILED_MESSAGE, LeadFormController
from cryptocourse.site.routes.ws import render_hero_card_fragment
from cryptocourse.site.widgets import PLACEHOLDER, update_hero_card

LEAD_FORM = {
    "name": "Анна",
    "email": "anna@example.org",
    "phone": "+7 900 000-00-00",
    "experience": "intermediate",
    "message": "",
}


@pytest.fixture
def relay() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def app(mock_settings, relay: AsyncMock):
    app = create_site_app(mock_settings)
    app.state.lead_controller = LeadFormController(relay, acknowledgement_seconds=5)
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


class TestLandingPage:
    def test_renders_badge_and_placeholder(self, client: TestClient) -> None:
        response = client.get("/")

        assert response.status_code == 200
        assert "Старт потока через" in response.text
        assert 'id="btcPrice"' in response.text
        assert PLACEHOLDER in response.text
        assert 'ws-connect="/ws"' in response.text

    def test_shows_latest_hero_card(self, app, client: TestClient, make_rate_row) -> None:
        update_hero_card(app.state.hero_card, [make_rate_row(change="-1.5")], "BTC-USD")

        body = client.get("/").text

        assert "$45,000.50" in body
        assert "-1.50%" in body
        assert "chart-change negative" in body

    def test_modal_hidden_by_default(self, client: TestClient) -> None:
        body = client.get("/").text
        assert 'class="modal"' in body
        assert 'data-dismiss-ms="5000"' in body


class TestLeadSubmission:
    def test_no_interest_alerts_without_relay_call(
        self, client: TestClient, relay: AsyncMock
    ) -> None:
        response = client.post("/lead", data=LEAD_FORM)

        assert response.status_code == 200
        assert NO_INTERESTS_MESSAGE in response.text
        relay.notify.assert_not_awaited()
        # the visitor's input is kept
        assert 'value="anna@example.org"' in response.text

    def test_success_shows_modal_and_resets_form(
        self, client: TestClient, relay: AsyncMock
    ) -> None:
        response = client.post("/lead", data={**LEAD_FORM, "interests": ["basics", "defi"]})

        assert response.status_code == 200
        assert 'class="modal show"' in response.text
        assert 'value="anna@example.org"' not in response.text
        relay.notify.assert_awaited_once()
        lead = relay.notify.await_args.args[0]
        assert lead.interests == ("basics", "defi")
        assert lead.to_relay_payload()["interests"] == "basics, defi"

    def test_relay_failure_alerts_and_keeps_input(
        self, client: TestClient, relay: AsyncMock
    ) -> None:
        relay.notify = AsyncMock(side_effect=RelayTransportError("unreachable"))

        response = client.post("/lead", data={**LEAD_FORM, "interests": ["trading"]})

        assert SUBMIT_FAILED_MESSAGE in response.text
        assert 'class="modal"' in response.text
        assert 'value="anna@example.org"' in response.text
        # button comes back enabled
        assert "disabled" not in response.text.split('class="submit-btn')[1].split(">")[0]


class TestHeroCardFeed:
    def test_fragment_keeps_card_styling(self, app, make_rate_row) -> None:
        card = app.state.hero_card
        update_hero_card(card, [make_rate_row(change="2.3")], "BTC-USD")

        html = render_hero_card_fragment(app.state.templates, card)

        assert html.startswith('<div id="btcCard" class="chart-card" hx-swap-oob="true">')
        assert "BTC / USD" in html
        assert "$45,000.50" in html
        assert "+2.30%" in html

    def test_subscriber_gets_current_card_then_pushes(
        self, app, client: TestClient, make_rate_row
    ) -> None:
        feed = app.state.hero_feed
        card = app.state.hero_card

        with client.websocket_connect("/ws") as websocket:
            first = websocket.receive_text()
            update_hero_card(card, [make_rate_row()], "BTC-USD")
            delivered = websocket.portal.call(feed.push, card)
            pushed = websocket.receive_text()

        assert PLACEHOLDER in first
        assert delivered == 1
        assert 'hx-swap-oob="true"' in pushed
        assert "$45,000.50" in pushed

    def test_disconnect_unsubscribes(self, app, client: TestClient) -> None:
        with client.websocket_connect("/ws") as websocket:
            websocket.receive_text()
            assert app.state.hero_feed.subscribers == 1
        assert app.state.hero_feed.subscribers == 0

    @pytest.mark.asyncio
    async def test_push_without_subscribers_is_noop(self, app) -> None:
        assert await app.state.hero_feed.push(app.state.hero_card) == 0

    @pytest.mark.asyncio
    async def test_failed_socket_is_dropped(self, app) -> None:
        feed = app.state.hero_feed
        broken = AsyncMock()
        broken.send_text = AsyncMock(side_effect=RuntimeError("closed"))
        healthy = AsyncMock()
        feed._subscribers.update({broken, healthy})

        assert await feed.push(app.state.hero_card) == 1
        assert feed.subscribers == 1
        healthy.send_text.assert_awaited_once()


def test_card_label_follows_featured_pair(mock_settings, relay: AsyncMock) -> None:
    mock_settings.page.featured_pair = "ETH-USD"
    app = create_site_app(mock_settings)
    app.state.lead_controller = LeadFormController(relay)

    body = TestClient(app).get("/").text

    assert "ETH / USD" in body
    assert app.state.hero_card.pair == "ETH-USD"
