"""
Tests for the match service and its Pydantic schemas.

Validates that:
- Snapshots hide secrets until the match is over
- Opponent hands are reduced to a count
- Errors come back as ErrorResponse with a machine-readable code
- A full match can be driven through the service
"""

import time

import pytest
from pydantic import ValidationError

from ..api import (
    ActionResponse,
    CardRequest,
    CreateMatchRequest,
    DigitsRequest,
    ErrorResponse,
    MatchService,
    MatchSnapshot,
    MatchStatus,
    PlayerRequest,
)
from ..engine_core import ErrorCode, GamePhase


@pytest.fixture
def service() -> MatchService:
    return MatchService()


def guess(service, match_id, player, digits):
    return service.submit_guess(match_id, DigitsRequest(player=player, digits=digits))


class TestRequests:
    """Request validation."""

    def test_defaults(self):
        request = CreateMatchRequest()
        assert request.digit_count == 3
        assert request.card_mode is False
        assert request.random_seed is None

    @pytest.mark.parametrize("digit_count", [2, 5])
    def test_digit_count_bounds(self, digit_count):
        with pytest.raises(ValidationError):
            CreateMatchRequest(digit_count=digit_count)

    def test_player_pattern(self):
        with pytest.raises(ValidationError):
            PlayerRequest(player="P3")


class TestPlainMatch:
    """A plain-mode match through the service."""

    def test_create(self, service):
        snapshot = service.create_match(CreateMatchRequest())
        assert isinstance(snapshot, MatchSnapshot)
        assert snapshot.status == MatchStatus.SETUP
        assert snapshot.phase == "setting_p1"
        assert snapshot.api_version == "v1"
        assert service.list_matches().count == 1

    def test_secrets_hidden_until_finished(self, service):
        match_id = service.create_match(CreateMatchRequest()).match_id
        response = guess(service, match_id, "P1", "123")

        assert isinstance(response, ActionResponse)
        p1 = response.match.players[0]
        assert p1.has_secret
        assert p1.secret is None

        guess(service, match_id, "P2", "456")
        guess(service, match_id, "P1", "456")
        response = guess(service, match_id, "P2", "789")

        match = response.match
        assert match.status == MatchStatus.FINISHED
        assert match.winner == "P1"
        assert [p.secret for p in match.players] == ["123", "456"]
        assert [e.kind for e in response.events] == ["result_reveal", "result_reveal"]
        assert response.events[0].text == "P1: 3H 0B"

    def test_snapshot_dump(self, service):
        match_id = service.create_match(CreateMatchRequest(digit_count=4)).match_id
        data = service.get_match(match_id).model_dump()
        assert data["status"] == "setup"
        assert data["digit_count"] == 4
        assert data["players"][0]["hp"] == 100


class TestCardMatch:
    """Card mode through the service."""

    def test_draft_and_hidden_hand(self, service):
        match_id = service.create_match(CreateMatchRequest(card_mode=True, random_seed=5)).match_id
        response = guess(service, match_id, "P1", "123")
        offer = response.match.buff_offer
        assert len(offer) == 3
        assert all(card.category == "buff" for card in offer)

        response = service.select_card(match_id, CardRequest(player="P1", card_id=offer[0].card_id))
        assert len(response.match.players[0].hand) == 3
        assert response.match.buff_offer == []

        as_p2 = service.get_match(match_id, viewer="P2")
        assert as_p2.players[0].hand == []
        assert as_p2.players[0].hand_count == 3

        response = service.confirm_hand(match_id, PlayerRequest(player="P1"))
        assert response.match.phase == "setting_p2"

    def test_card_not_offered(self, service):
        match_id = service.create_match(CreateMatchRequest(card_mode=True, random_seed=5)).match_id
        offer = guess(service, match_id, "P1", "123").match.buff_offer
        offered = {card.card_id for card in offer}
        missing = next(
            card_id for card_id in ("attack_small", "attack_medium", "heal_small", "heal_large")
            if card_id not in offered
        )

        response = service.select_card(match_id, CardRequest(player="P1", card_id=missing))
        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.CARD_NOT_OFFERED


class TestErrors:
    """Rejected requests."""

    def test_unknown_match(self, service):
        response = guess(service, "nope", "P1", "123")
        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.MATCH_NOT_FOUND

        response = service.get_match("nope")
        assert response.error_code == ErrorCode.MATCH_NOT_FOUND
        assert response.details == {"match_id": "nope"}

    def test_wrong_phase(self, service):
        match_id = service.create_match(CreateMatchRequest()).match_id
        response = service.skip_card(match_id, PlayerRequest(player="P1"))
        assert isinstance(response, ErrorResponse)
        assert response.model_dump()["error_code"] == "WRONG_PHASE"

    def test_bad_digits(self, service):
        match_id = service.create_match(CreateMatchRequest()).match_id
        response = guess(service, match_id, "P1", "1a3")
        assert response.error_code == ErrorCode.INVALID_CHARACTERS

    def test_end_match(self, service):
        match_id = service.create_match(CreateMatchRequest()).match_id
        assert service.end_match(match_id).success
        assert not service.end_match(match_id).success
        assert service.list_matches().count == 0

    def test_unknown_viewer(self, service):
        match_id = service.create_match(CreateMatchRequest()).match_id
        response = service.get_match(match_id, viewer="P3")
        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.INVALID_PLAYER
        assert response.details == {"viewer": "P3"}


class TestSessionTtl:
    """The service honors HITBLOW_SESSION_TTL."""

    def test_finished_matches_expire(self, monkeypatch):
        monkeypatch.setenv("HITBLOW_SESSION_TTL", "60")
        service = MatchService()
        match_id = service.create_match(CreateMatchRequest()).match_id
        session = service.session_manager.get_session(match_id)
        session.match.phase = GamePhase.FINISHED
        session.last_active = time.time() - 120

        service.create_match(CreateMatchRequest())

        assert service.get_match(match_id).error_code == ErrorCode.MATCH_NOT_FOUND
        assert service.list_matches().count == 1
