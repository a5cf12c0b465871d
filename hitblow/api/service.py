"""
Match Service - Translation layer between presentation and engine.

The service:
1. Translates requests to engine actions
2. Manages sessions
3. Formats snapshots with hidden information removed

This layer is framework-agnostic: a terminal UI, a desktop toolkit or
a test harness call it the same way.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..catalog import get_card
from ..config import load_config
from ..engine_core import Action, ActionResult, ErrorCode, GamePhase, MatchState, Player, ReplayEvent
from ..session import SessionManager
from .schemas import (
    # Requests
    CreateMatchRequest,
    DigitsRequest,
    CardRequest,
    PlayerRequest,
    # Responses
    ActionResponse,
    EndMatchResponse,
    ErrorResponse,
    MatchListResponse,
    MatchSnapshot,
    # Shared
    CardInfo,
    GuessLogInfo,
    PlayerView,
    ReplayEventInfo,
    # Enums
    MatchStatus,
)

_SETUP_PHASES = {
    GamePhase.SETTING_P1,
    GamePhase.SETTING_P2,
    GamePhase.CARD_SELECT_P1,
    GamePhase.CARD_SELECT_P2,
    GamePhase.HAND_CONFIRM_P1,
    GamePhase.HAND_CONFIRM_P2,
}


def card_info(card_id: str) -> CardInfo:
    card = get_card(card_id)
    if card is None:
        raise KeyError(card_id)
    return CardInfo(
        card_id=card.id,
        title=card.title,
        description=card.description,
        category=card.category.value,
    )


def event_info(event: ReplayEvent) -> ReplayEventInfo:
    return ReplayEventInfo(
        sequence=event.sequence,
        kind=event.kind.value,
        player=event.player.value,
        target=event.target.value if event.target else None,
        amount=event.amount,
        hit=event.hit,
        blow=event.blow,
        card_id=event.card_id,
        duration_ms=event.duration_ms,
        text=event.describe(),
        formula=event.formula,
    )


def build_snapshot(state: MatchState, viewer: Player | None = None) -> MatchSnapshot:
    """
    Build a read-only snapshot of a match.

    Secrets appear only once the match is over. With a viewer, the other
    side's hand is reduced to a count.
    """
    if state.is_finished:
        status = MatchStatus.FINISHED
    elif state.phase in _SETUP_PHASES:
        status = MatchStatus.SETUP
    else:
        status = MatchStatus.IN_PROGRESS

    players = []
    for player in Player:
        side = state.player(player)
        show_hand = viewer is None or viewer == player
        players.append(
            PlayerView(
                player=player.value,
                hp=side.hp,
                status_summary=side.modifiers.describe(),
                logs=[
                    GuessLogInfo(digits=entry.digits, hit=entry.hit, blow=entry.blow)
                    for entry in side.logs
                ],
                hand=[card_info(card_id) for card_id in side.hand] if show_hand else [],
                hand_count=len(side.hand),
                has_secret=bool(side.secret),
                secret=side.secret if state.is_finished else None,
            )
        )

    return MatchSnapshot(
        match_id=state.match_id,
        status=status,
        phase=state.phase.value,
        current_player=state.current_player.value,
        digit_count=state.digit_count,
        card_mode=state.card_mode,
        current_round=state.current_round,
        current_turn=state.current_turn,
        total_turns=state.total_turns,
        players=players,
        buff_offer=[card_info(card_id) for card_id in state.buff_offer],
        replay_events=[event_info(event) for event in state.replay_events],
        battle_log=list(state.battle_log),
        winner=state.winner.value if state.winner else None,
        is_draw=state.is_draw,
    )


def _configured_session_manager() -> SessionManager:
    return SessionManager(session_ttl_seconds=load_config().session_ttl_seconds)


@dataclass
class MatchService:
    """
    Main service for presentation layers.

    Usage:
        service = MatchService()
        snapshot = service.create_match(CreateMatchRequest(card_mode=True))
        service.submit_guess(snapshot.match_id, DigitsRequest(player="P1", digits="123"))
    """
    session_manager: SessionManager = field(default_factory=_configured_session_manager)

    def create_match(self, request: CreateMatchRequest) -> MatchSnapshot:
        session = self.session_manager.create_session(
            digit_count=request.digit_count,
            card_mode=request.card_mode,
            seed=request.random_seed,
        )
        return build_snapshot(session.match)

    def get_match(
        self, match_id: str, viewer: str | None = None
    ) -> MatchSnapshot | ErrorResponse:
        session = self.session_manager.get_session(match_id)
        if not session:
            return self._not_found(match_id)
        if viewer is not None and viewer not in {player.value for player in Player}:
            return ErrorResponse(
                error=f"Unknown viewer: {viewer}",
                error_code=ErrorCode.INVALID_PLAYER,
                details={"viewer": viewer},
            )
        return build_snapshot(session.match, Player(viewer) if viewer else None)

    def submit_guess(self, match_id: str, request: DigitsRequest) -> ActionResponse | ErrorResponse:
        """Secret during SETTING phases, guess otherwise."""
        return self._apply(match_id, Action.submit_guess(Player(request.player), request.digits))

    def select_card(self, match_id: str, request: CardRequest) -> ActionResponse | ErrorResponse:
        return self._apply(match_id, Action.select_card(Player(request.player), request.card_id))

    def confirm_hand(self, match_id: str, request: PlayerRequest) -> ActionResponse | ErrorResponse:
        return self._apply(match_id, Action.confirm_hand(Player(request.player)))

    def use_card(self, match_id: str, request: CardRequest) -> ActionResponse | ErrorResponse:
        return self._apply(match_id, Action.use_card(Player(request.player), request.card_id))

    def skip_card(self, match_id: str, request: PlayerRequest) -> ActionResponse | ErrorResponse:
        return self._apply(match_id, Action.skip_card(Player(request.player)))

    def end_match(self, match_id: str) -> EndMatchResponse:
        success = self.session_manager.end_session(match_id, reason="abandoned")
        return EndMatchResponse(success=success, match_id=match_id)

    def list_matches(self) -> MatchListResponse:
        matches = self.session_manager.list_active_sessions()
        return MatchListResponse(matches=matches, count=len(matches))

    def _apply(self, match_id: str, action: Action) -> ActionResponse | ErrorResponse:
        result: ActionResult = self.session_manager.apply(match_id, action)
        if not result.success:
            return ErrorResponse(
                error=result.error or "Action rejected",
                error_code=result.error_code or ErrorCode.WRONG_PHASE,
            )

        viewer = action.payload.player
        return ActionResponse(
            changes=result.state_changes,
            events=[event_info(event) for event in result.events],
            match=build_snapshot(result.new_state, viewer),
        )

    def _not_found(self, match_id: str) -> ErrorResponse:
        return ErrorResponse(
            error="Match not found",
            error_code=ErrorCode.MATCH_NOT_FOUND,
            details={"match_id": match_id},
        )
