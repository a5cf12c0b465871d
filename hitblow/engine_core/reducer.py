"""
Reducer - The phase state machine.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- (state, action) -> ActionResult with a new state
- Validates phase and acting player before applying
- Works on a clone: a rejected action leaves the caller's state untouched
  and a resolved turn is committed all at once
- Delegates turn resolution to the ReplaySequencer
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import uuid

from ..catalog import get_card
from .action import Action, ActionType, ActionResult, ErrorCode
from .damage import DamageCalculator
from .judge import validate_digits
from .modifiers import (
    apply_buff_card,
    use_support_card,
    clear_one_time_effects,
    offer_buff_cards,
    deal_support_hand,
)
from .rng import RandomSource, SeededRandom
from .sequencer import ReplaySequencer, TurnOutcome
from .state import MatchState, GamePhase, Player, VALID_DIGIT_COUNTS

logger = logging.getLogger(__name__)


# Which actions each phase accepts. Anything else is WRONG_PHASE.
PHASE_ACTIONS: dict[GamePhase, set[ActionType]] = {
    GamePhase.SETTING_P1: {ActionType.SET_SECRET, ActionType.SUBMIT_GUESS},
    GamePhase.SETTING_P2: {ActionType.SET_SECRET, ActionType.SUBMIT_GUESS},
    GamePhase.CARD_SELECT_P1: {ActionType.SELECT_CARD},
    GamePhase.CARD_SELECT_P2: {ActionType.SELECT_CARD},
    GamePhase.HAND_CONFIRM_P1: {ActionType.CONFIRM_HAND},
    GamePhase.HAND_CONFIRM_P2: {ActionType.CONFIRM_HAND},
    GamePhase.PLAYING: {ActionType.SUBMIT_GUESS},
    GamePhase.CARD_USE_P1: {ActionType.USE_CARD, ActionType.SKIP_CARD},
    GamePhase.WAITING_P2_INPUT: {ActionType.SUBMIT_GUESS},
    GamePhase.CARD_USE_P2: {ActionType.USE_CARD, ActionType.SKIP_CARD},
    GamePhase.REPLAYING: set(),
    GamePhase.FINISHED: set(),
}


def expected_player(state: MatchState) -> Player:
    """The side whose input the current phase is waiting for."""
    phase = state.phase
    if phase in (GamePhase.SETTING_P1, GamePhase.CARD_SELECT_P1,
                 GamePhase.HAND_CONFIRM_P1, GamePhase.CARD_USE_P1):
        return Player.P1
    if phase in (GamePhase.SETTING_P2, GamePhase.CARD_SELECT_P2,
                 GamePhase.HAND_CONFIRM_P2, GamePhase.CARD_USE_P2,
                 GamePhase.WAITING_P2_INPUT):
        return Player.P2
    return state.current_player


@dataclass
class Reducer:
    """
    Reducer applies actions to match state.

    Stateless - all state is in MatchState.
    """

    def apply(self, state: MatchState, action: Action) -> ActionResult:
        """
        Apply an action to the match state.

        Returns ActionResult with new state or error.
        """
        validation_error = self._validate_action(state, action)
        if validation_error:
            return validation_error

        handler = self._get_handler(action.action_type)
        working = state.clone()
        result = handler(working, action)

        if result.success and result.new_state is not None:
            for change in result.state_changes:
                result.new_state.add_log(change)
        return result

    def _validate_action(self, state: MatchState, action: Action) -> ActionResult | None:
        """
        Validate that an action is legal in the current state.

        Returns a failure result if invalid, None if valid.
        """
        if state.phase == GamePhase.FINISHED:
            return ActionResult.failure("Match is over - no actions allowed", ErrorCode.WRONG_PHASE)

        if action.action_type not in PHASE_ACTIONS[state.phase]:
            return ActionResult.failure(
                f"{action.action_type.value} not allowed during {state.phase.value}",
                ErrorCode.WRONG_PHASE,
            )

        player = action.payload.player
        if player != expected_player(state):
            return ActionResult.failure(f"Not {player.value}'s turn", ErrorCode.NOT_YOUR_TURN)

        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.SET_SECRET: self._handle_set_secret,
            ActionType.SUBMIT_GUESS: self._handle_submit_guess,
            ActionType.SELECT_CARD: self._handle_select_card,
            ActionType.CONFIRM_HAND: self._handle_confirm_hand,
            ActionType.USE_CARD: self._handle_use_card,
            ActionType.SKIP_CARD: self._handle_skip_card,
        }
        return handlers[action_type]

    # ------------------------------------------------------------------
    # Setup phases
    # ------------------------------------------------------------------

    def _handle_set_secret(self, state: MatchState, action: Action) -> ActionResult:
        player = action.payload.player
        digits = action.payload.digits or ""
        error_code = validate_digits(digits, state.digit_count)
        if error_code:
            return ActionResult.failure(f"Invalid secret '{digits}'", error_code)

        state.player(player).secret = digits
        changes = [f"{player.value} set a secret"]

        if state.card_mode:
            state.buff_offer = offer_buff_cards(state)
            state.phase = GamePhase.card_select(player)
            state.current_player = player
        else:
            self._advance_setup(state, player)

        logger.debug("%s set secret, phase -> %s", player.value, state.phase.value)
        return ActionResult.success_with_state(state, changes=changes)

    def _handle_select_card(self, state: MatchState, action: Action) -> ActionResult:
        player = action.payload.player
        card_id = action.payload.card_id or ""
        card = get_card(card_id)
        if card is None:
            return ActionResult.failure(f"Unknown card: {card_id}", ErrorCode.UNKNOWN_CARD)
        if card_id not in state.buff_offer:
            return ActionResult.failure(f"Card {card_id} is not offered", ErrorCode.CARD_NOT_OFFERED)

        changes = [apply_buff_card(state, player, card)]
        state.buff_offer = []
        state.player(player).hand = deal_support_hand(state)
        changes.append(f"{player.value} receives {len(state.hand(player))} hand cards")
        state.phase = GamePhase.hand_confirm(player)

        logger.debug("%s selected %s", player.value, card_id)
        return ActionResult.success_with_state(state, changes=changes)

    def _handle_confirm_hand(self, state: MatchState, action: Action) -> ActionResult:
        player = action.payload.player
        self._advance_setup(state, player)
        return ActionResult.success_with_state(state)

    def _advance_setup(self, state: MatchState, player: Player) -> None:
        """Hand over to the second setter, or start play once both are done."""
        first, second = state.setup_order
        if player == first:
            state.phase = GamePhase.setting(second)
            state.current_player = second
            return

        if not state.secret(Player.P1) or not state.secret(Player.P2):
            raise AssertionError("Both secrets must be set before play starts")
        state.phase = GamePhase.PLAYING
        state.current_player = Player.P1
        logger.info(
            "Match %s round %d: play starts", state.match_id, state.current_round
        )

    # ------------------------------------------------------------------
    # Turn phases
    # ------------------------------------------------------------------

    def _handle_submit_guess(self, state: MatchState, action: Action) -> ActionResult:
        if state.phase in (GamePhase.SETTING_P1, GamePhase.SETTING_P2):
            return self._handle_set_secret(state, action)

        player = action.payload.player
        digits = action.payload.digits or ""
        error_code = validate_digits(digits, state.digit_count)
        if error_code:
            return ActionResult.failure(f"Invalid guess '{digits}'", error_code)

        state.player(player).pending_guess = digits
        changes = [f"{player.value} guesses {digits}"]

        if state.card_mode:
            state.phase = GamePhase.card_use(player)
            state.current_player = player
            return ActionResult.success_with_state(state, changes=changes)

        if player == Player.P1:
            state.current_player = Player.P2
            return ActionResult.success_with_state(state, changes=changes)

        outcome = self._resolve_turn(state)
        return ActionResult.success_with_state(
            state, changes=changes + self._outcome_changes(state, outcome), events=outcome.events
        )

    def _handle_use_card(self, state: MatchState, action: Action) -> ActionResult:
        player = action.payload.player
        card_id = action.payload.card_id or ""
        card = get_card(card_id)
        if card is None:
            return ActionResult.failure(f"Unknown card: {card_id}", ErrorCode.UNKNOWN_CARD)
        if not card.is_support or card_id not in state.player(player).hand:
            return ActionResult.failure(f"Card {card_id} not in hand", ErrorCode.CARD_NOT_IN_HAND)

        changes = [use_support_card(state, player, card)]
        return self._after_card_phase(state, player, changes)

    def _handle_skip_card(self, state: MatchState, action: Action) -> ActionResult:
        player = action.payload.player
        state.player(player).used_card = None
        return self._after_card_phase(state, player, [f"{player.value} skips card use"])

    def _after_card_phase(
        self, state: MatchState, player: Player, changes: list[str]
    ) -> ActionResult:
        if player == Player.P1:
            state.phase = GamePhase.WAITING_P2_INPUT
            state.current_player = Player.P2
            return ActionResult.success_with_state(state, changes=changes)

        outcome = self._resolve_turn(state)
        return ActionResult.success_with_state(
            state, changes=changes + self._outcome_changes(state, outcome), events=outcome.events
        )

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _resolve_turn(self, state: MatchState) -> TurnOutcome:
        """Run the sequencer and commit the post-replay transition."""
        state.phase = GamePhase.REPLAYING
        sequencer = ReplaySequencer(calculator=DamageCalculator(digit_count=state.digit_count))
        outcome = sequencer.run(state)
        state.replay_events = outcome.events

        for side in state.players.values():
            side.pending_guess = ""
        clear_one_time_effects(state)

        if state.winner is not None or state.is_draw:
            state.phase = GamePhase.FINISHED
            logger.info(
                "Match %s finished: %s",
                state.match_id, state.winner.value if state.winner else "draw",
            )
        elif state.card_mode and outcome.round_over:
            self._start_next_round(state, outcome.deduced)
        else:
            state.phase = GamePhase.PLAYING
            state.current_player = Player.P1
            state.current_turn += 1
        return outcome

    def _start_next_round(self, state: MatchState, deduced: set[Player]) -> None:
        """
        Clear round data and begin a new setup cycle.

        The side whose secret survived sets first; a mutual deduction
        falls back to P1.
        """
        if len(deduced) == 1:
            first = next(iter(deduced)).opponent
        else:
            first = Player.P1

        for side in state.players.values():
            side.clear_round()
        state.buff_offer = []
        state.current_round += 1
        state.current_turn = 1
        state.setup_order = (first, first.opponent)
        state.phase = GamePhase.setting(first)
        state.current_player = first
        logger.info("Match %s: round %d begins, %s sets first",
                    state.match_id, state.current_round, first.value)

    def _outcome_changes(self, state: MatchState, outcome: TurnOutcome) -> list[str]:
        changes = [event.describe() for event in outcome.events]
        if state.is_draw:
            changes.append("Draw")
        elif state.winner is not None:
            changes.append(f"{state.winner.value} wins")
        elif state.card_mode and outcome.round_over:
            changes.append(f"Round {state.current_round} begins")
        return changes


# ============================================================================
# Public operations
# ============================================================================

_REDUCER = Reducer()


def new_match(
    digit_count: int = 3,
    card_mode: bool = False,
    rng: RandomSource | None = None,
    seed: int | None = None,
    match_id: str | None = None,
) -> MatchState:
    """Create a match waiting for P1's secret."""
    if digit_count not in VALID_DIGIT_COUNTS:
        raise ValueError(f"digit_count must be one of {VALID_DIGIT_COUNTS}, got {digit_count}")

    state = MatchState(
        match_id=match_id or str(uuid.uuid4()),
        digit_count=digit_count,
        card_mode=card_mode,
        rng=rng or SeededRandom(seed),
        seed=seed,
    )
    state.add_log(f"Round {state.current_round} begins")
    logger.info("New match %s (%d digits, card mode %s)", state.match_id, digit_count, card_mode)
    return state


def apply_action(state: MatchState, action: Action) -> ActionResult:
    """Convenience function to apply an action."""
    return _REDUCER.apply(state, action)


def set_secret(state: MatchState, player: Player, digits: str) -> ActionResult:
    return apply_action(state, Action.set_secret(player, digits))


def submit_guess(state: MatchState, player: Player, digits: str) -> ActionResult:
    """Submit a guess; during a SETTING phase the digits become the secret."""
    return apply_action(state, Action.submit_guess(player, digits))


def select_card(state: MatchState, player: Player, card_id: str) -> ActionResult:
    return apply_action(state, Action.select_card(player, card_id))


def confirm_hand(state: MatchState, player: Player) -> ActionResult:
    return apply_action(state, Action.confirm_hand(player))


def use_card(state: MatchState, player: Player, card_id: str) -> ActionResult:
    return apply_action(state, Action.use_card(player, card_id))


def skip_card(state: MatchState, player: Player) -> ActionResult:
    return apply_action(state, Action.skip_card(player))
