"""
Hit & Blow CLI - Hot-seat play in one terminal.

Usage:
    hitblow play [--digits 3|4] [--cards] [--seed N] [--random-secrets]
    hitblow judge <secret> <guess>
"""

import argparse
import getpass
import logging
import sys

from .config import load_config


def main(argv=None):
    """Main CLI entry point."""
    config = load_config()
    parser = argparse.ArgumentParser(
        description="Hit & Blow - two-player number deduction battle",
        prog="hitblow",
    )
    parser.add_argument("--log-level", default=config.log_level, help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a hot-seat match")
    play_parser.add_argument("--digits", type=int, choices=(3, 4), default=config.digit_count)
    play_parser.add_argument("--cards", action="store_true", default=config.card_mode,
                             help="Card battle mode (HP, buffs, support cards)")
    play_parser.add_argument("--seed", type=int, default=config.seed, help="RNG seed")
    play_parser.add_argument("--random-secrets", action="store_true",
                             help="Generate secrets instead of typing them")

    # Judge command
    judge_parser = subparsers.add_parser("judge", help="Score a guess against a secret")
    judge_parser.add_argument("secret")
    judge_parser.add_argument("guess")

    args = parser.parse_args(argv)
    if args.command == "play" and args.digits not in (3, 4):
        parser.error(f"--digits must be 3 or 4, got {args.digits} (check HITBLOW_DIGIT_COUNT)")
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        cmd_play(args)
    elif args.command == "judge":
        cmd_judge(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_judge(args):
    """Score a single guess."""
    from .engine_core import judge, validate_digits

    for digits in (args.secret, args.guess):
        error_code = validate_digits(digits, len(args.secret))
        if error_code:
            print(f"Error: {digits}: {error_code.value}")
            sys.exit(1)

    result = judge(args.secret, args.guess)
    print(f"{result.hit} Hit / {result.blow} Blow")


def cmd_play(args):
    """Drive a match until it is finished."""
    from .engine_core import (
        GamePhase, SeededRandom, generate_secret, new_match,
        submit_guess, select_card, confirm_hand, use_card, skip_card,
    )
    from .engine_core.reducer import expected_player

    rng = SeededRandom(args.seed)
    state = new_match(digit_count=args.digits, card_mode=args.cards, rng=rng, seed=args.seed)
    print(f"Hit & Blow - {args.digits} digits, {'card battle' if args.cards else 'plain'} mode")

    while not state.is_finished:
        player = expected_player(state)
        name = player.value
        phase = state.phase

        if phase in (GamePhase.SETTING_P1, GamePhase.SETTING_P2):
            if args.random_secrets:
                digits = generate_secret(state.digit_count, rng)
                print(f"{name}'s secret was generated")
            else:
                digits = getpass.getpass(f"[Round {state.current_round}] {name}, set your secret: ")
            result = submit_guess(state, player, digits)

        elif phase in (GamePhase.CARD_SELECT_P1, GamePhase.CARD_SELECT_P2):
            print(f"{name}, pick a buff: {', '.join(state.buff_offer)}")
            result = select_card(state, player, input("> ").strip())

        elif phase in (GamePhase.HAND_CONFIRM_P1, GamePhase.HAND_CONFIRM_P2):
            print(f"{name}'s hand: {', '.join(state.hand(player))}")
            input("Press Enter to continue")
            result = confirm_hand(state, player)

        elif phase in (GamePhase.CARD_USE_P1, GamePhase.CARD_USE_P2):
            print(f"{name}, use a card ({', '.join(state.hand(player))}) or press Enter to skip")
            choice = input("> ").strip()
            result = use_card(state, player, choice) if choice else skip_card(state, player)

        else:
            _print_status(state)
            result = submit_guess(state, player, input(f"{name}, your guess: ").strip())

        if not result.success:
            print(f"Error: {result.error} ({result.error_code.value})")
            continue

        for event in result.events:
            print(f"  {event.describe()}")
        state = result.new_state

    if state.is_draw:
        print("Draw!")
    else:
        print(f"{state.winner.value} wins!")


def _print_status(state):
    for player, side in state.players.items():
        line = f"{player.value}"
        if state.card_mode:
            line += f" HP {side.hp}"
            summary = side.modifiers.describe()
            if summary:
                line += f" [{summary}]"
        history = ", ".join(f"{e.digits}:{e.hit}H{e.blow}B" for e in side.logs)
        print(f"{line}  {history}")


if __name__ == "__main__":
    main()
