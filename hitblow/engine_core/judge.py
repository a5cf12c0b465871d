"""
Judge - Hit/Blow scoring of a guess against a secret.

Pure functions, no state. Validation of player input lives here too
but is never called by judge() itself.
"""

from __future__ import annotations

from .action import ErrorCode
from .state import GuessResult


def judge(secret: str, guess: str) -> GuessResult:
    """
    Score a guess against a secret of the same length.

    Example:
      secret = "123", guess = "132"
      '1' matches in place -> 1 hit
      '3' and '2' appear elsewhere -> 2 blows
    """
    hit = 0
    blow = 0
    for i, digit in enumerate(guess):
        if secret[i] == digit:
            hit += 1
        elif digit in secret:
            blow += 1
    return GuessResult(hit=hit, blow=blow)


def validate_digits(digits: str, digit_count: int) -> ErrorCode | None:
    """
    Check that `digits` is a well-formed sequence for this match.

    Returns an error code if invalid, None if valid.
    """
    if len(digits) != digit_count:
        return ErrorCode.INVALID_GUESS_LENGTH
    if not all(c in "0123456789" for c in digits):
        return ErrorCode.INVALID_CHARACTERS
    if len(set(digits)) != digit_count:
        return ErrorCode.DUPLICATE_DIGITS
    return None


def digit_sum(digits: str) -> int:
    """Sum of the decimal digits, the base damage of a secret."""
    return sum(int(c) for c in digits)
