"""Pure scoring rules for wager rounds."""

from __future__ import annotations

from typing import Iterable, Mapping

from .wager_moves import Guess, Wager

STARTING_SCORE = 1
PAYOUT_RATIO = 3
CLOSEST_GUESS_BONUS = 3


def closest_guess(values: Iterable[int], answer: int) -> int | None:
    """Return the largest value not exceeding ``answer``, or None if all are over."""
    eligible = [value for value in values if value <= answer]
    return max(eligible, default=None)


def wager_delta(wager: Wager, closest: int | None, payout_ratio: int) -> int:
    """Return the score change produced by a single wager."""
    if wager.target == closest:
        return wager.amount * payout_ratio
    if wager.amount >= 1:
        # A losing wager always leaves the bettor one point of the stake.
        return -wager.amount + 1
    return 0


def score_changes(
    guesses: Mapping[str, Guess],
    wagers: Mapping[str, Wager],
    answer: int,
    payout_ratio: int,
    closest_guess_bonus: int,
) -> dict[str, int]:
    """Return per-player score deltas for one round.

    Players that neither wagered nor submitted the closest guess have no
    entry at all, which callers treat as "unchanged".
    """
    closest = closest_guess((guess.value for guess in guesses.values()), answer)
    changes: dict[str, int] = {}
    for player, wager in wagers.items():
        changes[player] = wager_delta(wager, closest, payout_ratio)

    if closest is not None:
        for player, guess in guesses.items():
            if guess.value == closest:
                changes[player] = changes.get(player, 0) + closest_guess_bonus
    return changes


def accumulate(players: Iterable[str], round_changes: Iterable[Mapping[str, int]]) -> dict[str, int]:
    """Fold per-round deltas into running totals for the given players."""
    totals = {player: STARTING_SCORE for player in players}
    for changes in round_changes:
        for player, delta in changes.items():
            if player in totals:
                totals[player] += delta
    return totals
