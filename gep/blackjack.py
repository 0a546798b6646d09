"""The Blackjack environment.

Cards are drawn from an infinite deck.  The player sees their own sum, the
dealer's showing card (1 is an ace) and whether they hold a usable ace.
Action 0 sticks and action 1 hits.  Rewards: +1 win, -1 loss, 0 draw, and
+1.5 for winning with a natural when ``natural`` is set.  With ``sab`` the
rules of Sutton and Barto are followed: a player natural against a dealer
without one always wins, and ``natural`` is ignored.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Any

from gep.envs import Environment, Space

Observation = tuple[int, int, int]

# 1 = Ace, 2-10 = number cards, Jack/Queen/King = 10.
_DECK = (1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 10, 10, 10)


def _cmp(a: int, b: int) -> float:
    return float((a > b) - (a < b))


def usable_ace(hand: Sequence[int]) -> bool:
    """Whether the hand holds an ace that can count as 11 without busting."""
    return 1 in hand and sum(hand) + 10 <= 21


def sum_hand(hand: Sequence[int]) -> int:
    """The value of the hand, counting a usable ace as 11."""
    total = sum(hand)
    return total + 10 if usable_ace(hand) else total


def is_bust(hand: Sequence[int]) -> bool:
    """Whether the hand is over 21."""
    return sum_hand(hand) > 21


def score(hand: Sequence[int]) -> int:
    """The hand's value, or 0 if it is bust."""
    total = sum_hand(hand)
    return 0 if total > 21 else total


def is_natural(hand: Sequence[int]) -> bool:
    """Whether the hand is exactly an ace and a ten-valued card."""
    return len(hand) == 2 and sorted(hand) == [1, 10]


class BlackjackEnv(Environment):
    """A game of Blackjack against a dealer who draws to 17."""

    def __init__(
        self,
        natural: bool = False,
        sab: bool = False,
        rng: random.Random | None = None,
    ) -> None:
        self.natural = natural
        self.sab = sab
        self._rng = rng if rng is not None else random.Random()
        self._dealer: list[int] = []
        self._player: list[int] = []

    def action_space(self) -> Space:
        return Space(type="Discrete", n=2)

    def observation_space(self) -> Space:
        return Space(
            type="Tuple",
            subspaces=[
                Space(type="Discrete", n=32),
                Space(type="Discrete", n=11),
                Space(type="Discrete", n=2),
            ],
        )

    def sample_action(self) -> int:
        return self._rng.randrange(2)

    def close(self) -> None:
        """Discard the hands in play; a new episode needs a reset."""
        self._dealer = []
        self._player = []

    def _draw_card(self) -> int:
        return self._rng.choice(_DECK)

    def _draw_hand(self) -> list[int]:
        return [self._draw_card(), self._draw_card()]

    def _observation(self) -> Observation:
        return (sum_hand(self._player), self._dealer[0], int(usable_ace(self._player)))

    def reset(self) -> tuple[Observation, dict[str, Any]]:
        """Deal new hands and return the first observation."""
        self._dealer = self._draw_hand()
        self._player = self._draw_hand()
        return self._observation(), {}

    def step(self, action: Any) -> tuple[Observation, float, bool, bool, dict[str, Any]]:
        """Hit (1) or stick (0).

        Raises TypeError for a non-integer action, ValueError for one other
        than 0 or 1, and RuntimeError before the first reset.
        """
        if isinstance(action, bool) or not isinstance(action, int):
            raise TypeError(
                f"Blackjack: invalid action type {type(action).__name__}; must be int"
            )
        if action not in (0, 1):
            raise ValueError(f"Blackjack: invalid action={action}; must be 0 (stay) or 1 (hit)")
        if not self._dealer:
            raise RuntimeError("Blackjack: step called before reset")

        if action == 1:
            self._player.append(self._draw_card())
            if is_bust(self._player):
                return self._observation(), -1.0, True, False, {}
            return self._observation(), 0.0, False, False, {}

        while sum_hand(self._dealer) < 17:
            self._dealer.append(self._draw_card())
        reward = _cmp(score(self._player), score(self._dealer))
        if self.sab and is_natural(self._player) and not is_natural(self._dealer):
            reward = 1.0
        elif not self.sab and self.natural and is_natural(self._player) and reward == 1.0:
            reward = 1.5
        return self._observation(), reward, True, False, {}