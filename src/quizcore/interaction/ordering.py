"""
Ordering presenter.

Holds the student's current arrangement of an ORDERING question as a list
of item ids. Position numbers are index + 1 and are never stored.

Lifecycle: UNSHUFFLED -> SHUFFLED -> REORDERING -> SUBMITTED
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from enum import Enum

from loguru import logger

from config import get_settings

from ..types import OrderingData


class OrderingState(str, Enum):
    UNSHUFFLED = "unshuffled"
    SHUFFLED = "shuffled"
    REORDERING = "reordering"
    SUBMITTED = "submitted"


def fisher_yates(items: Sequence[str], rng: random.Random) -> list[str]:
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def shuffle_away_from(
    correct: Sequence[str],
    rng: random.Random,
    max_attempts: int,
) -> list[str]:
    """
    Shuffle until the arrangement differs from the correct order.

    After max_attempts identical shuffles the correct order is rotated by
    one, which differs at every index for two or more distinct items.
    """
    correct = list(correct)
    if len(correct) < 2:
        return correct

    for attempt in range(1, max_attempts + 1):
        candidate = fisher_yates(correct, rng)
        if candidate != correct:
            return candidate
        logger.debug(f"Shuffle attempt {attempt} matched the correct order, retrying")

    logger.debug(f"Shuffle gave up after {max_attempts} attempts, rotating")
    return correct[1:] + correct[:1]


class OrderingPresenter:
    """Current arrangement of one ordering question."""

    def __init__(
        self,
        data: OrderingData,
        rng: random.Random | None = None,
        max_attempts: int | None = None,
    ):
        self._data = data
        self._rng = rng or random.Random()
        self._max_attempts = max_attempts or get_settings().ordering_shuffle_max_attempts
        self._order: list[str] = data.correct_order()
        self.state = OrderingState.UNSHUFFLED

    @property
    def order(self) -> list[str]:
        """Item ids in current order (a copy)."""
        return list(self._order)

    def position_of(self, item_id: str) -> int | None:
        """1-based position of an item, or None if unknown."""
        try:
            return self._order.index(item_id) + 1
        except ValueError:
            return None

    def shuffle(self) -> list[str]:
        """Place items in a random order that differs from the correct one."""
        if self.state == OrderingState.SUBMITTED:
            return self.order
        self._order = shuffle_away_from(self._data.correct_order(), self._rng, self._max_attempts)
        self.state = OrderingState.SHUFFLED
        return self.order

    def present(self) -> list[str]:
        """Shuffle on first presentation; later calls keep the arrangement."""
        if self.state == OrderingState.UNSHUFFLED:
            self.shuffle()
        return self.order

    def restore(self, order: Sequence[str]) -> list[str]:
        """
        Resume from a saved arrangement.

        Accepted only if it is a permutation of the question's items;
        anything else falls back to a fresh shuffle.
        """
        if self.state == OrderingState.SUBMITTED:
            return self.order
        expected = self._data.correct_order()
        if len(order) == len(expected) and sorted(order) == sorted(expected):
            self._order = list(order)
            self.state = OrderingState.REORDERING
            return self.order
        logger.debug("Saved order does not match the items, reshuffling")
        return self.shuffle()

    def move(self, source: int, destination: int) -> bool:
        """Move the item at source index to destination index (0-based)."""
        if self.state == OrderingState.SUBMITTED:
            return False
        size = len(self._order)
        if not (0 <= source < size and 0 <= destination < size):
            return False
        item = self._order.pop(source)
        self._order.insert(destination, item)
        self.state = OrderingState.REORDERING
        return True

    def submit(self) -> list[str]:
        """Freeze the arrangement and return it."""
        self.state = OrderingState.SUBMITTED
        return self.order
