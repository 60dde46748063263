"""Proposal ordering and the interactive review step.

Pending proposals are kept in a binary heap keyed by
``(-price, insertion sequence)``: the highest price is always on top and
equal prices come out in the order they were submitted.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass
from typing import Callable, Iterator

from classifieds.logging import get_logger
from classifieds.models.enums import NegotiationChoice, NegotiationOutcome
from classifieds.models.proposal import Proposal
from classifieds.models.transaction import Transaction

logger = get_logger(__name__)

Chooser = Callable[[Proposal], "NegotiationChoice | int"]
Reporter = Callable[[str], None]

NO_PROPOSALS_MESSAGE = "You have not received any proposals."

MENU = (
    "1 - Accept",
    "2 - Refuse",
    "3 - Back",
)


class ProposalQueue:
    """Best-first collection of pending proposals."""

    __slots__ = ("_heap", "_counter")

    def __init__(self) -> None:
        self._heap: list[tuple] = []
        self._counter = itertools.count()

    def push(self, proposal: Proposal) -> None:
        heapq.heappush(self._heap, (-proposal.price, next(self._counter), proposal))

    def peek(self) -> Proposal | None:
        """Return the best proposal without removing it."""
        if not self._heap:
            return None
        return self._heap[0][2]

    def pop(self) -> Proposal:
        """Remove and return the best proposal."""
        if not self._heap:
            raise IndexError("pop from an empty proposal queue")
        return heapq.heappop(self._heap)[2]

    def drain(self) -> list[Proposal]:
        """Remove every proposal, best first."""
        drained = list(self)
        self._heap.clear()
        return drained

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __iter__(self) -> Iterator[Proposal]:
        # Sequence numbers are unique, so sorting never compares proposals
        return iter([entry[2] for entry in sorted(self._heap)])


@dataclass(frozen=True)
class NegotiationResult:
    """Outcome of one review step."""

    outcome: NegotiationOutcome
    proposal: Proposal | None = None
    transaction: Transaction | None = None


def prompt_choice(
    input_func: Callable[[str], str] = input,
    output: Reporter = print,
) -> NegotiationChoice:
    """Show the review menu and read a choice.

    Anything other than 1, 2 or 3 is rejected and asked for again, with
    no limit on the number of attempts.
    """
    for line in MENU:
        output(line)
    while True:
        raw = input_func("Please select a valid option\n").strip()
        try:
            return NegotiationChoice(int(raw))
        except ValueError:
            logger.debug("Rejected menu input %r", raw)


def make_prompt_chooser(
    input_func: Callable[[str], str] = input,
    output: Reporter = print,
) -> Chooser:
    """Build a chooser that asks on the terminal."""

    def choose(proposal: Proposal) -> NegotiationChoice:
        return prompt_choice(input_func=input_func, output=output)

    return choose


def review(
    queue: ProposalQueue,
    chooser: Chooser,
    report: Reporter,
) -> tuple[Proposal, NegotiationChoice] | None:
    """Surface the best pending proposal and ask what to do with it.

    Returns ``None`` when nothing is pending. Does not modify the queue.
    A chooser answer outside 1, 2 and 3 is not an option, so the chooser
    is asked again, as the terminal prompt does.
    """
    best = queue.peek()
    if best is None:
        report(NO_PROPOSALS_MESSAGE)
        return None

    report(f"Price offered: {best.price}")
    report(f"Offer from: {best.owner.name}")
    while True:
        answer = chooser(best)
        try:
            return best, NegotiationChoice(answer)
        except ValueError:
            logger.warning(
                "Rejected choice %r, asking again",
                answer,
                extra={"user_id": best.owner_id, "price": best.price},
            )
