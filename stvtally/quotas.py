from __future__ import annotations

from typing import Protocol


class Quota(Protocol):
    """
    Calculate poll quota from valid vote count and expected poll winners.
    Returns None when no candidate can ever reach it.
    """

    def __call__(
        self, ballot_count: int, winners: int
    ) -> int | None:  # pragma: no coverage
        ...


def hagenbach_bischof_quota(ballot_count: int, winners: int) -> int | None:
    """
    Calculate poll quota from ballot count and expected poll winners
    >>> hagenbach_bischof_quota(100, 3)
    25
    >>> hagenbach_bischof_quota(0, 3) is None
    True
    """
    if not ballot_count:
        return None
    return ballot_count // (winners + 1)


def droop_quota(ballot_count: int, winners: int) -> int | None:
    """
    Default quota, floor(V / (seats + 1)) + 1
    >>> droop_quota(100, 3)
    26
    >>> droop_quota(4, 1)
    3
    >>> droop_quota(1, 2)
    1
    """
    if not ballot_count:
        return None
    return ballot_count // (winners + 1) + 1


def hare_quota(ballot_count: int, winners: int) -> int | None:
    """
    >>> hare_quota(100, 3)
    33
    """
    if not ballot_count:
        return None
    return ballot_count // winners
