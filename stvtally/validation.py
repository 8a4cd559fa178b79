from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping

from more_itertools.recipes import partition
from typing_extensions import NamedTuple

from .exceptions import (
    BallotException,
    DuplicateCandidateInBallot,
    InvalidBallotLength,
    InvalidBallotWeight,
    UnknownCandidateReference,
)
from .models import PreferenceBallot, make_roster
from .types import BallotData, CandidateId

logger = logging.getLogger(__name__)


class Rejection(NamedTuple):
    preferences: tuple
    count: int
    error: BallotException


class BallotCollection(NamedTuple):
    accepted: tuple[PreferenceBallot, ...]
    rejected: tuple[Rejection, ...]


def validate_ballot(
    preferences: Iterable[CandidateId], candidates: Iterable, count: int = 1
) -> PreferenceBallot:
    """
    Check a single ballot against the candidate roster.
    :param preferences: Candidate ids in order of preference
    :param candidates: Roster - Candidate entries, (id, name) pairs or ids
    :param count: Integer weight of the ballot
    :return: Validated ballot
    :raises BallotException: Describing why the ballot was rejected
    >>> validate_ballot(["A", "B"], ("A", "B", "C"))
    PreferenceBallot(preferences=('A', 'B'), count=1)
    """
    preferences = tuple(preferences)
    roster = make_roster(candidates)
    if not preferences:
        raise InvalidBallotLength("Ballot is empty")
    if len(preferences) > len(roster):
        raise InvalidBallotLength(
            f"Ballot ranks {len(preferences)} candidates, only {len(roster)} standing"
        )
    known = {c.id for c in roster}
    if unknown := [c for c in preferences if c not in known]:
        raise UnknownCandidateReference(f"Candidates {unknown!r} not in candidates")
    if len(set(preferences)) != len(preferences):
        repeated = [c for i, c in enumerate(preferences) if c in preferences[:i]]
        raise DuplicateCandidateInBallot(f"Candidates {repeated!r} ranked twice")
    if not isinstance(count, int) or isinstance(count, bool) or count < 1:
        raise InvalidBallotWeight(
            f"Ballot weight must be a positive integer, got {count!r}"
        )
    return PreferenceBallot(preferences, count)


def rejection_reason(
    preferences: Iterable[CandidateId], candidates: Iterable, count: int = 1
) -> BallotException | None:
    """
    >>> rejection_reason(["A", "A", "B"], "ABC")
    DuplicateCandidateInBallot("Candidates ['A'] ranked twice")
    >>> rejection_reason(["A"], "ABC") is None
    True
    """
    try:
        validate_ballot(preferences, candidates, count)
    except BallotException as exc:
        return exc


def iter_ballot_data(
    votes: BallotData | Iterable[PreferenceBallot | Iterable[CandidateId]],
) -> Iterator[tuple[tuple[CandidateId, ...], int]]:
    """
    Normalise the accepted ballot input forms to (preferences, count) pairs.
    >>> list(iter_ballot_data({("A", "B"): 2}))
    [(('A', 'B'), 2)]
    >>> list(iter_ballot_data([["A", "B"], (["B"], 3), PreferenceBallot(("C",))]))
    [(('A', 'B'), 1), (('B',), 3), (('C',), 1)]
    """
    if isinstance(votes, Mapping):
        for preferences, count in votes.items():
            yield tuple(preferences), count
        return
    for item in votes:
        if isinstance(item, PreferenceBallot):
            yield item.preferences, item.count
        elif _is_counted(item):
            preferences, count = item
            yield tuple(preferences), count
        else:
            yield tuple(item), 1


def _is_counted(item) -> bool:
    # A bare preference list holds ids, never a nested iterable
    return (
        isinstance(item, (tuple, list))
        and len(item) == 2
        and isinstance(item[1], int)
        and not isinstance(item[0], (str, int))
    )


def collect_ballots(votes: BallotData, candidates: Iterable) -> BallotCollection:
    """
    Validate ballots one by one, setting malformed ones aside.
    :param votes: A dict or Counter of preferences to count,
        or an iterable of (preferences, count) pairs
    :param candidates: Roster
    :return: Accepted ballots and rejections, in submission order
    """
    roster = make_roster(candidates)

    def check(item: tuple[tuple[CandidateId, ...], int]):
        preferences, count = item
        try:
            return validate_ballot(preferences, roster, count)
        except BallotException as exc:
            logger.debug("Rejected ballot %s: %s", preferences, exc)
            return Rejection(preferences, count, exc)

    rejected, accepted = partition(
        lambda checked: isinstance(checked, PreferenceBallot),
        map(check, iter_ballot_data(votes)),
    )
    collection = BallotCollection(tuple(accepted), tuple(rejected))
    if collection.rejected:
        logger.info(
            "%d ballot(s) accepted, %d rejected",
            len(collection.accepted),
            len(collection.rejected),
        )
    return collection
