from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field, replace
from fractions import Fraction
from functools import cached_property
from typing import TYPE_CHECKING

from typing_extensions import NamedTuple

from .exceptions import (
    DuplicateCandidateId,
    ElectionSetupError,
    InvalidSeatCount,
    QuotaUnreachable,
    UnknownCandidateReference,
)
from .quotas import Quota, droop_quota
from .types import CandidateId, CandidateIds, CandidateStatus

if TYPE_CHECKING:  # pragma: no coverage
    from typing_extensions import Self


class Candidate(NamedTuple):
    id: CandidateId
    name: str

    def __str__(self) -> str:
        return self.name


Roster = tuple[Candidate, ...]


def make_roster(candidates: Iterable) -> Roster:
    """
    Accepts Candidate entries, (id, name) pairs or bare identifiers.
    >>> make_roster(["A", ("B", "Bob")])
    (Candidate(id='A', name='A'), Candidate(id='B', name='Bob'))
    """
    roster = []
    for entry in candidates:
        if isinstance(entry, Candidate):
            roster.append(entry)
        elif isinstance(entry, tuple):
            roster.append(Candidate(*entry))
        else:
            roster.append(Candidate(entry, str(entry)))
    return tuple(roster)


def check_roster(roster: Roster) -> list[CandidateId]:
    """Ids must be unique and sortable, ties are broken on id order."""
    ids = [c.id for c in roster]
    if len(set(ids)) != len(ids):
        duplicated = sorted({i for i in ids if ids.count(i) > 1}, key=str)
        raise DuplicateCandidateId(f"Candidate ids not unique: {duplicated}")
    try:
        sorted(ids)
    except TypeError as exc:
        raise ElectionSetupError("Candidate ids must be mutually comparable") from exc
    return ids


@dataclass(frozen=True)
class PreferenceBallot:
    preferences: CandidateIds
    count: int = 1

    def __len__(self) -> int:
        return len(self.preferences)


@dataclass(frozen=True)
class BallotState:
    """Where a ballot currently sits in the count, and what it is worth."""

    ballot: PreferenceBallot
    pointer: int
    weight: Fraction

    @classmethod
    def start(cls, ballot: PreferenceBallot) -> Self:
        return cls(ballot=ballot, pointer=0, weight=Fraction(ballot.count))

    @property
    def exhausted(self) -> bool:
        return self.pointer >= len(self.ballot)

    @property
    def current_preference(self) -> CandidateId | None:
        if self.exhausted:
            return None
        return self.ballot.preferences[self.pointer]

    def advance(self, standing: Collection[CandidateId]) -> Self:
        """
        Move past the current preference to the next standing candidate,
        or past the end of the ballot if there is none.
        >>> b = BallotState.start(PreferenceBallot(("A", "B", "C")))
        >>> b.advance({"C"}).current_preference
        'C'
        >>> b.advance(set()).exhausted
        True
        """
        preferences = self.ballot.preferences
        pointer = next(
            (
                i
                for i in range(self.pointer + 1, len(preferences))
                if preferences[i] in standing
            ),
            len(preferences),
        )
        return replace(self, pointer=pointer)

    def rescale(self, transfer_value: Fraction) -> Self:
        return replace(self, weight=self.weight * transfer_value)


@dataclass(frozen=True)
class Election:
    """
    Immutable roster, seat count and validated ballot set of one tally.
    Ballots are expected to have passed the validator already; the checks here
    only guard the aggregate invariants.
    """

    candidates: Roster
    seats: int
    ballots: tuple[PreferenceBallot, ...] = ()
    quota_method: Quota = droop_quota

    def __post_init__(self) -> None:
        ids = check_roster(self.candidates)
        if (
            not isinstance(self.seats, int)
            or isinstance(self.seats, bool)
            or not 1 <= self.seats <= len(ids)
        ):
            raise InvalidSeatCount(
                f"Seat count must be between 1 and {len(ids)}, got {self.seats!r}"
            )
        known = set(ids)
        for ballot in self.ballots:
            if unknown := [c for c in ballot.preferences if c not in known]:
                raise UnknownCandidateReference(
                    f"Candidates {unknown!r} not in candidates: {ballot}"
                )

    @classmethod
    def create(
        cls,
        candidates: Iterable,
        seats: int,
        ballots: Iterable[PreferenceBallot] = (),
        quota_method: Quota = droop_quota,
    ) -> Self:
        return cls(
            candidates=make_roster(candidates),
            seats=seats,
            ballots=tuple(ballots),
            quota_method=quota_method,
        )

    @cached_property
    def candidate_ids(self) -> CandidateIds:
        return tuple(c.id for c in self.candidates)

    @cached_property
    def total_votes(self) -> int:
        return sum((b.count for b in self.ballots), start=0)

    @property
    def quota_reachable(self) -> bool:
        return self.quota_method(self.total_votes, self.seats) is not None

    @cached_property
    def quota(self) -> int:
        quota = self.quota_method(self.total_votes, self.seats)
        if quota is None:
            raise QuotaUnreachable(
                f"No quota can be reached with {self.total_votes} valid votes"
            )
        return quota

    def get_candidate(self, candidate_id: CandidateId) -> Candidate:
        for candidate in self.candidates:
            if candidate.id == candidate_id:
                return candidate
        raise UnknownCandidateReference(f"Candidate {candidate_id!r} not in candidates")


@dataclass(frozen=True)
class ElectionState:
    status: Mapping[CandidateId, CandidateStatus]
    ballots: tuple[BallotState, ...]
    # Votes kept by elected candidates once their surplus has moved on
    retained: Mapping[CandidateId, Fraction] = field(default_factory=dict)
    elected: CandidateIds = ()
    eliminated: CandidateIds = ()
    rounds: int = 0

    @property
    def hopeful(self) -> CandidateIds:
        return tuple(
            c for c, status in self.status.items() if status == CandidateStatus.Hopeful
        )

    @property
    def exhausted(self) -> Fraction:
        return sum((b.weight for b in self.ballots if b.exhausted), start=Fraction(0))
