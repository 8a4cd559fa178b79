from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from fractions import Fraction

from typing_extensions import NamedTuple

from stvtally.models import Candidate, Election, ElectionState
from stvtally.types import (
    CandidateId,
    CandidateIds,
    CandidateStatus,
    ResultDict,
    RoundAction,
    RoundDict,
    SelectionMethod,
    StandingDict,
    Termination,
    TransferValues,
    Votes,
)


def format_votes(value: Fraction) -> str:
    """
    Exact string form, safe to store and parse back with Fraction().
    >>> format_votes(Fraction(7, 2))
    '7/2'
    >>> format_votes(Fraction(3))
    '3'
    """
    return str(value)


@dataclass(frozen=True)
class ElectionRound:
    index: int
    action: RoundAction
    method: SelectionMethod
    selected: CandidateIds
    # Totals when the round was counted, and after its transfers
    votes: Votes
    transfer_values: TransferValues
    result_votes: Votes
    exhausted: Fraction

    def as_dict(self) -> RoundDict:
        return {
            "index": self.index,
            "action": self.action.value,
            "method": self.method.value,
            "selected": self.selected,
            "vote_count": {c: format_votes(v) for c, v in self.votes.items()},
            "transfer_values": {
                c: format_votes(v) for c, v in self.transfer_values.items()
            },
            "result_vote_count": {
                c: format_votes(v) for c, v in self.result_votes.items()
            },
            "exhausted_votes": format_votes(self.exhausted),
        }


class Standing(NamedTuple):
    candidate: Candidate
    status: CandidateStatus
    votes: Fraction

    def as_dict(self) -> StandingDict:
        return {
            "candidate": self.candidate.id,
            "name": self.candidate.name,
            "status": self.status.value,
            "votes": format_votes(self.votes),
        }


class ElectionResult(list[CandidateId]):
    """Elected candidate ids in election order, with the full count history."""

    quota: int | None = None
    total_votes = 0
    exhausted = Fraction(0)

    def __init__(
        self,
        candidates: CandidateIds,
        seats: int,
        rounds: Sequence[ElectionRound],
        standings: Sequence[Standing],
        termination: Termination,
        elected: CandidateIds = (),
    ) -> None:
        super().__init__(elected)
        self.candidates = candidates
        self.seats = seats
        self.rounds = tuple(rounds)
        self.standings = tuple(standings)
        self.termination = termination

    def __repr__(self) -> str:  # pragma: no coverage
        return (
            f"<ElectionResult in {len(self.rounds)} round(s), "
            f"{self.termination.value}: {', '.join(map(str, self))}>"
        )

    @property
    def complete(self) -> bool:
        return len(self) == self.seats

    @property
    def vacant_seats(self) -> int:
        return self.seats - len(self)

    def elected_as_tuple(self) -> CandidateIds:
        return tuple(self)

    def elected_as_set(self) -> set[CandidateId]:
        return set(self)

    def as_dict(self) -> ResultDict:
        return {
            "winners": tuple(self),
            "candidates": self.candidates,
            "seats": self.seats,
            "complete": self.complete,
            "vacant_seats": self.vacant_seats,
            "termination": self.termination.value,
            "quota": self.quota,
            "total_votes": self.total_votes,
            "exhausted_votes": format_votes(self.exhausted),
            "standings": tuple(s.as_dict() for s in self.standings),
            "rounds": tuple(r.as_dict() for r in self.rounds),
        }


def final_votes(
    election: Election, state: ElectionState, rounds: Sequence[ElectionRound]
) -> Votes:
    """
    Each candidate's total in the round that decided it. Candidates still
    hopeful keep their count after the last transfer.
    """
    votes = dict.fromkeys(election.candidate_ids, Fraction(0))
    decided = set()
    for election_round in rounds:
        for candidate, count in election_round.votes.items():
            if candidate not in decided:
                votes[candidate] = count
        decided.update(election_round.selected)
    if rounds:
        for candidate in state.hopeful:
            votes[candidate] = rounds[-1].result_votes[candidate]
    return votes


def aggregate(
    election: Election,
    state: ElectionState,
    rounds: Sequence[ElectionRound],
    termination: Termination,
) -> ElectionResult:
    """
    Build the final ordered result: elected candidates in the order they were
    elected, then everyone else by descending final total, lowest id first
    on equal totals.
    """
    votes = final_votes(election, state, rounds)
    others = sorted(
        (c for c in election.candidate_ids if c not in state.elected),
        key=lambda c: (-votes[c], c),
    )
    standings = tuple(
        Standing(election.get_candidate(c), state.status[c], votes[c])
        for c in (*state.elected, *others)
    )
    result = ElectionResult(
        candidates=election.candidate_ids,
        seats=election.seats,
        rounds=rounds,
        standings=standings,
        termination=termination,
        elected=state.elected,
    )
    result.total_votes = election.total_votes
    result.exhausted = state.exhausted
    if termination != Termination.QuotaUnreachable:
        result.quota = election.quota
    return result
