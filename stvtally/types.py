from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from fractions import Fraction
from typing import TypeVar, TypedDict

CandidateId = TypeVar("CandidateId", int, str)
CandidateIds = tuple[CandidateId, ...]
BallotData = Mapping[CandidateIds, int] | Iterable[tuple[Iterable[CandidateId], int]]
Votes = dict[CandidateId, Fraction]
TransferValues = dict[CandidateId, Fraction]


class CandidateStatus(str, Enum):
    Hopeful = "Hopeful"
    Elected = "Elected"
    Eliminated = "Eliminated"


class RoundAction(str, Enum):
    Elect = "Elected"
    Eliminate = "Eliminated"


class SelectionMethod(str, Enum):
    Direct = "Direct"
    TiebreakIdentifier = "Tiebreak (lowest identifier)"
    NoCompetition = "No competition left"


class Termination(str, Enum):
    AllSeatsFilled = "AllSeatsFilled"
    NoCandidatesRemain = "NoCandidatesRemain"
    QuotaUnreachable = "QuotaUnreachable"


class RoundDict(TypedDict):
    index: int
    action: str
    method: str
    selected: CandidateIds
    vote_count: dict[CandidateId, str]
    transfer_values: dict[CandidateId, str]
    result_vote_count: dict[CandidateId, str]
    exhausted_votes: str


class StandingDict(TypedDict):
    candidate: CandidateId
    name: str
    status: str
    votes: str


class ResultDict(TypedDict):
    winners: CandidateIds
    candidates: CandidateIds
    seats: int
    complete: bool
    vacant_seats: int
    termination: str
    quota: int | None
    total_votes: int
    exhausted_votes: str
    standings: tuple[StandingDict, ...]
    rounds: tuple[RoundDict, ...]
