from __future__ import annotations

from collections.abc import Iterable, Sequence
from numbers import Rational

from stvtally.engine import tally_stv
from stvtally.flat import FlatResult, tally_flat_weighted
from stvtally.models import Election, PreferenceBallot, make_roster
from stvtally.quotas import Quota, droop_quota
from stvtally.result import ElectionResult
from stvtally.types import BallotData, CandidateId
from stvtally.validation import Rejection, collect_ballots, validate_ballot


class STVPoll:
    """
    Ballot box for one election. Ballots are validated as they are added, so
    a malformed ballot is turned away on its own and never reaches the count.
    """

    ballots: list[PreferenceBallot]

    def __init__(
        self,
        seats: int,
        candidates: Iterable,
        quota: Quota = droop_quota,
        elect_last_standing: bool = False,
    ):
        # Fail on a bad roster or seat count before any ballot is taken
        self.election = Election(
            candidates=make_roster(candidates), seats=seats, quota_method=quota
        )
        self.ballots = []
        self.elect_last_standing = elect_last_standing

    @property
    def candidates(self):
        return self.election.candidates

    @property
    def seats(self) -> int:
        return self.election.seats

    @property
    def ballot_count(self) -> int:
        return sum(b.count for b in self.ballots)

    def add_ballot(
        self, ballot: Iterable[CandidateId], num: int = 1
    ) -> PreferenceBallot:
        """Raises a BallotException, recording nothing, if the ballot is malformed."""
        validated = validate_ballot(ballot, self.candidates, num)
        self.ballots.append(validated)
        return validated

    def add_ballots(self, votes: BallotData) -> tuple[Rejection, ...]:
        """Add every well-formed ballot, returning the ones turned away."""
        accepted, rejected = collect_ballots(votes, self.candidates)
        self.ballots.extend(accepted)
        return rejected

    def calculate(self) -> ElectionResult:
        return tally_stv(
            self.ballots,
            self.candidates,
            self.seats,
            quota_method=self.election.quota_method,
            elect_last_standing=self.elect_last_standing,
        )

    def calculate_flat(self, rank_weights: Sequence[int | Rational]) -> FlatResult:
        return tally_flat_weighted(self.ballots, self.candidates, rank_weights)
