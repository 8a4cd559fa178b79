"""
Flat rank-weighted tally: every ranked preference adds a fixed weight for its
rank. No quota, no transfers, no seats.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from fractions import Fraction
from numbers import Rational

from typing_extensions import NamedTuple

from stvtally.models import Candidate, check_roster, make_roster
from stvtally.result import format_votes
from stvtally.types import BallotData, CandidateId, CandidateIds
from stvtally.validation import iter_ballot_data, validate_ballot

logger = logging.getLogger(__name__)


class RankedTotal(NamedTuple):
    candidate: Candidate
    votes: Fraction


@dataclass(frozen=True)
class FlatResult:
    ranking: tuple[RankedTotal, ...]
    rank_weights: tuple[Fraction, ...]
    total_ballots: int

    def totals(self) -> dict[CandidateId, Fraction]:
        return {r.candidate.id: r.votes for r in self.ranking}

    def order(self) -> CandidateIds:
        return tuple(r.candidate.id for r in self.ranking)

    def as_dict(self) -> dict:
        return {
            "ranking": tuple(
                {
                    "candidate": r.candidate.id,
                    "name": r.candidate.name,
                    "votes": format_votes(r.votes),
                }
                for r in self.ranking
            ),
            "rank_weights": tuple(format_votes(w) for w in self.rank_weights),
            "total_ballots": self.total_ballots,
        }


def tally_flat_weighted(
    ballots: BallotData,
    candidates: Iterable,
    rank_weights: Sequence[int | Rational],
) -> FlatResult:
    """
    Sum rank weights per candidate.
    :param ballots: Ballots in any form accepted by tally_stv
    :param candidates: Roster - Candidate entries, (id, name) pairs or ids
    :param rank_weights: Weight added for a preference at each rank, first
        rank first. Ranks past the end add nothing
    :return: All candidates, highest total first, lowest id first on ties
    :raises BallotException: On the first malformed ballot, use
        collect_ballots first to count only the well-formed ones
    """
    roster = make_roster(candidates)
    check_roster(roster)
    weights = tuple(Fraction(w) for w in rank_weights)
    totals = dict.fromkeys((c.id for c in roster), Fraction(0))
    total_ballots = 0
    for preferences, count in iter_ballot_data(ballots):
        ballot = validate_ballot(preferences, roster, count)
        total_ballots += ballot.count
        for candidate, weight in zip(ballot.preferences, weights):
            totals[candidate] += weight * ballot.count
    ranking = tuple(
        RankedTotal(c, totals[c.id])
        for c in sorted(roster, key=lambda c: (-totals[c.id], c.id))
    )
    logger.info("Flat tally of %d ballot(s): %s", total_ballots, ranking)
    return FlatResult(
        ranking=ranking, rank_weights=weights, total_ballots=total_ballots
    )
