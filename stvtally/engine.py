"""
Round-based STV count.

Each round counts the ballots, elects every hopeful candidate at or above the
quota (transferring their surplus) or, failing that, eliminates the hopeful
candidate with the fewest votes. All weights are exact fractions, so the same
ballots always produce the same history.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import replace
from fractions import Fraction

from stvtally.exceptions import TallyInvariantError
from stvtally.models import BallotState, Election, ElectionState, make_roster
from stvtally.quotas import Quota, droop_quota
from stvtally.result import ElectionResult, ElectionRound, aggregate
from stvtally.types import (
    BallotData,
    CandidateIds,
    CandidateStatus,
    RoundAction,
    SelectionMethod,
    Termination,
    Votes,
)
from stvtally.validation import iter_ballot_data, validate_ballot

logger = logging.getLogger(__name__)


def initial_state(election: Election) -> ElectionState:
    return ElectionState(
        status={c: CandidateStatus.Hopeful for c in election.candidate_ids},
        ballots=tuple(BallotState.start(b) for b in election.ballots),
    )


def count_votes(election: Election, state: ElectionState) -> Votes:
    """
    Totals for every candidate: ballot weight for hopefuls, retained votes
    for the elected and nothing for the eliminated.
    """
    hopeful = set(state.hopeful)
    votes = dict.fromkeys(election.candidate_ids, Fraction(0))
    votes.update(state.retained)
    for ballot in state.ballots:
        if ballot.exhausted:
            continue
        target = ballot.current_preference
        if target not in hopeful:
            raise TallyInvariantError(
                f"Ballot {ballot.ballot.preferences} points at "
                f"{state.status.get(target)} candidate {target!r}"
            )
        votes[target] += ballot.weight
    return votes


def check_termination(election: Election, state: ElectionState) -> Termination | None:
    if not election.quota_reachable:
        return Termination.QuotaUnreachable
    if len(state.elected) >= election.seats:
        return Termination.AllSeatsFilled
    if not state.hopeful:
        return Termination.NoCandidatesRemain


def _by_votes(candidates: Iterable, votes: Votes) -> CandidateIds:
    return tuple(sorted(candidates, key=lambda c: (-votes[c], c)))


def _cut_through_tie(candidates: CandidateIds, votes: Votes, cap: int) -> bool:
    """True when the last candidate kept and the first left out share a total."""
    if not 0 < cap < len(candidates):
        return False
    return votes[candidates[cap - 1]] == votes[candidates[cap]]


def step(
    election: Election, state: ElectionState, *, elect_last_standing: bool = False
) -> tuple[ElectionRound, ElectionState]:
    """
    Run a single round on an unfinished count.
    :param election: The election being counted
    :param state: State after the previous round
    :param elect_last_standing: Elect remaining hopefuls outright once they
        are no more than the open seats
    :return: The round record and the state it leads to
    """
    votes = count_votes(election, state)
    hopeful = state.hopeful
    seats_to_fill = election.seats - len(state.elected)
    logger.debug("Round %d totals: %s", state.rounds + 1, votes)

    if elect_last_standing and len(hopeful) <= seats_to_fill:
        return _elect(
            election,
            state,
            votes,
            _by_votes(hopeful, votes),
            SelectionMethod.NoCompetition,
        )
    above_quota = _by_votes((c for c in hopeful if votes[c] >= election.quota), votes)
    if above_quota:
        method = (
            SelectionMethod.TiebreakIdentifier
            if _cut_through_tie(above_quota, votes, seats_to_fill)
            else SelectionMethod.Direct
        )
        return _elect(election, state, votes, above_quota[:seats_to_fill], method)
    return _eliminate(election, state, votes)


def _elect(
    election: Election,
    state: ElectionState,
    votes: Votes,
    selected: CandidateIds,
    method: SelectionMethod,
) -> tuple[ElectionRound, ElectionState]:
    status = {
        c: CandidateStatus.Elected if c in selected else s
        for c, s in state.status.items()
    }
    elected = state.elected + selected
    standing = {c for c, s in status.items() if s == CandidateStatus.Hopeful}
    retained = dict(state.retained)
    ballots = state.ballots
    transfer_values = {}
    logger.info("Round %d: elected %s (%s)", state.rounds + 1, selected, method.value)

    if len(elected) < election.seats and standing:
        for candidate in selected:
            total = votes[candidate]
            surplus = total - election.quota
            transfer_value = surplus / total if total else Fraction(0)
            transfer_values[candidate] = transfer_value
            retained[candidate] = total - surplus
            ballots = tuple(
                b.rescale(transfer_value).advance(standing)
                if b.current_preference == candidate
                else b
                for b in ballots
            )
            logger.debug(
                "Transferring surplus %s of %r at %s",
                surplus,
                candidate,
                transfer_value,
            )
    else:
        # Count is over, nothing left to transfer to
        retained.update((c, votes[c]) for c in selected)

    new_state = replace(
        state,
        status=status,
        ballots=ballots,
        retained=retained,
        elected=elected,
        rounds=state.rounds + 1,
    )
    result_votes = count_votes(election, new_state) if transfer_values else dict(votes)
    election_round = ElectionRound(
        index=new_state.rounds,
        action=RoundAction.Elect,
        method=method,
        selected=selected,
        votes=votes,
        transfer_values=transfer_values,
        result_votes=result_votes,
        exhausted=new_state.exhausted,
    )
    return election_round, new_state


def _eliminate(
    election: Election, state: ElectionState, votes: Votes
) -> tuple[ElectionRound, ElectionState]:
    hopeful = state.hopeful
    lowest = min(votes[c] for c in hopeful)
    tied = sorted(c for c in hopeful if votes[c] == lowest)
    candidate = tied[0]
    method = (
        SelectionMethod.TiebreakIdentifier if len(tied) > 1 else SelectionMethod.Direct
    )
    standing = set(hopeful) - {candidate}
    logger.info(
        "Round %d: eliminated %r with %s votes (%s)",
        state.rounds + 1,
        candidate,
        lowest,
        method.value,
    )

    new_state = replace(
        state,
        status={**state.status, candidate: CandidateStatus.Eliminated},
        ballots=tuple(
            b.advance(standing) if b.current_preference == candidate else b
            for b in state.ballots
        ),
        eliminated=state.eliminated + (candidate,),
        rounds=state.rounds + 1,
    )
    election_round = ElectionRound(
        index=new_state.rounds,
        action=RoundAction.Eliminate,
        method=method,
        selected=(candidate,),
        votes=votes,
        transfer_values={},
        result_votes=count_votes(election, new_state),
        exhausted=new_state.exhausted,
    )
    return election_round, new_state


def iter_rounds(
    election: Election,
    state: ElectionState | None = None,
    *,
    elect_last_standing: bool = False,
) -> Iterator[tuple[ElectionRound, ElectionState]]:
    """Yield each round with the state it produced, until the count is over."""
    if state is None:
        state = initial_state(election)
    while check_termination(election, state) is None:
        election_round, state = step(
            election, state, elect_last_standing=elect_last_standing
        )
        yield election_round, state


def tally_stv(
    ballots: BallotData,
    candidates: Iterable,
    seats: int,
    *,
    quota_method: Quota = droop_quota,
    elect_last_standing: bool = False,
) -> ElectionResult:
    """
    Full STV count with quota, surplus transfer and elimination.
    :param ballots: Validated ballots - PreferenceBallot instances, a dict of
        preferences to count, (preferences, count) pairs or plain preference lists
    :param candidates: Roster - Candidate entries, (id, name) pairs or ids
    :param seats: Number of seats to fill
    :param quota_method: Defaults to droop_quota
    :param elect_last_standing: Elect remaining candidates outright when there
        are no more of them than open seats. Off by default, leaving seats vacant
    :return: Election result
    :raises BallotException: On the first malformed ballot. Pass raw
        submissions through collect_ballots first to set those aside and
        count the rest
    """
    roster = make_roster(candidates)
    election = Election(
        candidates=roster,
        seats=seats,
        ballots=tuple(
            validate_ballot(preferences, roster, count)
            for preferences, count in iter_ballot_data(ballots)
        ),
        quota_method=quota_method,
    )
    state = initial_state(election)
    if check_termination(election, state) == Termination.QuotaUnreachable:
        logger.warning(
            "No quota can be reached with %d valid votes, no seats filled",
            election.total_votes,
        )
        return aggregate(election, state, (), Termination.QuotaUnreachable)

    logger.info(
        "Counting %d vote(s) for %d seat(s), quota %d",
        election.total_votes,
        election.seats,
        election.quota,
    )
    rounds = []
    for election_round, state in iter_rounds(
        election, state, elect_last_standing=elect_last_standing
    ):
        rounds.append(election_round)
    termination = check_termination(election, state)
    logger.info(
        "Count finished after %d round(s): %s, elected %s",
        len(rounds),
        termination.value,
        state.elected,
    )
    return aggregate(election, state, rounds, termination)
