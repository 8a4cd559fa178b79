import pytest

from stvtally.exceptions import (
    BallotException,
    DuplicateCandidateInBallot,
    InvalidBallotLength,
    InvalidBallotWeight,
    UnknownCandidateReference,
)
from stvtally.models import Candidate, PreferenceBallot
from stvtally.validation import collect_ballots, rejection_reason, validate_ballot

CANDIDATES = (Candidate("A", "Alice"), Candidate("B", "Bob"), Candidate("C", "Chris"))


def test_valid_ballot():
    ballot = validate_ballot(["A", "C"], CANDIDATES, 3)
    assert ballot == PreferenceBallot(("A", "C"), 3)
    assert len(ballot) == 2


def test_roster_forms():
    assert validate_ballot(("B",), [("A", "Alice"), ("B", "Bob")]).preferences == ("B",)
    assert validate_ballot([2, 1], [1, 2, 3]).preferences == (2, 1)


@pytest.mark.parametrize(
    "preferences, error",
    [
        ([], InvalidBallotLength),
        (["A", "B", "C", "A"], InvalidBallotLength),
        (["A", "D"], UnknownCandidateReference),
        (["A", "A", "B"], DuplicateCandidateInBallot),
        (["C", "B", "C"], DuplicateCandidateInBallot),
    ],
)
def test_rejected(preferences, error):
    with pytest.raises(error):
        validate_ballot(preferences, CANDIDATES)
    assert isinstance(rejection_reason(preferences, CANDIDATES), error)


@pytest.mark.parametrize("count", [0, -1, 1.5, True, "2"])
def test_bad_weight(count):
    with pytest.raises(InvalidBallotWeight):
        validate_ballot(["A"], CANDIDATES, count)


def test_all_rejections_are_ballot_exceptions():
    for error in (
        InvalidBallotLength,
        UnknownCandidateReference,
        DuplicateCandidateInBallot,
        InvalidBallotWeight,
    ):
        assert issubclass(error, BallotException)


def test_collect_keeps_good_ballots():
    accepted, rejected = collect_ballots(
        [
            (["A", "B"], 2),
            (["A", "A", "B"], 1),
            ["C"],
            (["D"], 1),
        ],
        CANDIDATES,
    )
    assert accepted == (PreferenceBallot(("A", "B"), 2), PreferenceBallot(("C",), 1))
    assert [r.preferences for r in rejected] == [("A", "A", "B"), ("D",)]
    assert isinstance(rejected[0].error, DuplicateCandidateInBallot)
    assert isinstance(rejected[1].error, UnknownCandidateReference)


def test_collect_counter():
    from collections import Counter

    votes = Counter([("A", "B"), ("B",), ("A", "B"), ()])
    accepted, rejected = collect_ballots(votes, CANDIDATES)
    assert PreferenceBallot(("A", "B"), 2) in accepted
    assert PreferenceBallot(("B",), 1) in accepted
    assert len(rejected) == 1
    assert isinstance(rejected[0].error, InvalidBallotLength)


def test_collect_int_candidates():
    accepted, rejected = collect_ballots([[1, 2], ([2], 4)], (1, 2))
    assert accepted == (PreferenceBallot((1, 2), 1), PreferenceBallot((2,), 4))
    assert rejected == ()
