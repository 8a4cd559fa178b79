from fractions import Fraction

from stvtally.engine import tally_stv
from stvtally.types import CandidateStatus, Termination


def mk_opa_result():
    """
    28 voters ranked Alice first, Bob second, and Chris third
    26 voters ranked Bob first, Alice second, and Chris third
    3 voters ranked Chris first
    2 voters ranked Don first
    1 voter ranked Eric first
    """
    return tally_stv(
        [
            (("alice", "bob", "chris"), 28),
            (("bob", "alice", "chris"), 26),
            (("chris",), 3),
            (("don",), 2),
            (("eric",), 1),
        ],
        candidates=[
            ("alice", "Alice"),
            ("bob", "Bob"),
            ("chris", "Chris"),
            ("don", "Don"),
            ("eric", "Eric"),
        ],
        seats=3,
    )


def test_standings_order():
    result = tally_stv(
        [("A", "B", "C"), ("A", "C", "B"), ("B", "A", "C"), ("C", "B", "A")],
        candidates="ABC",
        seats=1,
    )
    assert [(s.candidate.id, s.status, s.votes) for s in result.standings] == [
        ("A", CandidateStatus.Elected, 3),
        ("B", CandidateStatus.Eliminated, 1),
        ("C", CandidateStatus.Hopeful, 1),
    ], "Equal totals ordered by id"


def test_standings_use_deciding_round():
    result = tally_stv(
        [
            (("orange",), 4),
            (("pear", "orange"), 2),
            (("chocolate", "strawberry"), 8),
            (("chocolate", "bonbon"), 4),
            (("strawberry",), 1),
            (("bonbon",), 1),
        ],
        candidates=("orange", "chocolate", "pear", "strawberry", "bonbon"),
        seats=3,
    )
    assert [(s.candidate.id, s.votes) for s in result.standings] == [
        ("chocolate", 12),
        ("orange", 6),
        ("strawberry", 5),
        ("bonbon", 3),
        ("pear", 2),
    ]


def test_hopeful_standing_after_transfer():
    result = mk_opa_result()
    assert result == ["alice", "bob", "chris"]
    assert [(s.candidate.id, s.status, s.votes) for s in result.standings] == [
        ("alice", CandidateStatus.Elected, 28),
        ("bob", CandidateStatus.Elected, 26),
        ("chris", CandidateStatus.Elected, 25),
        ("don", CandidateStatus.Hopeful, 2),
        ("eric", CandidateStatus.Hopeful, 1),
    ]


def test_as_dict():
    data = mk_opa_result().as_dict()
    assert data["winners"] == ("alice", "bob", "chris")
    assert data["candidates"] == ("alice", "bob", "chris", "don", "eric")
    assert data["complete"]
    assert data["vacant_seats"] == 0
    assert data["termination"] == "AllSeatsFilled"
    assert data["quota"] == 16
    assert data["total_votes"] == 60
    assert data["exhausted_votes"] == "0"
    assert data["standings"][0] == {
        "candidate": "alice",
        "name": "Alice",
        "status": "Elected",
        "votes": "28",
    }
    first = data["rounds"][0]
    assert first["index"] == 1
    assert first["action"] == "Elected"
    assert first["method"] == "Direct"
    assert first["selected"] == ("alice", "bob")
    assert first["transfer_values"] == {"alice": "3/7", "bob": "5/13"}
    assert first["result_vote_count"]["chris"] == "25"
    assert Fraction(first["transfer_values"]["alice"]) == Fraction(3, 7)


def test_unreachable_as_dict():
    result = tally_stv([], candidates="AB", seats=2)
    data = result.as_dict()
    assert data["termination"] == Termination.QuotaUnreachable.value
    assert data["quota"] is None
    assert data["winners"] == ()
    assert data["vacant_seats"] == 2
    assert data["rounds"] == ()
    assert [s["votes"] for s in data["standings"]] == ["0", "0"]


def test_elected_helpers():
    result = mk_opa_result()
    assert result.elected_as_tuple() == ("alice", "bob", "chris")
    assert result.elected_as_set() == {"alice", "bob", "chris"}
    assert result.complete
