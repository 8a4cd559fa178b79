import pytest

from stvtally.exceptions import ResultMismatch

CANDIDATES = ("Andrea", "Batman", "Robin", "Gorm")
BALLOTS = (
    (("Andrea", "Batman", "Robin"), 1),
    (("Robin", "Andrea", "Batman"), 1),
    (("Batman", "Robin", "Andrea"), 1),
    (("Gorm",), 2),
)


class TestVerify:
    def published(self):
        from stvtally.engine import tally_stv

        return tally_stv(BALLOTS, CANDIDATES, 2).as_dict()

    def test_recount_matches(self):
        from stvtally.utils import verify_result

        result = verify_result(self.published(), BALLOTS, CANDIDATES, 2)
        assert result.elected_as_tuple() == ("Gorm", "Batman")

    def test_recount_matches_stored_json(self):
        import json

        from stvtally.utils import verify_result

        stored = json.loads(json.dumps(self.published()))
        result = verify_result(stored, BALLOTS, CANDIDATES, 2)
        assert result.elected_as_tuple() == ("Gorm", "Batman")

    def test_stored_json_with_integer_ids(self):
        import json

        from stvtally.engine import tally_stv
        from stvtally.utils import verify_result

        ballots = [((1,), 3), ((2,), 1)]
        stored = json.loads(json.dumps(tally_stv(ballots, (1, 2, 3), 1).as_dict()))
        assert stored["standings"][0]["candidate"] == 1
        assert verify_result(stored, ballots, (1, 2, 3), 1) == [1]

    def test_tampered_winners(self):
        from stvtally.utils import verify_result

        published = {**self.published(), "winners": ("Gorm", "Robin")}
        with pytest.raises(ResultMismatch):
            verify_result(published, BALLOTS, CANDIDATES, 2)

    def test_different_options(self):
        from stvtally.quotas import hagenbach_bischof_quota
        from stvtally.utils import verify_result

        with pytest.raises(ResultMismatch):
            verify_result(
                self.published(),
                BALLOTS,
                CANDIDATES,
                2,
                quota_method=hagenbach_bischof_quota,
            )


def test_result_to_order():
    from stvtally.engine import tally_stv
    from stvtally.utils import result_dict_to_order

    order = result_dict_to_order(tally_stv(BALLOTS, CANDIDATES, 2).as_dict())
    assert order[:2] == ("Gorm", "Batman"), "Winners first"
    assert set(order[2:]) == {"Andrea", "Robin"}
