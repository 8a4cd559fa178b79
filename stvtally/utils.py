from __future__ import annotations

import json
from collections.abc import Iterable

from stvtally.engine import tally_stv
from stvtally.exceptions import ResultMismatch
from stvtally.result import ElectionResult
from stvtally.types import BallotData, CandidateIds, ResultDict


def _as_stored(data: ResultDict) -> dict:
    # Lists instead of tuples and string keys, as read back from JSON storage
    return json.loads(json.dumps(data))


def verify_result(
    published: ResultDict,
    ballots: BallotData,
    candidates: Iterable,
    seats: int,
    **options,
) -> ElectionResult:
    """
    Recount an election and check it against a result published with
    ElectionResult.as_dict(), either as returned or loaded back from JSON.
    Keyword options are passed on to tally_stv and must match the ones used
    for the published count.
    """
    result = tally_stv(ballots, candidates, seats, **options)
    recounted = _as_stored(result.as_dict())
    published = _as_stored(published)
    if differing := sorted(k for k in recounted if recounted[k] != published.get(k)):
        raise ResultMismatch(f"Recount differs from published result in: {differing}")
    return result


def result_dict_to_order(result: ResultDict) -> CandidateIds:
    """
    Candidate ids from a published result, winners first.
    >>> result_dict_to_order({"standings": ({"candidate": 2}, {"candidate": 1})})
    (2, 1)
    """
    return tuple(s["candidate"] for s in result["standings"])
