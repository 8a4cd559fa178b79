from .engine import tally_stv
from .exceptions import (
    BallotException,
    DuplicateCandidateId,
    DuplicateCandidateInBallot,
    ElectionSetupError,
    InvalidBallotLength,
    InvalidBallotWeight,
    InvalidSeatCount,
    QuotaUnreachable,
    ResultMismatch,
    STVException,
    TallyInvariantError,
    UnknownCandidateReference,
)
from .flat import FlatResult, tally_flat_weighted
from .models import Candidate, Election, PreferenceBallot
from .poll import STVPoll
from .quotas import droop_quota, hagenbach_bischof_quota, hare_quota
from .result import ElectionResult, ElectionRound, Standing
from .types import CandidateStatus, SelectionMethod, Termination
from .validation import collect_ballots, validate_ballot
