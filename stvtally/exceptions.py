class STVException(Exception):
    pass


class BallotException(STVException):
    """A single ballot was rejected. Never raised once counting has started."""


class InvalidBallotLength(BallotException):
    pass


class DuplicateCandidateInBallot(BallotException):
    pass


class UnknownCandidateReference(BallotException):
    pass


class InvalidBallotWeight(BallotException):
    pass


class ElectionSetupError(STVException):
    pass


class InvalidSeatCount(ElectionSetupError):
    pass


class DuplicateCandidateId(ElectionSetupError):
    pass


class QuotaUnreachable(ElectionSetupError):
    pass


class ResultMismatch(STVException):
    pass


class TallyInvariantError(RuntimeError):
    """
    Internal counting state is inconsistent. This is a defect in the engine,
    not something a caller can recover from.
    """
