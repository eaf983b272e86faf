from .pairing import PAIR_SIZE, CandidateSelector, PairResult
from .voting import VoteOutcome, VoteRecorder, VoteStatus

__all__ = [
    "PAIR_SIZE",
    "CandidateSelector",
    "PairResult",
    "VoteOutcome",
    "VoteRecorder",
    "VoteStatus",
]
