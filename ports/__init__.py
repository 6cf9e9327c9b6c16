from .repos import CandidatesRepoPort
from .store import CandidateStorePort

__all__ = [
    "CandidatesRepoPort",
    "CandidateStorePort",
]
