from .candidate_profile import CandidateProfile, Education, ExperienceSummary
from .candidate_record import CandidateIn, CandidateUpdate

__all__ = [
    "CandidateProfile",
    "Education",
    "ExperienceSummary",
    "CandidateIn",
    "CandidateUpdate",
]
