# Namespace for pipeline steps
from .resolve_member_id import ResolveMemberId  # noqa: F401
from .check_existing import CheckExisting  # noqa: F401
from .extract_profile import ExtractProfile  # noqa: F401
from .persist_candidate import PersistCandidate  # noqa: F401
