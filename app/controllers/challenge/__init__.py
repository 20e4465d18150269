from . import resources as _resources  # noqa: F401
from . import routes as _routes  # noqa: F401
from .blueprint import challenge_bp
from .resources import (
    ChallengeCollectionResource,
    ChallengeCompleteResource,
    ChallengeFailResource,
    ChallengeResource,
)

__all__ = [
    "challenge_bp",
    "ChallengeCollectionResource",
    "ChallengeResource",
    "ChallengeCompleteResource",
    "ChallengeFailResource",
]
