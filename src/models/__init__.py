from src.models.base import Base, TimestampedBase
from src.models.organization import Organization
from src.models.profile import Profile

__all__ = [
    "Base",
    "TimestampedBase",
    "Organization",
    "Profile",
]
