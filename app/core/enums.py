"""Closed enumerations for roles, tiers, content gating and mock-exam sections."""

from enum import Enum


class Role(str, Enum):
    """Administrative privilege level."""

    USER = "user"
    MASTER = "master"
    ADMIN = "admin"


class Tier(str, Enum):
    """Content-access level, orthogonal to role."""

    BASIC = "basic"
    PREMIUM = "premium"


class Difficulty(str, Enum):
    """Gating tag of a content entry. ADVANCED entries are gated."""

    NORMAL = "normal"
    ADVANCED = "advanced"


ROLE_VALUES: frozenset[str] = frozenset(r.value for r in Role)
TIER_VALUES: frozenset[str] = frozenset(t.value for t in Tier)


class Frequency(str, Enum):
    """How often a mock-exam section's method shows up in practice."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SectionSort(str, Enum):
    """Orderings offered for the mock-exam section list."""

    DEFAULT = "default"
    NAME = "name"
    FREQUENCY = "frequency"
