"""Infrastructure tiers and the no-downgrade rule."""
from enum import Enum
from typing import List, Union

from platform_admin.core.errors import TierDowngradeError


class Tier(str, Enum):
    """Ordered feature-set selector. Declaration order is tier order."""
    MINIMAL = "minimal"
    STANDARD = "standard"
    FULL = "full"

    @property
    def rank(self) -> int:
        return TIER_ORDER.index(self)

    def includes(self, other: "Tier") -> bool:
        """True when this tier ships everything `other` ships."""
        return self.rank >= other.rank

    def __str__(self) -> str:
        return self.value


TIER_ORDER: List[Tier] = [Tier.MINIMAL, Tier.STANDARD, Tier.FULL]


def tier_names() -> List[str]:
    return [tier.value for tier in TIER_ORDER]


def parse_tier(value: Union[str, Tier]) -> Tier:
    """Convert a tier name to a Tier.

    Raises:
        ValueError: If the name is not a known tier
    """
    if isinstance(value, Tier):
        return value
    try:
        return Tier(value)
    except ValueError:
        raise ValueError(
            f'Invalid tier "{value}". Must be one of: {", ".join(tier_names())}'
        ) from None


def is_upgrade_or_same(current: Union[str, Tier], target: Union[str, Tier]) -> bool:
    """Return True if moving from `current` to `target` is not a downgrade."""
    return parse_tier(target).rank >= parse_tier(current).rank


def ensure_tier_transition(current: Union[str, Tier], target: Union[str, Tier]) -> None:
    """Fail fast on a tier downgrade.

    Raises:
        TierDowngradeError: If target is lower than current
    """
    if not is_upgrade_or_same(current, target):
        raise TierDowngradeError(str(parse_tier(current)), str(parse_tier(target)))
