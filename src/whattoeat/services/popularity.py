"""Engagement-based popularity with time decay."""

import math
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from whattoeat.domain.recipes import EngagementStats
from whattoeat.services.rounding import round_half_up

_ONE_DAY = timedelta(days=1)

# Returned when the decayed score is no longer a finite number.
POPULARITY_CEILING = sys.maxsize


@dataclass(frozen=True)
class PopularityOptions:
    """Counter weights and decay settings."""

    like_weight: float = 2
    collect_weight: float = 3
    comment_weight: float = 1.5
    view_weight: float = 0.5
    time_decay: bool = True
    # Multiplier applied per elapsed day.
    decay_factor: float = 0.95


DEFAULT_POPULARITY = PopularityOptions()

# Community feed ranking: likes dominate, no decay.
COMMUNITY_POPULARITY = PopularityOptions(
    like_weight=3,
    collect_weight=2,
    comment_weight=1,
    view_weight=0.1,
    time_decay=False,
)


def popularity_score(
    stats: EngagementStats | Mapping[str, object],
    now: datetime,
    options: PopularityOptions | None = None,
) -> int:
    """Weighted engagement sum, decayed by days since creation.

    The result is not bounded to 0-100. A missing creation time counts as
    created at ``now``.
    """
    if not isinstance(stats, EngagementStats):
        row = stats if isinstance(stats, Mapping) else {}
        stats = EngagementStats.from_mapping(row)
    resolved = options or DEFAULT_POPULARITY

    score = (
        stats.like_count * resolved.like_weight
        + stats.collect_count * resolved.collect_weight
        + stats.comment_count * resolved.comment_weight
        + stats.view_count * resolved.view_weight
    )
    if resolved.time_decay and score:
        current = now if now.tzinfo else now.replace(tzinfo=UTC)
        created = stats.create_time or current
        if created.tzinfo is None:
            created = created.replace(tzinfo=UTC)
        # Creation times ahead of `now` (clock skew) count as brand new.
        days = max(0.0, (current - created) / _ONE_DAY)
        score *= _decay(resolved.decay_factor, days)

    if not math.isfinite(score):
        return POPULARITY_CEILING if score > 0 else 0
    return round_half_up(score)


def saturate(score: float, half_point: float) -> float:
    """Map an unbounded non-negative score onto 0-100."""
    if score <= 0 or half_point <= 0:
        return 0.0
    return 100 * score / (score + half_point)


def _decay(factor: float, days: float) -> float:
    if days == 0:
        return 1.0
    if factor <= 0:
        # A negative base has no real fractional power; treat it like zero.
        return 0.0
    try:
        return factor**days
    except OverflowError:
        return math.inf
