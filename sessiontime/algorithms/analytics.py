import logging
import statistics
from typing import Optional, Protocol

from ..io_utils import load_analytics_summary
from ..models import AnalyticsSummary, PenaltyWeights

logger = logging.getLogger(__name__)

SCALE = 1.5
REPEATED_MEETING_PAIRS = 3
REPEATED_TEAM_JURY_PAIRS = 5
WAITING_STDDEV_MINUTES = 15.0
ROOM_COUNT_SPREAD = 2


class AnalyticsSource(Protocol):
    def get_analytics_summary(self) -> AnalyticsSummary: ...


class JsonAnalyticsSource:
    """Reads a global analytics summary saved by the aggregator."""

    def __init__(self, path: str):
        self.path = path

    def get_analytics_summary(self) -> AnalyticsSummary:
        return load_analytics_summary(self.path)


def adjust_weights(summary: AnalyticsSummary, base: Optional[PenaltyWeights] = None) -> PenaltyWeights:
    """Scale the weight of every metric that historical data shows is already a problem."""
    base = base or PenaltyWeights()
    weights = base

    repeated_meetings = sum(1 for m in summary.team_vs_team_matrix if m.meet_count > 1)
    if repeated_meetings > REPEATED_MEETING_PAIRS:
        weights = weights.scaled('repeated_team_meetings', SCALE)

    repeated_pairings = sum(1 for c in summary.team_jury_matrix if c.meet_count > 1)
    if repeated_pairings > REPEATED_TEAM_JURY_PAIRS:
        weights = weights.scaled('repeated_team_jury_interactions', SCALE)

    waits = [t.average_waiting_time_minutes for t in summary.team_waiting_times]
    if waits and statistics.pstdev(waits) > WAITING_STDDEV_MINUTES:
        weights = weights.scaled('waiting_time_disparity', SCALE)

    room_counts = [len(d.room_counts) for d in summary.team_room_distributions]
    if room_counts and max(room_counts) - min(room_counts) > ROOM_COUNT_SPREAD:
        weights = weights.scaled('uneven_room_attendance', SCALE)

    logger.info(
        "Analytics: %d repeated team pairs, %d repeated team-jury pairs, %d teams with waiting data; weights %s",
        repeated_meetings, repeated_pairings, len(waits), weights,
    )
    return weights


def weights_from_source(source: AnalyticsSource, base: Optional[PenaltyWeights] = None) -> PenaltyWeights:
    """Fetch the global summary and derive weights; fall back to `base` when it is unavailable."""
    base = base or PenaltyWeights()
    try:
        summary = source.get_analytics_summary()
        return adjust_weights(summary, base)
    except Exception as exc:
        # normal before any session has been saved
        logger.warning("Global analytics unavailable, using default weights: %s", exc)
        return base
