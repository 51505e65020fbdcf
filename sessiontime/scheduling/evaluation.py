import statistics
from typing import Dict, Iterable, List, Optional, Sequence, Set, Union

from ..graph_build import build_team_meeting_graph, build_team_jury_graph, repeat_count
from ..models import Metrics, PenaltyWeights, Schedule, Slot
from .validation import detect_team_conflicts, detect_jury_conflicts
from .editing import unassigned_team_ids, unassigned_jury_ids


def _minutes(delta) -> float:
    return delta.total_seconds() / 60.0

def waiting_time_disparity(slots: Sequence[Slot], team_ids: Optional[Iterable[int]] = None) -> float:
    """Population std-dev (minutes) of the gaps between a team's consecutive slots.

    Gaps of all teams are pooled; a team with at most one slot adds a 0 gap.
    """
    by_team: Dict[int, List[Slot]] = {}
    for slot in slots:
        for t in dict.fromkeys(slot.team_ids):
            by_team.setdefault(t, []).append(slot)
    if team_ids is None:
        team_ids = list(by_team)
    gaps: List[float] = []
    for team_id in team_ids:
        mine = sorted(by_team.get(team_id, []), key=lambda s: s.start_time)
        if len(mine) <= 1:
            gaps.append(0.0)
            continue
        for prev, cur in zip(mine, mine[1:]):
            gaps.append(_minutes(cur.start_time - prev.end_time))
    if not gaps:
        return 0.0
    return statistics.pstdev(gaps)

def repeated_team_meetings(slots: Sequence[Slot]) -> int:
    return repeat_count(build_team_meeting_graph(slots))

def repeated_team_jury_interactions(slots: Sequence[Slot]) -> int:
    return repeat_count(build_team_jury_graph(slots))

def _pvariance(values: List[int]) -> float:
    return statistics.pvariance(values) if values else 0.0

def uneven_room_attendance(slots: Sequence[Slot]) -> float:
    teams: Dict[int, Set[int]] = {}
    juries: Dict[int, Set[int]] = {}
    for slot in slots:
        teams.setdefault(slot.room_id, set()).update(slot.team_ids)
        juries.setdefault(slot.room_id, set()).update(slot.jury_ids)
    return (_pvariance([len(s) for s in teams.values()])
            + _pvariance([len(s) for s in juries.values()]))

def jury_room_changes(slots: Sequence[Slot]) -> int:
    by_jury: Dict[int, List[Slot]] = {}
    for slot in slots:
        for j in slot.jury_ids:
            by_jury.setdefault(j, []).append(slot)
    changes = 0
    for jury_slots in by_jury.values():
        ordered = sorted(jury_slots, key=lambda s: s.start_time)
        changes += sum(1 for a, b in zip(ordered, ordered[1:]) if a.room_id != b.room_id)
    return changes

def calculate_metrics(slots: Sequence[Slot], team_ids: Optional[Iterable[int]] = None,
                      weights: Optional[PenaltyWeights] = None) -> Metrics:
    w = weights or PenaltyWeights()
    m = Metrics(
        waiting_time_disparity=waiting_time_disparity(slots, team_ids),
        repeated_team_meetings=repeated_team_meetings(slots),
        repeated_team_jury_interactions=repeated_team_jury_interactions(slots),
        uneven_room_attendance=uneven_room_attendance(slots),
        jury_room_changes=jury_room_changes(slots),
    )
    m.total_penalty = (
        m.waiting_time_disparity * w.waiting_time_disparity
        + m.repeated_team_meetings * w.repeated_team_meetings
        + m.repeated_team_jury_interactions * w.repeated_team_jury_interactions
        + m.uneven_room_attendance * w.uneven_room_attendance
        + m.jury_room_changes * w.jury_room_changes
    )
    return m

def summary(schedule: Union[Schedule, Sequence[Slot]], team_ids: Sequence[int], jury_ids: Sequence[int],
            weights: Optional[PenaltyWeights] = None) -> str:
    slots = schedule.slots if isinstance(schedule, Schedule) else list(schedule)
    rooms = len({s.room_id for s in slots})
    team_conf = detect_team_conflicts(slots)
    jury_conf = detect_jury_conflicts(slots)
    missing_teams = unassigned_team_ids(slots, team_ids)
    missing_juries = unassigned_jury_ids(slots, jury_ids)
    m = calculate_metrics(slots, team_ids, weights)
    warning = ""
    if missing_teams or missing_juries:
        warning = (
            f"Warning: unassigned teams={missing_teams} juries={missing_juries}\n"
        )
    return (
        f"Slots: {len(slots)}  Rooms: {rooms}\n"
        f"Teams selected: {len(team_ids)}  Unassigned: {len(missing_teams)}\n"
        f"Juries selected: {len(jury_ids)}  Unassigned: {len(missing_juries)}\n"
        f"Team conflicts: {len(team_conf)}  Jury conflicts: {len(jury_conf)}\n"
        f"Waiting-time disparity: {m.waiting_time_disparity:.2f} min  "
        f"Repeated meetings: {m.repeated_team_meetings}  "
        f"Repeated team-jury: {m.repeated_team_jury_interactions}\n"
        f"Room attendance variance: {m.uneven_room_attendance:.2f}  "
        f"Jury room changes: {m.jury_room_changes}\n"
        f"Total penalty: {m.total_penalty:.2f}\n"
        f"{warning}"
    )
