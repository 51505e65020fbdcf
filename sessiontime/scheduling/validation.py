from typing import Dict, Iterable, List, Sequence, Set

from ..models import Slot, TeamConflict, JuryConflict


class ScheduleConflictError(ValueError):
    """Raised by `ensure_no_conflicts` when a schedule must not be saved."""

    def __init__(self, team_conflicts: List[TeamConflict], jury_conflicts: List[JuryConflict]):
        self.team_conflicts = team_conflicts
        self.jury_conflicts = jury_conflicts
        super().__init__(
            f"{len(team_conflicts)} team conflict(s), {len(jury_conflicts)} jury conflict(s)"
        )


def slots_overlap(a: Slot, b: Slot) -> bool:
    return a.overlaps(b)

def detect_team_conflicts(slots: Sequence[Slot]) -> List[TeamConflict]:
    """Teams that sit in more than one slot, with every slot index they occupy."""
    by_team: Dict[int, List[int]] = {}
    for idx, slot in enumerate(slots):
        for team_id in slot.team_ids:
            by_team.setdefault(team_id, []).append(idx)
    return [TeamConflict(team_id, idxs) for team_id, idxs in by_team.items() if len(idxs) > 1]

def _slots_by_jury(slots: Sequence[Slot]) -> Dict[int, List[int]]:
    by_jury: Dict[int, List[int]] = {}
    for idx, slot in enumerate(slots):
        for jury_id in slot.jury_ids:
            by_jury.setdefault(jury_id, []).append(idx)
    return by_jury

def _any_overlap(slots: Sequence[Slot], idxs: List[int]) -> bool:
    for i in range(len(idxs)):
        for j in range(i + 1, len(idxs)):
            if slots[idxs[i]].overlaps(slots[idxs[j]]):
                return True
    return False

def detect_jury_conflicts(slots: Sequence[Slot]) -> List[JuryConflict]:
    """Juries with at least one pair of time-overlapping slots.

    A jury is reported once, together with all of its slots.
    """
    conflicts: List[JuryConflict] = []
    for jury_id, idxs in _slots_by_jury(slots).items():
        if len(idxs) > 1 and _any_overlap(slots, idxs):
            conflicts.append(JuryConflict(
                jury_id,
                [(i, slots[i].start_time, slots[i].end_time) for i in idxs],
            ))
    return conflicts

def conflicting_team_ids(conflicts: Iterable[TeamConflict]) -> Set[int]:
    return {c.team_id for c in conflicts}

def conflicting_jury_ids(conflicts: Iterable[JuryConflict]) -> Set[int]:
    return {c.jury_id for c in conflicts}

def is_team_conflicted(team_id: int, conflicts: Iterable[TeamConflict]) -> bool:
    return any(c.team_id == team_id for c in conflicts)

def is_jury_conflicted(jury_id: int, conflicts: Iterable[JuryConflict]) -> bool:
    return any(c.jury_id == jury_id for c in conflicts)

def jury_overlap_ok(slots: Sequence[Slot]) -> bool:
    for idxs in _slots_by_jury(slots).values():
        if len(idxs) > 1 and _any_overlap(slots, idxs):
            return False
    return True

def scope_ok(slots: Sequence[Slot], team_scope: Set[int], jury_scope: Set[int]) -> bool:
    for slot in slots:
        if any(t not in team_scope for t in slot.team_ids):
            return False
        if any(j not in jury_scope for j in slot.jury_ids):
            return False
    return True

def constraints_ok(slots: Sequence[Slot], team_scope: Set[int], jury_scope: Set[int]) -> bool:
    # A team sitting in several slots is tolerated here; detect_team_conflicts
    # reports it to the user instead.
    return jury_overlap_ok(slots) and scope_ok(slots, team_scope, jury_scope)

def ensure_no_conflicts(slots: Sequence[Slot]) -> None:
    team_conflicts = detect_team_conflicts(slots)
    jury_conflicts = detect_jury_conflicts(slots)
    if team_conflicts or jury_conflicts:
        raise ScheduleConflictError(team_conflicts, jury_conflicts)
