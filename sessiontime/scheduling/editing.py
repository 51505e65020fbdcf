"""Edits applied to a draft schedule while it is being reviewed.

Every function returns new lists (or a new Schedule); the input is left as is.
"""
from datetime import datetime, timedelta
from typing import Dict, List, Sequence, Set

from ..models import Schedule, Slot


def add_slot(slots: Sequence[Slot], room_id: int, start_time: datetime, end_time: datetime) -> List[Slot]:
    if start_time >= end_time:
        raise ValueError(f"Slot must start before it ends ({start_time} >= {end_time})")
    indexes = [s.slot_index for s in slots if s.room_id == room_id]
    next_index = max(indexes) + 1 if indexes else 0
    return [s.copy() for s in slots] + [Slot(room_id, next_index, start_time, end_time)]

def remove_slot(slots: Sequence[Slot], index: int) -> List[Slot]:
    if not 0 <= index < len(slots):
        raise IndexError(f"No slot at position {index}")
    return [s.copy() for i, s in enumerate(slots) if i != index]

def set_slot_teams(slots: Sequence[Slot], index: int, team_ids: Sequence[int]) -> List[Slot]:
    out = [s.copy() for s in slots]
    out[index].team_ids = list(team_ids)
    return out

def set_slot_juries(slots: Sequence[Slot], index: int, jury_ids: Sequence[int]) -> List[Slot]:
    out = [s.copy() for s in slots]
    out[index].jury_ids = list(jury_ids)
    return out

def set_room_juries(schedule: Schedule, room_id: int, jury_ids: Sequence[int]) -> Schedule:
    """Replace a room's juries and mirror them onto each of the room's slots."""
    room_juries: Dict[int, List[int]] = {r: list(j) for r, j in schedule.room_juries.items()}
    room_juries[room_id] = list(jury_ids)
    slots = [s.copy() for s in schedule.slots]
    for slot in slots:
        if slot.room_id == room_id:
            slot.jury_ids = list(jury_ids)
    return Schedule(slots=slots, room_juries=room_juries)

def _distinct(values) -> List[int]:
    return list(dict.fromkeys(values))

def room_team_ids(slots: Sequence[Slot], room_id: int) -> List[int]:
    return _distinct(t for s in slots if s.room_id == room_id for t in s.team_ids)

def room_jury_ids(slots: Sequence[Slot], room_id: int) -> List[int]:
    return _distinct(j for s in slots if s.room_id == room_id for j in s.jury_ids)

def assigned_team_ids(slots: Sequence[Slot]) -> Set[int]:
    return {t for s in slots for t in s.team_ids}

def assigned_jury_ids(slots: Sequence[Slot]) -> Set[int]:
    return {j for s in slots for j in s.jury_ids}

def unassigned_team_ids(slots: Sequence[Slot], selected: Sequence[int]) -> List[int]:
    assigned = assigned_team_ids(slots)
    return [t for t in selected if t not in assigned]

def unassigned_jury_ids(slots: Sequence[Slot], selected: Sequence[int]) -> List[int]:
    assigned = assigned_jury_ids(slots)
    return [j for j in selected if j not in assigned]

def shift_slots(slots: Sequence[Slot], new_start: datetime, time_before_first_slot: int = 0) -> List[Slot]:
    """Copy a session's slots onto a new start time.

    The earliest slot lands on `new_start + time_before_first_slot` minutes;
    every other slot keeps its offset from it, its duration and its team and
    jury lists. Slots are ordered by (start, room) and renumbered per room.
    """
    if not slots:
        return []
    ordered = sorted(slots, key=lambda s: (s.start_time, s.room_id))
    origin = ordered[0].start_time
    base = new_start + timedelta(minutes=time_before_first_slot)
    next_index: Dict[int, int] = {}
    out: List[Slot] = []
    for s in ordered:
        start = base + (s.start_time - origin)
        index = next_index.get(s.room_id, 0)
        next_index[s.room_id] = index + 1
        out.append(Slot(s.room_id, index, start, start + (s.end_time - s.start_time),
                        list(s.team_ids), list(s.jury_ids)))
    return out
