import logging
import math
from datetime import timedelta
from typing import Dict, List, Optional, Set

from ..labels import sort_labels
from ..models import GenerationParams, Schedule, Slot

logger = logging.getLogger(__name__)


def _unique(ids: List[int]) -> List[int]:
    seen: Set[int] = set()
    out: List[int] = []
    for i in ids:
        if i not in seen:
            seen.add(i)
            out.append(i)
    return out

def sort_by_label(ids: List[int], labels: Dict[int, str]) -> List[int]:
    """Order ids by their label in natural order, ties broken by id."""
    ordered = sorted(_unique(ids))
    return sort_labels(ordered, key=lambda i: labels.get(i, str(i)))

def slots_per_room(total_teams: int, num_rooms: int, teams_per_room: int) -> int:
    if total_teams <= 0 or num_rooms <= 0 or teams_per_room <= 0:
        return 0
    return math.ceil(total_teams / (num_rooms * teams_per_room))

def assign_room_juries(room_ids: List[int], sorted_jury_ids: List[int], juries_per_room: int,
                       existing: Optional[Dict[int, List[int]]] = None) -> Dict[int, List[int]]:
    """Room-level jury assignment.

    A room keeps its existing juries when that assignment still has enough
    entries and all of them are selected. Other rooms take the next unallocated
    juries from the sorted pool, which may run dry.
    """
    selected = set(sorted_jury_ids)
    allocated: Set[int] = set()
    room_juries: Dict[int, List[int]] = {}

    if existing and juries_per_room > 0:
        # reused rooms claim their juries before any fresh allocation; an
        # assignment sharing a jury with an earlier reused room is not reused
        for room_id in room_ids:
            prev = list(existing.get(room_id) or [])
            if (len(prev) >= juries_per_room
                    and all(j in selected for j in prev)
                    and not any(j in allocated for j in prev)):
                room_juries[room_id] = prev
                allocated.update(prev)

    pool = [j for j in sorted_jury_ids if j not in allocated]
    cursor = 0
    for room_id in room_ids:
        if room_id in room_juries:
            continue
        take = pool[cursor:cursor + max(juries_per_room, 0)]
        cursor += len(take)
        room_juries[room_id] = take
        if len(take) < juries_per_room:
            logger.warning("Room %s gets %d of %d juries; jury pool exhausted",
                           room_id, len(take), juries_per_room)
    return room_juries

def generate_schedule(params: GenerationParams) -> Schedule:
    room_ids = _unique(params.room_ids)
    team_ids = sort_by_label(params.team_ids, params.team_labels)
    jury_ids = sort_by_label(params.jury_ids, params.jury_labels)
    if not room_ids or not team_ids or not jury_ids:
        logger.info("Nothing to schedule: %d rooms, %d teams, %d juries",
                    len(room_ids), len(team_ids), len(jury_ids))
        return Schedule()

    per_room = slots_per_room(len(team_ids), len(room_ids), params.teams_per_room)
    room_juries = assign_room_juries(room_ids, jury_ids, params.juries_per_room,
                                     params.existing_room_juries)

    base = params.start_time + timedelta(minutes=params.time_before_first_slot)
    step = timedelta(minutes=params.slot_duration + params.time_between_slots)
    duration = timedelta(minutes=params.slot_duration)

    slots: List[Slot] = []
    used: Set[int] = set()
    cursor = 0
    for slot_idx in range(per_room):
        start = base + slot_idx * step
        for room_id in room_ids:
            assigned: List[int] = []
            while len(assigned) < params.teams_per_room and cursor < len(team_ids):
                team_id = team_ids[cursor]
                cursor += 1
                if team_id in used:
                    continue
                used.add(team_id)
                assigned.append(team_id)
            juries = list(room_juries.get(room_id, []))
            if not assigned and not juries:
                continue
            slots.append(Slot(room_id, slot_idx, start, start + duration, assigned, juries))

    unassigned = len(team_ids) - len(used)
    if unassigned:
        logger.warning("%d team(s) left unassigned", unassigned)
    logger.info("Generated %d slots across %d rooms (%d per room)", len(slots), len(room_ids), per_room)
    return Schedule(slots=slots, room_juries=room_juries)
