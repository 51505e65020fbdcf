from datetime import datetime, timedelta

import pytest

from sessiontime.models import Slot

BASE = datetime(2025, 3, 1, 9, 0)


def at(minutes: int) -> datetime:
    return BASE + timedelta(minutes=minutes)


def make_slot(room_id, slot_index, start_min, end_min, teams=(), juries=()):
    return Slot(room_id, slot_index, at(start_min), at(end_min), list(teams), list(juries))


@pytest.fixture
def grid():
    """Two rooms, three time slots each, two teams per slot, room-affine juries."""
    slots = []
    team = 1
    for idx in range(3):
        start = idx * 35
        for room_id, jury in ((1, 1), (2, 2)):
            slots.append(make_slot(room_id, idx, start, start + 30, [team, team + 1], [jury]))
            team += 2
    return slots
