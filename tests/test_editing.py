from datetime import datetime

import pytest

from conftest import at, make_slot
from sessiontime.models import Schedule
from sessiontime.scheduling.editing import (
    add_slot,
    assigned_jury_ids,
    assigned_team_ids,
    remove_slot,
    room_jury_ids,
    room_team_ids,
    set_room_juries,
    set_slot_juries,
    set_slot_teams,
    shift_slots,
    unassigned_jury_ids,
    unassigned_team_ids,
)


def test_add_slot_takes_next_index_for_room(grid):
    out = add_slot(grid, 1, at(300), at(330))
    assert len(out) == len(grid) + 1
    new = out[-1]
    assert (new.room_id, new.slot_index, new.team_ids, new.jury_ids) == (1, 3, [], [])
    assert add_slot([], 9, at(0), at(30))[0].slot_index == 0
    assert len(grid) == 6


def test_add_slot_rejects_empty_interval(grid):
    with pytest.raises(ValueError):
        add_slot(grid, 1, at(30), at(30))


def test_remove_slot(grid):
    out = remove_slot(grid, 0)
    assert len(out) == 5
    assert out[0].team_ids == grid[1].team_ids
    with pytest.raises(IndexError):
        remove_slot(grid, 6)


def test_set_slot_lists_leave_input_alone(grid):
    out = set_slot_teams(grid, 0, [99])
    assert out[0].team_ids == [99]
    assert grid[0].team_ids == [1, 2]
    out = set_slot_juries(grid, 0, [])
    assert out[0].jury_ids == []
    assert grid[0].jury_ids == [1]


def test_set_room_juries_propagates_to_slots(grid):
    sched = Schedule(slots=grid, room_juries={1: [1], 2: [2]})
    out = set_room_juries(sched, 1, [5, 6])
    assert out.room_juries == {1: [5, 6], 2: [2]}
    assert all(s.jury_ids == [5, 6] for s in out.slots if s.room_id == 1)
    assert all(s.jury_ids == [2] for s in out.slots if s.room_id == 2)
    assert sched.room_juries[1] == [1]


def test_room_and_assignment_queries():
    slots = [make_slot(1, 0, 0, 30, [3, 1], [2]), make_slot(1, 1, 40, 70, [1, 4], [2])]
    assert room_team_ids(slots, 1) == [3, 1, 4]
    assert room_jury_ids(slots, 1) == [2]
    assert room_team_ids(slots, 2) == []
    assert assigned_team_ids(slots) == {1, 3, 4}
    assert assigned_jury_ids(slots) == {2}
    assert unassigned_team_ids(slots, [5, 4, 3, 2, 1]) == [5, 2]
    assert unassigned_jury_ids(slots, [1, 2]) == [1]


NEXT_DAY = datetime(2025, 3, 2, 13, 0)


def test_shift_slots_of_empty_session():
    assert shift_slots([], NEXT_DAY, 15) == []


def test_shift_slots_keeps_gaps_and_durations():
    source = [
        make_slot(1, 0, 60, 90, [1, 2], [1]),
        make_slot(1, 1, 100, 120, [3], [1]),
        make_slot(1, 2, 200, 245, [4], [1]),
    ]
    out = shift_slots(source, NEXT_DAY, 15)
    starts = [(s.start_time - NEXT_DAY).total_seconds() / 60 for s in out]
    lengths = [(s.end_time - s.start_time).total_seconds() / 60 for s in out]
    assert starts == [15, 55, 155]
    assert lengths == [30, 20, 45]
    assert [s.team_ids for s in out] == [[1, 2], [3], [4]]
    assert source[0].start_time == at(60)


def test_shift_slots_orders_ties_by_room_and_renumbers(grid):
    shuffled = list(reversed(grid))
    out = shift_slots(shuffled, NEXT_DAY)
    assert [(s.room_id, s.slot_index) for s in out] == [(1, 0), (2, 0), (1, 1), (2, 1), (1, 2), (2, 2)]
    assert out[0].start_time == NEXT_DAY
    assert out[1].start_time == NEXT_DAY
    assert [s.jury_ids for s in out] == [[1], [2]] * 3
    assert out[0].team_ids == [1, 2]
