import io
import json

import pytest

from conftest import make_slot
from sessiontime.io_utils import (
    load_analytics_summary,
    load_directory,
    load_slots_csv,
    load_weights,
    save_session_plan_json,
    save_slots_csv,
    to_session_plan,
)


def test_load_directory_from_text_and_bytes():
    text = "id,label\n2,Team 2\n10,Team 10\n"
    assert load_directory(io.StringIO(text)) == {2: 'Team 2', 10: 'Team 10'}
    assert load_directory(io.BytesIO(text.encode())) == {2: 'Team 2', 10: 'Team 10'}


def test_load_directory_bad_row():
    with pytest.raises(ValueError, match="line 2"):
        load_directory(io.StringIO("id,label\nx,Team\n"))


def test_slots_csv_written_and_read_back(tmp_path, grid):
    grid.append(make_slot(3, 0, 0, 30, [], []))
    path = tmp_path / "slots.csv"
    save_slots_csv(str(path), grid)
    assert load_slots_csv(str(path)) == grid


def test_load_slots_parses_id_lists():
    text = ("room_id,slot_index,start_time,end_time,team_ids,jury_ids\n"
            "1,0,2025-03-01T09:00,2025-03-01T09:30,3;4,7\n")
    (slot,) = load_slots_csv(io.StringIO(text))
    assert slot.team_ids == [3, 4]
    assert slot.jury_ids == [7]
    assert slot.start_time.hour == 9 and slot.end_time.minute == 30


def test_load_slots_bad_time():
    text = ("room_id,slot_index,start_time,end_time,team_ids,jury_ids\n"
            "1,0,not-a-time,2025-03-01T09:30,,\n")
    with pytest.raises(ValueError, match="line 2"):
        load_slots_csv(io.StringIO(text))


def test_session_plan_payload(tmp_path, grid):
    plan = to_session_plan(grid[:1])
    assert plan == [{
        'room_id': 1, 'slot_index': 0,
        'start_time': '2025-03-01T09:00:00', 'end_time': '2025-03-01T09:30:00',
        'team_ids': [1, 2], 'jury_ids': [1],
    }]
    path = tmp_path / "plan.json"
    save_session_plan_json(str(path), grid)
    assert len(json.loads(path.read_text())) == len(grid)


def test_load_weights_and_summary():
    w = load_weights(io.StringIO('{"waiting_time_disparity": 5}'))
    assert w.waiting_time_disparity == 5.0 and w.jury_room_changes == 1.5
    s = load_analytics_summary(io.StringIO('{"team_vs_team_matrix": []}'))
    assert s.team_vs_team_matrix == [] and s.team_jury_matrix == []


def test_unsupported_source():
    with pytest.raises(TypeError):
        load_directory(42)
