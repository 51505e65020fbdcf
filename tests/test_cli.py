import json

import pytest

import main
from sessiontime.io_utils import load_slots_csv


@pytest.fixture
def directory(tmp_path):
    (tmp_path / "rooms.csv").write_text("id,label\n1,Room A\n2,Room B\n")
    (tmp_path / "teams.csv").write_text("id,label\n1,Team 1\n2,Team 2\n3,Team 3\n")
    (tmp_path / "juries.csv").write_text("id,label\n1,J1\n2,J2\n3,J3\n4,J4\n")
    return tmp_path


def generate(d, *extra):
    return main.main([
        'generate', '--rooms', str(d / 'rooms.csv'), '--teams', str(d / 'teams.csv'),
        '--juries', str(d / 'juries.csv'), '--teams-per-room', '2', '--start', '2025-03-01T09:00',
        '--out', str(d / 'slots.csv'), *extra,
    ])


def test_generate_writes_slots_and_plan(directory, capsys):
    assert generate(directory, '--plan', str(directory / 'plan.json')) == 0
    slots = load_slots_csv(str(directory / 'slots.csv'))
    assert sorted(t for s in slots for t in s.team_ids) == [1, 2, 3]
    assert len(json.loads((directory / 'plan.json').read_text())) == len(slots)
    out = capsys.readouterr().out
    assert "Room A" in out and "Team conflicts: 0" in out


def test_generate_with_subset(directory):
    assert generate(directory, '--team-ids', '3,1') == 0
    slots = load_slots_csv(str(directory / 'slots.csv'))
    assert sorted(t for s in slots for t in s.team_ids) == [1, 3]


def test_check_clean_and_conflicting(directory, capsys):
    generate(directory)
    assert main.main(['check', str(directory / 'slots.csv')]) == 0
    assert "No conflicts." in capsys.readouterr().out

    bad = directory / 'bad.csv'
    bad.write_text("room_id,slot_index,start_time,end_time,team_ids,jury_ids\n"
                   "1,0,2025-03-01T09:00,2025-03-01T09:30,1,5\n"
                   "2,0,2025-03-01T09:15,2025-03-01T09:45,1,5\n")
    assert main.main(['check', str(bad)]) == 1
    out = capsys.readouterr().out
    assert "Team 1 is in several slots: [0, 1]" in out
    assert "Jury 5 has overlapping slots" in out


def test_rebalance_is_reproducible(directory, capsys):
    generate(directory)
    args = ['rebalance', str(directory / 'slots.csv'), '--seed', '3', '--iterations', '200']
    assert main.main(args + ['--out', str(directory / 'a.csv')]) == 0
    assert main.main(args + ['--out', str(directory / 'b.csv')]) == 0
    assert (directory / 'a.csv').read_text() == (directory / 'b.csv').read_text()
    assert "Total penalty" in capsys.readouterr().out


def test_rebalance_with_missing_analytics_file(directory):
    generate(directory)
    assert main.main(['rebalance', str(directory / 'slots.csv'), '--seed', '1',
                      '--analytics', str(directory / 'nope.json'),
                      '--out', str(directory / 'r.csv')]) == 0


def test_bad_input_exits(directory):
    with pytest.raises(SystemExit):
        main.main(['check', str(directory / 'missing.csv')])
