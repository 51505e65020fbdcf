import argparse
import logging
import sys
from datetime import datetime

from sessiontime.io_utils import (
    load_directory, load_slots_csv, save_slots_csv, save_session_plan_json, load_weights
)
from sessiontime.models import GenerationParams
from sessiontime.scheduling.generate import generate_schedule
from sessiontime.scheduling.validation import detect_team_conflicts, detect_jury_conflicts
from sessiontime.scheduling.evaluation import summary
from sessiontime.reporting import slots_frame, metrics_frame

# Rebalance imports
from sessiontime.algorithms.rebalance import rebalance, rebalance_with_analytics, RebalanceParams
from sessiontime.algorithms.analytics import JsonAnalyticsSource


def _ids(value):
    return [int(x) for x in value.split(',') if x.strip()] if value else []


def _selection(path, explicit):
    """Ids from an explicit --*-ids list when given, else every entry of the directory CSV."""
    labels = load_directory(path) if path else {}
    ids = _ids(explicit) if explicit else list(labels.keys())
    return ids, labels


def cmd_generate(args):
    rooms, room_labels = _selection(args.rooms, args.room_ids)
    teams, team_labels = _selection(args.teams, args.team_ids)
    juries, jury_labels = _selection(args.juries, args.jury_ids)
    params = GenerationParams(
        room_ids=rooms,
        team_ids=teams,
        jury_ids=juries,
        teams_per_room=args.teams_per_room,
        juries_per_room=args.juries_per_room,
        start_time=datetime.fromisoformat(args.start),
        time_before_first_slot=args.time_before_first_slot,
        slot_duration=args.slot_duration,
        time_between_slots=args.time_between_slots,
        team_labels=team_labels,
        jury_labels=jury_labels,
    )
    sched = generate_schedule(params)
    print(slots_frame(sched.slots, room_labels, team_labels, jury_labels).to_string(index=False))
    print(summary(sched, teams, juries))
    save_slots_csv(args.out, sched.slots)
    if args.plan:
        save_session_plan_json(args.plan, sched.slots)
        print(f"Saved: {args.out}, {args.plan}")
    else:
        print(f"Saved: {args.out}")
    return 0


def cmd_check(args):
    slots = load_slots_csv(args.slots)
    team_conf = detect_team_conflicts(slots)
    jury_conf = detect_jury_conflicts(slots)
    for c in team_conf:
        print(f"Team {c.team_id} is in several slots: {c.slot_indexes}")
    for c in jury_conf:
        spans = ', '.join(f"#{i} {s:%H:%M}-{e:%H:%M}" for i, s, e in c.conflicting_slots)
        print(f"Jury {c.jury_id} has overlapping slots: {spans}")
    if team_conf or jury_conf:
        return 1
    print("No conflicts.")
    return 0


def cmd_rebalance(args):
    slots = load_slots_csv(args.slots)
    teams = _ids(args.team_ids) or sorted({t for s in slots for t in s.team_ids})
    juries = _ids(args.jury_ids) or sorted({j for s in slots for j in s.jury_ids})
    params = RebalanceParams(
        seed=args.seed,
        iterations=args.iterations,
        weights=load_weights(args.weights) if args.weights else None,
        time_limit=args.time_limit,
    )
    if args.analytics:
        result = rebalance_with_analytics(slots, teams, juries, JsonAnalyticsSource(args.analytics), params)
    else:
        result = rebalance(slots, teams, juries, params)
    print(metrics_frame(result).round(2).to_string())
    print(f"Improvement: {result.improvement_percentage:.1f}%  (seed {result.seed})")
    if not result.improved:
        print("No improvement found; schedule left unchanged.")
    save_slots_csv(args.out, result.slots if result.improved else result.original_slots)
    print(f"Saved: {args.out}")
    return 0


def main(argv=None):
    p = argparse.ArgumentParser(description="SessionTime – room session scheduling")
    p.add_argument('--log-level', type=str, default='INFO')
    sub = p.add_subparsers(dest='command', required=True)

    g = sub.add_parser('generate', help='Build a draft schedule by round robin')
    g.add_argument('--rooms', type=str, required=True, help='rooms.csv with id,label')
    g.add_argument('--teams', type=str, required=True, help='teams.csv with id,label')
    g.add_argument('--juries', type=str, required=True, help='juries.csv with id,label')
    g.add_argument('--room-ids', type=str, help='Comma-separated subset of room ids')
    g.add_argument('--team-ids', type=str, help='Comma-separated subset of team ids')
    g.add_argument('--jury-ids', type=str, help='Comma-separated subset of jury ids')
    g.add_argument('--teams-per-room', type=int, default=1)
    g.add_argument('--juries-per-room', type=int, default=1)
    g.add_argument('--start', type=str, required=True, help='ISO start, e.g. 2025-03-01T09:00')
    g.add_argument('--time-before-first-slot', type=int, default=0)
    g.add_argument('--slot-duration', type=int, default=30)
    g.add_argument('--time-between-slots', type=int, default=5)
    g.add_argument('--out', type=str, default='slots.csv')
    g.add_argument('--plan', type=str, default=None, help='Also write the session-plan JSON payload')
    g.set_defaults(func=cmd_generate)

    c = sub.add_parser('check', help='Report double-booked teams and overlapping juries')
    c.add_argument('slots', type=str)
    c.set_defaults(func=cmd_check)

    r = sub.add_parser('rebalance', help='Improve an existing schedule by local search')
    r.add_argument('slots', type=str)
    r.add_argument('--team-ids', type=str, help='Team scope; defaults to teams in the file')
    r.add_argument('--jury-ids', type=str, help='Jury scope; defaults to juries in the file')
    r.add_argument('--seed', type=int, default=None)
    r.add_argument('--iterations', type=int, default=1000)
    r.add_argument('--time-limit', type=float, default=None, help='Search time cap (seconds)')
    r.add_argument('--weights', type=str, default=None, help='JSON file of penalty weights')
    r.add_argument('--analytics', type=str, default=None, help='JSON analytics summary of past sessions')
    r.add_argument('--out', type=str, default='rebalanced.csv')
    r.set_defaults(func=cmd_rebalance)

    args = p.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"error: {exc}")


if __name__ == '__main__':
    sys.exit(main())
