from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

@dataclass
class Slot:
    room_id: int
    slot_index: int
    start_time: datetime
    end_time: datetime
    team_ids: List[int] = field(default_factory=list)
    jury_ids: List[int] = field(default_factory=list)

    def copy(self) -> "Slot":
        return replace(self, team_ids=list(self.team_ids), jury_ids=list(self.jury_ids))

    def overlaps(self, other: "Slot") -> bool:
        # half-open intervals: touching slots do not overlap
        return self.start_time < other.end_time and other.start_time < self.end_time

@dataclass
class Schedule:
    slots: List[Slot] = field(default_factory=list)
    # room-level jury assignment: room_id -> ordered jury ids
    room_juries: Dict[int, List[int]] = field(default_factory=dict)

@dataclass
class GenerationParams:
    room_ids: List[int]
    team_ids: List[int]
    jury_ids: List[int]
    teams_per_room: int
    juries_per_room: int
    start_time: datetime
    time_before_first_slot: int = 0  # minutes
    slot_duration: int = 30
    time_between_slots: int = 5
    team_labels: Dict[int, str] = field(default_factory=dict)
    jury_labels: Dict[int, str] = field(default_factory=dict)
    existing_room_juries: Optional[Dict[int, List[int]]] = None

@dataclass
class PenaltyWeights:
    waiting_time_disparity: float = 3.0
    repeated_team_meetings: float = 2.0
    repeated_team_jury_interactions: float = 2.0
    uneven_room_attendance: float = 1.0
    jury_room_changes: float = 1.5

    def scaled(self, name: str, factor: float) -> "PenaltyWeights":
        return replace(self, **{name: getattr(self, name) * factor})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PenaltyWeights":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown penalty weight(s): {', '.join(sorted(unknown))}")
        values = {k: float(v) for k, v in data.items()}
        if any(v < 0 for v in values.values()):
            raise ValueError("Penalty weights must be non-negative")
        return cls(**values)

@dataclass
class Metrics:
    waiting_time_disparity: float = 0.0
    repeated_team_meetings: int = 0
    repeated_team_jury_interactions: int = 0
    uneven_room_attendance: float = 0.0
    jury_room_changes: int = 0
    total_penalty: float = 0.0

@dataclass
class RebalanceResult:
    original_slots: List[Slot]
    slots: List[Slot]
    before_metrics: Metrics
    after_metrics: Metrics
    improvement_percentage: float
    seed: int
    iterations_run: int = 0
    accepted_moves: int = 0

    @property
    def improved(self) -> bool:
        return self.after_metrics.total_penalty < self.before_metrics.total_penalty

@dataclass
class TeamConflict:
    team_id: int
    slot_indexes: List[int]

@dataclass
class JuryConflict:
    jury_id: int
    # every slot the jury sits in: (slot_index, start_time, end_time)
    conflicting_slots: List[Tuple[int, datetime, datetime]]

# --- global analytics summary, as exposed by the analytics aggregator ---

@dataclass
class TeamPairMeeting:
    team1_id: int
    team2_id: int
    meet_count: int

@dataclass
class TeamJuryInteraction:
    team_id: int
    jury_id: int
    meet_count: int

@dataclass
class TeamWaitingTime:
    team_id: int
    average_waiting_time_minutes: float
    total_waiting_time_minutes: float = 0.0

@dataclass
class TeamRoomDistribution:
    team_id: int
    # (room_id, times the team used that room)
    room_counts: List[Tuple[int, int]] = field(default_factory=list)

@dataclass
class AnalyticsSummary:
    team_vs_team_matrix: List[TeamPairMeeting] = field(default_factory=list)
    team_jury_matrix: List[TeamJuryInteraction] = field(default_factory=list)
    team_waiting_times: List[TeamWaitingTime] = field(default_factory=list)
    team_room_distributions: List[TeamRoomDistribution] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalyticsSummary":
        """Build a summary from the aggregator's JSON payload.

        `team_jury_matrix` may be either the full matrix object (with a
        `counts` list) or the bare list of interactions.
        """
        jury_matrix = data.get('team_jury_matrix') or []
        if isinstance(jury_matrix, dict):
            jury_matrix = jury_matrix.get('counts') or []
        return cls(
            team_vs_team_matrix=[
                TeamPairMeeting(int(m['team1_id']), int(m['team2_id']), int(m['meet_count']))
                for m in data.get('team_vs_team_matrix') or []
            ],
            team_jury_matrix=[
                TeamJuryInteraction(int(c['team_id']), int(c['jury_id']), int(c['meet_count']))
                for c in jury_matrix
            ],
            team_waiting_times=[
                TeamWaitingTime(
                    team_id=int(t['team_id']),
                    average_waiting_time_minutes=float(t['average_waiting_time_minutes']),
                    total_waiting_time_minutes=float(t.get('total_waiting_time_minutes', 0.0)),
                )
                for t in data.get('team_waiting_times') or []
            ],
            team_room_distributions=[
                TeamRoomDistribution(
                    team_id=int(d['team_id']),
                    room_counts=[_room_count(rc) for rc in d.get('room_counts') or []],
                )
                for d in data.get('team_room_distributions') or []
            ],
        )

def _room_count(entry) -> Tuple[int, int]:
    if isinstance(entry, dict):
        return int(entry['room_id']), int(entry.get('count', 1))
    room_id, count = entry
    return int(room_id), int(count)
