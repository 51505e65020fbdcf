from dataclasses import asdict
from typing import Dict, Optional, Sequence

import pandas as pd

from .models import RebalanceResult, Slot

METRIC_LABELS = {
    'waiting_time_disparity': 'Waiting-time disparity (min)',
    'repeated_team_meetings': 'Repeated team meetings',
    'repeated_team_jury_interactions': 'Repeated team-jury interactions',
    'uneven_room_attendance': 'Uneven room attendance',
    'jury_room_changes': 'Jury room changes',
    'total_penalty': 'Total penalty',
}


def _names(ids, labels: Optional[Dict[int, str]]) -> str:
    if not labels:
        return ', '.join(str(i) for i in ids)
    return ', '.join(labels.get(i, f"ID:{i}") for i in ids)


def slots_frame(slots: Sequence[Slot], room_labels=None, team_labels=None, jury_labels=None) -> pd.DataFrame:
    rows = [
        {
            'room': (room_labels or {}).get(s.room_id, s.room_id),
            'slot': s.slot_index,
            'start': s.start_time,
            'end': s.end_time,
            'teams': _names(s.team_ids, team_labels),
            'juries': _names(s.jury_ids, jury_labels),
        }
        for s in slots
    ]
    return pd.DataFrame(rows, columns=['room', 'slot', 'start', 'end', 'teams', 'juries'])


def metrics_frame(result: RebalanceResult) -> pd.DataFrame:
    """Before/after table of every metric, as shown when reviewing a rebalance."""
    before, after = asdict(result.before_metrics), asdict(result.after_metrics)
    df = pd.DataFrame({
        'metric': [METRIC_LABELS[k] for k in METRIC_LABELS],
        'before': [float(before[k]) for k in METRIC_LABELS],
        'after': [float(after[k]) for k in METRIC_LABELS],
    })
    df['change'] = df['after'] - df['before']
    return df.set_index('metric')
