import csv
import io
import json
import os
from datetime import datetime
from typing import Any, Dict, IO, List, Sequence, Union

from .models import AnalyticsSummary, PenaltyWeights, Slot

TextOrPath = Union[str, os.PathLike, IO]

SLOT_FIELDS = ['room_id', 'slot_index', 'start_time', 'end_time', 'team_ids', 'jury_ids']


def _open_text(src: TextOrPath):
    """Return a text-mode file handle and a flag indicating whether to close it.

    Accepts a filesystem path, a text IO object, or a BytesIO buffer.
    """
    if isinstance(src, (str, os.PathLike)):
        return open(src, 'r', newline=''), True
    if isinstance(src, io.BytesIO):
        src.seek(0)
        return io.TextIOWrapper(src, encoding='utf-8', newline=''), True
    if hasattr(src, 'read'):
        return src, False
    raise TypeError("Unsupported input type; expected path or file-like object")


def _parse_ids(cell: str) -> List[int]:
    cell = (cell or '').strip()
    if not cell:
        return []
    return [int(x) for x in cell.split(';') if x.strip()]


def _format_ids(ids: Sequence[int]) -> str:
    return ';'.join(str(i) for i in ids)


def load_directory(src: TextOrPath) -> Dict[int, str]:
    """CSV with id,label -> {id: label} in file order."""
    items: Dict[int, str] = {}
    f, should_close = _open_text(src)
    try:
        for n, row in enumerate(csv.DictReader(f), start=2):
            try:
                items[int(row['id'])] = str(row.get('label') or row['id']).strip()
            except (KeyError, TypeError, ValueError) as exc:
                raise ValueError(f"line {n}: bad directory row {row!r}") from exc
    finally:
        if should_close:
            f.close()
    return items


def load_slots_csv(src: TextOrPath) -> List[Slot]:
    slots: List[Slot] = []
    f, should_close = _open_text(src)
    try:
        for n, row in enumerate(csv.DictReader(f), start=2):
            try:
                slots.append(Slot(
                    room_id=int(row['room_id']),
                    slot_index=int(row['slot_index']),
                    start_time=datetime.fromisoformat(row['start_time'].strip()),
                    end_time=datetime.fromisoformat(row['end_time'].strip()),
                    team_ids=_parse_ids(row.get('team_ids')),
                    jury_ids=_parse_ids(row.get('jury_ids')),
                ))
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                raise ValueError(f"line {n}: bad slot row {row!r}") from exc
    finally:
        if should_close:
            f.close()
    return slots


def save_slots_csv(path: str, slots: Sequence[Slot]):
    with open(path, 'w', newline='') as f:
        w = csv.writer(f)
        w.writerow(SLOT_FIELDS)
        for s in slots:
            w.writerow([s.room_id, s.slot_index, s.start_time.isoformat(), s.end_time.isoformat(),
                        _format_ids(s.team_ids), _format_ids(s.jury_ids)])


def to_session_plan(slots: Sequence[Slot]) -> List[Dict[str, Any]]:
    """Payload handed to session-plan persistence."""
    return [
        {
            'room_id': s.room_id,
            'slot_index': s.slot_index,
            'start_time': s.start_time.isoformat(),
            'end_time': s.end_time.isoformat(),
            'team_ids': list(s.team_ids),
            'jury_ids': list(s.jury_ids),
        }
        for s in slots
    ]


def save_session_plan_json(path: str, slots: Sequence[Slot]):
    with open(path, 'w') as f:
        json.dump(to_session_plan(slots), f, indent=2)


def load_analytics_summary(src: TextOrPath) -> AnalyticsSummary:
    f, should_close = _open_text(src)
    try:
        return AnalyticsSummary.from_dict(json.load(f))
    finally:
        if should_close:
            f.close()


def load_weights(src: TextOrPath) -> PenaltyWeights:
    f, should_close = _open_text(src)
    try:
        return PenaltyWeights.from_dict(json.load(f))
    finally:
        if should_close:
            f.close()
