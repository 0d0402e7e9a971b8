"""Recent blend events kept for the web layer to poll.

start() subscribes one recorder to blend.saved, blend.sum_invalid and
blend.combined on GLOBAL_EVENT_BUS. Each recorded event gets an increasing
integer id; clients poll with since=<last id seen>. At most MAX_EVENTS
events are kept per process.
"""
from __future__ import annotations
from collections import deque
from datetime import datetime, timezone
from itertools import count
from threading import Lock
from typing import Any, Deque, Dict, Optional

from .Event_Bus import GLOBAL_EVENT_BUS, BLEND_SAVED, BLEND_SUM_INVALID, BLEND_COMBINED

MAX_EVENTS = 300
OBSERVED_EVENTS = (BLEND_SAVED, BLEND_SUM_INVALID, BLEND_COMBINED)
# Payload keys copied verbatim into the stored event
_PASSTHROUGH_KEYS = ('created', 'total_percentage', 'sources', 'weights', 'components')

_lock = Lock()
_buffer: Deque[Dict[str, Any]] = deque(maxlen=MAX_EVENTS)
_ids = count(1)
_started = False


def _summarize(event_name: str, payload: Any) -> Dict[str, Any]:
    summary: Dict[str, Any] = {'type': event_name, 'ts': datetime.now(timezone.utc).isoformat()}
    if not isinstance(payload, dict):
        return summary
    blend = payload.get('blend')
    if blend is not None:
        summary['blend_id'] = getattr(blend, 'id', '')
        summary['name'] = getattr(blend, 'name', '')
        summary['components'] = len(getattr(blend, 'components', []))
    summary.update({k: payload[k] for k in _PASSTHROUGH_KEYS if k in payload})
    return summary


def _record(event_name: str, payload: Any):
    summary = _summarize(event_name, payload)
    with _lock:
        summary['id'] = next(_ids)
        _buffer.append(summary)


def start():
    """Subscribe the recorder once per process."""
    global _started
    with _lock:
        if _started:
            return
        _started = True
    for name in OBSERVED_EVENTS:
        GLOBAL_EVENT_BUS.subscribe(name, _record)


def get_events(since: Optional[int] = None) -> Dict[str, Any]:
    """Events with id greater than `since` (all buffered events when None).

    next_cursor is the newest id, to be passed back as `since`.
    """
    with _lock:
        events = [e for e in _buffer if since is None or e['id'] > since]
        next_cursor = _buffer[-1]['id'] if _buffer else (since or 0)
    return {'events': events, 'next_cursor': next_cursor}


__all__ = ['start', 'get_events', 'MAX_EVENTS', 'OBSERVED_EVENTS']
