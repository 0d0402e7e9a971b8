"""In-process event bus for blend notifications.

Event names:
  blend.saved -> payload {"blend": SavedBlend, "created": bool}
  blend.sum_invalid -> payload {"blend": Blend, "total_percentage": float}
  blend.combined -> payload {"sources": [str], "weights": [float], "components": int}

Subscribers are callables taking (event_name, payload); the subscriber
table is guarded by a lock.
"""
from __future__ import annotations
import logging
from threading import RLock
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

BLEND_SAVED = "blend.saved"
BLEND_SUM_INVALID = "blend.sum_invalid"
BLEND_COMBINED = "blend.combined"

Subscriber = Callable[[str, Any], None]


class EventBus:
	def __init__(self):
		self._lock = RLock()
		self._subscribers: Dict[str, List[Subscriber]] = {}

	def subscribe(self, event_name: str, callback: Subscriber):
		with self._lock:
			callbacks = self._subscribers.setdefault(event_name, [])
			if callback not in callbacks:
				callbacks.append(callback)

	def unsubscribe(self, event_name: str, callback: Subscriber):
		with self._lock:
			callbacks = self._subscribers.get(event_name, [])
			if callback in callbacks:
				callbacks.remove(callback)

	def subscribers(self, event_name: str) -> List[Subscriber]:
		with self._lock:
			return list(self._subscribers.get(event_name, []))

	def publish(self, event_name: str, payload: Any) -> int:
		"""Deliver to every subscriber; returns how many received the event."""
		delivered = 0
		for cb in self.subscribers(event_name):
			try:
				cb(event_name, payload)
				delivered += 1
			except Exception:  # pragma: no cover
				logger.exception(f"Subscriber {cb!r} failed on {event_name}")
		return delivered


GLOBAL_EVENT_BUS = EventBus()


def publish_event(event_name: str, payload: Any = None) -> int:
	"""Publish an event on the global bus."""
	return GLOBAL_EVENT_BUS.publish(event_name, payload)


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'publish_event',
	'BLEND_SAVED', 'BLEND_SUM_INVALID', 'BLEND_COMBINED'
]
