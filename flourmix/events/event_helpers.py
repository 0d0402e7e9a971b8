"""Event helper utilities.

This module provides helper functions for publishing blend-related events
using the global event bus.

Quick import:
    from flourmix.events.event_helpers import (
        publish_blend_saved, publish_sum_invalid, publish_blend_combined
    )

"""
from __future__ import annotations
from typing import Any, Sequence
from .Event_Bus import (
    publish_event, BLEND_SAVED, BLEND_SUM_INVALID, BLEND_COMBINED
)

__all__ = [
    'publish_blend_saved', 'publish_sum_invalid', 'publish_blend_combined',
    'BLEND_SAVED', 'BLEND_SUM_INVALID', 'BLEND_COMBINED'
]


def publish_blend_saved(blend: Any, created: bool = True):
    """Publish a blend.saved event."""
    publish_event(BLEND_SAVED, {
        'blend': blend,
        'created': created
    })


def publish_sum_invalid(blend: Any, total_percentage: float):
    """Publish a blend.sum_invalid event (save attempt rejected)."""
    publish_event(BLEND_SUM_INVALID, {
        'blend': blend,
        'total_percentage': total_percentage
    })


def publish_blend_combined(source_ids: Sequence[str], weights: Sequence[float], component_count: int):
    """Publish a blend.combined event.

    Payload structure:
        {
          'sources': [<blend id>, ...],
          'weights': [<float>, ...],
          'components': <int>
        }
    """
    publish_event(BLEND_COMBINED, {
        'sources': list(source_ids),
        'weights': list(weights),
        'components': component_count
    })
