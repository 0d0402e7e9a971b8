"""Blending engine logic layer.

Subpackages:
- catalog: catalog -> table lookup
- contributions: anti-nutrient / enzyme fallback resolution
- validation: percentage checks gating saves
- reporting: weighted aggregation and blend profiles
- combination: merging saved blends with weights

Everything here is pure: inputs are already-fetched snapshots, outputs are fresh values.
"""
__all__ = ["catalog", "contributions", "validation", "reporting", "combination"]
