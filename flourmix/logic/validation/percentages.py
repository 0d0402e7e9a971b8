"""Blend percentage validation used to gate saving."""
from __future__ import annotations
from typing import Iterable, NamedTuple

from flourmix.domain.MixComponent import MixComponent
from flourmix.utilities.constants import PERCENTAGE_TOLERANCE, PERCENTAGE_TOTAL

__all__ = ["PercentageCheck", "validate_percentages"]


class PercentageCheck(NamedTuple):
    ok: bool
    total_percentage: float


def validate_percentages(components: Iterable[MixComponent]) -> PercentageCheck:
    """Return whether the percentages sum to 100 within tolerance, with the sum.

    Never raises; the caller decides whether to block or warn.
    """
    total = sum(c.percentage for c in components)
    return PercentageCheck(abs(total - PERCENTAGE_TOTAL) < PERCENTAGE_TOLERANCE, total)
