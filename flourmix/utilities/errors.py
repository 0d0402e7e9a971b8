"""Exceptions raised by the blending engine and its collaborators."""


class FlourmixError(Exception):
    """Base class for flourmix errors."""


class EmptyCombinationError(FlourmixError, ValueError):
    """Raised when a combination is requested without any input blend."""


class InvalidPercentageSumError(FlourmixError, ValueError):
    """Raised by the save path when a blend does not sum to ~100%."""

    def __init__(self, total_percentage: float):
        self.total_percentage = total_percentage
        super().__init__(f"Blend percentages must sum to 100 (got {total_percentage:.2f})")


class MixLimitExceededError(FlourmixError):
    """Raised when an owner already holds as many saved blends as their tier allows."""

    def __init__(self, tier: str, limit: int):
        self.tier = tier
        self.limit = limit
        super().__init__(f"Saved mix limit reached for tier '{tier}' ({limit} mixes)")


class DataAcquisitionError(FlourmixError):
    """Raised when catalog or saved-blend data cannot be loaded after retries."""


class BlendNotFoundError(FlourmixError, KeyError):
    """Raised when a saved blend id is unknown."""


__all__ = [
    'FlourmixError', 'EmptyCombinationError', 'InvalidPercentageSumError',
    'MixLimitExceededError', 'DataAcquisitionError', 'BlendNotFoundError'
]
