from .field_types import (
    FIELD_TYPES,
    TRAINABLE_LABELS,
    UNKNOWN,
    category_of,
    is_known_type,
)
from .settings import Settings, get_settings

__all__ = [
    "FIELD_TYPES",
    "TRAINABLE_LABELS",
    "UNKNOWN",
    "Settings",
    "category_of",
    "get_settings",
    "is_known_type",
]
