from .acequia_system import AcequiaSystem
from .validation import ValidationError

__all__ = [
    "AcequiaSystem",
    "ValidationError",
]
