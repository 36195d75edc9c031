# Export catalog models for easy imports
from .base import Base
from .college import RecCollege

__all__ = [
    "Base",
    "RecCollege",
]
