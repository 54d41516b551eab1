# Core package initialization
# Configuration, logging, validation and error types shared by every layer

from . import config, exceptions

__all__ = [
    "config",
    "exceptions",
]
