"""Configuration components for the security system."""

from .defaults import (
    DEFAULT_CONFIG,
    SYSTEM_CONSTANTS,
    DEFAULT_PATHS,
    CASCADE_FILES,
    IMAGE_SERVICES
)

__all__ = [
    'DEFAULT_CONFIG',
    'SYSTEM_CONSTANTS',
    'DEFAULT_PATHS',
    'CASCADE_FILES',
    'IMAGE_SERVICES'
]
