"""
Shared utilities for lettersmith.

Common functionality used across contexts:
- Settings resolution
- Logger setup
- Text-generation providers
- Text comparison helpers
"""

from lettersmith.utils.config import load_settings
from lettersmith.utils.logger import setup_logger

__all__ = ["load_settings", "setup_logger"]
