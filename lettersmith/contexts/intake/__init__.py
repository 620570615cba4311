"""
Intake Context

Responsibilities:
- Loads and validates the candidate profile (JSON or YAML)
- Collects free text (job descriptions, final letters) through pluggable strategies

Owns: Profile data structure and validation, text acquisition
Never: Ranks profile content or talks to embedding/vector services
"""

from lettersmith.contexts.intake.profile_data_structure import (
    ExperienceEntry,
    UserProfile,
    validate_profile_data,
)
from lettersmith.contexts.intake.text_acquisition import TextAcquirer, get_acquirer

__all__ = [
    "ExperienceEntry",
    "TextAcquirer",
    "UserProfile",
    "get_acquirer",
    "validate_profile_data",
]
