"""
Candidate profile data structure for the Intake context.

Provides the UserProfile class (and its components) that the Targeting context ranks
against job descriptions. Profiles are loaded from JSON or YAML and validated here,
so downstream code can rely on required fields being present.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from omegaconf import OmegaConf

from lettersmith.exceptions import InvalidProfileError

ACHIEVEMENT_CATEGORIES = ("technical", "leadership", "collaboration", "innovation")


@dataclass(frozen=True)
class ExperienceEntry:
    """
    One position from the candidate's work history.

    Attributes:
        company: Employer name
        role: Job title held
        duration: Free-form period (e.g., "2021 - Present")
        highlights: Ordered accomplishment bullets
        technologies: Ordered technologies used in the role
    """

    company: str
    role: str
    duration: str = ""
    highlights: Tuple[str, ...] = ()
    technologies: Tuple[str, ...] = ()

    def get_text(self) -> str:
        """Concatenate highlights, technologies and role for keyword scoring."""
        return " ".join([*self.highlights, *self.technologies, self.role])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "company": self.company,
            "role": self.role,
            "duration": self.duration,
            "highlights": list(self.highlights),
            "technologies": list(self.technologies),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExperienceEntry":
        return cls(
            company=data["company"],
            role=data["role"],
            duration=data.get("duration") or "",
            highlights=tuple(data.get("highlights") or ()),
            technologies=tuple(data.get("technologies") or ()),
        )


@dataclass
class Contact:
    email: str
    location: str
    linkedin: str
    phone: Optional[str] = None
    github: Optional[str] = None
    website: Optional[str] = None


@dataclass
class Skills:
    """
    Candidate skills.

    Attributes:
        core: Technical skills by category (languages, frontend, backend, ...)
        soft: Soft skills
    """

    core: Dict[str, List[str]]
    soft: List[str]


@dataclass
class LetterClosing:
    gratitude: str
    signature: str


@dataclass
class LetterPreferences:
    """
    How the candidate wants letters written.

    Attributes:
        greeting: Opening line (e.g., "Dear Hiring Manager,")
        structure: One description per paragraph; its length sets the paragraph count
        closing: Gratitude line and signature
        tone: Optional free-form tone guidance
    """

    greeting: str
    structure: List[str]
    closing: LetterClosing
    tone: Optional[str] = None


@dataclass
class UserProfile:
    """
    Validated candidate profile.

    Factory methods:
        from_dict(data) - Validate and build from a plain mapping
        from_file(path) - Load from a JSON or YAML file
    """

    name: str
    summary: str
    contact: Contact
    experience: List[ExperienceEntry]
    skills: Skills
    letter_preferences: LetterPreferences
    title: Optional[str] = None
    preferred_name: Optional[str] = None
    achievements: List[str] = field(default_factory=list)
    achievements_by_category: Dict[str, List[str]] = field(default_factory=dict)

    # =========================================================================
    # FACTORY METHODS
    # =========================================================================

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[str] = None) -> "UserProfile":
        """
        Validate a profile mapping and build a UserProfile.

        Args:
            data: Parsed profile (e.g., from json.load)
            source: Optional origin used in error messages

        Raises:
            InvalidProfileError: If a required field is missing or malformed
        """
        validate_profile_data(data, source=source)

        contact = data["contact"]
        skills = data["skills"]
        prefs = data["letter_preferences"]
        by_category = data.get("achievements_by_category") or {}

        return cls(
            name=data["name"],
            summary=data["summary"],
            title=data.get("title"),
            preferred_name=data.get("preferred_name"),
            contact=Contact(
                email=contact["email"],
                location=contact["location"],
                linkedin=contact["linkedin"],
                phone=contact.get("phone"),
                github=contact.get("github"),
                website=contact.get("website"),
            ),
            experience=[ExperienceEntry.from_dict(exp) for exp in data["experience"]],
            skills=Skills(
                core={k: list(v or []) for k, v in skills["core"].items()},
                soft=list(skills["soft"]),
            ),
            achievements=list(data.get("achievements") or []),
            achievements_by_category={
                category: list(by_category.get(category) or [])
                for category in ACHIEVEMENT_CATEGORIES
                if by_category.get(category)
            },
            letter_preferences=LetterPreferences(
                greeting=prefs["greeting"],
                structure=list(prefs["structure"]),
                closing=LetterClosing(
                    gratitude=prefs["closing"]["gratitude"],
                    signature=prefs["closing"]["signature"],
                ),
                tone=prefs.get("tone"),
            ),
        )

    @classmethod
    def from_file(cls, file_path: Path) -> "UserProfile":
        """
        Load a profile from a JSON or YAML file.

        JSON is a subset of YAML, so both go through OmegaConf.

        Raises:
            FileNotFoundError: If the file does not exist
            InvalidProfileError: If the profile fails validation
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Profile not found: {file_path}")

        data = OmegaConf.to_container(OmegaConf.load(file_path), resolve=True)
        if not isinstance(data, dict):
            raise InvalidProfileError("Profile must be a mapping", source=str(file_path))
        return cls.from_dict(data, source=str(file_path))

    # =========================================================================
    # PUBLIC API METHODS
    # =========================================================================

    def get_all_achievements(self) -> List[str]:
        """
        Flat list of achievements followed by each category's, in category order.

        Returns an empty list when the profile has no achievements at all.
        """
        collected = list(self.achievements)
        for category in ACHIEVEMENT_CATEGORIES:
            collected.extend(self.achievements_by_category.get(category, []))
        return collected


def validate_profile_data(data: Dict[str, Any], source: Optional[str] = None) -> None:
    """
    Check that a raw profile mapping has every field the letter flow relies on.

    Args:
        data: Parsed profile mapping
        source: Optional origin used in error messages

    Raises:
        InvalidProfileError: On the first failed check
    """

    def fail(reason: str):
        raise InvalidProfileError(reason, source=source)

    if not data:
        fail("Profile is undefined")
    if not data.get("name"):
        fail("Name is required")
    if not data.get("summary"):
        fail("Summary is required")

    prefs = data.get("letter_preferences")
    if not prefs:
        fail("Letter preferences are required")
    if not prefs.get("greeting"):
        fail("Letter greeting is required")
    if not prefs.get("structure"):
        fail("Letter structure length is required")
    closing = prefs.get("closing") or {}
    if not closing.get("gratitude") or not closing.get("signature"):
        fail("Letter closing (gratitude and signature) are required")

    contact = data.get("contact")
    if not contact:
        fail("Contact information is required")
    if not contact.get("email"):
        fail("Email is required in contact information")
    if not contact.get("location"):
        fail("Location is required in contact information")
    if not contact.get("linkedin"):
        fail("LinkedIn URL is required in contact information")

    experience = data.get("experience")
    if not isinstance(experience, list):
        fail("Experience must be an array")
    if not experience:
        fail("At least one experience entry is required")

    for index, exp in enumerate(experience, 1):
        if not exp.get("company"):
            fail(f"Experience {index} is missing company name")
        if not exp.get("role"):
            fail(f"Experience {index} is missing role")
        if not isinstance(exp.get("highlights"), list) or not exp["highlights"]:
            fail(f"Experience {index} must have at least one highlight")
        if not isinstance(exp.get("technologies"), list) or not exp["technologies"]:
            fail(f"Experience {index} must have at least one technology")

    skills = data.get("skills") or {}
    if not skills.get("core") or skills.get("soft") is None:
        fail("Skills must include both core and soft skills")
    core = skills["core"]
    if not core.get("languages"):
        fail("At least one programming language is required")
    if not core.get("frontend") or not core.get("backend"):
        fail("Both frontend and backend skills are required")
    if not isinstance(skills["soft"], list) or not skills["soft"]:
        fail("At least one soft skill is required")
