"""
Profile summarization for prompt conditioning.

Selects the experience entries and achievements of a candidate profile that overlap
most with a job description. The result is a pure function of (profile, job text).
"""

from dataclasses import dataclass
from typing import List, Tuple

from lettersmith.contexts.intake.profile_data_structure import ExperienceEntry, UserProfile
from lettersmith.contexts.targeting.keywords import extract_keywords
from lettersmith.contexts.targeting.logger import log_summary_selection
from lettersmith.contexts.targeting.relevance import ScoredItem, rank

MAX_RELEVANT_EXPERIENCE = 2
MAX_TOP_ACHIEVEMENTS = 4


@dataclass(frozen=True)
class RankedSummary:
    """
    Most relevant parts of a profile for one job description.

    Attributes:
        experience: Up to 2 experience entries, highest relevance first
        achievements: Up to 4 achievements, highest relevance first

    Ties keep the order in which the profile lists them.
    """

    experience: Tuple[ScoredItem[ExperienceEntry], ...] = ()
    achievements: Tuple[ScoredItem[str], ...] = ()

    @property
    def experience_entries(self) -> List[ExperienceEntry]:
        return [scored.item for scored in self.experience]

    @property
    def achievement_texts(self) -> List[str]:
        return [scored.item for scored in self.achievements]


def summarize(profile: UserProfile, job_description: str) -> RankedSummary:
    """
    Rank a profile's experience and achievements against a job description.

    Experience entries are scored on their highlights, technologies and role.
    Achievements come from the flat list plus the technical, leadership,
    collaboration and innovation categories; a profile without any yields an
    empty achievements tuple.

    Args:
        profile: Validated candidate profile
        job_description: Free-text job description

    Returns:
        RankedSummary with at most 2 experience entries and 4 achievements
    """
    job_keywords = extract_keywords(job_description)

    experience = rank(
        profile.experience,
        job_keywords,
        text_of=ExperienceEntry.get_text,
        limit=MAX_RELEVANT_EXPERIENCE,
    )

    all_achievements = profile.get_all_achievements()
    achievements = rank(all_achievements, job_keywords, limit=MAX_TOP_ACHIEVEMENTS)

    summary = RankedSummary(experience=tuple(experience), achievements=tuple(achievements))

    log_summary_selection(
        job_keyword_count=len(job_keywords),
        experience=summary.experience,
        achievements=summary.achievements,
        total_experience=len(profile.experience),
        total_achievements=len(all_achievements),
    )
    return summary
