"""
Prompt construction for cover letter drafts.

Renders the cover letter prompt template from a candidate profile, the job description,
the profile summary ranked against that job, and previously submitted letters.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

from lettersmith.contexts.drafting.logger import log_prompt_built
from lettersmith.contexts.intake.profile_data_structure import UserProfile
from lettersmith.contexts.retrieval.cover_letter_archive import StoredCoverLetter
from lettersmith.contexts.targeting.profile_summarizer import RankedSummary, summarize

TEMPLATES_DIR = Path(__file__).parent / "templates"
DEFAULT_TEMPLATE = "cover_letter_prompt.md.jinja"


def format_profile(profile: UserProfile, summary: RankedSummary) -> Dict[str, Any]:
    """
    Condensed profile sent to the model.

    Only the ranked experience (with its relevance) and the top achievements are
    included; the rest of the experience list is left out.
    """
    return {
        "basics": {
            "name": profile.name,
            "preferred_name": profile.preferred_name,
            "title": profile.title,
            "summary": profile.summary,
            "contact": asdict(profile.contact),
        },
        "relevantExperience": [
            {**scored.item.to_dict(), "relevance": scored.relevance}
            for scored in summary.experience
        ],
        "keySkills": {
            "technical": profile.skills.core,
            "soft": profile.skills.soft,
        },
        "topAchievements": summary.achievement_texts,
        "preferences": asdict(profile.letter_preferences),
    }


class PromptBuilder:
    """
    Renders cover letter prompts from a Jinja2 template.

    Args:
        templates_dir: Directory holding the templates (default: bundled templates/)
        template_name: Template file to render
    """

    def __init__(self, templates_dir: Optional[Path] = None, template_name: str = DEFAULT_TEMPLATE):
        self.templates_dir = Path(templates_dir) if templates_dir else TEMPLATES_DIR
        self.template_name = template_name

        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._template: Optional[Template] = None

    @property
    def template(self) -> Template:
        if self._template is None:
            self._template = self.env.get_template(self.template_name)
        return self._template

    def build(
        self,
        profile: UserProfile,
        job_description: str,
        similar_letters: Sequence[StoredCoverLetter] = (),
        summary: Optional[RankedSummary] = None,
    ) -> str:
        """
        Render the prompt for one job.

        Args:
            profile: Candidate profile
            job_description: Job description text
            similar_letters: Past letters returned by the archive; ones without
                letter text are skipped
            summary: Precomputed ranking (default: summarize(profile, job_description))

        Returns:
            Prompt text
        """
        if summary is None:
            summary = summarize(profile, job_description)

        past_letters = [
            letter.submitted_cover_letter
            for letter in similar_letters
            if letter.submitted_cover_letter
        ]

        prompt = self.template.render(
            profile_json=json.dumps(format_profile(profile, summary), indent=2),
            job_description=job_description,
            past_letters=past_letters,
            preferences=profile.letter_preferences,
        )

        log_prompt_built(self.template_name, len(prompt), len(past_letters))
        return prompt
