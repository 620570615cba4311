"""Unit tests for prompt construction."""

import json

import pytest

from lettersmith.contexts.drafting.prompt_builder import PromptBuilder, format_profile
from lettersmith.contexts.retrieval.cover_letter_archive import StoredCoverLetter
from lettersmith.contexts.targeting.profile_summarizer import summarize

JOB = "Senior React TypeScript frontend engineer"


@pytest.mark.unit
def test_build_includes_instructions(profile):
    prompt = PromptBuilder().build(profile, JOB)

    assert "Role: You are a professional cover letter writer" in prompt
    assert 'Use greeting: "Dear Hiring Manager,"' in prompt
    assert "Write 3 paragraphs" in prompt
    assert "Paragraph 2: Relevant experience" in prompt
    assert 'End with: "Thank you for your consideration."' in prompt
    assert 'Sign as: "Jordan Rivera"' in prompt
    assert JOB in prompt
    assert "Tone:" not in prompt


@pytest.mark.unit
def test_build_includes_past_letters(profile):
    letters = [
        StoredCoverLetter(submitted_cover_letter="Past letter about React."),
        StoredCoverLetter(job_id="job-without-text"),
    ]

    prompt = PromptBuilder().build(profile, JOB, letters)

    assert "Past letter 1" in prompt
    assert "Past letter about React." in prompt
    assert "Past letter 2" not in prompt


@pytest.mark.unit
def test_build_without_past_letters(profile):
    prompt = PromptBuilder().build(profile, JOB, [])

    assert "Previously Submitted Cover Letters" not in prompt


@pytest.mark.unit
def test_build_includes_tone(profile_data):
    from lettersmith.contexts.intake.profile_data_structure import UserProfile

    profile_data["letter_preferences"]["tone"] = "warm and direct"
    prompt = PromptBuilder().build(UserProfile.from_dict(profile_data), JOB)

    assert "Tone: warm and direct" in prompt


@pytest.mark.unit
def test_format_profile_uses_ranked_summary(profile):
    formatted = format_profile(profile, summarize(profile, JOB))

    assert formatted["basics"]["name"] == "Jordan Rivera"
    assert [exp["company"] for exp in formatted["relevantExperience"]] == [
        "Brightline Health",
        "Cartographic Labs",
    ]
    assert formatted["relevantExperience"][0]["relevance"] == 4
    assert formatted["topAchievements"][0] == "Partnered with design on React components"
    assert formatted["keySkills"]["soft"] == ["Mentoring"]
    json.dumps(formatted)


@pytest.mark.unit
def test_profile_json_embedded_in_prompt(profile):
    prompt = PromptBuilder().build(profile, JOB)

    assert '"relevantExperience": [' in prompt
    assert '"company": "Data Harbor"' not in prompt


@pytest.mark.unit
def test_custom_template_dir(tmp_path, profile):
    (tmp_path / "short.jinja").write_text("{{ job_description }} / {{ past_letters | length }}")

    builder = PromptBuilder(templates_dir=tmp_path, template_name="short.jinja")

    assert builder.build(profile, "Job", [StoredCoverLetter(submitted_cover_letter="x")]) == "Job / 1"
