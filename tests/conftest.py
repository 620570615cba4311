"""Shared fixtures: a valid profile and an offline embedding gateway."""

import copy
import re
import threading
from dataclasses import replace

import pytest

from lettersmith.contexts.intake.profile_data_structure import UserProfile
from lettersmith.contexts.retrieval.cover_letter_archive import COVER_LETTER_SCHEMA
from lettersmith.contexts.retrieval.embedding import EmbeddingGateway

PROFILE_DATA = {
    "name": "Jordan Rivera",
    "title": "Software Engineer",
    "summary": "Engineer building web platforms and developer tooling.",
    "contact": {
        "email": "jordan@example.com",
        "location": "Portland, OR",
        "linkedin": "https://www.linkedin.com/in/jordan-rivera-example",
    },
    "experience": [
        {
            "company": "Cartographic Labs",
            "role": "Backend Engineer",
            "duration": "2021 - present",
            "highlights": ["Rebuilt the tile API in Golang services"],
            "technologies": ["Golang", "PostgreSQL", "Kubernetes"],
        },
        {
            "company": "Brightline Health",
            "role": "Frontend Engineer",
            "duration": "2018 - 2021",
            "highlights": ["Shipped a React design system"],
            "technologies": ["React", "TypeScript"],
        },
        {
            "company": "Data Harbor",
            "role": "Data Engineer",
            "duration": "2016 - 2018",
            "highlights": ["Built Python pipelines for analytics"],
            "technologies": ["Python", "Airflow"],
        },
    ],
    "skills": {
        "core": {
            "languages": ["Golang", "TypeScript", "Python"],
            "frontend": ["React"],
            "backend": ["PostgreSQL"],
        },
        "soft": ["Mentoring"],
    },
    "achievements": ["Cut cloud spend with Kubernetes autoscaling"],
    "achievements_by_category": {
        "technical": ["Designed a Golang service at scale"],
        "leadership": ["Mentored four engineers"],
        "collaboration": ["Partnered with design on React components"],
        "innovation": ["Prototyped vector search"],
    },
    "letter_preferences": {
        "greeting": "Dear Hiring Manager,",
        "structure": ["Introduction", "Relevant experience", "Closing"],
        "closing": {
            "gratitude": "Thank you for your consideration.",
            "signature": "Jordan Rivera",
        },
    },
}

VOCABULARY = ("golang", "react", "python", "kubernetes", "typescript", "backend", "frontend")


class VocabularyEmbeddingGateway(EmbeddingGateway):
    """Counts vocabulary words: one dimension per word. Records every embedded text."""

    def __init__(self, vocabulary=VOCABULARY):
        super().__init__(model="vocabulary", dimensions=len(vocabulary))
        self.vocabulary = tuple(vocabulary)
        self.calls = []
        self._lock = threading.Lock()

    def _embed(self, text):
        with self._lock:
            self.calls.append(text)
        tokens = re.findall(r"\w+", text.lower())
        return [float(tokens.count(word)) for word in self.vocabulary]


@pytest.fixture
def profile_data():
    return copy.deepcopy(PROFILE_DATA)


@pytest.fixture
def profile(profile_data):
    return UserProfile.from_dict(profile_data)


@pytest.fixture
def vocabulary_gateway():
    return VocabularyEmbeddingGateway()


@pytest.fixture
def letters_schema():
    """Cover letter collection sized for the vocabulary gateway."""
    return replace(COVER_LETTER_SCHEMA, dimensions=len(VOCABULARY))
