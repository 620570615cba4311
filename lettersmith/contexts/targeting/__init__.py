"""
Targeting Context

Responsibilities:
- Extracts keyword sets from free text
- Scores relevance of experience and achievements against a job description
- Selects the top experience entries and achievements used to condition drafting

Owns: Keyword extraction, relevance scoring, profile summarization
Never: Calls embedding models, vector stores or text-generation providers
"""

from lettersmith.contexts.targeting.keywords import STOP_WORDS, KeywordSet, extract_keywords
from lettersmith.contexts.targeting.profile_summarizer import (
    MAX_RELEVANT_EXPERIENCE,
    MAX_TOP_ACHIEVEMENTS,
    RankedSummary,
    summarize,
)
from lettersmith.contexts.targeting.relevance import ScoredItem, rank, score

__all__ = [
    "KeywordSet",
    "MAX_RELEVANT_EXPERIENCE",
    "MAX_TOP_ACHIEVEMENTS",
    "RankedSummary",
    "STOP_WORDS",
    "ScoredItem",
    "extract_keywords",
    "rank",
    "score",
    "summarize",
]
