"""
LETTERSMITH - Letter Editing Through Targeted Example Retrieval

A cover letter drafting assistant that retrieves similar past submissions, conditions
two text-generation providers on the most relevant parts of a candidate profile, and
archives the accepted letter with an embedding for future retrieval.

Architecture:
- Intake Context: Candidate profile loading/validation and text acquisition
- Targeting Context: Keyword extraction and relevance ranking of profile content
- Retrieval Context: Embedding and similarity search over past cover letters
- Drafting Context: Prompt assembly and dual-provider draft generation
"""

__version__ = "0.1.0"
