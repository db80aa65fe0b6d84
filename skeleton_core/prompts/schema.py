"""
JSON schema of the sentence analysis artifact, as requested from providers.
"""

from typing import Any, Dict

from skeleton_core.model.sentence_analysis import GrammarRole, SentenceStructure

REQUIRED_FIELDS = [
    "originalSentence",
    "words",
    "wordRoles",
    "structureType",
    "skeletonIndices",
    "explanation",
    "options",
]


def get_sentence_schema() -> Dict[str, Any]:
    """Build a fresh schema dict; callers may mutate it."""
    roles = ", ".join(role.value for role in GrammarRole)
    return {
        "type": "object",
        "properties": {
            "originalSentence": {
                "type": "string",
                "description": "The original English sentence to analyze",
            },
            "words": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Array of words/punctuation tokens from the sentence",
            },
            "wordRoles": {
                "type": "array",
                "items": {"type": "string"},
                "description": (
                    "Array of grammatical roles corresponding index-by-index to the words array. "
                    f"Each element should be one of: {roles}"
                ),
            },
            "structureType": {
                "type": "string",
                "enum": [s.value for s in SentenceStructure],
                "description": "The main sentence structure type",
            },
            "skeletonIndices": {
                "type": "array",
                "items": {"type": "integer"},
                "description": "Indices of words that form the skeleton (main structure)",
            },
            "explanation": {
                "type": "string",
                "description": "Brief explanation in Chinese explaining the skeleton and modifiers/clauses",
            },
            "options": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Unique role strings for UI buttons: all used roles plus 2-3 distractors",
            },
        },
        "required": list(REQUIRED_FIELDS),
    }
