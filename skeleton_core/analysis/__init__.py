from .fallback_data import FALLBACK_ARTIFACTS, get_fallback_artifact
from .response_parser import (
    build_artifact,
    clean_markdown_json,
    coerce_structure,
    parse_ai_response,
)
from .role_postprocessor import (
    PREPOSITIONS,
    PhraseIssue,
    ValidationReport,
    determine_phrase_function,
    find_prepositional_phrases,
    post_process_roles,
    validate_prepositional_phrases,
)
from .sentence_analysis_service import SentenceAnalysisService

__all__ = [
    "FALLBACK_ARTIFACTS",
    "get_fallback_artifact",
    "build_artifact",
    "clean_markdown_json",
    "coerce_structure",
    "parse_ai_response",
    "PREPOSITIONS",
    "PhraseIssue",
    "ValidationReport",
    "determine_phrase_function",
    "find_prepositional_phrases",
    "post_process_roles",
    "validate_prepositional_phrases",
    "SentenceAnalysisService",
]
