from .sentence_analysis import (
    GrammarRole,
    SentenceStructure,
    DifficultyLevel,
    SentenceAnalysisArtifact,
    SKELETON_ROLES,
    CLAUSE_ROLES,
    DEFAULT_STRUCTURE,
    is_skeleton_role,
    is_clause_role,
)

__all__ = [
    "GrammarRole",
    "SentenceStructure",
    "DifficultyLevel",
    "SentenceAnalysisArtifact",
    "SKELETON_ROLES",
    "CLAUSE_ROLES",
    "DEFAULT_STRUCTURE",
    "is_skeleton_role",
    "is_clause_role",
]
