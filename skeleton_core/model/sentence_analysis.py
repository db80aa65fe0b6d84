"""
Sentence analysis data model.

This module defines the canonical artifact produced by the sentence analysis
pipeline together with the closed vocabularies it is built from: grammar roles,
main-clause structures and difficulty levels.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class GrammarRole(str, Enum):
    """Grammatical role assigned to a single token."""

    SUBJECT = "主语"
    PREDICATE = "谓语"
    OBJECT = "宾语"
    PREDICATIVE = "表语"
    ATTRIBUTE = "定语"
    ADVERBIAL = "状语"
    COMPLEMENT = "补语"
    LINK_VERB = "系动词"
    CONNECTIVE = "连接词/其他"
    ATTRIBUTIVE_CLAUSE = "定语从句"
    ADVERBIAL_CLAUSE = "状语从句"

    @classmethod
    def from_value(cls, value: Any) -> Optional["GrammarRole"]:
        """Return the matching role, or None for an unknown label."""
        try:
            return cls(value)
        except ValueError:
            return None


SKELETON_ROLES = frozenset(
    {
        GrammarRole.SUBJECT,
        GrammarRole.PREDICATE,
        GrammarRole.OBJECT,
        GrammarRole.PREDICATIVE,
        GrammarRole.COMPLEMENT,
        GrammarRole.LINK_VERB,
    }
)

CLAUSE_ROLES = frozenset({GrammarRole.ATTRIBUTIVE_CLAUSE, GrammarRole.ADVERBIAL_CLAUSE})


# Role labels arrive either as plain strings or as GrammarRole members;
# normalize through from_value before testing membership.
def is_skeleton_role(role: Any) -> bool:
    return GrammarRole.from_value(role) in SKELETON_ROLES


def is_clause_role(role: Any) -> bool:
    return GrammarRole.from_value(role) in CLAUSE_ROLES


class SentenceStructure(str, Enum):
    """Main clause patterns."""

    SV = "主谓 (SV)"
    SVO = "主谓宾 (SVO)"
    SP = "主系表 (SP)"
    SVOO = "主谓双宾 (SVOO)"
    SVOC = "主谓宾宾补 (SVOC)"


DEFAULT_STRUCTURE = SentenceStructure.SVO


class DifficultyLevel(str, Enum):
    """Difficulty tiers a sentence can be generated for."""

    BASIC = "Basic"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"

    @classmethod
    def parse(cls, value: Union[str, "DifficultyLevel"]) -> "DifficultyLevel":
        """Accept either the enum, its value or its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for level in cls:
            if text.lower() in (level.value.lower(), level.name.lower()):
                return level
        raise ValueError(f"Unknown difficulty level: {value!r}")


@dataclass
class SentenceAnalysisArtifact:
    """
    Canonical sentence analysis.

    ``word_roles`` maps token index to role label. Known labels are stored as
    ``GrammarRole`` members, which compare equal to their string values.
    """

    original_sentence: str
    words: List[str]
    word_roles: Dict[int, str]
    structure_type: SentenceStructure = DEFAULT_STRUCTURE
    skeleton_indices: List[int] = field(default_factory=list)
    explanation: str = ""
    options: List[str] = field(default_factory=list)
    level: Optional[DifficultyLevel] = None

    def copy(self) -> "SentenceAnalysisArtifact":
        """Deep copy, so callers can never share mutable containers."""
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the artifact to its JSON wire shape."""
        return {
            "originalSentence": self.original_sentence,
            "words": list(self.words),
            "wordRoles": {str(index): _plain(role) for index, role in sorted(self.word_roles.items())},
            "structureType": _plain(self.structure_type),
            "skeletonIndices": list(self.skeleton_indices),
            "explanation": self.explanation,
            "options": [_plain(option) for option in self.options],
            "level": _plain(self.level) if self.level is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SentenceAnalysisArtifact":
        """Rebuild an artifact from its wire shape (e.g. a question bank entry)."""
        raw_roles = data.get("wordRoles") or {}
        if isinstance(raw_roles, list):
            raw_roles = dict(enumerate(raw_roles))

        word_roles = {}
        for key, role in raw_roles.items():
            word_roles[int(key)] = GrammarRole.from_value(role) or role

        try:
            structure = SentenceStructure(data.get("structureType"))
        except ValueError:
            structure = DEFAULT_STRUCTURE

        level = data.get("level")
        return cls(
            original_sentence=data.get("originalSentence", ""),
            words=list(data.get("words") or []),
            word_roles=word_roles,
            structure_type=structure,
            skeleton_indices=[int(i) for i in data.get("skeletonIndices") or []],
            explanation=data.get("explanation") or "",
            options=list(data.get("options") or []),
            level=DifficultyLevel.parse(level) if level else None,
        )


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value
