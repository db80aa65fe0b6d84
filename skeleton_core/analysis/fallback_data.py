"""
Static sentence analyses served when every provider has failed.
"""

from typing import Union

from skeleton_core.model.sentence_analysis import (
    DifficultyLevel,
    GrammarRole as R,
    SentenceAnalysisArtifact,
    SentenceStructure,
)

_BASIC = SentenceAnalysisArtifact(
    original_sentence="My grandmother bakes delicious cookies.",
    words=["My", "grandmother", "bakes", "delicious", "cookies", "."],
    word_roles={
        0: R.ATTRIBUTE,
        1: R.SUBJECT,
        2: R.PREDICATE,
        3: R.ATTRIBUTE,
        4: R.OBJECT,
        5: R.CONNECTIVE,
    },
    structure_type=SentenceStructure.SVO,
    skeleton_indices=[1, 2, 4],
    explanation="句子主干是 grandmother bakes cookies（主谓宾）。My 修饰主语 grandmother，delicious 修饰宾语 cookies，都是定语。",
    options=[R.SUBJECT.value, R.PREDICATE.value, R.OBJECT.value, R.ATTRIBUTE.value,
             R.CONNECTIVE.value, R.ADVERBIAL.value, R.PREDICATIVE.value],
)

_INTERMEDIATE = SentenceAnalysisArtifact(
    original_sentence="The old man in the park walked slowly towards the bench.",
    words=["The", "old", "man", "in", "the", "park", "walked", "slowly", "towards", "the", "bench", "."],
    word_roles={
        0: R.ATTRIBUTE,
        1: R.ATTRIBUTE,
        2: R.SUBJECT,
        3: R.ATTRIBUTE,
        4: R.ATTRIBUTE,
        5: R.ATTRIBUTE,
        6: R.PREDICATE,
        7: R.ADVERBIAL,
        8: R.ADVERBIAL,
        9: R.ADVERBIAL,
        10: R.ADVERBIAL,
        11: R.CONNECTIVE,
    },
    structure_type=SentenceStructure.SV,
    skeleton_indices=[2, 6],
    explanation="句子主干是 man walked（主谓）。The old 和介词短语 in the park 修饰主语 man，是定语；slowly 和 towards the bench 修饰谓语 walked，是状语。",
    options=[R.SUBJECT.value, R.PREDICATE.value, R.ATTRIBUTE.value, R.ADVERBIAL.value,
             R.CONNECTIVE.value, R.OBJECT.value, R.COMPLEMENT.value],
)

_ADVANCED = SentenceAnalysisArtifact(
    original_sentence="The girl who lives next door plays the piano every evening.",
    words=["The", "girl", "who", "lives", "next", "door", "plays", "the", "piano", "every", "evening", "."],
    word_roles={
        0: R.ATTRIBUTE,
        1: R.SUBJECT,
        2: R.ATTRIBUTIVE_CLAUSE,
        3: R.ATTRIBUTIVE_CLAUSE,
        4: R.ATTRIBUTIVE_CLAUSE,
        5: R.ATTRIBUTIVE_CLAUSE,
        6: R.PREDICATE,
        7: R.ATTRIBUTE,
        8: R.OBJECT,
        9: R.ADVERBIAL,
        10: R.ADVERBIAL,
        11: R.CONNECTIVE,
    },
    structure_type=SentenceStructure.SVO,
    skeleton_indices=[1, 6, 8],
    explanation="句子主干是 girl plays piano（主谓宾）。who lives next door 是修饰 girl 的定语从句；every evening 是时间状语。",
    options=[R.SUBJECT.value, R.PREDICATE.value, R.OBJECT.value, R.ATTRIBUTE.value,
             R.ADVERBIAL.value, R.ATTRIBUTIVE_CLAUSE.value, R.CONNECTIVE.value, R.ADVERBIAL_CLAUSE.value],
)

FALLBACK_ARTIFACTS = {
    DifficultyLevel.BASIC: _BASIC,
    DifficultyLevel.INTERMEDIATE: _INTERMEDIATE,
    DifficultyLevel.ADVANCED: _ADVANCED,
}


def get_fallback_artifact(level: Union[str, DifficultyLevel]) -> SentenceAnalysisArtifact:
    """Return a fresh copy of the static artifact for ``level``."""
    level = DifficultyLevel.parse(level)
    artifact = FALLBACK_ARTIFACTS[level].copy()
    artifact.level = level
    return artifact
