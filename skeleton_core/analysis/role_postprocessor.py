"""
Rule-based repair and validation of prepositional-phrase roles.

A prepositional phrase here is a heuristic token run: it starts at a
preposition and extends until sentence-ending punctuation, another
preposition, a skeleton-role token, a clause-role token, or a comma past the
phrase's second token. Once resolved, every non-skeleton token of a phrase
carries the same role, either attribute or adverbial.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from skeleton_core.model.sentence_analysis import (
    GrammarRole,
    SentenceAnalysisArtifact,
    is_clause_role,
    is_skeleton_role,
)

logger = logging.getLogger(__name__)

PREPOSITIONS = frozenset(
    {
        "to", "from", "in", "on", "at", "by", "for", "with", "about", "against",
        "into", "onto", "upon", "within", "without", "through", "during", "before",
        "after", "above", "below", "under", "over", "across", "around", "behind",
        "beside", "between", "among", "beyond", "near", "off", "out", "up", "down",
        "along", "toward", "towards", "via", "per", "except", "including", "concerning",
    }
)

SENTENCE_END = frozenset({".", "!", "?"})

ADVERBIAL = "adverbial"
ATTRIBUTE = "attribute"

Phrase = Tuple[int, int]


@dataclass
class PhraseIssue:
    """A phrase whose tokens still mix attribute and adverbial roles."""
    phrase_range: Phrase
    expected_role: GrammarRole
    actual_roles: Dict[int, str]
    message: str
    type: str = "inconsistent_prepositional_phrase"


@dataclass
class ValidationReport:
    is_valid: bool = True
    issues: List[PhraseIssue] = field(default_factory=list)


def is_preposition(word: str) -> bool:
    return word.lower() in PREPOSITIONS


def _is_modifier_role(role: Optional[str]) -> bool:
    """A role that may be rewritten: set, not a connective, not a clause role."""
    return bool(role) and GrammarRole.from_value(role) != GrammarRole.CONNECTIVE and not is_clause_role(role)


def find_prepositional_phrases(words: Sequence[str], roles: Mapping[int, str]) -> List[Phrase]:
    """
    Detect prepositional phrases.

    Args:
        words: Tokens of the sentence
        roles: Token index to role label

    Returns:
        Inclusive ``(start, end)`` index pairs, each spanning at least two tokens
    """
    phrases = []

    for i, word in enumerate(words):
        if is_clause_role(roles.get(i)):
            continue
        if not is_preposition(word):
            continue

        end = i + 1
        while end < len(words):
            next_word = words[end]
            next_role = roles.get(end)

            if next_word in SENTENCE_END:
                break
            if is_preposition(next_word):
                break
            if is_skeleton_role(next_role) or is_clause_role(next_role):
                break
            if next_word == "," and end > i + 2:
                break
            end += 1

        if end > i + 1:
            phrases.append((i, end - 1))

    return phrases


def _first_with_role(skeleton_indices: Sequence[int], roles: Mapping[int, str], role: GrammarRole) -> Optional[int]:
    for index in skeleton_indices:
        if GrammarRole.from_value(roles.get(index)) == role:
            return index
    return None


def determine_phrase_function(
    start: int,
    end: int,
    words: Sequence[str],
    roles: Mapping[int, str],
    skeleton_indices: Sequence[int],
) -> str:
    """
    Decide whether a phrase modifies a noun or a verb, from its position.

    Subject, predicate and object are the first skeleton indices carrying
    those roles.

    Returns:
        ``"adverbial"`` or ``"attribute"``
    """
    predicate = _first_with_role(skeleton_indices, roles, GrammarRole.PREDICATE)
    obj = _first_with_role(skeleton_indices, roles, GrammarRole.OBJECT)
    subject = _first_with_role(skeleton_indices, roles, GrammarRole.SUBJECT)

    if predicate is not None and start > predicate:
        if obj is not None and start > obj:
            return ADVERBIAL
        if obj is None or end < obj:
            return ADVERBIAL

    # Adjacent to the subject, so no comma can sit between them
    if subject is not None and start == subject + 1:
        return ATTRIBUTE

    if obj is not None and start == obj + 1:
        return ATTRIBUTE

    if predicate is not None and start > predicate:
        return ADVERBIAL

    return ADVERBIAL


def _target_role(function: str) -> GrammarRole:
    return GrammarRole.ADVERBIAL if function == ADVERBIAL else GrammarRole.ATTRIBUTE


def _modifier_roles(roles: Mapping[int, str], start: int, end: int) -> Dict[int, str]:
    return {i: roles[i] for i in range(start, end + 1) if _is_modifier_role(roles.get(i))}


def post_process_roles(artifact: SentenceAnalysisArtifact) -> SentenceAnalysisArtifact:
    """
    Make every prepositional phrase carry one consistent modifier role.

    A phrase is rewritten when its modifier roles mix attribute and
    adverbial, or contain neither. Phrases touching a clause or containing a
    skeleton token are left alone. The input artifact is not modified.

    Returns:
        A new artifact with repaired roles
    """
    result = artifact.copy()
    roles = result.word_roles
    phrases = find_prepositional_phrases(artifact.words, artifact.word_roles)
    fixed = False

    for start, end in phrases:
        span = range(start, end + 1)
        if any(is_clause_role(roles.get(i)) for i in span):
            continue

        target = _target_role(
            determine_phrase_function(start, end, result.words, roles, result.skeleton_indices)
        )

        current = {GrammarRole.from_value(r) or r for r in _modifier_roles(roles, start, end).values()}
        has_adverbial = GrammarRole.ADVERBIAL in current
        has_attribute = GrammarRole.ATTRIBUTE in current
        mixed = has_adverbial and has_attribute
        neither = not has_adverbial and not has_attribute and len(current) > 0

        if not (mixed or neither):
            continue
        if any(is_skeleton_role(roles.get(i)) for i in span):
            continue

        for i in span:
            role = roles.get(i)
            if _is_modifier_role(role) and not is_skeleton_role(role) and role != target:
                roles[i] = target
                fixed = True

    if fixed:
        logger.debug("Fixed prepositional phrase inconsistencies")

    return result


def validate_prepositional_phrases(artifact: SentenceAnalysisArtifact) -> ValidationReport:
    """
    Report phrases whose modifier roles still mix attribute and adverbial.

    Read-only; the artifact is not modified.
    """
    issues = []
    roles = artifact.word_roles

    for start, end in find_prepositional_phrases(artifact.words, roles):
        phrase_roles = _modifier_roles(roles, start, end)
        present = {GrammarRole.from_value(r) for r in phrase_roles.values()}
        if GrammarRole.ADVERBIAL not in present or GrammarRole.ATTRIBUTE not in present:
            continue

        expected = _target_role(
            determine_phrase_function(start, end, artifact.words, roles, artifact.skeleton_indices)
        )
        phrase_text = " ".join(artifact.words[start:end + 1])
        issues.append(
            PhraseIssue(
                phrase_range=(start, end),
                expected_role=expected,
                actual_roles={i: str(getattr(r, "value", r)) for i, r in phrase_roles.items()},
                message=(
                    f'Prepositional phrase "{phrase_text}" has mixed roles. '
                    f'Expected all words to be "{expected.value}".'
                ),
            )
        )

    return ValidationReport(is_valid=not issues, issues=issues)
