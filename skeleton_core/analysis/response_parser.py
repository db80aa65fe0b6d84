"""
Lenient parsing of provider output into a SentenceAnalysisArtifact.

Providers do not reliably honour the requested field names or wrapping, so
the raw text goes through three steps: fence stripping, JSON parsing with
synonym remapping, then normalization into the canonical artifact.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Union

from skeleton_core.llm.interfaces.llm_provider_interface import ResponseFormatError
from skeleton_core.model.sentence_analysis import (
    DEFAULT_STRUCTURE,
    DifficultyLevel,
    GrammarRole,
    SentenceAnalysisArtifact,
    SentenceStructure,
    is_skeleton_role,
)

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("originalSentence", "words", "wordRoles")

# canonical key -> synonyms seen from providers, in precedence order
FIELD_SYNONYMS = {
    "originalSentence": ("sentence", "original_sentence"),
    "structureType": ("mainClauseStructure", "structure", "structure_type"),
    "wordRoles": ("word_roles", "roles"),
    "words": ("tokens",),
    "skeletonIndices": ("skeleton_indices", "skeleton"),
}

_SPACE_BEFORE_PUNCT = re.compile(r"\s+([.,!?;:])")
_PAREN_CODE = re.compile(r"\(([A-Za-z]+)\)")


def clean_markdown_json(text: str) -> str:
    """
    Clean markdown code blocks from response text.

    Args:
        text: Raw response text that might contain markdown

    Returns:
        Cleaned JSON text
    """
    text = text.strip()
    # Remove markdown code blocks (```json ... ```)
    text = re.sub(r"^```(?:json|JSON)?\s*\n?", "", text)
    text = re.sub(r"\n?```\s*$", "", text)
    return text.strip()


def remap_synonyms(data: Dict[str, Any]) -> Dict[str, Any]:
    """Copy synonym fields onto canonical keys that are absent or empty."""
    data = dict(data)
    for canonical, synonyms in FIELD_SYNONYMS.items():
        if data.get(canonical):
            continue
        for synonym in synonyms:
            if data.get(synonym):
                logger.debug(f"Remapped field '{synonym}' to '{canonical}'")
                data[canonical] = data[synonym]
                break
    return data


def join_words(words: List[Any]) -> str:
    """Rebuild a sentence from tokens, without space before punctuation."""
    return _SPACE_BEFORE_PUNCT.sub(r"\1", " ".join(str(w) for w in words)).strip()


def parse_ai_response(content: str, provider: Optional[str] = None) -> Dict[str, Any]:
    """
    Parse raw provider text into a dict with the canonical keys.

    Args:
        content: Raw completion text
        provider: Provider name, attached to any error

    Returns:
        Parsed data with synonyms remapped and ``originalSentence`` filled

    Raises:
        ResponseFormatError: Invalid JSON, a non-object payload, or missing
            required fields after remapping
    """
    text = clean_markdown_json(content or "")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ResponseFormatError(f"Failed to parse AI response as JSON: {e}", provider=provider) from e

    if not isinstance(data, dict):
        raise ResponseFormatError(
            f"AI response must be a JSON object, got {type(data).__name__}", provider=provider
        )

    data = remap_synonyms(data)

    if not data.get("originalSentence") and isinstance(data.get("words"), list) and data["words"]:
        data["originalSentence"] = join_words(data["words"])
        logger.info("Reconstructed originalSentence from words")

    missing = [key for key in REQUIRED_KEYS if not data.get(key)]
    if missing:
        raise ResponseFormatError(
            f"Invalid response format: missing required fields {missing}", provider=provider
        )
    if not isinstance(data["words"], list):
        raise ResponseFormatError("Invalid response format: 'words' must be a list", provider=provider)

    return data


def _normalize_roles(raw_roles: Any, word_count: int) -> Dict[int, Any]:
    if isinstance(raw_roles, list):
        items = list(enumerate(raw_roles))
    elif isinstance(raw_roles, dict):
        items = []
        for key, role in raw_roles.items():
            try:
                items.append((int(key), role))
            except (TypeError, ValueError):
                logger.warning(f"Dropping wordRoles entry with non-integer key {key!r}")
    else:
        raise ResponseFormatError(f"Invalid wordRoles type: {type(raw_roles).__name__}")

    roles = {}
    for index, role in items:
        if not 0 <= index < word_count:
            logger.warning(f"Dropping wordRoles entry for out-of-range index {index}")
            continue
        if role is None:
            continue
        roles[index] = GrammarRole.from_value(role) or str(role)
    return roles


def coerce_structure(value: Any) -> SentenceStructure:
    """
    Map a structure label onto the enumeration.

    Accepts the exact value ("主谓宾 (SVO)"), the member name ("SVO") or any
    label carrying the code in parentheses. Anything else becomes SVO.
    """
    if isinstance(value, SentenceStructure):
        return value
    if isinstance(value, str):
        text = value.strip()
        for structure in SentenceStructure:
            if text == structure.value:
                return structure
        if text.upper() in SentenceStructure.__members__:
            return SentenceStructure[text.upper()]
        match = _PAREN_CODE.search(text)
        if match and match.group(1).upper() in SentenceStructure.__members__:
            return SentenceStructure[match.group(1).upper()]

    logger.warning(f"Invalid structure type: {value!r}, using default {DEFAULT_STRUCTURE.value}")
    return DEFAULT_STRUCTURE


def _normalize_skeleton(raw: Any, roles: Dict[int, Any]) -> List[int]:
    if not isinstance(raw, list):
        return []
    indices = []
    for value in raw:
        try:
            index = int(value)
        except (TypeError, ValueError):
            continue
        if index in roles and is_skeleton_role(roles[index]) and index not in indices:
            indices.append(index)
    dropped = len(raw) - len(indices)
    if dropped:
        logger.debug(f"Dropped {dropped} skeleton indices without a skeleton role")
    return indices


def build_artifact(
    data: Dict[str, Any], level: Optional[Union[str, DifficultyLevel]] = None
) -> SentenceAnalysisArtifact:
    """
    Normalize parsed data into a SentenceAnalysisArtifact.

    Args:
        data: Output of ``parse_ai_response``
        level: Requested difficulty level, attached to the artifact

    Returns:
        A fresh artifact
    """
    words = [str(w) for w in data["words"]]
    roles = _normalize_roles(data["wordRoles"], len(words))

    if isinstance(data["wordRoles"], list) and len(data["wordRoles"]) != len(words):
        logger.warning(
            f"wordRoles length {len(data['wordRoles'])} does not match words length {len(words)}"
        )

    options = data.get("options")
    return SentenceAnalysisArtifact(
        original_sentence=str(data["originalSentence"]),
        words=words,
        word_roles=roles,
        structure_type=coerce_structure(data.get("structureType")),
        skeleton_indices=_normalize_skeleton(data.get("skeletonIndices"), roles),
        explanation=str(data.get("explanation") or ""),
        options=[str(o) for o in options] if isinstance(options, list) else [],
        level=DifficultyLevel.parse(level) if level is not None else None,
    )
