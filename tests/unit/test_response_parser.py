"""
Unit tests for lenient parsing of provider responses.
"""

import json

import pytest

from skeleton_core.analysis.response_parser import (
    build_artifact,
    clean_markdown_json,
    coerce_structure,
    join_words,
    parse_ai_response,
    remap_synonyms,
)
from skeleton_core.llm.interfaces.llm_provider_interface import AIErrorType, ResponseFormatError
from skeleton_core.model.sentence_analysis import (
    DifficultyLevel,
    GrammarRole,
    SentenceStructure,
)


class TestCleanMarkdownJson:

    def test_json_fence(self):
        assert clean_markdown_json('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence(self):
        assert clean_markdown_json('```\n{"a": 1}\n```  ') == '{"a": 1}'

    def test_plain_text_untouched(self):
        assert clean_markdown_json('  {"a": 1}  ') == '{"a": 1}'


class TestParseAIResponse:

    def test_valid_payload(self, sample_json):
        data = parse_ai_response(sample_json)
        assert data["originalSentence"] == "He put the book on the table."

    def test_sentence_synonym(self):
        content = json.dumps({"sentence": "X", "words": ["X"], "wordRoles": ["主语"]})
        assert parse_ai_response(content)["originalSentence"] == "X"

    def test_canonical_key_wins_over_synonym(self):
        content = json.dumps({
            "originalSentence": "Canonical.", "sentence": "Synonym.",
            "words": ["Canonical", "."], "wordRoles": ["主语", "连接词/其他"],
        })
        assert parse_ai_response(content)["originalSentence"] == "Canonical."

    def test_empty_canonical_falls_through_to_synonym(self):
        content = json.dumps({
            "originalSentence": "", "sentence": "X y.",
            "words": ["a", "b"], "wordRoles": ["主语", "谓语"],
        })
        assert parse_ai_response(content)["originalSentence"] == "X y."

    def test_empty_list_falls_through_to_synonym(self):
        remapped = remap_synonyms({"skeletonIndices": [], "skeleton": [0, 1]})
        assert remapped["skeletonIndices"] == [0, 1]

    def test_reconstructs_sentence_from_words(self):
        content = json.dumps({"words": ["Birds", "sing", ",", "loudly", "."], "wordRoles": ["主语"]})
        assert parse_ai_response(content)["originalSentence"] == "Birds sing, loudly."

    def test_fenced_payload(self, sample_json):
        data = parse_ai_response(f"```json\n{sample_json}\n```")
        assert data["words"][0] == "He"

    def test_invalid_json(self):
        with pytest.raises(ResponseFormatError) as exc_info:
            parse_ai_response("Sure! Here is the analysis:", provider="qwen")

        error = exc_info.value
        assert error.error_type == AIErrorType.INVALID_RESPONSE
        assert error.retryable is True
        assert error.provider == "qwen"

    def test_non_object(self):
        with pytest.raises(ResponseFormatError):
            parse_ai_response("[1, 2, 3]")

    def test_missing_word_roles(self):
        with pytest.raises(ResponseFormatError, match="wordRoles"):
            parse_ai_response(json.dumps({"originalSentence": "Hi.", "words": ["Hi", "."]}))

    def test_words_must_be_list(self):
        with pytest.raises(ResponseFormatError):
            parse_ai_response(json.dumps({"originalSentence": "Hi.", "words": "Hi .", "wordRoles": ["主语"]}))

    def test_remap_synonyms_does_not_mutate(self):
        raw = {"mainClauseStructure": "主谓 (SV)"}
        remapped = remap_synonyms(raw)
        assert remapped["structureType"] == "主谓 (SV)"
        assert "structureType" not in raw


class TestCoerceStructure:

    @pytest.mark.parametrize("value,expected", [
        ("主谓宾 (SVO)", SentenceStructure.SVO),
        ("SVOC", SentenceStructure.SVOC),
        ("sp", SentenceStructure.SP),
        ("主谓双宾结构 (SVOO)", SentenceStructure.SVOO),
    ])
    def test_recognized(self, value, expected):
        assert coerce_structure(value) == expected

    @pytest.mark.parametrize("value", [None, "", "passive voice", 3])
    def test_unrecognized_defaults_to_svo(self, value):
        assert coerce_structure(value) == SentenceStructure.SVO


class TestBuildArtifact:

    def test_list_roles(self, sample_payload):
        artifact = build_artifact(sample_payload, "Intermediate")

        assert artifact.level == DifficultyLevel.INTERMEDIATE
        assert artifact.word_roles[0] == GrammarRole.SUBJECT
        assert artifact.structure_type == SentenceStructure.SVO
        assert artifact.skeleton_indices == [0, 1, 3]
        assert len(artifact.options) == 6

    def test_dict_roles_with_string_keys(self):
        artifact = build_artifact({
            "originalSentence": "Dogs bark.",
            "words": ["Dogs", "bark", "."],
            "wordRoles": {"0": "主语", "1": "谓语", "7": "宾语", "x": "定语"},
        })

        assert artifact.word_roles == {0: GrammarRole.SUBJECT, 1: GrammarRole.PREDICATE}

    def test_unknown_role_label_kept_as_string(self):
        artifact = build_artifact({
            "originalSentence": "Oh.", "words": ["Oh", "."], "wordRoles": ["感叹词", None],
        })
        assert artifact.word_roles == {0: "感叹词"}

    def test_skeleton_indices_filtered(self):
        artifact = build_artifact({
            "originalSentence": "Dogs bark loudly.",
            "words": ["Dogs", "bark", "loudly", "."],
            "wordRoles": ["主语", "谓语", "状语", "连接词/其他"],
            "skeletonIndices": [0, 1, 1, 2, 9, "x"],
        })
        assert artifact.skeleton_indices == [0, 1]

    def test_missing_optional_fields(self):
        artifact = build_artifact({"originalSentence": "Hi.", "words": ["Hi", "."], "wordRoles": ["谓语"]})

        assert artifact.explanation == ""
        assert artifact.options == []
        assert artifact.skeleton_indices == []
        assert artifact.level is None

    def test_invalid_roles_type(self):
        with pytest.raises(ResponseFormatError):
            build_artifact({"originalSentence": "Hi.", "words": ["Hi"], "wordRoles": "主语"})


def test_join_words():
    assert join_words(["Wait", "!", "Really", "?"]) == "Wait! Really?"
