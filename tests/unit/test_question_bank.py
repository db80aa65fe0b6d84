"""
Unit tests for the JSON file question bank.
"""

import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from skeleton_core.analysis.fallback_data import get_fallback_artifact
from skeleton_core.model.sentence_analysis import DifficultyLevel, GrammarRole
from skeleton_core.storage.backends.json_file.json_file_question_bank import JsonFileQuestionBank


@pytest.fixture
def bank_path(tmp_path):
    return tmp_path / "questions" / "bank.json"


@pytest.fixture
def bank(bank_path):
    return JsonFileQuestionBank(bank_path)


class TestJsonFileQuestionBank:

    def test_creates_empty_file(self, bank, bank_path):
        assert bank_path.exists()
        assert json.loads(bank_path.read_text(encoding="utf-8")) == []
        assert bank.size() == 0

    def test_save_and_size(self, bank):
        assert bank.save(get_fallback_artifact("Basic")) == 1
        assert bank.save(get_fallback_artifact("Advanced")) == 2

        assert bank.size() == 2
        assert bank.size("Basic") == 1
        assert bank.size(DifficultyLevel.INTERMEDIATE) == 0

    def test_save_dedupes_on_sentence(self, bank):
        artifact = get_fallback_artifact("Basic")
        bank.save(artifact)
        assert bank.save(artifact.copy()) == 1

    def test_entries_are_wire_shape(self, bank, bank_path):
        bank.save(get_fallback_artifact("Basic"))

        entry = json.loads(bank_path.read_text(encoding="utf-8"))[0]
        assert entry["originalSentence"] == "My grandmother bakes delicious cookies."
        assert entry["wordRoles"]["1"] == "主语"
        assert entry["level"] == "Basic"

    def test_get_random_round_trips(self, bank):
        bank.save(get_fallback_artifact("Intermediate"))

        artifact = bank.get_random("Intermediate")

        assert artifact == get_fallback_artifact("Intermediate")
        assert artifact.word_roles[2] == GrammarRole.SUBJECT

    def test_get_random_excludes_sentence(self, bank):
        basic = get_fallback_artifact("Basic")
        bank.save(basic)

        assert bank.get_random("Basic", exclude_sentence=basic.original_sentence) is None

    def test_get_random_empty(self, bank):
        assert bank.get_random() is None

    def test_entries_without_level_count_as_advanced(self, bank_path):
        bank_path.parent.mkdir(parents=True)
        entry = get_fallback_artifact("Basic").to_dict()
        del entry["level"]
        bank_path.write_text(json.dumps([entry]), encoding="utf-8")

        bank = JsonFileQuestionBank(bank_path)

        assert bank.size("Advanced") == 1
        assert bank.size("Basic") == 0

    def test_corrupt_file_raises(self, bank_path):
        bank_path.parent.mkdir(parents=True)
        bank_path.write_text('{"not": "a list"}', encoding="utf-8")

        with pytest.raises(ValueError):
            JsonFileQuestionBank(bank_path).size()

    def test_compact_output(self, bank_path):
        bank = JsonFileQuestionBank(bank_path, pretty_print=False)
        bank.save(get_fallback_artifact("Basic"))
        assert "\n" not in bank_path.read_text(encoding="utf-8")

    def test_concurrent_saves_keep_every_entry(self, bank):
        def save(i):
            artifact = get_fallback_artifact("Basic")
            artifact.original_sentence = f"Sentence number {i}."
            return bank.save(artifact)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(save, range(20)))

        assert bank.size() == 20
