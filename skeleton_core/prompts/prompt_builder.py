"""
Default prompt builder for sentence generation and analysis.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union

from skeleton_core.model.sentence_analysis import DifficultyLevel
from skeleton_core.prompts import templates
from skeleton_core.prompts.schema import get_sentence_schema


class PromptBuilderInterface(ABC):
    """What the sentence analysis service needs from a prompt builder."""

    @abstractmethod
    def build_prompt(
        self, level: Union[str, DifficultyLevel], previous_sentence: Optional[str] = None
    ) -> str:
        pass

    @abstractmethod
    def build_analysis_prompt(self, sentence: str, level: Union[str, DifficultyLevel]) -> str:
        pass

    @abstractmethod
    def get_schema(self) -> Dict[str, Any]:
        pass

    @abstractmethod
    def get_system_prompt(self) -> str:
        pass


class PromptBuilder(PromptBuilderInterface):
    """Builds level-specific prompts from the bundled templates."""

    def build_prompt(
        self, level: Union[str, DifficultyLevel], previous_sentence: Optional[str] = None
    ) -> str:
        """
        Build the generation prompt for a difficulty level.

        Args:
            level: Difficulty level (enum, value or name)
            previous_sentence: Sentence the model should not repeat

        Returns:
            Prompt text
        """
        level = DifficultyLevel.parse(level)
        parts = [templates.LEVEL_INSTRUCTIONS[level].strip()]
        if previous_sentence:
            parts.append(templates.AVOID_PREVIOUS.format(previous=previous_sentence.strip()))
        parts.append(templates.ANALYSIS_RULES.strip())
        return "\n\n".join(parts)

    def build_analysis_prompt(self, sentence: str, level: Union[str, DifficultyLevel]) -> str:
        level = DifficultyLevel.parse(level)
        intro = templates.ANALYZE_SENTENCE.format(sentence=sentence.strip(), level=level.value).strip()
        return f"{intro}\n\n{templates.ANALYSIS_RULES.strip()}"

    def get_schema(self) -> Dict[str, Any]:
        return get_sentence_schema()

    def get_system_prompt(self) -> str:
        return templates.SYSTEM_PROMPT
