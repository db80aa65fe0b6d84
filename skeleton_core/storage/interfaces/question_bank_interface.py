"""
Abstract interface for question bank backends.

A question bank is a keyed-append store of generated sentence analyses,
deduplicated on the original sentence.
"""

from abc import ABC, abstractmethod
from typing import Optional, Union

from skeleton_core.model.sentence_analysis import DifficultyLevel, SentenceAnalysisArtifact

# Entries saved before levels were recorded count as Advanced
DEFAULT_ENTRY_LEVEL = DifficultyLevel.ADVANCED


class QuestionBankInterface(ABC):
    """
    Abstract base class for question bank backends.

    Methods are synchronous; async callers run them in an executor.
    """

    @abstractmethod
    def save(self, artifact: SentenceAnalysisArtifact) -> int:
        """
        Store an artifact unless its sentence is already present.

        Returns:
            Number of entries in the bank after the call
        """
        pass

    @abstractmethod
    def get_random(
        self,
        level: Optional[Union[str, DifficultyLevel]] = None,
        exclude_sentence: Optional[str] = None,
    ) -> Optional[SentenceAnalysisArtifact]:
        """
        Pick a random entry.

        Args:
            level: Only consider entries of this level
            exclude_sentence: Skip the entry with this sentence

        Returns:
            An artifact, or None if nothing matches
        """
        pass

    @abstractmethod
    def size(self, level: Optional[Union[str, DifficultyLevel]] = None) -> int:
        pass
