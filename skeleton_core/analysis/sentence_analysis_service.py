"""
Sentence analysis service.

Orchestration entry point: builds the prompt for a difficulty level or a
user-supplied sentence, runs it through the LLM manager, and turns the raw
completion into a repaired, validated SentenceAnalysisArtifact.
"""

import asyncio
import logging
from typing import List, Optional, Tuple, Union

from skeleton_core.analysis.fallback_data import get_fallback_artifact
from skeleton_core.analysis.response_parser import build_artifact, parse_ai_response
from skeleton_core.analysis.role_postprocessor import post_process_roles, validate_prepositional_phrases
from skeleton_core.config.config_manager import GenerationConfig
from skeleton_core.llm.interfaces.llm_provider_interface import (
    AllProvidersFailedError,
    GenerateOptions,
    GenerateResult,
    ResponseFormatError,
)
from skeleton_core.llm.manager import LLMManager
from skeleton_core.model.sentence_analysis import DifficultyLevel, SentenceAnalysisArtifact
from skeleton_core.monitoring.structured_logger import LoggingContext, OperationLogger, get_logger
from skeleton_core.prompts.prompt_builder import PromptBuilder, PromptBuilderInterface
from skeleton_core.storage.interfaces.question_bank_interface import QuestionBankInterface

logger = logging.getLogger(__name__)


class SentenceAnalysisService:
    """
    Turns difficulty-level requests and user sentences into artifacts.

    Level-based generation never fails on provider exhaustion: it degrades to
    a static artifact for the level. Analysing a user's sentence has no safe
    substitute, so there the failure propagates.
    """

    def __init__(
        self,
        llm_manager: LLMManager,
        prompt_builder: Optional[PromptBuilderInterface] = None,
        question_bank: Optional[QuestionBankInterface] = None,
        generation_config: Optional[GenerationConfig] = None,
    ):
        """
        Args:
            llm_manager: Manager holding the registered providers
            prompt_builder: Prompt source; defaults to the bundled templates
            question_bank: Where successful generations are saved, if any
            generation_config: Temperature, token and timeout policy
        """
        self.llm_manager = llm_manager
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.question_bank = question_bank
        self.generation_config = generation_config or GenerationConfig()
        self.structured_logger = get_logger(__name__, component="sentence_analysis")

    def _build_options(self) -> GenerateOptions:
        return GenerateOptions(
            temperature=self.generation_config.temperature,
            max_tokens=self.generation_config.max_tokens,
            response_format="json",
            schema=self.prompt_builder.get_schema(),
            system_prompt=self.prompt_builder.get_system_prompt(),
            timeout=self.generation_config.timeout,
        )

    @staticmethod
    def _response_handler(level: DifficultyLevel):
        def handle(result: GenerateResult) -> Tuple[SentenceAnalysisArtifact, str]:
            try:
                data = parse_ai_response(result.content, provider=result.provider)
                return build_artifact(data, level), result.provider
            except ResponseFormatError as e:
                if e.provider is None:
                    e.provider = result.provider
                raise

        return handle

    def _finalize(self, artifact: SentenceAnalysisArtifact) -> SentenceAnalysisArtifact:
        """Run the role post-processor and validator, logging what they find."""
        processed = post_process_roles(artifact)

        changes = []
        if processed.word_roles != artifact.word_roles:
            changed = sorted(
                i for i in processed.word_roles if processed.word_roles[i] != artifact.word_roles.get(i)
            )
            changes.append(f"word roles at {changed}")
        if processed.skeleton_indices != artifact.skeleton_indices:
            changes.append("skeleton indices")
        if processed.structure_type != artifact.structure_type:
            changes.append("structure type")
        if changes:
            logger.info(f"Post-processing changed {', '.join(changes)}")

        report = validate_prepositional_phrases(processed)
        if not report.is_valid:
            for issue in report.issues:
                logger.warning(f"Validation issue: {issue.message}")

        return processed

    async def _save_to_bank(self, artifact: SentenceAnalysisArtifact):
        if self.question_bank is None:
            return
        loop = asyncio.get_running_loop()
        try:
            size = await loop.run_in_executor(None, self.question_bank.save, artifact)
        except Exception as e:
            logger.warning(f"Failed to save question to bank: {e}")
            return
        logger.debug(f"Question bank size: {size}")

    async def generate_sentence_analysis(
        self,
        level: Union[str, DifficultyLevel],
        preferred_provider: Optional[str] = None,
        enable_fallback: bool = True,
        fallback_providers: Optional[List[str]] = None,
        previous_sentence: Optional[str] = None,
    ) -> SentenceAnalysisArtifact:
        """
        Generate and analyse a new sentence for a difficulty level.

        Args:
            level: Difficulty level
            preferred_provider: Provider to try first
            enable_fallback: Whether to retry and fall back across providers
            fallback_providers: Restrict fallback to these providers
            previous_sentence: Sentence the model should not repeat

        Returns:
            The analysed artifact, or the static artifact for the level if
            every provider failed

        Raises:
            NoAvailableProvidersError: No provider is configured
            AIError: A non-retryable provider failure
        """
        level = DifficultyLevel.parse(level)
        prompt = self.prompt_builder.build_prompt(level, previous_sentence=previous_sentence)

        with LoggingContext():
            operation = OperationLogger(self.structured_logger, "generate_sentence_analysis")
            operation.start(difficulty=level.value, preferred_provider=preferred_provider)
            try:
                artifact, provider = await self.llm_manager.generate_with_fallback(
                    prompt,
                    self._build_options(),
                    preferred_provider=preferred_provider,
                    enable_fallback=enable_fallback,
                    fallback_providers=fallback_providers,
                    response_handler=self._response_handler(level),
                )
            except AllProvidersFailedError as e:
                operation.error(e, fallback_used=True)
                logger.warning("All providers failed, using fallback data")
                return get_fallback_artifact(level)
            except Exception as e:
                operation.error(e)
                raise

            artifact = self._finalize(artifact)
            operation.success(provider=provider, sentence=artifact.original_sentence)

        await self._save_to_bank(artifact)
        return artifact

    async def analyze_custom_sentence(
        self,
        sentence: str,
        level: Union[str, DifficultyLevel] = DifficultyLevel.ADVANCED,
        preferred_provider: Optional[str] = None,
        enable_fallback: bool = True,
        fallback_providers: Optional[List[str]] = None,
    ) -> SentenceAnalysisArtifact:
        """
        Analyse a sentence supplied by the user.

        Raises:
            ValueError: Empty sentence
            AllProvidersFailedError: Every provider failed
        """
        if not sentence or not sentence.strip():
            raise ValueError("Sentence must not be empty")

        level = DifficultyLevel.parse(level)
        prompt = self.prompt_builder.build_analysis_prompt(sentence, level)

        with LoggingContext():
            operation = OperationLogger(self.structured_logger, "analyze_custom_sentence")
            operation.start(difficulty=level.value, preferred_provider=preferred_provider)
            try:
                artifact, provider = await self.llm_manager.generate_with_fallback(
                    prompt,
                    self._build_options(),
                    preferred_provider=preferred_provider,
                    enable_fallback=enable_fallback,
                    fallback_providers=fallback_providers,
                    response_handler=self._response_handler(level),
                )
            except Exception as e:
                operation.error(e)
                raise

            artifact = self._finalize(artifact)
            operation.success(provider=provider)

        return artifact
