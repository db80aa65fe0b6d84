from .prompt_builder import PromptBuilder, PromptBuilderInterface
from .schema import REQUIRED_FIELDS, get_sentence_schema

__all__ = [
    "PromptBuilder",
    "PromptBuilderInterface",
    "REQUIRED_FIELDS",
    "get_sentence_schema",
]
