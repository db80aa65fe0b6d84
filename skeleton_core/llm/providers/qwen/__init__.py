"""
Qwen LLM provider module.

This module provides the Qwen provider implementation
for the sentence analysis core's LLM provider interface.
"""

from .qwen_provider import QwenLLMProvider

__all__ = ['QwenLLMProvider']
