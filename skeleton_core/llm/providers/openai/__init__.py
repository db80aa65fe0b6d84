"""
OpenAI LLM provider module.

This module provides the OpenAI provider implementation
for the sentence analysis core's LLM provider interface.
"""

from .openai_provider import OpenAILLMProvider

__all__ = ['OpenAILLMProvider']
