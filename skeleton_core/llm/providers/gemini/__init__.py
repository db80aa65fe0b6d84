"""
Gemini LLM provider module.

This module provides the Gemini provider implementation
for the sentence analysis core's LLM provider interface.
"""

from .gemini_provider import GeminiLLMProvider

__all__ = ['GeminiLLMProvider']
