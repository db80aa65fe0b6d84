"""
DeepSeek LLM provider module.

This module provides the DeepSeek provider implementation
for the sentence analysis core's LLM provider interface.
"""

from .deepseek_provider import DeepSeekLLMProvider

__all__ = ['DeepSeekLLMProvider']
