"""
Anthropic Claude LLM provider module.

This module provides the Anthropic Claude provider implementation
for the sentence analysis core's LLM provider interface.
"""

from .anthropic_provider import AnthropicLLMProvider

__all__ = ['AnthropicLLMProvider']
