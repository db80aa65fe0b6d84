"""
Concrete LLM provider implementations.

Each subpackage wraps one backend behind the LLMProviderInterface.
"""
