"""
Sentence Skeleton core.

Multi-provider LLM orchestration for generating and analysing sentences for
sentence-diagramming practice: provider fallback, response normalisation and
rule-based repair of prepositional-phrase role assignments.
"""

__version__ = "0.1.0"
