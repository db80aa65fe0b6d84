"""
Storage interfaces for the question bank.
"""

from .question_bank_interface import QuestionBankInterface, DEFAULT_ENTRY_LEVEL

__all__ = ['QuestionBankInterface', 'DEFAULT_ENTRY_LEVEL']
