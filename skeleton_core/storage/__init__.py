"""
Question bank storage for generated sentence analyses.
"""

from .interfaces.question_bank_interface import QuestionBankInterface
from .backends.json_file.json_file_question_bank import JsonFileQuestionBank

__all__ = ['QuestionBankInterface', 'JsonFileQuestionBank']
