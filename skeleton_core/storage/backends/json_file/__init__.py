from .json_file_question_bank import JsonFileQuestionBank

__all__ = ['JsonFileQuestionBank']
