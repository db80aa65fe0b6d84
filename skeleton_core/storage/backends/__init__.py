"""
Question bank backend implementations.
"""
