"""
Sensitive-data flagging.

- detector.py: Pattern-match classifier applied to prompts and responses
  before a QA log is stored (sets QALog.has_sensitive_data)
"""

from ai_proxy.pii.detector import contains_sensitive_data, find_sensitive_categories

__all__ = [
    "contains_sensitive_data",
    "find_sensitive_categories",
]
