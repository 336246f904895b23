"""Assistant module - query classification, strategy recommendations and answers."""
from practice.assistant.intent import classify_query, Intent, SubCategory, QueryIntent
from practice.assistant.processor import process_query

__all__ = ["classify_query", "process_query", "Intent", "SubCategory", "QueryIntent"]
