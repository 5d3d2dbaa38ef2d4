"""
JSON Schemas for provider payloads.

Schemas are deliberately permissive about values (enum coercion and clamping
happen when results are built) and strict about shape: a payload that passes
can always be turned into a result model.
"""

_STRING_LIST = {"type": "array", "items": {"type": "string"}}

ANALYSIS_SCHEMA: dict = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "email_analysis",
    "type": "object",
    "required": ["category", "priority", "sentiment"],
    "properties": {
        "category": {"type": "string"},
        "priority": {"type": "string"},
        "sentiment": {"type": "string"},
        "urgency_score": {"type": "number"},
        "key_topics": _STRING_LIST,
        "action_items": _STRING_LIST,
        "summary": {"type": "string"},
        "requires_human_review": {"type": "boolean"},
        "detected_language": {"type": "string"},
        "confidence": {"type": "number"},
        "is_safe": {"type": "boolean"},
        "threats": _STRING_LIST,
        "risk_level": {"type": "string"},
    },
}

ACTION_ITEMS_SCHEMA: dict = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "action_items",
    "type": "object",
    "required": ["action_items"],
    "properties": {
        "action_items": {
            "type": "array",
            "items": {
                "anyOf": [
                    {"type": "string"},
                    {
                        "type": "object",
                        "required": ["task"],
                        "properties": {
                            "task": {"type": "string"},
                            "deadline": {"type": ["string", "null"]},
                            "priority": {"type": ["string", "null"]},
                            "assignee": {"type": ["string", "null"]},
                        },
                    },
                ]
            },
        },
        "has_deadlines": {"type": "boolean"},
        "urgent_items": {
            "type": "array",
            "items": {"anyOf": [{"type": "string"}, {"type": "object"}]},
        },
    },
}

THREAD_SUMMARY_SCHEMA: dict = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "thread_summary",
    "type": "object",
    "required": ["summary"],
    "properties": {
        "summary": {"type": "string", "minLength": 1},
        "key_points": _STRING_LIST,
        "participants": _STRING_LIST,
        "next_actions": _STRING_LIST,
        "sentiment_progression": {"type": "string"},
    },
}
