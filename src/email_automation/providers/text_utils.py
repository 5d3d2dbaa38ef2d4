"""
Text processing utilities for the provider layer.

Provides sentence-boundary truncation so message bodies sent to a provider
stay within the configured limit without cutting a sentence in half.
"""

import re


_SENTENCE_END = re.compile(r'[.!?](?:\s|$)')


def truncate_at_sentence_boundary(text: str, max_chars: int) -> str:
    """
    Truncate text at the nearest sentence boundary before max_chars.

    Looks for sentence-ending punctuation (. ! ?) followed by whitespace or end.

    Args:
        text: Text to truncate
        max_chars: Maximum character count

    Returns:
        Truncated text ending at a sentence boundary, or cut at a word
        boundary (or hard-cut) if no sentence boundary is found within the limit.

    Examples:
        >>> truncate_at_sentence_boundary("Hello. World. Test.", 15)
        'Hello. World.'
    """
    if len(text) <= max_chars:
        return text

    segment = text[:max_chars]
    matches = list(_SENTENCE_END.finditer(segment))

    if matches:
        cutoff = matches[-1].end()
        # Keep the punctuation, drop the trailing whitespace
        if segment[cutoff - 1:cutoff].isspace():
            cutoff -= 1
        return text[:cutoff]

    # Prefer a word boundary when it keeps at least 80% of the budget
    last_space = segment.rfind(' ')
    if last_space > max_chars * 0.8:
        return text[:last_space]

    return text[:max_chars]


def format_thread(messages, max_chars: int) -> str:
    """
    Render thread messages as numbered blocks for a summary prompt.

    Each body is truncated so the whole thread stays roughly within max_chars.

    Args:
        messages: Sequence of ThreadMessage
        max_chars: Character budget for all bodies together

    Returns:
        Thread text, oldest message first
    """
    if not messages:
        return ""

    per_message = max(200, max_chars // len(messages))
    blocks = []
    for index, message in enumerate(messages, start=1):
        header = f"Message {index}"
        if message.sender:
            header += f" from {message.sender}"
        if message.date:
            header += f" ({message.date.isoformat()})"
        if message.subject:
            header += f"\nSubject: {message.subject}"
        body = truncate_at_sentence_boundary(message.text.strip(), per_message)
        blocks.append(f"{header}\n{body}")
    return "\n\n---\n\n".join(blocks)
