"""
Exceptions raised by chat_context.

Expected conditions (empty text, empty snapshot, no match, over-full budget)
never raise; these are only for invalid arguments supplied by callers.
"""


class ChatContextError(Exception):
    """Base class for chat_context errors."""


class InvalidSigilError(ChatContextError, ValueError):
    """Raised when a mention sigil is not a single non-word character."""
