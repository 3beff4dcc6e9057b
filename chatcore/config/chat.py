"""Chat behavior settings: content bounds, history window, fixed texts."""

import os


# Message content bounds (characters)
CHAT_CONTENT_MIN_LEN = 1
CHAT_CONTENT_MAX_LEN = int(os.getenv("CHAT_CONTENT_MAX_LEN", "4000"))

VISITOR_NAME_MAX_LEN = int(os.getenv("VISITOR_NAME_MAX_LEN", "50"))

# Most recent messages handed to the response generator
CHAT_HISTORY_WINDOW = int(os.getenv("CHAT_HISTORY_WINDOW", "20"))

# Admin replies are stored as ASSISTANT messages carrying this marker
ADMIN_ATTRIBUTION_PREFIX = "[Marin]: "

WELCOME_MESSAGE = (
    "Hi there! Welcome to Marin's Room. I'm an AI assistant here to help you. "
    "How can I assist you today?"
)

# Admin session listing
SESSION_PAGE_SIZE_DEFAULT = 20
SESSION_PAGE_SIZE_MAX = 100


__all__ = [
    "CHAT_CONTENT_MIN_LEN",
    "CHAT_CONTENT_MAX_LEN",
    "VISITOR_NAME_MAX_LEN",
    "CHAT_HISTORY_WINDOW",
    "ADMIN_ATTRIBUTION_PREFIX",
    "WELCOME_MESSAGE",
    "SESSION_PAGE_SIZE_DEFAULT",
    "SESSION_PAGE_SIZE_MAX",
]
