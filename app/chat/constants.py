"""
Constants and configuration for chat module features.

This module centralizes configuration values for:
- Message operations (content limits, paging, search)
- Group chats (name limits, members per request)
- The realtime relay (channel groups, event names, close codes)

Import example:
    from chat.constants import MESSAGE_CONFIG, CHAT_CONFIG
"""

from typing import Final


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    # Content limits (after trimming)
    MIN_CONTENT_LENGTH: Final[int] = 1
    MAX_CONTENT_LENGTH: Final[int] = 1000

    # Listing
    DEFAULT_PAGE_SIZE: Final[int] = 50
    MAX_PAGE_SIZE: Final[int] = 100

    # Search settings
    SEARCH_MIN_QUERY_LENGTH: Final[int] = 2
    SEARCH_DEFAULT_LIMIT: Final[int] = 20
    SEARCH_MAX_RESULTS: Final[int] = 100

    # Shown instead of the content of a deleted message in previews
    DELETED_PLACEHOLDER: Final[str] = "[Message deleted]"


# =============================================================================
# Chat Configuration
# =============================================================================


class CHAT_CONFIG:
    """Configuration for individual and group chats."""

    GROUP_NAME_MIN_LENGTH: Final[int] = 2
    GROUP_NAME_MAX_LENGTH: Final[int] = 50

    # member_mobiles accepted by the create-group endpoint
    MIN_MEMBERS_PER_REQUEST: Final[int] = 1
    MAX_MEMBERS_PER_REQUEST: Final[int] = 50


# =============================================================================
# Relay Configuration
# =============================================================================


class RELAY_CONFIG:
    """Channel layer groups, event names and WebSocket close codes."""

    GROUP_PREFIX: Final[str] = "chat_"

    EVENT_MESSAGE_CREATED: Final[str] = "message.created"
    EVENT_MESSAGE_EDITED: Final[str] = "message.edited"
    EVENT_MESSAGE_DELETED: Final[str] = "message.deleted"
    EVENT_CHAT_SEEN: Final[str] = "chat.seen"

    CLOSE_UNAUTHENTICATED: Final[int] = 4001
    CLOSE_NOT_MEMBER: Final[int] = 4003
    CLOSE_CHAT_NOT_FOUND: Final[int] = 4004
