"""
Chat application configuration.

This app provides the chat system with:
- Individual (1:1) and group chats
- A single fixed admin per group
- Message replies, edits and soft deletion
- Seen tracking and unread counts
- Realtime relay over WebSockets
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"
