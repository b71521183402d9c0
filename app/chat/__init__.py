"""
Chat app for real-time messaging.

This app handles:
- Individual and group chats and their membership
- Message sending, history, edits and soft deletion
- Seen tracking and unread counts
- WebSocket relay of committed events

Related apps:
    - authentication: User model for members
    - contacts: Address book, independent of chats

WebSocket Support:
    Uses Django Channels for real-time communication.
    See consumers.py for WebSocket handlers.
    See routing.py for WebSocket URL patterns.

Usage:
    from chat.services import ChatService, MessageService

    result = ChatService.find_or_create_individual(user, other_user)
    chat, created = result.data

    MessageService.send(chat=chat, sender=user, content="Hello!")
"""
