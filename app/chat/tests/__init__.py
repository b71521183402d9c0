"""
Tests for chat app.

This package contains test modules for:
- test_models.py: Chat, Message model tests
- test_services.py: ChatService, MessageService, RelayService tests
- test_consumers.py: WebSocket consumer and middleware tests
- test_views.py: REST API endpoint tests

Usage:
    pytest chat/tests/
    pytest chat/tests/test_consumers.py
"""
