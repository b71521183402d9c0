"""
URL configuration for chat API.

URL Structure:
    Chats:
        /chats/                                  GET
        /chats/individual/                       POST
        /chats/group/                            POST
        /chats/{id}/                             GET, PATCH
        /chats/{id}/members/                     POST
        /chats/{id}/members/{user_id}/           DELETE
        /chats/{id}/leave/                       POST
        /chats/{id}/seen/                        POST

    Messages:
        /chats/{id}/messages/                    GET, POST
        /chats/{id}/messages/unread-count/       GET
        /chats/{id}/messages/search/             GET
        /messages/{id}/                          GET, PATCH, DELETE
        /messages/{id}/seen/                     POST

All URLs are prefixed with /api/v1/ in the main URL configuration.
"""

from django.urls import path

from chat.views import (
    ChatDetailView,
    ChatLeaveView,
    ChatListView,
    ChatMemberDetailView,
    ChatMemberListView,
    ChatMessageListView,
    ChatSeenView,
    GroupChatCreateView,
    IndividualChatView,
    MessageDetailView,
    MessageSearchView,
    MessageSeenView,
    UnreadCountView,
)

app_name = "chat"

urlpatterns = [
    # Chats
    path("chats/", ChatListView.as_view(), name="chat-list"),
    path("chats/individual/", IndividualChatView.as_view(), name="chat-individual"),
    path("chats/group/", GroupChatCreateView.as_view(), name="chat-group"),
    path("chats/<int:chat_id>/", ChatDetailView.as_view(), name="chat-detail"),
    path(
        "chats/<int:chat_id>/members/",
        ChatMemberListView.as_view(),
        name="chat-members",
    ),
    path(
        "chats/<int:chat_id>/members/<int:user_id>/",
        ChatMemberDetailView.as_view(),
        name="chat-member-detail",
    ),
    path("chats/<int:chat_id>/leave/", ChatLeaveView.as_view(), name="chat-leave"),
    path("chats/<int:chat_id>/seen/", ChatSeenView.as_view(), name="chat-seen"),
    # Messages
    path(
        "chats/<int:chat_id>/messages/",
        ChatMessageListView.as_view(),
        name="chat-messages",
    ),
    path(
        "chats/<int:chat_id>/messages/unread-count/",
        UnreadCountView.as_view(),
        name="chat-unread-count",
    ),
    path(
        "chats/<int:chat_id>/messages/search/",
        MessageSearchView.as_view(),
        name="chat-message-search",
    ),
    path(
        "messages/<int:message_id>/",
        MessageDetailView.as_view(),
        name="message-detail",
    ),
    path(
        "messages/<int:message_id>/seen/",
        MessageSeenView.as_view(),
        name="message-seen",
    ),
]
