"""
Permission classes for chat API.

This module provides DRF object permissions for the chat system:
- IsChatMember: User is a member of the chat (or of the message's chat)
- IsChatAdmin: User is the admin of a group chat
- IsMessageSender: User sent the message

Views load the object and call ``check_object_permissions``; a denial is
rendered by ``core.exceptions.api_exception_handler`` with the permission's
``code`` as ``error_code``.

Design Decisions:
    - Membership is checked against ChatMembership rows
    - Group-only rules (NOT_GROUP) stay in the services
    - Permission classes are composable via DRF's AND logic
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

from chat.models import Chat, ChatMembership, Message

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


def _chat_of(obj: Chat | Message) -> Chat:
    if isinstance(obj, Message):
        return obj.chat
    return obj


class IsChatMember(permissions.BasePermission):
    """
    Allows access only to members of the chat.

    This is the base permission for every chat and message endpoint.
    """

    message = "You are not a member of this chat."
    code = "NOT_CHAT_MEMBER"

    def has_object_permission(
        self, request: Request, view: APIView, obj: Chat | Message
    ) -> bool:
        if not request.user.is_authenticated:
            return False

        return ChatMembership.objects.filter(
            chat_id=_chat_of(obj).pk,
            user=request.user,
        ).exists()


class IsChatAdmin(permissions.BasePermission):
    """
    Allows access only to the group's admin.

    Used for group management: renaming, changing the picture, adding and
    removing members. Individual chats have no admin, so this always
    denies them.
    """

    message = "Only the group admin can perform this action."
    code = "NOT_ADMIN"

    def has_object_permission(self, request: Request, view: APIView, obj: Chat) -> bool:
        if not request.user.is_authenticated:
            return False

        return obj.is_group and obj.admin_id == request.user.pk


class IsMessageSender(permissions.BasePermission):
    """Allows editing and deleting only to the message's sender."""

    message = "Only the sender can modify this message."
    code = "NOT_SENDER"

    def has_object_permission(
        self, request: Request, view: APIView, obj: Message
    ) -> bool:
        if not request.user.is_authenticated:
            return False

        return obj.sender_id == request.user.pk
