"""
API views for chat.

This module provides REST API endpoints for the chat system:
- Chats: list, open individual, create group, detail, group management
- Messages: list, send, read, edit, delete, seen, unread count, search

URL Structure:
    /api/v1/chats/                                   GET
    /api/v1/chats/individual/                        POST
    /api/v1/chats/group/                             POST
    /api/v1/chats/{id}/                              GET, PATCH
    /api/v1/chats/{id}/members/                      POST
    /api/v1/chats/{id}/members/{user_id}/            DELETE
    /api/v1/chats/{id}/leave/                        POST
    /api/v1/chats/{id}/messages/                     GET, POST
    /api/v1/chats/{id}/messages/unread-count/        GET
    /api/v1/chats/{id}/messages/search/              GET
    /api/v1/chats/{id}/seen/                         POST
    /api/v1/messages/{id}/                           GET, PATCH, DELETE
    /api/v1/messages/{id}/seen/                      POST

Design Decisions:
    - Objects are loaded in the view and checked with object permissions
      (member, admin, sender) before any service call
    - All operations use the service layer for business logic
    - Listing messages also marks them seen for the caller
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.services import IdentityService
from chat.constants import MESSAGE_CONFIG
from chat.permissions import IsChatAdmin, IsChatMember, IsMessageSender
from chat.serializers import (
    ChatSerializer,
    GroupChatCreateSerializer,
    GroupChatUpdateSerializer,
    IndividualChatCreateSerializer,
    MemberAddSerializer,
    MessageCreateSerializer,
    MessageEditSerializer,
    MessageListResponseSerializer,
    MessageSerializer,
    SeenResponseSerializer,
    UnreadCountSerializer,
)
from chat.services import ChatService, MessageService
from core.exceptions import NotFoundError
from core.services import ServiceResult
from core.views import service_failure_response


def _query_int(request, name: str, default: int) -> int:
    try:
        return int(request.query_params.get(name, default))
    except (TypeError, ValueError):
        return default


def _user_not_found():
    return service_failure_response(
        ServiceResult.failure(
            "User with this mobile number not found",
            error_code="NOT_FOUND",
        )
    )


class ChatObjectMixin:
    """Load the chat named in the URL and run object permissions on it."""

    def get_chat(self, request, chat_id):
        chat = ChatService.get_chat(chat_id)
        if chat is None:
            raise NotFoundError("Chat not found", details={"chat_id": chat_id})
        self.check_object_permissions(request, chat)
        return chat

    def chat_response(self, request, chat, status_code=status.HTTP_200_OK):
        chat = ChatService.get_chat(chat.pk)
        return Response(
            ChatSerializer(chat, context={"request": request}).data,
            status=status_code,
        )


class MessageObjectMixin:
    """Load the message named in the URL and run object permissions on it."""

    def get_message(self, request, message_id):
        result = MessageService.get_message(message_id)
        if not result:
            raise NotFoundError("Message not found", details={"message_id": message_id})
        self.check_object_permissions(request, result.data)
        return result.data


# =============================================================================
# Chat Views
# =============================================================================


class ChatListView(APIView):
    """
    List the caller's chats, most recently active first.

    GET /api/v1/chats/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List chats",
        tags=["Chats"],
        responses={200: ChatSerializer(many=True)},
    )
    def get(self, request):
        chats = ChatService.list_for_user(request.user)
        return Response(
            ChatSerializer(chats, many=True, context={"request": request}).data
        )


class IndividualChatView(ChatObjectMixin, APIView):
    """
    Open the 1:1 chat with another user, creating it on first use.

    POST /api/v1/chats/individual/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Open individual chat",
        description="Returns 201 when the chat was created, 200 when it already existed.",
        tags=["Chats"],
        request=IndividualChatCreateSerializer,
        responses={200: ChatSerializer, 201: ChatSerializer},
    )
    def post(self, request):
        serializer = IndividualChatCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        other = IdentityService.resolve_by_mobile(serializer.validated_data["mobile"])
        if other is None:
            return _user_not_found()

        result = ChatService.find_or_create_individual(request.user, other)
        if not result:
            return service_failure_response(result)

        chat, created = result.data
        return self.chat_response(
            request,
            chat,
            status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class GroupChatCreateView(ChatObjectMixin, APIView):
    """
    Create a group chat with the caller as admin.

    POST /api/v1/chats/group/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Create group chat",
        tags=["Chats"],
        request=GroupChatCreateSerializer,
        responses={201: ChatSerializer},
    )
    def post(self, request):
        serializer = GroupChatCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        members = IdentityService.resolve_many_by_mobile(data["member_mobiles"])
        if not members:
            return service_failure_response(members)

        result = ChatService.create_group(
            admin=request.user,
            group_name=data["group_name"],
            members=members.data,
            profile_pic=data.get("profile_pic"),
        )
        if not result:
            return service_failure_response(result)

        return self.chat_response(request, result.data, status.HTTP_201_CREATED)


class ChatDetailView(ChatObjectMixin, APIView):
    """
    Retrieve a chat, or update group info (admin only).

    GET   /api/v1/chats/{id}/
    PATCH /api/v1/chats/{id}/
    """

    def get_permissions(self):
        if self.request.method == "PATCH":
            return [IsAuthenticated(), IsChatMember(), IsChatAdmin()]
        return [IsAuthenticated(), IsChatMember()]

    @extend_schema(
        summary="Get chat",
        tags=["Chats"],
        responses={200: ChatSerializer},
    )
    def get(self, request, chat_id):
        chat = self.get_chat(request, chat_id)
        return Response(ChatSerializer(chat, context={"request": request}).data)

    @extend_schema(
        summary="Update group chat",
        description="Rename the group and/or change its picture. Admin only.",
        tags=["Chats"],
        request=GroupChatUpdateSerializer,
        responses={200: ChatSerializer},
    )
    def patch(self, request, chat_id):
        chat = self.get_chat(request, chat_id)

        serializer = GroupChatUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ChatService.update_group_info(
            chat,
            group_name=serializer.validated_data.get("group_name"),
            profile_pic=serializer.validated_data.get("profile_pic"),
        )
        if not result:
            return service_failure_response(result)

        return self.chat_response(request, result.data)


class ChatMemberListView(ChatObjectMixin, APIView):
    """
    Add a member to a group (admin only).

    POST /api/v1/chats/{id}/members/
    """

    permission_classes = [IsAuthenticated, IsChatMember, IsChatAdmin]

    @extend_schema(
        summary="Add group member",
        tags=["Chats"],
        request=MemberAddSerializer,
        responses={200: ChatSerializer},
    )
    def post(self, request, chat_id):
        chat = self.get_chat(request, chat_id)

        serializer = MemberAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = IdentityService.resolve_by_mobile(serializer.validated_data["mobile"])
        if user is None:
            return _user_not_found()

        result = ChatService.add_member(chat, user)
        if not result:
            return service_failure_response(result)

        return self.chat_response(request, result.data)


class ChatMemberDetailView(ChatObjectMixin, APIView):
    """
    Remove a member from a group (admin only).

    DELETE /api/v1/chats/{id}/members/{user_id}/
    """

    permission_classes = [IsAuthenticated, IsChatMember, IsChatAdmin]

    @extend_schema(
        summary="Remove group member",
        tags=["Chats"],
        responses={200: ChatSerializer},
    )
    def delete(self, request, chat_id, user_id):
        chat = self.get_chat(request, chat_id)

        user = IdentityService.resolve_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found", details={"user_id": user_id})

        result = ChatService.remove_member(chat, user)
        if not result:
            return service_failure_response(result)

        return self.chat_response(request, result.data)


class ChatLeaveView(ChatObjectMixin, APIView):
    """
    Leave a group chat. The admin cannot leave.

    POST /api/v1/chats/{id}/leave/
    """

    permission_classes = [IsAuthenticated, IsChatMember]

    @extend_schema(
        summary="Leave group chat",
        tags=["Chats"],
        request=None,
        responses={204: None},
    )
    def post(self, request, chat_id):
        chat = self.get_chat(request, chat_id)

        result = ChatService.leave_group(chat, request.user)
        if not result:
            return service_failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Message Views
# =============================================================================


class ChatMessageListView(ChatObjectMixin, APIView):
    """
    List or send messages in a chat.

    GET  /api/v1/chats/{id}/messages/?limit=50&skip=0
    POST /api/v1/chats/{id}/messages/

    Listing marks every message from others as seen by the caller.
    """

    permission_classes = [IsAuthenticated, IsChatMember]

    @extend_schema(
        summary="List messages",
        tags=["Messages"],
        parameters=[
            OpenApiParameter(
                name="limit",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                description="Number of messages (default 50, max 100)",
                required=False,
            ),
            OpenApiParameter(
                name="skip",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                description="Number of newest messages to skip",
                required=False,
            ),
        ],
        responses={200: MessageListResponseSerializer},
    )
    def get(self, request, chat_id):
        chat = self.get_chat(request, chat_id)

        limit = max(
            1,
            min(
                MESSAGE_CONFIG.MAX_PAGE_SIZE,
                _query_int(request, "limit", MESSAGE_CONFIG.DEFAULT_PAGE_SIZE),
            ),
        )
        skip = max(0, _query_int(request, "skip", 0))

        MessageService.mark_chat_seen(chat, request.user)
        messages = MessageService.list(chat, limit=limit, skip=skip)

        return Response(
            {
                "messages": MessageSerializer(messages, many=True).data,
                "total": MessageService.visible_count(chat),
                "limit": limit,
                "skip": skip,
            }
        )

    @extend_schema(
        summary="Send message",
        tags=["Messages"],
        request=MessageCreateSerializer,
        responses={201: MessageSerializer},
    )
    def post(self, request, chat_id):
        chat = self.get_chat(request, chat_id)

        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = MessageService.send(
            chat=chat,
            sender=request.user,
            content=data["content"],
            message_type=data["message_type"],
            file_url=data.get("file_url"),
            reply_to_id=data.get("reply_to_id"),
        )
        if not result:
            return service_failure_response(result)

        return Response(
            MessageSerializer(result.data).data,
            status=status.HTTP_201_CREATED,
        )


class UnreadCountView(ChatObjectMixin, APIView):
    """
    Count unseen messages from others.

    GET /api/v1/chats/{id}/messages/unread-count/
    """

    permission_classes = [IsAuthenticated, IsChatMember]

    @extend_schema(
        summary="Unread count",
        tags=["Messages"],
        responses={200: UnreadCountSerializer},
    )
    def get(self, request, chat_id):
        chat = self.get_chat(request, chat_id)
        return Response(
            {"unread_count": MessageService.unread_count(chat, request.user)}
        )


class MessageSearchView(ChatObjectMixin, APIView):
    """
    Search messages in a chat.

    GET /api/v1/chats/{id}/messages/search/?query=hello&limit=20

    Query parameters:
        query: Search text (required, min 2 characters)
        limit: Optional - number of results (default 20, max 100)
    """

    permission_classes = [IsAuthenticated, IsChatMember]

    @extend_schema(
        summary="Search messages",
        description="Case-insensitive substring search, newest first.",
        tags=["Messages"],
        parameters=[
            OpenApiParameter(
                name="query",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                description="Search text (minimum 2 characters)",
                required=True,
            ),
            OpenApiParameter(
                name="limit",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                description="Number of results (default 20, max 100)",
                required=False,
            ),
        ],
        responses={200: MessageSerializer(many=True)},
    )
    def get(self, request, chat_id):
        chat = self.get_chat(request, chat_id)

        result = MessageService.search(
            chat,
            request.query_params.get("query", ""),
            limit=_query_int(request, "limit", MESSAGE_CONFIG.SEARCH_DEFAULT_LIMIT),
        )
        if not result:
            return service_failure_response(result)

        return Response(MessageSerializer(result.data, many=True).data)


class ChatSeenView(ChatObjectMixin, APIView):
    """
    Mark every message from others in the chat as seen.

    POST /api/v1/chats/{id}/seen/
    """

    permission_classes = [IsAuthenticated, IsChatMember]

    @extend_schema(
        summary="Mark chat seen",
        tags=["Messages"],
        request=None,
        responses={200: SeenResponseSerializer},
    )
    def post(self, request, chat_id):
        chat = self.get_chat(request, chat_id)
        marked = MessageService.mark_chat_seen(chat, request.user)
        return Response({"marked": marked})


class MessageDetailView(MessageObjectMixin, APIView):
    """
    Read, edit or delete one message.

    GET    /api/v1/messages/{id}/
    PATCH  /api/v1/messages/{id}/   (sender only)
    DELETE /api/v1/messages/{id}/   (sender only)
    """

    def get_permissions(self):
        if self.request.method in ("PATCH", "DELETE"):
            return [IsAuthenticated(), IsChatMember(), IsMessageSender()]
        return [IsAuthenticated(), IsChatMember()]

    @extend_schema(
        summary="Get message",
        tags=["Messages"],
        responses={200: MessageSerializer},
    )
    def get(self, request, message_id):
        message = self.get_message(request, message_id)
        return Response(MessageSerializer(message).data)

    @extend_schema(
        summary="Edit message",
        tags=["Messages"],
        request=MessageEditSerializer,
        responses={200: MessageSerializer},
    )
    def patch(self, request, message_id):
        message = self.get_message(request, message_id)

        serializer = MessageEditSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MessageService.edit(
            message, request.user, serializer.validated_data["content"]
        )
        if not result:
            return service_failure_response(result)

        return Response(MessageSerializer(result.data).data)

    @extend_schema(
        summary="Delete message",
        description="Soft delete. The message stays in the log but is hidden.",
        tags=["Messages"],
        responses={204: None},
    )
    def delete(self, request, message_id):
        message = self.get_message(request, message_id)

        result = MessageService.delete(message, request.user)
        if not result:
            return service_failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


class MessageSeenView(MessageObjectMixin, APIView):
    """
    Mark one message as seen.

    POST /api/v1/messages/{id}/seen/
    """

    permission_classes = [IsAuthenticated, IsChatMember]

    @extend_schema(
        summary="Mark message seen",
        tags=["Messages"],
        request=None,
        responses={200: SeenResponseSerializer},
    )
    def post(self, request, message_id):
        message = self.get_message(request, message_id)
        changed = MessageService.mark_seen(message, request.user)
        return Response({"marked": int(changed)})
