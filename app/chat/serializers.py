"""
Serializers for chat API.

This module provides serializers for the chat system:
- Message serializers (read, preview, create, edit)
- Chat serializers (list/detail, create, update, membership)

Serializer Hierarchy:
    MessagePreviewSerializer: Minimal message for last-message and reply previews
    MessageSerializer: Full message with sender, reply preview and seen set
    MessageCreateSerializer: Send new message
    MessageEditSerializer: Replace message content

    ChatSerializer: Chat with members, admin, last message and unread count
    IndividualChatCreateSerializer: Open a 1:1 chat by mobile
    GroupChatCreateSerializer: Create a group from member mobiles
    GroupChatUpdateSerializer: Rename / change picture
    MemberAddSerializer: Add a group member by mobile

Design Decisions:
    - Read and write serializers are separate for clarity
    - Soft-deleted message content is replaced with a placeholder
    - Content and group name bounds are enforced again by the services
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.models import mobile_validator
from authentication.serializers import UserSerializer
from chat.constants import CHAT_CONFIG, MESSAGE_CONFIG
from chat.models import Chat, Message, MessageType


# =============================================================================
# Message Serializers
# =============================================================================


class MessagePreviewSerializer(serializers.ModelSerializer):
    """
    Minimal message serializer for chat list and reply previews.

    Handles soft-deleted message content replacement.
    """

    sender_id = serializers.IntegerField(read_only=True)
    sender_name = serializers.SerializerMethodField(
        help_text="Display name of the message sender"
    )
    content = serializers.CharField(
        source="display_content",
        read_only=True,
        help_text="Message content (replaced if deleted)",
    )

    class Meta:
        model = Message
        fields = [
            "id",
            "sender_id",
            "sender_name",
            "content",
            "message_type",
            "is_deleted",
            "created_at",
        ]
        read_only_fields = fields

    def get_sender_name(self, obj: Message) -> str:
        return obj.sender.name


class MessageSerializer(serializers.ModelSerializer):
    """
    Full message serializer for message lists.

    Includes sender details, the replied-to message preview and the ids
    of users who have seen the message.
    """

    chat_id = serializers.IntegerField(read_only=True)
    sender = UserSerializer(read_only=True)
    receiver_id = serializers.IntegerField(read_only=True, allow_null=True)
    content = serializers.CharField(
        source="display_content",
        read_only=True,
        help_text="Message content (replaced if deleted)",
    )
    reply_to = MessagePreviewSerializer(read_only=True, allow_null=True)
    seen_by = serializers.SerializerMethodField(
        help_text="IDs of users who have seen this message"
    )
    is_edited = serializers.BooleanField(read_only=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "chat_id",
            "sender",
            "receiver_id",
            "content",
            "message_type",
            "file_url",
            "reply_to",
            "seen_by",
            "is_edited",
            "edited_at",
            "is_deleted",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_seen_by(self, obj: Message) -> list[int]:
        return [record.user_id for record in obj.seen_records.all()]


class MessageCreateSerializer(serializers.Serializer):
    """
    Serializer for sending messages.

    Supports:
    - Text messages
    - Image and file messages (file_url required)
    - Replies (reply_to_id in the same chat)
    """

    content = serializers.CharField(
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH,
        help_text="Message content (max 1,000 characters)",
    )
    message_type = serializers.ChoiceField(
        choices=MessageType.choices,
        default=MessageType.TEXT,
    )
    file_url = serializers.URLField(
        max_length=500,
        required=False,
        allow_null=True,
        help_text="Attachment URL (required for image and file)",
    )
    reply_to_id = serializers.IntegerField(
        required=False,
        allow_null=True,
        help_text="ID of the message being replied to (optional)",
    )


class MessageEditSerializer(serializers.Serializer):
    content = serializers.CharField(max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH)


class UnreadCountSerializer(serializers.Serializer):
    unread_count = serializers.IntegerField()


class SeenResponseSerializer(serializers.Serializer):
    marked = serializers.IntegerField()


class MessageListResponseSerializer(serializers.Serializer):
    messages = MessageSerializer(many=True)
    total = serializers.IntegerField()
    limit = serializers.IntegerField()
    skip = serializers.IntegerField()


# =============================================================================
# Chat Serializers
# =============================================================================


class ChatSerializer(serializers.ModelSerializer):
    """
    Serializer for chat list and detail views.

    Includes computed fields:
    - members: Public profiles in join order
    - last_message: Preview of the most recent message
    - unread_count: Messages from others the current user has not seen
    """

    admin = UserSerializer(read_only=True, allow_null=True)
    members = serializers.SerializerMethodField(help_text="Members in join order")
    member_count = serializers.SerializerMethodField()
    last_message = MessagePreviewSerializer(read_only=True, allow_null=True)
    unread_count = serializers.SerializerMethodField(
        help_text="Number of unseen messages from others"
    )

    class Meta:
        model = Chat
        fields = [
            "id",
            "is_group",
            "group_name",
            "profile_pic",
            "admin",
            "members",
            "member_count",
            "last_message",
            "unread_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_members(self, obj: Chat) -> list[dict]:
        memberships = obj.memberships.all()
        return UserSerializer([m.user for m in memberships], many=True).data

    def get_member_count(self, obj: Chat) -> int:
        return len(obj.memberships.all())

    def get_unread_count(self, obj: Chat) -> int:
        from chat.services import MessageService

        request = self.context.get("request")
        if not request or not request.user.is_authenticated:
            return 0
        return MessageService.unread_count(obj, request.user)


class IndividualChatCreateSerializer(serializers.Serializer):
    mobile = serializers.CharField(validators=[mobile_validator])


class GroupChatCreateSerializer(serializers.Serializer):
    """
    Serializer for creating group chats.

    The creator becomes the admin and does not need to appear in
    member_mobiles.
    """

    group_name = serializers.CharField(
        min_length=CHAT_CONFIG.GROUP_NAME_MIN_LENGTH,
        max_length=CHAT_CONFIG.GROUP_NAME_MAX_LENGTH,
    )
    member_mobiles = serializers.ListField(
        child=serializers.CharField(validators=[mobile_validator]),
        min_length=CHAT_CONFIG.MIN_MEMBERS_PER_REQUEST,
        max_length=CHAT_CONFIG.MAX_MEMBERS_PER_REQUEST,
    )
    profile_pic = serializers.URLField(max_length=500, required=False, allow_blank=True)


class GroupChatUpdateSerializer(serializers.Serializer):
    group_name = serializers.CharField(
        min_length=CHAT_CONFIG.GROUP_NAME_MIN_LENGTH,
        max_length=CHAT_CONFIG.GROUP_NAME_MAX_LENGTH,
        required=False,
    )
    profile_pic = serializers.URLField(max_length=500, required=False, allow_blank=True)


class MemberAddSerializer(serializers.Serializer):
    mobile = serializers.CharField(validators=[mobile_validator])
