"""
Chat system models.

This module defines the data models for the chat system supporting:
- Individual (1:1) chats between exactly two users
- Group chats with a single admin

Models:
    Chat: Container for messages between members
    ChatMembership: One row per (chat, user), ordered by join time
    DirectChatPair: Helper for enforcing uniqueness of individual chats
    Message: Individual message within a chat
    MessageSeen: One row per (message, viewer) in a message's seen set

Design Decisions:
    - Membership is stored as rows, not an array, so concurrent adds and
      removes are single-row writes guarded by a unique constraint
    - Individual chats are unique per unordered user pair
    - The admin is fixed at creation and can never leave or be removed
    - Chats are never hard-deleted
    - Soft delete keeps message content; API responses hide it
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from chat.constants import CHAT_CONFIG, MESSAGE_CONFIG
from core.model_mixins import SoftDeleteMixin
from core.models import BaseModel


class MessageType(models.TextChoices):
    """
    Type of message content.

    TEXT: Plain text
    IMAGE: Image at file_url, content is the caption
    FILE: Any other attachment at file_url
    """

    TEXT = "text", "Text"
    IMAGE = "image", "Image"
    FILE = "file", "File"


class Chat(BaseModel):
    """
    A conversation between two users (individual) or several (group).

    Fields:
        is_group: False for individual chats
        group_name: Group display name (groups only, 2-50 chars)
        admin: Group admin (groups only, never changes)
        profile_pic: Optional group picture URL
        members: Users in the chat, through ChatMembership
        last_message: Most recent message, for chat list previews

    Note:
        ``updated_at`` is bumped explicitly by every operation that changes
        membership, group info or the last-message pointer, so ordering chats
        by it gives "most recently active first".
    """

    is_group = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether this is a group chat",
    )
    group_name = models.CharField(
        max_length=CHAT_CONFIG.GROUP_NAME_MAX_LENGTH,
        blank=True,
        default="",
        help_text="Group display name (empty for individual chats)",
    )
    admin = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="administered_chats",
        help_text="Group admin (null for individual chats)",
    )
    profile_pic = models.URLField(
        max_length=500,
        blank=True,
        default="",
        help_text="Optional group picture URL",
    )
    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="ChatMembership",
        related_name="chats",
        help_text="Users in this chat",
    )
    last_message = models.ForeignKey(
        "chat.Message",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        help_text="Most recent message in this chat",
    )

    class Meta:
        ordering = ["-updated_at", "-id"]
        indexes = [
            models.Index(fields=["-updated_at"], name="chat_updated_idx"),
        ]

    def __str__(self) -> str:
        if self.is_group:
            return f"Group {self.group_name} ({self.pk})"
        return f"Chat {self.pk}"

    @property
    def is_individual(self) -> bool:
        return not self.is_group

    def ordered_members(self) -> list:
        """Members in join order."""
        return [
            membership.user
            for membership in self.memberships.select_related("user").order_by(
                "joined_at", "id"
            )
        ]


class ChatMembership(models.Model):
    """
    Membership of a user in a chat.

    Constraints:
        - UniqueConstraint(chat, user): a user is a member at most once
    """

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name="memberships",
        help_text="Chat this membership belongs to",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="chat_memberships",
        help_text="Member user",
    )
    joined_at = models.DateTimeField(
        default=timezone.now,
        help_text="When the user joined the chat",
    )

    class Meta:
        db_table = "chat_membership"
        ordering = ["joined_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["chat", "user"],
                name="unique_chat_membership",
            ),
        ]

    def __str__(self) -> str:
        return f"User {self.user_id} in chat {self.chat_id}"


class DirectChatPair(models.Model):
    """
    Enforces uniqueness of individual chats between two users.

    Stores the user pair in canonical order (lower user id first) so that,
    regardless of who initiates, there is only one individual chat per pair.

    Constraints:
        - UniqueConstraint(user_lower, user_higher): One chat per pair
        - CheckConstraint(user_lower_id < user_higher_id): Canonical order
    """

    chat = models.OneToOneField(
        Chat,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="direct_pair",
        help_text="The individual chat this pair represents",
    )
    user_lower = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="User with lower ID in this pair",
    )
    user_higher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="User with higher ID in this pair",
    )

    class Meta:
        db_table = "chat_direct_pair"
        constraints = [
            models.UniqueConstraint(
                fields=["user_lower", "user_higher"],
                name="unique_direct_chat_pair",
            ),
            models.CheckConstraint(
                condition=Q(user_lower_id__lt=F("user_higher_id")),
                name="direct_pair_lower_less_than_higher",
            ),
        ]

    def __str__(self) -> str:
        return f"Pair {self.user_lower_id}/{self.user_higher_id} -> chat {self.chat_id}"


class Message(SoftDeleteMixin, BaseModel):
    """
    A message in a chat.

    Fields:
        chat: Chat the message belongs to
        sender: Author
        receiver: The other member, for individual chats only
        content: Trimmed text, 1-1000 characters (caption for attachments)
        message_type: text, image or file
        file_url: Attachment URL, required for image and file messages
        reply_to: Message in the same chat this one replies to
        seen_by: Users who have seen the message (never the sender)
        edited_at: Set on every edit
        deleted_by: Who soft deleted the message

    Note:
        Soft-deleted messages keep their content. Use ``display_content``
        wherever a deleted message may still be shown.
    """

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Chat this message belongs to",
    )
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
        help_text="User who sent this message",
    )
    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="received_messages",
        help_text="Other member of an individual chat (null for groups)",
    )
    content = models.CharField(
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH,
        help_text="Message text",
    )
    message_type = models.CharField(
        max_length=10,
        choices=MessageType.choices,
        default=MessageType.TEXT,
        help_text="Kind of message content",
    )
    file_url = models.URLField(
        max_length=500,
        null=True,
        blank=True,
        help_text="Attachment URL for image and file messages",
    )
    reply_to = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="replies",
        help_text="Message this one replies to (same chat)",
    )
    seen_by = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="MessageSeen",
        related_name="seen_messages",
        help_text="Users who have seen this message",
    )
    edited_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the content was last edited",
    )
    deleted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        help_text="User who deleted this message",
    )

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(
                fields=["chat", "-created_at"],
                name="chat_msg_chat_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"Message {self.pk} in chat {self.chat_id}"

    @property
    def is_edited(self) -> bool:
        return self.edited_at is not None

    @property
    def display_content(self) -> str:
        if self.is_deleted:
            return MESSAGE_CONFIG.DELETED_PLACEHOLDER
        return self.content


class MessageSeen(models.Model):
    """
    A viewer in a message's seen set.

    Constraints:
        - UniqueConstraint(message, user): marking seen is idempotent
    """

    message = models.ForeignKey(
        Message,
        on_delete=models.CASCADE,
        related_name="seen_records",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
    )
    seen_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "chat_message_seen"
        constraints = [
            models.UniqueConstraint(
                fields=["message", "user"],
                name="unique_message_seen",
            ),
        ]

    def __str__(self) -> str:
        return f"Message {self.message_id} seen by {self.user_id}"
