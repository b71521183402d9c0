"""
Chat system service layer.

This module provides the business logic for the chat system, encapsulating
all operations on chats, memberships and messages.

Services:
    ChatService: Chat lifecycle and membership (individual and group)
    MessageService: Message operations (send, list, seen, edit, delete, search)
    RelayService: Best-effort fan-out of committed events to WebSocket clients

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure()
    - Database errors propagate to the caller
    - Authorization (admin, sender, member) is checked by views; services
      re-check the data invariants they own
    - Relay publication happens after commit and never affects persistence

Usage:
    from chat.services import ChatService, MessageService

    # Find or create an individual chat
    result = ChatService.find_or_create_individual(user1, user2)
    if result.success:
        chat, created = result.data

    # Create a group chat
    result = ChatService.create_group(
        admin=user,
        group_name="Project Team",
        members=[user2, user3],
    )

    # Send a message
    result = MessageService.send(chat=chat, sender=user, content="Hello!")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import IntegrityError, transaction
from django.db.models import Prefetch
from django.utils import timezone

from chat.constants import CHAT_CONFIG, MESSAGE_CONFIG, RELAY_CONFIG
from chat.models import (
    Chat,
    ChatMembership,
    DirectChatPair,
    Message,
    MessageSeen,
    MessageType,
)
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from typing import Any

    from django.db.models import QuerySet

    from authentication.models import User


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _validate_content(content: str | None) -> ServiceResult[str]:
    content = content.strip() if isinstance(content, str) else ""
    if len(content) < MESSAGE_CONFIG.MIN_CONTENT_LENGTH:
        return ServiceResult.failure(
            "Message content cannot be empty",
            error_code="EMPTY_CONTENT",
        )
    if len(content) > MESSAGE_CONFIG.MAX_CONTENT_LENGTH:
        return ServiceResult.failure(
            f"Message content cannot exceed "
            f"{MESSAGE_CONFIG.MAX_CONTENT_LENGTH} characters",
            error_code="CONTENT_TOO_LONG",
        )
    return ServiceResult.success(content)


def _validate_group_name(group_name: str | None) -> ServiceResult[str]:
    group_name = (group_name or "").strip()
    if not (
        CHAT_CONFIG.GROUP_NAME_MIN_LENGTH
        <= len(group_name)
        <= CHAT_CONFIG.GROUP_NAME_MAX_LENGTH
    ):
        return ServiceResult.failure(
            f"Group name must be between {CHAT_CONFIG.GROUP_NAME_MIN_LENGTH} "
            f"and {CHAT_CONFIG.GROUP_NAME_MAX_LENGTH} characters",
            error_code="INVALID_GROUP_NAME",
        )
    return ServiceResult.success(group_name)


# =============================================================================
# ChatService
# =============================================================================


class ChatService(BaseService):
    """
    Service for chat lifecycle and membership.

    Methods:
        find_or_create_individual: One chat per unordered user pair
        create_group: New group with an admin and at least one other member
        is_member / is_admin: Membership predicates
        add_member / remove_member / leave_group: Group membership changes
        update_group_info: Rename or change the group picture
        update_last_message: Move the last-message pointer
        list_for_user: A user's chats, most recently active first
        member_count: Number of members in a chat
    """

    @classmethod
    def get_chat(cls, chat_id) -> Chat | None:
        """Return the chat with this id (members prefetched), or None."""
        try:
            return cls._with_related(Chat.objects.filter(pk=chat_id)).first()
        except (TypeError, ValueError):
            return None

    @classmethod
    def _with_related(cls, queryset: QuerySet[Chat]) -> QuerySet[Chat]:
        return queryset.select_related(
            "admin", "last_message", "last_message__sender"
        ).prefetch_related(
            Prefetch(
                "memberships",
                queryset=ChatMembership.objects.select_related("user").order_by(
                    "joined_at", "id"
                ),
            )
        )

    @classmethod
    def find_or_create_individual(
        cls,
        user_a: User,
        user_b: User,
    ) -> ServiceResult[tuple[Chat, bool]]:
        """
        Return the individual chat between two users, creating it if needed.

        The lookup is order independent. A concurrent creation of the same
        pair loses on the DirectChatPair unique constraint and resolves to
        the chat that won.

        Args:
            user_a: Requesting user (first member in join order on creation)
            user_b: The other user

        Returns:
            ServiceResult with (chat, created)

        Error codes:
            SELF_REFERENCE: Both users are the same
        """
        if user_a.pk == user_b.pk:
            return ServiceResult.failure(
                "Cannot create a chat with yourself",
                error_code="SELF_REFERENCE",
            )

        user_lower, user_higher = (
            (user_a, user_b) if user_a.pk < user_b.pk else (user_b, user_a)
        )

        existing = cls._get_direct_chat(user_lower, user_higher)
        if existing is not None:
            return ServiceResult.success((existing, False))

        try:
            with cls.atomic():
                chat = Chat.objects.create(is_group=False)
                DirectChatPair.objects.create(
                    chat=chat,
                    user_lower=user_lower,
                    user_higher=user_higher,
                )
                joined_at = timezone.now()
                ChatMembership.objects.bulk_create(
                    [
                        ChatMembership(chat=chat, user=user_a, joined_at=joined_at),
                        ChatMembership(chat=chat, user=user_b, joined_at=joined_at),
                    ]
                )
        except IntegrityError:
            existing = cls._get_direct_chat(user_lower, user_higher)
            if existing is None:
                raise
            cls.get_logger().info(
                f"Lost individual chat creation race for users "
                f"{user_lower.pk}/{user_higher.pk}, using chat {existing.pk}"
            )
            return ServiceResult.success((existing, False))

        cls.get_logger().info(
            f"Created individual chat {chat.pk} "
            f"between users {user_lower.pk} and {user_higher.pk}"
        )
        return ServiceResult.success((chat, True))

    @classmethod
    def _get_direct_chat(cls, user_lower: User, user_higher: User) -> Chat | None:
        pair = (
            DirectChatPair.objects.select_related("chat")
            .filter(user_lower=user_lower, user_higher=user_higher)
            .first()
        )
        return pair.chat if pair else None

    @classmethod
    def create_group(
        cls,
        admin: User,
        group_name: str,
        members: list[User],
        profile_pic: str | None = None,
    ) -> ServiceResult[Chat]:
        """
        Create a group chat.

        Membership is {admin} plus members, deduplicated. The admin does not
        have to appear in ``members`` and is never counted twice.

        Args:
            admin: Creating user, becomes the group's permanent admin
            group_name: 2-50 characters after trimming
            members: Other users to add
            profile_pic: Optional group picture URL

        Returns:
            ServiceResult with the new Chat

        Error codes:
            INVALID_GROUP_NAME: Name outside 2-50 characters
            EMPTY_GROUP: No member besides the admin
        """
        name_result = _validate_group_name(group_name)
        if not name_result:
            return name_result

        others = []
        seen_ids = {admin.pk}
        for member in members:
            if member.pk not in seen_ids:
                seen_ids.add(member.pk)
                others.append(member)

        if not others:
            return ServiceResult.failure(
                "A group needs at least one member besides the admin",
                error_code="EMPTY_GROUP",
            )

        with cls.atomic():
            chat = Chat.objects.create(
                is_group=True,
                group_name=name_result.data,
                admin=admin,
                profile_pic=profile_pic or "",
            )
            joined_at = timezone.now()
            ChatMembership.objects.bulk_create(
                [
                    ChatMembership(chat=chat, user=user, joined_at=joined_at)
                    for user in [admin, *others]
                ]
            )

        cls.get_logger().info(
            f"User {admin.pk} created group chat {chat.pk} "
            f"with {len(others) + 1} members"
        )
        return ServiceResult.success(chat)

    @classmethod
    def is_member(cls, chat: Chat, user) -> bool:
        if user is None or not getattr(user, "is_authenticated", False):
            return False
        return ChatMembership.objects.filter(chat=chat, user=user).exists()

    @classmethod
    def is_admin(cls, chat: Chat, user) -> bool:
        if user is None or not getattr(user, "is_authenticated", False):
            return False
        return chat.is_group and chat.admin_id == user.pk

    @classmethod
    def add_member(cls, chat: Chat, user: User) -> ServiceResult[Chat]:
        """
        Add a user to a group.

        The caller has verified that the requester is the group's admin.
        The chat row is locked for the duration of the write and the
        membership unique constraint decides ALREADY_MEMBER.

        Error codes:
            NOT_GROUP: Individual chats have fixed membership
            ALREADY_MEMBER: The user is already in the group
        """
        if not chat.is_group:
            return ServiceResult.failure(
                "Members can only be added to group chats",
                error_code="NOT_GROUP",
            )

        try:
            with cls.atomic():
                Chat.objects.select_for_update().filter(pk=chat.pk).first()
                ChatMembership.objects.create(chat=chat, user=user)
                cls._touch(chat)
        except IntegrityError:
            return ServiceResult.failure(
                "User is already a member of this group",
                error_code="ALREADY_MEMBER",
            )

        cls.get_logger().info(f"Added user {user.pk} to group chat {chat.pk}")
        return ServiceResult.success(chat)

    @classmethod
    def remove_member(cls, chat: Chat, user: User) -> ServiceResult[Chat]:
        """
        Remove a user from a group.

        Error codes:
            NOT_GROUP: Individual chats have fixed membership
            CANNOT_REMOVE_ADMIN: The admin can never leave the group
            NOT_MEMBER: The user is not in the group
        """
        if not chat.is_group:
            return ServiceResult.failure(
                "Members can only be removed from group chats",
                error_code="NOT_GROUP",
            )

        if chat.admin_id == user.pk:
            return ServiceResult.failure(
                "The group admin cannot be removed",
                error_code="CANNOT_REMOVE_ADMIN",
            )

        with cls.atomic():
            Chat.objects.select_for_update().filter(pk=chat.pk).first()
            deleted, _ = ChatMembership.objects.filter(chat=chat, user=user).delete()
            if deleted:
                cls._touch(chat)

        if not deleted:
            return ServiceResult.failure(
                "User is not a member of this group",
                error_code="NOT_MEMBER",
            )

        cls.get_logger().info(f"Removed user {user.pk} from group chat {chat.pk}")
        return ServiceResult.success(chat)

    @classmethod
    def leave_group(cls, chat: Chat, user: User) -> ServiceResult[Chat]:
        """
        Leave a group chat.

        Same rules as remove_member: the admin cannot leave.
        """
        return cls.remove_member(chat, user)

    @classmethod
    def update_group_info(
        cls,
        chat: Chat,
        group_name: str | None = None,
        profile_pic: str | None = None,
    ) -> ServiceResult[Chat]:
        """
        Rename a group and/or change its picture. Omitted fields are unchanged.

        Error codes:
            NOT_GROUP: Individual chats have no group info
            INVALID_GROUP_NAME: Name outside 2-50 characters
        """
        if not chat.is_group:
            return ServiceResult.failure(
                "Only group chats have a name and picture",
                error_code="NOT_GROUP",
            )

        update_fields = []
        if group_name is not None:
            name_result = _validate_group_name(group_name)
            if not name_result:
                return name_result
            chat.group_name = name_result.data
            update_fields.append("group_name")
        if profile_pic is not None:
            chat.profile_pic = profile_pic
            update_fields.append("profile_pic")

        if update_fields:
            chat.save(update_fields=[*update_fields, "updated_at"])
            cls.get_logger().info(f"Updated group chat {chat.pk}: {update_fields}")

        return ServiceResult.success(chat)

    @classmethod
    def update_last_message(cls, chat: Chat, message: Message) -> ServiceResult[Chat]:
        """
        Point the chat at its newest message and bump ``updated_at``.

        Written as a single UPDATE so that it can share the transaction
        that inserted the message. Last writer wins.

        Error codes:
            INVALID_MESSAGE: The message belongs to another chat
        """
        if message.chat_id != chat.pk:
            return ServiceResult.failure(
                "Message does not belong to this chat",
                error_code="INVALID_MESSAGE",
            )

        now = timezone.now()
        Chat.objects.filter(pk=chat.pk).update(last_message=message, updated_at=now)
        chat.last_message = message
        chat.updated_at = now
        return ServiceResult.success(chat)

    @classmethod
    def list_for_user(cls, user: User) -> QuerySet[Chat]:
        """
        Chats the user is a member of, most recently active first.

        Members (in join order), admin and last message are prefetched.
        """
        return cls._with_related(Chat.objects.filter(memberships__user=user)).order_by(
            "-updated_at", "-id"
        )

    @classmethod
    def member_count(cls, chat: Chat) -> int:
        return chat.memberships.count()

    @classmethod
    def _touch(cls, chat: Chat) -> None:
        now = timezone.now()
        Chat.objects.filter(pk=chat.pk).update(updated_at=now)
        chat.updated_at = now


# =============================================================================
# MessageService
# =============================================================================


class MessageService(BaseService):
    """
    Service for message operations.

    Methods:
        send: Persist a message, move the last-message pointer, relay it
        list: Visible messages, newest first, offset/limit
        mark_chat_seen / mark_seen: Add the viewer to seen sets
        edit / delete: Sender-only changes, refused once deleted
        unread_count: Messages from others the user has not seen
        search: Case-insensitive content search
        get_message: Lookup by id
    """

    @classmethod
    def send(
        cls,
        chat: Chat,
        sender: User,
        content: str,
        message_type: str = MessageType.TEXT,
        file_url: str | None = None,
        reply_to_id: int | None = None,
    ) -> ServiceResult[Message]:
        """
        Send a message to a chat.

        The message insert and the last-message pointer update share one
        transaction. The ``message.created`` event is relayed after commit.

        Args:
            chat: Target chat
            sender: User sending the message
            content: Message text (caption for attachments)
            message_type: text, image or file
            file_url: Attachment URL, required for image and file
            reply_to_id: Optional id of a message in the same chat

        Returns:
            ServiceResult with new Message

        Error codes:
            NOT_CHAT_MEMBER: Sender is not in the chat
            INVALID_MESSAGE_TYPE: Unknown message type
            EMPTY_CONTENT / CONTENT_TOO_LONG: Content outside 1-1000 characters
            INVALID_REPLY: Reply target is not a message of this chat
            MISSING_FILE_URL: image/file without a URL
        """
        if not ChatService.is_member(chat, sender):
            return ServiceResult.failure(
                "You are not a member of this chat",
                error_code="NOT_CHAT_MEMBER",
            )

        if message_type not in MessageType.values:
            return ServiceResult.failure(
                "Message type must be one of: text, image, file",
                error_code="INVALID_MESSAGE_TYPE",
            )

        content_result = _validate_content(content)
        if not content_result:
            return content_result

        reply_to = None
        if reply_to_id is not None:
            try:
                reply_to = Message.objects.filter(pk=reply_to_id, chat=chat).first()
            except (TypeError, ValueError):
                reply_to = None
            if reply_to is None:
                return ServiceResult.failure(
                    "Reply target not found in this chat",
                    error_code="INVALID_REPLY",
                )

        if message_type == MessageType.TEXT:
            file_url = None
        elif not file_url:
            return ServiceResult.failure(
                "File URL is required for image and file messages",
                error_code="MISSING_FILE_URL",
            )

        receiver_id = None
        if not chat.is_group:
            receiver_id = (
                ChatMembership.objects.filter(chat=chat)
                .exclude(user=sender)
                .values_list("user_id", flat=True)
                .first()
            )

        with cls.atomic():
            message = Message.objects.create(
                chat=chat,
                sender=sender,
                receiver_id=receiver_id,
                content=content_result.data,
                message_type=message_type,
                file_url=file_url,
                reply_to=reply_to,
            )
            ChatService.update_last_message(chat, message)
            RelayService.publish_on_commit(
                chat.pk,
                RelayService.event(
                    RELAY_CONFIG.EVENT_MESSAGE_CREATED, message_event_data(message)
                ),
            )

        cls.get_logger().debug(
            f"User {sender.pk} sent message {message.pk} to chat {chat.pk}"
        )
        return ServiceResult.success(message)

    @classmethod
    def list(
        cls,
        chat: Chat,
        limit: int = MESSAGE_CONFIG.DEFAULT_PAGE_SIZE,
        skip: int = 0,
    ) -> list[Message]:
        """
        Non-deleted messages of a chat, newest first.

        ``limit`` is clamped to 1-100 and ``skip`` to >= 0. Seen state is
        not changed.
        """
        limit = _clamp(limit, 1, MESSAGE_CONFIG.MAX_PAGE_SIZE)
        skip = max(0, skip)

        queryset = (
            chat.messages.filter(is_deleted=False)
            .select_related("sender", "reply_to", "reply_to__sender")
            .prefetch_related("seen_records")
            .order_by("-created_at", "-id")
        )
        return list(queryset[skip : skip + limit])

    @classmethod
    def visible_count(cls, chat: Chat) -> int:
        return chat.messages.filter(is_deleted=False).count()

    @classmethod
    def mark_chat_seen(cls, chat: Chat, viewer: User) -> int:
        """
        Add the viewer to the seen set of every message from others.

        Idempotent. Returns the number of messages newly marked.

        The viewer's membership row is locked for the duration, so
        concurrent calls by the same viewer run one after the other and
        only the first reports (and relays) the ids it marked.
        """
        now = timezone.now()
        with cls.atomic():
            ChatMembership.objects.select_for_update().filter(
                chat=chat, user=viewer
            ).first()

            unseen_ids = list(
                chat.messages.filter(is_deleted=False)
                .exclude(sender=viewer)
                .exclude(seen_records__user=viewer)
                .values_list("id", flat=True)
            )
            if not unseen_ids:
                return 0

            MessageSeen.objects.bulk_create(
                [
                    MessageSeen(message_id=message_id, user=viewer, seen_at=now)
                    for message_id in unseen_ids
                ],
                ignore_conflicts=True,
            )
            RelayService.publish_on_commit(
                chat.pk,
                RelayService.event(
                    RELAY_CONFIG.EVENT_CHAT_SEEN,
                    {
                        "chat_id": chat.pk,
                        "user_id": viewer.pk,
                        "message_ids": unseen_ids,
                    },
                ),
            )

        cls.get_logger().debug(
            f"User {viewer.pk} marked {len(unseen_ids)} messages seen in chat {chat.pk}"
        )
        return len(unseen_ids)

    @classmethod
    def mark_seen(cls, message: Message, viewer: User) -> bool:
        """
        Add the viewer to one message's seen set.

        No-op for the sender and when already marked. Returns whether
        anything changed.
        """
        if message.sender_id == viewer.pk:
            return False

        _, created = MessageSeen.objects.get_or_create(message=message, user=viewer)
        return created

    @classmethod
    def edit(cls, message: Message, editor: User, new_content: str) -> ServiceResult[Message]:
        """
        Replace a message's content and stamp ``edited_at``.

        Error codes:
            NOT_SENDER: Only the sender may edit
            ALREADY_DELETED: Deleted messages cannot be edited
            EMPTY_CONTENT / CONTENT_TOO_LONG: Content outside 1-1000 characters
        """
        if message.sender_id != editor.pk:
            return ServiceResult.failure(
                "Only the sender can edit this message",
                error_code="NOT_SENDER",
            )

        content_result = _validate_content(new_content)

        with cls.atomic():
            locked = Message.objects.select_for_update().get(pk=message.pk)
            if locked.is_deleted:
                return ServiceResult.failure(
                    "Cannot edit a deleted message",
                    error_code="ALREADY_DELETED",
                )
            if not content_result:
                return content_result

            locked.content = content_result.data
            locked.edited_at = timezone.now()
            locked.save(update_fields=["content", "edited_at", "updated_at"])
            RelayService.publish_on_commit(
                locked.chat_id,
                RelayService.event(
                    RELAY_CONFIG.EVENT_MESSAGE_EDITED, message_event_data(locked)
                ),
            )

        message.content = locked.content
        message.edited_at = locked.edited_at
        message.updated_at = locked.updated_at

        cls.get_logger().info(f"User {editor.pk} edited message {message.pk}")
        return ServiceResult.success(message)

    @classmethod
    def delete(cls, message: Message, requester: User) -> ServiceResult[Message]:
        """
        Soft delete a message. The content is kept.

        Error codes:
            NOT_SENDER: Only the sender may delete
            ALREADY_DELETED: The message is already deleted
        """
        if message.sender_id != requester.pk:
            return ServiceResult.failure(
                "Only the sender can delete this message",
                error_code="NOT_SENDER",
            )

        with cls.atomic():
            locked = Message.objects.select_for_update().get(pk=message.pk)
            if locked.is_deleted:
                return ServiceResult.failure(
                    "Message is already deleted",
                    error_code="ALREADY_DELETED",
                )

            locked.deleted_by = requester
            locked.soft_delete(extra_update_fields=["deleted_by"])
            RelayService.publish_on_commit(
                locked.chat_id,
                RelayService.event(
                    RELAY_CONFIG.EVENT_MESSAGE_DELETED,
                    {"id": locked.pk, "chat_id": locked.chat_id},
                ),
            )

        message.is_deleted = True
        message.deleted_at = locked.deleted_at
        message.deleted_by = requester

        cls.get_logger().info(f"User {requester.pk} deleted message {message.pk}")
        return ServiceResult.success(message)

    @classmethod
    def unread_count(cls, chat: Chat, user: User) -> int:
        """Non-deleted messages from others that the user has not seen."""
        return (
            chat.messages.filter(is_deleted=False)
            .exclude(sender=user)
            .exclude(seen_records__user=user)
            .count()
        )

    @classmethod
    def search(
        cls,
        chat: Chat,
        query: str,
        limit: int = MESSAGE_CONFIG.SEARCH_DEFAULT_LIMIT,
    ) -> ServiceResult[list[Message]]:
        """
        Case-insensitive substring search over non-deleted messages.

        Error codes:
            QUERY_TOO_SHORT: Query shorter than 2 characters after trimming
        """
        query = (query or "").strip()
        if len(query) < MESSAGE_CONFIG.SEARCH_MIN_QUERY_LENGTH:
            return ServiceResult.failure(
                f"Search query must be at least "
                f"{MESSAGE_CONFIG.SEARCH_MIN_QUERY_LENGTH} characters",
                error_code="QUERY_TOO_SHORT",
            )

        limit = _clamp(limit, 1, MESSAGE_CONFIG.SEARCH_MAX_RESULTS)
        messages = (
            chat.messages.filter(is_deleted=False, content__icontains=query)
            .select_related("sender")
            .order_by("-created_at", "-id")[:limit]
        )
        return ServiceResult.success(list(messages))

    @classmethod
    def get_message(cls, message_id) -> ServiceResult[Message]:
        try:
            message = (
                Message.objects.select_related("chat", "sender", "reply_to")
                .filter(pk=message_id)
                .first()
            )
        except (TypeError, ValueError):
            message = None

        if message is None:
            return ServiceResult.failure("Message not found", error_code="NOT_FOUND")
        return ServiceResult.success(message)


# =============================================================================
# RelayService
# =============================================================================


def message_event_data(message: Message) -> dict[str, Any]:
    """JSON-safe representation of a message for relay events."""
    return {
        "id": message.pk,
        "chat_id": message.chat_id,
        "sender_id": message.sender_id,
        "receiver_id": message.receiver_id,
        "content": message.display_content,
        "message_type": message.message_type,
        "file_url": message.file_url,
        "reply_to_id": message.reply_to_id,
        "is_edited": message.is_edited,
        "edited_at": message.edited_at.isoformat() if message.edited_at else None,
        "created_at": message.created_at.isoformat(),
    }


class RelayService(BaseService):
    """
    Fan-out of committed chat events to connected WebSocket clients.

    Events go to the channel layer group ``chat_<chat_id>``; ChatConsumer
    instances in that group forward them to their clients. Delivery is
    at-most-once and best effort: a failed publish is logged and dropped.

    Event format:
        {"event": "message.created", "data": {...}}
    """

    @classmethod
    def group_name(cls, chat_id) -> str:
        return f"{RELAY_CONFIG.GROUP_PREFIX}{chat_id}"

    @classmethod
    def event(cls, name: str, data: dict[str, Any]) -> dict[str, Any]:
        return {"event": name, "data": data}

    @classmethod
    def publish(cls, chat_id, event: dict[str, Any]) -> bool:
        """
        Send an event to every client connected to the chat.

        Returns False when the event could not be handed to the channel layer.
        """
        try:
            channel_layer = get_channel_layer()
            if channel_layer is None:
                cls.get_logger().warning("No channel layer configured, dropping event")
                return False

            async_to_sync(channel_layer.group_send)(
                cls.group_name(chat_id),
                {"type": "relay.event", **event},
            )
        except Exception:
            cls.get_logger().exception(
                f"Failed to relay {event.get('event')} for chat {chat_id}"
            )
            return False

        return True

    @classmethod
    def publish_on_commit(cls, chat_id, event: dict[str, Any]) -> None:
        """Publish once the current transaction commits (immediately outside one)."""
        transaction.on_commit(lambda: cls.publish(chat_id, event))
