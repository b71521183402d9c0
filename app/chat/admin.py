"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Chat management (with membership inline)
- Message moderation
"""

from django.contrib import admin

from chat.models import Chat, ChatMembership, DirectChatPair, Message


class ChatMembershipInline(admin.TabularInline):
    """Inline display of members in chat admin."""

    model = ChatMembership
    extra = 0
    readonly_fields = ["joined_at"]
    raw_id_fields = ["user"]


@admin.register(Chat)
class ChatAdmin(admin.ModelAdmin):
    """Admin interface for Chat model."""

    list_display = [
        "id",
        "is_group",
        "group_name",
        "admin",
        "created_at",
        "updated_at",
    ]
    list_filter = ["is_group", "created_at"]
    search_fields = ["group_name", "id"]
    readonly_fields = ["created_at", "updated_at", "last_message"]
    raw_id_fields = ["admin"]
    inlines = [ChatMembershipInline]
    ordering = ["-updated_at"]


@admin.register(DirectChatPair)
class DirectChatPairAdmin(admin.ModelAdmin):
    list_display = ["chat", "user_lower", "user_higher"]
    raw_id_fields = ["chat", "user_lower", "user_higher"]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for Message model."""

    list_display = [
        "id",
        "chat",
        "sender",
        "message_type",
        "is_deleted",
        "created_at",
    ]
    list_filter = ["message_type", "is_deleted", "created_at"]
    search_fields = ["content", "sender__mobile", "sender__name"]
    readonly_fields = ["created_at", "updated_at", "edited_at", "deleted_at"]
    raw_id_fields = ["chat", "sender", "receiver", "reply_to", "deleted_by"]
    ordering = ["-created_at"]
