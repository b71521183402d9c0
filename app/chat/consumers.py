"""
WebSocket consumers for the chat application.

This module implements the realtime relay endpoint: clients connected to a
chat receive every committed change to that chat's message log.

Consumers:
    ChatConsumer: Handles WebSocket connections for chats

Authentication:
    Users are authenticated via JWT (see middleware.py).
    JWTAuthMiddleware attaches the user to self.scope["user"].

Channel Groups:
    Each chat has a channel group named "chat_{chat_id}".
    RelayService publishes committed events to it; connected members
    receive them through relay_event.

Message Types (from client):
    - message: Send a new message (persisted, then relayed)
    - typing: Broadcast typing indicator

Message Types (to client):
    - message.created / message.edited / message.deleted / chat.seen
    - typing: Another member is typing
    - error: Error response

Close Codes:
    4001: Not authenticated
    4003: Not a member of the chat (also sent when a member is removed)
    4004: Chat not found
"""

from __future__ import annotations

import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from chat.constants import RELAY_CONFIG
from chat.models import Chat
from chat.services import ChatService, MessageService, RelayService

logger = logging.getLogger(__name__)


class ChatConsumer(AsyncJsonWebsocketConsumer):
    """
    WebSocket consumer for one chat.

    Handles:
        - Connection authentication and membership check
        - Joining/leaving the chat's channel group
        - Sending messages through MessageService
        - Typing indicators
        - Forwarding relay events to the client

    Attributes:
        chat_id: ID of the connected chat
        chat: Chat instance (after connect)
        room_group_name: Channel layer group name for the chat
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.chat_id: int | None = None
        self.chat: Chat | None = None
        self.room_group_name: str | None = None

    async def connect(self):
        """
        Handle WebSocket connection.

        Validates:
            1. User is authenticated
            2. Chat exists
            3. User is a member of the chat

        On success, joins the channel group and accepts the connection.
        """
        self.chat_id = self.scope["url_route"]["kwargs"]["chat_id"]

        user = self.scope.get("user")

        if not user or not user.is_authenticated:
            logger.warning(f"Rejected unauthenticated connection to chat {self.chat_id}")
            await self.close(code=RELAY_CONFIG.CLOSE_UNAUTHENTICATED)
            return

        self.chat = await self._get_chat()
        if not self.chat:
            logger.warning(
                f"User {user.pk} tried to connect to non-existent chat {self.chat_id}"
            )
            await self.close(code=RELAY_CONFIG.CLOSE_CHAT_NOT_FOUND)
            return

        if not await self._is_member(user):
            logger.warning(f"User {user.pk} is not a member of chat {self.chat_id}")
            await self.close(code=RELAY_CONFIG.CLOSE_NOT_MEMBER)
            return

        self.room_group_name = RelayService.group_name(self.chat_id)
        await self.channel_layer.group_add(self.room_group_name, self.channel_name)

        if "jwt" in self.scope.get("subprotocols", []):
            await self.accept(subprotocol="jwt")
        else:
            await self.accept()
        logger.info(f"User {user.pk} connected to chat {self.chat_id}")

    async def disconnect(self, close_code):
        if self.room_group_name:
            await self.channel_layer.group_discard(
                self.room_group_name,
                self.channel_name,
            )
            logger.info(
                f"User {self.scope['user'].pk} disconnected from chat {self.chat_id}"
            )

    async def receive_json(self, content, **kwargs):
        """
        Handle incoming WebSocket frames.

        Expected frame format:
            {"type": "message", "content": "Hello!"}
            {"type": "message", "content": "Reply", "reply_to_id": 123}
            {"type": "message", "content": "Photo", "message_type": "image",
             "file_url": "https://..."}
            {"type": "typing", "is_typing": true}
        """
        frame_type = content.get("type") if isinstance(content, dict) else None
        user = self.scope["user"]

        if frame_type == "message":
            await self._handle_message(user, content)
        elif frame_type == "typing":
            await self._handle_typing(user, content)
        else:
            await self._send_error(
                f"Unknown message type: {frame_type}", "UNKNOWN_FRAME_TYPE"
            )

    async def _handle_message(self, user, content):
        """
        Persist a message sent over the socket.

        The new message reaches every member (this client included) as a
        message.created relay event once the transaction commits.
        """
        result = await self._send_message(user, content)
        if not result:
            await self._send_error(result.error, result.error_code)

    async def _handle_typing(self, user, content):
        await self.channel_layer.group_send(
            self.room_group_name,
            {
                "type": "chat.typing",
                "user_id": user.pk,
                "is_typing": bool(content.get("is_typing", False)),
            },
        )

    async def _send_error(self, message: str, error_code: str | None):
        await self.send_json(
            {
                "type": "error",
                "message": message,
                "error_code": error_code,
            }
        )

    async def relay_event(self, event):
        """
        Handle relay.event from the channel layer.

        Forwards a committed chat event to the WebSocket client. Membership
        is re-checked first: a user removed from (or leaving) the group
        after connecting is dropped from the channel group and the socket
        is closed with 4003.
        """
        if not await self._still_member():
            return

        await self.send_json({"type": event["event"], "data": event["data"]})

    async def chat_typing(self, event):
        """Send a typing indicator to the client (except the typist)."""
        if self.scope["user"].pk == event["user_id"]:
            return

        if not await self._still_member():
            return

        await self.send_json(
            {
                "type": "typing",
                "user_id": event["user_id"],
                "is_typing": event["is_typing"],
            }
        )

    async def _still_member(self) -> bool:
        if self.room_group_name is None:
            # Already evicted; events queued before the close are dropped
            return False

        user = self.scope["user"]
        if await self._is_member(user):
            return True

        logger.info(f"User {user.pk} is no longer a member of chat {self.chat_id}")
        await self.channel_layer.group_discard(self.room_group_name, self.channel_name)
        self.room_group_name = None
        await self.close(code=RELAY_CONFIG.CLOSE_NOT_MEMBER)
        return False

    @database_sync_to_async
    def _get_chat(self) -> Chat | None:
        return Chat.objects.filter(pk=self.chat_id).first()

    @database_sync_to_async
    def _is_member(self, user) -> bool:
        return ChatService.is_member(self.chat, user)

    @database_sync_to_async
    def _send_message(self, user, content: dict):
        return MessageService.send(
            chat=self.chat,
            sender=user,
            content=content.get("content", ""),
            message_type=content.get("message_type", "text"),
            file_url=content.get("file_url"),
            reply_to_id=content.get("reply_to_id"),
        )
