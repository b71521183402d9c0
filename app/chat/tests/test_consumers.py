"""
Tests for the chat WebSocket consumer and JWT middleware.

These tests run the consumer behind JWTAuthMiddleware with the in-memory
channel layer. They use transactional databases so that relay events
scheduled with transaction.on_commit actually fire.
"""

import pytest
from channels.db import database_sync_to_async
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from rest_framework_simplejwt.tokens import AccessToken

from chat.middleware import JWTAuthMiddleware
from chat.models import Message
from chat.routing import websocket_urlpatterns
from chat.services import ChatService, MessageService

application = JWTAuthMiddleware(URLRouter(websocket_urlpatterns))


def ws_path(chat_id, user=None):
    path = f"/ws/chat/{chat_id}/"
    if user is not None:
        path += f"?token={AccessToken.for_user(user)}"
    return path


async def connect(chat_id, user=None, **kwargs):
    communicator = WebsocketCommunicator(application, ws_path(chat_id, user), **kwargs)
    connected, detail = await communicator.connect()
    return communicator, connected, detail


pytestmark = [pytest.mark.asyncio, pytest.mark.django_db(transaction=True)]


# =============================================================================
# Connection
# =============================================================================


class TestConnect:
    async def test_member_connects(self, group_chat, bob):
        communicator, connected, _ = await connect(group_chat.pk, bob)

        assert connected is True
        await communicator.disconnect()

    async def test_missing_token_closes_4001(self, group_chat):
        _, connected, code = await connect(group_chat.pk)

        assert connected is False
        assert code == 4001

    async def test_invalid_token_closes_4001(self, group_chat):
        communicator = WebsocketCommunicator(
            application, f"/ws/chat/{group_chat.pk}/?token=not-a-jwt"
        )

        connected, code = await communicator.connect()

        assert connected is False
        assert code == 4001

    async def test_unknown_chat_closes_4004(self, bob):
        _, connected, code = await connect(999999, bob)

        assert connected is False
        assert code == 4004

    async def test_non_member_closes_4003(self, group_chat, outsider):
        _, connected, code = await connect(group_chat.pk, outsider)

        assert connected is False
        assert code == 4003

    async def test_token_in_subprotocol(self, group_chat, bob):
        communicator = WebsocketCommunicator(
            application,
            f"/ws/chat/{group_chat.pk}/",
            subprotocols=["jwt", str(AccessToken.for_user(bob))],
        )

        connected, subprotocol = await communicator.connect()

        assert connected is True
        assert subprotocol == "jwt"
        await communicator.disconnect()


# =============================================================================
# Frames
# =============================================================================


class TestFrames:
    async def test_message_frame_is_persisted_and_relayed(self, group_chat, alice, bob):
        alice_ws, _, _ = await connect(group_chat.pk, alice)
        bob_ws, _, _ = await connect(group_chat.pk, bob)

        await alice_ws.send_json_to({"type": "message", "content": "hello"})

        for communicator in (alice_ws, bob_ws):
            frame = await communicator.receive_json_from(timeout=3)
            assert frame["type"] == "message.created"
            assert frame["data"]["content"] == "hello"
            assert frame["data"]["sender_id"] == alice.pk

        assert await database_sync_to_async(
            Message.objects.filter(chat=group_chat, content="hello").exists
        )()

        await alice_ws.disconnect()
        await bob_ws.disconnect()

    async def test_invalid_message_returns_error_frame(self, group_chat, bob):
        communicator, _, _ = await connect(group_chat.pk, bob)

        await communicator.send_json_to({"type": "message", "content": "   "})
        frame = await communicator.receive_json_from(timeout=3)

        assert frame["type"] == "error"
        assert frame["error_code"] == "EMPTY_CONTENT"
        await communicator.disconnect()

    async def test_typing_reaches_others_only(self, group_chat, alice, bob):
        alice_ws, _, _ = await connect(group_chat.pk, alice)
        bob_ws, _, _ = await connect(group_chat.pk, bob)

        await alice_ws.send_json_to({"type": "typing", "is_typing": True})

        frame = await bob_ws.receive_json_from(timeout=3)
        assert frame == {"type": "typing", "user_id": alice.pk, "is_typing": True}
        assert await alice_ws.receive_nothing(timeout=0.2)

        await alice_ws.disconnect()
        await bob_ws.disconnect()

    async def test_unknown_frame_type_returns_error(self, group_chat, bob):
        communicator, _, _ = await connect(group_chat.pk, bob)

        await communicator.send_json_to({"type": "dance"})
        frame = await communicator.receive_json_from(timeout=3)

        assert frame["type"] == "error"
        assert frame["error_code"] == "UNKNOWN_FRAME_TYPE"
        await communicator.disconnect()


# =============================================================================
# Relay from the REST side
# =============================================================================


class TestRelay:
    async def test_edit_through_service_reaches_socket(self, group_chat, alice, bob):
        message = await database_sync_to_async(MessageService.send)(
            group_chat, alice, "draft"
        )
        bob_ws, _, _ = await connect(group_chat.pk, bob)

        await database_sync_to_async(MessageService.edit)(message.data, alice, "final")
        frame = await bob_ws.receive_json_from(timeout=3)

        assert frame["type"] == "message.edited"
        assert frame["data"]["content"] == "final"
        await bob_ws.disconnect()

    async def test_delete_through_service_reaches_socket(self, group_chat, alice, bob):
        message = await database_sync_to_async(MessageService.send)(
            group_chat, alice, "oops"
        )
        bob_ws, _, _ = await connect(group_chat.pk, bob)

        await database_sync_to_async(MessageService.delete)(message.data, alice)
        frame = await bob_ws.receive_json_from(timeout=3)

        assert frame == {
            "type": "message.deleted",
            "data": {"id": message.data.pk, "chat_id": group_chat.pk},
        }
        await bob_ws.disconnect()


# =============================================================================
# Membership changes after connect
# =============================================================================


class TestMembershipChanges:
    async def test_removed_member_is_closed_instead_of_relayed(
        self, group_chat, alice, bob, carol
    ):
        carol_ws, connected, _ = await connect(group_chat.pk, carol)
        assert connected is True
        bob_ws, _, _ = await connect(group_chat.pk, bob)

        result = await database_sync_to_async(ChatService.remove_member)(group_chat, carol)
        assert result
        await database_sync_to_async(MessageService.send)(
            group_chat, alice, "after removal"
        )

        frame = await bob_ws.receive_json_from(timeout=3)
        assert frame["data"]["content"] == "after removal"

        output = await carol_ws.receive_output(timeout=3)
        assert output == {"type": "websocket.close", "code": 4003}

        await bob_ws.disconnect()

    async def test_member_who_left_gets_no_typing(self, group_chat, alice, bob):
        alice_ws, _, _ = await connect(group_chat.pk, alice)
        bob_ws, _, _ = await connect(group_chat.pk, bob)

        result = await database_sync_to_async(ChatService.leave_group)(group_chat, bob)
        assert result
        await alice_ws.send_json_to({"type": "typing", "is_typing": True})

        output = await bob_ws.receive_output(timeout=3)
        assert output == {"type": "websocket.close", "code": 4003}

        await alice_ws.disconnect()
