"""
Tests for chat service layer business logic.

This module tests all chat services:
- ChatService: Individual and group chats, membership, last-message pointer
- MessageService: Send, list, seen, edit, delete, unread count, search
- RelayService: Channel layer publication and on-commit scheduling

Test Organization:
    - Each service method has its own test class
    - Tests use descriptive names following: test_<scenario>_<expected_outcome>

Testing Philosophy:
    Tests focus on observable behavior:
    - ServiceResult success/failure states
    - Error codes for specific failure modes
    - Database state changes
    - Relay events published after commit
"""

from unittest.mock import patch

import pytest
from django.db import IntegrityError

from chat.models import Chat, ChatMembership, DirectChatPair, Message, MessageSeen
from chat.services import ChatService, MessageService, RelayService
from chat.tests.factories import GroupChatFactory, IndividualChatFactory, MessageFactory


# =============================================================================
# ChatService.find_or_create_individual
# =============================================================================


@pytest.mark.django_db
class TestChatServiceFindOrCreateIndividual:
    def test_creates_chat_with_both_members(self, alice, bob):
        result = ChatService.find_or_create_individual(alice, bob)

        assert result.success is True
        chat, created = result.data
        assert created is True
        assert chat.is_group is False
        assert chat.admin is None
        assert chat.group_name == ""
        assert chat.ordered_members() == [alice, bob]

    def test_returns_existing_chat_in_either_order(self, alice, bob):
        first, _ = ChatService.find_or_create_individual(alice, bob).data

        chat, created = ChatService.find_or_create_individual(bob, alice).data

        assert created is False
        assert chat.pk == first.pk
        assert Chat.objects.filter(is_group=False).count() == 1

    def test_stores_canonical_pair(self, alice, bob):
        chat, _ = ChatService.find_or_create_individual(bob, alice).data

        pair = DirectChatPair.objects.get(chat=chat)
        assert pair.user_lower_id == min(alice.pk, bob.pk)
        assert pair.user_higher_id == max(alice.pk, bob.pk)

    def test_self_chat_fails_with_self_reference(self, alice):
        result = ChatService.find_or_create_individual(alice, alice)

        assert result.success is False
        assert result.error_code == "SELF_REFERENCE"
        assert not Chat.objects.exists()

    def test_group_with_same_two_users_is_not_matched(self, alice, bob):
        GroupChatFactory(admin=alice, members=[bob])

        chat, created = ChatService.find_or_create_individual(alice, bob).data

        assert created is True
        assert chat.is_group is False

    def test_lost_creation_race_resolves_to_existing_chat(self, alice, bob):
        existing = IndividualChatFactory(members=[alice, bob])

        with patch.object(ChatService, "_get_direct_chat", side_effect=[None, existing]):
            with patch.object(
                DirectChatPair.objects, "create", side_effect=IntegrityError
            ):
                result = ChatService.find_or_create_individual(alice, bob)

        assert result.success is True
        assert result.data == (existing, False)


# =============================================================================
# ChatService.create_group
# =============================================================================


@pytest.mark.django_db
class TestChatServiceCreateGroup:
    def test_creates_group_with_admin_first(self, alice, bob, carol):
        result = ChatService.create_group(alice, "Team", [bob, carol])

        assert result.success is True
        chat = result.data
        assert chat.is_group is True
        assert chat.admin == alice
        assert chat.group_name == "Team"
        assert chat.ordered_members() == [alice, bob, carol]

    def test_admin_in_member_list_is_not_counted_twice(self, alice, bob):
        chat = ChatService.create_group(alice, "Team", [alice, bob, bob]).data

        assert ChatService.member_count(chat) == 2

    def test_trims_group_name(self, alice, bob):
        chat = ChatService.create_group(alice, "  Team  ", [bob]).data

        assert chat.group_name == "Team"

    def test_stores_profile_pic(self, alice, bob):
        chat = ChatService.create_group(
            alice, "Team", [bob], profile_pic="https://cdn.example.com/team.png"
        ).data

        assert chat.profile_pic == "https://cdn.example.com/team.png"

    @pytest.mark.parametrize("name", ["", " ", "a", "x" * 51])
    def test_invalid_group_name_fails(self, alice, bob, name):
        result = ChatService.create_group(alice, name, [bob])

        assert result.success is False
        assert result.error_code == "INVALID_GROUP_NAME"

    def test_group_of_only_admin_fails_with_empty_group(self, alice):
        result = ChatService.create_group(alice, "Solo", [alice])

        assert result.success is False
        assert result.error_code == "EMPTY_GROUP"
        assert not Chat.objects.exists()


# =============================================================================
# ChatService predicates
# =============================================================================


@pytest.mark.django_db
class TestChatServicePredicates:
    def test_is_member(self, group_chat, bob, outsider):
        assert ChatService.is_member(group_chat, bob) is True
        assert ChatService.is_member(group_chat, outsider) is False

    def test_is_admin_only_for_group_admin(self, group_chat, individual_chat, alice, bob):
        assert ChatService.is_admin(group_chat, alice) is True
        assert ChatService.is_admin(group_chat, bob) is False
        assert ChatService.is_admin(individual_chat, alice) is False

    def test_get_chat_missing_returns_none(self, db):
        assert ChatService.get_chat(999999) is None


# =============================================================================
# ChatService.add_member / remove_member / leave_group
# =============================================================================


@pytest.mark.django_db
class TestChatServiceAddMember:
    def test_adds_member_at_end(self, group_chat, alice, bob, carol, outsider):
        result = ChatService.add_member(group_chat, outsider)

        assert result.success is True
        assert group_chat.ordered_members() == [alice, bob, carol, outsider]

    def test_existing_member_fails_with_already_member(self, group_chat, bob):
        result = ChatService.add_member(group_chat, bob)

        assert result.success is False
        assert result.error_code == "ALREADY_MEMBER"
        assert ChatService.member_count(group_chat) == 3

    def test_individual_chat_fails_with_not_group(self, individual_chat, outsider):
        result = ChatService.add_member(individual_chat, outsider)

        assert result.error_code == "NOT_GROUP"

    def test_bumps_updated_at(self, group_chat, outsider):
        before = group_chat.updated_at

        ChatService.add_member(group_chat, outsider)
        group_chat.refresh_from_db()

        assert group_chat.updated_at >= before


@pytest.mark.django_db
class TestChatServiceRemoveMember:
    def test_removes_member(self, group_chat, alice, bob, carol):
        result = ChatService.remove_member(group_chat, bob)

        assert result.success is True
        assert group_chat.ordered_members() == [alice, carol]

    def test_admin_cannot_be_removed(self, group_chat, alice):
        result = ChatService.remove_member(group_chat, alice)

        assert result.error_code == "CANNOT_REMOVE_ADMIN"
        assert ChatService.is_member(group_chat, alice)

    def test_non_member_fails_with_not_member(self, group_chat, outsider):
        result = ChatService.remove_member(group_chat, outsider)

        assert result.error_code == "NOT_MEMBER"

    def test_individual_chat_fails_with_not_group(self, individual_chat, bob):
        result = ChatService.remove_member(individual_chat, bob)

        assert result.error_code == "NOT_GROUP"


@pytest.mark.django_db
class TestChatServiceLeaveGroup:
    def test_member_leaves(self, group_chat, carol):
        result = ChatService.leave_group(group_chat, carol)

        assert result.success is True
        assert not ChatService.is_member(group_chat, carol)

    def test_admin_cannot_leave(self, group_chat, alice):
        result = ChatService.leave_group(group_chat, alice)

        assert result.error_code == "CANNOT_REMOVE_ADMIN"

    def test_individual_chat_cannot_be_left(self, individual_chat, bob):
        result = ChatService.leave_group(individual_chat, bob)

        assert result.error_code == "NOT_GROUP"


# =============================================================================
# ChatService.update_group_info
# =============================================================================


@pytest.mark.django_db
class TestChatServiceUpdateGroupInfo:
    def test_renames_group(self, group_chat):
        result = ChatService.update_group_info(group_chat, group_name=" Crew ")

        assert result.success is True
        group_chat.refresh_from_db()
        assert group_chat.group_name == "Crew"

    def test_omitted_fields_are_unchanged(self, group_chat):
        ChatService.update_group_info(
            group_chat, profile_pic="https://cdn.example.com/crew.png"
        )
        group_chat.refresh_from_db()

        assert group_chat.group_name == "Team"
        assert group_chat.profile_pic == "https://cdn.example.com/crew.png"

    def test_invalid_name_fails(self, group_chat):
        result = ChatService.update_group_info(group_chat, group_name="x")

        assert result.error_code == "INVALID_GROUP_NAME"

    def test_individual_chat_fails_with_not_group(self, individual_chat):
        result = ChatService.update_group_info(individual_chat, group_name="Pals")

        assert result.error_code == "NOT_GROUP"


# =============================================================================
# ChatService.update_last_message / list_for_user
# =============================================================================


@pytest.mark.django_db
class TestChatServiceUpdateLastMessage:
    def test_sets_pointer(self, group_chat, alice):
        message = MessageFactory(chat=group_chat, sender=alice)

        result = ChatService.update_last_message(group_chat, message)

        assert result.success is True
        group_chat.refresh_from_db()
        assert group_chat.last_message == message

    def test_message_from_other_chat_is_refused(self, group_chat, individual_chat, alice):
        message = MessageFactory(chat=individual_chat, sender=alice)

        result = ChatService.update_last_message(group_chat, message)

        assert result.error_code == "INVALID_MESSAGE"
        group_chat.refresh_from_db()
        assert group_chat.last_message is None


@pytest.mark.django_db
class TestChatServiceListForUser:
    def test_lists_only_chats_of_user(self, group_chat, individual_chat, carol):
        chats = list(ChatService.list_for_user(carol))

        assert chats == [group_chat]

    def test_most_recently_active_first(self, group_chat, individual_chat, alice):
        MessageService.send(group_chat, alice, "newer activity")

        chats = list(ChatService.list_for_user(alice))

        assert chats == [group_chat, individual_chat]

    def test_user_without_chats_gets_empty_list(self, outsider):
        assert list(ChatService.list_for_user(outsider)) == []


# =============================================================================
# MessageService.send
# =============================================================================


@pytest.mark.django_db
class TestMessageServiceSend:
    def test_sends_text_message(self, individual_chat, alice, bob):
        result = MessageService.send(individual_chat, alice, "  Hello Bob  ")

        assert result.success is True
        message = result.data
        assert message.content == "Hello Bob"
        assert message.sender == alice
        assert message.receiver == bob
        assert message.file_url is None

    def test_group_message_has_no_receiver(self, group_chat, alice):
        message = MessageService.send(group_chat, alice, "Hi all").data

        assert message.receiver is None

    def test_updates_last_message_pointer(self, group_chat, bob):
        message = MessageService.send(group_chat, bob, "latest").data

        group_chat.refresh_from_db()
        assert group_chat.last_message == message

    def test_non_member_fails_with_not_chat_member(self, group_chat, outsider):
        result = MessageService.send(group_chat, outsider, "let me in")

        assert result.error_code == "NOT_CHAT_MEMBER"
        assert not Message.objects.exists()

    @pytest.mark.parametrize(
        "content,code",
        [("", "EMPTY_CONTENT"), ("   ", "EMPTY_CONTENT"), ("x" * 1001, "CONTENT_TOO_LONG")],
    )
    def test_content_bounds(self, group_chat, alice, content, code):
        result = MessageService.send(group_chat, alice, content)

        assert result.error_code == code

    def test_content_of_max_length_is_accepted(self, group_chat, alice):
        result = MessageService.send(group_chat, alice, "x" * 1000)

        assert result.success is True

    def test_unknown_type_fails(self, group_chat, alice):
        result = MessageService.send(group_chat, alice, "hi", message_type="video")

        assert result.error_code == "INVALID_MESSAGE_TYPE"

    def test_image_without_url_fails_with_missing_file_url(self, group_chat, alice):
        result = MessageService.send(group_chat, alice, "photo", message_type="image")

        assert result.error_code == "MISSING_FILE_URL"

    def test_image_with_url_is_stored(self, group_chat, alice):
        message = MessageService.send(
            group_chat,
            alice,
            "photo",
            message_type="image",
            file_url="https://cdn.example.com/p.png",
        ).data

        assert message.message_type == "image"
        assert message.file_url == "https://cdn.example.com/p.png"

    def test_text_message_drops_file_url(self, group_chat, alice):
        message = MessageService.send(
            group_chat, alice, "hi", file_url="https://cdn.example.com/p.png"
        ).data

        assert message.file_url is None

    def test_reply_in_same_chat(self, group_chat, alice, bob):
        original = MessageFactory(chat=group_chat, sender=alice)

        reply = MessageService.send(group_chat, bob, "re", reply_to_id=original.pk).data

        assert reply.reply_to == original

    def test_reply_to_other_chat_fails_with_invalid_reply(
        self, group_chat, individual_chat, alice
    ):
        elsewhere = MessageFactory(chat=individual_chat, sender=alice)

        result = MessageService.send(group_chat, alice, "re", reply_to_id=elsewhere.pk)

        assert result.error_code == "INVALID_REPLY"

    def test_reply_to_missing_message_fails(self, group_chat, alice):
        result = MessageService.send(group_chat, alice, "re", reply_to_id=999999)

        assert result.error_code == "INVALID_REPLY"

    def test_publishes_message_created_after_commit(
        self, group_chat, alice, django_capture_on_commit_callbacks
    ):
        with patch.object(RelayService, "publish") as mock_publish:
            with django_capture_on_commit_callbacks(execute=True):
                message = MessageService.send(group_chat, alice, "Hello").data

        mock_publish.assert_called_once()
        chat_id, event = mock_publish.call_args.args
        assert chat_id == group_chat.pk
        assert event["event"] == "message.created"
        assert event["data"]["id"] == message.pk
        assert event["data"]["content"] == "Hello"

    def test_failed_send_publishes_nothing(
        self, group_chat, outsider, django_capture_on_commit_callbacks
    ):
        with patch.object(RelayService, "publish") as mock_publish:
            with django_capture_on_commit_callbacks(execute=True):
                MessageService.send(group_chat, outsider, "Hello")

        mock_publish.assert_not_called()


# =============================================================================
# MessageService.list
# =============================================================================


@pytest.mark.django_db
class TestMessageServiceList:
    def test_newest_first(self, group_chat, alice):
        first = MessageFactory(chat=group_chat, sender=alice)
        second = MessageFactory(chat=group_chat, sender=alice)

        assert MessageService.list(group_chat) == [second, first]

    def test_excludes_deleted(self, group_chat, alice):
        kept = MessageFactory(chat=group_chat, sender=alice)
        MessageFactory(chat=group_chat, sender=alice, is_deleted=True)

        assert MessageService.list(group_chat) == [kept]

    def test_limit_and_skip(self, group_chat, alice):
        messages = [MessageFactory(chat=group_chat, sender=alice) for _ in range(5)]

        page = MessageService.list(group_chat, limit=2, skip=1)

        assert page == [messages[3], messages[2]]

    def test_limit_is_clamped(self, group_chat, alice):
        MessageFactory.create_batch(3, chat=group_chat, sender=alice)

        assert len(MessageService.list(group_chat, limit=0)) == 1
        assert len(MessageService.list(group_chat, limit=500, skip=-5)) == 3

    def test_does_not_change_seen_state(self, group_chat, alice):
        MessageFactory(chat=group_chat, sender=alice)

        MessageService.list(group_chat)

        assert not MessageSeen.objects.exists()


# =============================================================================
# MessageService.mark_chat_seen / mark_seen / unread_count
# =============================================================================


@pytest.mark.django_db
class TestMessageServiceMarkChatSeen:
    def test_marks_messages_from_others(self, group_chat, alice, bob):
        from_alice = MessageFactory(chat=group_chat, sender=alice)
        MessageFactory(chat=group_chat, sender=bob)

        marked = MessageService.mark_chat_seen(group_chat, bob)

        assert marked == 1
        assert list(from_alice.seen_by.all()) == [bob]

    def test_is_idempotent(self, group_chat, alice, bob):
        MessageFactory(chat=group_chat, sender=alice)
        MessageService.mark_chat_seen(group_chat, bob)

        assert MessageService.mark_chat_seen(group_chat, bob) == 0
        assert MessageSeen.objects.count() == 1

    def test_sender_is_never_added(self, group_chat, alice):
        own = MessageFactory(chat=group_chat, sender=alice)

        MessageService.mark_chat_seen(group_chat, alice)

        assert not own.seen_by.exists()

    def test_publishes_chat_seen(
        self, group_chat, alice, bob, django_capture_on_commit_callbacks
    ):
        message = MessageFactory(chat=group_chat, sender=alice)

        with patch.object(RelayService, "publish") as mock_publish:
            with django_capture_on_commit_callbacks(execute=True):
                MessageService.mark_chat_seen(group_chat, bob)

        chat_id, event = mock_publish.call_args.args
        assert event["event"] == "chat.seen"
        assert event["data"] == {
            "chat_id": group_chat.pk,
            "user_id": bob.pk,
            "message_ids": [message.pk],
        }

    def test_reads_unseen_ids_after_taking_the_lock(
        self, group_chat, alice, bob, django_capture_on_commit_callbacks
    ):
        first = MessageFactory(chat=group_chat, sender=alice)
        second = MessageFactory(chat=group_chat, sender=alice)
        take_lock = ChatMembership.objects.select_for_update

        def lock_after_concurrent_mark(*args, **kwargs):
            # Another request by the same viewer committed while we waited
            MessageSeen.objects.create(message=first, user=bob)
            return take_lock(*args, **kwargs)

        with patch.object(
            ChatMembership.objects,
            "select_for_update",
            side_effect=lock_after_concurrent_mark,
        ), patch.object(RelayService, "publish") as mock_publish:
            with django_capture_on_commit_callbacks(execute=True):
                marked = MessageService.mark_chat_seen(group_chat, bob)

        assert marked == 1
        _, event = mock_publish.call_args.args
        assert event["data"]["message_ids"] == [second.pk]


@pytest.mark.django_db
class TestMessageServiceMarkSeen:
    def test_marks_single_message(self, group_chat, alice, bob):
        message = MessageFactory(chat=group_chat, sender=alice)

        assert MessageService.mark_seen(message, bob) is True
        assert MessageService.mark_seen(message, bob) is False
        assert message.seen_by.count() == 1

    def test_sender_is_no_op(self, group_chat, alice):
        message = MessageFactory(chat=group_chat, sender=alice)

        assert MessageService.mark_seen(message, alice) is False
        assert not message.seen_by.exists()


@pytest.mark.django_db
class TestMessageServiceUnreadCount:
    def test_counts_unseen_messages_from_others(self, group_chat, alice, bob):
        MessageFactory.create_batch(2, chat=group_chat, sender=alice)
        MessageFactory(chat=group_chat, sender=bob)

        assert MessageService.unread_count(group_chat, bob) == 2

    def test_seen_and_deleted_messages_are_not_counted(self, group_chat, alice, bob):
        seen = MessageFactory(chat=group_chat, sender=alice)
        MessageFactory(chat=group_chat, sender=alice, is_deleted=True)
        MessageService.mark_seen(seen, bob)

        assert MessageService.unread_count(group_chat, bob) == 0


# =============================================================================
# MessageService.edit / delete
# =============================================================================


@pytest.mark.django_db
class TestMessageServiceEdit:
    def test_sender_edits_content(self, group_chat, alice):
        message = MessageFactory(chat=group_chat, sender=alice, content="tpyo")

        result = MessageService.edit(message, alice, " typo ")

        assert result.success is True
        message.refresh_from_db()
        assert message.content == "typo"
        assert message.edited_at is not None

    def test_other_user_fails_with_not_sender(self, group_chat, alice, bob):
        message = MessageFactory(chat=group_chat, sender=alice)

        result = MessageService.edit(message, bob, "hijack")

        assert result.error_code == "NOT_SENDER"

    def test_deleted_message_fails_with_already_deleted(self, group_chat, alice):
        message = MessageFactory(chat=group_chat, sender=alice, is_deleted=True)

        result = MessageService.edit(message, alice, "too late")

        assert result.error_code == "ALREADY_DELETED"

    def test_not_sender_is_checked_before_deleted(self, group_chat, alice, bob):
        message = MessageFactory(chat=group_chat, sender=alice, is_deleted=True)

        result = MessageService.edit(message, bob, "x")

        assert result.error_code == "NOT_SENDER"

    def test_empty_content_fails(self, group_chat, alice):
        message = MessageFactory(chat=group_chat, sender=alice)

        result = MessageService.edit(message, alice, "  ")

        assert result.error_code == "EMPTY_CONTENT"

    def test_publishes_message_edited(
        self, group_chat, alice, django_capture_on_commit_callbacks
    ):
        message = MessageFactory(chat=group_chat, sender=alice)

        with patch.object(RelayService, "publish") as mock_publish:
            with django_capture_on_commit_callbacks(execute=True):
                MessageService.edit(message, alice, "fixed")

        _, event = mock_publish.call_args.args
        assert event["event"] == "message.edited"
        assert event["data"]["content"] == "fixed"
        assert event["data"]["is_edited"] is True


@pytest.mark.django_db
class TestMessageServiceDelete:
    def test_sender_soft_deletes(self, group_chat, alice):
        message = MessageFactory(chat=group_chat, sender=alice, content="oops")

        result = MessageService.delete(message, alice)

        assert result.success is True
        message.refresh_from_db()
        assert message.is_deleted is True
        assert message.deleted_at is not None
        assert message.deleted_by == alice
        assert message.content == "oops"

    def test_other_user_fails_with_not_sender(self, group_chat, alice, bob):
        message = MessageFactory(chat=group_chat, sender=alice)

        result = MessageService.delete(message, bob)

        assert result.error_code == "NOT_SENDER"

    def test_second_delete_fails_with_already_deleted(self, group_chat, alice):
        message = MessageFactory(chat=group_chat, sender=alice)
        MessageService.delete(message, alice)

        result = MessageService.delete(message, alice)

        assert result.error_code == "ALREADY_DELETED"

    def test_publishes_message_deleted(
        self, group_chat, alice, django_capture_on_commit_callbacks
    ):
        message = MessageFactory(chat=group_chat, sender=alice)

        with patch.object(RelayService, "publish") as mock_publish:
            with django_capture_on_commit_callbacks(execute=True):
                MessageService.delete(message, alice)

        _, event = mock_publish.call_args.args
        assert event == {
            "event": "message.deleted",
            "data": {"id": message.pk, "chat_id": group_chat.pk},
        }


# =============================================================================
# MessageService.search / get_message
# =============================================================================


@pytest.mark.django_db
class TestMessageServiceSearch:
    def test_case_insensitive_substring(self, group_chat, alice):
        hit = MessageFactory(chat=group_chat, sender=alice, content="Lunch at NOON")
        MessageFactory(chat=group_chat, sender=alice, content="dinner")

        result = MessageService.search(group_chat, "noon")

        assert result.data == [hit]

    def test_excludes_deleted_and_other_chats(self, group_chat, individual_chat, alice):
        MessageFactory(chat=group_chat, sender=alice, content="noon", is_deleted=True)
        MessageFactory(chat=individual_chat, sender=alice, content="noon")

        assert MessageService.search(group_chat, "noon").data == []

    def test_newest_first_with_limit(self, group_chat, alice):
        older = MessageFactory(chat=group_chat, sender=alice, content="noon one")
        newer = MessageFactory(chat=group_chat, sender=alice, content="noon two")

        assert MessageService.search(group_chat, "noon").data == [newer, older]
        assert MessageService.search(group_chat, "noon", limit=1).data == [newer]

    def test_short_query_fails(self, group_chat):
        result = MessageService.search(group_chat, " a ")

        assert result.error_code == "QUERY_TOO_SHORT"


@pytest.mark.django_db
class TestMessageServiceGetMessage:
    def test_returns_message(self, group_chat, alice):
        message = MessageFactory(chat=group_chat, sender=alice)

        assert MessageService.get_message(message.pk).data == message

    def test_missing_message_fails_with_not_found(self, db):
        assert MessageService.get_message(999999).error_code == "NOT_FOUND"


# =============================================================================
# RelayService
# =============================================================================


class TestRelayService:
    def test_group_name(self):
        assert RelayService.group_name(12) == "chat_12"

    def test_publish_sends_to_chat_group(self):
        with patch("chat.services.get_channel_layer") as mock_get_layer:
            with patch("chat.services.async_to_sync") as mock_async_to_sync:
                sent = RelayService.publish(
                    7, RelayService.event("message.deleted", {"id": 1})
                )

        assert sent is True
        mock_async_to_sync.assert_called_once_with(
            mock_get_layer.return_value.group_send
        )
        mock_async_to_sync.return_value.assert_called_once_with(
            "chat_7",
            {"type": "relay.event", "event": "message.deleted", "data": {"id": 1}},
        )

    def test_publish_without_layer_returns_false(self):
        with patch("chat.services.get_channel_layer", return_value=None):
            assert RelayService.publish(7, RelayService.event("x", {})) is False

    def test_publish_failure_is_logged_and_swallowed(self):
        with patch("chat.services.get_channel_layer"):
            with patch("chat.services.async_to_sync") as mock_async_to_sync:
                mock_async_to_sync.return_value.side_effect = OSError("down")

                assert RelayService.publish(7, RelayService.event("x", {})) is False

    @pytest.mark.django_db
    def test_relay_failure_does_not_roll_back_send(
        self, group_chat, alice, django_capture_on_commit_callbacks
    ):
        with patch("chat.services.get_channel_layer", side_effect=RuntimeError("boom")):
            with django_capture_on_commit_callbacks(execute=True):
                result = MessageService.send(group_chat, alice, "still saved")

        assert result.success is True
        assert Message.objects.filter(content="still saved").exists()
