"""Tests for ChatManager - the classify, reply and publish flow."""
import random
import pytest
from unittest.mock import MagicMock

from carelink.shared.models import Sender
from carelink.shared.utils import configure_pii_salt, hash_pii
from carelink.services.chat_service.chat_manager import ChatManager
from carelink.services.chat_service.config import (
    ChatConfig,
    CRISIS_ESCALATION_REPLY,
    SUPPORTIVE_RESPONSES,
    WELCOME_MESSAGE,
)
from carelink.services.chat_service.errors import ChatNotFoundError, EmptyMessageError
from carelink.services.chat_service.responder import AssistantResponder
from carelink.services.safety_service.detector import EmergencyMatch


@pytest.fixture(autouse=True)
def setup_pii_salt():
    """Configure PII salt before each test."""
    configure_pii_salt("test_salt_that_is_at_least_32_characters_long")


@pytest.fixture
def publisher():
    mock = MagicMock()
    mock.publish_flagged.return_value = True
    return mock


@pytest.fixture
def manager(publisher):
    return ChatManager(
        responder=AssistantResponder(rng=random.Random(0)),
        publisher=publisher,
    )


class TestStartChat:

    def test_chat_opens_with_welcome(self, manager):
        chat = manager.start_chat(user_id="user1")

        assert len(chat.messages) == 1
        assert chat.messages[0].sender is Sender.AI
        assert chat.messages[0].content == WELCOME_MESSAGE
        assert chat.is_emergency is False


class TestSendUserMessage:

    def test_normal_message_gets_supportive_reply(self, manager, publisher):
        chat = manager.start_chat(user_id="user1")

        turn = manager.send_user_message(chat.id, "I've been feeling really anxious lately.")

        assert turn.message.is_emergency is False
        assert turn.message.sender is Sender.USER
        assert turn.reply.sender is Sender.AI
        assert turn.reply.content in SUPPORTIVE_RESPONSES
        assert turn.chat.is_emergency is False
        publisher.publish_flagged.assert_not_called()

    def test_emergency_message_gets_crisis_reply(self, manager):
        chat = manager.start_chat(user_id="user1")

        turn = manager.send_user_message(chat.id, "I don't want to live anymore.")

        assert turn.message.is_emergency is True
        assert turn.reply.content == CRISIS_ESCALATION_REPLY
        assert turn.reply.is_emergency is False
        assert turn.chat.is_emergency is True

    def test_messages_appended_in_order(self, manager):
        chat = manager.start_chat(user_id="user1")

        turn = manager.send_user_message(chat.id, "hello")

        assert chat.messages == [chat.messages[0], turn.message, turn.reply]

    def test_content_stored_verbatim(self, manager):
        chat = manager.start_chat(user_id="user1")

        turn = manager.send_user_message(chat.id, "  I WANT TO END MY LIFE  ")

        assert turn.message.content == "  I WANT TO END MY LIFE  "
        assert turn.message.is_emergency is True

    def test_emergency_publishes_event(self, manager, publisher):
        chat = manager.start_chat(user_id="user1")

        turn = manager.send_user_message(chat.id, "please stop hurting me", user_id="user1")

        publisher.publish_flagged.assert_called_once()
        call_kwargs = publisher.publish_flagged.call_args.kwargs
        assert call_kwargs["chat_id"] == chat.id
        assert call_kwargs["message_id"] == turn.message.id
        assert call_kwargs["user_id_hash"] == hash_pii("user1")
        assert call_kwargs["match"] == EmergencyMatch(category="abuse", phrase="hurting me")

    def test_publish_failure_does_not_block_reply(self, manager, publisher):
        publisher.publish_flagged.return_value = False
        chat = manager.start_chat(user_id="user1")

        turn = manager.send_user_message(chat.id, "I want to kill myself")

        assert turn.reply.content == CRISIS_ESCALATION_REPLY

    def test_publishing_disabled_by_config(self, publisher):
        manager = ChatManager(publisher=publisher, config=ChatConfig(publish_emergencies=False))
        chat = manager.start_chat(user_id="user1")

        manager.send_user_message(chat.id, "I want to kill myself")

        publisher.publish_flagged.assert_not_called()

    def test_no_publisher(self):
        manager = ChatManager()
        chat = manager.start_chat(user_id="user1")

        turn = manager.send_user_message(chat.id, "I want to kill myself")

        assert turn.chat.is_emergency is True

    def test_chat_stays_flagged(self, manager):
        chat = manager.start_chat(user_id="user1")
        manager.send_user_message(chat.id, "I want to end my life")

        turn = manager.send_user_message(chat.id, "Actually I'm feeling a bit better now")

        assert turn.message.is_emergency is False
        assert turn.reply.content in SUPPORTIVE_RESPONSES
        assert turn.chat.is_emergency is True
        assert manager.store.emergency_chats() == [chat]

    @pytest.mark.parametrize("content", ["", "   ", "\n\t"])
    def test_blank_message_rejected(self, manager, content):
        chat = manager.start_chat(user_id="user1")

        with pytest.raises(EmptyMessageError):
            manager.send_user_message(chat.id, content)

        assert len(chat.messages) == 1

    def test_unknown_chat_raises(self, manager):
        with pytest.raises(ChatNotFoundError):
            manager.send_user_message("missing", "hello")


class TestCounselorMessages:

    def test_counselor_message_never_flagged(self, manager):
        chat = manager.start_chat(user_id="user1")

        message = manager.add_counselor_message(
            chat.id, "If you want to hurt yourself or end my life... tell me", counselor_id="1",
        )

        assert message.sender is Sender.COUNSELOR
        assert message.is_emergency is False
        assert chat.is_emergency is False
        assert chat.counselor_id == "1"

    def test_blank_counselor_message_rejected(self, manager):
        chat = manager.start_chat(user_id="user1")
        with pytest.raises(EmptyMessageError):
            manager.add_counselor_message(chat.id, " ")


class TestSeedDemoChats:

    def test_seeds_two_chats(self, manager):
        seeded = manager.seed_demo_chats()

        assert [chat.id for chat in seeded] == ["1", "2"]
        assert len(manager.store) == 2

    def test_only_second_demo_chat_is_emergency(self, manager):
        manager.seed_demo_chats()

        assert [chat.id for chat in manager.store.emergency_chats()] == ["2"]
        flagged = manager.store.get_chat("2")
        assert [m.is_emergency for m in flagged.messages] == [True, False]
        assert flagged.messages[1].sender is Sender.COUNSELOR

    def test_seeding_does_not_publish(self, manager, publisher):
        manager.seed_demo_chats()
        publisher.publish_flagged.assert_not_called()


class TestFailureOrdering:
    """Nothing is stored when a step before the store write fails."""

    def test_start_chat_without_salt_stores_nothing(self, publisher):
        from carelink.shared.utils import pii

        manager = ChatManager(publisher=publisher)
        pii._salt = None

        with pytest.raises(RuntimeError):
            manager.start_chat(user_id="user1")

        assert len(manager.store) == 0

    def test_lone_surrogate_is_flagged_and_published(self, manager, publisher):
        chat = manager.start_chat(user_id="user1")

        turn = manager.send_user_message(chat.id, "I want to end my life \ud800")

        assert turn.message.is_emergency is True
        assert turn.reply.content == CRISIS_ESCALATION_REPLY
        publisher.publish_flagged.assert_called_once()


class TestConcurrentSends:

    def test_each_reply_follows_its_message(self, manager):
        from concurrent.futures import ThreadPoolExecutor

        chat = manager.start_chat(user_id="user1")
        texts = [f"message {i}" for i in range(200)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda text: manager.send_user_message(chat.id, text), texts))

        turns = chat.messages[1:]
        assert len(turns) == 400
        for user_message, reply in zip(turns[0::2], turns[1::2]):
            assert user_message.sender is Sender.USER
            assert reply.id == f"ai_{user_message.id}"


class TestCounselorAssignment:

    def test_existing_counselor_kept(self, manager):
        chat = manager.start_chat(user_id="user1", counselor_id="1")

        manager.add_counselor_message(chat.id, "Hello there", counselor_id="2")

        assert manager.store.get_chat(chat.id).counselor_id == "1"
