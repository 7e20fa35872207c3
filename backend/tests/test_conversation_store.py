"""
Tests for conversation/message persistence.
"""
from sqlalchemy import func, select

from convochat.models.conversation import Conversation, DEFAULT_TITLE
from convochat.models.message import ChatMessage, MessageRole


async def test_create_conversation_uses_placeholder_title(store, alice):
    conversation = await store.create_conversation(alice)
    await store.commit()

    assert conversation.id is not None
    assert conversation.user_id == alice.id
    assert conversation.title == DEFAULT_TITLE


async def test_create_conversation_with_title(store, alice):
    conversation = await store.create_conversation(alice, "  Trip planning ")
    assert conversation.title == "Trip planning"


async def test_find_conversation_is_owner_scoped(store, alice, bob):
    conversation = await store.create_conversation(alice)
    await store.commit()

    assert (await store.find_conversation(conversation.id, alice)).id == conversation.id
    assert await store.find_conversation(conversation.id, bob) is None
    assert await store.find_conversation(999999, alice) is None


async def test_messages_keep_append_order_across_interleaved_conversations(store, alice):
    first = await store.create_conversation(alice)
    second = await store.create_conversation(alice)

    for i in range(5):
        await store.append_message(first, MessageRole.USER, f"first-{i}")
        await store.append_message(second, MessageRole.USER, f"second-{i}")
        await store.append_message(first, MessageRole.ASSISTANT, f"first-reply-{i}")
    await store.commit()

    first_messages = await store.messages_ordered(first)
    second_messages = await store.messages_ordered(second)

    expected_first = []
    for i in range(5):
        expected_first += [f"first-{i}", f"first-reply-{i}"]
    assert [m.content for m in first_messages] == expected_first
    assert [m.content for m in second_messages] == [f"second-{i}" for i in range(5)]


async def test_append_message_timestamps_strictly_increase(store, alice):
    conversation = await store.create_conversation(alice)
    for i in range(10):
        await store.append_message(conversation, MessageRole.USER, f"m{i}")

    messages = await store.messages_ordered(conversation)
    timestamps = [m.created_at for m in messages]
    assert all(a < b for a, b in zip(timestamps, timestamps[1:]))
    assert conversation.updated_at == timestamps[-1]


async def test_append_message_stores_role_value(store, alice):
    conversation = await store.create_conversation(alice)
    message = await store.append_message(conversation, MessageRole.ASSISTANT, "hi")
    assert message.role == "assistant"


async def test_message_count_and_update_title(store, alice):
    conversation = await store.create_conversation(alice)
    await store.append_message(conversation, MessageRole.USER, "a")
    await store.append_message(conversation, MessageRole.ASSISTANT, "b")

    assert await store.message_count(conversation) == 2

    await store.update_title(conversation, "Renamed")
    await store.commit()
    assert (await store.find_conversation(conversation.id, alice)).title == "Renamed"


async def test_delete_conversation_cascade_removes_messages(store, db, alice):
    conversation = await store.create_conversation(alice)
    await store.append_message(conversation, MessageRole.USER, "a")
    await store.append_message(conversation, MessageRole.ASSISTANT, "b")
    await store.commit()
    conversation_id = conversation.id

    await store.delete_conversation_cascade(conversation)
    await store.commit()

    assert await store.find_conversation(conversation_id, alice) is None
    result = await db.execute(
        select(func.count(ChatMessage.id)).where(ChatMessage.conversation_id == conversation_id)
    )
    assert result.scalar_one() == 0


async def test_list_conversations_newest_first_and_owner_only(store, alice, bob):
    older = await store.create_conversation(alice, "older")
    newer = await store.create_conversation(alice, "newer")
    await store.create_conversation(bob, "not mine")
    await store.commit()

    conversations = await store.list_conversations(alice)
    assert [c.id for c in conversations] == [newer.id, older.id]


async def test_rollback_discards_uncommitted_work(store, db, alice):
    conversation = await store.create_conversation(alice)
    conversation_id = conversation.id
    await store.append_message(conversation, MessageRole.USER, "lost")
    await store.rollback()

    result = await db.execute(select(Conversation).where(Conversation.id == conversation_id))
    assert result.scalar_one_or_none() is None
