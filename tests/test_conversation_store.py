import json

from models.chat_models import Message, MessageStatus, Sender
from services.session.conversation_store import ConversationStore
from services.session.state_slot import JsonStateSlot


def test_persisted_conversation_survives_reload(tmp_path):
    slot = JsonStateSlot(tmp_path / "session.json")
    store = ConversationStore(slot)
    first = Message.create(Sender.USER, MessageStatus.DELIVERED, text="I feel dizzy")
    second = Message.create(Sender.ASSISTANT, MessageStatus.DELIVERED, text="Since when?")
    store.append(first)
    store.append(second)
    store.persist()

    restored = ConversationStore.load(slot)
    assert [msg.id for msg in restored.messages] == [first.id, second.id]
    assert restored.messages[1].sender is Sender.ASSISTANT
    assert restored.messages[0].timestamp == first.timestamp


def test_stored_entries_use_camel_case_media_keys(tmp_path, image_data_url):
    slot = JsonStateSlot(tmp_path / "session.json")
    store = ConversationStore(slot)
    store.append(Message.create(Sender.USER, MessageStatus.DELIVERED, text="", image_data=image_data_url))
    store.persist()

    raw = json.loads(slot.path.read_text())
    assert raw[0]["imageData"] == image_data_url
    assert raw[0]["sender"] == "user"


def test_legacy_and_malformed_entries(tmp_path):
    path = tmp_path / "session.json"
    path.write_text(json.dumps([
        {"id": "1", "sender": "ai", "status": "delivered", "text": "Hello"},
        {"id": "2", "sender": "robot", "status": "delivered", "text": "?"},
        {"sender": "user"},
    ]))
    store = ConversationStore.load(JsonStateSlot(path))
    assert len(store) == 1
    assert store.messages[0].sender is Sender.ASSISTANT


def test_unreadable_slot_starts_empty(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json")
    assert len(ConversationStore.load(JsonStateSlot(path))) == 0


def test_mutations_replace_the_sequence():
    store = ConversationStore()
    before = store.messages
    placeholder = Message.placeholder("Thinking...")
    store.append(placeholder)
    assert before == ()
    assert store.messages == (placeholder,)
    store.remove(placeholder.id)
    assert store.messages == ()


def test_history_skips_placeholders_and_errors():
    store = ConversationStore()
    kept = Message.create(Sender.USER, MessageStatus.DELIVERED, text="hi")
    store.append(kept)
    store.append(Message.placeholder("Thinking..."))
    store.append(Message.create(Sender.ASSISTANT, MessageStatus.ERROR, text="Sorry, error: x"))
    assert store.history() == (kept,)


def test_erase_removes_slot(tmp_path):
    slot = JsonStateSlot(tmp_path / "nested" / "session.json")
    store = ConversationStore(slot)
    store.append(Message.create(Sender.USER, MessageStatus.DELIVERED, text="hi"))
    store.persist()
    assert slot.path.exists()

    store.erase()
    assert len(store) == 0
    assert not slot.path.exists()
    store.erase()
