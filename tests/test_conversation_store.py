import asyncio
import threading

import pytest

from app.core.prompts import greeting_text, instruction_text
from app.core.types import Speaker
from app.providers.gemini import CompletionError
from app.runtime_state import APOLOGY_TEXT, ConversationStore

from conftest import FakeProvider


def _speakers(store, key):
    return [t.speaker for t in store.snapshot(key)]


def test_new_transcript_starts_with_seed_pair(store):
    transcript = store.get_or_create("k1")
    assert len(transcript) == 2
    first, second = transcript.turns
    assert first.speaker is Speaker.USER
    assert first.text == instruction_text()
    assert second.speaker is Speaker.MODEL
    assert second.text == greeting_text()


def test_seed_greeting_uses_username(store):
    transcript = store.get_or_create("k1", username="Asha")
    assert transcript.turns[1].text.startswith("Hello Asha!")
    assert "Kalvium specialist" in transcript.turns[1].text


def test_get_or_create_is_idempotent(store):
    first = store.get_or_create("k1", username="Asha")
    again = store.get_or_create("k1", username="Someone Else")
    assert again is first
    assert len(again) == 2
    assert again.turns[1].text.startswith("Hello Asha!")


def test_append_requires_existing_transcript(store):
    with pytest.raises(KeyError):
        store.append("missing", Speaker.USER, "hi")


def test_append_adds_turn_at_end(store):
    store.get_or_create("k1")
    turn = store.append("k1", Speaker.USER, "hello")
    assert store.snapshot("k1")[-1] == turn
    assert len(store.snapshot("k1")) == 3


def test_get_returns_copy(store):
    store.get_or_create("k1")
    copy = store.get("k1")
    copy.turns.clear()
    assert len(store.snapshot("k1")) == 2
    assert store.get("unknown") is None


def test_concurrent_creation_seeds_once(store):
    results = []

    def worker():
        results.append(store.get_or_create("shared"))

    threads = [threading.Thread(target=worker) for _ in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert all(r is results[0] for r in results)
    assert len(store.snapshot("shared")) == 2
    assert len(store) == 1


@pytest.mark.asyncio
async def test_submit_sends_full_transcript_and_records_pair(store):
    provider = FakeProvider(replies=["first answer", "second answer"])

    r1 = await store.submit("k1", "What is Kalvium?", provider.complete)
    r2 = await store.submit("k1", "Tell me more", provider.complete)

    assert r1.ok and r1.text == "first answer"
    assert r2.ok and r2.text == "second answer"

    # second call saw seed + first exchange + new user turn
    sent = provider.calls[1]
    assert [t.text for t in sent[2:]] == ["What is Kalvium?", "first answer", "Tell me more"]
    assert len(store.snapshot("k1")) == 6


@pytest.mark.asyncio
async def test_length_after_n_submits_is_two_plus_two_n(store, provider):
    for n in range(1, 6):
        await store.submit("k1", f"message {n}", provider.complete)
        assert len(store.snapshot("k1")) == 2 + 2 * n

    after_seed = _speakers(store, "k1")[2:]
    assert after_seed == [Speaker.USER, Speaker.MODEL] * 5


@pytest.mark.asyncio
async def test_failed_completion_records_nothing(store):
    good = FakeProvider()
    await store.submit("k1", "hello", good.complete)
    before = store.snapshot("k1")

    bad = FakeProvider(error=CompletionError("provider down"))
    result = await store.submit("k1", "are you there?", bad.complete)

    assert not result.ok
    assert result.text == APOLOGY_TEXT
    assert store.snapshot("k1") == before


@pytest.mark.asyncio
async def test_failed_first_completion_keeps_seed_only(store, failing_provider):
    result = await store.submit("k1", "hello", failing_provider.complete)
    assert not result.ok
    assert len(store.snapshot("k1")) == 2


@pytest.mark.asyncio
async def test_unexpected_errors_propagate_without_mutation(store):
    bad = FakeProvider(error=ValueError("bug"))
    with pytest.raises(ValueError):
        await store.submit("k1", "hello", bad.complete)
    assert len(store.snapshot("k1")) == 2


@pytest.mark.asyncio
async def test_concurrent_submits_same_key_never_interleave(store):
    provider = FakeProvider(delay=0.01)
    await asyncio.gather(*(store.submit("k1", f"m{i}", provider.complete) for i in range(10)))

    turns = store.snapshot("k1")
    assert len(turns) == 2 + 2 * 10
    assert [t.speaker for t in turns[2:]] == [Speaker.USER, Speaker.MODEL] * 10
    for user, model in zip(turns[2::2], turns[3::2]):
        assert model.text == f"echo: {user.text}"
    # exactly one seed pair
    assert sum(1 for t in turns if t.text == instruction_text()) == 1


@pytest.mark.asyncio
async def test_concurrent_submits_distinct_keys_are_isolated(store):
    provider = FakeProvider(delay=0.01)
    await asyncio.gather(
        *(store.submit(f"key-{i % 3}", f"from {i % 3}", provider.complete) for i in range(9))
    )

    for k in range(3):
        turns = store.snapshot(f"key-{k}")
        assert len(turns) == 2 + 2 * 3
        assert {t.text for t in turns[2::2]} == {f"from {k}"}

    for sent in provider.calls:
        owner = sent[-1].text
        assert all(t.text == owner for t in sent[2:-1:2])


@pytest.mark.asyncio
async def test_history_cap_keeps_seed_and_recent_pairs():
    store = ConversationStore(max_history_turns=4)
    provider = FakeProvider()
    for i in range(5):
        await store.submit("k1", f"m{i}", provider.complete)

    turns = store.snapshot("k1")
    assert len(turns) == 2 + 4
    assert turns[0].text == instruction_text()
    assert [t.text for t in turns[2:]] == ["m3", "echo: m3", "m4", "echo: m4"]


@pytest.mark.asyncio
async def test_odd_history_cap_rounds_down_to_pairs():
    store = ConversationStore(max_history_turns=5)
    provider = FakeProvider()
    for i in range(4):
        await store.submit("k1", f"m{i}", provider.complete)

    speakers = _speakers(store, "k1")[2:]
    assert speakers == [Speaker.USER, Speaker.MODEL] * 2


def test_history_cap_must_hold_one_exchange():
    with pytest.raises(ValueError):
        ConversationStore(max_history_turns=1)
