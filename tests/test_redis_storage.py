from core.redis_storage import ContextStorage


def test_blank_context_for_new_user(fake_redis):
    context = ContextStorage(redis_client=fake_redis).get_context("nobody")
    assert context.destination is None
    assert context.activities == []


def test_update_persists_with_ttl(fake_redis):
    storage = ContextStorage(redis_client=fake_redis)
    storage.update_context("u1", {"destination": "Lisbon", "activities": ["beach"]})

    assert fake_redis.ttls["travel_assistant:u1:context"] == 1800
    context = storage.get_context("u1")
    assert context.destination == "Lisbon"
    assert context.activities == ["beach"]
    assert context.updated_at is not None


def test_ttl_from_environment(fake_redis, monkeypatch):
    monkeypatch.setenv("CONTEXT_TTL_SECONDS", "60")
    storage = ContextStorage(redis_client=fake_redis)
    storage.update_context("u1", {"destination": "Oslo"})
    assert fake_redis.ttls["travel_assistant:u1:context"] == 60


def test_none_and_unknown_fields_do_not_clobber(fake_redis):
    storage = ContextStorage(redis_client=fake_redis)
    storage.update_context("u1", {"destination": "Lisbon"})
    context = storage.update_context("u1", {"destination": None, "last_intent": "weather", "mood": "happy"})

    assert context.destination == "Lisbon"
    assert context.last_intent == "weather"


def test_clear_context_forgets_everything(fake_redis):
    storage = ContextStorage(redis_client=fake_redis)
    storage.update_context("u1", {"destination": "Lisbon"})
    storage.save_turn("u1", "hi", "hello")

    storage.clear_context("u1")

    assert storage.get_context("u1").destination is None
    assert storage.get_history("u1") == []


def test_history_is_capped_and_reads_oldest_first(fake_redis):
    storage = ContextStorage(redis_client=fake_redis)
    for i in range(55):
        storage.save_turn("u1", f"question {i}", f"answer {i}", "general")

    assert len(fake_redis.lists["travel_assistant:u1:history"]) == 50
    recent = storage.get_history("u1", limit=3)
    assert [turn["user"] for turn in recent] == ["question 52", "question 53", "question 54"]
    assert recent[-1]["intent"] == "general"


def test_corrupt_context_is_discarded(fake_redis):
    fake_redis.values["travel_assistant:u1:context"] = b"{not json"
    assert ContextStorage(redis_client=fake_redis).get_context("u1").destination is None


def test_empty_string_clears_a_field(fake_redis):
    storage = ContextStorage(redis_client=fake_redis)
    storage.update_context("u1", {"destination": "Lisbon", "time_reference": "next week"})
    context = storage.update_context("u1", {"destination": ""})

    assert context.destination is None
    assert context.time_reference == "next week"
