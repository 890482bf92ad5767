"""存储仓库单元测试"""

import asyncio

import pytest


class TestConversationRepository:
    """对话仓库"""

    @pytest.mark.asyncio
    async def test_create_and_get(self, conversation_repo):
        conversation = await conversation_repo.create("u1")

        loaded = await conversation_repo.get(conversation.id)
        assert loaded.user_id == "u1"
        assert loaded.title == "New Chat"
        assert loaded.message_count == 0

    @pytest.mark.asyncio
    async def test_get_rejects_path_like_ids(self, conversation_repo):
        assert await conversation_repo.get("../secrets") is None
        assert await conversation_repo.get("") is None

    @pytest.mark.asyncio
    async def test_messages_in_append_order(self, conversation_repo):
        conversation = await conversation_repo.create("u1")
        await conversation_repo.append_message(conversation.id, "user", "hi")
        await conversation_repo.append_message(conversation.id, "assistant", "hello!")

        messages = await conversation_repo.list_messages(conversation.id)
        assert [(m.role, m.content) for m in messages] == [
            ("user", "hi"),
            ("assistant", "hello!"),
        ]

    @pytest.mark.asyncio
    async def test_concurrent_appends_not_lost(self, conversation_repo):
        conversation = await conversation_repo.create("u1")
        await asyncio.gather(
            *(
                conversation_repo.append_message(conversation.id, "user", f"m{i}")
                for i in range(10)
            )
        )
        messages = await conversation_repo.list_messages(conversation.id)
        assert len(messages) == 10

    @pytest.mark.asyncio
    async def test_reads_during_appends_see_whole_documents(self, conversation_repo):
        """并发追加时，不加锁的读取只会拿到完整的旧版本或新版本"""
        conversation = await conversation_repo.create("u1")

        results = await asyncio.gather(
            *(
                conversation_repo.append_message(conversation.id, "user", f"m{i}")
                for i in range(50)
            ),
            *(conversation_repo.get(conversation.id) for _ in range(200)),
            *(conversation_repo.list_by_user("u1") for _ in range(20)),
        )

        loaded = results[50:250]
        assert all(c is not None and c.id == conversation.id for c in loaded)
        assert len(await conversation_repo.list_messages(conversation.id)) == 50
        leftovers = [p.name for p in conversation_repo._base_dir.iterdir() if p.suffix != ".json"]
        assert leftovers == []

    @pytest.mark.asyncio
    async def test_append_to_missing_conversation(self, conversation_repo):
        from common.exceptions import PersistenceError

        with pytest.raises(PersistenceError):
            await conversation_repo.append_message("conv-missing", "user", "hi")

    @pytest.mark.asyncio
    async def test_list_by_user(self, conversation_repo):
        await conversation_repo.create("u1", title="first")
        await conversation_repo.create("u2", title="other")
        await conversation_repo.create("u1", title="second")

        titles = [c.title for c in await conversation_repo.list_by_user("u1")]
        assert sorted(titles) == ["first", "second"]

    @pytest.mark.asyncio
    async def test_delete(self, conversation_repo):
        conversation = await conversation_repo.create("u1")
        assert await conversation_repo.delete(conversation.id) is True
        assert await conversation_repo.get(conversation.id) is None
        assert await conversation_repo.delete(conversation.id) is False

    @pytest.mark.asyncio
    async def test_rename(self, conversation_repo):
        conversation = await conversation_repo.create("u1")
        await conversation_repo.rename(conversation.id, "Trip plans")
        assert (await conversation_repo.get(conversation.id)).title == "Trip plans"


class TestPreferencesRepository:
    """偏好仓库"""

    @pytest.mark.asyncio
    async def test_default_not_persisted(self, preferences_repo):
        prefs = await preferences_repo.get_or_default("u1")
        assert prefs.response_mode == "balanced"
        assert prefs.communication_style == "friendly"
        assert await preferences_repo.get("u1") is None

    @pytest.mark.asyncio
    async def test_upsert_partial(self, preferences_repo):
        await preferences_repo.upsert("u1", response_mode="expert")
        prefs = await preferences_repo.upsert("u1", last_mood="happy")

        assert prefs.response_mode == "expert"
        assert prefs.last_mood == "happy"

    @pytest.mark.asyncio
    async def test_increment_interactions(self, preferences_repo):
        await asyncio.gather(*(preferences_repo.increment_interactions("u1") for _ in range(5)))
        assert (await preferences_repo.get("u1")).total_interactions == 5

    @pytest.mark.asyncio
    async def test_merge_context_uses_stored_value(self, preferences_repo):
        from storage.models.preferences import LearnedInfo, UserContext

        await preferences_repo.upsert("u1", user_context=UserContext(topics=["python"]))

        merged = await preferences_repo.merge_context(
            "u1", lambda current: current.merge(LearnedInfo(topics=["rust"]))
        )

        assert merged.topics == ["python", "rust"]
        assert (await preferences_repo.get("u1")).user_context.topics == ["python", "rust"]

    @pytest.mark.asyncio
    async def test_reads_during_context_merges(self, preferences_repo):
        """后台学习写偏好时，下一轮读取偏好不会失败"""
        from storage.models.preferences import LearnedInfo

        async def merge(i):
            return await preferences_repo.merge_context(
                "u1", lambda current: current.merge(LearnedInfo(facts=[f"fact {i}"]))
            )

        await preferences_repo.upsert("u1", last_mood="happy")
        results = await asyncio.gather(
            *(merge(i) for i in range(20)),
            *(preferences_repo.get_or_default("u1") for _ in range(100)),
        )

        assert all(prefs.last_mood == "happy" for prefs in results[20:])
