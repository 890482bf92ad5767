"""自动学习单元测试"""

import json

import pytest


@pytest.fixture
def learning_service(mock_llm_service):
    from common.config import LearningConfig
    from services.learning_service import LearningService

    return LearningService(
        mock_llm_service, LearningConfig(max_new_items=3, max_items_per_category=4)
    )


class TestParse:
    """LLM 回复解析"""

    def test_tolerates_surrounding_text(self, learning_service):
        text = 'Sure! Here it is:\n```json\n{"topics": ["cooking"], "facts": []}\n```'
        learned = learning_service.parse(text)
        assert learned.topics == ["cooking"]
        assert learned.facts == []
        assert learned.interests == []

    def test_trims_drops_and_caps(self, learning_service):
        text = json.dumps({"interests": [" a ", "", "b", 3, "c", "d"]})
        learned = learning_service.parse(text)
        assert learned.interests == ["a", "b", "c"]

    @pytest.mark.parametrize("text", ["", "no json here", "{not valid json}", "[1, 2]"])
    def test_unparseable_returns_none(self, learning_service, text):
        assert learning_service.parse(text) is None


class TestMerge:
    """合并进已有背景"""

    def test_existing_first_then_new(self, learning_service):
        from storage.models.preferences import LearnedInfo, UserContext

        existing = UserContext(topics=["python"])
        merged = learning_service.merge(existing, LearnedInfo(topics=["rust", "python"]))
        assert merged.topics == ["python", "rust"]

    def test_merge_is_idempotent(self, learning_service):
        from storage.models.preferences import LearnedInfo, UserContext

        learned = LearnedInfo(facts=["has a cat"], interests=["jazz"])
        once = learning_service.merge(UserContext(facts=["works remotely"]), learned)
        twice = learning_service.merge(once, learned)
        assert once == twice

    def test_caps_each_category(self, learning_service):
        from storage.models.preferences import LearnedInfo, UserContext

        existing = UserContext(topics=["a", "b", "c"])
        merged = learning_service.merge(existing, LearnedInfo(topics=["d", "e"]))
        assert merged.topics == ["a", "b", "c", "d"]

    def test_accepts_labelled_text(self, learning_service):
        from storage.models.preferences import LearnedInfo

        merged = learning_service.merge(
            "Topics: python\nFacts: lives in Lima", LearnedInfo(facts=["has a cat"])
        )
        assert merged.topics == ["python"]
        assert merged.facts == ["lives in Lima", "has a cat"]

    def test_has_new_learnings(self):
        from services.learning_service import LearningService
        from storage.models.preferences import LearnedInfo

        assert not LearningService.has_new_learnings(None)
        assert not LearningService.has_new_learnings(LearnedInfo())
        assert LearningService.has_new_learnings(LearnedInfo(topics=["x"]))


class TestExtract:
    """调用 LLM 提取"""

    @pytest.mark.asyncio
    async def test_prompt_includes_exchange(self, learning_service, mock_llm_service):
        from storage.models.preferences import UserContext

        learned = await learning_service.extract(
            "I just moved to Madrid", "Welcome to Madrid!", UserContext(topics=["travel"])
        )

        prompt = mock_llm_service.extract.call_args.args[0]
        assert "I just moved to Madrid" in prompt
        assert "Welcome to Madrid!" in prompt
        assert "Topics: travel" in prompt
        assert learned.facts == ["lives in Madrid"]

    @pytest.mark.asyncio
    async def test_llm_failure_returns_none(self, learning_service, mock_llm_service):
        from common.exceptions import LLMError

        mock_llm_service.extract.side_effect = LLMError("boom")
        assert await learning_service.extract("hi", "hello") is None


class TestUserContextText:
    """背景文本渲染与解析"""

    def test_renders_non_empty_sections(self):
        from storage.models.preferences import UserContext

        context = UserContext(topics=["a", "b"], facts=["c"])
        assert context.to_text() == "Topics: a, b\nFacts: c"
        assert UserContext().to_text() == ""

    def test_parse_missing_labels_as_empty(self):
        from storage.models.preferences import UserContext

        context = UserContext.from_text("Interests: chess, go")
        assert context.interests == ["chess", "go"]
        assert context.topics == []
        assert UserContext.from_text(None).is_empty()


class TestMergeCap:

    def test_repeated_merges_stay_capped(self):
        from common.config import LearningConfig
        from services.learning_service import LearningService
        from storage.models.preferences import LearnedInfo, UserContext

        service = LearningService(object(), LearningConfig())
        context = UserContext()
        for round_no in range(6):
            topics = [f"topic-{round_no}-{i}" for i in range(3)]
            context = service.merge(context, LearnedInfo(topics=topics))
            assert len(context.topics) <= 10

        assert len(context.topics) == 10
        assert context.topics[0] == "topic-0-0"
