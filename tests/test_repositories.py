"""HTTP data source, repositories and metadata service mapping."""

from __future__ import annotations

import httpx
import pytest

from tastematch.errors import ApiError, UnknownMetadataTypeError
from tastematch.events import DomainEventChannel
from tastematch.models.feedback import FeedbackType
from tastematch.models.recommendation import RecommendationType
from tastematch.services.api_client import ApiDataSource
from tastematch.services.feedback_repository import FeedbackRepository
from tastematch.services.metadata_service import MetadataService
from tastematch.services.recommendation_repository import RecommendationRepository
from tastematch.use_cases.submit_feedback import SubmitFeedbackUseCase

from conftest import USER_ID, make_insight


class TestApiDataSource:
    @pytest.mark.asyncio
    async def test_error_field_becomes_message(self, data_source):
        with pytest.raises(ApiError) as exc_info:
            await data_source.query("/api/recommendations/12345")
        assert str(exc_info.value) == "Recommendation not found"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_reason_phrase_when_body_has_no_error(self, data_source, backend):
        backend.failing_insights.add("1")
        with pytest.raises(ApiError, match="Bad Gateway") as exc_info:
            await data_source.query(f"/api/users/{USER_ID}/recommendations/1/metadata")
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_transport_failure_is_wrapped(self, settings):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="http://test")
        async with ApiDataSource(settings, client=client) as source:
            with pytest.raises(ApiError) as exc_info:
                await source.query("/api/recommendations/1")
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        await client.aclose()


class TestRecommendationRepository:
    @pytest.mark.asyncio
    async def test_maps_dto_to_domain(self, data_source):
        repo = RecommendationRepository(data_source)
        [first, second] = await repo.find_by_user_and_type(USER_ID, RecommendationType.MUSIC)

        assert first.id == "1"
        assert first.type is RecommendationType.MUSIC
        assert [i.id for i in first.items] == ["a1", "a2"]
        assert first.items[0].details == {"genre": "jazz"}
        assert first.items[0].confidence == 0.8
        assert first.title == "Set 1"
        assert first.created_at.year == 2025
        assert second.id == "2"

    @pytest.mark.asyncio
    async def test_find_by_id_missing_is_none(self, data_source):
        assert await RecommendationRepository(data_source).find_by_id("999") is None

    @pytest.mark.asyncio
    async def test_find_by_id_malformed_payload_raises(self, data_source, backend):
        backend.recommendations["500"] = {"broken": True}
        with pytest.raises(ValueError):
            await RecommendationRepository(data_source).find_by_id("500")

    @pytest.mark.asyncio
    async def test_reason(self, data_source):
        reason = await RecommendationRepository(data_source).get_reason(USER_ID, "1")
        assert reason.primary_reason == "Matches your favourite genres"
        assert reason.related_items[0].similarity == 0.7


class TestFeedbackRepository:
    @pytest.mark.asyncio
    async def test_history_has_no_item_ids(self, data_source):
        submit = SubmitFeedbackUseCase(
            FeedbackRepository(data_source),
            RecommendationRepository(data_source),
            DomainEventChannel(),
        )
        await submit.execute(USER_ID, "1", "a1", FeedbackType.DISLIKE)
        await submit.execute(USER_ID, "2", "b1", FeedbackType.LIKE)

        repo = FeedbackRepository(data_source)
        by_user = await repo.find_by_user_id(USER_ID)
        by_rec = await repo.find_by_recommendation_id("2")

        assert [(f.recommendation_id, f.type) for f in by_user] == [
            ("1", FeedbackType.DISLIKE),
            ("2", FeedbackType.LIKE),
        ]
        assert all(f.item_id == "" for f in by_user)
        assert [f.id for f in by_rec] == ["2"]


class TestMetadataService:
    @pytest.mark.asyncio
    async def test_unknown_metadata_type(self, data_source, backend):
        backend.insights["1"] = make_insight(1, factor_type="producer")
        with pytest.raises(UnknownMetadataTypeError, match="producer"):
            await MetadataService(data_source).get_insight_for_recommendation(USER_ID, "1")
