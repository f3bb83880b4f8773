"""Shared test configuration and fixtures.

The backend is a small FastAPI app held in memory and served to the client
through ``httpx.ASGITransport``, so every test goes through the real HTTP
code path.
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import pytest
import pytest_asyncio
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient

# Ensure the project root is on sys.path so `tastematch` resolves without installing
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tastematch.config import Settings  # noqa: E402
from tastematch.services.api_client import ApiDataSource  # noqa: E402

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


def make_recommendation(
    rec_id: int,
    user_id: str = USER_ID,
    type: str = "music",
    item_ids: tuple[str, ...] = ("a",),
) -> dict[str, Any]:
    return {
        "id": rec_id,
        "user_id": user_id,
        "type": type,
        "data": {
            "title": f"Set {rec_id}",
            "description": f"Recommendation set {rec_id}",
            "items": [
                {
                    "id": item_id,
                    "name": f"Item {item_id}",
                    "type": "album" if type == "music" else "film",
                    "details": {"genre": "jazz"},
                    "explanation": "Because you liked similar things",
                    "confidence": 0.8,
                }
                for item_id in item_ids
            ],
        },
        "created_at": "2025-03-01T12:00:00Z",
    }


def make_insight(rec_id: int, factor_type: str = "musicGenre") -> dict[str, Any]:
    return {
        "recommendationId": rec_id,
        "primaryFactors": [
            {"id": "g1", "type": factor_type, "name": "Jazz", "count": 4, "weight": 0.9}
        ],
        "secondaryFactors": [],
        "uniqueFactors": [
            {"id": "a1", "type": "artist", "name": "Miles Davis", "count": 1, "weight": 0.3}
        ],
    }


@dataclass
class FakeBackend:
    """In-memory stand-in for the recommendations API."""

    recommendations: dict[str, dict[str, Any]] = field(default_factory=dict)
    regenerated: dict[tuple[str, str], list[dict[str, Any]]] = field(default_factory=dict)
    reasons: dict[str, dict[str, Any]] = field(default_factory=dict)
    insights: dict[str, dict[str, Any]] = field(default_factory=dict)
    failing_reasons: set[str] = field(default_factory=set)
    failing_insights: set[str] = field(default_factory=set)
    feedback_error: Optional[tuple[int, Optional[str]]] = None
    list_error: Optional[int] = None
    saved_feedback: list[dict[str, Any]] = field(default_factory=list)
    weight_updates: list[dict[str, Any]] = field(default_factory=list)
    list_calls: list[dict[str, str]] = field(default_factory=list)
    list_gates: dict[str, asyncio.Event] = field(default_factory=dict)

    def add(self, recommendation: dict[str, Any]) -> dict[str, Any]:
        self.recommendations[str(recommendation["id"])] = recommendation
        return recommendation

    def build_app(self) -> FastAPI:
        app = FastAPI()

        @app.get("/api/users/{user_id}/recommendations")
        async def list_recommendations(user_id: str, type: str, force_refresh: str = "false"):
            self.list_calls.append({"user_id": user_id, "type": type, "force_refresh": force_refresh})
            if type in self.list_gates:
                await self.list_gates[type].wait()
            if self.list_error is not None:
                return JSONResponse(status_code=self.list_error, content={"error": "Listing failed"})
            if force_refresh == "true" and (user_id, type) in self.regenerated:
                for rec in self.regenerated[(user_id, type)]:
                    self.add(rec)
                return self.regenerated[(user_id, type)]
            return [
                rec
                for rec in self.recommendations.values()
                if rec["user_id"] == user_id and rec["type"] == type
            ]

        @app.get("/api/users/{user_id}/recommendations/{rec_id}/reason")
        async def reason(user_id: str, rec_id: str):
            if rec_id in self.failing_reasons:
                return JSONResponse(status_code=500, content={"error": "Reason service down"})
            return self.reasons.get(
                rec_id,
                {
                    "primaryReason": "Matches your favourite genres",
                    "detailedReasons": ["jazz"],
                    "relatedItems": [{"id": "x", "name": "Blue Train", "similarity": 0.7}],
                },
            )

        @app.get("/api/users/{user_id}/recommendations/{rec_id}/metadata")
        async def metadata(user_id: str, rec_id: str):
            if rec_id in self.failing_insights:
                return JSONResponse(status_code=502, content={})
            return self.insights.get(rec_id, make_insight(int(rec_id)))

        @app.post("/api/users/{user_id}/recommendations/{rec_id}/feedback")
        async def feedback(user_id: str, rec_id: str, request: Request):
            if self.feedback_error is not None:
                status, message = self.feedback_error
                content = {"error": message} if message else {}
                return JSONResponse(status_code=status, content=content)
            body = await request.json()
            row = {
                "id": len(self.saved_feedback) + 1,
                "recommendation_id": int(rec_id),
                "user_id": user_id,
                "feedback_type": body["feedback_type"],
                "created_at": "2025-03-01T12:05:00Z",
            }
            self.saved_feedback.append(row)
            return {"success": True, "feedback": row}

        @app.put("/api/users/{user_id}/metadata/weights")
        async def weights(user_id: str, request: Request):
            body = await request.json()
            self.weight_updates.append({"user_id": user_id, **body})
            return {"success": True}

        @app.get("/api/recommendations/{rec_id}")
        async def get_recommendation(rec_id: str):
            if rec_id not in self.recommendations:
                return JSONResponse(status_code=404, content={"error": "Recommendation not found"})
            return self.recommendations[rec_id]

        @app.get("/api/recommendations/{rec_id}/feedback")
        async def recommendation_feedback(rec_id: str):
            return [f for f in self.saved_feedback if str(f["recommendation_id"]) == rec_id]

        @app.get("/api/users/{user_id}/feedback")
        async def user_feedback(user_id: str):
            return [f for f in self.saved_feedback if f["user_id"] == user_id]

        return app


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="testing",
        api_base_url="http://test",
        card_enter_delay_seconds=0.0,
        swipe_exit_delay_seconds=0.0,
        log_format="console",
    )


@pytest.fixture
def backend() -> FakeBackend:
    backend = FakeBackend()
    backend.add(make_recommendation(1, item_ids=("a1", "a2")))
    backend.add(make_recommendation(2, item_ids=("b1",)))
    backend.add(make_recommendation(3, type="film", item_ids=("f1",)))
    backend.add(make_recommendation(9, user_id=OTHER_USER_ID, item_ids=("z1",)))
    return backend


@pytest_asyncio.fixture
async def data_source(backend, settings):
    transport = ASGITransport(app=backend.build_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield ApiDataSource(settings, client=client)
