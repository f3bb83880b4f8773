"""Prometheus metrics for the recommendation client."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

API_REQUEST_LATENCY = Histogram(
    "tastematch_api_request_seconds",
    "Backend API request latency",
    ["method", "status"],
)
FEEDBACK_SUBMISSIONS = Counter(
    "tastematch_feedback_submissions_total",
    "Feedback submissions by type and outcome",
    ["feedback_type", "outcome"],
)
SWIPE_GESTURES = Counter(
    "tastematch_swipe_gestures_total",
    "Completed swipe gestures by outcome",
    ["outcome"],
)
