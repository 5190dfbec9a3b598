"""
Unit tests for the Gemini search source and its reply parsing.
"""

import json
from unittest.mock import Mock, patch

import requests

from jobmatch.sources.gemini_search import (
    FALLBACK_MODEL,
    GROUNDED_MODELS,
    GeminiSearchSource,
    normalize_job_type,
    parse_items,
    response_text,
    sanitize_url,
)

POST = "jobmatch.sources.gemini_search.requests.post"

SAMPLE_ITEMS = [
    {
        "title": "ML Engineer",
        "company_name": "DeepCo",
        "location": "Karachi, Pakistan",
        "is_remote": "false",
        "job_type": "Full-time",
        "salary": "50000-80000 USD",
        "apply_url": "careers.deepco.com",
        "posted_date": "2026-02-20",
        "skills": ["Python", "PyTorch", 7],
    },
    {
        "title": "Data Scientist",
        "company_name": "Numbers",
        "is_remote": True,
        "job_type": "contractor",
        "apply_url": "https://numbers.example.com/jobs/1",
    },
]


def _reply(text, status=200):
    response = Mock(ok=status == 200, status_code=status, text="error body")
    response.json.return_value = {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    return response


class TestParseItems:
    """Test recovery of job objects from model replies."""

    def test_fenced_json(self):
        text = "Here are the jobs:\n```json\n" + json.dumps(SAMPLE_ITEMS) + "\n```"

        assert [i["title"] for i in parse_items(text)] == ["ML Engineer", "Data Scientist"]

    def test_prose_around_array(self):
        text = "Sure! " + json.dumps(SAMPLE_ITEMS[:1]) + " Let me know if you need more."

        assert len(parse_items(text)) == 1

    def test_trailing_commas_repaired(self):
        text = '[{"title": "A", "company_name": "B",},]'

        assert parse_items(text) == [{"title": "A", "company_name": "B"}]

    def test_object_salvage(self):
        text = 'Jobs: {"title": "A", "company_name": "B"} and {"title": "C"} broken'

        assert parse_items(text) == [{"title": "A", "company_name": "B"}]

    def test_items_without_company_dropped(self):
        text = '[{"title": "A"}, {"title": "B", "company_name": "C"}]'

        assert parse_items(text) == [{"title": "B", "company_name": "C"}]

    def test_non_list(self):
        assert parse_items('{"title": "A", "company_name": "B"}') == []


class TestHelpers:
    """Test the small normalizers."""

    def test_response_text_joins_parts(self):
        data = {"candidates": [{"content": {"parts": [{"text": "a"}, {"text": "b"}, {}]}}]}

        assert response_text(data) == "a\nb"
        assert response_text({}) == ""

    def test_normalize_job_type(self):
        assert normalize_job_type("Full-time") == "full_time"
        assert normalize_job_type("part time") == "part_time"
        assert normalize_job_type("Contractor") == "contract"
        assert normalize_job_type("remote") == "full_time"
        assert normalize_job_type(None) == "full_time"

    def test_sanitize_url(self):
        assert sanitize_url("https://a.example.com") == "https://a.example.com"
        assert sanitize_url("a.example.com") is None
        assert sanitize_url(None) is None


class TestGeminiSearchSource:
    """Test grounded search and the knowledge fallback."""

    def test_flags(self):
        source = GeminiSearchSource("gkey")

        assert source.rate_limited is True
        assert source.searchable is False
        assert source.requires_api_key is True

    @patch(POST)
    def test_grounded_success(self, mock_post):
        mock_post.return_value = _reply(json.dumps(SAMPLE_ITEMS))

        jobs = GeminiSearchSource("gkey").fetch("ml engineer", "Karachi, Pakistan")

        assert mock_post.call_count == 1
        args, kwargs = mock_post.call_args
        assert args[0].endswith(f"/models/{GROUNDED_MODELS[0]}:generateContent")
        assert kwargs["params"] == {"key": "gkey"}
        assert kwargs["json"]["tools"] == [{"google_search": {}}]

        first, second = jobs
        assert first.source_platform == "gemini_search"
        assert first.external_id.startswith("gs-")
        assert first.is_remote is False
        assert (first.salary_min, first.salary_max, first.salary_currency) == (50000, 80000, "USD")
        assert first.source_url is None
        assert first.skills_required == ["Python", "PyTorch"]
        assert first.posted_at == "2026-02-20T00:00:00Z"
        assert second.is_remote is True
        assert second.job_type == "contract"
        assert second.source_url == "https://numbers.example.com/jobs/1"
        assert second.posted_at is None

    @patch(POST)
    def test_ids_are_stable(self, mock_post):
        mock_post.return_value = _reply(json.dumps(SAMPLE_ITEMS))

        first = GeminiSearchSource("gkey").fetch("ml")
        again = GeminiSearchSource("gkey").fetch("ml")

        assert [j.external_id for j in first] == [j.external_id for j in again]

    @patch(POST)
    def test_grounding_unavailable_uses_knowledge(self, mock_post):
        """Test that a 400 from the grounded call skips straight to the fallback."""
        mock_post.side_effect = [_reply("", status=400), _reply(json.dumps(SAMPLE_ITEMS[:1]))]

        jobs = GeminiSearchSource("gkey").fetch("ml engineer")

        assert mock_post.call_count == 2
        last_url = mock_post.call_args.args[0]
        assert last_url.endswith(f"/models/{FALLBACK_MODEL}:generateContent")
        assert "tools" not in mock_post.call_args.kwargs["json"]
        assert [j.title for j in jobs] == ["ML Engineer"]

    @patch(POST)
    def test_server_error_tries_next_model(self, mock_post):
        mock_post.side_effect = [
            _reply("", status=503),
            _reply(json.dumps(SAMPLE_ITEMS[1:])),
        ]

        jobs = GeminiSearchSource("gkey").fetch("data")

        assert mock_post.call_args.args[0].endswith(f"/models/{GROUNDED_MODELS[1]}:generateContent")
        assert [j.title for j in jobs] == ["Data Scientist"]

    @patch(POST)
    def test_everything_fails(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("offline")

        assert GeminiSearchSource("gkey").fetch("data") == []
        assert mock_post.call_count == len(GROUNDED_MODELS) + 1
