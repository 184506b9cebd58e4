"""Tests for the NewsAPI headline fetcher."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
import requests

from alethea.config import settings
from alethea.errors import NewsFetchError, NoArticlesFound
from alethea.models import Category, VerificationState
from alethea.news import (
    NO_CONTENT,
    PLACEHOLDER_IMAGE,
    UNKNOWN_SOURCE,
    UNKNOWN_TIME,
    UNTITLED,
    fetch_top_news,
    normalize_article,
    parse_published_at,
)


def _raw_article(**overrides):
    article = {
        "source": {"id": "bbc-news", "name": "BBC News"},
        "title": "Parliament passes climate bill",
        "description": "Lawmakers approved the bill late on Monday.",
        "url": "https://bbc.co.uk/news/1",
        "urlToImage": "https://bbc.co.uk/img/1.jpg",
        "publishedAt": "2024-05-06T21:45:00Z",
    }
    article.update(overrides)
    return article


def _response(payload, status_error=None):
    resp = MagicMock()
    resp.json.return_value = payload
    if status_error:
        resp.raise_for_status.side_effect = status_error
    return resp


class TestNormalizeArticle:

    def test_full_article(self):
        record = normalize_article(_raw_article(), Category.SCIENCE)
        assert record.title == "Parliament passes climate bill"
        assert record.source == "BBC News"
        assert record.published_at == datetime(2024, 5, 6, 21, 45, tzinfo=timezone.utc)
        assert record.time == "21:45 - 06/05/2024"
        assert record.content == "Lawmakers approved the bill late on Monday."
        assert record.image == "https://bbc.co.uk/img/1.jpg"
        assert record.url == "https://bbc.co.uk/news/1"
        assert record.category is Category.SCIENCE
        assert record.tag == "Ciência"
        assert record.verification is VerificationState.UNVERIFIED
        assert record.verdict is None

    def test_defaults_for_missing_fields(self):
        record = normalize_article({"source": {"id": None, "name": None}})
        assert record.title == UNTITLED
        assert record.source == UNKNOWN_SOURCE
        assert record.content == NO_CONTENT
        assert record.image == PLACEHOLDER_IMAGE
        assert record.url == ""
        assert record.time == UNKNOWN_TIME
        assert record.published_at is None
        assert record.tag == "Geral"

    @pytest.mark.parametrize("category,tag", [
        (Category.GENERAL, "Geral"),
        (Category.BUSINESS, "Negócios"),
        (Category.ENTERTAINMENT, "Entretenimento"),
        (Category.HEALTH, "Saúde"),
        (Category.SCIENCE, "Ciência"),
        (Category.SPORTS, "Esportes"),
        (Category.TECHNOLOGY, "Tecnologia"),
    ])
    def test_category_tags_follow_feed_locale(self, category, tag):
        assert normalize_article(_raw_article(), category).tag == tag

    def test_missing_source_object(self):
        raw = _raw_article()
        del raw["source"]
        assert normalize_article(raw).source == UNKNOWN_SOURCE

    def test_unique_ids(self):
        a = normalize_article(_raw_article())
        b = normalize_article(_raw_article())
        assert a.id != b.id


class TestParsePublishedAt:

    def test_bad_date(self):
        assert parse_published_at("yesterday-ish") is None

    def test_empty(self):
        assert parse_published_at(None) is None
        assert parse_published_at("") is None

    def test_offset(self):
        parsed = parse_published_at("2024-01-02T03:04:05+00:00")
        assert parsed.hour == 3


class TestFetchTopNews:

    def test_request_parameters(self, monkeypatch):
        monkeypatch.setattr(settings, "NEWS_API_KEY", "news-key")
        monkeypatch.setattr(settings, "NEWS_PAGE_SIZE", 20)
        monkeypatch.setattr(settings, "NEWS_LANGUAGE", "pt")
        payload = {"status": "ok", "articles": [_raw_article()]}
        with patch("alethea.news.requests.get", return_value=_response(payload)) as get:
            articles = fetch_top_news(Category.HEALTH, country="br")

        assert len(articles) == 1
        assert articles[0].category is Category.HEALTH
        url = get.call_args.args[0]
        params = get.call_args.kwargs["params"]
        assert url.endswith("top-headlines")
        assert params == {
            "country": "br",
            "category": "health",
            "apiKey": "news-key",
            "pageSize": 20,
            "language": "pt",
        }

    def test_accepts_category_string(self):
        payload = {"status": "ok", "articles": [_raw_article()]}
        with patch("alethea.news.requests.get", return_value=_response(payload)):
            articles = fetch_top_news("sports")
        assert articles[0].tag == "Esportes"

    def test_empty_category_falls_back_to_general(self):
        empty = {"status": "ok", "totalResults": 0, "articles": []}
        full = {"status": "ok", "articles": [_raw_article()]}
        with patch("alethea.news.requests.get", side_effect=[_response(empty), _response(full)]) as get:
            articles = fetch_top_news(Category.TECHNOLOGY)

        assert get.call_count == 2
        assert get.call_args_list[1].kwargs["params"]["category"] == "general"
        assert articles[0].category is Category.GENERAL

    def test_empty_general_raises(self):
        empty = {"status": "ok", "articles": []}
        with patch("alethea.news.requests.get", return_value=_response(empty)) as get:
            with pytest.raises(NoArticlesFound):
                fetch_top_news(Category.GENERAL)
        assert get.call_count == 1

    def test_transport_error(self):
        with patch("alethea.news.requests.get", side_effect=requests.ConnectionError("down")):
            with pytest.raises(NewsFetchError):
                fetch_top_news()

    def test_http_error(self):
        resp = _response({}, status_error=requests.HTTPError("401 Client Error"))
        with patch("alethea.news.requests.get", return_value=resp):
            with pytest.raises(NewsFetchError) as exc:
                fetch_top_news()
        assert not isinstance(exc.value, NoArticlesFound)

    def test_error_status_in_body(self):
        payload = {"status": "error", "code": "apiKeyInvalid", "message": "Your API key is invalid."}
        with patch("alethea.news.requests.get", return_value=_response(payload)):
            with pytest.raises(NewsFetchError, match="API key is invalid"):
                fetch_top_news()

    def test_invalid_json(self):
        resp = _response(None)
        resp.json.side_effect = ValueError("no json")
        with patch("alethea.news.requests.get", return_value=resp):
            with pytest.raises(NewsFetchError):
                fetch_top_news()
