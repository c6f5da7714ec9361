"""Transport client for the local chat-completion server and the web search API."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import openai
import requests
from openai import OpenAI  # type: ignore

from .config import SearchEngine, Settings
from .errors import ResponseFormatError, TransportError
from .session import Message

logger = logging.getLogger(__name__)

MODEL_NAME = "llama"
SEARCH_URL = "https://api.duckduckgo.com/"
MAX_SEARCH_RESULTS = 10
MISSING_TEXT = "No text available for this result."

# Local servers usually ignore the key, but the SDK refuses to start without one.
_PLACEHOLDER_API_KEY = "sk-no-key-required"
_COMPLETIONS_SUFFIX = "/chat/completions"


@dataclass(frozen=True)
class ChatReply:
    content: str
    total_tokens: Optional[int] = None


def base_url_for(endpoint: str) -> str:
    """Turn a full ``.../chat/completions`` URL into the SDK's ``base_url``."""
    url = endpoint.rstrip("/")
    if url.endswith(_COMPLETIONS_SUFFIX):
        url = url[: -len(_COMPLETIONS_SUFFIX)]
    return url


def parse_chat_reply(body: str) -> ChatReply:
    """Extract ``choices[0].message.content`` and ``usage.total_tokens``."""
    try:
        data = json.loads(body)
    except (TypeError, json.JSONDecodeError) as exc:
        raise ResponseFormatError(f"Server reply is not valid JSON: {exc}") from exc

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        raise ResponseFormatError("Server reply has no choices[0].message.content.") from None
    if not isinstance(content, str):
        raise ResponseFormatError("Server reply content is not text.")

    total_tokens = None
    usage = data.get("usage")
    if isinstance(usage, dict) and isinstance(usage.get("total_tokens"), int):
        total_tokens = usage["total_tokens"]
    return ChatReply(content=content, total_tokens=total_tokens)


def parse_search_results(body: str) -> List[str]:
    """Return up to ten ``RelatedTopics[].Text`` snippets from a search reply."""
    try:
        data = json.loads(body)
    except (TypeError, json.JSONDecodeError) as exc:
        raise ResponseFormatError(f"Search reply is not valid JSON: {exc}") from exc

    topics = data.get("RelatedTopics") if isinstance(data, dict) else None
    if not isinstance(topics, list):
        raise ResponseFormatError("Unexpected JSON structure in search reply.")

    results: List[str] = []
    for topic in topics[:MAX_SEARCH_RESULTS]:
        text = topic.get("Text") if isinstance(topic, dict) else None
        results.append(text if isinstance(text, str) else MISSING_TEXT)
    return results


class TransportClient:
    """Single-attempt HTTP calls. Callers own the progress indicator."""

    def __init__(
        self,
        client: Optional[OpenAI] = None,
        http: Optional[requests.Session] = None,
    ):
        # An injected client is used as-is; otherwise one is built per endpoint.
        self._client = client
        self._client_endpoint: Optional[str] = None
        self.http = http or requests.Session()

    def _client_for(self, endpoint: str) -> OpenAI:
        if self._client is not None and (
            self._client_endpoint is None or self._client_endpoint == endpoint
        ):
            return self._client
        self._client = OpenAI(
            base_url=base_url_for(endpoint),
            api_key=os.getenv("OPENAI_API_KEY") or _PLACEHOLDER_API_KEY,
            max_retries=0,
        )
        self._client_endpoint = endpoint
        return self._client

    def post_chat(self, messages: Sequence[Message], settings: Settings) -> str:
        """POST the whole conversation and return the raw response body."""
        payload: List[Dict[str, Any]] = [m.to_json() for m in messages]
        logger.debug("POST %s (%d messages)", settings.endpoint, len(payload))
        client = self._client_for(settings.endpoint)
        try:
            raw = client.chat.completions.with_raw_response.create(  # type: ignore[call-overload]
                model=MODEL_NAME,
                messages=payload,
                max_tokens=settings.token_limit,
                temperature=settings.temperature,
                extra_body={"nsfw_mode": True},
            )
        except openai.APIStatusError as exc:
            raise TransportError(f"Server returned HTTP {exc.status_code}: {exc.message}") from exc
        except openai.OpenAIError as exc:
            raise TransportError(f"Unable to reach {settings.endpoint}: {exc}") from exc
        return raw.text

    def get_search(self, query: str, safe_search: bool, engine: SearchEngine) -> str:
        """GET the search endpoint for *query* and return the raw response body."""
        if engine is not SearchEngine.DUCKDUCKGO:
            logger.debug("Search engine %s not implemented, using DuckDuckGo", engine.value)
        params = {
            "q": query,
            "format": "json",
            "safesearch": "on" if safe_search else "off",
        }
        headers = {"Accept": "application/json", "User-Agent": "Mozilla/5.0"}
        logger.debug("GET %s q=%r safesearch=%s", SEARCH_URL, query, params["safesearch"])
        try:
            response = self.http.get(SEARCH_URL, params=params, headers=headers)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(f"Search request failed: {exc}") from exc
        return response.text
