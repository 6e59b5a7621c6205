"""
OpenRouter chat-completions client.

Talks to the OpenAI-compatible HTTP API directly with ``requests`` so the
reviewer has no hard dependency on a vendor SDK.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from config import (
    LLM_API_URL,
    LLM_MODEL,
    LLM_REFERER,
    LLM_TIMEOUT_SECS,
    LLM_TITLE,
    OPENROUTER_API_KEY,
)


def is_configured(api_key: Optional[str] = None) -> bool:
    """True when an API key is available."""
    return bool(api_key if api_key is not None else OPENROUTER_API_KEY)


# ── Low-level HTTP helpers ────────────────────────────────────────────────────

def _headers(api_key: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type":  "application/json",
        "HTTP-Referer":  LLM_REFERER,
        "X-Title":       LLM_TITLE,
    }


def _post(
    payload: Dict[str, Any],
    api_key: str,
    url: str = LLM_API_URL,
    timeout: int = LLM_TIMEOUT_SECS,
) -> Dict[str, Any]:
    try:
        resp = requests.post(url, json=payload, headers=_headers(api_key), timeout=timeout)
        resp.raise_for_status()
        return resp.json()
    except requests.exceptions.ConnectionError:
        raise ConnectionError(
            f"Cannot reach the LLM endpoint at {url}. "
            "Check your network or LLM_API_URL."
        )


# ── Public API ────────────────────────────────────────────────────────────────

def chat(
    messages: List[Dict[str, str]],
    model: str = LLM_MODEL,
    api_key: Optional[str] = None,
    json_mode: bool = True,
    temperature: float = 0.2,
) -> str:
    """
    Send *messages* to the chat-completions endpoint.
    Returns the first choice's message content.
    """
    key = api_key if api_key is not None else OPENROUTER_API_KEY
    if not key:
        raise RuntimeError("OPENROUTER_API_KEY is not configured")

    payload: Dict[str, Any] = {
        "model":       model,
        "messages":    messages,
        "temperature": temperature,
    }
    if json_mode:
        payload["response_format"] = {"type": "json_object"}

    data = _post(payload, key)
    content = data["choices"][0]["message"]["content"]
    if not isinstance(content, str):
        raise ValueError(f"LLM reply has no text content: {content!r}")
    return content


def ping(api_key: Optional[str] = None) -> str:
    """
    Send a minimal request to check connectivity and credentials.
    Returns the model's reply; raises on any failure.
    """
    return chat(
        [{"role": "user", "content": "Reply with the single word: ok"}],
        api_key=api_key,
        json_mode=False,
    )
