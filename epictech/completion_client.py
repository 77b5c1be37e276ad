"""
HTTP client for the generative-text backend.

Talks to any OpenAI-compatible /chat/completions endpoint (Groq by
default).  The assembled prompt is sent as a single user message and the
completion text is returned.  Uses raw `requests`, no SDK dependencies.

Unlike a streaming proxy, this client raises `BackendError` on every
failure so the router can turn it into a fallback turn.
"""

import requests

from epictech.config import (
    AI_TIMEOUT,
    CHAT_ENDPOINT,
    EMPTY_COMPLETION_REPLY,
    GROQ_API_KEY,
    MAX_TOKENS,
    MODEL_NAME,
    TEMPERATURE,
)


class BackendError(Exception):
    """The AI backend could not produce a completion."""


class CompletionClient:
    """Thin wrapper around a /chat/completions endpoint."""

    def __init__(
        self,
        endpoint: str = CHAT_ENDPOINT,
        api_key: str = GROQ_API_KEY,
        timeout: float = AI_TIMEOUT,
    ) -> None:
        self._endpoint = endpoint
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})
        if api_key:
            self._session.headers.update({"Authorization": f"Bearer {api_key}"})

    @property
    def configured(self) -> bool:
        return "Authorization" in self._session.headers

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def complete(
        self,
        prompt: str,
        *,
        temperature: float = TEMPERATURE,
        max_tokens: int = MAX_TOKENS,
    ) -> str:
        """Send *prompt* and return the completion text.

        Raises BackendError on connection failure, timeout, HTTP error or
        an unexpected response body.
        """
        payload = {
            "model": MODEL_NAME,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
            "stream": False,
        }
        try:
            resp = self._session.post(
                self._endpoint, json=payload, timeout=self._timeout
            )
            resp.raise_for_status()
            data = resp.json()
            text = data["choices"][0]["message"]["content"]
        except requests.ConnectionError as e:
            raise BackendError("Cannot reach the AI backend.") from e
        except requests.Timeout as e:
            raise BackendError("Request timed out.") from e
        except requests.HTTPError as e:
            raise BackendError(f"HTTP {e.response.status_code}") from e
        except requests.RequestException as e:
            raise BackendError(str(e)) from e
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise BackendError("Unexpected response format.") from e

        return text or EMPTY_COMPLETION_REPLY

    def close(self) -> None:
        self._session.close()
