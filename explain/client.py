"""
client.py — Algorithm Explanations
===================================
Asks the Gemini generateContent endpoint for a beginner-friendly
markdown write-up of one algorithm.

The boundary the API uses is explain_algorithm(): it always returns
text.  A missing API key, a transport error that survives the retries,
a non-200 answer or an empty answer all give FALLBACK_MESSAGE.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from algorithms import get_algorithm
from config import Settings, get_settings
from explain.retry import create_retry_decorator


logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Error: Unable to generate an explanation right now. Please try again."

PROMPT_TEMPLATE = """\
You are a visual algorithm tutor.
Explain the algorithm "{name}" to a beginner, as if teaching it step by step
in an interactive data-structures classroom.

Answer in Markdown with these sections:

### Concept Overview
What the algorithm does, in two or three intuitive lines.

### Step-by-Step Explanation
Numbered steps showing how the data changes on each iteration.

### Code Templates
Minimal runnable templates in Python, C++ and Java, in fenced code blocks.

### Example Walkthrough
Run it on a small input such as {example} and show the intermediate states.

### Time & Space Complexity
Best, average and worst time complexity, and space complexity.

### Real-World Analogy
One short analogy.

### Summary
One or two lines on when to use it.

Only output the Markdown, with no introduction of your own.
"""

_EXAMPLES = {
    "sorting": "[5, 1, 4, 2, 8]",
    "graph":   "the graph A-B(4), A-D(2), B-C(3), B-D(1), B-E(5), C-E(2), D-E(3)",
    "tree":    "the insert sequence 50, 30, 70, 20, 40, 60, 80",
    "list":    "the list 12 -> 7 -> 33 -> 5",
}


class ExplanationError(Exception):
    """The explanation service answered, but not with usable text."""


def build_prompt(algorithm: str) -> str:
    """Fill the tutoring prompt; registry keys are replaced by their labels."""
    info = get_algorithm(algorithm)
    name = info.label if info else algorithm
    example = _EXAMPLES.get(info.domain if info else "", "a small input")
    return PROMPT_TEMPLATE.format(name=name, example=example)


def extract_text(data: Dict[str, Any]) -> str:
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ExplanationError(f"Unexpected response shape: {exc!r}") from exc
    text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
    if not text.strip():
        raise ExplanationError("Empty explanation")
    return text.strip()


class ExplanationClient:
    """Async HTTP client for the explanation service."""

    def __init__(self, session: aiohttp.ClientSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()
        self._call_count = 0

    @property
    def endpoint(self) -> str:
        return f"{self.settings.gemini_api_url.rstrip('/')}/{self.settings.gemini_model}:generateContent"

    async def explain(self, algorithm: str) -> str:
        """Return markdown for `algorithm`, retrying transport errors."""
        post = create_retry_decorator(self.settings.http_retry_attempts)(self._post)
        data = await post(build_prompt(algorithm))
        return extract_text(data)

    async def _post(self, prompt: str) -> Dict[str, Any]:
        self._call_count += 1
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        logger.info("Requesting explanation from %s (call %d)", self.settings.gemini_model, self._call_count)

        async with self.session.post(
            self.endpoint,
            json=payload,
            params={"key": self.settings.gemini_api_key},
            timeout=aiohttp.ClientTimeout(total=self.settings.http_timeout),
        ) as response:
            if response.status >= 500:
                # 5xx is retried
                response.raise_for_status()
            if response.status != 200:
                body = await response.text()
                raise ExplanationError(f"HTTP {response.status}: {body[:200]}")
            return await response.json()

    @property
    def total_calls(self) -> int:
        return self._call_count


async def fetch_explanation(algorithm: str, settings: Optional[Settings] = None) -> str:
    async with aiohttp.ClientSession() as session:
        client = ExplanationClient(session, settings)
        return await client.explain(algorithm)


def explain_algorithm(algorithm: str, settings: Optional[Settings] = None) -> str:
    """Synchronous boundary: markdown text, or FALLBACK_MESSAGE on any failure."""
    settings = settings or get_settings()
    if not settings.gemini_api_key:
        logger.warning("No explanation API key configured; returning fallback for %s", algorithm)
        return FALLBACK_MESSAGE
    try:
        return asyncio.run(fetch_explanation(algorithm, settings))
    except Exception:
        logger.exception("Explanation request for %s failed", algorithm)
        return FALLBACK_MESSAGE
