import json
import logging
import time
from typing import Callable, Optional

import requests

from seocrawl.exceptions import OptimizeError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://openrouter.ai/api/v1/chat/completions"

EXPECTED_KEYS = (
    "title",
    "meta_description",
    "h1",
    "h2",
    "h3",
    "img_alt",
    "p",
    "a_anchor_text",
)

PROMPT_TEMPLATE = """
You are an expert SEO specialist and senior content optimizer.
Your task: extract text from raw HTML and optimize it for on-page SEO.

1. Extract ONLY from:
   - <title>
   - <meta name="description">
   - <h1>, <h2>, <h3>
   - <img alt="">
   - <p>
   - <a> (only internal links: starts with "/" or current domain)

2. Apply SEO rules:
   - Titles: 50-60 chars, keyword near start.
   - Meta description: <160 chars, engaging, with call-to-action.
   - Headings: concise, keyword-rich, accurate.
   - Image alt: descriptive, keyword-rich.
   - Paragraphs: improve readability, natural keyword use.
   - Anchor text: descriptive, keyword-rich.

3. Output:
Return ONLY a valid JSON object with keys:
{keys}

Each key maps to an array of objects {{"original": "...", "optimized": "..."}}.
If none exist, return an empty array for that key.
---

HTML to process:
{html}
"""


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


class ContentOptimizer:
    """
    SEO rewrite client for an OpenAI-compatible chat completions endpoint.

    Requires http_client callable (``requests.post`` in production) so tests
    can inject a fake without patching. `optimize()` returns the normalized
    JSON document as text, or raises `OptimizeError`.

    `timeout` bounds the whole call: requests only applies it per socket
    read, so the body is streamed and checked against a wall-clock deadline.
    """

    def __init__(
        self,
        api_key: str,
        http_client: Callable,
        api_url: str = DEFAULT_API_URL,
        model: str = "gpt-4o-mini",
        timeout: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.api_key = api_key
        self.http_client = http_client
        self.api_url = api_url
        self.model = model
        self.timeout = timeout
        self.clock = clock

    def _build_prompt(self, raw_markup: str) -> str:
        return PROMPT_TEMPLATE.format(keys=json.dumps(list(EXPECTED_KEYS)), html=raw_markup)

    def _read_body(self, resp, deadline: float) -> bytes:
        chunks = []
        for chunk in resp.iter_content(chunk_size=8192):
            if self.clock() > deadline:
                raise OptimizeError(f"optimizer response exceeded {self.timeout}s")
            chunks.append(chunk)
        return b"".join(chunks)

    def optimize(self, raw_markup: str) -> str:
        if not raw_markup:
            raise OptimizeError("nothing to optimize")
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": self._build_prompt(raw_markup)}],
        }
        deadline = self.clock() + self.timeout
        try:
            resp = self.http_client(self.api_url, json=payload, headers=headers, timeout=self.timeout, stream=True)
            try:
                resp.raise_for_status()
                body = self._read_body(resp, deadline)
            finally:
                resp.close()
            data = json.loads(body)
        except requests.exceptions.RequestException as e:
            raise OptimizeError(f"optimizer request failed: {e}") from e
        except ValueError as e:
            raise OptimizeError(f"optimizer returned a non-JSON response: {e}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise OptimizeError("optimizer response has no message content") from e
        if not isinstance(content, str) or not content.strip():
            raise OptimizeError("optimizer returned empty content")

        try:
            parsed = json.loads(_strip_code_fence(content))
        except ValueError as e:
            logger.debug("Unparseable optimizer output: %r", content[:500])
            raise OptimizeError("could not parse valid JSON from optimizer response") from e
        if not isinstance(parsed, dict):
            raise OptimizeError("optimizer response is not a JSON object")

        for key in EXPECTED_KEYS:
            parsed.setdefault(key, [])
        return json.dumps(parsed, ensure_ascii=False)


class DisabledContentOptimizer:
    """Wired when no optimizer API key is configured; pages keep their raw markup."""

    def optimize(self, raw_markup: str) -> str:
        raise OptimizeError("content optimizer is not configured (set OPTIMIZER_API_KEY)")


def make_content_optimizer(
    api_key: Optional[str],
    api_url: str = DEFAULT_API_URL,
    model: str = "gpt-4o-mini",
    timeout: float = 60,
    http_client: Callable = requests.post,
):
    """Return a live optimizer when an API key is configured, else the disabled one."""
    if not api_key:
        logger.warning("No optimizer API key configured; pages will keep their raw markup")
        return DisabledContentOptimizer()
    return ContentOptimizer(api_key=api_key, http_client=http_client, api_url=api_url, model=model, timeout=timeout)
