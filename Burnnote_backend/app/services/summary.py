import logging
from typing import Awaitable, Callable, Optional

import httpx

from app.config import Settings

logger = logging.getLogger("burnnote.summary")

SUMMARY_UNAVAILABLE = "AI summary is currently unavailable"

Summarizer = Callable[[str, str], Awaitable[str]]


class ChatCompletionsSummarizer:
    """调用 OpenAI 兼容的 /chat/completions 接口生成摘要。"""

    def __init__(
        self,
        api_base: str,
        api_key: str,
        model: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = api_base.rstrip("/") + "/chat/completions"
        self.api_key = api_key
        self.model = model
        self.timeout = httpx.Timeout(timeout, connect=min(timeout, 5.0))
        self.transport = transport

    async def __call__(self, system: str, text: str) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": text},
            ],
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            resp = await client.post(self.url, json=payload, headers=headers)
            resp.raise_for_status()
            data = resp.json()
        content = data["choices"][0]["message"]["content"]
        if not isinstance(content, str):
            raise ValueError("completion has no text content")
        return content


def build_summarizer(config: Settings) -> Optional[ChatCompletionsSummarizer]:
    if not config.AI_API_BASE or not config.AI_API_KEY:
        return None
    return ChatCompletionsSummarizer(
        config.AI_API_BASE,
        config.AI_API_KEY,
        config.AI_MODEL,
        timeout=config.AI_TIMEOUT,
    )


async def summarize_text(summarizer: Optional[Summarizer], text: str, system: str) -> str:
    if summarizer is None:
        logger.info("summary requested but no summarizer is configured")
        return SUMMARY_UNAVAILABLE
    try:
        return await summarizer(system, text)
    except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as e:
        logger.warning("summarizer call failed: %s", e.__class__.__name__)
        return SUMMARY_UNAVAILABLE
