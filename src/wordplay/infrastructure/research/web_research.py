# ============================================
# WEB RESEARCH SERVICE
# ============================================

import asyncio
import html
import re
from typing import Any, Dict
from urllib.parse import urlparse

import aiohttp
import structlog

from wordplay.core.domain.text_ops import count_words

DUCKDUCKGO_URL = "https://api.duckduckgo.com/"
MIN_CONTENT_CHARS = 100
MAX_TITLE_CHARS = 200
USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


def html_to_text(markup: str) -> str:
    """Strip scripts, styles and tags and collapse whitespace."""
    text = re.sub(r"<script[^>]*>.*?</script>", " ", markup, flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r"<style[^>]*>.*?</style>", " ", text, flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r"<[^>]+>", " ", text)
    return " ".join(html.unescape(text).split())


def html_title(markup: str) -> str | None:
    match = re.search(r"<title[^>]*>(.*?)</title>", markup, flags=re.DOTALL | re.IGNORECASE)
    if not match:
        return None
    return " ".join(html.unescape(match.group(1)).split()) or None


class WebResearchService:
    """Web search using DuckDuckGo (no API key required) plus page extraction"""

    def __init__(self, num_results: int = 5, timeout: float = 15.0):
        self.num_results = num_results
        self.timeout = timeout
        self.logger = structlog.get_logger().bind(component="web_research")

    async def search(self, query: str, source: str = "web") -> Dict[str, Any]:
        params = {
            "q": query,
            "format": "json",
            "no_html": "1",
            "skip_disambig": "1",
        }
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(
                    DUCKDUCKGO_URL,
                    params=params,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    # DuckDuckGo answers with a javascript Content-Type
                    data = await response.json(content_type=None)
        except asyncio.TimeoutError:
            self.logger.warning("search_timeout", query=query)
            return {"results": [], "error": "Search timed out"}
        except (aiohttp.ClientError, ValueError) as e:
            self.logger.warning("search_failed", query=query, error=str(e))
            return {"results": [], "error": str(e)}

        results = []
        if data.get("Abstract"):
            results.append(
                {
                    "title": data.get("Heading", ""),
                    "snippet": data["Abstract"],
                    "url": data.get("AbstractURL", ""),
                }
            )
        for topic in data.get("RelatedTopics", []):
            if isinstance(topic, dict) and "Text" in topic:
                results.append(
                    {
                        "title": topic.get("Text", "").split(" - ")[0][:80],
                        "snippet": topic.get("Text", ""),
                        "url": topic.get("FirstURL", ""),
                    }
                )

        self.logger.info("search_complete", query=query, source=source, results=len(results))
        return {
            "results": results[: self.num_results],
            "summary": data.get("Abstract") or None,
        }

    async def scrape(self, url: str) -> Dict[str, Any]:
        domain = urlparse(url).hostname or url
        failure = {"title": f"Error loading {domain}", "content": "", "word_count": 0, "domain": domain, "url": url}

        if urlparse(url).scheme not in ("http", "https"):
            return {**failure, "error": f"Invalid URL: {url}"}

        try:
            async with aiohttp.ClientSession(headers={"User-Agent": USER_AGENT}) as session:
                async with session.get(
                    url, timeout=aiohttp.ClientTimeout(total=self.timeout)
                ) as response:
                    if response.status >= 400:
                        return {**failure, "error": f"HTTP {response.status}: {response.reason}"}
                    markup = await response.text()
                    content_type = response.headers.get("Content-Type", "")
        except asyncio.TimeoutError:
            return {**failure, "error": "Request timed out"}
        except aiohttp.ClientError as e:
            self.logger.warning("scrape_failed", url=url, error=str(e))
            return {**failure, "error": str(e)}

        if "html" in content_type:
            title = html_title(markup) or domain
            content = html_to_text(markup)
        else:
            title = domain
            content = " ".join(markup.split())

        if len(content) < MIN_CONTENT_CHARS:
            return {**failure, "error": "Content too short - may be blocked or empty page"}

        self.logger.info("scrape_complete", url=url, chars=len(content))
        return {
            "title": title[:MAX_TITLE_CHARS],
            "content": content,
            "word_count": count_words(content),
            "domain": domain,
            "url": url,
        }
