"""Remote page and image fetching for recipe import."""

import logging
import mimetypes
import re
from dataclasses import dataclass
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from mealmate.exceptions import FetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

# Some recipe sites reject non-browser agents
DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/129.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/*,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp")
DEFAULT_IMAGE_MIME_TYPE = "image/png"

_WHITESPACE = re.compile(r"\s+")


@dataclass
class FetchedPage:
    """HTML of a fetched page and the URL it resolved to."""

    html: str
    url: str


def is_url(text: str | None) -> bool:
    """True when text is an absolute http(s) URL."""
    if not text:
        return False
    candidate = text.strip()
    if any(ch.isspace() for ch in candidate):
        return False
    try:
        parsed = urlparse(candidate)
    except ValueError:
        return False
    return parsed.scheme.lower() in ("http", "https") and bool(parsed.netloc)


def is_image_url(url: str) -> bool:
    """True when the URL path ends with a known image extension."""
    path = urlparse(url.strip()).path.lower()
    return path.endswith(IMAGE_EXTENSIONS)


async def fetch_page(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> FetchedPage:
    """Fetch a web page. Raises FetchError on timeout, transport error, or non-2xx."""
    response = await _get(url, client=client, timeout=timeout)
    return FetchedPage(html=response.text, url=str(response.url))


async def fetch_image(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> tuple[bytes, str]:
    """Fetch image bytes and their mime type. Raises FetchError on failure."""
    response = await _get(url, client=client, timeout=timeout)

    content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
    if not content_type.startswith("image/"):
        guessed, _ = mimetypes.guess_type(urlparse(url).path)
        content_type = guessed or DEFAULT_IMAGE_MIME_TYPE

    return response.content, content_type


def page_text(html: str, budget: int | None = None) -> str:
    """
    Strip markup from HTML and return the visible text.

    Scripts, styles, and other non-content tags are dropped and whitespace is
    collapsed. The result is cut to `budget` characters when given.
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(["script", "style", "noscript", "template", "svg"]):
        tag.decompose()

    root = soup.body or soup
    text = _WHITESPACE.sub(" ", root.get_text(" ")).strip()

    if budget is not None:
        text = text[:budget]
    return text


async def _get(url: str, *, client: httpx.AsyncClient | None, timeout: float) -> httpx.Response:
    try:
        if client is None:
            async with httpx.AsyncClient(
                follow_redirects=True, timeout=timeout, headers=DEFAULT_HEADERS
            ) as own_client:
                response = await own_client.get(url)
        else:
            response = await client.get(
                url, headers=DEFAULT_HEADERS, timeout=timeout, follow_redirects=True
            )
        response.raise_for_status()
    except httpx.TimeoutException as e:
        raise FetchError(url, "request timed out") from e
    except httpx.HTTPStatusError as e:
        raise FetchError(url, f"HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise FetchError(url, str(e) or e.__class__.__name__) from e

    return response
