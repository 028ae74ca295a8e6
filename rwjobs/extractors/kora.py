from __future__ import annotations

from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from .base import SiteExtractor, SelectorChain

MAX_CATEGORIES = 10


class KoraExtractor(SiteExtractor):
    """Government recruitment portal (jobportal.kora.rw).

    The landing page lists categories; each category page lists openings.
    Postings without an employer element are government posts.
    """

    name = "kora.rw"
    start_urls = ("https://jobportal.kora.rw/",)
    card_selector = (
        ".job-listing, .job-item, .opportunity, [class*=\"opportunity\"], "
        ".position, [class*=\"position\"], tr[class*=\"job\"]"
    )
    title = SelectorChain("h1", "h2", "h3", "h4", ".title", '[class*="title"]', 'a[href*="job"]', "td a", min_length=3)
    deadline = SelectorChain(
        ".deadline", '[class*="deadline"]', ".date", '[class*="date"]',
        ".expires", '[class*="expires"]', 'td[data-label*="eadline"]',
    )
    default_company = "Government of Rwanda"
    default_location = "Rwanda"

    def follow_urls(self, soup: BeautifulSoup, page_url: str) -> list[str]:
        host = urlparse(page_url).netloc
        urls: list[str] = []
        for a in soup.select('.job-category a[href], [class*="category"] a[href], a[href*="category"]'):
            href = a.get("href")
            if not isinstance(href, str) or href.startswith(("#", "javascript:")):
                continue
            absolute = urljoin(page_url, href)
            if urlparse(absolute).netloc != host or absolute in urls:
                continue
            urls.append(absolute)
            if len(urls) >= MAX_CATEGORIES:
                break
        return urls
