"""Shared machinery for the site extractors.

A site extractor is mostly configuration: where to start, which elements are
listing cards, and for each field an ordered :class:`SelectorChain` of
strategies. The first strategy that yields text of at least the chain's
minimum length wins; a field nothing matches falls back to its default.
"""
from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Union
from urllib.parse import urljoin, urlparse, parse_qs

import requests
from bs4 import BeautifulSoup
from bs4.element import Tag
from pydantic import ValidationError

from rwjobs import config
from rwjobs.core.date_parse import find_date_text
from rwjobs.core.dedupe import deduplicate_postings
from rwjobs.core.models import RawPosting, collapse_ws
from rwjobs.errors import ExtractionFailure

LOGGER = logging.getLogger(__name__)

UA = {"User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/123 Safari/537.36",
      "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
      "Accept-Language": "en-US,en;q=0.8,fr;q=0.6"}

Strategy = Callable[[Tag], Optional[str]]
StrategyLike = Union[str, Strategy]

NEXT_PAGE_SELECTORS = (
    'a[rel="next"]',
    "link[rel=next]",
    "a.next",
    ".next a",
    "li.next a",
    ".pagination a.next",
    '[class*="next"] a',
    'a[class*="next"]',
)


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


# --- strategies --------------------------------------------------------------

def css_text(selector: str) -> Strategy:
    """Text of the first descendant matching ``selector``."""
    def _get(el: Tag) -> Optional[str]:
        found = el.select_one(selector)
        if isinstance(found, Tag):
            return found.get_text(" ", strip=True)
        return None
    _get.__name__ = f"css_text({selector})"
    return _get


def css_attr(selector: str, attr: str) -> Strategy:
    def _get(el: Tag) -> Optional[str]:
        found = el.select_one(selector)
        if isinstance(found, Tag):
            val = found.get(attr)
            return val if isinstance(val, str) else None
        return None
    return _get


def own_text(*tag_names: str) -> Strategy:
    """The card's own text, only when the card itself is one of ``tag_names``."""
    def _get(el: Tag) -> Optional[str]:
        if el.name in tag_names:
            return el.get_text(" ", strip=True)
        return None
    return _get


def own_attr(attr: str, *tag_names: str) -> Strategy:
    def _get(el: Tag) -> Optional[str]:
        if tag_names and el.name not in tag_names:
            return None
        val = el.get(attr)
        return val if isinstance(val, str) else None
    return _get


def in_container(container: str, inner: StrategyLike) -> Strategy:
    """Run ``inner`` against the closest ancestor matching ``container``.

    Falls back to the direct parent, which is where anchor-style cards keep
    their metadata on most of these boards.
    """
    inner_fn = as_strategy(inner)

    def _get(el: Tag) -> Optional[str]:
        scope = el.css.closest(container)
        if scope is None:
            scope = el.parent
        if not isinstance(scope, Tag):
            return None
        return inner_fn(scope)
    return _get


def as_strategy(value: StrategyLike) -> Strategy:
    return css_text(value) if isinstance(value, str) else value


class SelectorChain:
    """Ordered fallback list for one field."""

    def __init__(self, *strategies: StrategyLike, min_length: int = 1):
        self.strategies: List[Strategy] = [as_strategy(s) for s in strategies]
        self.min_length = min_length

    def resolve(self, element: Tag) -> Optional[str]:
        for strategy in self.strategies:
            try:
                value = strategy(element)
            except Exception as exc:  # bad selector or odd markup; try the next one
                LOGGER.debug("selector-error strategy=%s error=%s", getattr(strategy, "__name__", strategy), exc)
                continue
            value = collapse_ws(value)
            if value and len(value) >= self.min_length:
                return value
        return None


TITLE = SelectorChain("h1", "h2", "h3", "h4", ".title", '[class*="title"]', 'a[href*="job"]', min_length=3)
COMPANY = SelectorChain(
    ".company", '[class*="company"]', ".employer", '[class*="employer"]',
    ".organization", '[class*="organization"]',
)
LOCATION = SelectorChain(".location", '[class*="location"]', ".place", '[class*="place"]', ".city", '[class*="city"]')
DEADLINE = SelectorChain(".deadline", '[class*="deadline"]', ".date", '[class*="date"]', ".expires", '[class*="expires"]')
SNIPPET = SelectorChain(
    ".description", '[class*="description"]', ".summary", '[class*="summary"]',
    ".excerpt", '[class*="excerpt"]', "p",
    min_length=10,
)
LINK = SelectorChain(own_attr("href", "a"), css_attr("a[href]", "href"))


# --- HTTP --------------------------------------------------------------------

def fetch_html(http: requests.Session, url: str, timeout: float) -> str:
    resp = http.get(url, timeout=timeout)
    resp.raise_for_status()
    return resp.text


def _page_number(url: str) -> Optional[int]:
    values = parse_qs(urlparse(url).query).get("page")
    if not values:
        return None
    try:
        return int(values[0])
    except ValueError:
        return None


def find_next_page(soup: BeautifulSoup, page_url: str) -> Optional[str]:
    for selector in NEXT_PAGE_SELECTORS:
        el = soup.select_one(selector)
        if isinstance(el, Tag):
            href = el.get("href")
            if isinstance(href, str) and href.strip() and not href.startswith("#"):
                return urljoin(page_url, href.strip())

    # Numbered pagination: ?page=N+1
    current = _page_number(page_url) or 1
    for a in soup.select('a[href*="page="]'):
        href = a.get("href")
        if not isinstance(href, str):
            continue
        absolute = urljoin(page_url, href)
        if _page_number(absolute) == current + 1:
            return absolute
    return None


# --- extractor base ----------------------------------------------------------

class SiteExtractor:
    """Base for static-HTML job boards.

    Subclasses set ``name``, ``start_urls`` and ``card_selector`` and may
    override any field chain or default.
    """

    name: str = ""
    start_urls: tuple[str, ...] = ()
    card_selector: str = ".job-listing, .job-item, article"

    title: SelectorChain = TITLE
    company: SelectorChain = COMPANY
    location: SelectorChain = LOCATION
    deadline: SelectorChain = DEADLINE
    snippet: SelectorChain = SNIPPET
    link: SelectorChain = LINK

    default_company: str = config.NOT_SPECIFIED
    default_location: Optional[str] = None
    min_title_length: int = 3
    max_pages: int = 1

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout if timeout is not None else config.http_timeout()

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<{type(self).__name__} name={self.name!r}>"

    def extract(self) -> list[RawPosting]:
        """Scrape the site. Never raises; failures yield an empty list."""
        try:
            with requests.Session() as http:
                http.headers.update(UA)
                postings = self._extract_all(http)
        except Exception as exc:
            LOGGER.warning("extract-failed source=%s error=%s", self.name, exc)
            return []
        LOGGER.info("extract source=%s postings=%s", self.name, len(postings))
        return postings

    # --- hooks ---------------------------------------------------------------

    def follow_urls(self, soup: BeautifulSoup, page_url: str) -> list[str]:
        """Extra listing pages to visit after the first one (e.g. categories)."""
        return []

    def next_page(self, soup: BeautifulSoup, page_url: str) -> Optional[str]:
        return find_next_page(soup, page_url)

    def cards(self, soup: BeautifulSoup) -> Iterable[Tag]:
        return (c for c in soup.select(self.card_selector) if isinstance(c, Tag))

    # --- internals -----------------------------------------------------------

    def _open_start(self, http: requests.Session) -> tuple[str, str]:
        last_error: Exception | None = None
        for url in self.start_urls:
            try:
                return url, fetch_html(http, url, self.timeout)
            except requests.RequestException as exc:
                LOGGER.info("start-url-failed source=%s url=%s error=%s", self.name, url, exc)
                last_error = exc
        raise ExtractionFailure(self.name, f"no start page could be loaded ({last_error})")

    def _extract_all(self, http: requests.Session) -> list[RawPosting]:
        page_url, html = self._open_start(http)
        soup = _soup(html)
        collected: list[RawPosting] = self._parse_page(soup, page_url)
        visited = {page_url}

        queue = [u for u in self.follow_urls(soup, page_url) if u not in visited]
        for extra in queue:
            visited.add(extra)
            try:
                collected.extend(self._parse_page(_soup(fetch_html(http, extra, self.timeout)), extra))
            except requests.RequestException as exc:
                LOGGER.warning("follow-failed source=%s url=%s error=%s", self.name, extra, exc)

        pages = 1
        next_url = self.next_page(soup, page_url)
        while next_url and pages < self.max_pages and next_url not in visited:
            visited.add(next_url)
            try:
                soup = _soup(fetch_html(http, next_url, self.timeout))
            except requests.RequestException as exc:
                LOGGER.warning("page-failed source=%s url=%s error=%s", self.name, next_url, exc)
                break
            pages += 1
            collected.extend(self._parse_page(soup, next_url))
            next_url = self.next_page(soup, next_url)

        return deduplicate_postings(collected)

    def _parse_page(self, soup: BeautifulSoup, page_url: str) -> list[RawPosting]:
        out: list[RawPosting] = []
        for card in self.cards(soup):
            posting = self.parse_card(card, page_url)
            if posting is not None:
                out.append(posting)
        return out

    def parse_card(self, card: Tag, page_url: str) -> Optional[RawPosting]:
        title = self.title.resolve(card)
        if not title or len(title) < self.min_title_length:
            return None

        href = self.link.resolve(card)
        url = urljoin(page_url, href) if href else page_url
        deadline = self.deadline.resolve(card) or find_date_text(card.get_text(" ", strip=True))

        try:
            return RawPosting(
                title=title,
                company=self.company.resolve(card) or self.default_company,
                location=self.location.resolve(card) or self.default_location,
                deadline=deadline,
                url=url,
                source=self.name,
                snippet=self.snippet.resolve(card),
            )
        except ValidationError as exc:
            LOGGER.debug("card-skipped source=%s title=%s error=%s", self.name, title, exc)
            return None

