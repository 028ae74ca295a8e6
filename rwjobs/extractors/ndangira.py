from __future__ import annotations

from bs4.element import Tag

from .base import SiteExtractor, SelectorChain, in_container, own_attr, own_text, css_attr

POST = 'article, .post, [class*="post"], .entry, [class*="entry"]'


class NdangiraExtractor(SiteExtractor):
    """Blog-style board: every post is one advert, usually for several employers."""

    name = "ndangira.net"
    start_urls = ("https://www.ndangira.net/",)
    card_selector = "article, .post, .entry, h2 a, h3 a"
    title = SelectorChain(
        own_text("a"),
        "h1", "h2", "h3", "h4", ".title", '[class*="title"]',
        'a[href*="job"]', 'a[href*="recruitment"]',
        min_length=5,
    )
    link = SelectorChain(
        own_attr("href", "a"),
        css_attr("h2 a[href], h3 a[href], .entry-title a[href]", "href"),
        css_attr("a[href]", "href"),
    )
    snippet = SelectorChain(
        "p", ".excerpt", '[class*="excerpt"]', ".summary", '[class*="summary"]',
        ".content", '[class*="content"]',
        in_container(POST, 'p, .excerpt, [class*="excerpt"], .summary'),
        min_length=10,
    )
    default_company = "Various Organizations"
    min_title_length = 5
    max_pages = 5

    def cards(self, soup):
        for card in super().cards(soup):
            # A heading link inside a post we already take as a card
            if card.name == "a" and isinstance(card.find_parent(["article"]), Tag):
                continue
            yield card
