from __future__ import annotations

from bs4.element import Tag

from .base import SiteExtractor, SelectorChain, in_container, own_text

# Cards are frequently bare <a href=".../job/..."> elements; their metadata
# sits in the surrounding container rather than inside the anchor.
CONTAINER = ".job-container, .job-listing, .post, article, .card, li"


class JobinRwandaExtractor(SiteExtractor):
    name = "jobinrwanda.com"
    start_urls = ("https://www.jobinrwanda.com/",)
    card_selector = 'a[href*="/job/"], .job-item, [class*="job-item"]'
    title = SelectorChain(
        own_text("a"),
        "h1", "h2", "h3", "h4", ".title", '[class*="title"]', "a",
        min_length=3,
    )
    company = SelectorChain(
        ".company", '[class*="company"]', ".employer", '[class*="employer"]',
        in_container(CONTAINER, ".company, [class*=company], .employer, [class*=employer]"),
    )
    location = SelectorChain(
        ".location", '[class*="location"]',
        in_container(CONTAINER, ".location, [class*=location], .place, [class*=place]"),
    )
    deadline = SelectorChain(
        ".deadline", '[class*="deadline"]', ".date", '[class*="date"]',
        in_container(CONTAINER, ".deadline, [class*=deadline], .date, [class*=date]"),
    )
    snippet = SelectorChain(
        ".description", '[class*="description"]', ".summary",
        in_container(CONTAINER, ".description, [class*=description], .summary, [class*=summary], p"),
        min_length=10,
    )
    max_pages = 10

    def cards(self, soup):
        for card in super().cards(soup):
            # Skip anchors nested inside a job-item we already yield
            if card.name == "a" and isinstance(card.find_parent(class_="job-item"), Tag):
                continue
            yield card
