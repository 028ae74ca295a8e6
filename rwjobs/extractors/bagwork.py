from __future__ import annotations

from .base import SiteExtractor, SelectorChain


class BagWorkExtractor(SiteExtractor):
    name = "bag.work"
    # The job board first; the app root links to it when the direct URL fails
    start_urls = ("https://app.bag.work/job-board", "https://app.bag.work/")
    card_selector = (
        ".job-card, [class*=\"job-card\"], .job-listing, .job-item, "
        "[class*=\"JobCard\"], .opportunity, .card"
    )
    title = SelectorChain(
        "h1", "h2", "h3", "h4",
        ".job-title", '[class*="job-title"]',
        ".title", '[class*="title"]',
        ".position", '[class*="position"]',
        'a[href*="job"]',
        min_length=4,
    )
    company = SelectorChain(
        ".company-name", '[class*="company-name"]', ".company", '[class*="company"]',
        ".employer", '[class*="employer"]', ".organization", '[class*="organization"]',
    )
    location = SelectorChain(".location", '[class*="location"]', ".job-location", ".place", '[class*="place"]')
    deadline = SelectorChain(
        ".deadline", '[class*="deadline"]', ".expiry", '[class*="expir"]',
        ".closing-date", ".date", '[class*="date"]',
    )
    snippet = SelectorChain(
        ".description", '[class*="description"]', ".job-description",
        ".summary", '[class*="summary"]', ".excerpt", "p",
        min_length=10,
    )
