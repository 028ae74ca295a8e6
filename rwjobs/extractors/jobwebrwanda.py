from __future__ import annotations

from .base import SiteExtractor, SelectorChain


class JobwebRwandaExtractor(SiteExtractor):
    name = "jobwebrwanda.com"
    start_urls = ("https://jobwebrwanda.com/",)
    # WordPress job-manager theme; listings are <li class="job_listing"> or plain posts
    card_selector = '.job-listing, .job-item, li[class*="job_listing"], .post, article'
    title = SelectorChain(
        "h3", "h2", "h4", ".title", '[class*="title"]', 'a[href*="job"]',
        min_length=3,
    )
    company = SelectorChain(".company strong", ".company", '[class*="company"]', ".employer", '[class*="employer"]')
    max_pages = 5
