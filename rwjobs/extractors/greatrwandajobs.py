from __future__ import annotations

from .base import SiteExtractor


class GreatRwandaJobsExtractor(SiteExtractor):
    name = "greatrwandajobs.com"
    start_urls = ("https://www.greatrwandajobs.com/",)
    card_selector = '.job-listing, .job-item, [class*="job-list"] > li, .post, article'
    max_pages = 10
