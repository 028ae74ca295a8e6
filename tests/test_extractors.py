import unittest
from unittest import mock

import requests

from rwjobs.extractors import REGISTRY, available
from rwjobs.extractors.bagwork import BagWorkExtractor
from rwjobs.extractors.greatrwandajobs import GreatRwandaJobsExtractor
from rwjobs.extractors.jobinrwanda import JobinRwandaExtractor
from rwjobs.extractors.jobwebrwanda import JobwebRwandaExtractor
from rwjobs.extractors.kora import KoraExtractor
from rwjobs.extractors.ndangira import NdangiraExtractor


def serve(pages):
    """fetch_html replacement backed by a url -> html dict."""
    def _fetch(http, url, timeout):
        if url not in pages:
            raise requests.HTTPError(f"404 for {url}")
        return pages[url]
    return _fetch


GREAT_PAGE_1 = """
<html><body>
<div class="job-listing">
  <h3><a href="/jobs/accountant-123">Senior Accountant</a></h3>
  <span class="company">Bank of Kigali</span>
  <span class="location">Kigali</span>
  <span class="deadline">Deadline: 15/03/2026</span>
  <p>We are hiring an experienced accountant to join our finance team.</p>
</div>
<div class="job-listing">
  <h3><a href="https://other.example/job/2">Nurse</a></h3>
  <p class="summary">Part time nursing position at a district hospital.</p>
</div>
<div class="job-listing"><h3>IT</h3></div>
<div class="pagination"><a class="next" href="/?page=2">Next</a></div>
</body></html>
"""

GREAT_PAGE_2 = """
<html><body>
<div class="job-listing">
  <h3><a href="/jobs/driver-9">Driver</a></h3>
  <div>Apply before 01/04/2026</div>
</div>
<div class="job-listing">
  <h3><a href="/jobs/accountant-999">Senior Accountant</a></h3>
  <span class="company">Bank of Kigali</span>
</div>
</body></html>
"""


class GenericExtractorTests(unittest.TestCase):
    def setUp(self):
        self.extractor = GreatRwandaJobsExtractor(timeout=1)

    def test_fields_defaults_and_pagination(self):
        pages = {
            "https://www.greatrwandajobs.com/": GREAT_PAGE_1,
            "https://www.greatrwandajobs.com/?page=2": GREAT_PAGE_2,
        }
        with mock.patch("rwjobs.extractors.base.fetch_html", side_effect=serve(pages)):
            out = self.extractor.extract()

        self.assertEqual([p.title for p in out], ["Senior Accountant", "Nurse", "Driver"])
        acc, nurse, driver = out

        self.assertEqual(acc.url, "https://www.greatrwandajobs.com/jobs/accountant-123")
        self.assertEqual(acc.company, "Bank of Kigali")
        self.assertEqual(acc.location, "Kigali")
        self.assertEqual(acc.deadline, "Deadline: 15/03/2026")
        self.assertTrue(acc.snippet.startswith("We are hiring"))
        self.assertEqual(acc.source, "greatrwandajobs.com")

        self.assertEqual(nurse.url, "https://other.example/job/2")
        self.assertEqual(nurse.company, "Not specified")
        self.assertIsNone(nurse.location)
        self.assertIsNone(nurse.deadline)
        self.assertIn("Part time", nurse.snippet)

        # No deadline element, but a date in the card text
        self.assertEqual(driver.deadline, "01/04/2026")

    def test_fetch_failure_yields_empty_list(self):
        with mock.patch(
            "rwjobs.extractors.base.fetch_html",
            side_effect=requests.ConnectionError("name resolution failed"),
        ):
            self.assertEqual(self.extractor.extract(), [])

    def test_page_without_cards(self):
        pages = {"https://www.greatrwandajobs.com/": "<html><body><p>Maintenance</p></body></html>"}
        with mock.patch("rwjobs.extractors.base.fetch_html", side_effect=serve(pages)):
            self.assertEqual(self.extractor.extract(), [])

    def test_failed_second_page_keeps_first(self):
        pages = {"https://www.greatrwandajobs.com/": GREAT_PAGE_1}
        with mock.patch("rwjobs.extractors.base.fetch_html", side_effect=serve(pages)):
            out = self.extractor.extract()
        self.assertEqual([p.title for p in out], ["Senior Accountant", "Nurse"])


class PaginationTests(unittest.TestCase):
    def test_stops_at_max_pages(self):
        seen = []

        def endless(http, url, timeout):
            seen.append(url)
            n = len(seen)
            return (
                f'<div class="job-listing"><h3><a href="/job/{n}">Position number {n}</a></h3></div>'
                f'<a rel="next" href="/jobs/?page={n + 1}">next</a>'
            )

        extractor = JobwebRwandaExtractor(timeout=1)
        with mock.patch("rwjobs.extractors.base.fetch_html", side_effect=endless):
            out = extractor.extract()

        self.assertEqual(len(seen), extractor.max_pages)
        self.assertEqual(len(out), extractor.max_pages)

    def test_numbered_links(self):
        pages = {
            "https://jobwebrwanda.com/": (
                '<article><h2><a href="/a">Logistics Officer</a></h2></article>'
                '<a href="/?page=3">3</a><a href="/?page=2">2</a>'
            ),
            "https://jobwebrwanda.com/?page=2": '<article><h2><a href="/b">Store Keeper</a></h2></article>',
        }
        with mock.patch("rwjobs.extractors.base.fetch_html", side_effect=serve(pages)):
            out = JobwebRwandaExtractor(timeout=1).extract()
        self.assertEqual([p.title for p in out], ["Logistics Officer", "Store Keeper"])


class KoraTests(unittest.TestCase):
    def test_follows_categories_with_government_defaults(self):
        pages = {
            "https://jobportal.kora.rw/": """
                <div class="job-category"><a href="/category/ict">ICT</a></div>
                <div class="position">
                  <h4>Director of Planning</h4>
                  <a href="/job/77">View</a>
                  <span class="deadline">March 31, 2026</span>
                </div>
            """,
            "https://jobportal.kora.rw/category/ict": """
                <div class="opportunity"><h3>Network Administrator</h3><a href="/job/88">Apply</a></div>
            """,
        }
        with mock.patch("rwjobs.extractors.base.fetch_html", side_effect=serve(pages)):
            out = KoraExtractor(timeout=1).extract()

        self.assertEqual([p.title for p in out], ["Director of Planning", "Network Administrator"])
        self.assertTrue(all(p.company == "Government of Rwanda" for p in out))
        self.assertTrue(all(p.location == "Rwanda" for p in out))
        self.assertEqual(out[0].url, "https://jobportal.kora.rw/job/77")
        self.assertEqual(out[0].deadline, "March 31, 2026")
        self.assertEqual(out[1].url, "https://jobportal.kora.rw/job/88")


class AnchorCardTests(unittest.TestCase):
    def test_metadata_from_surrounding_container(self):
        pages = {
            "https://www.jobinrwanda.com/": """
                <ul>
                  <li class="card">
                    <a href="/job/software-engineer-1">Software Engineer</a>
                    <span class="company">Irembo</span>
                    <span class="date">2026-02-01</span>
                  </li>
                  <li class="card"><a href="/job/x">QA</a></li>
                </ul>
            """,
        }
        with mock.patch("rwjobs.extractors.base.fetch_html", side_effect=serve(pages)):
            out = JobinRwandaExtractor(timeout=1).extract()

        (job,) = out
        self.assertEqual(job.title, "Software Engineer")
        self.assertEqual(job.url, "https://www.jobinrwanda.com/job/software-engineer-1")
        self.assertEqual(job.company, "Irembo")
        self.assertEqual(job.deadline, "2026-02-01")


class BagWorkTests(unittest.TestCase):
    def test_falls_back_to_app_root(self):
        pages = {
            "https://app.bag.work/": """
                <div class="job-card">
                  <h3>Barista</h3>
                  <span class="company-name">Question Coffee</span>
                  <a href="/jobs/barista">Apply</a>
                </div>
                <div class="job-card"><h3>PA</h3></div>
            """,
        }
        with mock.patch("rwjobs.extractors.base.fetch_html", side_effect=serve(pages)):
            out = BagWorkExtractor(timeout=1).extract()

        # "PA" is below the minimum title length
        (job,) = out
        self.assertEqual(job.company, "Question Coffee")
        self.assertEqual(job.url, "https://app.bag.work/jobs/barista")


class NdangiraTests(unittest.TestCase):
    def test_posts_with_various_employers(self):
        pages = {
            "https://www.ndangira.net/": """
                <article>
                  <h2 class="entry-title"><a href="/2026/01/recruitment-at-mtn">Recruitment at MTN Rwanda</a></h2>
                  <p>Several openings in sales and customer care. Deadline 20/01/2026.</p>
                </article>
                <article><h2><a href="/2026/01/job">Jobs</a></h2></article>
            """,
        }
        with mock.patch("rwjobs.extractors.base.fetch_html", side_effect=serve(pages)):
            out = NdangiraExtractor(timeout=1).extract()

        (job,) = out
        self.assertEqual(job.title, "Recruitment at MTN Rwanda")
        self.assertEqual(job.company, "Various Organizations")
        self.assertEqual(job.url, "https://www.ndangira.net/2026/01/recruitment-at-mtn")
        self.assertEqual(job.deadline, "20/01/2026")


class RegistryTests(unittest.TestCase):
    def test_registry_order(self):
        self.assertEqual(available(), [
            "jobwebrwanda.com",
            "jobinrwanda.com",
            "kora.rw",
            "bag.work",
            "ndangira.net",
            "greatrwandajobs.com",
        ])
        self.assertTrue(all(REGISTRY[name].name == name for name in available()))


if __name__ == "__main__":
    unittest.main()
