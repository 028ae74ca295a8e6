"""Run a set of extractors concurrently and merge what they return.

Each selected extractor gets its own worker thread. All of them share one
deadline (``RWJOBS_EXTRACT_TIMEOUT``); an extractor that raises or misses the
deadline contributes nothing and the rest of the run carries on. Results are
merged in registry order, not completion order, so the output only depends on
what each extractor returned.
"""
from __future__ import annotations

import concurrent.futures
import logging
from itertools import chain
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from rwjobs import config
from rwjobs.core.dedupe import merge_postings
from rwjobs.core.models import MergedPosting, RawPosting
from rwjobs.extractors import REGISTRY, Extractor

LOGGER = logging.getLogger(__name__)

ExtractorSet = Union[Mapping[str, Extractor], Sequence[Extractor]]


def _matches(source: str, requested: Iterable[str]) -> bool:
    return any(source in name or name in source for name in requested)


class Orchestrator:
    def __init__(
        self,
        extractors: Optional[ExtractorSet] = None,
        *,
        timeout: float | None = None,
    ):
        if extractors is None:
            extractors = REGISTRY
        if isinstance(extractors, Mapping):
            self._extractors: List[Extractor] = list(extractors.values())
        else:
            self._extractors = list(extractors)
        self.timeout = timeout if timeout is not None else config.extract_timeout()

    def available(self) -> list[str]:
        return [e.name for e in self._extractors]

    def select(self, source_names: Optional[Iterable[str]] = None) -> list[Extractor]:
        if source_names is None:
            return list(self._extractors)
        if isinstance(source_names, str):
            source_names = [source_names]
        requested = [s for s in source_names if s]
        return [e for e in self._extractors if _matches(e.name, requested)]

    def run(self, source_names: Optional[Iterable[str]] = None) -> list[MergedPosting]:
        if isinstance(source_names, str):
            source_names = [source_names]
        requested = None if source_names is None else sorted(set(source_names))
        selected = self.select(requested)
        if not selected:
            LOGGER.warning("orchestrator no-matching-extractors requested=%s", requested)
            return []

        LOGGER.info("orchestrator start sources=%s", ",".join(e.name for e in selected))
        results = self._extract_concurrently(selected)

        merged = merge_postings(chain.from_iterable(results[e.name] for e in selected))
        for e in selected:
            LOGGER.info("orchestrator source=%s postings=%s", e.name, len(results[e.name]))
        LOGGER.info("orchestrator unique=%s", len(merged))
        return merged

    def _extract_concurrently(self, selected: Sequence[Extractor]) -> Dict[str, List[RawPosting]]:
        results: Dict[str, List[RawPosting]] = {e.name: [] for e in selected}
        ex = concurrent.futures.ThreadPoolExecutor(
            max_workers=len(selected), thread_name_prefix="extract"
        )
        try:
            futs = {ex.submit(e.extract): e for e in selected}
            done, not_done = concurrent.futures.wait(futs, timeout=self.timeout)
            for fut in done:
                e = futs[fut]
                try:
                    results[e.name] = list(fut.result())
                except Exception as exc:
                    LOGGER.warning("orchestrator extractor-failed source=%s error=%s", e.name, exc)
            for fut in not_done:
                LOGGER.warning(
                    "orchestrator extractor-timeout source=%s timeout=%ss", futs[fut].name, self.timeout
                )
        finally:
            # A hung extractor keeps its thread; don't block the pipeline on it
            ex.shutdown(wait=False, cancel_futures=True)
        return results


__all__ = ["Orchestrator"]
