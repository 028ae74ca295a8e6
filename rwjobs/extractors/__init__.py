from __future__ import annotations
from typing import Dict, Protocol, Sequence
from rwjobs.core.models import RawPosting

class Extractor(Protocol):
    name: str
    def extract(self) -> Sequence[RawPosting]: ...

# Extractor registry, in scheduling order
REGISTRY: Dict[str, Extractor] = {}

def register(extractor: Extractor) -> None:
    REGISTRY[extractor.name] = extractor

def get(name: str) -> Extractor:
    return REGISTRY[name]

def available() -> list[str]:
    return list(REGISTRY)

from .jobwebrwanda import JobwebRwandaExtractor  # noqa: E402
from .jobinrwanda import JobinRwandaExtractor  # noqa: E402
from .kora import KoraExtractor  # noqa: E402
from .bagwork import BagWorkExtractor  # noqa: E402
from .ndangira import NdangiraExtractor  # noqa: E402
from .greatrwandajobs import GreatRwandaJobsExtractor  # noqa: E402

for _cls in (
    JobwebRwandaExtractor,
    JobinRwandaExtractor,
    KoraExtractor,
    BagWorkExtractor,
    NdangiraExtractor,
    GreatRwandaJobsExtractor,
):
    register(_cls())

__all__ = [
    "Extractor",
    "REGISTRY",
    "register",
    "get",
    "available",
]
