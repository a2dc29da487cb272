"""
Fan-out search across entity collaborators.

The same query is sent to up to four collaborators in parallel; each
source's records are normalized and matched with that entity's searchable
fields. One source failing never cancels the others: its error is logged,
its contribution is empty and its name is reported in ``failed``.

Usage:
    result = fan_out_search("js", collaborators)
    result.to_dict()
    # -> {"query": "js", "results": {"projects": [...], ...}, "failed": []}
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from bizdesk.middleware.timing import record_backend_call
from bizdesk.services.entities import ENTITIES
from bizdesk.services.list_filter import filter_records
from bizdesk.services.normalizer import normalize_many, render_record

logger = logging.getLogger(__name__)

MAX_SOURCES = 4
DEFAULT_SOURCES = ("users", "projects", "services", "notifications")
DEFAULT_LIMIT_PER_SOURCE = 5


@dataclass
class SearchResult:
    query: str
    results: dict = field(default_factory=dict)
    failed: list = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(len(v) for v in self.results.values())

    def to_dict(self) -> dict:
        return {
            "query": self.query,
            "results": {
                name: [render_record(r) for r in records]
                for name, records in self.results.items()
            },
            "total": self.total,
            "failed": list(self.failed),
        }


@dataclass
class _SourceOutcome:
    records: list = field(default_factory=list)
    error: BaseException | None = None
    duration_ms: float = 0.0


def _search_source(name: str, api, query: str, limit: int | None) -> _SourceOutcome:
    spec = ENTITIES[name]
    started = time.perf_counter()
    try:
        raws = api.get_all()
    except Exception as exc:
        return _SourceOutcome(error=exc, duration_ms=(time.perf_counter() - started) * 1000)
    duration_ms = (time.perf_counter() - started) * 1000
    matches = filter_records(normalize_many(spec.normalize, raws), query, None, spec.searchable)
    return _SourceOutcome(matches[:limit] if limit else matches, duration_ms=duration_ms)


def fan_out_search(
    query: str | None,
    collaborators: dict,
    *,
    sources: tuple | None = None,
    limit: int | None = DEFAULT_LIMIT_PER_SOURCE,
    max_workers: int = MAX_SOURCES,
) -> SearchResult:
    """Search every source in parallel, tolerating individual failures.

    Args:
        query: Free text; blank queries return an empty result without
               calling any collaborator.
        collaborators: Entity name → client with ``get_all()``.
        sources: Entity names to search (default: ``DEFAULT_SOURCES``, at
                 most four).
        limit: Max matches kept per source (None for all).
        max_workers: Thread pool size.

    Workers run outside the request context, so each source's round-trip
    is accounted against the request here, on the calling thread.
    """
    query = (query or "").strip()
    result = SearchResult(query=query)
    if not query:
        return result

    names = [n for n in (sources or DEFAULT_SOURCES) if n in ENTITIES and n in collaborators]
    names = names[:MAX_SOURCES]
    if not names:
        return result

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(names)))) as pool:
        futures = {
            name: pool.submit(_search_source, name, collaborators[name], query, limit)
            for name in names
        }
        for name, future in futures.items():
            outcome = future.result()
            record_backend_call(outcome.duration_ms)
            result.results[name] = outcome.records
            if outcome.error is not None:
                logger.error("Search source %s failed for query=%r", name, query,
                             exc_info=outcome.error, extra={"entity": name})
                result.failed.append(name)

    return result
