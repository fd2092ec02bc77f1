"""Fakes e fixtures compartilhados."""

import threading
import time
from typing import Dict, List, Optional, Sequence

import pytest

from adapters.cache.memory_cache import InMemoryStatsCache
from application.dto.domain_dto import DomainDTO
from application.dto.stats_dto import StatsDTO
from application.usecase.scrape_mailgun_stats import ScrapeMailgunStats
from ports.mailgun_client import MailgunClientPort, ProviderError


class FakeMailgunClient(MailgunClientPort):
    """Mailgun em memória; quando configurados, os erros são levantados no lugar dos dados."""

    def __init__(
        self,
        domains: Optional[List[DomainDTO]] = None,
        stats: Optional[Dict[str, List[StatsDTO]]] = None,
        list_error: Optional[ProviderError] = None,
        stats_errors: Optional[Dict[str, ProviderError]] = None,
        delay_sec: float = 0.0,
    ) -> None:
        self.domains = domains or []
        self.stats = stats or {}
        self.list_error = list_error
        self.stats_errors = stats_errors or {}
        self.delay_sec = delay_sec
        self.calls: List[tuple] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def list_domains(self) -> List[DomainDTO]:
        self.calls.append(("list_domains",))
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay_sec:
                time.sleep(self.delay_sec)
            if self.list_error is not None:
                raise self.list_error
            return list(self.domains)
        finally:
            with self._lock:
                self.active -= 1

    def fetch_stats(self, domain: str, events: Sequence[str], duration: str) -> List[StatsDTO]:
        self.calls.append(("fetch_stats", domain, tuple(events), duration))
        if domain in self.stats_errors:
            raise self.stats_errors[domain]
        return list(self.stats.get(domain, []))


@pytest.fixture
def active_domain():
    return DomainDTO(name="a.com", state="active")


@pytest.fixture
def cache():
    return InMemoryStatsCache()


@pytest.fixture
def make_scrape(cache):
    def _make(client: FakeMailgunClient) -> ScrapeMailgunStats:
        return ScrapeMailgunStats(client, cache, events=["accepted", "clicked"], duration="240m")
    return _make
