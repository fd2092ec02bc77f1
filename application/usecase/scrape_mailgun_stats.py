from __future__ import annotations

import time
from typing import List, Sequence

import structlog

from application.dto.domain_dto import DomainDTO
from application.dto.stats_dto import StatsDTO
from config.settings import STATS_DURATION, STATS_EVENTS
from domain.model.metrics import MetricSample, ScrapeResult
from domain.service.stats_aggregator import aggregate
from ports.mailgun_client import MailgunClientPort, ProviderError
from ports.stats_cache import StatsCachePort

logger = structlog.get_logger(__name__).bind(use_case="scrape_mailgun_stats")


class ScrapeMailgunStats:
    """
    Um ciclo de coleta: lista os domínios, busca e agrega as estatísticas
    de cada um e emite as amostras. Uma chamada ao Mailgun que falha cai
    para o valor em cache e marca o ciclo inteiro como down; nunca aborta.

    Não é reentrante: quem chama não deve rodar dois ciclos ao mesmo tempo.
    """

    def __init__(
        self,
        client: MailgunClientPort,
        cache: StatsCachePort,
        events: Sequence[str] = tuple(STATS_EVENTS),
        duration: str = STATS_DURATION,
    ) -> None:
        self.client = client
        self.cache = cache
        self.events = tuple(events)
        self.duration = duration

    # ------------------------------------------------------------------ #
    #  API pública                                                       #
    # ------------------------------------------------------------------ #
    def execute(self) -> ScrapeResult:
        started = time.monotonic()
        result = ScrapeResult()
        logger.debug("scrape.start")

        domains = self._domains(result)
        for info in domains:
            stats = self._stats(info.name, result)
            self._emit_domain(info, stats, result)

        result.domains_total = len(domains)
        result.samples.append(MetricSample("up", (), 1.0 if result.up else 0.0))
        result.duration_sec = time.monotonic() - started

        logger.debug(
            "scrape.finish",
            up=result.up,
            domains=result.domains_total,
            duration_sec=round(result.duration_sec, 3),
        )
        return result

    # ------------------------------------------------------------------ #
    #  Helpers privados                                                  #
    # ------------------------------------------------------------------ #
    def _domains(self, result: ScrapeResult) -> List[DomainDTO]:
        try:
            domains = self.client.list_domains()
        except ProviderError as exc:
            result.up = False
            cached = self.cache.get_last_domains()
            logger.error(
                "scrape.list_domains.error",
                error=str(exc),
                error_type=type(exc).__name__,
                cached_domains=len(cached),
            )
            return cached

        self.cache.set_last_domains(domains)
        logger.debug("scrape.list_domains.success", total=len(domains))
        return domains

    def _stats(self, domain: str, result: ScrapeResult) -> List[StatsDTO]:
        log = logger.bind(domain=domain)
        try:
            stats = self.client.fetch_stats(domain, self.events, self.duration)
        except ProviderError as exc:
            result.up = False
            cached = self.cache.get_last_stats(domain)
            log.error(
                "scrape.fetch_stats.error",
                error=str(exc),
                error_type=type(exc).__name__,
                cached_periods=len(cached),
            )
            return cached

        self.cache.set_last_stats(domain, stats)
        log.debug("scrape.fetch_stats.success", periods=len(stats))
        return stats

    @staticmethod
    def _emit_domain(info: DomainDTO, stats: List[StatsDTO], result: ScrapeResult) -> None:
        for (metric, labels), value in aggregate(info.name, stats).items():
            result.samples.append(MetricSample(metric, labels, value))
        result.samples.append(
            MetricSample("state", (info.name,), 1.0 if info.is_active else 0.0)
        )
