"""Collector Prometheus apoiado no caso de uso de scrape do Mailgun.

Registrado num `CollectorRegistry`; o prometheus_client chama `describe()` uma
vez no registro e `collect()` a cada scrape do endpoint de métricas.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator

import structlog
from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily
from prometheus_client.metrics_core import Metric
from prometheus_client.registry import Collector

from application.usecase.scrape_mailgun_stats import ScrapeMailgunStats
from domain.model.descriptors import DESCRIPTORS, MetricDescriptor
from domain.model.metrics import ScrapeResult

logger = structlog.get_logger(__name__)


def _family(descriptor: MetricDescriptor) -> Metric:
    if descriptor.mtype == "counter":
        return CounterMetricFamily(
            descriptor.name, descriptor.documentation, labels=list(descriptor.labels)
        )
    return GaugeMetricFamily(
        descriptor.name, descriptor.documentation, labels=list(descriptor.labels)
    )


class MailgunCollector(Collector):
    """Converte as amostras de `ScrapeResult` em famílias de métricas.

    Scrapes são serializados: um scrape que chega durante um ciclo espera
    ele terminar e então roda o seu.

    Com ``background=True`` o ciclo é dirigido por um agendador externo que
    chama :meth:`refresh`, e os scrapes servem o último resultado. O primeiro
    scrape ainda roda um ciclo se nada foi coletado.
    """

    def __init__(self, scrape: ScrapeMailgunStats, background: bool = False):
        self._scrape = scrape
        self._background = background
        self._lock = threading.Lock()
        self._last: ScrapeResult | None = None

    def describe(self) -> Iterator[Metric]:
        for descriptor in DESCRIPTORS:
            yield _family(descriptor)

    def refresh(self) -> ScrapeResult:
        """Roda um ciclo sob o lock do collector e guarda o resultado."""
        with self._lock:
            result = self._scrape.execute()
            self._last = result
            return result

    def collect(self) -> Iterator[Metric]:
        result = self._last if self._background else None
        if result is None:
            result = self.refresh()

        families = {d.key: _family(d) for d in DESCRIPTORS}
        for sample in result.samples:
            families[sample.metric].add_metric(list(sample.labels), sample.value)
        families["scrape_duration"].add_metric([], result.duration_sec)

        logger.debug("collector.collect", samples=len(result.samples), up=result.up)
        yield from families.values()


