import threading
from typing import Dict, List

import structlog

from application.dto.domain_dto import DomainDTO
from application.dto.stats_dto import StatsDTO
from ports.stats_cache import StatsCachePort

logger = structlog.get_logger(__name__)


class InMemoryStatsCache(StatsCachePort):
    """
    Guarda, enquanto o processo vive, a última lista de domínios boa e,
    por domínio, as últimas estatísticas boas. Sem expiração: uma entrada
    só muda quando uma busca nova dá certo. Listas são copiadas na entrada
    e na saída.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._domains: List[DomainDTO] = []
        self._stats: Dict[str, List[StatsDTO]] = {}

    def get_last_domains(self) -> List[DomainDTO]:
        with self._lock:
            return list(self._domains)

    def set_last_domains(self, domains: List[DomainDTO]) -> None:
        with self._lock:
            self._domains = list(domains)
        logger.debug("cache.domains.stored", total=len(domains))

    def get_last_stats(self, domain: str) -> List[StatsDTO]:
        with self._lock:
            return list(self._stats.get(domain, ()))

    def set_last_stats(self, domain: str, stats: List[StatsDTO]) -> None:
        with self._lock:
            self._stats[domain] = list(stats)
        logger.debug("cache.stats.stored", domain=domain, periods=len(stats))
