from typing import List

from application.dto.domain_dto import DomainDTO
from application.dto.stats_dto import StatsDTO

class StatsCachePort:
    """Últimos dados bons conhecidos, usados quando uma chamada ao Mailgun falha."""

    def get_last_domains(self) -> List[DomainDTO]:
        raise NotImplementedError

    def set_last_domains(self, domains: List[DomainDTO]) -> None:
        raise NotImplementedError

    def get_last_stats(self, domain: str) -> List[StatsDTO]:
        raise NotImplementedError

    def set_last_stats(self, domain: str, stats: List[StatsDTO]) -> None:
        raise NotImplementedError
