from abc import ABC, abstractmethod
from typing import List, Sequence

from application.dto.domain_dto import DomainDTO
from application.dto.stats_dto import StatsDTO


class ProviderError(Exception):
    """O Mailgun recusou ou falhou a chamada."""


class ProviderTimeout(ProviderError):
    """A chamada estourou o orçamento de tempo."""


class Unauthorized(ProviderError):
    """O Mailgun respondeu 401/403: API key inválida ou revogada."""


class PaginationError(ProviderError):
    """A listagem de domínios quebrou depois de ler ao menos uma página."""


class MailgunClientPort(ABC):
    """
    Porta para a API de relatórios do Mailgun.

    Todo método devolve dados completos ou levanta `ProviderError`;
    resultados parciais nunca chegam a quem chamou.
    """

    @abstractmethod
    def list_domains(self) -> List[DomainDTO]:
        """Lista todos os domínios da conta, seguindo a paginação até o fim."""
        pass

    @abstractmethod
    def fetch_stats(
        self,
        domain: str,
        events: Sequence[str],
        duration: str,
    ) -> List[StatsDTO]:
        """
        Busca os buckets de estatísticas de um domínio.

        Args:
            domain: Nome do domínio, ex.: "mg.example.com".
            events: Categorias de evento pedidas ("accepted", "failed", ...).
            duration: Janela terminando agora, na notação do Mailgun ("240m", "7d").
        """
        pass
