from __future__ import annotations

import time
from typing import Any, Generator, List, Sequence

import requests
import structlog
from requests.adapters import Retry
from urllib3.exceptions import ConnectTimeoutError, MaxRetryError, ReadTimeoutError

from application.dto.domain_dto import DomainDTO
from application.dto.stats_dto import StatsDTO
from config.settings import API_BASE, DOMAINS_PAGE_LIMIT, MG_API_KEY, REQUEST_TIMEOUT_SEC
from ports.mailgun_client import (
    MailgunClientPort,
    PaginationError,
    ProviderError,
    ProviderTimeout,
    Unauthorized,
)

logger = structlog.get_logger(__name__)


def _default_retry() -> Retry:
    return Retry(
        total=2,
        backoff_factor=0.5,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
    )


class MailgunApiClient(MailgunClientPort):
    """
    Adaptador da API de relatórios do Mailgun.
    Uma única sessão para todos os domínios; o domínio vai como argumento.
    Cada chamada tem um orçamento de tempo (`timeout_sec`) que cobre todas
    as tentativas, esperas de backoff e páginas. Timeouts nunca são
    repetidos. Falhas viram a família `ProviderError`.
    """

    _CONNECT_TIMEOUT = 3.05

    def __init__(
        self,
        api_key: str | None = None,
        api_base: str | None = None,
        timeout_sec: float = REQUEST_TIMEOUT_SEC,
        page_limit: int = DOMAINS_PAGE_LIMIT,
        session: requests.Session | None = None,
        retry: Retry | None = None,
    ) -> None:
        self.api_key = api_key or MG_API_KEY
        self.base_url = (api_base or API_BASE).rstrip("/")
        self.timeout_sec = timeout_sec
        self.page_limit = page_limit
        self.session = session or requests.Session()
        self.retry = retry or _default_retry()

    # --------------------------------------------------------------------- #
    #   API pública                                                         #
    # --------------------------------------------------------------------- #
    def list_domains(self) -> List[DomainDTO]:
        log = logger.bind(page_limit=self.page_limit)
        log.debug("mailgun.list_domains.start")

        domains = [
            self._domain_from_api(item)
            for page in self._paginate(f"{self.base_url}/domains", log)
            for item in page
        ]

        log.debug("mailgun.list_domains.success", total=len(domains))
        return domains

    def fetch_stats(
        self, domain: str, events: Sequence[str], duration: str
    ) -> List[StatsDTO]:
        log = logger.bind(domain=domain, duration=duration)
        log.debug("mailgun.fetch_stats.start")

        params = [("event", e) for e in events] + [("duration", duration)]
        data = self._get(f"{self.base_url}/{domain}/stats/total", params)
        items = data.get("stats") or []
        if not isinstance(items, list):
            log.error("mailgun.fetch_stats.unexpected_payload", stats_type=type(items).__name__)
            raise ProviderError(f"unexpected stats payload for {domain}: 'stats' is not a list")
        stats = [self._stats_from_api(item) for item in items]

        log.debug("mailgun.fetch_stats.success", periods=len(stats))
        return stats

    # --------------------------------------------------------------------- #
    #   Helpers privados                                                    #
    # --------------------------------------------------------------------- #
    @staticmethod
    def _is_timeout(exc: requests.RequestException) -> bool:
        if isinstance(exc, requests.Timeout):
            return True
        # urllib3 embrulha o timeout em MaxRetryError -> ConnectionError
        cause = exc.args[0] if exc.args else None
        if isinstance(cause, MaxRetryError):
            cause = cause.reason
        return isinstance(cause, (ReadTimeoutError, ConnectTimeoutError))

    def _timed_out(self, url: str) -> ProviderTimeout:
        logger.error("mailgun.request.timeout", url=url, budget_sec=self.timeout_sec)
        return ProviderTimeout(f"GET {url} exceeded its {self.timeout_sec}s budget")

    def _next_retry(self, retry: Retry, url: str, deadline: float, error=None) -> Retry | None:
        """Próxima tentativa, ou None se as tentativas ou o orçamento acabaram."""
        try:
            retry = retry.increment("GET", url, error=error)
        except MaxRetryError:
            return None
        delay = retry.get_backoff_time()
        if time.monotonic() + delay >= deadline:
            return None
        logger.warning("mailgun.request.retry", url=url, attempt=len(retry.history), delay_sec=delay)
        if delay > 0:
            time.sleep(delay)
        return retry

    def _get(self, url: str, params: Any = None, deadline: float | None = None) -> dict:
        """GET com orçamento de tempo, retries e mapeamento de erros."""
        if deadline is None:
            deadline = time.monotonic() + self.timeout_sec
        retry = self.retry

        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise self._timed_out(url)
            try:
                resp = self.session.get(
                    url,
                    params=params,
                    auth=("api", self.api_key or ""),
                    timeout=(min(self._CONNECT_TIMEOUT, remaining), remaining),  # (connect, read)
                )
            except requests.RequestException as exc:
                if self._is_timeout(exc):
                    raise self._timed_out(url) from exc
                if isinstance(exc, requests.ConnectionError):
                    next_retry = self._next_retry(retry, url, deadline, error=exc)
                    if next_retry is not None:
                        retry = next_retry
                        continue
                logger.exception("mailgun.request.error", url=url)
                raise ProviderError(f"GET {url} failed: {exc}") from exc

            if retry.is_retry("GET", resp.status_code):
                next_retry = self._next_retry(retry, url, deadline)
                if next_retry is not None:
                    retry = next_retry
                    continue
            return self._decode(url, resp)

    @staticmethod
    def _decode(url: str, resp: requests.Response) -> dict:
        if resp.status_code in (401, 403):
            logger.error("mailgun.request.unauthorized", url=url, status=resp.status_code)
            raise Unauthorized(f"Mailgun rejected the API key ({resp.status_code}) for {url}")
        try:
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            logger.exception("mailgun.request.error", url=url)
            raise ProviderError(f"GET {url} failed: {exc}") from exc
        except ValueError as exc:
            logger.exception("mailgun.request.invalid_json", url=url)
            raise ProviderError(f"GET {url} returned invalid JSON") from exc

        if not isinstance(data, dict):
            logger.error("mailgun.request.unexpected_payload", url=url, payload_type=type(data).__name__)
            raise ProviderError(f"GET {url} returned {type(data).__name__}, expected an object")
        return data

    def _paginate(self, url: str, log) -> Generator[list, None, None]:
        """
        Percorre páginas skip/limit até uma vir curta ou vazia, ou até ler
        `total_count` itens. Todas as páginas dividem o mesmo orçamento.
        """
        deadline = time.monotonic() + self.timeout_sec
        skip = 0
        page = 0

        while True:
            page += 1
            log.debug("mailgun.pagination.page", num=page, skip=skip)
            try:
                data = self._get(url, {"limit": self.page_limit, "skip": skip}, deadline)
            except (ProviderTimeout, Unauthorized):
                raise
            except ProviderError as exc:
                if page == 1:
                    raise
                log.error("mailgun.pagination.aborted", num=page, skip=skip)
                raise PaginationError(
                    f"listing {url} aborted on page {page}: {exc}"
                ) from exc

            items = data.get("items") or []
            if not isinstance(items, list):
                log.error("mailgun.pagination.unexpected_payload", num=page)
                raise ProviderError(f"listing {url}: 'items' is not a list on page {page}")
            yield items

            skip += len(items)
            total = data.get("total_count")
            if len(items) < self.page_limit or (isinstance(total, int) and skip >= total):
                return

    # -------- conversores ------------------------------------------------- #
    @staticmethod
    def _domain_from_api(item: Any) -> DomainDTO:
        name = item.get("name") if isinstance(item, dict) else None
        if not isinstance(name, str) or not name:
            logger.error("mailgun.domain.unexpected_payload", item=repr(item)[:200])
            raise ProviderError(f"unexpected domain item without a name: {repr(item)[:200]}")
        return DomainDTO(
            name=name,
            state=str(item.get("state") or ""),
            type=item.get("type"),
            created_at=item.get("created_at"),
            spam_action=item.get("spam_action"),
            smtp_login=item.get("smtp_login"),
            wildcard=bool(item.get("wildcard", False)),
        )

    @staticmethod
    def _count(section: Any, *path: str) -> int:
        node: Any = section or {}
        for key in path:
            node = node.get(key) if isinstance(node, dict) else None
        try:
            return max(int(node or 0), 0)
        except (TypeError, ValueError):
            return 0

    @classmethod
    def _stats_from_api(cls, item: Any) -> StatsDTO:
        if not isinstance(item, dict):
            logger.error("mailgun.stats.unexpected_payload", item=repr(item)[:200])
            raise ProviderError(f"unexpected stats item: {repr(item)[:200]}")
        c = cls._count
        failed = item.get("failed")
        return StatsDTO(
            time=item.get("time"),
            accepted_incoming=c(item.get("accepted"), "incoming"),
            accepted_outgoing=c(item.get("accepted"), "outgoing"),
            clicked_total=c(item.get("clicked"), "total"),
            complained_total=c(item.get("complained"), "total"),
            delivered_http=c(item.get("delivered"), "http"),
            delivered_smtp=c(item.get("delivered"), "smtp"),
            failed_permanent_bounce=c(failed, "permanent", "bounce"),
            failed_permanent_delayed_bounce=c(failed, "permanent", "delayed-bounce"),
            failed_permanent_suppress_bounce=c(failed, "permanent", "suppress-bounce"),
            failed_permanent_suppress_complaint=c(failed, "permanent", "suppress-complaint"),
            failed_permanent_suppress_unsubscribe=c(failed, "permanent", "suppress-unsubscribe"),
            failed_temporary_espblock=c(failed, "temporary", "espblock"),
            opened_total=c(item.get("opened"), "total"),
            stored_total=c(item.get("stored"), "total"),
            unsubscribed_total=c(item.get("unsubscribed"), "total"),
        )
