from typing import Dict, Iterable, Tuple

from application.dto.stats_dto import StatsDTO
from domain.model.metrics import MetricKey

# (chave da métrica, label `type` ou None, atributo do StatsDTO).
# Adicionar uma linha muda o schema de métricas exposto.
TAXONOMY: Tuple[Tuple[str, str | None, str], ...] = (
    ("accepted", "incoming", "accepted_incoming"),
    ("accepted", "outgoing", "accepted_outgoing"),
    ("clicked", None, "clicked_total"),
    ("complained", None, "complained_total"),
    ("delivered", "http", "delivered_http"),
    ("delivered", "smtp", "delivered_smtp"),
    ("failed_permanent", "bounce", "failed_permanent_bounce"),
    ("failed_permanent", "delayed_bounce", "failed_permanent_delayed_bounce"),
    ("failed_permanent", "suppress_bounce", "failed_permanent_suppress_bounce"),
    ("failed_permanent", "suppress_complaint", "failed_permanent_suppress_complaint"),
    ("failed_permanent", "suppress_unsubscribe", "failed_permanent_suppress_unsubscribe"),
    ("failed_temporary", "esp_block", "failed_temporary_espblock"),
    ("opened", None, "opened_total"),
    ("stored", None, "stored_total"),
    ("unsubscribed", None, "unsubscribed_total"),
)


def _key(domain_name: str, metric: str, kind: str | None) -> MetricKey:
    labels = (domain_name,) if kind is None else (domain_name, kind)
    return metric, labels


def aggregate(domain_name: str, periods: Iterable[StatsDTO]) -> Dict[MetricKey, float]:
    """
    Soma cada campo da taxonomia sobre todos os buckets de um domínio.

    Toda chave aparece no resultado; categorias sem dados valem 0.0.
    Devolve um dict novo a cada chamada.
    """
    totals: Dict[MetricKey, float] = {
        _key(domain_name, metric, kind): 0.0 for metric, kind, _ in TAXONOMY
    }
    for period in periods:
        for metric, kind, attr in TAXONOMY:
            totals[_key(domain_name, metric, kind)] += float(getattr(period, attr) or 0)
    return totals
