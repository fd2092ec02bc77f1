"""Tabela estática de todas as métricas expostas pelo exporter.

Tanto o describe quanto o collect do collector Prometheus montam as famílias
a partir desta tabela; o que é anunciado e o que é emitido não divergem.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

NAMESPACE = "mailgun"

@dataclass(frozen=True)
class MetricDescriptor:
    key: str
    name: str
    documentation: str
    mtype: str  # "counter" | "gauge"
    labels: Tuple[str, ...] = ()


def _fq_name(*parts: str) -> str:
    return "_".join(p for p in (NAMESPACE, *parts) if p)


def _domain_stats(metric: str, documentation: str, typed: bool = False) -> MetricDescriptor:
    return MetricDescriptor(
        key=metric,
        name=_fq_name("domain_stats", f"{metric}_total"),
        documentation=documentation,
        mtype="counter",
        labels=("name", "type") if typed else ("name",),
    )


DESCRIPTORS: Tuple[MetricDescriptor, ...] = (
    MetricDescriptor(
        "up", _fq_name("up"),
        "'1' if the last scrape of Mailgun's API was successful, '0' otherwise.",
        "gauge",
    ),
    MetricDescriptor(
        "scrape_duration", _fq_name("scrape_duration_seconds"),
        "Wall-clock duration of the last scrape of Mailgun's API in seconds.",
        "gauge",
    ),
    _domain_stats(
        "accepted",
        "Mailgun accepted the request for incoming/outgoing to send/forward the email and the message has been placed in queue.",
        typed=True,
    ),
    _domain_stats("clicked", "The email recipient clicked on a link in the email."),
    _domain_stats(
        "complained",
        "The email recipient clicked on the spam complaint button within their email client.",
    ),
    _domain_stats(
        "delivered",
        "Mailgun sent the email via HTTP or SMTP and it was accepted by the recipient email server.",
        typed=True,
    ),
    _domain_stats(
        "failed_permanent",
        "All permanently failed emails. Includes bounce, delayed bounce, suppress bounce, suppress complaint, suppress unsubscribe.",
        typed=True,
    ),
    _domain_stats(
        "failed_temporary",
        "All temporary failed emails due to ESP block, that will be retried.",
        typed=True,
    ),
    _domain_stats("opened", "The email recipient opened the email and enabled image viewing."),
    _domain_stats("stored", "Mailgun stored the incoming message for later retrieval."),
    _domain_stats("unsubscribed", "The email recipient clicked on the unsubscribe link."),
    MetricDescriptor(
        "state", _fq_name("domain", "state"),
        "Is the domain active (1) or disabled (0)",
        "gauge",
        ("name",),
    ),
)

DESCRIPTORS_BY_KEY: Dict[str, MetricDescriptor] = {d.key: d for d in DESCRIPTORS}
