# domain/model/metrics.py
from dataclasses import dataclass, field
from typing import List, Tuple

# (chave do descritor, valores dos labels na ordem do descritor)
MetricKey = Tuple[str, Tuple[str, ...]]

@dataclass(frozen=True, slots=True)
class MetricSample:
    metric: str
    labels: Tuple[str, ...]
    value: float

@dataclass(slots=True)
class ScrapeResult:
    samples: List[MetricSample] = field(default_factory=list)
    up: bool = True
    domains_total: int = 0
    duration_sec: float = 0.0

    def value(self, metric: str, *labels: str) -> float | None:
        for s in self.samples:
            if s.metric == metric and s.labels == labels:
                return s.value
        return None
