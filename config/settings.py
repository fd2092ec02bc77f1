import os

# --- Configurações ---
def _split_list(value: str | None) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()] if value else []

VERSION = "0.1.0"

MG_API_KEY = os.getenv("MG_API_KEY")
# API_BASE tem precedência sobre MG_URL; ambos apontam para o endpoint da região
API_BASE = os.getenv("API_BASE") or os.getenv("MG_URL") or "https://api.mailgun.net/v3"

LISTEN_ADDRESS = os.getenv("LISTEN_ADDRESS", ":9616")
METRICS_PATH = os.getenv("METRICS_PATH", "/metrics")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

STATS_DURATION = os.getenv("STATS_DURATION", "240m")
STATS_EVENTS: list[str] = _split_list(os.getenv("STATS_EVENTS")) or [
    "accepted", "clicked", "complained", "delivered",
    "failed", "opened", "stored", "unsubscribed",
]
DOMAINS_PAGE_LIMIT = int(os.getenv("DOMAINS_PAGE_LIMIT", 100))
REQUEST_TIMEOUT_SEC = 30
