import argparse
import sys

import structlog
from prometheus_client import CollectorRegistry, generate_latest

from adapters.cache.memory_cache import InMemoryStatsCache
from adapters.http.metrics_server import MetricsServer, parse_listen_address
from adapters.mailgun.mailgun_api_client import MailgunApiClient
from adapters.prometheus.mailgun_collector import MailgunCollector
from adapters.scheduling.interval_scheduler import IntervalScheduler
from application.usecase.scrape_mailgun_stats import ScrapeMailgunStats
from config.logging import configure_logging
from config.settings import (
    API_BASE,
    LISTEN_ADDRESS,
    LOG_LEVEL,
    METRICS_PATH,
    MG_API_KEY,
    VERSION,
)


logger = structlog.get_logger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mailgun-exporter",
        description="Exporter Prometheus para as estatísticas de domínios do Mailgun.",
    )
    parser.add_argument(
        "--web.listen-address",
        dest="listen_address",
        default=LISTEN_ADDRESS,
        help="Endereço de escuta da interface web e da telemetria.",
    )
    parser.add_argument(
        "--web.telemetry-path",
        dest="metrics_path",
        default=METRICS_PATH,
        help="Caminho onde as métricas são expostas.",
    )
    parser.add_argument(
        "--log-level",
        default=LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
    )
    parser.add_argument(
        "--poll-interval",
        type=int,
        default=0,
        help="Atualiza os dados do Mailgun a cada N segundos em background e serve "
             "o último resultado no scrape. 0 (padrão) consulta o Mailgun a cada request.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Roda um único scrape, imprime as métricas e sai (sem servidor HTTP).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser.parse_args(argv)


def make_collector(background: bool = False) -> MailgunCollector:
    logger.info("boot.make_collector", api_base=API_BASE, background=background)

    client = MailgunApiClient(api_key=MG_API_KEY, api_base=API_BASE)
    cache = InMemoryStatsCache()
    scrape = ScrapeMailgunStats(client, cache)
    return MailgunCollector(scrape, background=background)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    if not MG_API_KEY:
        logger.error("boot.config.missing_api_key", env="MG_API_KEY")
        return 1
    if args.poll_interval < 0:
        logger.error("boot.config.invalid_poll_interval", poll_interval=args.poll_interval)
        return 1

    logger.info("boot.start", version=VERSION)
    registry = CollectorRegistry()
    collector = make_collector(background=args.poll_interval > 0)
    registry.register(collector)

    if args.once:
        sys.stdout.write(generate_latest(registry).decode("utf-8"))
        return 0

    try:
        parse_listen_address(args.listen_address)
    except ValueError:
        logger.exception("boot.config.invalid_listen_address", listen_address=args.listen_address)
        return 1

    scheduler = None
    if args.poll_interval > 0:
        scheduler = IntervalScheduler(collector.refresh, args.poll_interval)
        scheduler.run_once()
        scheduler.start()

    server = MetricsServer(args.listen_address, args.metrics_path, registry)
    try:
        server.serve_forever()
    except OSError:
        logger.exception("http.server.bind_error", listen_address=args.listen_address)
        return 1
    except KeyboardInterrupt:
        logger.info("http.server.interrupted")
    finally:
        if scheduler is not None:
            scheduler.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
