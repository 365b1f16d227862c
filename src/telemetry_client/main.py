#!/usr/bin/env python3
from __future__ import annotations

import argparse
import socket
import sys
import time
from pathlib import Path
from typing import Any, List, Optional, Sequence

from telemetry_client.__version__ import __version__
from telemetry_client.collectors import run_builtin_collectors
from telemetry_client.core import serialization
from telemetry_client.core.api_client import (
    EVENTS_PATH,
    SERIES_PATH,
    APIClient,
    ResponseBodyError,
    TransportError,
)
from telemetry_client.core.config_loader import Config, ConfigError, ConfigLoader
from telemetry_client.core.logger import configure_logging, get_logger, log_phase
from telemetry_client.models import AlertType, Event, MetricPoint, MetricSeries, MetricType, Priority


logger = get_logger(__name__)


# Exit codes
EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_REJECTED = 2
EXIT_NETWORK_ERROR = 3


# ---------------------------------------------------------------------------
# CLI PARSING
# ---------------------------------------------------------------------------

def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="telemetry-client",
        description="Telemetry Client - envoi de métriques et d'événements",
    )

    parser.add_argument(
        "--config",
        help="Chemin vers le fichier de configuration (defaut: config/config.yaml)",
        type=str,
        default="config/config.yaml",
    )
    parser.add_argument(
        "--dry-run",
        help="Affiche le payload JSON sans rien envoyer au serveur",
        action="store_true",
    )
    parser.add_argument(
        "--verbose",
        help="Active le mode DEBUG pour les logs",
        action="store_true",
    )
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("metrics", help="Collecte et envoie un instantané système")

    gauge = subparsers.add_parser("gauge", help="Envoie une série d'un seul point")
    gauge.add_argument("name")
    gauge.add_argument("value", type=float)
    gauge.add_argument("--type", choices=[t.value for t in MetricType], default=MetricType.GAUGE.value)
    gauge.add_argument("--interval", type=int)
    gauge.add_argument("--tag", action="append", default=[])

    event = subparsers.add_parser("event", help="Poste un événement")
    event.add_argument("title")
    event.add_argument("text")
    event.add_argument("--alert-type", choices=[a.value for a in AlertType])
    event.add_argument("--priority", choices=[p.value for p in Priority])
    event.add_argument("--aggregation-key")
    event.add_argument("--source-type-name")
    event.add_argument("--tag", action="append", default=[])

    return parser.parse_args(argv)


# ---------------------------------------------------------------------------
# PAYLOAD BUILDERS
# ---------------------------------------------------------------------------

def _build_series(args: argparse.Namespace, config: Config, hostname: str) -> List[MetricSeries]:
    if args.command == "metrics":
        return run_builtin_collectors(host=hostname, tags=config.tags)

    series = MetricSeries(args.name, MetricType(args.type), tags=list(args.tag) + config.tags)
    series.add_point(MetricPoint(int(time.time()), args.value)).set_host(hostname)
    if args.interval is not None:
        series.set_interval(args.interval)
    return [series]


def _build_event(args: argparse.Namespace, config: Config, hostname: str) -> Event:
    event = Event(args.title, args.text, tags=list(args.tag) + config.tags).set_host(hostname)
    if args.alert_type:
        event.set_alert_type(AlertType(args.alert_type))
    if args.priority:
        event.set_priority(Priority(args.priority))
    if args.aggregation_key:
        event.set_aggregation_key(args.aggregation_key)
    if args.source_type_name:
        event.set_source_type_name(args.source_type_name)
    return event


# ---------------------------------------------------------------------------
# MAIN ORCHESTRATION
# ---------------------------------------------------------------------------

def main(argv: Optional[Sequence[str]] = None, client: Optional[APIClient] = None) -> int:
    args = parse_cli_args(argv)

    configure_logging(level="DEBUG" if args.verbose else "INFO", fmt="plain")

    # ------------------------
    # 1) LOAD CONFIG
    # ------------------------
    try:
        config_path = Path(args.config)
        config = ConfigLoader(config_path=config_path, base_dir=config_path.resolve().parent).load()
    except ConfigError as exc:
        logger.error("Erreur de configuration : %s", exc)
        return EXIT_CONFIG_ERROR

    configure_logging(
        level="DEBUG" if args.verbose else config.logging.level,
        fmt=config.logging.format,
        console_enabled=config.logging.console_enabled,
        file_path=config.logging.file_name if config.logging.file_enabled else None,
        force=True,
    )
    log_phase(logger, "config.loaded", "Configuration chargée avec succès")

    # ------------------------
    # 2) BUILD PAYLOAD
    # ------------------------
    hostname = _resolve_hostname(config)
    payload: Any
    if args.command == "event":
        path = EVENTS_PATH
        payload = _build_event(args, config, hostname)
    else:
        path = SERIES_PATH
        payload = {"series": _build_series(args, config, hostname)}

    # ------------------------
    # 3) SEND or DRY-RUN
    # ------------------------
    if args.dry_run:
        log_phase(logger, "dryrun", "Mode dry-run, aucun envoi effectué")
        print(serialization.to_json(payload))
        return EXIT_OK

    api_client = client or APIClient(config.service_config())
    try:
        api_client.post(path, payload)
    except ResponseBodyError as exc:
        logger.error("Requête rejetée (HTTP %s) :", exc.status)
        for message in exc.messages:
            logger.error("  - %s", message)
        return EXIT_REJECTED
    except TransportError as exc:
        logger.error("Erreur réseau/API : %s", exc)
        return EXIT_NETWORK_ERROR

    log_phase(logger, "api.sent", f"Payload envoyé sur {path}")
    return EXIT_OK


# ---------------------------------------------------------------------------
# Helpers internes
# ---------------------------------------------------------------------------

def _resolve_hostname(config: Config) -> str:
    """Détermine le hostname selon les règles de configuration."""
    src = config.machine.hostname_source
    if src == "fqdn":
        return socket.getfqdn()
    if src == "static":
        return config.machine.hostname_override or socket.gethostname()
    return socket.gethostname()


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.error("Interruption manuelle (CTRL+C).")
        sys.exit(1)
