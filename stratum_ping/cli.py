"""Command line entry point: a protocol-aware ping for Stratum pools."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from . import ApplicationContext, __version__, bootstrap
from .errors import ConfigurationError
from .probe.models import ProbeConfig
from .probe.resolver import resolve_endpoint, split_server
from .probe.sampler import SamplingLoop, validate_run
from .report import JsonReporter, TextReporter

LOGGER = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive number, got {value}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="stratum-ping",
        description="Measure Stratum request/response latency against a mining pool",
    )
    parser.add_argument("--server", help="Pool address <HOST:PORT>")
    parser.add_argument("-u", "--login", help="Worker login, some pools require user and/or worker name")
    parser.add_argument("-p", "--pass", dest="password", help="Worker password, most pools ignore it")
    parser.add_argument(
        "-c",
        "--count",
        "-a",
        "--attempts",
        dest="count",
        type=_positive_int,
        help="Number of pings used to determine the response time",
    )
    # Validated by the probe engine so bad variants fail before any connection.
    parser.add_argument("--proto", help="Stratum protocol kind: stratum1 or stratum2")
    parser.add_argument("--tls", action="store_true", default=None, help="Wrap the connection in TLS")
    parser.add_argument("--timeout", type=_positive_float, help="Per read/write timeout in seconds")
    parser.add_argument("--ipv6", action="store_true", default=None, help="Resolve IPv6 addresses only")
    parser.add_argument(
        "--include-connect",
        action="store_true",
        default=None,
        help="Start the timer before connecting so TCP and TLS setup are included",
    )
    parser.add_argument("--json", action="store_true", help="Print the final statistics as JSON")
    parser.add_argument("--record", action="store_true", default=None, help="Store the run summary in history")
    parser.add_argument("--history", type=_positive_int, metavar="N", help="Show the N most recent runs and exit")
    parser.add_argument("--export-csv", metavar="PATH", help="Write stored runs to a CSV file")
    parser.add_argument("--config", help="Path to a stratum-ping.yaml file")
    parser.add_argument("--log-level", help="Logging level (default: error)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def _pick(value, fallback):
    return fallback if value is None else value


def build_probe_config(args: argparse.Namespace, context: ApplicationContext) -> ProbeConfig:
    defaults = context.config.ping
    return ProbeConfig.from_settings(
        proto=_pick(args.proto, defaults.proto),
        login=_pick(args.login, defaults.login),
        password=_pick(args.password, defaults.password),
        use_tls=_pick(args.tls, defaults.tls),
        timeout=_pick(args.timeout, defaults.timeout),
        sample_count=_pick(args.count, defaults.count),
        include_connect=_pick(args.include_connect, defaults.include_connect),
    )


def _fail(message: str) -> int:
    print(f"stratum-ping: error: {message}", file=sys.stderr)
    return 1


def _show_history(context: ApplicationContext, limit: int, server: Optional[str], as_json: bool) -> None:
    runs = [context.history.to_dict(run) for run in context.history.recent(limit, server)]
    if as_json:
        print(json.dumps(runs, indent=2))
        return
    for run in runs:
        timing = "no replies"
        if run["avg_ms"] is not None:
            timing = f"min={run['min_ms']:.2f}ms avg={run['avg_ms']:.2f}ms max={run['max_ms']:.2f}ms"
        print(
            f"{run['timestamp']} {run['server']} ({run['address']}) {run['protocol']}"
            f" tls={str(run['tls']).lower()} {run['received']}/{run['transmitted']}"
            f" {run['loss_percent']}% loss {timing}"
        )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        context = bootstrap(args.config, args.log_level)
    except (OSError, yaml.YAMLError, TypeError, ValueError) as exc:
        return _fail(f"invalid configuration: {exc}")

    server = _pick(args.server, context.config.ping.server)

    if args.history is not None:
        _show_history(context, args.history, server, args.json)
        return 0

    if not server:
        if args.export_csv:
            target = context.exporter.write_snapshot(Path(args.export_csv))
            LOGGER.info("Exported run history to %s", target)
            return 0
        return _fail("a pool address is required (--server HOST:PORT)")

    try:
        split_server(server)
        probe_config = build_probe_config(args, context)
        validate_run(probe_config)
        endpoint = resolve_endpoint(server, ipv6=_pick(args.ipv6, context.config.ping.ipv6))
    except ConfigurationError as exc:
        return _fail(str(exc))

    reporter = JsonReporter() if args.json else TextReporter()
    stats = SamplingLoop(endpoint, probe_config, reporter).run()

    if _pick(args.record, context.config.storage.enabled):
        context.history.record(server, endpoint, probe_config, stats)
    if args.export_csv:
        target = context.exporter.write_snapshot(Path(args.export_csv))
        LOGGER.info("Exported run history to %s", target)
    return 0
