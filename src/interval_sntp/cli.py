"""
Interval SNTP command line

    interval-sntp query --host time.google.com --zone Asia/Tokyo
    interval-sntp watch --interval 1 --count 10
"""

import argparse
import functools
import logging
import sys
import threading
from typing import List, Optional

from .config import SntpConfig, load_config
from .exceptions import SntpError
from .log_config import configure_logging
from .models import TimeResponse
from .scheduler import IntervalRefresher
from .time_service import get_current_time

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="interval-sntp", description="Simple SNTP network time client")
    parser.add_argument('--config', type=str, help='YAML configuration file with an sntp section')
    parser.add_argument('--host', type=str, help='NTP server host name')
    parser.add_argument('--port', type=int, help='NTP server UDP port')
    parser.add_argument('--timeout', type=int, dest='timeout_ms', help='Receive timeout in milliseconds')
    parser.add_argument('--zone', type=str, help='IANA timezone for display (default: local zone)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', required=True)
    subparsers.add_parser('query', help='Query the server once')

    watch = subparsers.add_parser('watch', help='Query the server periodically')
    watch.add_argument('--interval', type=float, dest='interval_seconds', help='Seconds between queries')
    watch.add_argument('--count', type=int, default=0, help='Stop after N queries (0 = run until Ctrl-C)')
    return parser


def resolve_config(args: argparse.Namespace) -> SntpConfig:
    config = load_config(args.config) if args.config else SntpConfig()
    return config.merged(
        host=args.host,
        port=args.port,
        timeout_ms=args.timeout_ms,
        zone=args.zone,
        interval_seconds=getattr(args, 'interval_seconds', None),
        log_level="DEBUG" if args.verbose else None
    )


def format_response(response: TimeResponse) -> str:
    return (f"{response.datetime_string}  "
            f"offset={response.clock_offset_ms:+d}ms  rtt={response.round_trip_ms}ms")


def run_query(config: SntpConfig) -> int:
    try:
        response = get_current_time(config.zone, config.host, config.timeout_ms, config.port)
    except SntpError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1
    print(format_response(response))
    return 0


def run_watch(config: SntpConfig, count: int = 0) -> int:
    finished = threading.Event()
    ticks = {'done': 0, 'failed': 0}

    def record():
        ticks['done'] += 1
        if count and ticks['done'] >= count:
            finished.set()

    def on_result(response: TimeResponse):
        print(format_response(response), flush=True)
        record()

    def on_error(error: Exception):
        ticks['failed'] += 1
        print(f"✗ {error}", file=sys.stderr, flush=True)
        record()

    refresh = functools.partial(get_current_time, config.zone, config.host, config.timeout_ms, config.port)
    refresher = IntervalRefresher(refresh, config.interval_seconds, on_result, on_error)
    refresher.start()
    try:
        finished.wait()
    except KeyboardInterrupt:
        print("\nStopping...")
    finally:
        refresher.stop()

    return 1 if ticks['failed'] and ticks['failed'] == ticks['done'] else 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_config(args)
    except (OSError, ValueError) as e:
        parser.error(str(e))

    configure_logging(config.log_level)
    logger.debug(f"Using configuration: {config}")

    if args.command == 'query':
        return run_query(config)
    return run_watch(config, args.count)


if __name__ == "__main__":
    sys.exit(main())
