from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import NoReturn, Optional, TextIO

from .client import Client
from .config import ClientConfig
from .errors import ConfigError, EndpointError, FlushError


def main(argv: list[str] | None = None, stdin: Optional[TextIO] = None) -> NoReturn:
  args = _parse_args(sys.argv[1:] if argv is None else argv)

  logging.basicConfig(
    level=logging.DEBUG if args.verbose else logging.WARNING,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
  )

  try:
    config = ClientConfig.from_params_or_env(
      hostname=args.hostname,
      app_name=args.app_name,
      flush_limit=args.flush_limit,
      ingest_url=args.ingest_url,
    )
    if not config.api_key:
      print("Set LOGBATCH_API_KEY env var", file=sys.stderr)
      sys.exit(1)
    client = Client(config)
  except (ConfigError, EndpointError) as exc:
    print(f"Error: {exc}", file=sys.stderr)
    sys.exit(1)

  exit_code = _ship(client, stdin or sys.stdin)

  try:
    client.close()
  except FlushError as exc:
    print(f"Error: unable to send {client.size()} buffered log lines: {exc}", file=sys.stderr)
    sys.exit(2)

  sys.exit(exit_code)


def _ship(client: Client, stream: TextIO) -> int:
  try:
    for raw in stream:
      client.log(time.time_ns(), raw.rstrip("\r\n"))
  except (OSError, UnicodeDecodeError) as exc:
    print(f"Error reading from stdin: {exc}", file=sys.stderr)
    return 1
  return 0


def _parse_args(argv: list[str]) -> argparse.Namespace:
  parser = argparse.ArgumentParser(
    prog="logbatch-stdin",
    description="Ship lines read from standard input to a log-ingestion endpoint.",
  )
  parser.add_argument(
    "--hostname",
    help="hostname the logs appear from (default: LOGBATCH_HOSTNAME or the system hostname)",
  )
  parser.add_argument(
    "--app-name",
    help="log file or app name the logs appear as (default: LOGBATCH_APP_NAME)",
  )
  parser.add_argument(
    "--flush-limit",
    type=int,
    help="number of buffered lines that triggers a send (default: 500)",
  )
  parser.add_argument("--ingest-url", help="ingest endpoint URL (default: LOGBATCH_INGEST_URL)")
  parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
  return parser.parse_args(argv)


if __name__ == "__main__":
  main()
