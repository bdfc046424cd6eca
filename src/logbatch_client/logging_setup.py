from __future__ import annotations

import logging
from datetime import datetime, timezone
from logging import Handler, LogRecord
from typing import Optional

from .client import Client
from .config import ClientConfig
from .errors import FlushError

# Loggers whose records would otherwise loop back into the buffer they
# describe: httpx request lines, and the warnings this package logs when a
# flush fails (including LogbatchHandler.flush/close below).
_IGNORED_LOGGERS = ("logbatch_client", "httpx", "httpcore")


class _TransportChatterFilter(logging.Filter):
  """
  Drops records from the ignored loggers.

  Runs in Handler.handle() before the handler lock is taken, so a flush
  holding the client lock never waits on this handler.
  """

  def filter(self, record: LogRecord) -> bool:
    return not _is_ignored(record.name)


class LogbatchHandler(Handler):
  """
  Logging handler that formats records and buffers them on a Client.
  """

  def __init__(self, client: Client, level: int = logging.NOTSET) -> None:
    super().__init__(level)
    self._client = client
    self.addFilter(_TransportChatterFilter())

  @property
  def client(self) -> Client:
    return self._client

  def emit(self, record: LogRecord) -> None:
    try:
      instant = datetime.fromtimestamp(record.created, tz=timezone.utc)
      self._client.log(instant, self.format(record))
    except Exception:
      # Never break application logging.
      self.handleError(record)

  def flush(self) -> None:
    try:
      self._client.flush()
    except FlushError as exc:
      logging.getLogger(__name__).warning("Unable to flush buffered log lines: %s", exc)

  def close(self) -> None:
    try:
      self._client.close()
    except FlushError as exc:
      logging.getLogger(__name__).warning(
        "Dropping %d buffered log lines on close: %s", self._client.size(), exc
      )
    finally:
      super().close()


def _is_ignored(name: str) -> bool:
  return any(name == prefix or name.startswith(prefix + ".") for prefix in _IGNORED_LOGGERS)


def setup_logging(
  logger: Optional[logging.Logger] = None,
  *,
  api_key: Optional[str] = None,
  hostname: Optional[str] = None,
  app_name: Optional[str] = None,
  flush_limit: Optional[int] = None,
  ingest_url: Optional[str] = None,
) -> Client:
  """
  Attach a logbatch handler to the standard logging module.

  This does not replace existing handlers; it adds one more handler that
  buffers formatted records and ships them in batches. Calling it again for
  the same logger returns the client that is already attached.
  """
  target_logger = logger or logging.getLogger()

  # Avoid attaching duplicate client handlers to the same logger.
  for existing in target_logger.handlers:
    if isinstance(existing, LogbatchHandler):
      return existing.client

  config = ClientConfig.from_params_or_env(
    api_key=api_key,
    hostname=hostname,
    app_name=app_name,
    flush_limit=flush_limit,
    ingest_url=ingest_url,
  )
  client = Client(config)
  target_logger.addHandler(LogbatchHandler(client))
  return client
