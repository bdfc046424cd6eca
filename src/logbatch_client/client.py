from __future__ import annotations

import logging
import threading
import time
from typing import Callable, List, Optional

from .config import ClientConfig
from .endpoint import Clock, IngestEndpoint
from .errors import FlushError, ServiceError
from .models import Instant, LogLine, encode_payload
from .transport import HttpTransport

FlushErrorCallback = Callable[[FlushError], None]

CONTENT_TYPE = "application/json"

_logger = logging.getLogger(__name__)


class Client:
  """
  Buffers log lines in memory and ships them to the ingest API in batches.

  ``log()`` appends under the lock and then, outside the lock, flushes once
  the buffer has reached ``flush_limit``. That check is a trigger, not a hard
  cap: with many producers the buffer can briefly hold more than
  ``flush_limit`` lines before a flush drains it. ``flush()`` holds the lock
  for encode, refresh, send and reset, so producers wait while a batch is in
  flight but never lose or duplicate lines.

  Errors from a flush started by ``log()`` cannot be raised to the ``log()``
  caller. They are kept on ``last_error``, passed to ``on_flush_error`` when
  one is given, and logged at WARNING. The lines stay buffered for the next
  flush.
  """

  def __init__(
    self,
    config: ClientConfig,
    transport: Optional[HttpTransport] = None,
    clock: Optional[Clock] = None,
    on_flush_error: Optional[FlushErrorCallback] = None,
  ) -> None:
    self._config = config.resolved()
    self._endpoint = IngestEndpoint.build(self._config, clock=clock or time.time_ns)

    self._owns_transport = transport is None
    self._transport = transport if transport is not None else HttpTransport(timeout=self._config.timeout)
    self._on_flush_error = on_flush_error
    self._lines: List[LogLine] = []
    self._lock = threading.Lock()
    self.last_error: Optional[FlushError] = None

  @property
  def config(self) -> ClientConfig:
    return self._config

  @property
  def flush_limit(self) -> int:
    return self._config.flush_limit

  @property
  def endpoint(self) -> IngestEndpoint:
    return self._endpoint

  def log(self, instant: Instant, message: str) -> None:
    line = LogLine.from_instant(instant, message, file=self._config.app_name)
    with self._lock:
      self._lines.append(line)

    if self.size() >= self._config.flush_limit:
      self._flush_from_log()

  def size(self) -> int:
    # Unlocked read; only used as a trigger and for observability.
    return len(self._lines)

  def __len__(self) -> int:
    return self.size()

  def flush(self) -> None:
    """
    Send every buffered line in one POST and clear the buffer on HTTP 200.

    Raises:
      EncodeError: The buffer could not be serialized.
      TransportError: The request did not complete.
      ServiceError: The endpoint answered with a status other than 200.

    On any error the buffer is left exactly as it was.
    """
    self._flush(record_error=False)

  def _flush(self, record_error: bool) -> None:
    if self.size() == 0:
      return

    with self._lock:
      # A concurrent flush may have drained the buffer while we waited.
      if not self._lines:
        return

      try:
        body = encode_payload(self._lines)
        url = self._endpoint.refresh()
        response = self._transport.post(url, body, CONTENT_TYPE)
        if response.status_code != 200:
          raise ServiceError(response.status_code, response.text)
      except FlushError as exc:
        # Set under the lock; the next successful flush clears it.
        if record_error:
          self.last_error = exc
        raise

      sent = len(self._lines)
      self._lines = []
      self.last_error = None

    _logger.debug("Flushed %d log lines", sent)

  def close(self) -> None:
    """
    Flush what is left. The transport is released only after a successful
    flush, so a failed close can be retried.
    """
    self.flush()
    if self._owns_transport:
      self._transport.close()

  def __enter__(self) -> "Client":
    return self

  def __exit__(self, exc_type, exc, tb) -> None:
    self.close()

  def _flush_from_log(self) -> None:
    try:
      self._flush(record_error=True)
    except FlushError as exc:
      _logger.warning(
        "Automatic flush of %d buffered log lines failed: %s", self.size(), exc
      )
      if self._on_flush_error is not None:
        self._on_flush_error(exc)
