from __future__ import annotations

from typing import Optional


class LogbatchError(Exception):
  """
  Base class for every error raised by the logbatch client.

  Args:
    message: Human-readable description of the failure.
  """

  def __init__(self, message: str = "An unexpected logbatch client error occurred.") -> None:
    self.message = message
    super().__init__(self.message)


class ConfigError(LogbatchError):
  """Invalid client configuration. The client is never created."""


class MissingCredential(ConfigError):
  def __init__(self, message: str = "An ingestion API key is required. Set LOGBATCH_API_KEY or pass api_key.") -> None:
    super().__init__(message)


class MissingIdentity(ConfigError):
  def __init__(self, message: str = "A hostname is required and none could be resolved from the system.") -> None:
    super().__init__(message)


class EndpointError(LogbatchError):
  """The ingest endpoint could not be composed."""


class InvalidAddress(EndpointError):
  def __init__(self, url: str, reason: Optional[str] = None) -> None:
    self.url = url
    info = f" ({reason})" if reason else ""
    super().__init__(
      f"Invalid ingest URL '{url}'{info}. "
      "Expected an http(s) URL like https://logs.logdna.com/logs/ingest."
    )


class FlushError(LogbatchError):
  """
  A flush did not complete. Buffered lines are kept and the flush may be
  retried.
  """


class EncodeError(FlushError):
  def __init__(self, reason: str) -> None:
    super().__init__(f"Unable to encode log payload: {reason}")


class TransportError(FlushError):
  def __init__(self, url: str, reason: str) -> None:
    self.url = url
    super().__init__(f"Unable to reach ingest endpoint {url}: {reason}")


class ServiceError(FlushError):
  """
  The ingest endpoint answered with a non-success status.

  Args:
    status_code: HTTP status returned by the endpoint.
    body: Response body text, may be empty.
  """

  def __init__(self, status_code: int, body: str = "") -> None:
    self.status_code = status_code
    self.body = body
    detail = f": {body}" if body else ""
    super().__init__(f"Ingest endpoint returned HTTP {status_code}{detail}")
