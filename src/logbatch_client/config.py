from __future__ import annotations

import os
import socket
from dataclasses import dataclass, replace
from typing import Optional

from .errors import ConfigError, MissingCredential, MissingIdentity

DEFAULT_INGEST_URL = "https://logs.logdna.com/logs/ingest"

# Number of buffered lines that triggers an automatic flush.
DEFAULT_FLUSH_LIMIT = 500

DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class ClientConfig:
  """
  Configuration for a buffering log-shipping client.

  Values are sourced from explicit arguments, then environment variables,
  then defaults. The credential is checked by the client constructor, not
  here, so a config can be built and inspected before it is used.
  """

  api_key: str = ""
  hostname: str = ""
  app_name: str = ""
  flush_limit: int = DEFAULT_FLUSH_LIMIT
  ingest_url: str = DEFAULT_INGEST_URL
  timeout: Optional[float] = DEFAULT_TIMEOUT_SECONDS

  @classmethod
  def from_env(cls) -> "ClientConfig":
    """
    Load configuration from environment variables.

    Required (checked when the client is created):
      - LOGBATCH_API_KEY

    Optional:
      - LOGBATCH_HOSTNAME (default: the system hostname)
      - LOGBATCH_APP_NAME (default: empty)
      - LOGBATCH_FLUSH_LIMIT (default: 500)
      - LOGBATCH_INGEST_URL (default: https://logs.logdna.com/logs/ingest)
      - LOGBATCH_TIMEOUT (default: 30 seconds)
    """
    return cls.from_params_or_env()

  @classmethod
  def from_params_or_env(
    cls,
    api_key: Optional[str] = None,
    hostname: Optional[str] = None,
    app_name: Optional[str] = None,
    flush_limit: Optional[int] = None,
    ingest_url: Optional[str] = None,
    timeout: Optional[float] = None,
  ) -> "ClientConfig":
    """
    Build configuration from explicit parameters, falling back to environment variables.

    Priority:
      1. Explicit function arguments
      2. Environment variables
      3. Defaults
    """
    limit = flush_limit
    if limit is None:
      limit = _get_int_env("LOGBATCH_FLUSH_LIMIT", DEFAULT_FLUSH_LIMIT)

    secs = timeout
    if secs is None:
      secs = _get_float_env("LOGBATCH_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)

    return cls(
      api_key=api_key or os.getenv("LOGBATCH_API_KEY", ""),
      hostname=hostname or os.getenv("LOGBATCH_HOSTNAME", ""),
      app_name=app_name or os.getenv("LOGBATCH_APP_NAME", ""),
      flush_limit=limit,
      ingest_url=ingest_url or os.getenv("LOGBATCH_INGEST_URL", DEFAULT_INGEST_URL),
      timeout=secs,
    )

  def resolved(self) -> "ClientConfig":
    """
    Return a copy that is ready for use by a client.

    Checks the credential, resolves a missing hostname once from the
    system and applies the default flush limit when it is unset or zero.
    """
    if not self.api_key:
      raise MissingCredential()

    hostname = self.hostname or _system_hostname()
    if not hostname:
      raise MissingIdentity()

    if self.flush_limit < 0:
      raise ConfigError(f"flush_limit must be a positive integer, got {self.flush_limit}")
    limit = self.flush_limit or DEFAULT_FLUSH_LIMIT

    return replace(self, hostname=hostname, flush_limit=limit)


def _system_hostname() -> str:
  try:
    return socket.gethostname().strip()
  except OSError:
    return ""


def _get_int_env(name: str, default: int) -> int:
  raw = os.getenv(name)
  if raw is None or not raw.strip():
    return default
  try:
    return int(raw.strip())
  except ValueError:
    raise ConfigError(f"{name} must be an integer, got '{raw}'") from None


def _get_float_env(name: str, default: float) -> float:
  raw = os.getenv(name)
  if raw is None or not raw.strip():
    return default
  try:
    return float(raw.strip())
  except ValueError:
    raise ConfigError(f"{name} must be a number, got '{raw}'") from None
