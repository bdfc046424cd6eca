"""
logbatch_client

Buffering log-shipping client: lines are collected in memory and posted to
a log-ingestion endpoint as one JSON batch, automatically once the buffer
reaches its flush limit or on demand.
"""

from .client import Client
from .config import DEFAULT_FLUSH_LIMIT, DEFAULT_INGEST_URL, ClientConfig
from .endpoint import IngestEndpoint
from .errors import (
  ConfigError,
  EncodeError,
  EndpointError,
  FlushError,
  InvalidAddress,
  LogbatchError,
  MissingCredential,
  MissingIdentity,
  ServiceError,
  TransportError,
)
from .logging_setup import LogbatchHandler, setup_logging
from .models import LogLine, Payload

__all__ = [
  "Client",
  "ClientConfig",
  "ConfigError",
  "DEFAULT_FLUSH_LIMIT",
  "DEFAULT_INGEST_URL",
  "EncodeError",
  "EndpointError",
  "FlushError",
  "IngestEndpoint",
  "InvalidAddress",
  "LogLine",
  "LogbatchError",
  "LogbatchHandler",
  "MissingCredential",
  "MissingIdentity",
  "Payload",
  "ServiceError",
  "TransportError",
  "setup_logging",
]
