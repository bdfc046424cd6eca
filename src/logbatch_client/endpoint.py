from __future__ import annotations

import time
from typing import Callable

import httpx

from .config import ClientConfig
from .errors import InvalidAddress
from .models import Instant, to_millis

Clock = Callable[[], Instant]


class IngestEndpoint:
  """
  Request target for the ingest API.

  The credential travels as the URL user-info and the hostname as a query
  parameter; both are fixed at build time. ``refresh()`` stamps a fresh
  ``now`` parameter before every send and leaves everything else alone.
  """

  def __init__(self, url: httpx.URL, clock: Clock = time.time_ns) -> None:
    self._url = url
    self._clock = clock

  @classmethod
  def build(cls, config: ClientConfig, clock: Clock = time.time_ns) -> "IngestEndpoint":
    try:
      base = httpx.URL(config.ingest_url)
    except httpx.InvalidURL as exc:
      raise InvalidAddress(config.ingest_url, str(exc)) from exc

    if base.scheme not in ("http", "https") or not base.host:
      raise InvalidAddress(config.ingest_url)

    url = base.copy_with(username=config.api_key).copy_merge_params(
      {"hostname": config.hostname}
    )
    return cls(url, clock=clock)

  @property
  def url(self) -> httpx.URL:
    return self._url

  def refresh(self) -> str:
    now_ms = to_millis(self._clock())
    self._url = self._url.copy_set_param("now", str(now_ms))
    return str(self._url)

  def __repr__(self) -> str:
    return f"IngestEndpoint({self._url.scheme}://{self._url.host}{self._url.path})"
