from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ..errors import TransportError


_logger = logging.getLogger("logbatch_client.transport")


@dataclass(frozen=True)
class TransportResponse:
  status_code: int
  text: str


class HttpTransport:
  """
  Synchronous HTTP transport that posts one payload per call.

  There is no retry loop here: a failed POST raises ``TransportError`` and
  the caller decides what to do with the batch. The only deadline is the
  httpx timeout.
  """

  def __init__(
    self,
    client: Optional[httpx.Client] = None,
    timeout: Optional[float] = 30.0,
  ) -> None:
    self._owns_client = client is None
    self._client = client if client is not None else httpx.Client(timeout=timeout)

  def post(self, url: str, body: bytes, content_type: str = "application/json") -> TransportResponse:
    target = _redact(url)
    _logger.debug("POST %s (%d bytes)", target, len(body))
    try:
      response = self._client.post(
        url,
        content=body,
        headers={"Content-Type": content_type},
      )
    except httpx.HTTPError as exc:
      raise TransportError(target, f"{type(exc).__name__}: {exc}") from exc

    _logger.debug("POST %s -> HTTP %s", target, response.status_code)
    return TransportResponse(status_code=response.status_code, text=response.text)

  def close(self) -> None:
    if self._owns_client:
      self._client.close()


def _redact(url: str) -> str:
  """Drop user-info and query so credentials never reach logs or errors."""
  parsed = httpx.URL(url)
  return f"{parsed.scheme}://{parsed.netloc.decode('ascii')}{parsed.path}"
