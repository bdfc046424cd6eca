from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pytest
from fastapi import FastAPI, Query, Request, Response
from fastapi.testclient import TestClient

from logbatch_client.models import Payload  # type: ignore[import]
from logbatch_client.transport import HttpTransport, TransportResponse  # type: ignore[import]


@dataclass
class IngestRequest:
  payload: Payload
  hostname: str
  now: int
  headers: Dict[str, str]


@dataclass
class IngestRecorder:
  """Requests seen by the stub ingest app, and what it answers with."""

  requests: List[IngestRequest] = field(default_factory=list)
  status_code: int = 200
  body: str = ""


def create_ingest_app(recorder: IngestRecorder) -> FastAPI:
  app = FastAPI(title="Stub ingest API")

  @app.post("/logs/ingest")
  def ingest(
    payload: Payload,
    request: Request,
    hostname: str = Query(...),
    now: int = Query(...),
  ) -> Response:
    recorder.requests.append(
      IngestRequest(
        payload=payload,
        hostname=hostname,
        now=now,
        headers=dict(request.headers),
      )
    )
    return Response(content=recorder.body, status_code=recorder.status_code, media_type="text/plain")

  return app


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
  for name in (
    "LOGBATCH_API_KEY",
    "LOGBATCH_HOSTNAME",
    "LOGBATCH_APP_NAME",
    "LOGBATCH_FLUSH_LIMIT",
    "LOGBATCH_INGEST_URL",
    "LOGBATCH_TIMEOUT",
  ):
    monkeypatch.delenv(name, raising=False)


@pytest.fixture
def ingest_recorder() -> IngestRecorder:
  return IngestRecorder()


@pytest.fixture
def ingest_transport(ingest_recorder):
  """HttpTransport wired to the stub ingest app through TestClient."""
  with TestClient(create_ingest_app(ingest_recorder)) as test_client:
    yield HttpTransport(client=test_client)


class FakeTransport:
  """In-memory transport that records every POST."""

  def __init__(self) -> None:
    self.calls: List[tuple] = []
    self.status_code = 200
    self.text = ""
    self.error: Optional[Exception] = None
    self.closed = False

  def post(self, url: str, body: bytes, content_type: str = "application/json") -> TransportResponse:
    self.calls.append((url, body, content_type))
    if self.error is not None:
      raise self.error
    return TransportResponse(status_code=self.status_code, text=self.text)

  def close(self) -> None:
    self.closed = True


@pytest.fixture
def fake_transport() -> FakeTransport:
  return FakeTransport()
