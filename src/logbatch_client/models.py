from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_core import PydanticSerializationError

from .errors import EncodeError

# A wall-clock instant: a datetime, or integer nanoseconds since the epoch
# (the value returned by time.time_ns()).
Instant = Union[datetime, int]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_NANOS_PER_MILLI = 1_000_000


def to_nanos(instant: Instant) -> int:
  """
  Convert an instant to integer nanoseconds since the Unix epoch.

  Naive datetimes are treated as UTC.
  """
  if isinstance(instant, datetime):
    if instant.tzinfo is None:
      instant = instant.replace(tzinfo=timezone.utc)
    delta = instant - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1_000_000_000 + delta.microseconds * 1_000
  if isinstance(instant, bool) or not isinstance(instant, int):
    raise TypeError(f"Expected a datetime or integer nanoseconds, got {type(instant).__name__}")
  return instant


def to_millis(instant: Instant) -> int:
  """
  Convert an instant to integer milliseconds since the Unix epoch.

  Truncates toward zero (never rounds), so -1500000ns becomes -1ms, not -2ms.
  """
  nanos = to_nanos(instant)
  if nanos < 0:
    return -(-nanos // _NANOS_PER_MILLI)
  return nanos // _NANOS_PER_MILLI


class LogLine(BaseModel):
  """
  A single buffered log line, in the shape the ingest API expects.
  """

  model_config = ConfigDict(frozen=True)

  timestamp: int = Field(..., description="Milliseconds since the Unix epoch")
  line: str
  file: str = ""

  @classmethod
  def from_instant(cls, instant: Instant, message: str, file: str = "") -> "LogLine":
    return cls(timestamp=to_millis(instant), line=message, file=file)


class Payload(BaseModel):
  """
  Envelope posted to the ingest endpoint. Lines keep their append order.
  """

  lines: List[LogLine] = Field(default_factory=list)


def encode_payload(lines: Iterable[LogLine]) -> bytes:
  """Serialize lines to compact JSON: {"lines":[...]}."""
  try:
    return Payload(lines=list(lines)).model_dump_json().encode("utf-8")
  except (PydanticSerializationError, ValidationError, UnicodeEncodeError) as exc:
    raise EncodeError(str(exc)) from exc


def decode_payload(data: Union[bytes, str]) -> Payload:
  return Payload.model_validate_json(data)
