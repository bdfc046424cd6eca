import logging
import sys

from logbatch_client import FlushError, setup_logging  # type: ignore[import]


def main() -> int:
  logging.basicConfig(level=logging.WARNING)
  logger = logging.getLogger("batch_job")
  logger.setLevel(logging.INFO)

  # LOGBATCH_API_KEY must be set; lines go out 25 at a time.
  client = setup_logging(logger, app_name="batch_job.log", flush_limit=25)

  for record_id in range(60):
    logger.info("processed record %d", record_id)

    # Automatic flushes never raise; a failed one leaves its lines buffered.
    if client.last_error is not None:
      print(f"ingest unavailable, {client.size()} lines waiting: {client.last_error}", file=sys.stderr)

  print(f"{client.size()} lines still buffered before close")
  try:
    client.close()
  except FlushError as exc:
    print(f"could not ship the last {client.size()} lines: {exc}", file=sys.stderr)
    return 1
  return 0


if __name__ == "__main__":
  sys.exit(main())
