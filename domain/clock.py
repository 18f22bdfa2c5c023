import time
from collections.abc import Callable
from datetime import UTC, datetime

Clock = Callable[[], int]

MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS

# Epoch values below this are in seconds, anything above is already milliseconds
_SECONDS_CUTOFF = 100_000_000_000


def now_ms() -> int:
	"""Current wall-clock time in epoch milliseconds."""
	return time.time_ns() // 1_000_000


def normalize_epoch_ms(timestamp: int | float) -> int:
	if abs(timestamp) < _SECONDS_CUTOFF:
		return int(timestamp * 1000)
	return int(timestamp)


def epoch_ms_to_datetime(timestamp_ms: int) -> datetime:
	return datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC)
