import json
import logging
import sys
import traceback
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path

CONSOLE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s'


class CustomJSONEncoder(json.JSONEncoder):
	def default(self, o):
		if isinstance(o, datetime):
			return o.isoformat()
		if isinstance(o, Decimal):
			return str(o)
		if isinstance(o, Enum):
			return o.value
		return super().default(o)


class JSONFormatter(logging.Formatter):
	"""One JSON object per record, for the rotating file handlers."""

	def format(self, record: logging.LogRecord) -> str:
		log_entry = {
			'timestamp': datetime.fromtimestamp(record.created, UTC).isoformat(),
			'level': record.levelname,
			'logger': record.name,
			'message': record.getMessage(),
			'module': record.module,
			'function': record.funcName,
			'line': record.lineno,
		}

		if record.exc_info and record.exc_info[0] is not None:
			log_entry['exception'] = {
				'type': record.exc_info[0].__name__,
				'message': str(record.exc_info[1]),
				'traceback': traceback.format_exception(*record.exc_info),
			}

		if hasattr(record, 'extra_data'):
			log_entry['data'] = record.extra_data

		return json.dumps(log_entry, ensure_ascii=False, cls=CustomJSONEncoder)


def _rotating_handler(path: Path, level: int, max_file_size: int, backup_count: int) -> RotatingFileHandler:
	path.parent.mkdir(parents=True, exist_ok=True)
	handler = RotatingFileHandler(path, maxBytes=max_file_size, backupCount=backup_count, encoding='utf-8')
	handler.setLevel(level)
	handler.setFormatter(JSONFormatter())
	return handler


def setup_logging(
	level: str = 'INFO',
	log_directory: str | None = None,
	max_file_size: int = 10 * 1024 * 1024,
	backup_count: int = 5,
) -> None:
	"""Configure the root logger: console always, JSON files when ``log_directory`` is set."""
	root_logger = logging.getLogger()
	root_logger.handlers.clear()
	root_logger.setLevel(logging.DEBUG)

	logging.getLogger('httpx').setLevel(logging.WARNING)
	logging.getLogger('httpcore').setLevel(logging.WARNING)

	console_handler = logging.StreamHandler(sys.stdout)
	console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
	console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
	root_logger.addHandler(console_handler)

	if log_directory:
		directory = Path(log_directory)
		root_logger.addHandler(
			_rotating_handler(directory / 'system' / 'app.log', logging.DEBUG, max_file_size, backup_count)
		)
		root_logger.addHandler(
			_rotating_handler(directory / 'errors' / 'errors.log', logging.WARNING, max_file_size, backup_count)
		)
