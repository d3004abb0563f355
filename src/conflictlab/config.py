# Configuration loading for conflictlab

import os

# Lazy load dotenv - only when config is first accessed
_dotenv_loaded = False
_custom_dotenv_path = None

_TRUE_VALUES = ("true", "1", "yes", "on")


def _getenv(name, default):
	value = os.getenv(name)
	return value if value else default


def _getbool(name, default):
	value = os.getenv(name)
	if not value:
		return default
	return value.strip().lower() in _TRUE_VALUES


class ConflictlabConfig:
	"""Loads configuration from environment variables and provides defaults."""
	def __init__(self):
		self.elasticsearch_url = _getenv("ELASTICSEARCH_URL", "http://localhost:9200").rstrip("/")
		self.elasticsearch_user = _getenv("ELASTICSEARCH_USER", "elastic")
		self.elasticsearch_password = _getenv("ELASTICSEARCH_PASSWORD", "elastic")
		self.elasticsearch_timeout = int(_getenv("ELASTICSEARCH_TIMEOUT", "30"))
		self.kibana_url = _getenv("KIBANA_URL", "http://localhost:5601").rstrip("/")
		self.scenario = _getenv("CONFLICTLAB_SCENARIO", "explicit")
		# Fail fast on non-2xx responses to mutating calls
		self.strict = _getbool("CONFLICTLAB_STRICT", True)
		# Pacing between document writes and after rollover
		self.write_delay = float(_getenv("CONFLICTLAB_WRITE_DELAY", "0.1"))
		self.settle_delay = float(_getenv("CONFLICTLAB_SETTLE_DELAY", "2.0"))


def set_dotenv_path(path: str):
	"""Set a custom .env file path to load. Must be called before load_config()."""
	global _custom_dotenv_path, _dotenv_loaded
	_custom_dotenv_path = path
	_dotenv_loaded = False  # Reset to force reload with new path


def load_config() -> ConflictlabConfig:
	"""Return a config object with all settings loaded."""
	global _dotenv_loaded, _custom_dotenv_path
	if not _dotenv_loaded:
		from dotenv import load_dotenv, find_dotenv
		dotenv_path = os.getenv("DOTENV_PATH") or _custom_dotenv_path
		if dotenv_path:
			# Explicit env file wins over the process environment
			load_dotenv(dotenv_path, override=True)
		else:
			dotenv_path = find_dotenv(usecwd=True)
			if dotenv_path:
				load_dotenv(dotenv_path)
		_dotenv_loaded = True
	return ConflictlabConfig()
