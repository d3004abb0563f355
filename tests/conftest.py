import os
import sys

PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")
if SRC_DIR not in sys.path:
	sys.path.insert(0, SRC_DIR)

import pytest

from conflictlab import config
from fake_cluster import FakeCluster

_ENV_KEYS = (
	"DOTENV_PATH",
	"ELASTICSEARCH_URL",
	"ELASTICSEARCH_USER",
	"ELASTICSEARCH_PASSWORD",
	"ELASTICSEARCH_TIMEOUT",
	"KIBANA_URL",
	"CONFLICTLAB_SCENARIO",
	"CONFLICTLAB_STRICT",
	"CONFLICTLAB_WRITE_DELAY",
	"CONFLICTLAB_SETTLE_DELAY",
)


@pytest.fixture
def clean_env(monkeypatch):
	"""Isolate tests from the developer's environment and any .env file."""
	monkeypatch.setattr(config, "_dotenv_loaded", True)
	monkeypatch.setattr(config, "_custom_dotenv_path", None)
	for key in _ENV_KEYS:
		monkeypatch.delenv(key, raising=False)
	monkeypatch.setenv("CONFLICTLAB_WRITE_DELAY", "0")
	monkeypatch.setenv("CONFLICTLAB_SETTLE_DELAY", "0")
	return monkeypatch


@pytest.fixture
def cfg(clean_env):
	return config.load_config()


@pytest.fixture
def cluster():
	return FakeCluster()


class SleepRecorder:
	"""Records requested sleeps instead of sleeping."""

	def __init__(self):
		self.calls = []

	def __call__(self, seconds):
		self.calls.append(seconds)


@pytest.fixture
def sleeps():
	return SleepRecorder()


@pytest.fixture
def es_client():
	"""Client for a live cluster; skips the test when none is reachable."""
	from conflictlab.elasticsearch.client import ElasticsearchError, get_elasticsearch_client

	cfg = config.load_config()
	client = get_elasticsearch_client(cfg)
	try:
		client.info()
	except ElasticsearchError as e:
		pytest.skip(f"Elasticsearch not reachable at {cfg.elasticsearch_url}: {e}")
	return client
