# Elasticsearch client factory and error mapping - using stdlib urllib for fast imports

import json
import logging
import urllib.request
import urllib.error
import urllib.parse
from base64 import b64encode

from ..config import load_config
from .responses import ClusterInfo

logger = logging.getLogger(__name__)

_TROUBLESHOOTING = (
	"Troubleshooting:\n"
	"  1. Ensure Elasticsearch is running:\n"
	"     kubectl get pods -n elastic -l app=elasticsearch\n"
	"  2. Port-forward if needed:\n"
	"     kubectl port-forward -n elastic svc/elasticsearch-master 9200:9200\n"
	"  3. Check credentials (default: elastic/elastic)"
)


class ElasticsearchError(Exception):
	"""Base exception for Elasticsearch errors with user-friendly messages."""
	pass


class ConnectionFailedError(ElasticsearchError):
	"""Raised when Elasticsearch is not reachable."""
	pass


class AuthenticationError(ElasticsearchError):
	"""Raised when authentication fails."""
	pass


class DataStreamNotFoundError(ElasticsearchError):
	"""Raised when the data stream under test does not exist."""
	pass


class RequestFailedError(ElasticsearchError):
	"""Raised when Elasticsearch answers a request with a non-2xx status."""

	def __init__(self, status, method, path, reason=None):
		self.status = status
		self.method = method
		self.path = path
		self.reason = reason
		message = f"{method} {path} failed with HTTP {status}"
		if reason:
			message += f": {reason}"
		super().__init__(message)


def _error_reason(raw):
	"""Pull error.reason out of an Elasticsearch error body, if there is one."""
	try:
		payload = json.loads(raw)
	except ValueError:
		return raw.strip() or None
	error = payload.get("error") if isinstance(payload, dict) else None
	if isinstance(error, dict):
		return error.get("reason") or error.get("type")
	if isinstance(error, str):
		return error
	return None


class LightweightElasticsearchClient:
	"""Minimal Elasticsearch client using stdlib urllib for fast imports."""

	def __init__(self, url, user, password, timeout=5):
		self.base_url = url.rstrip("/")
		self.timeout = timeout
		# Pre-compute auth header
		credentials = b64encode(f"{user}:{password}".encode()).decode('ascii')
		self.headers = {
			"Authorization": f"Basic {credentials}",
			"Content-Type": "application/json",
		}
		self.indices = _IndicesClient(self)
		self.ilm = _IlmClient(self)
		self.cat = _CatClient(self)

	def _request(self, method, path, body=None, params=None):
		"""Make HTTP request to Elasticsearch.

		A 404 on GET, HEAD or DELETE decodes to None so callers can treat it as
		"does not exist". Every other non-2xx status raises RequestFailedError.
		"""
		url = f"{self.base_url}{path}"
		if params:
			url += "?" + urllib.parse.urlencode(params)
		data = json.dumps(body).encode('utf-8') if body is not None else None
		req = urllib.request.Request(url, data=data, headers=self.headers, method=method)
		logger.debug("%s %s", method, path)
		try:
			with urllib.request.urlopen(req, timeout=self.timeout) as resp:
				if method == "HEAD":
					return {}
				raw = resp.read().decode('utf-8')
				if not raw:
					return {}
				return json.loads(raw)
		except urllib.error.HTTPError as e:
			if e.code == 401:
				raise AuthenticationError("Authentication failed (HTTP 401)")
			if e.code == 404 and method in ("GET", "HEAD", "DELETE"):
				return None
			raw = e.read().decode('utf-8', errors='replace') if e.fp else ""
			raise RequestFailedError(e.code, method, path, _error_reason(raw))
		except urllib.error.URLError as e:
			raise ConnectionFailedError(f"Cannot connect: {e.reason}")
		except (TimeoutError, ConnectionError) as e:
			raise ConnectionFailedError(f"Cannot connect: {e}")

	def info(self):
		"""Get cluster info (used for connection check)."""
		return self._request("GET", "/")

	def index(self, index, body, refresh=None):
		"""Index a document with an auto-generated id."""
		params = None
		if refresh is not None:
			params = {"refresh": "true" if refresh else "false"}
		return self._request("POST", f"/{index}/_doc", body, params=params)

	def count(self, index):
		"""Return the number of documents in an index or data stream."""
		result = self._request("GET", f"/{index}/_count")
		if result is None:
			return 0
		return int(result.get("count", 0))


class _IndicesClient:
	"""Index, template and data stream operations."""

	def __init__(self, client):
		self._client = client

	def exists(self, index):
		"""Check if index exists."""
		result = self._client._request("HEAD", f"/{index}")
		return result is not None

	def create(self, index, body=None):
		"""Create an index."""
		return self._client._request("PUT", f"/{index}", body)

	def delete(self, index):
		"""Delete an index."""
		return self._client._request("DELETE", f"/{index}")

	def get_mapping(self, index):
		"""Get the mappings of an index, keyed by concrete index name."""
		return self._client._request("GET", f"/{index}/_mapping")

	def refresh(self, index):
		"""Refresh an index to make recent changes searchable."""
		return self._client._request("POST", f"/{index}/_refresh")

	def rollover(self, alias):
		"""Roll a data stream over to a new write index."""
		return self._client._request("POST", f"/{alias}/_rollover")

	def put_index_template(self, name, body):
		"""Create or update a composable index template."""
		return self._client._request("PUT", f"/_index_template/{name}", body)

	def get_index_template(self, name):
		return self._client._request("GET", f"/_index_template/{name}")

	def put_component_template(self, name, body):
		"""Create or update a component template."""
		return self._client._request("PUT", f"/_component_template/{name}", body)

	def get_component_template(self, name=None):
		"""Get one component template, or all of them when name is None."""
		path = f"/_component_template/{name}" if name else "/_component_template"
		return self._client._request("GET", path)

	def delete_component_template(self, name):
		return self._client._request("DELETE", f"/_component_template/{name}")

	def get_data_stream(self, name):
		return self._client._request("GET", f"/_data_stream/{name}")

	def delete_data_stream(self, name):
		"""Delete a data stream together with its backing indices."""
		return self._client._request("DELETE", f"/_data_stream/{name}")

	def modify_data_stream(self, actions):
		"""Apply add/remove backing index actions to data streams."""
		return self._client._request("POST", "/_data_stream/_modify", {"actions": actions})


class _IlmClient:
	"""Index lifecycle policy operations."""

	def __init__(self, client):
		self._client = client

	def put_lifecycle(self, name, policy):
		return self._client._request("PUT", f"/_ilm/policy/{name}", {"policy": policy})

	def get_lifecycle(self, name):
		return self._client._request("GET", f"/_ilm/policy/{name}")


class _CatClient:
	"""Cat APIs, always requested as JSON."""

	def __init__(self, client):
		self._client = client

	def indices(self, index):
		result = self._client._request("GET", f"/_cat/indices/{index}", params={"format": "json"})
		return result or []


def get_elasticsearch_client(cfg=None):
	cfg = cfg or load_config()
	return LightweightElasticsearchClient(
		url=cfg.elasticsearch_url,
		user=cfg.elasticsearch_user,
		password=cfg.elasticsearch_password,
		timeout=cfg.elasticsearch_timeout,
	)


def check_connection(client, cfg=None):
	"""Check if Elasticsearch is reachable and return its ClusterInfo.

	Raises ConnectionFailedError or AuthenticationError with remediation
	guidance if the preflight fails.
	"""
	cfg = cfg or load_config()
	try:
		info = client.info()
		if info is None:
			raise ConnectionFailedError("HTTP 404 from cluster root")
		return ClusterInfo.from_response(info)
	except AuthenticationError:
		raise AuthenticationError(
			f"Authentication failed for Elasticsearch at {cfg.elasticsearch_url}\n"
			f"Check ELASTICSEARCH_USER and ELASTICSEARCH_PASSWORD.\n\n{_TROUBLESHOOTING}"
		)
	except ElasticsearchError as e:
		raise ConnectionFailedError(
			f"Cannot connect to Elasticsearch at {cfg.elasticsearch_url} ({e})\n\n{_TROUBLESHOOTING}"
		)

