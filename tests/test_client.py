# Tests for the lightweight Elasticsearch client

import io
import json
import urllib.error
from base64 import b64encode
from unittest.mock import MagicMock, patch

import pytest

from conflictlab.elasticsearch.client import (
    AuthenticationError,
    ConnectionFailedError,
    LightweightElasticsearchClient,
    RequestFailedError,
    check_connection,
    get_elasticsearch_client,
)


def _client():
    return LightweightElasticsearchClient("http://localhost:9200/", "elastic", "elastic", timeout=3)


def _response(payload):
    cm = MagicMock()
    raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
    cm.__enter__.return_value.read.return_value = raw
    return cm


def _http_error(code, payload=None):
    body = json.dumps(payload).encode("utf-8") if payload is not None else b""
    return urllib.error.HTTPError("http://localhost:9200/x", code, "error", {}, io.BytesIO(body))


def _sent_request(mock_urlopen):
    return mock_urlopen.call_args[0][0]


class TestRequest:
    """Tests for request building and response decoding."""

    @patch("urllib.request.urlopen")
    def test_get_decodes_json_and_sends_basic_auth(self, mock_urlopen):
        mock_urlopen.return_value = _response({"version": {"number": "8.15.0"}})
        result = _client().info()

        assert result == {"version": {"number": "8.15.0"}}
        req = _sent_request(mock_urlopen)
        assert req.full_url == "http://localhost:9200/"
        assert req.get_method() == "GET"
        expected = b64encode(b"elastic:elastic").decode("ascii")
        assert req.get_header("Authorization") == f"Basic {expected}"
        assert mock_urlopen.call_args[1]["timeout"] == 3

    @patch("urllib.request.urlopen")
    def test_put_sends_json_body(self, mock_urlopen):
        mock_urlopen.return_value = _response({"acknowledged": True})
        _client().indices.put_component_template("logs@package", {"version": 1})

        req = _sent_request(mock_urlopen)
        assert req.get_method() == "PUT"
        assert req.full_url == "http://localhost:9200/_component_template/logs@package"
        assert json.loads(req.data) == {"version": 1}

    @patch("urllib.request.urlopen")
    def test_ilm_policy_is_wrapped(self, mock_urlopen):
        mock_urlopen.return_value = _response({"acknowledged": True})
        _client().ilm.put_lifecycle("logs", {"phases": {}})

        req = _sent_request(mock_urlopen)
        assert req.full_url.endswith("/_ilm/policy/logs")
        assert json.loads(req.data) == {"policy": {"phases": {}}}

    @patch("urllib.request.urlopen")
    def test_rollover_without_body(self, mock_urlopen):
        mock_urlopen.return_value = _response({"rolled_over": True})
        _client().indices.rollover("logs-filestream.generic-default")

        req = _sent_request(mock_urlopen)
        assert req.get_method() == "POST"
        assert req.data is None
        assert req.full_url.endswith("/logs-filestream.generic-default/_rollover")

    @patch("urllib.request.urlopen")
    def test_modify_data_stream_wraps_actions(self, mock_urlopen):
        mock_urlopen.return_value = _response({"acknowledged": True})
        action = {"add_backing_index": {"data_stream": "ds", "index": ".ds-ds-000002"}}
        _client().indices.modify_data_stream([action])

        req = _sent_request(mock_urlopen)
        assert req.full_url.endswith("/_data_stream/_modify")
        assert json.loads(req.data) == {"actions": [action]}

    @patch("urllib.request.urlopen")
    def test_cat_indices_requests_json(self, mock_urlopen):
        mock_urlopen.return_value = _response([{"index": ".ds-a-000001"}])
        rows = _client().cat.indices(".ds-a*")

        assert rows == [{"index": ".ds-a-000001"}]
        assert _sent_request(mock_urlopen).full_url.endswith("/_cat/indices/.ds-a*?format=json")

    @patch("urllib.request.urlopen")
    def test_count_reads_count_field(self, mock_urlopen):
        mock_urlopen.return_value = _response({"count": 10, "_shards": {}})
        assert _client().count("logs-filestream.generic-default") == 10

    @patch("urllib.request.urlopen")
    def test_empty_body_decodes_to_empty_dict(self, mock_urlopen):
        mock_urlopen.return_value = _response(b"")
        assert _client().indices.refresh("x") == {}


class TestErrors:
    """Tests for HTTP and network error mapping."""

    @patch("urllib.request.urlopen")
    def test_get_404_returns_none(self, mock_urlopen):
        mock_urlopen.side_effect = _http_error(404, {"error": {"type": "resource_not_found_exception"}})
        assert _client().indices.get_data_stream("missing") is None

    @patch("urllib.request.urlopen")
    def test_delete_404_returns_none(self, mock_urlopen):
        mock_urlopen.side_effect = _http_error(404)
        assert _client().indices.delete_component_template("logs@custom") is None

    @patch("urllib.request.urlopen")
    def test_head_404_means_missing(self, mock_urlopen):
        mock_urlopen.side_effect = _http_error(404)
        assert _client().indices.exists("missing") is False

    @patch("urllib.request.urlopen")
    def test_head_200_means_present(self, mock_urlopen):
        mock_urlopen.return_value = _response(b"")
        assert _client().indices.exists("present") is True

    @patch("urllib.request.urlopen")
    def test_post_404_raises(self, mock_urlopen):
        mock_urlopen.side_effect = _http_error(404, {"error": {"type": "index_not_found_exception", "reason": "no such index [x]"}})
        with pytest.raises(RequestFailedError) as excinfo:
            _client().indices.modify_data_stream([])
        assert excinfo.value.status == 404
        assert "no such index [x]" in str(excinfo.value)

    @patch("urllib.request.urlopen")
    def test_400_carries_reason(self, mock_urlopen):
        mock_urlopen.side_effect = _http_error(400, {
            "error": {"type": "mapper_parsing_exception", "reason": "failed to parse field [log.offset]"},
            "status": 400,
        })
        with pytest.raises(RequestFailedError) as excinfo:
            _client().index("logs-filestream.generic-default", {"log": {"offset": "x"}})
        err = excinfo.value
        assert err.status == 400
        assert err.method == "POST"
        assert err.path == "/logs-filestream.generic-default/_doc"
        assert err.reason == "failed to parse field [log.offset]"

    @patch("urllib.request.urlopen")
    def test_401_raises_authentication_error(self, mock_urlopen):
        mock_urlopen.side_effect = _http_error(401)
        with pytest.raises(AuthenticationError):
            _client().info()

    @patch("urllib.request.urlopen")
    def test_url_error_raises_connection_failed(self, mock_urlopen):
        mock_urlopen.side_effect = urllib.error.URLError("Connection refused")
        with pytest.raises(ConnectionFailedError) as excinfo:
            _client().info()
        assert "Connection refused" in str(excinfo.value)


class TestChecks:
    """Tests for the preflight and data stream checks."""

    def test_check_connection_returns_cluster_info(self, cfg):
        client = MagicMock()
        client.info.return_value = {"name": "n1", "cluster_name": "c", "version": {"number": "8.15.0"}}
        info = check_connection(client, cfg)
        assert info.version == "8.15.0"
        assert info.cluster_name == "c"

    def test_check_connection_adds_guidance(self, cfg):
        client = MagicMock()
        client.info.side_effect = ConnectionFailedError("Cannot connect: refused")
        with pytest.raises(ConnectionFailedError) as excinfo:
            check_connection(client, cfg)
        message = str(excinfo.value)
        assert "http://localhost:9200" in message
        assert "kubectl port-forward" in message
        assert "Check credentials" in message

    def test_check_connection_auth_failure(self, cfg):
        client = MagicMock()
        client.info.side_effect = AuthenticationError("Authentication failed (HTTP 401)")
        with pytest.raises(AuthenticationError) as excinfo:
            check_connection(client, cfg)
        assert "ELASTICSEARCH_PASSWORD" in str(excinfo.value)

    def test_check_connection_non_2xx_is_connection_failure(self, cfg):
        client = MagicMock()
        client.info.side_effect = RequestFailedError(503, "GET", "/", "master_not_discovered_exception")
        with pytest.raises(ConnectionFailedError):
            check_connection(client, cfg)

    def test_factory_uses_config(self, cfg):
        client = get_elasticsearch_client(cfg)
        assert client.base_url == "http://localhost:9200"
        assert client.timeout == 30
