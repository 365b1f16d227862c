import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from telemetry_client.core.api_client import (
    APIClient,
    APIClientError,
    ResponseBodyError,
    ServiceConfig,
    TransportError,
    is_error_status,
)
from telemetry_client.models import Event, MetricPoint, MetricSeries, MetricType


def _response(status, content=b""):
    resp = MagicMock()
    resp.status_code = status
    resp.content = content
    return resp


def _client(status=202, content=b"", **config_kwargs):
    session = MagicMock()
    session.post.return_value = _response(status, content)
    cfg = ServiceConfig(host="http://localhost:8000", api_key="fake-api-key", **config_kwargs)
    return APIClient(cfg, session=session), session


def test_post_success():
    client, session = _client(202)
    assert client.post("/somewhere", "Hello World!") is None

    session.post.assert_called_once()
    args, kwargs = session.post.call_args
    assert args[0] == "http://localhost:8000/somewhere"
    assert kwargs["headers"] == {"Content-Type": "application/json", "DD-API-KEY": "fake-api-key"}
    assert kwargs["data"] == b'"Hello World!"'
    assert kwargs["verify"] is True


def test_url_is_not_normalized():
    client, session = _client(200)
    client.post("somewhere", {})
    assert session.post.call_args[0][0] == "http://localhost:8000somewhere"


def test_post_authentication_error():
    client, _ = _client(403, b'{"errors":["Authentication error"]}')
    with pytest.raises(ResponseBodyError) as excinfo:
        client.post("/somewhere", "Hello World!")
    assert excinfo.value.status == 403
    assert excinfo.value.messages == ["Authentication error"]
    assert isinstance(excinfo.value, APIClientError)


def test_server_error_with_unparseable_body():
    client, _ = _client(500, b"<html>Internal Server Error</html>")
    with pytest.raises(TransportError) as excinfo:
        client.post("/somewhere", {})
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_error_body_with_unexpected_shape():
    client, _ = _client(400, b'{"message":"bad"}')
    with pytest.raises(TransportError):
        client.post("/somewhere", {})


def test_error_with_empty_body():
    client, _ = _client(404, b"")
    with pytest.raises(TransportError):
        client.post("/somewhere", {})


def test_empty_error_list():
    client, _ = _client(429, b'{"errors":[]}')
    with pytest.raises(ResponseBodyError) as excinfo:
        client.post("/somewhere", {})
    assert excinfo.value.status == 429
    assert excinfo.value.messages == []


@pytest.mark.parametrize("status", [100, 200, 202, 204, 301, 304, 399, 600])
def test_non_error_statuses_are_success(status):
    client, _ = _client(status)
    assert client.post("/somewhere", {}) is None


def test_is_error_status_boundaries():
    assert not is_error_status(399)
    assert is_error_status(400)
    assert is_error_status(599)
    assert not is_error_status(600)


def test_connection_error_is_transport_error():
    client, session = _client()
    session.post.side_effect = requests.ConnectionError("connection refused")
    with pytest.raises(TransportError) as excinfo:
        client.post("/somewhere", {})
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_timeout_is_transport_error():
    client, session = _client()
    session.post.side_effect = requests.Timeout("read timed out")
    with pytest.raises(TransportError):
        client.post("/somewhere", {})


def test_timeout_from_config_and_per_call_override():
    client, session = _client(202, timeout_seconds=5.0, verify_ssl=False)
    client.post("/somewhere", {})
    assert session.post.call_args[1]["timeout"] == 5.0
    assert session.post.call_args[1]["verify"] is False

    client.post("/somewhere", {}, timeout=1.5)
    assert session.post.call_args[1]["timeout"] == 1.5


def test_fresh_session_per_call():
    cfg = ServiceConfig(host="http://localhost:8000", api_key="fake-api-key")
    with patch("telemetry_client.core.api_client.requests.Session") as session_cls:
        session_cls.return_value.post.return_value = _response(202)
        client = APIClient(cfg)
        client.post("/a", {})
        client.post("/b", {})

    assert session_cls.call_count == 2
    assert session_cls.return_value.close.call_count == 2


def test_fresh_session_closed_on_transport_error():
    cfg = ServiceConfig(host="http://localhost:8000", api_key="fake-api-key")
    with patch("telemetry_client.core.api_client.requests.Session") as session_cls:
        session_cls.return_value.post.side_effect = requests.ConnectionError("boom")
        with pytest.raises(TransportError):
            APIClient(cfg).post("/a", {})

    session_cls.return_value.close.assert_called_once()


def test_injected_session_is_not_closed():
    client, session = _client(202)
    client.post("/somewhere", {})
    session.close.assert_not_called()


def test_post_metrics_success():
    client, session = _client(202)
    series = [MetricSeries("something", MetricType.GAUGE).add_point(MetricPoint(1234, 12.34))]
    assert client.post_metrics(series) is None

    args, kwargs = session.post.call_args
    assert args[0] == "http://localhost:8000/api/v1/series"
    assert json.loads(kwargs["data"]) == {
        "series": [{"metric": "something", "points": [[1234, 12.34]], "tags": [], "type": "gauge"}]
    }


def test_post_metrics_unauthorized():
    client, _ = _client(403, b'{"errors":["Authentication error"]}')
    series = [MetricSeries("something", MetricType.GAUGE).add_point(MetricPoint(1234, 12.34))]
    with pytest.raises(ResponseBodyError) as excinfo:
        client.post_metrics(series)
    assert excinfo.value.status == 403


def test_post_event_success():
    client, session = _client(202)
    event = Event("Some Event Title", "Some event text").add_tag("testing")
    assert client.post_event(event) is None

    args, kwargs = session.post.call_args
    assert args[0] == "http://localhost:8000/api/v1/events"
    assert kwargs["data"] == b'{"tags":["testing"],"text":"Some event text","title":"Some Event Title"}'


def test_post_event_unauthorized():
    client, _ = _client(403, b'{"errors":["Authentication error"]}')
    with pytest.raises(ResponseBodyError) as excinfo:
        client.post_event(Event("Some Event Title", "Some event text"))
    assert excinfo.value.messages == ["Authentication error"]


def test_service_config_repr_hides_api_key():
    cfg = ServiceConfig(host="http://localhost:8000", api_key="super-secret")
    assert "super-secret" not in repr(cfg)
