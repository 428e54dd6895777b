import io
import logging

import pytest

from reqshape.exceptions import FailureKind, RequestMismatchError
from reqshape.http import HeaderMap
from reqshape.pytest_plugin import ClientMocker
from reqshape.request import MultipartForm


def test_blocking_client(client_mocker: ClientMocker) -> None:
    stream = io.BytesIO(b"avatar")
    mock = (
        client_mocker.post("/upload")
        .with_authentication(lambda a: a.scheme == "Basic")
        .with_multipart_form_data("description", "profile picture")
        .with_multipart_form_file("avatar", "avatar.png", stream)
        .with_status(201)
        .with_body_json({"ok": True})
    )

    client = client_mocker.blocking_client(default_headers={"User-Agent": "reqshape-tests"})
    form = MultipartForm().text("description", "profile picture").file("avatar", "avatar.png", stream)
    resp = client.post("http://api.example.com/upload").basic_auth("user", "pass").multipart(form).send()

    assert resp.status == 201
    assert resp.json() == {"ok": True}
    mock.assert_called()
    assert mock.get_requests()[0].headers["user-agent"] == "reqshape-tests"


def test_blocking_client_send_prebuilt(client_mocker: ClientMocker) -> None:
    client_mocker.delete("/items/1").with_no_content().with_status(204)
    client = client_mocker.blocking_client()

    request = client.delete("http://api.example.com/items/1").build()
    assert client.send(request).status == 204

    with pytest.raises(RequestMismatchError) as exc_info:
        client.delete("http://api.example.com/items/1").body_json({"force": True}).send()
    assert exc_info.value.kind is FailureKind.EXPECTED_ABSENCE


def test_dispatch_logs_at_debug(client_mocker: ClientMocker, caplog: pytest.LogCaptureFixture) -> None:
    client_mocker.get("/logged").with_no_content()
    client = client_mocker.blocking_client()

    with caplog.at_level(logging.DEBUG, logger="reqshape.pytest_plugin.mock"):
        client.get("http://api.example.com/logged").send()
        with pytest.raises(RequestMismatchError):
            client.get("http://api.example.com/logged").body_text("x").send()

    messages = [record.getMessage() for record in caplog.records]
    assert messages[0] == "Mock rule matched request: GET http://api.example.com/logged"
    assert messages[1].startswith("Mock rule rejected request GET http://api.example.com/logged: Expected no request")


def test_repeated_headers_reach_the_mock(client_mocker: ClientMocker) -> None:
    mock = client_mocker.get("/tags")
    client = client_mocker.blocking_client(default_headers=HeaderMap([("X-Tag", "a"), ("X-Tag", "b")]))

    accept = HeaderMap([("Accept", "text/plain"), ("Accept", "*/*")])
    client.get("http://api.example.com/tags").headers(accept).send()

    request = mock.get_requests()[0]
    assert request.headers.get_all("x-tag") == ["a", "b"]
    assert request.headers.get_all("accept") == ["text/plain", "*/*"]
