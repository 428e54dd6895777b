import io
import json

import pytest

from reqshape.request import (
    BINARY_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    TEXT_CONTENT_TYPE,
    MultipartForm,
    Part,
    PartPayload,
    PayloadKind,
    Request,
    RequestBody,
)


def test_part_payload_accessors() -> None:
    stream = io.BytesIO(b"data")

    text = PartPayload.from_text("héllo")
    assert (text.kind, text.get_text(), text.get_bytes(), text.get_stream()) == (
        PayloadKind.TEXT,
        "héllo",
        "héllo".encode(),
        None,
    )

    data = PartPayload.from_bytes(bytearray(b"\x00\x01"))
    assert (data.kind, data.get_text(), data.get_bytes(), data.get_stream()) == (
        PayloadKind.BYTES,
        None,
        b"\x00\x01",
        None,
    )

    streamed = PartPayload.from_stream(stream)
    assert streamed.kind is PayloadKind.STREAM
    assert streamed.get_stream() is stream
    assert streamed.get_text() is None
    assert streamed.get_bytes() is None
    assert stream.tell() == 0


@pytest.mark.parametrize(
    ("name", "filename", "disposition"),
    [
        ("value", None, "form-data; name=value"),
        ("file", "filename.txt", "form-data; name=file; filename=filename.txt"),
        ("not value", None, 'form-data; name="not value"'),
        ('a"b', "my file.txt", 'form-data; name="a\\"b"; filename="my file.txt"'),
    ],
)
def test_part_disposition(name: str, filename: str | None, disposition: str) -> None:
    part = Part(name, PartPayload.from_text("x"), filename=filename)

    assert part.headers["content-disposition"] == disposition
    assert part.name == name
    assert part.filename == filename


def test_part_default_content_types() -> None:
    assert Part("a", PartPayload.from_text("x")).content_type == TEXT_CONTENT_TYPE
    assert Part("a", PartPayload.from_bytes(b"x")).content_type == BINARY_CONTENT_TYPE
    assert Part("a", PartPayload.from_stream(io.BytesIO())).content_type == BINARY_CONTENT_TYPE
    assert Part("a", PartPayload.from_text("{}"), content_type=JSON_CONTENT_TYPE).headers["Content-Type"] == (
        JSON_CONTENT_TYPE
    )


def test_part_header_contains() -> None:
    part = Part("file", PartPayload.from_bytes(b""), filename="report.csv")

    assert part.header_contains("name=file")
    assert part.header_contains("filename=report.csv")
    assert part.header_contains("application/octet-stream")
    # Lookup is a plain substring search, so "name=" also matches inside "filename="
    assert part.header_contains("name=report")


def test_multipart_body_snapshots_form() -> None:
    form = MultipartForm().text("a", "1").json("payload_json", {"x": [1]})
    body = RequestBody.from_multipart(form)
    form.text("b", "2")

    parts = body.get_parts()
    assert parts is not None
    assert [p.name for p in parts] == ["a", "payload_json"]
    assert json.loads(parts[1].payload.get_text() or "") == {"x": [1]}
    assert body.is_multipart
    assert body.copy_bytes() is None
    assert body.content_type.startswith("multipart/form-data; boundary=")


def test_opaque_bodies() -> None:
    assert RequestBody.from_text("hi").copy_bytes() == b"hi"
    assert RequestBody.from_text("hi").content_type == TEXT_CONTENT_TYPE
    assert RequestBody.from_json({"a": 1}).copy_bytes() == b'{"a": 1}'
    assert RequestBody.from_json({"a": 1}).content_type == JSON_CONTENT_TYPE
    assert RequestBody.from_bytes(b"\x00", "image/png").content_type == "image/png"
    assert not RequestBody.from_bytes(b"").is_multipart
    assert RequestBody.from_bytes(b"").get_parts() is None


def test_request_snapshot() -> None:
    request = Request(
        "post", "https://api.example.com/v1/items?x=1", headers={"Authorization": "Bearer abc"}, body=None
    )

    assert request.method == "POST"
    assert request.path == "/v1/items"
    assert request.authorization is not None
    assert request.authorization.parameter == "abc"
    assert request.body is None
    assert Request("GET", "https://unit-test").path == "/"
    assert Request("GET", "https://unit-test").authorization is None
