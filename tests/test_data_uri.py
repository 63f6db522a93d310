import pytest

from phish_content_analyzer.core.errors import MalformedPayloadError
from phish_content_analyzer.domain.data_uri import build_data_uri, parse_data_uri


def test_parse_data_uri_decodes_mime_and_bytes():
    payload = parse_data_uri("data:image/PNG;base64,aGVsbG8=")
    assert payload.mime_type == "image/png"
    assert payload.data == b"hello"


def test_parse_data_uri_accepts_extra_parameters_and_wrapped_lines():
    payload = parse_data_uri("data:message/rfc822;charset=utf-8;base64,aGVs\nbG8=")
    assert payload.mime_type == "message/rfc822"
    assert payload.data == b"hello"


def test_build_data_uri_is_parseable():
    uri = build_data_uri(b"\x89PNG", "image/png")
    assert uri.startswith("data:image/png;base64,")
    assert parse_data_uri(uri).data == b"\x89PNG"


@pytest.mark.parametrize(
    "raw",
    [
        "aGVsbG8=",
        "image/png;base64,aGVsbG8=",
        "data:image/png,aGVsbG8=",
        "data:image/png;base64,",
        "data:image/png;base64,not*base64!",
        "",
    ],
)
def test_parse_data_uri_rejects_malformed(raw):
    with pytest.raises(MalformedPayloadError):
        parse_data_uri(raw, label="image")
