import pytest

from validator.json_validator import (
    ValidationError,
    file_extension,
    validate_chunk_request,
    validate_json_string,
)


def _payload(**overrides):
    payload = {
        "userId": "user-1",
        "documentId": "doc-1",
        "documentText": "This motion is filed pursuant to Penal Code section 1473.7.",
        "metadata": {"filename": "Motion.PDF"},
    }
    payload.update(overrides)
    return payload


def test_valid_request_passes_through():
    payload = _payload()
    assert validate_chunk_request(payload) == payload


@pytest.mark.parametrize("key", ["userId", "documentId", "documentText"])
@pytest.mark.parametrize("value", [None, "", "   ", 42])
def test_required_fields(key, value):
    with pytest.raises(ValidationError, match="Missing required fields"):
        validate_chunk_request(_payload(**{key: value}))


def test_missing_key_is_rejected():
    payload = _payload()
    del payload["documentText"]
    with pytest.raises(ValidationError, match="documentText"):
        validate_chunk_request(payload)


def test_metadata_must_be_a_dict():
    with pytest.raises(ValidationError, match="metadata"):
        validate_chunk_request(_payload(metadata=["motion.pdf"]))


@pytest.mark.parametrize("metadata, expected", [
    ({"filename": "brief.docx"}, "docx"),
    ({"title": "notes.TXT"}, "txt"),
    ({"filename": "scan.final.pdf", "title": "x.txt"}, "pdf"),
    ({}, "unknown"),
    (None, "unknown"),
])
def test_file_extension(metadata, expected):
    assert file_extension(metadata) == expected


@pytest.mark.parametrize("metadata", [{"filename": "photo.png"}, {}, None])
def test_unsupported_file_type(metadata):
    payload = _payload(metadata=metadata)
    if metadata is None:
        del payload["metadata"]
    with pytest.raises(ValidationError, match="Unsupported file type"):
        validate_chunk_request(payload)


def test_validate_json_string():
    assert validate_json_string('{"userId": "u"}') == {"userId": "u"}
    with pytest.raises(ValidationError, match="Invalid JSON"):
        validate_json_string("{not json")
    with pytest.raises(ValidationError, match="JSON object"):
        validate_json_string("[1, 2]")
