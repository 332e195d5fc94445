from fastapi.testclient import TestClient

from legalrag.chunker import CHARS_PER_TOKEN
from service.api import app

client = TestClient(app)

TEXT = "First sentence. Second sentence. Third sentence. Fourth sentence."


def _body(**overrides):
    body = {
        "userId": "user-1",
        "documentId": "doc-1",
        "documentText": TEXT,
        "metadata": {"filename": "motion.txt"},
    }
    body.update(overrides)
    return body


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "target_tokens": 1000,
        "chars_per_token": CHARS_PER_TOKEN,
    }


def test_chunk_with_default_target():
    response = client.post("/chunk", json=_body())
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["documentId"] == "doc-1"
    assert data["chunkCount"] == 1
    assert data["chunks"][0]["text"] == TEXT


def test_chunk_with_custom_target():
    response = client.post("/chunk", json=_body(targetTokens=5))
    assert response.status_code == 200
    data = response.json()
    assert data["chunkCount"] == 4
    assert all(chunk["text"].endswith(".") for chunk in data["chunks"])


def test_chunk_rejects_unsupported_file_type():
    response = client.post("/chunk", json=_body(metadata={"filename": "scan.png"}))
    assert response.status_code == 400
    assert "Unsupported file type" in response.json()["detail"]


def test_chunk_rejects_blank_text():
    response = client.post("/chunk", json=_body(documentText="   "))
    assert response.status_code == 400
    assert "Missing required fields" in response.json()["detail"]


def test_chunk_rejects_malformed_body():
    response = client.post("/chunk", json={"userId": "user-1"})
    assert response.status_code == 422


def test_chunk_rejects_non_positive_target():
    response = client.post("/chunk", json=_body(targetTokens=0))
    assert response.status_code == 422
