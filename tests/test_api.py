"""Tests for the HTTP surface of the file store."""

from __future__ import annotations

import textwrap
from email.utils import parsedate_to_datetime

import pytest

pytest.importorskip("httpx", reason="httpx is required for TestClient")

from fastapi.testclient import TestClient

from filestore.main import create_app
from filestore.models import WELCOME_TEXT


@pytest.fixture()
def storage_root(tmp_path):
    return tmp_path / "Storage"


@pytest.fixture()
def client(tmp_path, storage_root):
    """Create a FastAPI test client over a temporary storage root."""

    config = textwrap.dedent(
        """
        server:
          addr: "127.0.0.1"
          port: 18080
        logging:
          json: false
          file: ""
          level: "INFO"
        """
    )
    config_path = tmp_path / "filestore.yaml"
    config_path.write_text(config, encoding="utf-8")

    app = create_app(str(config_path), storage_root=storage_root)
    with TestClient(app) as test_client:
        yield test_client


def test_storage_root_created_at_startup(client, storage_root):
    assert storage_root.is_dir()


def test_root_returns_welcome_text(client, storage_root):
    """The root URL is never a directory listing."""

    (storage_root / "visible.txt").write_bytes(b"x")

    response = client.get("/")
    assert response.status_code == 200
    assert response.text == WELCOME_TEXT
    assert response.headers["content-type"].startswith("text/plain")


def test_put_then_get_roundtrip(client):
    response = client.put("/docs/readme.txt", content=b"first version")
    assert response.status_code == 201
    assert response.json() == {"message": "File created successfully"}

    response = client.get("/docs/readme.txt")
    assert response.status_code == 200
    assert response.content == b"first version"
    assert response.headers["content-type"] == "text/plain"

    response = client.put("/docs/readme.txt", content=b"v2")
    assert response.status_code == 200
    assert response.json() == {"message": "File updated successfully"}

    assert client.get("/docs/readme.txt").content == b"v2"


def test_get_binary_content_is_plain_text(client):
    payload = bytes(range(256))
    client.put("/blob.png", content=payload)

    response = client.get("/blob.png")
    assert response.content == payload
    assert response.headers["content-type"] == "text/plain"


def test_copy_from_header(client):
    client.put("/a", content=b"B-bytes")

    response = client.put("/b", headers={"X-Copy-From": "/a"})
    assert response.status_code == 201
    assert response.json() == {"message": "File copied successfully"}
    assert client.get("/b").content == b"B-bytes"

    client.put("/c", content=b"other")
    response = client.put("/b", headers={"X-Copy-From": "c"})
    assert response.status_code == 200
    assert response.json() == {"message": "File overwritten successfully"}
    assert client.get("/b").content == b"other"


def test_copy_ignores_request_body(client):
    client.put("/src.txt", content=b"from source")

    response = client.put("/dst.txt", content=b"from body", headers={"X-Copy-From": "/src.txt"})
    assert response.status_code == 201
    assert client.get("/dst.txt").content == b"from source"


def test_copy_from_missing_source(client, storage_root):
    client.put("/existing.txt", content=b"keep me")

    response = client.put("/new.txt", headers={"X-Copy-From": "/missing.txt"})
    assert response.status_code == 404
    assert response.json() == {"message": "Source file not found"}
    assert not (storage_root / "new.txt").exists()

    response = client.put("/existing.txt", headers={"X-Copy-From": "/missing.txt"})
    assert response.status_code == 404
    assert client.get("/existing.txt").content == b"keep me"


def test_get_missing(client):
    response = client.get("/nothing/here.txt")
    assert response.status_code == 404
    assert response.json() == {"message": "File or directory not found"}


def test_get_directory_listing(client, storage_root):
    client.put("/d/x", content=b"1")
    client.put("/d/y/inner.txt", content=b"2")

    response = client.get("/d")
    assert response.status_code == 200
    assert sorted(response.json()) == ["x", "y"]


def test_get_empty_directory(client, storage_root):
    (storage_root / "empty").mkdir()

    response = client.get("/empty")
    assert response.status_code == 200
    assert response.json() == []


def test_head_existing_file(client, storage_root):
    client.put("/h.txt", content=b"12345")

    response = client.head("/h.txt")
    assert response.status_code == 200
    assert response.headers["content-length"] == "5"
    assert response.content == b""

    mtime = (storage_root / "h.txt").stat().st_mtime
    last_modified = parsedate_to_datetime(response.headers["last-modified"])
    assert last_modified.timestamp() == int(mtime)


def test_head_missing_and_directory(client, storage_root):
    (storage_root / "folder").mkdir()

    for path in ("/missing.txt", "/folder"):
        response = client.head(path)
        assert response.status_code == 404
        assert response.headers["content-type"].startswith("application/json")


def test_delete_file(client):
    client.put("/gone.txt", content=b"bye")

    response = client.delete("/gone.txt")
    assert response.status_code == 200
    assert response.json() == {"message": "File deleted successfully"}
    assert client.get("/gone.txt").status_code == 404


def test_delete_directory_recursively(client, storage_root):
    client.put("/tree/a.txt", content=b"a")
    client.put("/tree/sub/b.txt", content=b"b")

    response = client.delete("/tree")
    assert response.status_code == 200
    assert response.json() == {"message": "Directory deleted successfully"}
    assert not (storage_root / "tree").exists()
    assert client.get("/tree/sub/b.txt").status_code == 404


def test_delete_missing(client):
    response = client.delete("/never.txt")
    assert response.status_code == 404
    assert response.json() == {"message": "File or directory not found"}


def test_unsupported_method(client):
    response = client.post("/some/file.txt", content=b"x")
    assert response.status_code == 405


def test_io_failure_becomes_server_error(client, storage_root):
    """Writing onto a directory is an unhandled I/O fault."""

    (storage_root / "adir").mkdir()

    response = client.put("/adir", content=b"data")
    assert response.status_code == 500
    assert response.json()["message"].startswith("Internal server error")
