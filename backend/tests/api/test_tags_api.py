"""Tests for tag API endpoints."""
from fastapi import status
from fastapi.testclient import TestClient

from pathmark.api.v1 import tags as tags_endpoints


def wait_for_workers(client: TestClient) -> None:
    """Drain the background queue by stopping the pool."""
    client.app.state.worker_pool.stop()


def test_health_check(client: TestClient) -> None:
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "healthy"}


def test_requires_authentication(client: TestClient) -> None:
    """Test that requests without a valid token are rejected."""
    response = client.get("/api/v1/tag", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_create_tag(client: TestClient) -> None:
    """Test creating a tag from a raw path."""
    response = client.post("/api/v1/tag", json={"path": "work/project/", "label": "Project"})

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["path"] == "/work/project"
    assert data["prefix"] == "/work"
    assert data["name"] == "project"
    assert data["depth"] == 2
    assert data["label"] == "Project"
    assert data["parent_id"] is None


def test_create_tag_links_parent_in_background(client: TestClient) -> None:
    """Test that the parent is created and linked after the request."""
    response = client.post("/api/v1/tag", json={"path": "/work/project/todo"})
    tag_id = response.json()["id"]

    wait_for_workers(client)

    tags = {tag["path"]: tag for tag in client.get("/api/v1/tag").json()}
    assert set(tags) == {"/work/project", "/work/project/todo"}
    assert tags["/work/project/todo"]["id"] == tag_id
    assert tags["/work/project/todo"]["parent_id"] == tags["/work/project"]["id"]


def test_create_duplicate_tag(client: TestClient) -> None:
    """Test that an existing path is rejected with 409."""
    client.post("/api/v1/tag", json={"path": "/home"})

    response = client.post("/api/v1/tag", json={"path": "home/"})

    assert response.status_code == status.HTTP_409_CONFLICT


def test_create_tag_invalid_path(client: TestClient) -> None:
    """Test that a path without segments is rejected."""
    response = client.post("/api/v1/tag", json={"path": "///"})
    assert response.status_code == 422


def test_list_tags_filters(client: TestClient) -> None:
    """Test filtering tags by path and depth."""
    for path in ["/a", "/b", "/b/c"]:
        client.post("/api/v1/tag", json={"path": path})

    by_path = client.get("/api/v1/tag", params={"path": ["a", "/b/c"]}).json()
    assert [tag["path"] for tag in by_path] == ["/a", "/b/c"]

    top_level = client.get("/api/v1/tag", params={"depth": 1}).json()
    assert [tag["path"] for tag in top_level] == ["/a", "/b"]


def test_tags_are_private(client: TestClient, other_user_headers) -> None:
    """Test that another user cannot see or fetch the caller's tags."""
    tag_id = client.post("/api/v1/tag", json={"path": "/secret"}).json()["id"]

    assert client.get("/api/v1/tag", headers=other_user_headers).json() == []
    response = client.get(f"/api/v1/tag/{tag_id}", headers=other_user_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_get_tag_not_found(client: TestClient) -> None:
    """Test getting a tag that does not exist."""
    response = client.get("/api/v1/tag/missing")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "tag not found"


def test_update_tag_rename(client: TestClient) -> None:
    """Test renaming a tag re-derives its structure."""
    tag_id = client.post("/api/v1/tag", json={"path": "/a"}).json()["id"]

    response = client.put(f"/api/v1/tag/{tag_id}", json={"path": "/x/y", "label": "Y"})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == tag_id
    assert (data["path"], data["prefix"], data["name"], data["depth"]) == ("/x/y", "/x", "y", 2)
    assert data["label"] == "Y"

    wait_for_workers(client)
    parent = client.get("/api/v1/tag", params={"path": "/x"}).json()
    assert client.get(f"/api/v1/tag/{tag_id}").json()["parent_id"] == parent[0]["id"]


def test_update_tag_conflict(client: TestClient) -> None:
    """Test renaming onto an existing path."""
    client.post("/api/v1/tag", json={"path": "/a"})
    tag_id = client.post("/api/v1/tag", json={"path": "/b"}).json()["id"]

    response = client.put(f"/api/v1/tag/{tag_id}", json={"path": "/a"})

    assert response.status_code == status.HTTP_409_CONFLICT


def test_delete_tag(client: TestClient) -> None:
    """Test deleting a tag."""
    tag_id = client.post("/api/v1/tag", json={"path": "/a"}).json()["id"]

    response = client.delete(f"/api/v1/tag/{tag_id}")

    assert response.status_code == status.HTTP_200_OK
    assert client.get(f"/api/v1/tag/{tag_id}").status_code == status.HTTP_404_NOT_FOUND


def create_linked_tag(client: TestClient, path: str) -> dict:
    """Create a nested tag and let the worker link it to its parent."""
    tag_id = client.post("/api/v1/tag", json={"path": path}).json()["id"]
    wait_for_workers(client)
    tag = client.get(f"/api/v1/tag/{tag_id}").json()
    assert tag["parent_id"] is not None
    return tag


def test_linked_tag_cannot_move_to_top_level(client: TestClient) -> None:
    """Test that a linked tag is not renamed to depth 1."""
    tag = create_linked_tag(client, "/a/b")

    response = client.put(f"/api/v1/tag/{tag['id']}", json={"path": "/z"})

    assert response.status_code == status.HTTP_409_CONFLICT
    stored = client.get(f"/api/v1/tag/{tag['id']}").json()
    assert (stored["path"], stored["depth"]) == ("/a/b", 2)
    assert stored["parent_id"] == tag["parent_id"]


def test_linked_tag_cannot_move_to_other_parent(client: TestClient) -> None:
    """Test that a linked tag is not moved under a different prefix."""
    tag = create_linked_tag(client, "/a/b")

    response = client.put(f"/api/v1/tag/{tag['id']}", json={"path": "/x/y"})

    assert response.status_code == status.HTTP_409_CONFLICT
    assert client.get(f"/api/v1/tag/{tag['id']}").json()["path"] == "/a/b"


def test_linked_tag_renamed_within_parent(client: TestClient) -> None:
    """Test that renaming the last segment keeps the parent link."""
    tag = create_linked_tag(client, "/a/b")

    response = client.put(f"/api/v1/tag/{tag['id']}", json={"path": "/a/c"})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert (data["path"], data["prefix"], data["name"]) == ("/a/c", "/a", "c")
    assert data["parent_id"] == tag["parent_id"]


def test_concurrent_create_reports_conflict(client: TestClient, monkeypatch) -> None:
    """Test that a unique constraint hit past the existence check is a 409."""
    client.post("/api/v1/tag", json={"path": "/home"})
    other_id = client.post("/api/v1/tag", json={"path": "/work"}).json()["id"]
    # Simulate a concurrent request inserting between check and write
    monkeypatch.setattr(tags_endpoints, "_ensure_path_free", lambda service, user_id, path: None)

    response = client.post("/api/v1/tag", json={"path": "/home"})
    assert response.status_code == status.HTTP_409_CONFLICT

    response = client.put(f"/api/v1/tag/{other_id}", json={"path": "/home"})
    assert response.status_code == status.HTTP_409_CONFLICT
    assert client.get(f"/api/v1/tag/{other_id}").json()["path"] == "/work"
