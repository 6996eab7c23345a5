"""Tests for tag endpoints and bookmark/tag associations."""
from httpx import AsyncClient

from core.bookmark_cache import BookmarkCache


async def create_bookmark(client: AsyncClient, name: str = "bookmark") -> int:
    """Create a bookmark and return its id."""
    response = await client.post(
        "/bookmarks", json={"name": name, "href": f"https://{name}.example"},
    )
    assert response.status_code == 200
    return response.json()["id"]


async def create_tag(client: AsyncClient, name: str, variant: str | None = None) -> dict:
    """Create a tag and return its JSON."""
    body = {"name": name} if variant is None else {"name": name, "variant": variant}
    response = await client.post("/tags", json=body)
    assert response.status_code == 200
    return response.json()


async def test_list_tags_empty(client: AsyncClient) -> None:
    """Test listing tags when none exist."""
    response = await client.get("/tags")
    assert response.status_code == 200
    assert response.json() == []


async def test_create_tag_defaults_variant(client: AsyncClient) -> None:
    """Test that a tag without a variant gets 'default'."""
    tag = await create_tag(client, "python")

    assert tag["name"] == "python"
    assert tag["variant"] == "default"
    assert tag["createdAt"] == tag["updatedAt"]


async def test_create_tag_with_variant(client: AsyncClient) -> None:
    """Test that an explicit variant is stored."""
    tag = await create_tag(client, "urgent", variant="danger")
    assert tag["variant"] == "danger"

    response = await client.get("/tags")
    assert [t["name"] for t in response.json()] == ["urgent"]


async def test_update_tag(client: AsyncClient) -> None:
    """Test replacing a tag's name and variant."""
    tag = await create_tag(client, "old")

    response = await client.put(f"/tags/{tag['id']}", json={"name": "new", "variant": "info"})
    assert response.status_code == 200
    assert response.json()["name"] == "new"
    assert response.json()["variant"] == "info"


async def test_update_missing_tag_returns_404(client: AsyncClient) -> None:
    """Test that updating an unknown tag returns 404."""
    response = await client.put("/tags/9999", json={"name": "x"})
    assert response.status_code == 404


async def test_delete_tag_and_missing_tag(client: AsyncClient) -> None:
    """Test that deleting a tag works and deleting an unknown one is a no-op."""
    tag = await create_tag(client, "temp")

    assert (await client.delete(f"/tags/{tag['id']}")).status_code == 204
    assert (await client.delete("/tags/9999")).status_code == 204
    assert (await client.get("/tags")).json() == []


async def test_add_tag_to_bookmark(client: AsyncClient, bookmark_cache: BookmarkCache) -> None:
    """Test that an associated tag shows up on the bookmark and in the cached list."""
    bookmark_id = await create_bookmark(client)
    tag = await create_tag(client, "reading")

    response = await client.put(f"/bookmarks/{bookmark_id}/tags/{tag['id']}")
    assert response.status_code == 204

    response = await client.get(f"/bookmarks/{bookmark_id}/tags")
    assert response.status_code == 200
    assert [t["name"] for t in response.json()] == ["reading"]

    await bookmark_cache.wait_idle()
    response = await client.get("/bookmarks")
    assert [t["name"] for t in response.json()[0]["tags"]] == ["reading"]


async def test_duplicate_association_returns_409(client: AsyncClient) -> None:
    """Test that associating the same pair twice is a conflict."""
    bookmark_id = await create_bookmark(client)
    tag = await create_tag(client, "dup")

    first = await client.put(f"/bookmarks/{bookmark_id}/tags/{tag['id']}")
    assert first.status_code == 204

    second = await client.put(f"/bookmarks/{bookmark_id}/tags/{tag['id']}")
    assert second.status_code == 409

    response = await client.get(f"/bookmarks/{bookmark_id}/tags")
    assert len(response.json()) == 1


async def test_add_tag_unknown_ids_return_404(client: AsyncClient) -> None:
    """Test that unknown bookmark or tag ids are rejected."""
    bookmark_id = await create_bookmark(client)
    tag = await create_tag(client, "known")

    response = await client.put(f"/bookmarks/9999/tags/{tag['id']}")
    assert response.status_code == 404
    assert response.json()["detail"] == "Bookmark not found"

    response = await client.put(f"/bookmarks/{bookmark_id}/tags/9999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Tag not found"


async def test_remove_tag_from_bookmark(client: AsyncClient) -> None:
    """Test removing an association, and that removing it again is a no-op."""
    bookmark_id = await create_bookmark(client)
    tag = await create_tag(client, "remove-me")
    await client.put(f"/bookmarks/{bookmark_id}/tags/{tag['id']}")

    response = await client.delete(f"/bookmarks/{bookmark_id}/tags/{tag['id']}")
    assert response.status_code == 204
    assert (await client.get(f"/bookmarks/{bookmark_id}/tags")).json() == []

    response = await client.delete(f"/bookmarks/{bookmark_id}/tags/{tag['id']}")
    assert response.status_code == 204


async def test_bookmark_tags_for_missing_bookmark_returns_404(client: AsyncClient) -> None:
    """Test that listing tags of an unknown bookmark returns 404."""
    response = await client.get("/bookmarks/9999/tags")
    assert response.status_code == 404


async def test_search_results_include_tags(client: AsyncClient) -> None:
    """Test that the live search path also embeds tags."""
    bookmark_id = await create_bookmark(client, "tagged")
    tag = await create_tag(client, "python")
    await client.put(f"/bookmarks/{bookmark_id}/tags/{tag['id']}")

    response = await client.get("/bookmarks", params={"q": "tag"})
    assert [t["name"] for t in response.json()[0]["tags"]] == ["python"]


async def test_out_of_range_tag_id_returns_422(client: AsyncClient) -> None:
    """Test that tag ids beyond a 64-bit integer fail validation."""
    response = await client.put(f"/tags/{2**70}", json={"name": "x"})
    assert response.status_code == 422

    response = await client.delete(f"/tags/{2**70}")
    assert response.status_code == 422
