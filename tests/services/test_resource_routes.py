"""Resource Routes — end-to-end tests through the HTTP surface.

Tests cover:
    - The organization lifecycle: create → retrieve → mismatched update → delete → 404
    - Unregistered types yield 404 on every route
    - Envelope failures yield 400 with the JSON:API error document
    - /types advertises every registered type
    - Relationship retrieve and the reserved 501 mutation routes
    - Unmatched routes fall through to the generic NotFound
"""

API = "/api/rest"


async def _create(client, type_name, attributes=None, relationships=None):
    data = {"type": type_name, "attributes": attributes or {}}
    if relationships is not None:
        data["relationships"] = relationships
    res = await client.post(f"{API}/{type_name}", json={"data": data})
    assert res.status_code == 200, res.text
    return res.json()["data"]


# ─── Organization lifecycle ──────────────────────────────────────

async def test_organization_lifecycle(client):
    res = await client.post(
        f"{API}/organization",
        json={"data": {"type": "organization", "attributes": {"name": "Acme"}}},
    )
    assert res.status_code == 200
    created = res.json()
    org_id = created["data"]["id"]
    assert org_id
    assert created["data"]["attributes"] == {"name": "Acme"}
    assert "description" not in created["data"]["attributes"]
    assert "body" not in created["data"]["attributes"]

    res = await client.get(f"{API}/organization/{org_id}")
    assert res.status_code == 200
    assert res.json()["data"] == created["data"]

    res = await client.patch(
        f"{API}/organization/{org_id}",
        json={"data": {"type": "organization", "id": "other-id",
                       "attributes": {"name": "Changed"}}},
    )
    assert res.status_code == 400

    res = await client.get(f"{API}/organization/{org_id}")
    assert res.json()["data"]["attributes"] == {"name": "Acme"}

    res = await client.delete(f"{API}/organization/{org_id}")
    assert res.status_code == 204
    assert res.content == b""

    res = await client.get(f"{API}/organization/{org_id}")
    assert res.status_code == 404


async def test_response_links(client):
    org = await _create(client, "organization", {"name": "Acme"})
    assert org["links"]["self"] == f"http://test{API}/organization/{org['id']}"
    res = await client.get(f"{API}/organization")
    assert res.json()["links"]["self"] == f"http://test{API}/organization"
    assert res.headers["content-type"].startswith("application/vnd.api+json")


async def test_update_merges_attributes(client):
    org = await _create(client, "organization", {"name": "Acme", "description": "Old"})
    res = await client.patch(
        f"{API}/organization/{org['id']}",
        json={"data": {"type": "organization", "id": org["id"],
                       "attributes": {"body": "Hello"}}},
    )
    assert res.status_code == 200
    assert res.json()["data"]["attributes"] == {
        "name": "Acme", "description": "Old", "body": "Hello",
    }


async def test_update_missing_record_is_404(client):
    res = await client.patch(
        f"{API}/organization/missing",
        json={"data": {"type": "organization", "id": "missing"}},
    )
    assert res.status_code == 404


async def test_list_returns_collection(client):
    await _create(client, "organization", {"name": "A"})
    await _create(client, "organization", {"name": "B"})
    res = await client.get(f"{API}/organization")
    assert res.status_code == 200
    assert sorted(r["attributes"]["name"] for r in res.json()["data"]) == ["A", "B"]


# ─── Validation ──────────────────────────────────────────────────

async def test_unregistered_type_is_404_on_every_route(client):
    payload = {"data": {"type": "widgets"}}
    responses = [
        await client.get(f"{API}/widgets"),
        await client.post(f"{API}/widgets", json=payload),
        await client.get(f"{API}/widgets/1"),
        await client.patch(f"{API}/widgets/1", json=payload),
        await client.delete(f"{API}/widgets/1"),
        await client.get(f"{API}/widgets/1/relationships/tags"),
        await client.post(f"{API}/widgets/1/tags", json=payload),
    ]
    assert [r.status_code for r in responses] == [404] * len(responses)
    error = responses[0].json()["errors"][0]
    assert error["status"] == "404"
    assert "widgets" in error["detail"]


async def test_create_with_client_id_is_400(client):
    res = await client.post(
        f"{API}/organization",
        json={"data": {"type": "organization", "id": "mine", "attributes": {"name": "A"}}},
    )
    assert res.status_code == 400
    assert res.json()["errors"][0]["title"] == "Bad Request"
    listing = await client.get(f"{API}/organization")
    assert listing.json()["data"] == []


async def test_create_without_data_is_400(client):
    res = await client.post(f"{API}/organization", json={"attributes": {}})
    assert res.status_code == 400


async def test_create_without_type_is_400(client):
    res = await client.post(f"{API}/organization", json={"data": {"attributes": {}}})
    assert res.status_code == 400


async def test_create_with_unparseable_body_is_400(client):
    res = await client.post(
        f"{API}/organization", content=b"{not json",
        headers={"content-type": "application/vnd.api+json"},
    )
    assert res.status_code == 400


async def test_update_without_id_is_400(client):
    org = await _create(client, "organization", {"name": "Acme"})
    res = await client.patch(
        f"{API}/organization/{org['id']}",
        json={"data": {"type": "organization", "attributes": {"name": "B"}}},
    )
    assert res.status_code == 400


# ─── Index ───────────────────────────────────────────────────────

async def test_types_index_lists_registered_types(client):
    res = await client.get(f"{API}/types")
    assert res.status_code == 200
    assert res.json() == {
        "organization": f"http://test{API}/organization",
        "tags": f"http://test{API}/tags",
    }


# ─── Relationships ───────────────────────────────────────────────

async def test_relationship_retrieve_returns_related_tags(client):
    red = await _create(client, "tags", {"name": "red"})
    blue = await _create(client, "tags", {"name": "blue"})
    org = await _create(
        client, "organization", {"name": "Acme"},
        relationships={"tags": {"data": [
            {"type": "tags", "id": red["id"]},
            {"type": "tags", "id": blue["id"]},
        ]}},
    )
    rel = org["relationships"]["tags"]
    assert rel["links"]["self"] == (
        f"http://test{API}/organization/{org['id']}/relationships/tags"
    )

    res = await client.get(f"{API}/organization/{org['id']}/relationships/tags")
    assert res.status_code == 200
    assert [r["id"] for r in res.json()["data"]] == [red["id"], blue["id"]]


async def test_relationship_scalar_is_normalized_to_list(client):
    red = await _create(client, "tags", {"name": "red"})
    org = await _create(
        client, "organization", {"name": "Acme"},
        relationships={"tags": {"data": {"type": "tags", "id": red["id"]}}},
    )
    assert org["relationships"]["tags"]["data"] == [{"type": "tags", "id": red["id"]}]


async def test_relationship_retrieve_empty_is_empty_collection(client):
    org = await _create(client, "organization", {"name": "Acme"})
    res = await client.get(f"{API}/organization/{org['id']}/relationships/tags")
    assert res.status_code == 200
    assert res.json()["data"] == []


async def test_relationship_retrieve_unknown_key_is_400(client):
    org = await _create(client, "organization", {"name": "Acme"})
    res = await client.get(f"{API}/organization/{org['id']}/relationships/owners")
    assert res.status_code == 400


async def test_relationship_retrieve_missing_parent_is_404(client):
    res = await client.get(f"{API}/organization/missing/relationships/tags")
    assert res.status_code == 404


async def test_relationship_mutation_is_501(client):
    org = await _create(client, "organization", {"name": "Acme"})
    for method in ("POST", "PATCH"):
        res = await client.request(
            method, f"{API}/organization/{org['id']}/tags",
            json={"data": {"type": "tags", "id": "x"}},
        )
        assert res.status_code == 501
        assert res.json()["errors"][0]["status"] == "501"


# ─── Fallthrough ─────────────────────────────────────────────────

async def test_unmatched_route_is_generic_not_found(client):
    res = await client.get("/nowhere/at/all/here/x")
    assert res.status_code == 404
    assert res.json()["errors"][0]["detail"] == (
        "No resource available for GET /nowhere/at/all/here/x"
    )


async def test_health_check(client):
    res = await client.get("/api/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_readiness_check_uses_database(client):
    res = await client.get("/api/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"
