"""Shared request helpers for the integration tests."""

IDENTIFIER = {
    "docset_name": "Python",
    "docset_filename": "Python 3.docset",
    "docset_platform": "python",
    "docset_bundle": "python",
    "docset_version": "3",
    "page_path": "library/os.html",
    "page_title": "os",
    "httrack_source": "",
}


async def create_team(client, headers, name: str, access_key: str = ""):
    resp = await client.post("/api/v1/teams/create", headers=headers, json={"name": name})
    assert resp.status_code == 200, resp.text
    if access_key:
        resp = await client.post(
            "/api/v1/teams/set_access_key", headers=headers, json={"name": name, "access_key": access_key}
        )
        assert resp.status_code == 200, resp.text


async def join_team(client, headers, name: str, access_key: str = ""):
    return await client.post("/api/v1/teams/join", headers=headers, json={"name": name, "access_key": access_key})


async def save_entry(client, headers, identifier=None, **fields):
    payload = {
        "title": "A note",
        "body": "Some **markdown**",
        "anchor": "os.path",
        "type": "function",
        "public": False,
        "teams": [],
        "identifier": identifier or IDENTIFIER,
    }
    payload.update(fields)
    return await client.post("/api/v1/entries/save", headers=headers, json=payload)


async def list_entries(client, headers=None, identifier=None):
    resp = await client.post(
        "/api/v1/entries/list", headers=headers or {}, json={"identifier": identifier or IDENTIFIER}
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]
