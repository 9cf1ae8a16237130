"""HTTP tests for the horizon, node and entity routes."""

from conftest import OWNER, STRANGER

HEADERS = {"X-User-Id": OWNER}


def _create_horizon(client, name="Research", **fields) -> dict:
    response = client.post("/api/horizons", json={"name": name, **fields}, headers=HEADERS)
    assert response.status_code == 201
    return response.json()


def _create_node(client, horizon_id, **fields) -> dict:
    body = {"horizonId": horizon_id, "type": "agent", **fields}
    response = client.post("/api/nodes", json=body, headers=HEADERS)
    assert response.status_code == 201, response.text
    return response.json()


class TestIdentity:
    def test_missing_user_header(self, client):
        response = client.get("/api/horizons")
        assert response.status_code == 401

    def test_health(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestHorizonRoutes:
    def test_create_and_view(self, client):
        horizon = _create_horizon(client, description="notes", tags=["alpha"])
        assert horizon["userId"] == OWNER
        assert horizon["stats"]["nodeCount"] == 0

        response = client.get(f"/api/horizons/{horizon['id']}", headers=HEADERS)
        assert response.status_code == 200
        view = response.json()
        assert view["name"] == "Research"
        assert view["nodes"] == []
        assert view["edges"] == []

    def test_blank_name_rejected(self, client):
        response = client.post("/api/horizons", json={"name": "  "}, headers=HEADERS)
        assert response.status_code == 400

    def test_private_view_forbidden(self, client):
        horizon = _create_horizon(client)
        response = client.get(f"/api/horizons/{horizon['id']}", headers={"X-User-Id": STRANGER})
        assert response.status_code == 403

    def test_unknown_horizon(self, client):
        response = client.get("/api/horizons/nope", headers=HEADERS)
        assert response.status_code == 404
        assert "nope" in response.json()["detail"]

    def test_list_paginates_and_filters(self, client):
        for name in ["one", "two", "three"]:
            _create_horizon(client, name=name, tags=["batch"])
        _create_horizon(client, name="other")

        response = client.get("/api/horizons", params={"limit": 2, "tags": "batch"}, headers=HEADERS)
        page = response.json()
        assert page["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
        assert len(page["items"]) == 2

        response = client.get("/api/horizons", params={"search": "oth"}, headers=HEADERS)
        assert [item["name"] for item in response.json()["items"]] == ["other"]

    def test_listing_carries_node_preview(self, client):
        horizon = _create_horizon(client)
        node = _create_node(client, horizon["id"], position={"x": 3, "y": 4})

        items = client.get("/api/horizons", headers=HEADERS).json()["items"]
        assert items[0]["nodes"] == [
            {"id": node["id"], "type": "agent", "position": {"x": 3, "y": 4}, "parentId": None}
        ]

    def test_listing_hides_private_horizons(self, client):
        _create_horizon(client)
        response = client.get("/api/horizons", headers={"X-User-Id": STRANGER})
        assert response.json()["items"] == []

    def test_update_bumps_version_and_syncs(self, client):
        horizon = _create_horizon(client)
        body = {
            "name": "Renamed",
            "nodes": [{"id": "client-1", "type": "portfolio", "position": {"x": 1, "y": 2}}],
        }
        response = client.put(f"/api/horizons/{horizon['id']}", json=body, headers=HEADERS)

        assert response.status_code == 200
        payload = response.json()
        assert payload["horizon"]["name"] == "Renamed"
        assert payload["horizon"]["version"] == 2
        assert payload["sync"]["created"] == ["client-1"]
        assert payload["sync"]["stats"]["nodeCount"] == 1

    def test_update_without_nodes_skips_sync(self, client):
        horizon = _create_horizon(client)
        response = client.put(f"/api/horizons/{horizon['id']}", json={"tags": ["x"]}, headers=HEADERS)
        assert response.json()["sync"] is None

    def test_delete_is_owner_only(self, client):
        horizon = _create_horizon(client, isPublic=True)
        _create_node(client, horizon["id"])

        response = client.delete(f"/api/horizons/{horizon['id']}", headers={"X-User-Id": STRANGER})
        assert response.status_code == 403

        response = client.delete(f"/api/horizons/{horizon['id']}", headers=HEADERS)
        assert response.json() == {"deleted": horizon["id"], "deactivatedNodes": 1}
        assert client.get(f"/api/horizons/{horizon['id']}", headers=HEADERS).status_code == 404


class TestNodeRoutes:
    def test_missing_type(self, client):
        horizon = _create_horizon(client)
        response = client.post("/api/nodes", json={"horizonId": horizon["id"]}, headers=HEADERS)
        assert response.status_code == 400

    def test_missing_parent(self, client):
        horizon = _create_horizon(client)
        response = client.post(
            "/api/nodes",
            json={"horizonId": horizon["id"], "type": "agent", "parentId": "ghost"},
            headers=HEADERS,
        )
        assert response.status_code == 404

    def test_parent_child_edge_in_view(self, client):
        horizon = _create_horizon(client)
        parent = _create_node(client, horizon["id"])
        child = _create_node(client, horizon["id"], parentId=parent["id"])

        view = client.get(f"/api/horizons/{horizon['id']}", headers=HEADERS).json()
        assert [(e["source"], e["target"]) for e in view["edges"]] == [(parent["id"], child["id"])]
        assert view["edges"][0]["id"] == f"edge-{parent['id']}-{child['id']}"

    def test_update_node(self, client):
        horizon = _create_horizon(client)
        node = _create_node(client, horizon["id"])

        response = client.put(
            f"/api/nodes/{node['id']}",
            json={"data": {"label": "x"}, "position": {"x": 9, "y": 9}},
            headers=HEADERS,
        )
        assert response.status_code == 200
        assert response.json()["data"] == {"label": "x"}
        assert response.json()["position"] == {"x": 9, "y": 9}

    def test_reparent_cycle_rejected(self, client):
        horizon = _create_horizon(client)
        a = _create_node(client, horizon["id"])
        b = _create_node(client, horizon["id"], parentId=a["id"])

        response = client.put(f"/api/nodes/{a['id']}", json={"parentId": b["id"]}, headers=HEADERS)
        assert response.status_code == 400

    def test_cascade_delete(self, client):
        horizon = _create_horizon(client)
        a = _create_node(client, horizon["id"])
        b = _create_node(client, horizon["id"], parentId=a["id"])
        _create_node(client, horizon["id"], parentId=b["id"])

        response = client.delete(f"/api/nodes/{a['id']}", headers=HEADERS)
        assert response.status_code == 200
        assert response.json()["deletedCount"] == 2

        view = client.get(f"/api/horizons/{horizon['id']}", headers=HEADERS).json()
        assert view["nodes"] == []
        assert view["stats"]["nodeCount"] == 0

    def test_delete_twice(self, client):
        horizon = _create_horizon(client)
        node = _create_node(client, horizon["id"])
        client.delete(f"/api/nodes/{node['id']}", headers=HEADERS)

        response = client.delete(f"/api/nodes/{node['id']}", headers=HEADERS)
        assert response.status_code == 404

    def test_output_history_and_reactivate(self, client):
        horizon = _create_horizon(client)
        agent = _create_node(client, horizon["id"])
        first = _create_node(client, horizon["id"], type="outputNode", parentId=agent["id"])
        second = _create_node(client, horizon["id"], type="output", parentId=agent["id"])

        response = client.get(
            f"/api/nodes/by-agent/{agent['id']}",
            params={"horizonId": horizon["id"]},
            headers=HEADERS,
        )
        history = response.json()
        assert history["total"] == 2
        assert [o["id"] for o in history["outputs"]] == [second["id"], first["id"]]
        assert [o["isActive"] for o in history["outputs"]] == [True, False]

        response = client.patch(f"/api/nodes/{first['id']}/reactivate", headers=HEADERS)
        assert response.status_code == 200
        assert response.json()["isActive"] is True

        view = client.get(f"/api/horizons/{horizon['id']}", headers=HEADERS).json()
        assert [(e["source"], e["target"]) for e in view["edges"]] == [(agent["id"], first["id"])]

    def test_history_requires_horizon_id(self, client):
        response = client.get("/api/nodes/by-agent/whatever", headers=HEADERS)
        assert response.status_code == 400


class TestEntityRoutes:
    def test_agent_lifecycle(self, client):
        horizon = _create_horizon(client)
        url = f"/api/horizons/{horizon['id']}/agents"

        response = client.post(url, json={"name": "Analyst", "system": "analyzer"}, headers=HEADERS)
        assert response.status_code == 201
        agent = response.json()
        assert agent["isBuiltin"] is False

        view = client.get(f"/api/horizons/{horizon['id']}", headers=HEADERS).json()
        assert [a["id"] for a in view["analyzerAgents"]] == [agent["id"]]
        assert view["stats"]["agentCount"] == 1

        assert client.delete(f"{url}/{agent['id']}", headers=HEADERS).status_code == 200
        assert client.get(url, headers=HEADERS).json() == []
        assert client.delete(f"{url}/{agent['id']}", headers=HEADERS).status_code == 404

    def test_portfolios_and_teams(self, client):
        horizon = _create_horizon(client)
        base = f"/api/horizons/{horizon['id']}"

        client.post(f"{base}/portfolios", json={"name": "Tech", "stocks": ["MSFT"]}, headers=HEADERS)
        client.post(f"{base}/teams", json={"name": "Desk", "tags": ["eq"]}, headers=HEADERS)

        view = client.get(base, headers=HEADERS).json()
        assert [p["stocks"] for p in view["portfolios"]] == [["MSFT"]]
        assert [t["name"] for t in view["teams"]] == ["Desk"]
        assert view["stats"]["portfolioCount"] == 1

    def test_stranger_cannot_add(self, client):
        horizon = _create_horizon(client, isPublic=True)
        response = client.post(
            f"/api/horizons/{horizon['id']}/teams",
            json={"name": "Desk"},
            headers={"X-User-Id": STRANGER},
        )
        assert response.status_code == 403
