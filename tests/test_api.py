"""Tests for the Flask HTTP API."""

import pytest

from treegrid import api
from treegrid.config import Settings


@pytest.fixture
def client(sample_index):
    api.configure(Settings(), index=sample_index)
    api.app.config["TESTING"] = True
    with api.app.test_client() as test_client:
        yield test_client
    api.configure(None, None)


class TestGetRows:
    """Tests for POST /getRows."""

    def test_root_window_with_fold(self, client):
        """Test the root window returns one row and folds five root children."""
        resp = client.post("/getRows", json={"groupPath": [], "startRow": 0, "endRow": 5})
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["status"] == "success"
        assert [row["id"] for row in body["rows"]] == ["0"]
        assert body["rowCount"] == 1
        assert body["foldedChildKey"] == "0"
        assert [row["id"] for row in body["foldedChild"]["rows"]] == ["1", "2", "3", "4", "5"]
        assert body["foldedChild"]["rowCount"] == 12

    def test_row_fields(self, client):
        """Test rows expose the fields the grid reads."""
        body = client.post("/getRows", json={"groupPath": ["0"], "startRow": 0, "endRow": 1}).get_json()
        row = body["rows"][0]
        assert row["id"] == "1"
        assert row["parentId"] == "0"
        assert row["isLeaf"] is False
        assert row["depth"] == 1
        assert row["subPartCode"] == "PART-1"
        assert "foldedChild" not in body

    def test_group_keys_alias(self, client):
        """Test grid-style groupKeys are accepted."""
        body = client.post("/getRows", json={"groupKeys": ["0", "3"], "startRow": 0, "endRow": 100}).get_json()
        assert len(body["rows"]) == 12
        assert body["rowCount"] == 12
        assert "foldedChild" not in body

    def test_unknown_group(self, client):
        """Test an unknown id is a 404."""
        resp = client.post("/getRows", json={"groupPath": ["0", "nope"], "startRow": 0, "endRow": 5})
        assert resp.status_code == 404
        body = resp.get_json()
        assert body["status"] == "not_found"
        assert body["groupKey"] == "nope"

    def test_invalid_range(self, client):
        """Test startRow > endRow is a 400."""
        resp = client.post("/getRows", json={"groupPath": ["0"], "startRow": 5, "endRow": 2})
        assert resp.status_code == 400
        assert resp.get_json()["status"] == "invalid_range"

    @pytest.mark.parametrize("payload", [
        {"groupPath": []},
        {"groupPath": "0", "startRow": 0, "endRow": 5},
        {"groupPath": [], "startRow": "a", "endRow": 5},
    ])
    def test_malformed_body(self, client, payload):
        """Test malformed bodies are rejected with 400."""
        resp = client.post("/getRows", json=payload)
        assert resp.status_code == 400

    def test_missing_body(self, client):
        """Test a request without JSON is rejected."""
        resp = client.post("/getRows", data="not json", content_type="text/plain")
        assert resp.status_code == 400

    def test_cors_header(self, client):
        """Test cross-origin requests are allowed."""
        resp = client.post("/getRows", json={"groupPath": [], "startRow": 0, "endRow": 1},
                           headers={"Origin": "http://grid.example"})
        assert resp.headers.get("Access-Control-Allow-Origin") in ("*", "http://grid.example")


class TestNodeAndStatus:
    """Tests for GET /node/<id> and GET /status."""

    def test_node_info(self, client):
        """Test node lookup returns the group path for its children."""
        resp = client.get("/node/3")
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["groupPath"] == ["0", "3"]
        assert body["ancestors"] == ["0"]
        assert body["childCount"] == 12
        assert body["node"]["id"] == "3"

    def test_unknown_node(self, client):
        """Test unknown node is a 404."""
        assert client.get("/node/nope").status_code == 404

    def test_status(self, client, sample_index):
        """Test the status endpoint reports the node count."""
        body = client.get("/status").get_json()
        assert body["status"] == "ok"
        assert body["nodeCount"] == len(sample_index)


class TestInitialization:
    """Tests for one-time index construction."""

    def test_index_built_once(self):
        """Test the resolver is generated on first use and then reused."""
        api.configure(Settings(total_node_count=40, seed=3))
        try:
            first = api.get_resolver()
            assert len(first.index) == 40
            assert api.get_resolver() is first
        finally:
            api.configure(None, None)

    def test_invalid_settings_fail_fast(self):
        """Test a bad config never produces a resolver."""
        api.configure(Settings(total_node_count=0))
        try:
            with pytest.raises(RuntimeError):
                api.get_resolver()
            assert api.api_resolver is None
        finally:
            api.configure(None, None)
