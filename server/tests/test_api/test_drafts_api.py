# Order draft API tests

DRAFT = {
    "journey": {"train": "12345", "date": "2025-03-10", "boarding": "NDLS"},
    "outlet": {"restro_code": "R100", "station_code": "BPL"},
    "cart": [{"item_id": 1, "qty": 1}, {"item_id": 2, "qty": 0}],
}


class TestDrafts:
    """Draft CRUD"""

    def test_create_and_read(self, client):
        response = client.post("/api/drafts", json=DRAFT)

        assert response.status_code == 200
        created = response.json()["data"]
        # zero-quantity lines are dropped
        assert [line["item_id"] for line in created["draft"]["cart"]] == [1]
        assert created["draft"]["journey"]["train"] == "12345"

        fetched = client.get(f"/api/drafts/{created['draft_id']}").json()["data"]
        assert fetched["draft"] == created["draft"]

    def test_replace(self, client):
        draft_id = client.post("/api/drafts", json=DRAFT).json()["data"]["draft_id"]

        response = client.put(f"/api/drafts/{draft_id}", json={"cart": [{"item_id": 9, "qty": 2}]})

        draft = response.json()["data"]["draft"]
        assert draft["outlet"] is None
        assert draft["cart"][0]["item_id"] == 9

    def test_delete(self, client):
        draft_id = client.post("/api/drafts", json=DRAFT).json()["data"]["draft_id"]

        assert client.delete(f"/api/drafts/{draft_id}").status_code == 200
        assert client.delete(f"/api/drafts/{draft_id}").status_code == 404

    def test_missing_draft(self, client):
        assert client.get("/api/drafts/unknown").json()["error"] == "draft_not_found"
        assert client.put("/api/drafts/unknown", json=DRAFT).status_code == 404

    def test_invalid_cart_line(self, client):
        response = client.post("/api/drafts", json={"cart": [{"item_id": "abc", "qty": 1}]})
        assert response.status_code == 400
