# Train lookup and journey search API tests


class TestTrainSearch:
    """GET /api/trains"""

    def test_find_by_fragment(self, client):
        response = client.get("/api/trains", params={"q": "express"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["data"] == [{'train_number': 12345, 'train_name': 'Test Superfast Express', 'stop_count': 6}]

    def test_query_required(self, client):
        response = client.get("/api/trains")

        assert response.status_code == 400
        assert response.json()["error"] == "missing_params"


class TestJourneySearch:
    """GET /api/trains/search"""

    def test_restaurants_per_stop(self, client):
        response = client.get("/api/trains/search", params={
            "train": "12345", "date": "2025-03-10", "boarding": "ndls"
        })

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["train"]["train_number"] == 12345
        assert data["boarding"] == "NDLS"

        by_station = {s["stop"]["station_code"]: s for s in data["stations"]}
        assert list(by_station) == ['NDLS', 'AGC', 'BPL', 'NGP', 'BZA', 'MAS']
        assert [r["restro_code"] for r in by_station["BPL"]["restaurants"]] == ['R100', 'R104']
        assert by_station["NGP"]["restaurants"] == []
        assert by_station["BZA"]["stop"]["arrival_date"] == '2025-03-11'
        assert [r["restro_code"] for r in by_station["BZA"]["restaurants"]] == ['R300']

    def test_search_from_mid_route_boarding(self, client):
        response = client.get("/api/trains/search", params={
            "train": "12345", "date": "2025-03-10", "boarding": "BPL"
        })

        stations = response.json()["data"]["stations"]
        assert [s["stop"]["station_code"] for s in stations] == ['BPL', 'NGP', 'BZA', 'MAS']
        assert stations[2]["stop"]["arrival_date"] == '2025-03-11'

    def test_missing_params(self, client):
        response = client.get("/api/trains/search", params={"train": "12345"})

        assert response.status_code == 400
        assert response.json()["meta"] == {"missing": ["date"]}

    def test_invalid_date(self, client):
        response = client.get("/api/trains/search", params={"train": "12345", "date": "2025/03/10"})

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_date"

    def test_unknown_train(self, client):
        response = client.get("/api/trains/search", params={"train": "99999", "date": "2025-03-10"})

        assert response.status_code == 404
        assert response.json()["error"] == "train_not_found"

    def test_not_running(self, client):
        response = client.get("/api/trains/search", params={"train": "22222", "date": "2025-03-10"})

        assert response.status_code == 422
        assert response.json()["error"] == "not_running_on_date"


class TestTrainRoute:
    """GET /api/trains/{train}/route"""

    def test_route_without_date(self, client):
        response = client.get("/api/trains/12345/route")

        assert response.status_code == 200
        stops = response.json()["data"]["stops"]
        assert len(stops) == 6
        assert stops[0]["arrival_date"] is None
        assert stops[2]["halt_time"] == '10m'

    def test_route_with_date_and_boarding(self, client):
        response = client.get("/api/trains/12345/route", params={"date": "2025-03-10", "boarding": "NGP"})

        stops = response.json()["data"]["stops"]
        assert [(s["station_code"], s["arrival"], s["arrival_date"]) for s in stops] == [
            ('NGP', '23:30', '2025-03-10'),
            ('BZA', '00:15', '2025-03-11'),
            ('MAS', '08:00', '2025-03-12'),
        ]

    def test_route_by_name(self, client):
        response = client.get("/api/trains/weekend/route")
        assert response.json()["data"]["train"]["train_number"] == 22222
