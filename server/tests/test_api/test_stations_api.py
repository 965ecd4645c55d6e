# Station directory and restaurant listing API tests

from zoneinfo import ZoneInfo

import httpx

from api.main import app
from api.dependencies import get_holiday_service
from api.holidays import HolidayService

IST = ZoneInfo('Asia/Kolkata')
ADMIN_CONFIG = {'admin_base_url': 'http://admin.test', 'request_timeout_seconds': 2, 'chunk_size': 2}


class TestStationRestaurants:
    """GET /api/stations/{station_code}/restaurants"""

    def test_available_restaurants(self, client):
        response = client.get("/api/stations/BPL/restaurants", params={"date": "2025-03-10", "time": "14:30"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["station_code"] == "BPL"
        assert data["arrival_time"] == "14:30"
        assert [r["restro_code"] for r in data["restaurants"]] == ['R100', 'R104']
        assert data["restaurants"][0]["min_order"] == 200.0

    def test_holiday_window_passed(self, client):
        response = client.get("/api/stations/bpl/restaurants", params={"date": "2025-03-10", "time": "19:00"})

        codes = [r["restro_code"] for r in response.json()["data"]["restaurants"]]
        assert 'R103' in codes
        assert 'R102' not in codes

    def test_missing_time(self, client):
        response = client.get("/api/stations/BPL/restaurants", params={"date": "2025-03-10"})

        assert response.status_code == 400
        assert response.json()["meta"] == {"missing": ["time"]}

    def test_invalid_time(self, client):
        response = client.get("/api/stations/BPL/restaurants", params={"date": "2025-03-10", "time": "25:99"})

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_arrival_time"

    def test_invalid_date(self, client):
        response = client.get("/api/stations/BPL/restaurants", params={"date": "tomorrow", "time": "14:30"})
        assert response.json()["error"] == "invalid_date"


class TestStationSearch:
    """GET /api/stations"""

    def test_search_by_name(self, client):
        response = client.get("/api/stations", params={"q": "Nag"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert [s["station_code"] for s in data] == ['NGP']
        assert data[0]["station_name"] == 'Nagpur'

    def test_default_listing(self, client):
        response = client.get("/api/stations", params={"limit": 2})

        assert [s["station_name"] for s in response.json()["data"]] == ['Agra Cantt', 'Bhopal Jn']

    def test_limit_out_of_range(self, client):
        response = client.get("/api/stations", params={"limit": 500})
        assert response.status_code == 400
        assert response.json()["error"] == "missing_params"


class TestStationDetail:
    """GET /api/stations/{station_code}"""

    def test_station_with_active_restaurants(self, client):
        response = client.get("/api/stations/bpl")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["station"]["station_code"] == 'BPL'
        assert data["station"]["district"] == 'Bhopal'
        # R101 is inactive; hours, weekly off and holidays do not apply here
        assert [r["restro_code"] for r in data["restaurants"]] == ['R100', 'R104', 'R103', 'R102']

    def test_station_without_restaurants(self, client):
        response = client.get("/api/stations/MAS")

        assert response.status_code == 200
        assert response.json()["data"]["restaurants"] == []

    def test_unknown_station(self, client):
        response = client.get("/api/stations/XYZ")

        assert response.status_code == 404
        assert response.json()["error"] == "station_not_found"

    def test_admin_restaurants_for_unlisted_station(self, client, test_db):
        def handler(request):
            if request.url.path == '/api/stations/AGC':
                return httpx.Response(200, json={'data': [
                    {'RestroCode': 'A1', 'RestroName': 'Agra Petha Point', 'OpenTime': '08:00', 'ClosedTime': '22:00'},
                    {'RestroCode': 'A9', 'RestroName': 'Shut Stall', 'IsActive': 'inactive'},
                ]})
            return httpx.Response(200, json=[])

        remote = HolidayService(test_db, ADMIN_CONFIG, IST, transport=httpx.MockTransport(handler))
        app.dependency_overrides[get_holiday_service] = lambda: remote

        response = client.get("/api/stations/AGC")
        assert [r["restro_code"] for r in response.json()["data"]["restaurants"]] == ['A1']

        listing = client.get("/api/stations/AGC/restaurants", params={"date": "2025-03-10", "time": "09:00"})
        assert [r["restro_code"] for r in listing.json()["data"]["restaurants"]] == ['A1']
