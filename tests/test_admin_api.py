# tests/test_admin_api.py
import unittest
from unittest.mock import AsyncMock, patch
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fastapi.testclient import TestClient

from admin_portal.backend.main import app
from admin_portal.backend.models.weather import WeatherSummary
from almanac.definitions import settings as setting_defs
from almanac.history import WeatherHistoryStore
from almanac.models import WeatherState

def settings_reader(values):
    async def get_setting(key, default=None):
        return values.get(key, default)
    return get_setting

class TestWeatherSummary(unittest.TestCase):

    def test_display_strings(self):
        state = WeatherState(id="rain", label="Rain", temperature=12,
                             wind={"speed": 2, "direction": "NW"},
                             precipitation={"type": "rain", "intensity": 0.6})
        summary = WeatherSummary.from_state(state, "fahrenheit", "mph")
        self.assertEqual(summary.temperature_display, "54°F")
        self.assertEqual(summary.wind_display, "Moderate (16 mph) from the NW")
        self.assertEqual(summary.precipitation_display, "Moderate rain")

    def test_no_weather(self):
        summary = WeatherSummary.from_state(None)
        self.assertIsNone(summary.weather)
        self.assertIn("°", summary.temperature_display)


class TestAdminWeatherRoutes(unittest.TestCase):
    """Routes are exercised without startup events, so no database pool is created."""

    def setUp(self):
        self.client = TestClient(app)
        history = WeatherHistoryStore()
        history.record(218, 6, 10, WeatherState(id="fog", label="Fog", temperature=9))
        self.values = {
            setting_defs.CURRENT_WEATHER: WeatherState(id="clear", label="Clear", temperature=21).model_dump(),
            setting_defs.WEATHER_HISTORY: history.to_data(),
            setting_defs.CUSTOM_WEATHER_PRESETS: [{"id": "ember-rain", "label": "Ember Rain"}],
        }
        patcher = patch("admin_portal.backend.database.db.get_setting",
                        new=AsyncMock(side_effect=settings_reader(self.values)))
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_health(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "online")

    def test_current_weather(self):
        response = self.client.get("/weather/current")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["weather"]["id"], "clear")
        self.assertEqual(body["temperature_display"], "21°C")

    def test_history_routes(self):
        response = self.client.get("/weather/history", params={"year": 218})
        self.assertEqual([e["id"] for e in response.json()], ["fog"])
        self.assertEqual(self.client.get("/weather/history/218/6/10").json()["temperature"], 9)
        self.assertEqual(self.client.get("/weather/history/218/6/11").status_code, 404)

    def test_presets_include_custom(self):
        ids = [p["id"] for p in self.client.get("/weather/presets").json()]
        self.assertIn("clear", ids)
        self.assertIn("ember-rain", ids)

    def test_empty_forecast_and_zones(self):
        self.assertEqual(self.client.get("/weather/forecast").json(), [])
        self.assertEqual(self.client.get("/weather/zones").json(), {"active_zone": None, "zones": []})


if __name__ == '__main__':
    unittest.main()
