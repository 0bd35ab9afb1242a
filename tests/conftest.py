"""
Shared test fixtures for the analytics service test suite.
"""

import os
import sys
from datetime import datetime, timedelta

import pytest

# Ensure the service root is on the path so imports work
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Set env vars before any application imports
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_FILE", "")


TRIP_START = datetime(2025, 3, 10, 8, 0, 0)


def route_with_stops(stops: int, stationary_samples: int = 8, moving_between: int = 2) -> list[dict]:
    """
    Route points with ``stops`` stationary runs, each of ``stationary_samples``
    identical samples, separated by moving samples and ending in movement.
    """
    points = []
    lon = 51.0
    ts = TRIP_START

    def add(lat: float, lon_value: float):
        nonlocal ts
        points.append({"lat": lat, "lon": lon_value, "timestamp": ts.isoformat()})
        ts += timedelta(seconds=30)

    for _ in range(stops):
        for _ in range(moving_between):
            lon += 0.01
            add(25.0, lon)
        for _ in range(stationary_samples - 1):
            add(25.0, lon)

    for _ in range(moving_between):
        lon += 0.01
        add(25.0, lon)

    return points


def moving_route(samples: int = 20) -> list[dict]:
    return [{"lat": 25.0, "lon": 51.0 + i * 0.01} for i in range(samples)]


@pytest.fixture
def make_trip():
    """Factory for TripRecord instances with sensible defaults."""
    from api.analytics_models import TripRecord

    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "id": f"trip-{counter['n']}",
            "driver_id": "driver-1",
            "start_time": TRIP_START,
            "end_time": TRIP_START + timedelta(hours=2),
            "distance_km": 100.0,
            "start_lat": 25.0,
            "start_lon": 51.0,
            "end_lat": 25.0,
            "end_lon": 51.9,
            "route_points": None,
        }
        data.update(overrides)
        return TripRecord(**data)

    return _make


@pytest.fixture
def historical_months():
    from api.analytics_models import MonthlyConsumption

    return [
        MonthlyConsumption(
            month="January", year=2025,
            food_consumption=100, assets_purchased=50, vehicle_rental_costs=150, total=300,
        ),
    ]


@pytest.fixture
def app_client():
    """FastAPI test client."""
    from httpx import AsyncClient, ASGITransport
    from main import app

    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")
