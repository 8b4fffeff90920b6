"""Shared fixtures for the ride cleaning and analysis tests."""

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest


def make_raw_row(**overrides):
    row = {
        "duration": 600,
        "start_date": "2020-05-04 08:15:00",
        "end_date": "2020-05-04 08:25:00",
        "start_station_id": 31000,
        "start_station_name": "Eads St & 15th St S",
        "end_station_id": 31001,
        "end_station_name": "18th St & S Eads St",
        "bike_number": "W00001",
        "member_casual": "member",
        "ride_id": "ABC123",
        "rideable_type": "docked_bike",
        "start_lat": 38.858971,
        "start_lng": -77.05323,
        "end_lat": 38.85725,
        "end_lng": -77.05332,
        "is_equity": False,
    }
    row.update(overrides)
    return row


@pytest.fixture
def raw_row():
    """Factory for a single well-formed raw ride row."""
    return make_raw_row


@pytest.fixture
def raw_rides():
    """A small raw table with one problem of each kind mixed into good rows."""
    rows = [
        make_raw_row(),
        make_raw_row(start_lat=38.0, start_lng=-77.0, end_lat=38.0, end_lng=-77.0, duration=100),
        make_raw_row(duration=30),
        make_raw_row(start_lat=None),
        make_raw_row(end_lng="not-a-number"),
        make_raw_row(member_casual="Casual ", rideable_type="electric_bike", is_equity=None,
                     start_date="2020-07-11 17:40:00", end_date="2020-07-11 18:10:00",
                     duration=1800),
        make_raw_row(duration=None),
        make_raw_row(member_casual=None),
        make_raw_row(rideable_type=None),
        make_raw_row(start_date=None),
    ]
    return pd.DataFrame(rows)


@pytest.fixture
def cleaned_rides():
    """A cleaned table spanning two years, both memberships and both equity flags."""
    rides = pd.DataFrame(
        {
            "duration": [300, 900, 1200, 4000, 700, 20000, 650, 800],
            "start_date": pd.to_datetime(
                [
                    "2020-05-01 08:00",
                    "2020-05-02 17:30",
                    "2020-05-10 08:45",
                    "2020-05-20 12:00",
                    "2020-05-30 08:10",
                    "2020-08-15 23:00",
                    "2019-06-03 08:00",
                    "2020-05-15 09:00",
                ]
            ),
            "member_casual": pd.Categorical(
                ["member", "member", "member", "casual", "member", "casual", "member", "member"],
                categories=["member", "casual"],
            ),
            "rideable_type": pd.Categorical(
                [
                    "docked_bike",
                    "electric_bike",
                    "docked_bike",
                    "classic_bike",
                    "docked_bike",
                    "docked_bike",
                    "docked_bike",
                    "electric_bike",
                ],
                categories=["classic_bike", "docked_bike", "electric_bike"],
            ),
            "is_equity": pd.array([True, False, True, None, False, None, None, True], dtype="boolean"),
            "distance": [1000.0, 2000.0, 1500.0, 3000.0, 2600.0, 500.0, 800.0, 1800.0],
        }
    )
    rides["end_date"] = rides["start_date"] + pd.to_timedelta(rides["duration"], unit="s")
    return rides
