"""End-to-end report tests on a small CSV written to a temporary directory."""

import pandas as pd
import pytest

from bikeshare_analysis import analyze_bikeshare_data
from conftest import make_raw_row


@pytest.fixture
def rides_csv(tmp_path):
    rows = []
    for day in range(1, 29, 2):
        rows.append(make_raw_row(
            start_date=f"2020-05-{day:02d} 08:00:00",
            end_date=f"2020-05-{day:02d} 08:20:00",
            duration=1200,
            end_lat=38.858971 + day * 0.001,
            is_equity=day % 4 == 1,
        ))
        rows.append(make_raw_row(
            start_date=f"2020-07-{day:02d} 17:00:00",
            end_date=f"2020-07-{day:02d} 17:45:00",
            duration=2700,
            member_casual="casual",
            rideable_type="electric_bike",
            is_equity=None,
        ))
    rows.append(make_raw_row(duration=45))
    path = tmp_path / "rides.csv"
    pd.DataFrame(rows).to_csv(path, index=False)
    return path


def test_analyze_bikeshare_data__writes_summaries_and_returns_clean_table(rides_csv, tmp_path):
    out_dir = tmp_path / "out"

    df = analyze_bikeshare_data(rides_csv, str(out_dir))

    assert len(df) == 28
    assert (df["duration"] > 60).all()
    for name in [
        "rides_by_hour.csv",
        "rides_by_day.csv",
        "rides_by_bike_type.csv",
        "duration_summary.csv",
        "distance_trends.csv",
        "rides_cleaned.csv",
    ]:
        assert (out_dir / name).exists()

    trends = pd.read_csv(out_dir / "distance_trends.csv")
    assert set(trends["is_equity"]) == {True, False}
    assert (trends["slope"] > 0).all()


def test_analyze_bikeshare_data__visualize__renders_charts(rides_csv, tmp_path):
    out_dir = tmp_path / "charts"

    analyze_bikeshare_data(rides_csv, str(out_dir), visualize=True)

    for name in [
        "rides_by_hour.png",
        "rides_by_day.png",
        "rides_by_bike_type.png",
        "duration_histogram.png",
        "duration_boxplot.png",
        "distance_trend.png",
    ]:
        assert (out_dir / name).exists()


def test_analyze_bikeshare_data__sample_size__limits_rows(rides_csv, tmp_path):
    df = analyze_bikeshare_data(rides_csv, str(tmp_path / "sample"), sample_size=4)

    assert len(df) == 4


def test_duration_filters__lower_bound__matches_cleaning_floor():
    from bikeshare_analysis import DURATION_FILTERS
    from clean_rides import MIN_DURATION_SECONDS

    assert DURATION_FILTERS["min_duration"] == MIN_DURATION_SECONDS
