"""Read-only aggregations behind the three report questions.

Every function takes the cleaned rides table and returns new frames; the
input table is never modified.
"""
import numpy as np
import pandas as pd

from clean_rides import MEMBER_TYPES, RIDEABLE_TYPES

DAY_ORDER = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']


def filter_rides(df, start=None, end=None, min_duration=None, max_duration=None,
                 min_distance=None, max_distance=None, member_casual=None):
    """Select rides by start date window [start, end), inclusive bounds and membership."""
    mask = pd.Series(True, index=df.index)
    if start is not None:
        mask &= df['start_date'] >= pd.Timestamp(start)
    if end is not None:
        mask &= df['start_date'] < pd.Timestamp(end)
    if min_duration is not None:
        mask &= df['duration'] >= min_duration
    if max_duration is not None:
        mask &= df['duration'] <= max_duration
    if min_distance is not None:
        mask &= df['distance'] >= min_distance
    if max_distance is not None:
        mask &= df['distance'] <= max_distance
    if member_casual is not None:
        levels = [member_casual] if isinstance(member_casual, str) else list(member_casual)
        mask &= df['member_casual'].astype(str).isin(levels)
    return df[mask].copy()


def _counts(keys, members, index):
    table = pd.crosstab(keys, members)
    return table.reindex(index=index, columns=MEMBER_TYPES, fill_value=0)


def ride_timing_summary(df, **filters):
    """Ride counts by hour, weekday and bike type, split by membership."""
    rides = filter_rides(df, **filters)
    members = rides['member_casual'].astype(str).rename('member_casual')

    hour = rides['start_date'].dt.hour.rename('hour')
    day = rides['start_date'].dt.day_name().rename('day')
    bike = rides['rideable_type'].astype(str).rename('rideable_type')

    return {
        'by_hour': _counts(hour, members, range(24)),
        'by_day': _counts(day, members, DAY_ORDER),
        'by_rideable_type': _counts(bike, members, RIDEABLE_TYPES),
    }


def duration_by_user_type(df, years=None, **filters):
    """Long-form durations per membership and year, plus describe() per group."""
    rides = filter_rides(df, **filters)
    if years is not None:
        rides = rides[rides['start_date'].dt.year.isin(list(years))]

    long = pd.DataFrame({
        'duration': rides['duration'],
        'duration_min': rides['duration'] / 60,
        'member_casual': rides['member_casual'].astype(str),
        'year': rides['start_date'].dt.year,
    }).reset_index(drop=True)

    summary = long.groupby(['year', 'member_casual'])['duration_min'].describe()
    return long, summary


def fit_trend(x, y):
    """Least-squares line through (x, y); None when fewer than two distinct x values."""
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if len(np.unique(x)) < 2:
        return None
    slope, intercept = np.polyfit(x, y, 1)
    return {'slope': float(slope), 'intercept': float(intercept), 'n': int(len(x))}


def member_distance_trend(df, member_casual='member', **filters):
    """Distance against elapsed days for one membership, with a trend line per equity flag."""
    rides = filter_rides(df, member_casual=member_casual, **filters)
    rides = rides[rides['is_equity'].notna()]

    points = rides[['start_date', 'distance', 'is_equity']].reset_index(drop=True)
    points['is_equity'] = points['is_equity'].astype(bool)
    if len(points):
        origin = points['start_date'].min()
        points['elapsed_days'] = (points['start_date'] - origin) / pd.Timedelta(days=1)
    else:
        points['elapsed_days'] = pd.Series(dtype=float)

    trends = {}
    for flag in [True, False]:
        group = points[points['is_equity'] == flag]
        trends[flag] = fit_trend(group['elapsed_days'], group['distance'])
    return points, trends
