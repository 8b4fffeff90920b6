import argparse
from pathlib import Path

import numpy as np
import pandas as pd
from tqdm import tqdm

EARTH_RADIUS_M = 6378137  # WGS84 equatorial radius in meters
MIN_DURATION_SECONDS = 60

REQUIRED_COLUMNS = [
    'duration', 'start_date', 'end_date',
    'start_station_id', 'start_station_name',
    'end_station_id', 'end_station_name',
    'bike_number', 'member_casual', 'ride_id', 'rideable_type',
    'start_lat', 'start_lng', 'end_lat', 'end_lng',
    'is_equity',
]
COORDINATE_COLUMNS = ['start_lat', 'start_lng', 'end_lat', 'end_lng']
IDENTIFIER_COLUMNS = ['ride_id', 'bike_number']

MEMBER_TYPES = ['member', 'casual']
RIDEABLE_TYPES = ['classic_bike', 'docked_bike', 'electric_bike']

EQUITY_VALUES = {
    'true': True, 'false': False,
    '1': True, '0': False, '1.0': True, '0.0': False,
}


def haversine_radians(lat1, lon1, lat2, lon2):
    """Great-circle distance in meters for coordinates already in radians."""
    dlat = np.abs(lat1 - lat2)
    dlon = np.abs(lon1 - lon2)
    a = (1 - np.cos(dlat) + np.cos(lat1) * np.cos(lat2) * (1 - np.cos(dlon))) / 2
    # Rounding can push a just outside [0, 1]
    a = np.clip(a, 0.0, 1.0)
    return 2 * EARTH_RADIUS_M * np.arcsin(np.sqrt(a))


def haversine(lat1, lon1, lat2, lon2):
    """Calculate the great circle distance in meters between two points given in degrees."""
    lat1, lon1, lat2, lon2 = map(np.radians, [lat1, lon1, lat2, lon2])
    return haversine_radians(lat1, lon1, lat2, lon2)


def load_rides(input_file, sample_size=None, chunksize=100_000) -> pd.DataFrame:
    in_path = Path(input_file)
    if not in_path.exists():
        raise FileNotFoundError(f"Input file not found: {in_path}")

    print(f"Loading: {in_path}")
    if sample_size:
        print(f"  [TEST MODE] Loading only first {sample_size} rows...")
        return pd.read_csv(in_path, nrows=sample_size, low_memory=False)

    # Read in chunks so large monthly dumps show progress
    chunks = []
    with pd.read_csv(in_path, chunksize=chunksize, low_memory=False) as reader:
        for chunk in tqdm(reader, desc="Reading rides", unit="chunk"):
            chunks.append(chunk)
    if not chunks:
        return pd.read_csv(in_path)
    return pd.concat(chunks, ignore_index=True)


def check_schema(df: pd.DataFrame) -> pd.DataFrame:
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise KeyError(f"Input CSV is missing required columns: {missing}")
    return df


def drop_missing(df: pd.DataFrame) -> pd.DataFrame:
    """Drop rows without usable coordinates, duration, start date or categories."""
    out = df.copy()
    for col in COORDINATE_COLUMNS:
        out[col] = pd.to_numeric(out[col], errors='coerce')
    required = COORDINATE_COLUMNS + ['duration', 'start_date', 'member_casual', 'rideable_type']
    return out.dropna(subset=required).reset_index(drop=True)


def drop_identifiers(df: pd.DataFrame) -> pd.DataFrame:
    return df.drop(columns=IDENTIFIER_COLUMNS, errors='ignore')


def to_radians(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    for col in COORDINATE_COLUMNS:
        out[col] = np.radians(out[col].astype(float))
    return out


def add_distance(df: pd.DataFrame) -> pd.DataFrame:
    """Add ``distance`` (meters) from radian coordinates."""
    out = df.copy()
    out['distance'] = haversine_radians(
        out['start_lat'].to_numpy(), out['start_lng'].to_numpy(),
        out['end_lat'].to_numpy(), out['end_lng'].to_numpy(),
    )
    return out


def _to_levels(series: pd.Series, levels) -> pd.Series:
    values = series.astype(str).str.strip().str.lower()
    unknown = sorted(set(values.dropna()) - set(levels))
    if unknown:
        raise ValueError(f"Unrecognized {series.name} values: {unknown}")
    return pd.Categorical(values, categories=levels)


def _to_equity(series: pd.Series) -> pd.Series:
    present = series.notna()
    text = series[present].astype(str).str.strip().str.lower()
    unknown = sorted(set(text) - set(EQUITY_VALUES))
    if unknown:
        raise ValueError(f"Unrecognized is_equity values: {unknown}")
    out = pd.Series(pd.NA, index=series.index, dtype='boolean')
    out[present] = text.map(EQUITY_VALUES).astype(bool)
    return out


def coerce_types(df: pd.DataFrame) -> pd.DataFrame:
    """Convert columns to typed representations; malformed values raise ValueError."""
    out = df.copy()

    # Non-numeric durations are a data error, not a missing value.
    # Fractional seconds round to the nearest second before the 60s filter.
    duration = pd.to_numeric(out['duration'], errors='raise')
    out['duration'] = duration.round().astype('int64')

    # Mixed precision such as "08:15" and "08:15:00" is still valid ISO 8601
    for col in ['start_date', 'end_date']:
        out[col] = pd.to_datetime(out[col], format='ISO8601', errors='raise')

    # Station ids are nullable; unparseable or fractional ids become null
    for col in ['start_station_id', 'end_station_id']:
        ids = pd.to_numeric(out[col], errors='coerce')
        out[col] = ids.where(ids % 1 == 0).astype('Int64')

    for col in ['start_station_name', 'end_station_name']:
        out[col] = out[col].astype('string')

    out['member_casual'] = _to_levels(out['member_casual'], MEMBER_TYPES)
    out['rideable_type'] = _to_levels(out['rideable_type'], RIDEABLE_TYPES)
    out['is_equity'] = _to_equity(out['is_equity'])
    return out


def filter_duration(df: pd.DataFrame, min_seconds=MIN_DURATION_SECONDS) -> pd.DataFrame:
    return df[df['duration'] > min_seconds].reset_index(drop=True)


def clean_rides(df: pd.DataFrame) -> pd.DataFrame:
    """Run every cleaning stage in order and report how many rows survived."""
    check_schema(df)
    raw_count = len(df)

    out = drop_missing(df)
    missing_dropped = raw_count - len(out)
    out = drop_identifiers(out)
    out = to_radians(out)
    out = add_distance(out)
    out = coerce_types(out)
    before_filter = len(out)
    out = filter_duration(out)

    print(f"Cleaned {raw_count:,} rows -> {len(out):,} rows")
    print(f"  dropped {missing_dropped:,} rows with missing fields")
    print(f"  dropped {before_filter - len(out):,} rides of {MIN_DURATION_SECONDS}s or less")
    return out


def equity_outside_window(df: pd.DataFrame, year=2020, month=5) -> pd.DataFrame:
    """Rows flagged for equity whose start date is outside the given month."""
    in_window = (df['start_date'].dt.year == year) & (df['start_date'].dt.month == month)
    return df[df['is_equity'].notna() & ~in_window]


def main():
    parser = argparse.ArgumentParser(description="Clean raw bike-share rides and derive trip distance.")
    parser.add_argument(
        "--input", "-i",
        default="capitalbikeshare_2020.csv",
        help="Path to raw rides CSV"
    )
    parser.add_argument(
        "--output", "-o",
        default="capitalbikeshare_2020_cleaned.csv",
        help="Path to write cleaned CSV"
    )
    parser.add_argument("--sample", type=int, default=None,
                        help="Process only the first N rows (for testing)")
    parser.add_argument(
        "--summary", action="store_true",
        help="Print a before/after category counts summary"
    )
    args = parser.parse_args()

    df = load_rides(args.input, sample_size=args.sample)

    if args.summary:
        print("\nBefore cleaning:")
        print(df['member_casual'].value_counts(dropna=False))
        print(df['rideable_type'].value_counts(dropna=False))

    cleaned = clean_rides(df)

    out_path = Path(args.output)
    cleaned.to_csv(out_path, index=False)
    print(f"\nWrote cleaned CSV to: {out_path.resolve()}")

    if args.summary:
        print("\nAfter cleaning:")
        print(cleaned['member_casual'].value_counts())
        print(cleaned['rideable_type'].value_counts())
        stray = equity_outside_window(cleaned)
        print(f"\nEquity flags outside May 2020: {len(stray):,}")


if __name__ == "__main__":
    main()
