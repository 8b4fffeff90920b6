import argparse

import pandas as pd

from clean_rides import load_rides, check_schema, equity_outside_window


def describe_rides(df: pd.DataFrame) -> dict:
    """Headline numbers for a rides table, raw or cleaned."""
    duration_min = pd.to_numeric(df['duration'], errors='coerce') / 60
    start = pd.to_datetime(df['start_date'], errors='coerce')
    return {
        'rows': len(df),
        'missing': df.isnull().sum().to_dict(),
        'duration_mean_min': duration_min.mean(),
        'duration_median_min': duration_min.median(),
        'duration_max_min': duration_min.max(),
        'duration_min_min': duration_min.min(),
        'first_start': start.min(),
        'last_start': start.max(),
    }


def main():
    parser = argparse.ArgumentParser(description="Print an overview of a bike-share rides CSV.")
    parser.add_argument("--input", "-i", default="capitalbikeshare_2020.csv", help="Path to rides CSV")
    parser.add_argument("--sample", type=int, default=None,
                        help="Process only the first N rows (for testing)")
    args = parser.parse_args()

    print("Loading data...")
    df = check_schema(load_rides(args.input, sample_size=args.sample))
    stats = describe_rides(df)

    # Display basic info
    print("\n=== Data Overview ===")
    print(f"Number of trips: {stats['rows']:,}")
    print("\nColumns:", df.columns.tolist())
    print("\nData types:\n", df.dtypes)
    print("\nMissing values:\n", pd.Series(stats['missing']))

    print("\n=== Trip Duration Statistics ===")
    print(f"Average trip duration: {stats['duration_mean_min']:.1f} minutes")
    print(f"Median trip duration: {stats['duration_median_min']:.1f} minutes")
    print(f"Maximum trip duration: {stats['duration_max_min']:.1f} minutes")
    print(f"Minimum trip duration: {stats['duration_min_min']:.1f} minutes")

    print(f"\nDate range: {stats['first_start']} to {stats['last_start']}")

    print("\n=== Riders and Bikes ===")
    print(df['member_casual'].value_counts(dropna=False))
    print(df['rideable_type'].value_counts(dropna=False))

    # Equity flags should only appear on May 2020 rides
    flagged = df[['start_date', 'is_equity']].dropna(subset=['is_equity']).copy()
    flagged['start_date'] = pd.to_datetime(flagged['start_date'], errors='coerce')
    print(f"\nEquity-flagged rides: {len(flagged):,}")
    print(f"Equity flags outside May 2020: {len(equity_outside_window(flagged)):,}")

    print("\nInitial data exploration complete. Ready to proceed with cleaning.")


if __name__ == "__main__":
    main()
