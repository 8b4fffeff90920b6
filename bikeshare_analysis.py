import pandas as pd
import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns
import os
import argparse

from clean_rides import load_rides, clean_rides, equity_outside_window, MEMBER_TYPES, MIN_DURATION_SECONDS
from ride_questions import (
    DAY_ORDER,
    ride_timing_summary,
    duration_by_user_type,
    member_distance_trend,
)

# Set up visualization style
try:
    plt.style.use('ggplot')  # guaranteed built-in style
except Exception:
    # Fall back to default style if ggplot is unavailable
    plt.style.use('default')

# Try to set a seaborn palette, but don't fail if seaborn style/palette isn't available
try:
    sns.set_palette('viridis')
except Exception:
    pass
plt.rcParams['figure.figsize'] = [14, 8]
plt.rcParams['font.size'] = 12

# Filters used for the three report questions
MAX_DURATION_SECONDS = 3 * 60 * 60
TIMING_FILTERS = {'max_duration': MAX_DURATION_SECONDS}
DURATION_FILTERS = {'min_duration': MIN_DURATION_SECONDS, 'max_duration': MAX_DURATION_SECONDS}
DISTANCE_FILTERS = {
    'start': '2020-05-01',
    'end': '2020-06-01',
    'max_distance': 20_000,
    'max_duration': MAX_DURATION_SECONDS,
}


def plot_ride_timing(timing, output_dir):
    # 1. Rides by hour of day
    plt.figure(figsize=(14, 7))
    by_hour = timing['by_hour']
    for member in MEMBER_TYPES:
        plt.bar(by_hour.index, by_hour[member], alpha=0.6, label=member)
    plt.title('Rides by Hour of Day', fontsize=16)
    plt.xlabel('Hour of Day', fontsize=14)
    plt.ylabel('Rides', fontsize=14)
    plt.xticks(range(0, 24, 2))
    plt.legend()
    plt.tight_layout()
    plt.savefig(f'{output_dir}/rides_by_hour.png', dpi=150, bbox_inches='tight')
    plt.close()

    # 2. Rides by day of week
    plt.figure(figsize=(12, 6))
    by_day = timing['by_day'].reindex(DAY_ORDER)
    by_day.plot(kind='bar', ax=plt.gca())
    plt.title('Rides by Day of Week', fontsize=16)
    plt.xlabel('Day of Week', fontsize=14)
    plt.ylabel('Rides', fontsize=14)
    plt.xticks(rotation=45)
    plt.tight_layout()
    plt.savefig(f'{output_dir}/rides_by_day.png', dpi=150, bbox_inches='tight')
    plt.close()

    # 3. Rides by bike type
    plt.figure(figsize=(10, 6))
    timing['by_rideable_type'].plot(kind='barh', ax=plt.gca())
    plt.title('Rides by Bike Type', fontsize=16)
    plt.xlabel('Rides', fontsize=14)
    plt.ylabel('Bike Type', fontsize=14)
    plt.tight_layout()
    plt.savefig(f'{output_dir}/rides_by_bike_type.png', dpi=150, bbox_inches='tight')
    plt.close()


def plot_ride_duration(durations, output_dir):
    # Duration histogram by membership
    plt.figure(figsize=(12, 6))
    sns.histplot(data=durations, x='duration_min', hue='member_casual', bins=60, element='step')
    plt.title('Ride Duration by User Type', fontsize=16)
    plt.xlabel('Duration (minutes)', fontsize=14)
    plt.ylabel('Rides', fontsize=14)
    plt.tight_layout()
    plt.savefig(f'{output_dir}/duration_histogram.png', dpi=150, bbox_inches='tight')
    plt.close()

    # Boxplot per year and membership
    plt.figure(figsize=(12, 6))
    sns.boxplot(data=durations, x='year', y='duration_min', hue='member_casual', showfliers=False)
    plt.title('Ride Duration by Year and User Type', fontsize=16)
    plt.xlabel('Year', fontsize=14)
    plt.ylabel('Duration (minutes)', fontsize=14)
    plt.tight_layout()
    plt.savefig(f'{output_dir}/duration_boxplot.png', dpi=150, bbox_inches='tight')
    plt.close()


def plot_distance_trend(points, trends, output_dir):
    plt.figure(figsize=(14, 7))
    labels = {True: 'equity member', False: 'regular member'}
    for flag, label in labels.items():
        group = points[points['is_equity'] == flag]
        if group.empty:
            continue
        plt.scatter(group['elapsed_days'], group['distance'], s=8, alpha=0.4, label=label)
        trend = trends.get(flag)
        if trend is not None:
            x = np.linspace(group['elapsed_days'].min(), group['elapsed_days'].max(), 50)
            plt.plot(x, trend['slope'] * x + trend['intercept'], linewidth=2,
                     label=f"{label} trend ({trend['slope']:+.1f} m/day)")
    plt.title('Member Ride Distance Over May 2020', fontsize=16)
    plt.xlabel('Days since first ride', fontsize=14)
    plt.ylabel('Distance (m)', fontsize=14)
    plt.legend()
    plt.tight_layout()
    plt.savefig(f'{output_dir}/distance_trend.png', dpi=150, bbox_inches='tight')
    plt.close()


def analyze_bikeshare_data(input_file, output_dir='output', sample_size=None, visualize=False):
    # Create output directory if it doesn't exist
    os.makedirs(output_dir, exist_ok=True)

    print("Loading data...")
    raw = load_rides(input_file, sample_size=sample_size)

    print("\nCleaning rides and calculating distances...")
    df = clean_rides(raw)

    stray = equity_outside_window(df)
    if len(stray):
        print(f"  Note: {len(stray):,} rides carry an equity flag outside May 2020")

    # Question 1: when do people ride?
    print("\nSummarizing ride timing...")
    timing = ride_timing_summary(df, **TIMING_FILTERS)

    # Question 2: how long do members and casual riders ride?
    print("Summarizing ride duration by user type...")
    durations, duration_summary = duration_by_user_type(df, **DURATION_FILTERS)

    # Question 3: did equity members ride further over May 2020?
    print("Fitting distance trends for members...")
    points, trends = member_distance_trend(df, **DISTANCE_FILTERS)
    for flag, trend in trends.items():
        label = 'equity' if flag else 'regular'
        if trend is None:
            print(f"  {label}: not enough rides for a trend")
        else:
            print(f"  {label}: {trend['slope']:+.2f} m/day over {trend['n']:,} rides")

    if visualize and len(df) >= 10:  # Minimum rows needed for meaningful visualizations
        print("\nGenerating visualizations...")
        try:
            plot_ride_timing(timing, output_dir)
            if not durations.empty:
                plot_ride_duration(durations, output_dir)
            if not points.empty:
                plot_distance_trend(points, trends, output_dir)
        except Exception as e:
            print(f"\nWarning: Could not generate some visualizations: {str(e)}")
    elif visualize:
        print("\nSkipping visualizations - insufficient data (need at least 10 rows)")

    print("\nSaving results...")
    timing['by_hour'].to_csv(f'{output_dir}/rides_by_hour.csv')
    timing['by_day'].to_csv(f'{output_dir}/rides_by_day.csv')
    timing['by_rideable_type'].to_csv(f'{output_dir}/rides_by_bike_type.csv')
    duration_summary.to_csv(f'{output_dir}/duration_summary.csv')
    trend_rows = [
        {'is_equity': flag, **(trend or {'slope': np.nan, 'intercept': np.nan, 'n': 0})}
        for flag, trend in trends.items()
    ]
    pd.DataFrame(trend_rows).to_csv(f'{output_dir}/distance_trends.csv', index=False)

    output_file = f'{output_dir}/rides_cleaned.csv'
    df.to_csv(output_file, index=False)

    print(f"\nAnalysis complete! Results saved to {output_file}")
    print(f"Summaries saved to the '{output_dir}' directory.")

    return df


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Clean bike-share rides and chart timing, duration and distance trends.")
    parser.add_argument("--input", "-i", default="capitalbikeshare_2020.csv", help="Path to input rides CSV")
    parser.add_argument("--output", "-o", default="bikeshare_analysis_output", help="Directory to write results")
    parser.add_argument("--sample", type=int, default=None,
                       help="Process only the first N rows (for testing)")
    parser.add_argument("--viz", action="store_true", help="Enable chart generation (disabled by default)")
    args = parser.parse_args()

    input_file = args.input
    output_dir = args.output

    print(f"Starting Bike-Share Ride Analysis for {input_file}")
    print("=" * 60)

    try:
        df = analyze_bikeshare_data(input_file, output_dir, sample_size=args.sample, visualize=args.viz)
        print("\nAnalysis completed successfully!")
    except Exception as e:
        print(f"\nAn error occurred during analysis: {str(e)}")
        raise
