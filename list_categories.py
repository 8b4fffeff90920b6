import argparse
from pathlib import Path

import pandas as pd

from clean_rides import MEMBER_TYPES, RIDEABLE_TYPES

# Levels the cleaning step accepts after trimming and lowercasing
KNOWN_LEVELS = {
    'member_casual': MEMBER_TYPES,
    'rideable_type': RIDEABLE_TYPES,
}


def category_counts(df: pd.DataFrame, column: str) -> pd.Series:
    if column not in df.columns:
        raise KeyError(f"Input CSV must contain a '{column}' column")
    return df[column].value_counts(dropna=False)


def format_counts(counts: pd.Series, column: str) -> list:
    """Render value counts as tab-separated lines, marking values cleaning would reject."""
    levels = KNOWN_LEVELS.get(column)
    total = int(counts.sum())
    lines = [
        f"Ride '{column}' audit\n",
        f"Total rides: {total:,}\n",
        "Value\tRides\tPercent\tStatus\n",
    ]
    for value, count in counts.items():
        if pd.isna(value):
            label, status = "<NaN>", "dropped"
        else:
            label = str(value)
            if levels is None or label.strip().lower() in levels:
                status = "ok"
            else:
                status = "rejected"
        pct = (count / total) * 100 if total else 0
        lines.append(f"{label}\t{count:,}\t{pct:0.2f}%\t{status}\n")
    return lines


def main():
    parser = argparse.ArgumentParser(description="Audit categorical ride columns before cleaning.")
    parser.add_argument("--input", "-i", default="capitalbikeshare_2020.csv", help="Path to rides CSV")
    parser.add_argument(
        "--columns", "-c", nargs="+",
        default=list(KNOWN_LEVELS),
        help="Columns to audit (default: member_casual rideable_type)"
    )
    parser.add_argument("--output", "-o", default="ride_categories_audit.txt",
                        help="Path to write the text audit")
    args = parser.parse_args()

    input_path = Path(args.input)
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    print(f"Loading: {input_path}")
    header = pd.read_csv(input_path, nrows=0).columns
    missing = [col for col in args.columns if col not in header]
    if missing:
        raise KeyError(f"Input CSV is missing columns: {missing}")
    df = pd.read_csv(input_path, usecols=args.columns)

    sections = []
    for column in args.columns:
        lines = format_counts(category_counts(df, column), column)
        sections.append("".join(lines))
        rejected = [line for line in lines[3:] if line.rstrip().endswith("rejected")]
        print(f"  {column}: {len(lines) - 3} distinct values, {len(rejected)} would be rejected")

    out_path = Path(args.output)
    out_path.write_text("\n".join(sections), encoding="utf-8")
    print(f"Audit written to: {out_path.resolve()}")


if __name__ == "__main__":
    main()
