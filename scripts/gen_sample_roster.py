#!/usr/bin/env python3
"""Sample roster generator for manual and load testing of `certbatch run`.

Generates a candidate table (.csv / .xlsx / .ods) with the kind of noise real
registration exports contain:
- Header spellings that vary between exports ("Full Name", "E-mail", "Courses")
- Free-text course entries, sometimes several per cell, sometimes unrecognizable
- A configurable share of rows with a blank name or a malformed email
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

FIRST_NAMES = ["Ada", "Grace", "Alan", "Katherine", "Linus", "Margaret", "Dennis", "Barbara", "Ken", "Radia"]
LAST_NAMES = ["Lovelace", "Hopper", "Turing", "Johnson", "Torvalds", "Hamilton", "Ritchie", "Liskov", "Thompson", "Perlman"]

COURSE_SPELLINGS = [
    "Python Programming",
    "intro to python",
    "Data Analytics",
    "data analysis with excel",
    "MS Office",
    "Microsoft Office for Admins",
    "Cyber Security",
    "cybersecurity fundamentals",
]
UNRECOGNIZED_COURSES = ["Basket Weaving", "Public Speaking", "Pottery"]

HEADER_VARIANTS = {
    "name": ["Name", "Full Name", "Candidate Name"],
    "email": ["Email", "E-mail", "Email Address"],
    "courses": ["Courses", "Course", "Course Name", "Courses Completed"],
}


def generate_roster(rows: int, invalid_ratio: float = 0.05, seed: int = 42) -> pd.DataFrame:
    """Generate a roster DataFrame with randomly chosen header spellings.

    Args:
        rows: Number of candidate rows
        invalid_ratio: Share of rows with a blank name or malformed email
        seed: Random seed for reproducible data
    """
    rng = np.random.default_rng(seed)

    names: list[str] = []
    emails: list[str] = []
    courses: list[str] = []
    for i in range(rows):
        first = rng.choice(FIRST_NAMES)
        last = rng.choice(LAST_NAMES)
        name = f"{first} {last}"
        email = f"{first.lower()}.{last.lower()}{i}@example.com"

        if rng.random() < invalid_ratio:
            if rng.random() < 0.5:
                name = ""
            else:
                email = email.replace("@", " at ")

        count = int(rng.integers(1, 4))
        picked = list(rng.choice(COURSE_SPELLINGS, size=count, replace=False))
        if rng.random() < 0.1:
            picked.append(str(rng.choice(UNRECOGNIZED_COURSES)))
        names.append(name)
        emails.append(email)
        courses.append(", ".join(str(p) for p in picked))

    headers = {key: str(rng.choice(variants)) for key, variants in HEADER_VARIANTS.items()}
    return pd.DataFrame(
        {
            headers["name"]: names,
            headers["email"]: emails,
            headers["courses"]: courses,
        }
    )


def write_roster(df: pd.DataFrame, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    suffix = output_path.suffix.lower()
    if suffix == ".csv":
        df.to_csv(output_path, index=False)
    elif suffix == ".xlsx":
        df.to_excel(output_path, index=False, engine="openpyxl")
    elif suffix == ".ods":
        df.to_excel(output_path, index=False, engine="odf")
    else:
        raise ValueError(f"unsupported output type: {output_path.name} (use .csv, .xlsx or .ods)")

    print(f"Created roster: {output_path}")
    print(f"  Rows: {len(df)}")
    print(f"  Headers: {', '.join(df.columns)}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic candidate roster",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/cohort.csv
  %(prog)s data/large.xlsx --rows 2000 --invalid-ratio 0.1 --seed 7
        """,
    )
    parser.add_argument("output", type=Path, help="Output file (.csv, .xlsx or .ods)")
    parser.add_argument("--rows", type=int, default=50, help="Number of candidate rows (default: 50)")
    parser.add_argument(
        "--invalid-ratio", type=float, default=0.05, help="Share of invalid rows (default: 0.05)"
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if not 0 <= args.invalid_ratio <= 1:
        print("Error: --invalid-ratio must be between 0 and 1", file=sys.stderr)
        return 1

    try:
        write_roster(generate_roster(args.rows, args.invalid_ratio, args.seed), args.output)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
