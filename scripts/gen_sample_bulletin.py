#!/usr/bin/env python3
"""Generate a synthetic "prices with taxes" bulletin workbook.

Mimics the layout of the EC Weekly Oil Bulletin export:
- Row 1: title row
- Row 2: bulletin date as DD/MM/YYYY text (cell A2)
- Row 3: header row (country, Euro-super 95, diesel, heating oil, ...)
- Row 4+: one row per member state, then the EU / euro area aggregate rows

Handy for trying the scraper offline:

    python scripts/gen_sample_bulletin.py sample.xlsx --date 17/11/2025
    oil-bulletin --file sample.xlsx --output-dir ./tmp-data
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

from oil_bulletin.services.country_codes import COUNTRY_CODES

HEADER = [
    "Country",
    "Euro-super 95 (I)",
    "Gas oil automobile Automotive gas oil Dieselkraftstoff (I)",
    "Gas oil de chauffage Heating gas oil Heizöl (II)",
    "Fuel oil - Schweres Heizöl (III)",
]

AGGREGATE_ROWS = [
    "EUR27 Moyenne pondérée Weighted average Gewichteter Durchschnitt",
    "Euro Area Moyenne pondérée Weighted average",
]

# First 27 entries of the lookup table are the member states (Czechia listed twice).
MEMBER_STATES = [name for name in COUNTRY_CODES if name != "Czech Republic"][:27]


def generate_prices(countries: list[str], seed: int = 42) -> pd.DataFrame:
    """Random but plausible prices per 1000 litres."""
    rng = np.random.default_rng(seed)
    n = len(countries)
    return pd.DataFrame({
        HEADER[0]: countries,
        HEADER[1]: np.round(rng.uniform(1450, 1950, n), 2),
        HEADER[2]: np.round(rng.uniform(1400, 1900, n), 2),
        HEADER[3]: np.round(rng.uniform(900, 1400, n), 2),
        HEADER[4]: np.round(rng.uniform(450, 800, n), 2),
    })


def create_bulletin(output_path: Path, date_text: str, seed: int = 42) -> None:
    df = generate_prices(MEMBER_STATES, seed)
    sheet: list[list[object]] = [
        ["Weekly Oil Bulletin - Prices with taxes"] + [None] * (len(HEADER) - 1),
        [date_text] + [None] * (len(HEADER) - 1),
        HEADER,
    ]
    sheet.extend(row.tolist() for _, row in df.iterrows())
    means = df[HEADER[1:]].mean().round(2).tolist()
    for label in AGGREGATE_ROWS:
        sheet.append([label, *means])

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        pd.DataFrame(sheet).to_excel(writer, sheet_name="Prices with taxes", header=False, index=False)

    print(f"Created bulletin workbook: {output_path}")
    print(f"  Date (A2): {date_text}")
    print(f"  Countries: {len(MEMBER_STATES)} (+ {len(AGGREGATE_ROWS)} aggregate rows)")


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a synthetic Weekly Oil Bulletin workbook")
    parser.add_argument("output", type=Path, help="Output .xlsx path")
    parser.add_argument("--date", default="17/11/2025", help="Bulletin date written to A2 (DD/MM/YYYY)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args()

    if args.output.suffix != ".xlsx":
        print("Error: output file must have .xlsx extension", file=sys.stderr)
        return 1
    create_bulletin(args.output, args.date, args.seed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
