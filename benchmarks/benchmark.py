#!/usr/bin/env python3
"""
Benchmark script for sheetdiff.

Generates synthetic sheets and times compare and merge.

Usage:
    python benchmark.py
    python benchmark.py --rows 100000 --cols 20
    python benchmark.py --duplicates 0.05
"""

import argparse
import time

import numpy as np
import pandas as pd

from sheetdiff import compare, merge
from sheetdiff.io import frame_to_table


def generate_test_data(rows: int, cols: int, duplicates: float, seed: int = 42) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Generate two DataFrames with controlled differences."""
    rng = np.random.default_rng(seed)

    data = {
        'id': [f'ID-{i:08d}' for i in range(rows)]
    }

    for i in range(cols):
        col_type = i % 4
        col_name = f'col_{i:03d}'

        if col_type == 0:  # String
            data[col_name] = [f'value_{v}' for v in rng.integers(0, 1000, rows)]
        elif col_type == 1:  # Integer
            data[col_name] = rng.integers(0, 10000, rows)
        elif col_type == 2:  # Float
            data[col_name] = rng.uniform(0, 1000, rows).round(4)
        else:  # Nullable
            data[col_name] = rng.choice(['A', 'B', 'C', None], rows)

    df_a = pd.DataFrame(data)
    df_b = df_a.copy()

    # 1. Changed cells (~1% of string columns)
    for i in range(0, cols, 4):
        col_name = f'col_{i:03d}'
        mask = rng.random(rows) < 0.01
        df_b.loc[mask, col_name] = df_b.loc[mask, col_name] + '_changed'

    # 2. Duplicate keys on the left
    if duplicates > 0:
        dup_rows = df_a.sample(frac=duplicates, random_state=seed)
        df_a = pd.concat([df_a, dup_rows], ignore_index=True)

    # 3. Remove a few rows from B, add a few new ones
    drop_indices = rng.choice(len(df_b), size=max(1, rows // 1000), replace=False)
    df_b = df_b.drop(drop_indices).reset_index(drop=True)

    new_rows = pd.DataFrame({
        'id': [f'ID-NEW-{i:04d}' for i in range(max(1, rows // 1000))],
        **{f'col_{i:03d}': ['new_value'] * max(1, rows // 1000) for i in range(cols)}
    })
    df_b = pd.concat([df_b, new_rows], ignore_index=True)

    return df_a, df_b


def format_time(seconds: float) -> str:
    """Format seconds to human readable."""
    if seconds < 1:
        return f'{seconds*1000:.0f}ms'
    elif seconds < 60:
        return f'{seconds:.1f}s'
    else:
        return f'{seconds/60:.1f}min'


def format_size(rows: int, cols: int) -> str:
    """Format dataset size."""
    cells = rows * cols
    if cells < 1_000_000:
        return f'{cells/1000:.0f}K cells'
    else:
        return f'{cells/1_000_000:.1f}M cells'


def timed(fn, *args):
    start = time.perf_counter()
    result = fn(*args)
    return result, time.perf_counter() - start


def main():
    parser = argparse.ArgumentParser(description='Benchmark sheetdiff compare and merge')
    parser.add_argument('--rows', type=int, default=10000, help='Number of rows (default: 10000)')
    parser.add_argument('--cols', type=int, default=20, help='Number of columns (default: 20)')
    parser.add_argument('--duplicates', type=float, default=0.01,
                        help='Fraction of left rows duplicated (default: 0.01)')
    args = parser.parse_args()

    print(f"{'='*60}")
    print("SHEETDIFF BENCHMARK")
    print(f"{'='*60}")
    print(f"Dataset: {args.rows:,} rows × {args.cols} columns ({format_size(args.rows, args.cols)})")
    print()

    print("Generating test data...")
    (df_a, df_b), gen_time = timed(generate_test_data, args.rows, args.cols, args.duplicates)
    print(f"  Generated in {format_time(gen_time)}")

    (left, right), conv_time = timed(
        lambda: (frame_to_table(df_a, 'left'), frame_to_table(df_b, 'right')))
    print(f"  Converted to tables in {format_time(conv_time)}")
    print(f"  Left:  {len(left):,} rows")
    print(f"  Right: {len(right):,} rows")
    print()

    print("Compare: Running...")
    result, cmp_time = timed(compare, left, 'id', right, 'id')
    print(f"  ✓ {len(result):,} entries in {format_time(cmp_time)}")
    for status, n in result.counts().items():
        print(f"    {status.value:<10} {n:,}")

    print("Merge: Running...")
    merged, merge_time = timed(merge, left, 'id', right, 'id', ['col_000', 'col_001'])
    print(f"  ✓ {len(merged):,} rows in {format_time(merge_time)}")
    print()


if __name__ == '__main__':
    main()
