"""
Split data/sales_data.csv into data/sales_data_part<N>.csv files of SPLIT_CHUNK_ROWS rows each.
Uses streaming with csv module to handle large file and quoted newlines.
Run: python scripts/split_sales_csv.py [input.csv] [rows_per_part]
"""
import csv
import os
import sys

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

OUTPUT_PREFIX = "sales_data_part"


def split_csv(input_path, output_dir, rows_per_part):
    """Write the header plus up to rows_per_part rows into each part file. Returns the part paths."""
    if rows_per_part < 1:
        raise ValueError("rows_per_part must be >= 1")
    os.makedirs(output_dir, exist_ok=True)
    parts = []
    handle = None
    writer = None
    try:
        with open(input_path, "r", newline="", encoding="utf-8") as infile:
            reader = csv.reader(infile)
            header = next(reader, None)
            if header is None:
                return parts
            for row_index, row in enumerate(reader):
                if row_index % rows_per_part == 0:
                    if handle is not None:
                        handle.close()
                    out_path = os.path.join(output_dir, f"{OUTPUT_PREFIX}{len(parts) + 1}.csv")
                    handle = open(out_path, "w", newline="", encoding="utf-8")
                    writer = csv.writer(handle)
                    writer.writerow(header)
                    parts.append(out_path)
                writer.writerow(row)
                if (row_index + 1) % 100_000 == 0:
                    print(f"Processed {row_index + 1} rows...")
    finally:
        if handle is not None:
            handle.close()
    return parts


def main():
    from config.settings import DATA_DIR, SALES_FILE, SPLIT_CHUNK_ROWS
    input_path = sys.argv[1] if len(sys.argv) > 1 else os.path.join(DATA_DIR, SALES_FILE)
    rows_per_part = int(sys.argv[2]) if len(sys.argv) > 2 else SPLIT_CHUNK_ROWS
    if not os.path.exists(input_path):
        print(f"Error: {input_path} not found")
        return 1
    parts = split_csv(input_path, DATA_DIR, rows_per_part)
    if parts:
        print(f"Created: {OUTPUT_PREFIX}1.csv through {OUTPUT_PREFIX}{len(parts)}.csv in {DATA_DIR}")
    else:
        print("Input has no header; nothing written")
    return 0


if __name__ == "__main__":
    sys.exit(main())
