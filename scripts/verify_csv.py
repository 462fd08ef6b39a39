"""Check that the sales CSV files are where the API expects them. Run: python scripts/verify_csv.py"""
import csv
import os
import sys

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


def describe_file(path, preview_lines=3):
    """Size, header and the first few data rows of a CSV file."""
    with open(path, "r", newline="", encoding="utf-8") as f:
        reader = csv.reader(f)
        header = next(reader, [])
        rows = [row for _, row in zip(range(preview_lines), reader)]
    return {
        "path": path,
        "size_mb": round(os.path.getsize(path) / 1024 / 1024, 2),
        "header": header,
        "preview": rows,
    }


def missing_columns(header):
    from config.settings import SALES_COLUMNS
    return [c for c in SALES_COLUMNS if c not in header]


def main():
    from config.settings import DATA_DIR
    from sales_explorer.models.data_loader import SalesDataLoader

    print("Data directory:", DATA_DIR)
    try:
        files = SalesDataLoader(DATA_DIR).discover_files()
    except FileNotFoundError as e:
        print("CSV file NOT found:", e)
        if os.path.isdir(DATA_DIR):
            print("Files in data/:")
            for name in sorted(os.listdir(DATA_DIR)):
                print("  -", name)
        return 1

    for path in files:
        info = describe_file(path)
        print(f"\n{info['path']} ({info['size_mb']} MB)")
        print("Total columns: %d" % len(info["header"]))
        missing = missing_columns(info["header"])
        if missing:
            print("Missing columns:", ", ".join(missing))
        for i, row in enumerate(info["preview"]):
            line = ",".join(row)
            print(f"  {i + 1}: {line[:80]}{'...' if len(line) > 80 else ''}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
