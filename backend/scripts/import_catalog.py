#!/usr/bin/env python3
"""
Catalog bootstrap CLI tool.

Usage:
    python scripts/import_catalog.py                       # Import bundled wines.csv if catalog is empty
    python scripts/import_catalog.py --csv path/to.csv     # Import a specific file
    python scripts/import_catalog.py --force               # Replace the existing catalog
    python scripts/import_catalog.py --stats               # Show catalog statistics
    python scripts/import_catalog.py --search "opus one"   # Try a catalog search
"""

import argparse
import logging
import sys
import time
from pathlib import Path

# Add backend to path
backend_path = Path(__file__).parent.parent
sys.path.insert(0, str(backend_path))

from menu_scanner.config import Config
from menu_scanner.db import ensure_schema
from menu_scanner.ingestion.catalog_import import CatalogImporter
from menu_scanner.services.wine_catalog import WineCatalog


def show_stats(catalog: WineCatalog) -> None:
    """Print catalog size and the most common picker values."""
    print(f"\nCatalog: {catalog.db_path}")
    print(f"  Wines:      {catalog.count():,}")
    print(f"  Countries:  {len(catalog.distinct_values('country')):,}")
    print(f"  Regions:    {len(catalog.distinct_values('region')):,}")
    print(f"  Varieties:  {len(catalog.distinct_values('variety')):,}")
    print(f"  Wineries:   {len(catalog.distinct_values('winery')):,}")


def run_search(catalog: WineCatalog, query: str, limit: int) -> None:
    start = time.perf_counter()
    results = catalog.search(query, limit)
    elapsed_ms = (time.perf_counter() - start) * 1000

    print(f"\n{len(results)} result(s) for '{query}' in {elapsed_ms:.1f}ms")
    for record in results:
        rating = f"{record.rating:.1f}" if record.rating is not None else "-"
        print(f"  [{record.id}] {record.display_name} | {record.winery or '-'} | {rating}")


def main():
    parser = argparse.ArgumentParser(
        description="Wine catalog bootstrap CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument(
        "--csv", "-c",
        default=Config.catalog_csv_path(),
        help="Positional catalog CSV (default: bundled wines.csv)"
    )
    parser.add_argument(
        "--db",
        default=Config.database_path(),
        help="SQLite database path (default: DATABASE_PATH or bundled wines.db)"
    )
    parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Clear and re-import even if the catalog has wines"
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show catalog statistics"
    )
    parser.add_argument(
        "--search", "-s",
        help="Run a catalog search and print the results"
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Result limit for --search"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, Config.log_level(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    ensure_schema(args.db)
    catalog = WineCatalog(args.db)

    try:
        if args.stats:
            show_stats(catalog)
            return

        if args.search:
            run_search(catalog, args.search, args.limit)
            return

        csv_path = Path(args.csv)
        if not csv_path.exists():
            print(f"Error: catalog CSV not found: {csv_path}", file=sys.stderr)
            sys.exit(1)

        start = time.perf_counter()
        stats = CatalogImporter(catalog).import_file(csv_path, force=args.force)
        elapsed = time.perf_counter() - start

        if stats.already_populated:
            print(f"Catalog already has {catalog.count():,} wines. Use --force to re-import.")
            return

        print(f"\nImported {stats.rows_imported:,} of {stats.rows_read:,} rows in {elapsed:.1f}s")
        print(f"  Skipped: {stats.rows_skipped:,}")
        show_stats(catalog)
    finally:
        catalog.close()


if __name__ == "__main__":
    main()
