"""
CLI entry point for the price index MCP server.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from price_index_mcp.server import run_server


def main() -> None:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Price Index MCP Server - Browse and reweight a price index tree"
    )
    parser.add_argument(
        "--csv-path",
        type=Path,
        help="Path to the detailed index CSV (default: Tableau_Données_Détaillées_2025-02.csv)",
    )
    parser.add_argument(
        "--delimiter",
        default=",",
        help="CSV field delimiter (default: ',')",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,  # MCP uses stdout for protocol, so log to stderr
    )

    # Run the server
    try:
        asyncio.run(run_server(csv_path=args.csv_path, delimiter=args.delimiter))
    except KeyboardInterrupt:
        logging.info("Server stopped by user")
        sys.exit(0)
    except Exception as e:
        logging.exception(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
