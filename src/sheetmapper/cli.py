"""Command-line interface for SheetMapper."""

import argparse
import json
import logging
import sys

from .config import settings


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="SheetMapper - records in and out of Google Sheets"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Auth command
    subparsers.add_parser("auth", help="Authenticate with Google Sheets API")

    # Read command
    read_parser = subparsers.add_parser("read", help="Print the records of a sheet as JSON")
    read_parser.add_argument("spreadsheet_id", help="Spreadsheet ID (from the URL)")
    read_parser.add_argument("sheet_name", help="Name of the sheet (tab)")

    # Metadata command
    metadata_parser = subparsers.add_parser(
        "metadata", help="Print the developer metadata of a sheet as JSON"
    )
    metadata_parser.add_argument("spreadsheet_id", help="Spreadsheet ID (from the URL)")
    metadata_parser.add_argument("sheet_name", help="Name of the sheet (tab)")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "auth":
        run_auth()
    elif args.command == "read":
        run_read(args.spreadsheet_id, args.sheet_name)
    elif args.command == "metadata":
        run_metadata(args.spreadsheet_id, args.sheet_name)
    else:
        parser.print_help()
        sys.exit(1)


def _open_sheet(spreadsheet_id: str, sheet_name: str):
    from .sheets import GoogleSheetsClient

    return GoogleSheetsClient().open_by_id(spreadsheet_id).get_sheet_by_name(sheet_name)


def run_read(spreadsheet_id: str, sheet_name: str):
    """Print every record of a sheet."""
    from .codec import decode_sheet

    records = decode_sheet(_open_sheet(spreadsheet_id, sheet_name))
    print(json.dumps(records, indent=2, default=str))


def run_metadata(spreadsheet_id: str, sheet_name: str):
    """Print the developer metadata of a sheet."""
    from .codec import decode_sheet_metadata

    bag = decode_sheet_metadata(_open_sheet(spreadsheet_id, sheet_name))
    print(json.dumps(bag, indent=2, default=str))


def run_auth():
    """Run the Google authentication flow."""
    from .sheets import GoogleSheetsClient

    print("Authenticating with Google Sheets API...")
    try:
        client = GoogleSheetsClient()
        # Accessing the service property triggers auth
        _ = client.service
        print("Authentication successful!")
        print(f"Token saved to {settings.google_token_path}.")
    except Exception as e:
        print(f"Authentication failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
