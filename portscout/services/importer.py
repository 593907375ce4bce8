"""
Builds the service directory database from a delimited port-assignment dataset.

The dataset is expected to start with a header row whose first three columns
are the service name, the port number and the transport protocol, as in the
IANA "service-names-port-numbers.csv" export.

Usage:
    portscout-import service-names-port-numbers.csv --db services.db
"""
from __future__ import annotations
import argparse
import csv
import logging
import sqlite3
import sys
from typing import Iterable, Iterator, List, Optional, Tuple

CREATE_TABLE_SQL = """CREATE TABLE IF NOT EXISTS services (
    "ServiceName" TEXT,
    "PortNumber" TEXT,
    "TransportProtocol" TEXT
)"""
INSERT_SQL = "INSERT INTO services (ServiceName, PortNumber, TransportProtocol) VALUES (?, ?, ?)"

ServiceRow = Tuple[str, str, str]

def iter_service_rows(records: Iterable[List[str]]) -> Iterator[ServiceRow]:
    """
    Yields (service name, port number, transport protocol) for each usable record.

    The first record is the header and is skipped, as are records with an
    empty service name or port number.
    """
    it = iter(records)
    next(it, None)
    for record in it:
        if len(record) < 3:
            continue
        service_name, port_number, transport_protocol = (v.strip() for v in record[:3])
        if not service_name or not port_number:
            continue
        yield service_name, port_number, transport_protocol

def import_services(csv_path: str, db_path: str, replace: bool = False) -> int:
    """
    Loads the CSV at csv_path into the services table of db_path.

    Rows are appended, so importing the same file twice duplicates them
    unless replace is set. Returns the number of rows written.
    """
    with open(csv_path, newline='', encoding='utf-8') as f:
        rows = list(iter_service_rows(csv.reader(f)))

    conn = sqlite3.connect(db_path)
    try:
        with conn:
            conn.execute(CREATE_TABLE_SQL)
            if replace:
                conn.execute("DELETE FROM services")
            conn.executemany(INSERT_SQL, rows)
    finally:
        conn.close()
    return len(rows)

def main(argv: Optional[List[str]] = None) -> int:
    """Command line entry point for the importer."""
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    parser = argparse.ArgumentParser(
        prog="portscout-import",
        description="Import a service-name/port-number CSV into the portscout service database."
    )
    parser.add_argument("csv_path", help="CSV file with a ServiceName,PortNumber,TransportProtocol header")
    parser.add_argument("--db", default="services.db", help="SQLite database to write (default: services.db)")
    parser.add_argument("--replace", action="store_true", help="Clear existing rows before importing")
    args = parser.parse_args(argv)

    try:
        count = import_services(args.csv_path, args.db, replace=args.replace)
    except (OSError, csv.Error, sqlite3.Error) as e:
        logging.error(f"Import failed: {e}")
        return 1
    logging.info(f"Imported {count} services into '{args.db}'.")
    return 0

if __name__ == "__main__":
    sys.exit(main())
