"""
Read-only lookup from port number to well-known service name.
"""
from __future__ import annotations
import logging
from pathlib import Path
import sqlite3
from typing import Optional

# Prefer TCP rows when the dataset lists a port for several transports.
LOOKUP_SQL = """
    SELECT ServiceName FROM services
    WHERE PortNumber = ? AND ServiceName != ''
    ORDER BY CASE WHEN lower(TransportProtocol) = 'tcp' THEN 0 ELSE 1 END, rowid
    LIMIT 1
"""

class ServiceDirectory:
    """
    Looks up service names in the SQLite table built by the importer.

    Every lookup opens its own read-only connection, so probes on different
    threads can query it at the same time.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        # mode=ro refuses to create an empty database when the file is missing.
        uri = f"{Path(self.db_path).resolve().as_uri()}?mode=ro"
        return sqlite3.connect(uri, uri=True)

    def lookup(self, port: int) -> Optional[str]:
        """Returns the service name for a port, or None if it is unknown."""
        try:
            conn = self._connect()
            try:
                row = conn.execute(LOOKUP_SQL, (str(port),)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logging.warning(f"Service lookup for port {port} failed: {e}")
            return None
        return row[0] if row else None
