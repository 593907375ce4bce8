"""
Service-name lookup for discovered ports.
"""

from .directory import ServiceDirectory
from .importer import import_services

__all__ = [
    "ServiceDirectory",
    "import_services",
]
