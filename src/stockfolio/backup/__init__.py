"""Backup import/export utilities."""

from stockfolio.backup.exporter import BackupExporter
from stockfolio.backup.formats import (
    AccountBackup,
    FullBackup,
    ImportPayload,
    TransactionList,
)
from stockfolio.backup.importer import BackupImporter

__all__ = [
    "BackupExporter",
    "BackupImporter",
    "AccountBackup",
    "FullBackup",
    "ImportPayload",
    "TransactionList",
]
