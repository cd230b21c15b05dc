# payables/services/receipt_storage.py

"""
RECEIPT FILE STORAGE

Payments keep receipt file NAMES only; the files live under
settings.RECEIPT_UPLOAD_ROOT and are managed through Django's storage API.

Deletion is best-effort and post-commit: a rolled back unit of work never
loses files, and a storage failure never fails a committed ledger change.
"""

import logging

from django.conf import settings
from django.core.files.storage import FileSystemStorage
from django.db import transaction


logger = logging.getLogger("payables.receipts")


class ReceiptStorage:
    def __init__(self, storage=None):
        self._storage = storage

    @property
    def storage(self):
        if self._storage is None:
            self._storage = FileSystemStorage(location=settings.RECEIPT_UPLOAD_ROOT)
        return self._storage

    def file_exists(self, name: str) -> bool:
        if not name:
            return False
        return self.storage.exists(name)

    def delete_file(self, name: str) -> bool:
        """Delete one stored receipt. Returns False (and logs) on failure."""
        if not name:
            return False

        try:
            self.storage.delete(name)
        except Exception:
            logger.warning(
                "Receipt file deletion failed",
                extra={"file_name": name},
                exc_info=True,
            )
            return False
        return True

    def schedule_deletion(self, names) -> None:
        """Queue deletion of the given names for after the current commit."""
        pending = [n for n in (names or []) if n]
        if not pending:
            return

        def _delete():
            for name in pending:
                self.delete_file(name)

        transaction.on_commit(_delete)
