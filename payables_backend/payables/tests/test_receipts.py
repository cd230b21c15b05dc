# payables/tests/test_receipts.py

import tempfile
from pathlib import Path

from django.core.files.base import ContentFile
from django.test import TestCase, override_settings

from payables.services.receipt_storage import ReceiptStorage


class ReceiptStorageTests(TestCase):
    """Receipt files on the local filesystem under RECEIPT_UPLOAD_ROOT."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

        override = override_settings(RECEIPT_UPLOAD_ROOT=self.tmp.name)
        override.enable()
        self.addCleanup(override.disable)

        self.receipts = ReceiptStorage()
        self.receipts.storage.save("receipt-1.jpg", ContentFile(b"jpeg"))

    def test_exists_and_delete(self):
        self.assertTrue(self.receipts.file_exists("receipt-1.jpg"))
        self.assertFalse(self.receipts.file_exists("missing.jpg"))
        self.assertFalse(self.receipts.file_exists(""))

        self.assertTrue(self.receipts.delete_file("receipt-1.jpg"))
        self.assertFalse(Path(self.tmp.name, "receipt-1.jpg").exists())

    def test_deleting_missing_file_is_harmless(self):
        self.assertTrue(self.receipts.delete_file("missing.jpg"))

    def test_path_traversal_is_refused_and_logged(self):
        with self.assertLogs("payables.receipts", level="WARNING"):
            self.assertFalse(self.receipts.delete_file("../outside.jpg"))

    def test_scheduled_deletion_waits_for_commit(self):
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            self.receipts.schedule_deletion(["receipt-1.jpg", ""])

        self.assertEqual(len(callbacks), 1)
        self.assertTrue(self.receipts.file_exists("receipt-1.jpg"))

        callbacks[0]()
        self.assertFalse(self.receipts.file_exists("receipt-1.jpg"))

    def test_nothing_to_schedule(self):
        with self.captureOnCommitCallbacks() as callbacks:
            self.receipts.schedule_deletion([])
        self.assertEqual(callbacks, [])
