import os
import sys
import tempfile
import unittest

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from db import database as db_database  # noqa: E402


class TempDBTestCase(unittest.IsolatedAsyncioTestCase):
    """Points the key-value store at a fresh temporary file for every test."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.temp_dir.name, "test.sqlite")
        self._orig_db_path = db_database.DB_PATH
        db_database.DB_PATH = self.db_path
        db_database._initialized = False

    def tearDown(self):
        db_database.DB_PATH = self._orig_db_path
        db_database._initialized = False
        self.temp_dir.cleanup()

    def break_store(self):
        """Make every store call fail by pointing the DB at a directory."""
        db_database.DB_PATH = self.temp_dir.name
        db_database._initialized = False
