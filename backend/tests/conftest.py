"""Shared test setup: point the app at a temporary reference datastore."""

import os
import tempfile

# Must be set before toll_system modules read DATABASE_URL
test_db = tempfile.NamedTemporaryFile(suffix='.db', delete=False)
test_db.close()
os.environ["DATABASE_URL"] = f"sqlite:///{test_db.name}"
