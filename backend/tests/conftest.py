"""Root conftest — shared test configuration."""

import os
import tempfile

# Never touch a developer's lessonbook.db or uploads/ from tests
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("UPLOADS_DIR", tempfile.mkdtemp(prefix="lessonbook-uploads-"))
os.environ.setdefault("LOG_FORMAT", "text")
