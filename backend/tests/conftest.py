"""
Central pytest configuration for the laundry booking tests.

Environment variables are set before any ``laundry`` module is imported so
the lazy engine, the limiter and the JWT secret all pick up test values.
"""

import os

# Test database configuration (set early so import-time engines use it)
TEST_DATABASE_URL = "sqlite:///:memory:"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["TESTING"] = "true"
os.environ["RATE_LIMIT_ENABLED"] = "0"  # Disable rate limiting in tests
os.environ["LOG_TO_FILE"] = "0"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["FLASK_SECRET_KEY"] = "test-secret-key"
os.environ["TZ"] = "Asia/Seoul"
os.environ.pop("ADMIN_USER_ID", None)
os.environ.pop("ADMIN_PASSWORD", None)
os.environ.pop("SENTRY_DSN", None)

from tests.config.markers import pytest_collection_modifyitems  # noqa: E402,F401
from tests.fixtures.app_fixtures import *  # noqa: E402,F401,F403
from tests.fixtures.database_fixtures import *  # noqa: E402,F401,F403
from tests.fixtures.domain_fixtures import *  # noqa: E402,F401,F403
