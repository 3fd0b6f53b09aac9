"""
tests/conftest.py

Provides the required configuration before any project module imports config.
"""

import os

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("USER_TO_IMPERSONATE", "notifications@example.com")
