"""Test package. Settings are read at import time, so the environment is prepared here first."""

import os
import tempfile

os.environ.setdefault("APP_ENV", "dev")
os.environ.setdefault("JWT_SECRET", "unit-test-signing-secret-0123456789abcdef")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="newcloud-uploads-"))
