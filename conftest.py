import os

# Default to throwaway SQLite and a test-only signing key
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "x" * 32)
