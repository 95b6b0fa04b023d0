import os

# Point the app at a throwaway database and the in-memory cache before any module reads config
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["VALKEY_HOST"] = ""
os.environ["LOG_FILE"] = ""
