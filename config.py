import os
import log
from dotenv import load_dotenv

# Load .env file into environment
load_dotenv()


class Config:
    def __init__(self):
        self.valkey_host = os.getenv("VALKEY_HOST", "localhost")
        self.valkey_port = int(os.getenv("VALKEY_PORT", 6379))
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./experimentation.db")
        self.log_level = os.getenv("LOG_LEVEL", default="INFO")
        self.log_file = os.getenv("LOG_FILE", default="abtest_analytics.log")
        self.tenant_cache_ttl = int(os.getenv("TENANT_CACHE_TTL", 60))
        self.events_rate_limit = int(os.getenv("EVENTS_RATE_LIMIT", 10))
        self.events_rate_window = int(os.getenv("EVENTS_RATE_WINDOW", 60))
        self.cors_origins = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
            if origin.strip()
        ]

        # Call setup_logging when the application starts
        log.setup_logging(self.log_level, self.log_file)

    def __repr__(self):
        return (
            f"<Settings host={self.valkey_host} port={self.valkey_port} loglevel={self.log_level}, "
            f"rate_limit:{self.events_rate_limit}/{self.events_rate_window}s, cors:{self.cors_origins}>"
        )

config = Config()
