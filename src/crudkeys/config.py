import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load the appropriate .env file on module import
env = os.environ.get("CRUDKEYS_ENV", "development").lower()
env_file = f".env.{env}"
if os.path.exists(env_file):
    load_dotenv(env_file)
else:
    # Fall back to the default .env file
    load_dotenv()


@dataclass
class Config:
    environment: str
    database_url: str
    id_strategy: str
    id_max_attempts: int
    id_counter_start: int
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            environment=env,
            database_url=os.environ.get(
                "DATABASE_URL", "postgresql://localhost:5432/crudkeys"
            ),
            id_strategy=os.environ.get("ID_STRATEGY", "random").lower(),
            id_max_attempts=int(os.environ.get("ID_MAX_ATTEMPTS", "10")),
            id_counter_start=int(os.environ.get("ID_COUNTER_START", "1")),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )


config = Config.from_env()


def configure_logging(level: str = None) -> None:
    """Configure root logging for the app and CLI entry points."""
    logging.basicConfig(
        level=level or config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
