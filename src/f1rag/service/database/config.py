"""RavenDB connection settings resolved from the environment."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from f1rag.constants import DEFAULT_COLLECTION, DEFAULT_RAVENDB_DATABASE, DEFAULT_RAVENDB_URL

# Load environment variables
load_dotenv()


@dataclass(frozen=True)
class RavenDBConfig:
    """Where the vector index lives: server URL, database and collection.

    Use ``RavenDBConfig.from_env()`` for a snapshot of all three, or the
    static getters when only one value is needed.
    """

    url: str = DEFAULT_RAVENDB_URL
    database: str = DEFAULT_RAVENDB_DATABASE
    collection: str = DEFAULT_COLLECTION

    @classmethod
    def from_env(cls) -> "RavenDBConfig":
        return cls(
            url=cls.get_url(),
            database=cls.get_database_name(),
            collection=cls.get_collection(),
        )

    @staticmethod
    def get_url() -> str:
        """RAVENDB_URL, default http://localhost:8080."""
        return os.getenv("RAVENDB_URL", DEFAULT_RAVENDB_URL).rstrip("/")

    @staticmethod
    def get_database_name() -> str:
        """RAVENDB_DATABASE, default f1rag."""
        return os.getenv("RAVENDB_DATABASE", DEFAULT_RAVENDB_DATABASE)

    @staticmethod
    def get_collection() -> str:
        return os.getenv("RAVENDB_COLLECTION", DEFAULT_COLLECTION)
