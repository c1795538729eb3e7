# src/querychain/core/config.py
"""Configuration models for database clients."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field
from sqlalchemy.engine import URL


class PoolConfig(BaseModel):
    """Connection pool settings handed to the SQLAlchemy engine."""

    pool_size: int = Field(default=5, ge=1)
    max_overflow: int = Field(default=10, ge=0)
    pool_timeout: int = Field(default=30, ge=0)
    pool_recycle: int = Field(default=1800)
    pool_pre_ping: bool = True

    def engine_kwargs(self) -> Dict[str, Any]:
        return self.model_dump()


class DbConfig(BaseModel):
    """
    Database connection settings.

    ``driver`` is a SQLAlchemy drivername such as ``postgresql+psycopg``,
    ``mysql+pymysql``, ``sqlite`` or ``sqlite+aiosqlite``.
    """

    driver: str = "postgresql"
    database: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    query: Dict[str, str] = Field(default_factory=dict)
    echo: bool = False

    @property
    def url(self) -> URL:
        return URL.create(
            drivername=self.driver,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
            query=self.query,
        )

    @property
    def is_sqlite(self) -> bool:
        return self.driver.split("+", 1)[0] == "sqlite"

    @property
    def is_memory(self) -> bool:
        """True for an in-memory SQLite database."""
        return self.is_sqlite and self.database in (None, "", ":memory:")

    def safe_url(self) -> str:
        """URL rendered with the password hidden, for logging."""
        return self.url.render_as_string(hide_password=True)
