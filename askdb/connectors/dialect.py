"""
SQL dialect models.

A dialect is a closed set of known backends plus a fallback variant that
carries the raw driver name.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class DialectKind(StrEnum):
    """Known SQL backends."""

    MYSQL = "mysql"
    MARIADB = "mariadb"
    POSTGRESQL = "postgresql"
    SQLITE = "sqlite"
    SQL_SERVER = "sqlsrv"
    OTHER = "other"


_LABELS = {
    DialectKind.MYSQL: "MySQL",
    DialectKind.MARIADB: "MariaDB",
    DialectKind.POSTGRESQL: "PostgreSQL",
    DialectKind.SQLITE: "SQLite",
    DialectKind.SQL_SERVER: "SQL Server",
}

_DRIVER_ALIASES = {
    "mysql": DialectKind.MYSQL,
    "mariadb": DialectKind.MARIADB,
    "postgres": DialectKind.POSTGRESQL,
    "postgresql": DialectKind.POSTGRESQL,
    "pgsql": DialectKind.POSTGRESQL,
    "sqlite": DialectKind.SQLITE,
    "sqlsrv": DialectKind.SQL_SERVER,
    "mssql": DialectKind.SQL_SERVER,
}


class Dialect(BaseModel):
    """SQL dialect spoken by the active connection."""

    kind: DialectKind = Field(..., description="Backend variant")
    driver: str = Field(..., description="Raw driver name reported by the connector")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_driver(cls, driver: str) -> "Dialect":
        """Resolve a dialect from a driver name, falling back to OTHER."""
        kind = _DRIVER_ALIASES.get(driver.strip().lower(), DialectKind.OTHER)
        return cls(kind=kind, driver=driver)

    @property
    def label(self) -> str:
        """Human-readable name embedded in prompts."""
        return _LABELS.get(self.kind, self.driver)
