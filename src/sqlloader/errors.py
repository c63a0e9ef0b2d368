class SqlLoaderError(Exception):
    """Base exception for sqlloader."""


class SqlFileError(SqlLoaderError):
    def __init__(self, path) -> None:
        super().__init__(f"Failed to read SQL file: {path}")
        self.path = path


class DatabaseConnectionError(SqlLoaderError):
    def __init__(self, url: str, message: str | None = None) -> None:
        super().__init__(message or f"Failed to connect to database: {url}")
        self.url = url


class UnsupportedSchemeError(DatabaseConnectionError):
    def __init__(self, url: str) -> None:
        super().__init__(url, "Unsupported database URL scheme. Use 'sqlite:' or 'postgres:'")


class SqlExecutionError(SqlLoaderError):
    def __init__(self) -> None:
        super().__init__("Failed to execute SQL statements")
