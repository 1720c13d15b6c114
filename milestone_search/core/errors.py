"""Search core exceptions."""


class SearchError(Exception):
    """Base exception for indexing and search failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(SearchError):
    """Raised when a project's search configuration is missing or invalid."""


class SearchConfigNotFoundError(ConfigurationError):
    """Raised when a project has no search configuration yet."""

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Search configuration not found for project: {project_id}")


class InvalidSearchConfigError(ConfigurationError):
    """Raised when search configuration options fail validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Invalid search configuration: {'; '.join(errors)}")


class ChunkingError(SearchError):
    """Raised when chunking options cannot make forward progress."""


class EmbeddingError(SearchError):
    """Raised when an embedding provider returns an unusable response."""


class StoreError(SearchError):
    """Raised when the content store rejects an operation."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation}: {detail}")
