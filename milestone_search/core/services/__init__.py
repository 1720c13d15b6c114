"""Core business services."""
from .ai_search_service import AISearchService
from .context_service import ContextService
from .conversation_search import ConversationSearchService
from .ingest_service import IngestService, process_content_for_search
from .search_config_service import (
    DEFAULT_SEARCH_CONFIG,
    SearchConfigService,
    validate_search_config,
)
from .search_service import SearchService

__all__ = [
    "AISearchService",
    "ContextService",
    "ConversationSearchService",
    "IngestService",
    "SearchConfigService",
    "SearchService",
    "DEFAULT_SEARCH_CONFIG",
    "process_content_for_search",
    "validate_search_config",
]
