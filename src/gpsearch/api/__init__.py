"""API layer: the search pipeline behind the CLI.

1. No argument parsing or printing - callers own the terminal
2. Cache failures are handled here and never reach the caller
3. Return Pydantic models only
"""

from .search_api import SearchOrchestrator, SearchOutcome

__all__ = ["SearchOrchestrator", "SearchOutcome"]
