"""
Search settings shared by the clients and the service.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from idloc_search.shared.exceptions import ConfigurationError

DEFAULT_USER_AGENT = "idloc-search-mcp/0.1.0"


@dataclass(frozen=True)
class SearchSettings:
    """
    Tunables for the catalog flows.

    The two page caps are independent: the contributor-works flow and the
    title-click flow fetch pages ``0..min(totalPages, cap)`` inclusive.
    """

    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    min_interval: float = 0.0
    contributor_page_cap: int = 49
    title_page_cap: int = 29
    good_match_threshold: int = 5
    best_match_limit: int = 20
    subject_display_limit: int = 7
    enrichment_concurrency: int = 10
    wikidata_enabled: bool = True

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
        for name in ("contributor_page_cap", "title_page_cap", "best_match_limit", "subject_display_limit"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must not be negative, got {getattr(self, name)}")
        if self.enrichment_concurrency < 1:
            raise ConfigurationError(f"enrichment_concurrency must be at least 1, got {self.enrichment_concurrency}")

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> SearchSettings:
        """Build settings from a config mapping, ignoring unset (``None``) keys."""
        if not data:
            return cls()
        known = cls.__dataclass_fields__
        return cls(**{k: v for k, v in data.items() if k in known and v is not None})
