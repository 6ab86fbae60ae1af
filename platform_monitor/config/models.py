"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_validator, model_validator


class SourceKind(str, Enum):
    """Extraction strategies, one per source transport shape."""

    EMBEDDED_JSON = "embedded-json"
    SEARCH_API = "search-api"
    CARD_HTML = "card-html"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class SourceConfig(BaseModel):
    """Configuration for a single discovery source."""

    name: str = Field(..., min_length=1, description="Source tag attached to every record")
    kind: SourceKind = Field(..., description="Extraction strategy for this source")
    url: str = Field(..., min_length=1, description="Absolute URL fetched with GET")
    enabled: bool = Field(True, description="Whether to fetch this source")
    max_records: int = Field(
        20, ge=0, description="Maximum records kept from this source (0 = unlimited)"
    )
    title_marker: str = Field(
        "Launch HN", min_length=1, description="Title marker for search-api sources"
    )
    card_marker: str = Field(
        "card", min_length=1, description="Class-name marker for card-html sources"
    )

    @field_validator("name", "url", "title_marker", "card_marker")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from string fields."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError(f"url must be an absolute http(s) URL, got: {v}")
        return v

    model_config = {"use_enum_values": True}


def _default_sources() -> List[SourceConfig]:
    return [
        SourceConfig(
            name="ProductHunt",
            kind=SourceKind.EMBEDDED_JSON,
            url="https://www.producthunt.com/",
            max_records=20,
        ),
        SourceConfig(
            name="HackerNews",
            kind=SourceKind.SEARCH_API,
            url="https://hn.algolia.com/api/v1/search?query=Launch%20HN&tags=story",
            max_records=10,
        ),
        SourceConfig(
            name="BankBonuses",
            kind=SourceKind.CARD_HTML,
            url="https://www.doctorofcredit.com/best-bank-account-bonuses/",
            max_records=0,
        ),
    ]


def _normalize_terms(terms: List[str]) -> List[str]:
    normalized = []
    for term in terms:
        stripped = term.strip().lower()
        if stripped and stripped not in normalized:
            normalized.append(stripped)
    return normalized


class CriteriaConfig(BaseModel):
    """Interest criteria records are matched against."""

    categories: List[str] = Field(
        default_factory=lambda: [
            "fintech", "finance", "crypto", "web3", "defi",
            "productivity", "saas", "marketplace", "tools",
        ],
        description="Category vocabulary (substring match on name + tagline)",
    )
    bonus_keywords: List[str] = Field(
        default_factory=lambda: [
            "free", "bonus", "reward", "early", "beta", "credits",
            "lifetime", "discount", "launch", "promo", "giveaway",
        ],
        description="Bonus vocabulary (substring match on name + tagline)",
    )
    min_bonus_amount: float = Field(
        50.0, ge=0, description="Minimum amount for card offers to be kept"
    )

    @field_validator("categories", "bonus_keywords")
    @classmethod
    def normalize_terms(cls, v: List[str]) -> List[str]:
        """Strip, lowercase and de-duplicate terms, dropping empty ones."""
        return _normalize_terms(v)


class ScoringWeights(BaseModel):
    """Weights, divisors and caps of the scoring formula."""

    amount_divisor: float = Field(100.0, gt=0)
    amount_cap: float = Field(10.0, ge=0)
    bonus_weight: float = Field(10.0, ge=0)
    category_weight: float = Field(5.0, ge=0)
    popularity_divisor: float = Field(10.0, gt=0)
    popularity_cap: float = Field(5.0, ge=0)


class NotificationConfig(BaseModel):
    """Digest and Telegram delivery settings."""

    digest_size: int = Field(5, ge=1, le=50, description="Records included in one digest")
    telegram_api_base: str = Field(
        "https://api.telegram.org", min_length=1, description="Telegram Bot API base URL"
    )
    parse_mode: str = Field("Markdown", description="Telegram parse_mode")
    disable_web_page_preview: bool = Field(True, description="Suppress link previews")

    @field_validator("telegram_api_base")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """Advanced runtime settings."""

    http_request_timeout: float = Field(
        10.0, ge=1, le=300, description="Per-request timeout in seconds (fetch and delivery)"
    )
    max_redirects: int = Field(5, ge=0, le=20, description="Redirect hops followed per fetch")
    user_agent: str = Field(
        "Mozilla/5.0 (compatible; PlatformMonitor/1.0)",
        min_length=1,
        description="User-Agent string for HTTP requests",
    )
    max_concurrent_sources: int = Field(
        4, ge=1, le=32, description="Sources fetched in parallel"
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        """Strip whitespace from user agent."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class AppConfig(BaseModel):
    """Root configuration object for the Platform Monitor."""

    sources: List[SourceConfig] = Field(
        default_factory=_default_sources, description="Sources to discover records from"
    )
    criteria: CriteriaConfig = Field(default_factory=CriteriaConfig)
    scoring: ScoringWeights = Field(default_factory=ScoringWeights)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)

    @model_validator(mode="after")
    def validate_sources(self):
        """Require at least one enabled source and unique source names."""
        if not self.sources:
            raise ValueError("At least one source must be configured")

        if not any(source.enabled for source in self.sources):
            raise ValueError(
                "At least one source must be enabled. All sources have enabled=false."
            )

        seen_names = set()
        for source in self.sources:
            key = source.name.lower()
            if key in seen_names:
                raise ValueError(f"Duplicate source name: {source.name}")
            seen_names.add(key)

        return self

    def get_enabled_sources(self) -> List[SourceConfig]:
        """Get enabled sources in configured order."""
        return [source for source in self.sources if source.enabled]
