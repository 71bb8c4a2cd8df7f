from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class PriceBracketRule(BaseModel):
    name: str
    label: str
    min: float | None = None
    max: float | None = None
    min_inclusive: bool = True
    max_inclusive: bool = True


class CatalogRules(BaseModel):
    price_brackets: list[PriceBracketRule]
    default_category: str = "Electronics"


class AnalyticsRules(BaseModel):
    enabled: bool = True
    collection: str = "analytics_events"
    default_top_posts: int = Field(default=10, ge=1)
    default_recent_activity: int = Field(default=10, ge=1)


class AuthRules(BaseModel):
    min_password_length: int = Field(default=6, ge=1)
    token_ttl_minutes: int = Field(default=60 * 24, ge=1)


class CookieRules(BaseModel):
    secure: bool = False
    same_site: str = "lax"
    rating_max_age_days: int = 365


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)


class Rules(BaseModel):
    project: ProjectRules
    catalog: CatalogRules
    analytics: AnalyticsRules
    auth: AuthRules
    cookies: CookieRules
    ops: OpsRules
