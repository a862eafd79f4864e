"""Article front-matter schema (validated with pydantic)."""

from datetime import date, datetime, time, timezone

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.content.errors import ContentValidationError

REQUIRED_FIELDS = ("title", "date", "category", "tags", "icon", "description")


class ArticleFrontMatter(BaseModel):
    """Typed front-matter of an article. Authoring keys are camelCase aliases."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    title: str = Field(min_length=1)
    subtitle: str | None = None
    date: datetime
    category: str = Field(min_length=1)
    tags: list[str]
    icon: str = Field(min_length=1)
    icon_color: str | None = Field(default=None, alias="iconColor")
    description: str = Field(min_length=1)
    medium_url: str | None = Field(default=None, alias="mediumUrl")
    github_url: str | None = Field(default=None, alias="githubUrl")
    group: str | None = None
    draft: bool = False
    featured: bool = False

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value: object) -> object:
        # YAML yields `date` objects for bare `2024-05-01`; pydantic only takes datetimes here
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime.combine(value, time.min)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            try:
                return datetime.fromtimestamp(value, tz=timezone.utc)
            except (OverflowError, OSError, ValueError) as exc:
                raise ValueError(f"date out of range: {value!r}") from exc
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.strip())
            except ValueError:
                return value
        return value

    @field_validator("date")
    @classmethod
    def _ensure_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("title", "category", "icon", "description")
    @classmethod
    def _strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


def _field_name(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "<root>"


def validate_front_matter(raw: dict, source: str = "") -> ArticleFrontMatter:
    """
    Validate an untyped front-matter record against the article schema.

    Raises:
        ContentValidationError: naming every missing or malformed field.
    """
    try:
        return ArticleFrontMatter.model_validate(raw)
    except ValidationError as exc:
        problems: list[str] = []
        fields: list[str] = []
        for err in exc.errors():
            name = _field_name(err.get("loc", ()))
            if name not in fields:
                fields.append(name)
            if err.get("type") == "missing":
                problems.append(f"missing required field '{name}'")
            else:
                problems.append(f"invalid field '{name}': {err.get('msg', 'invalid value')}")
        raise ContentValidationError("; ".join(problems), source=source, fields=fields) from exc
