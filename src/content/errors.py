"""Errors raised while reading and validating content files."""


class ContentError(Exception):
    """Structured content error with category metadata."""

    def __init__(self, category: str, message: str, source: str = ""):
        super().__init__(f"{source}: {message}" if source else message)
        self.category = category
        self.message = message
        self.source = source


class ContentValidationError(ContentError):
    """Front-matter failed the article schema; `fields` names every offending field."""

    def __init__(self, message: str, source: str = "", fields: list[str] | None = None):
        super().__init__("VALIDATION", message, source)
        self.fields = fields or []
