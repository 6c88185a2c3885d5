"""
utils/sanitize.py

Strip markup from vendor-entered text before it is stored and later shown
inside map info windows and the public vendor page.
"""

import html

import bleach
from pydantic import BaseModel, field_validator

# No markup is allowed in vendor names, addresses, notes or item names.
ALLOWED_TAGS = []
ALLOWED_ATTRIBUTES = {}


def sanitize_text(user_input: str, max_length: int = 500) -> str:
    """
    Clean user input to prevent XSS and enforce length limits.
    """
    if not user_input:
        return ""

    trimmed = user_input[:max_length]

    cleaned = bleach.clean(
        trimmed,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        strip=True
    )

    # bleach escapes &, < and > in what is left; stored text is plain, not HTML
    return html.unescape(cleaned).strip()


class SanitizedModel(BaseModel):
    """
    Base model that sanitizes every incoming string field.
    Extend this in form schemas.
    """

    @field_validator("*", mode="before")
    @classmethod
    def sanitize_all_strings(cls, v):
        if isinstance(v, str):
            return sanitize_text(v, max_length=1000)
        return v
