from datetime import datetime
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from blogsite.validation import (
    BLOG_RULES,
    USER_REGISTRATION_RULES,
    FieldRule,
    FieldValidationError,
    check_fields,
)


class CamelModel(BaseModel):
    """Snake_case attributes in Python, camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ValidatedRequest(CamelModel):
    """
    Base for request bodies whose fields are checked against a rule table
    before pydantic's own type coercion runs.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=False)

    rules: ClassVar[dict[str, FieldRule]] = {}

    @model_validator(mode="before")
    @classmethod
    def _check_rules(cls, data):
        errors = check_fields(cls.rules, data)
        if errors:
            raise FieldValidationError(errors)
        return data


# --- User ---

class UserRegistrationRequest(ValidatedRequest):
    rules = USER_REGISTRATION_RULES

    user_name: str
    user_email: str
    password: str


class UserResponse(CamelModel):
    id: int
    user_name: str
    user_email: str
    created_at: datetime
    message: str | None = None
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


# --- Blog ---

class BlogRequest(ValidatedRequest):
    rules = BLOG_RULES

    blog_name: str
    category: str
    article: str
    author_name: str


class BlogResponse(CamelModel):
    id: int
    blog_name: str
    category: str
    article: str
    author_name: str
    created_at: datetime
    message: str | None = None
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )
