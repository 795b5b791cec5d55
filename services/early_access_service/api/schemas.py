from __future__ import annotations

from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    StringConstraints,
    field_validator,
)

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
NICHE_MAX_LENGTH = 200
TOPIC_MAX_LENGTH = 200


class SignupRequest(BaseModel):
    """Early access signup as submitted by the landing page.

    Strings are trimmed before length checks; ``email`` keeps the address
    exactly as typed (after trimming) because it is also the reply target.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: Annotated[
        StrictStr,
        StringConstraints(strip_whitespace=True, min_length=1, max_length=NAME_MAX_LENGTH),
    ]
    email: Annotated[
        StrictStr, StringConstraints(strip_whitespace=True, max_length=EMAIL_MAX_LENGTH)
    ]
    niche: Annotated[
        StrictStr,
        StringConstraints(strip_whitespace=True, min_length=1, max_length=NICHE_MAX_LENGTH),
    ]
    beta_access: StrictBool = Field(alias="betaAccess")

    @field_validator("email")
    @classmethod
    def _check_email_grammar(cls, value: str) -> str:
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"invalid email address: {e}") from e
        return value


class HookGenerationRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    topic: Annotated[
        StrictStr,
        StringConstraints(strip_whitespace=True, min_length=1, max_length=TOPIC_MAX_LENGTH),
    ]


class ApiMessageResponse(BaseModel):
    """Body shape shared by every intake endpoint response."""

    success: bool
    message: str


class HookGenerationResponse(BaseModel):
    success: bool = True
    hooks: list[str]
