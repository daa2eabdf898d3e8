"""Pydantic models for gateway request bodies."""

from pydantic import AliasChoices, BaseModel, Field

from kiosk_print.domain.accounts import AccountRole
from kiosk_print.domain.files import MAX_COPIES, MIN_COPIES, ColorMode


class LoginRequest(BaseModel):
    """Login payload; older clients send username/kiosk_name and password."""

    type: AccountRole = AccountRole.USER
    credential_name: str = Field(
        validation_alias=AliasChoices("credentialName", "username", "kiosk_name")
    )
    secret: str = Field(validation_alias=AliasChoices("secret", "password"))


class RegisterRequest(LoginRequest):
    """Registration payload."""

    location: str | None = None


class PrintRequest(BaseModel):
    """Print job payload."""

    kiosk_id: str = Field(validation_alias=AliasChoices("kioskId", "kiosk_id"))
    file_id: str = Field(validation_alias=AliasChoices("fileId", "file_id"))
    color: ColorMode | None = None
    copies: int | None = Field(default=None, ge=MIN_COPIES, le=MAX_COPIES)
    page_range: str | None = Field(
        default=None, validation_alias=AliasChoices("pageRange", "page_range")
    )
    user_id: str | None = Field(
        default=None, validation_alias=AliasChoices("userId", "user_id")
    )


class RechargeRequest(BaseModel):
    """Wallet recharge payload."""

    user_id: str = Field(validation_alias=AliasChoices("userId", "user_id"))
    amount: float = Field(allow_inf_nan=False)
