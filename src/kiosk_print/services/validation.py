"""Input parsing shared by services."""

from uuid import UUID

from kiosk_print.services.errors import ValidationError


def parse_uuid(raw: str | UUID | None, field_name: str) -> UUID:
    """Parse an identifier sent by a client."""
    if isinstance(raw, UUID):
        return raw
    if not raw or not raw.strip():
        raise ValidationError(f"Missing {field_name}")
    try:
        return UUID(raw.strip())
    except ValueError:
        raise ValidationError(f"Invalid {field_name}") from None
