from soundmap.errors import ValidationError

MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 2000
MAX_LOCATION_LENGTH = 200


def clean_optional_text(value: str | None, field: str, max_length: int) -> str | None:
    """Trim optional text; blank becomes None."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if len(value) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return value


def clean_title(title: str) -> str:
    title = title.strip()
    if not title:
        raise ValidationError("Title is required")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Title must be at most {MAX_TITLE_LENGTH} characters")
    return title


def validate_coordinates(latitude: float | None, longitude: float | None) -> None:
    """Coordinates are given together or not at all, and must be on the globe.

    Raises:
        ValidationError: If only one coordinate is set or a value is out of range
    """
    if latitude is None and longitude is None:
        return
    if latitude is None or longitude is None:
        raise ValidationError("Latitude and longitude must be provided together")
    if not -90 <= latitude <= 90:
        raise ValidationError("Latitude must be between -90 and 90")
    if not -180 <= longitude <= 180:
        raise ValidationError("Longitude must be between -180 and 180")
