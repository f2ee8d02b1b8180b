import uuid

from marketplace.errors import NotFoundError


def parse_id(value: str | uuid.UUID, resource: str) -> uuid.UUID:
    """Coerce a path identifier to a UUID, treating malformed input as a lookup miss."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError as exc:
        raise NotFoundError(resource, f"Malformed id: {value}") from exc
