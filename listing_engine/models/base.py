"""Base models shared across entities."""

from dataclasses import dataclass

from listing_engine.exceptions import InvalidIdentifierError


@dataclass
class Address:
    """Street address of a listing.

    ``zip_code`` is kept as text so leading zeros survive.
    """

    street: str
    city: str
    state: str
    zip_code: str


@dataclass
class Coordinates:
    """Map position of a listing (WGS84 degrees)."""

    lat: float
    lng: float


def coerce_id(value: int | str) -> int:
    """Return ``value`` as the canonical integer id.

    Integers pass through; all-digit strings (the textual ids found in
    legacy saved records) are converted. Anything else, including ``bool``,
    floats and ``None``, is rejected.

    Parameters
    ----------
    value : int | str
        Raw identifier.

    Returns
    -------
    int
        Integer identifier.
    """
    if isinstance(value, bool):
        raise InvalidIdentifierError(f"Invalid id: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.isascii() and text.isdigit():
            return int(text)
    raise InvalidIdentifierError(f"Invalid id: {value!r}")
