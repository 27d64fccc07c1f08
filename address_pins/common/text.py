"""Free-text normalisation for geocoding queries."""

from __future__ import annotations

import unicodedata


def normalize_text(text: str) -> str:
    # NFD splits "ã" into "a" + U+0303; dropping Mn leaves the base letter.
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")


def compose_address_line(street: str, city: str, state: str, number: str | None = None) -> str:
    street_part = street.strip()
    if number and number.strip():
        street_part = f"{street_part} {number.strip()}"
    return f"{street_part}, {city.strip()}, {state.strip()}"
