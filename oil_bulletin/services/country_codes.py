from __future__ import annotations

from collections.abc import Mapping

"""Static country name -> ISO 3166-1 alpha-2 lookup for bulletin rows.

Covers the EU member states as the bulletin names them plus the other
European countries the blog tracks.
"""

__all__ = [
    "COUNTRY_CODES",
    "get_country_code",
]

COUNTRY_CODES: dict[str, str] = {
    "Austria": "AT",
    "Belgium": "BE",
    "Bulgaria": "BG",
    "Croatia": "HR",
    "Cyprus": "CY",
    "Czech Republic": "CZ",
    "Czechia": "CZ",
    "Denmark": "DK",
    "Estonia": "EE",
    "Finland": "FI",
    "France": "FR",
    "Germany": "DE",
    "Greece": "GR",
    "Hungary": "HU",
    "Ireland": "IE",
    "Italy": "IT",
    "Latvia": "LV",
    "Lithuania": "LT",
    "Luxembourg": "LU",
    "Malta": "MT",
    "Netherlands": "NL",
    "Poland": "PL",
    "Portugal": "PT",
    "Romania": "RO",
    "Slovakia": "SK",
    "Slovenia": "SI",
    "Spain": "ES",
    "Sweden": "SE",
    # non-EU
    "United Kingdom": "GB",
    "Norway": "NO",
    "Switzerland": "CH",
    "Iceland": "IS",
    "Ukraine": "UA",
    "Turkey": "TR",
    "Serbia": "RS",
    "Albania": "AL",
    "Bosnia and Herzegovina": "BA",
    "North Macedonia": "MK",
    "Montenegro": "ME",
    "Kosovo": "XK",
}


def get_country_code(name: str | None, extra: Mapping[str, str] | None = None) -> str | None:
    """Resolve a country name to its code.

    Exact match first, then a case-insensitive match on the trimmed name.
    ``extra`` entries (from config) take precedence over the static table.
    """
    if not name:
        return None
    table: Mapping[str, str] = {**COUNTRY_CODES, **extra} if extra else COUNTRY_CODES
    if name in table:
        return table[name]
    normalized = name.strip().lower()
    for key, code in table.items():
        if key.lower() == normalized:
            return code
    return None
