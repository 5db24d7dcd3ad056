"""
Address normalization before geocoding.

Hosts often type just a street ("Carrer del Bisbe 5") or a street plus postal code.
Forward geocoders do much better with the city attached, so we append it when the
address does not already say which city it is in.
"""

from __future__ import annotations

import re

_CITY_POSTAL_CODE = re.compile(r"\b080\d{2}\b")
_ANY_POSTAL_CODE = re.compile(r"\d{5}")
_CITY_ALIASES = ("bcn", "barna")
_STREET_WORDS = ("carrer", "avinguda", "plaça")


def looks_like_city_address(address: str, *, city_name: str = "Barcelona") -> bool:
    lowered = address.lower()
    if city_name.lower() in lowered:
        return True
    if _CITY_POSTAL_CODE.search(lowered):
        return True
    return any(alias in lowered for alias in _CITY_ALIASES)


def enrich_address(address: str, *, city_name: str = "Barcelona", default_postal_code: str = "08001") -> str:
    """Append city context to `address` when it is missing; otherwise return it unchanged."""
    if looks_like_city_address(address, city_name=city_name):
        return address
    if _ANY_POSTAL_CODE.search(address):
        return f"{address}, {city_name}"
    lowered = address.lower()
    if any(word in lowered for word in _STREET_WORDS):
        return f"{address}, {city_name}, {default_postal_code}"
    return address
