"""Uganda mobile numbers: format validation and network resolution.

Mobile money is tied to the telecom network that issued the number, so the
checkout needs to know which network a number belongs to before accepting it
for MTN Mobile Money or Airtel Money.
"""

import re
from enum import Enum

_SEPARATORS = re.compile(r"[\s-]")
_UGANDA_MOBILE = re.compile(r"^(\+?256|0)?[37][0-9]{8}$")

MTN_PREFIXES = frozenset({"77", "78", "76", "39"})
AIRTEL_PREFIXES = frozenset({"70", "75", "74"})


class Network(Enum):
    MTN = "mtn"
    AIRTEL = "airtel"
    UNKNOWN = "unknown"


def clean_phone(number: str | None) -> str:
    """Strip spaces and dashes."""
    if not number:
        return ""
    return _SEPARATORS.sub("", number)


def is_valid_uganda_phone(number: str | None) -> bool:
    """Accepts 0712345678, 712345678, 256712345678 and +256712345678."""
    return bool(_UGANDA_MOBILE.match(clean_phone(number)))


def national_number(number: str | None) -> str:
    """Return the number without its country code or trunk prefix."""
    cleaned = clean_phone(number)
    if cleaned.startswith("+256"):
        return cleaned[4:]
    if cleaned.startswith("256"):
        return cleaned[3:]
    if cleaned.startswith("0"):
        return cleaned[1:]
    return cleaned


def get_phone_network(number: str | None) -> Network:
    prefix = national_number(number)[:2]
    if prefix in MTN_PREFIXES:
        return Network.MTN
    if prefix in AIRTEL_PREFIXES:
        return Network.AIRTEL
    return Network.UNKNOWN


def format_phone(number: str | None) -> str:
    """Local display form, e.g. ``+256 771-234567`` -> ``0771234567``."""
    cleaned = clean_phone(number)
    if cleaned.startswith("+256"):
        return "0" + cleaned[4:]
    if cleaned.startswith("256"):
        return "0" + cleaned[3:]
    return cleaned
