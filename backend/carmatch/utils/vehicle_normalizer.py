"""
Vehicle string normalization for model, brand and feature comparison.

- Strip accents and case so "Sedã" and "seda" compare equal.
- Model names also drop hyphens and spaces: "HR-V", "hr v" and "hrv" share one key.
- Transmission and fuel strings collapse to a handful of canonical values.
"""

import re
import unicodedata

_MODEL_SEPARATORS = re.compile(r"[-\s]+")


def strip_accents(text: str) -> str:
    """Remove combining diacritics ("câmbio" -> "cambio")."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(raw: str | None) -> str:
    """Lowercase, strip accents and trim."""
    if not raw:
        return ""
    return strip_accents(raw.lower()).strip()


def normalize_model_name(raw: str | None) -> str:
    """Normalize a model name into its comparison key ("HB 20 S" -> "hb20s")."""
    return _MODEL_SEPARATORS.sub("", normalize_text(raw))


def normalize_brand(raw: str | None) -> str:
    return normalize_text(raw)


def models_match(a: str | None, b: str | None) -> bool:
    """
    True when either normalized model name contains the other.

    Handles abbreviated and expanded spellings ("Onix" vs "Onix Plus").
    Empty names never match anything.
    """
    key_a = normalize_model_name(a)
    key_b = normalize_model_name(b)
    if not key_a or not key_b:
        return False
    return key_a in key_b or key_b in key_a


def normalize_transmission(raw: str | None) -> str:
    normalized = normalize_text(raw)
    if "auto" in normalized or "cvt" in normalized:
        return "automatico"
    if "manual" in normalized:
        return "manual"
    return normalized


def normalize_fuel(raw: str | None) -> str:
    normalized = normalize_text(raw)
    if "flex" in normalized or "alcool" in normalized or "etanol" in normalized:
        return "flex"
    if "gasolina" in normalized or "gasoline" in normalized:
        return "gasolina"
    if "diesel" in normalized:
        return "diesel"
    if "eletrico" in normalized or "electric" in normalized:
        return "eletrico"
    if "hibrido" in normalized or "hybrid" in normalized:
        return "hibrido"
    return normalized


def title_case_model(token: str) -> str:
    """Title-case each hyphen/space/slash delimited word, keeping delimiters ("hr-v" -> "Hr-V")."""
    parts = re.split(r"([-\s/])", token.strip())
    return "".join(part.capitalize() for part in parts)
