"""
Query parsing for exact vehicle searches.

Extracts a model name and a year (or year range) from free text such as
"Onix 2019", "2019 onix", "onix 19", "Onix 2018 a 2020", "Onix 2019/2020"
or "onix 19/20". Also detects trade-in phrasing ("tenho um gol, quero
trocar") where the mentioned vehicle is one the user already owns.
"""

import logging
import re
from datetime import date
from typing import Iterable

from carmatch.schemas.matching import ExtractedFilters, YearRange
from carmatch.schemas.vehicle import VehicleRecord
from carmatch.utils.vehicle_normalizer import normalize_text, title_case_model

logger = logging.getLogger(__name__)

MIN_VALID_YEAR = 1950

# Used when the inventory snapshot yields no model names
DEFAULT_MODELS: tuple[str, ...] = (
    "onix", "prisma", "gol", "polo", "hb20", "corolla", "civic", "mobi", "argo", "renegade",
    "compass", "kicks", "creta", "tracker", "hr-v", "kwid", "ka", "fiesta", "ecosport",
    "strada", "toro", "saveiro", "hilux", "s10", "ranger", "cg", "titan", "fan", "biz",
    "bros", "pcx", "fazer", "factor", "crosser", "lander", "nmax",
)

# Common speech-to-text / spelling mistakes -> display name
MODEL_CORRECTIONS: dict[str, str] = {
    # Civic
    "circ": "Civic",
    "civico": "Civic",
    "sivic": "Civic",
    "civick": "Civic",
    # Corolla
    "corola": "Corolla",
    "carola": "Corolla",
    "corolla": "Corolla",
    # SUVs written without the hyphen
    "crv": "Cr-V",
    "hrv": "Hr-V",
    "wrv": "Wr-V",
    "tcross": "T-Cross",
    "scross": "S-Cross",
    "santafe": "Santa Fe",
    # Others
    "onyx": "Onix",
    "polo": "Polo",
    "goal": "Gol",
}

# "2018 a 2020", "2018 ate 2020", "2018-2020"
_RANGE_CONNECTOR = re.compile(r"\b(\d{4})\s*(?:a|ate|-)\s*(\d{4})\b")
# "2019/2020" (model-year notation)
_RANGE_SLASH = re.compile(r"\b(\d{4})/(\d{4})\b")
# "19/20"
_RANGE_SLASH_SHORT = re.compile(r"\b(\d{2})/(\d{2})\b")
_FULL_YEAR = re.compile(r"\b(19\d{2}|20\d{2})\b")
# Two digits bounded by whitespace or string edges, so "hb20" or "208" never match
_SHORT_YEAR = re.compile(r"(?:^|\s)(\d{2})(?=\s|$)")

# Phrases where the user describes a vehicle they OWN (trade-in), not one to buy.
# Matched against the lowercased, accent-stripped query.
_TRADE_IN_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\btenho\s+uma?\s+\w+.*quero\s+trocar"),
    re.compile(r"\btenho\s+uma?\s+\w+\s*,"),
    re.compile(r"\b(possuo|tenho)\s+(um|uma|o|a|meu|minha)\b"),
    re.compile(r"\bquero\s+trocar\s+(meu|minha|o\s+meu|a\s+minha|de\s+carro)\b"),
    re.compile(r"(?:^|,\s*)quero\s+trocar\b"),
    re.compile(r"\b(meu\s+carro|minha\s+carro|meu\s+veiculo)\s+e(\s+um|\s+uma|\s+o|\s+a)?\b"),
    re.compile(r"\bdar\s+(na\s+)?troca\s+(o\s+meu|a\s+minha|meu|minha)\b"),
    re.compile(r"\btrocar\s+(meu|minha)\s+\w+.*\s+(em|por)\s+(um|uma)\b"),
    re.compile(r"\b(possuo|tenho)\s+(um|uma)\s+\w+.*\s+e\s+(quero|gostaria|preciso)\b"),
    re.compile(r"\b\w+\s+\d{4}\s*,\s*quero\s+trocar"),
)


def expand_abbreviated_year(value: int, current_year: int | None = None) -> int | None:
    """
    Expand a two-digit year: 00-30 -> 2000-2030, 31-99 -> 1931-1999.

    Returns None when the value is not two digits or the expanded year is not
    a plausible vehicle year.
    """
    if value < 0 or value > 99:
        return None
    full_year = 2000 + value if value <= 30 else 1900 + value
    return full_year if is_valid_year(full_year, current_year) else None


def is_valid_year(year: int, current_year: int | None = None) -> bool:
    """Plausible vehicle years: 1950 through next year's models."""
    current = current_year if current_year is not None else date.today().year
    return MIN_VALID_YEAR <= year <= current + 1


def is_trade_in_context(query: str) -> bool:
    """True when the query describes a vehicle the user owns and wants to trade in."""
    normalized = normalize_text(query)
    for pattern in _TRADE_IN_PATTERNS:
        if pattern.search(normalized):
            logger.debug("Trade-in context detected in %r (pattern %s)", query, pattern.pattern)
            return True
    return False


def _model_token_pattern(model: str) -> str:
    """Regex for one model token; hyphen, slash and space separators are optional."""
    parts = [p for p in re.split(r"[-/\s]+", normalize_text(model)) if p]
    return r"[-/\s]?".join(re.escape(p) for p in parts)


class QueryParser:
    """
    Extracts ExtractedFilters from free text against a model dictionary.

    The dictionary is tried longest-token-first so "hb20s" is never shadowed
    by "hb20".
    """

    def __init__(self, models: Iterable[str] | None = None, current_year: int | None = None):
        self.current_year = current_year
        self._known_models: list[str] = []
        self._model_pattern: re.Pattern | None = None
        self.add_models(models if models is not None else DEFAULT_MODELS)

    @classmethod
    def from_inventory(cls, inventory: Iterable[VehicleRecord], current_year: int | None = None) -> "QueryParser":
        """Build the dictionary from the distinct models of the available snapshot."""
        models = sorted({v.model for v in inventory if v.available and v.model and v.model.strip()})
        if not models:
            logger.warning("No models found in inventory snapshot, using default model list")
            return cls(DEFAULT_MODELS, current_year=current_year)
        return cls(models, current_year=current_year)

    @property
    def known_models(self) -> list[str]:
        return list(self._known_models)

    def add_models(self, models: Iterable[str]) -> None:
        for model in models:
            token = normalize_text(model)
            if token and token not in self._known_models:
                self._known_models.append(token)
        self._build_model_pattern()

    def _build_model_pattern(self) -> None:
        tokens = set(self._known_models) | set(MODEL_CORRECTIONS)
        # Longest first; alphabetical tie-break keeps the pattern deterministic
        ordered = sorted(tokens, key=lambda t: (-len(t), t))
        alternatives = [p for p in (_model_token_pattern(t) for t in ordered) if p]
        self._model_pattern = re.compile(r"\b(" + "|".join(alternatives) + r")\b") if alternatives else None

    def parse(self, query: str) -> ExtractedFilters:
        """Parse a query; the raw query is preserved untouched."""
        normalized = normalize_text(query)

        model = self.extract_model(normalized)
        year_range = self.extract_year_range(normalized)
        year = None if year_range else self.extract_year(normalized)

        filters = ExtractedFilters(model=model, year=year, year_range=year_range, raw_query=query)
        logger.debug("Parsed query %r -> %s", query, filters.model_dump())
        return filters

    def extract_model(self, normalized_query: str) -> str | None:
        if not self._model_pattern:
            return None
        match = self._model_pattern.search(normalized_query)
        if not match:
            return None

        token = match.group(1)
        correction = MODEL_CORRECTIONS.get(re.sub(r"[-/\s]", "", token))
        if correction:
            return correction
        return title_case_model(token)

    def extract_year_range(self, normalized_query: str) -> YearRange | None:
        for pattern in (_RANGE_CONNECTOR, _RANGE_SLASH):
            match = pattern.search(normalized_query)
            if match:
                first, second = int(match.group(1)), int(match.group(2))
                if is_valid_year(first, self.current_year) and is_valid_year(second, self.current_year):
                    return YearRange(min=min(first, second), max=max(first, second))

        match = _RANGE_SLASH_SHORT.search(normalized_query)
        if match:
            first = expand_abbreviated_year(int(match.group(1)), self.current_year)
            second = expand_abbreviated_year(int(match.group(2)), self.current_year)
            if first and second:
                return YearRange(min=min(first, second), max=max(first, second))

        return None

    def extract_year(self, normalized_query: str) -> int | None:
        match = _FULL_YEAR.search(normalized_query)
        if match:
            year = int(match.group(1))
            if is_valid_year(year, self.current_year):
                return year

        match = _SHORT_YEAR.search(normalized_query)
        if match:
            return expand_abbreviated_year(int(match.group(1)), self.current_year)

        return None


def parse_query(query: str, models: Iterable[str] | None = None) -> ExtractedFilters:
    """One-shot parse with a throwaway parser."""
    return QueryParser(models).parse(query)
