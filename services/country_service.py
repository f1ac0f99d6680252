"""Service layer for country CRUD operations, statistics and form helpers."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional

from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError
from pymongo.errors import PyMongoError

from domain.models.country import Country
from domain.models.statistics import IndicatorStatistics, StatisticsReport
from middleware.errors import DuplicateKeyError, PersistenceError, UpdateFailedError
from repositories.country_repository import CountryRepository
from utils.country_validator import ValidationResult, validate, validate_input

logger = logging.getLogger(__name__)

_repo = CountryRepository()


def normalize_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


def _duplicate(code: Optional[str]) -> DuplicateKeyError:
    return DuplicateKeyError(
        f"Sorry, country with code '{code}' already exists.",
        details={"code": code},
    )


def list_all() -> List[Country]:
    """Return all countries sorted by name, ignoring case."""
    return sorted(_repo.list_all(), key=lambda c: (c.name or "").casefold())


def count() -> int:
    return _repo.count()


def get_by_code(code: Optional[str]) -> Optional[Country]:
    """Fetch a country by code; ``None`` when it does not exist."""
    normalized = normalize_code(code)
    if not normalized:
        return None
    return _repo.get(normalized)


def save(country: Country) -> Country:
    """Insert a new country in a single transaction.

    Raises ``DuplicateKeyError`` when the code is already taken, whether the
    pre-check or the store's unique index catches it, and
    ``PersistenceError`` for any other store failure.
    """
    try:
        if _repo.get(country.code) is not None:
            raise _duplicate(country.code)
        with _repo.begin_transaction() as tx:
            _repo.insert(country, tx)
    except MongoDuplicateKeyError as exc:
        logger.warning("Unique index rejected country %s", country.code)
        raise _duplicate(country.code) from exc
    except PyMongoError as exc:
        logger.error("Saving country %s failed: %s", country.code, exc)
        raise PersistenceError(
            f"Sorry, there was an error adding country: {exc}", cause=exc
        ) from exc

    logger.info("Saved country %s", country.code)
    return country


def update(country: Country) -> Country:
    """Replace the stored record for ``country.code``. Callers validate first."""
    try:
        with _repo.begin_transaction() as tx:
            _repo.replace(country, tx)
    except Exception as exc:
        logger.error("Updating country %s failed: %s", country.code, exc)
        raise UpdateFailedError(
            f"Error updating country: {exc}", details={"code": country.code}, cause=exc
        ) from exc

    logger.info("Updated country %s", country.code)
    return country


def delete(code: Optional[str]) -> bool:
    """Delete a country by code. Unknown codes commit an empty transaction.

    Returns whether a record was removed; either way the call succeeded.
    """
    normalized = normalize_code(code)
    try:
        with _repo.begin_transaction() as tx:
            removed = _repo.remove_by_key(normalized, tx) if normalized else 0
    except Exception as exc:
        logger.error("Deleting country %s failed: %s", normalized, exc)
        raise PersistenceError(
            f"Error deleting country: {exc}", details={"code": normalized}, cause=exc
        ) from exc

    if removed:
        logger.info("Deleted country %s", normalized)
    return bool(removed)


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

def _indicator_statistics(
    countries: List[Country],
    label: str,
    getter: Callable[[Country], Optional[float]],
) -> IndicatorStatistics:
    present = [c for c in countries if getter(c) is not None]
    stats = IndicatorStatistics(label=label)
    if not present:
        # No reported values: min/max stay absent while the average falls back to 0.
        return stats

    # min()/max() keep the first of equal values, i.e. the first by name.
    lowest = min(present, key=getter)
    highest = max(present, key=getter)
    values = [getter(c) for c in present]

    stats.minimum = getter(lowest)
    stats.minimum_country = lowest
    stats.maximum = getter(highest)
    stats.maximum_country = highest
    stats.average = sum(values) / len(values)
    stats.count = len(values)
    return stats


def statistics() -> StatisticsReport:
    """Compute min/max/average per indicator over the countries reporting it."""
    countries = list_all()
    return StatisticsReport(
        internet_users=_indicator_statistics(
            countries, "Internet Users (per 100)", lambda c: c.internet_users
        ),
        adult_literacy_rate=_indicator_statistics(
            countries, "Adult Literacy Rate", lambda c: c.adult_literacy_rate
        ),
    )


# ---------------------------------------------------------------------------
# Form helpers
# ---------------------------------------------------------------------------

def _get(form: Mapping[str, Any], field: str) -> Optional[str]:
    raw = form.get(field)
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def _parse_indicator(
    form: Mapping[str, Any], field: str, label: str, result: ValidationResult
) -> Optional[float]:
    raw = _get(form, field)
    checked = validate_input(raw, label, False)
    result.merge(checked)
    if raw is None or not checked.is_valid:
        return None
    return float(raw)


def create_from_form(form: Mapping[str, Any]) -> Country:
    """Validate raw form values, build a Country and save it.

    Raises ``ValidationError`` carrying every failed rule, or the errors of
    ``save``.
    """
    result = ValidationResult()
    internet_users = _parse_indicator(form, "internet_users", "Internet users", result)
    literacy_rate = _parse_indicator(form, "adult_literacy_rate", "Literacy rate", result)
    result.raise_if_invalid()

    country = Country.build(
        code=_get(form, "code"),
        name=_get(form, "name"),
        internet_users=internet_users,
        adult_literacy_rate=literacy_rate,
    )
    validate(country).raise_if_invalid()
    return save(country)


def update_from_form(code: str, form: Mapping[str, Any]) -> Optional[Country]:
    """Apply non-blank form values to an existing country and store it.

    Returns ``None`` when ``code`` is unknown. Blank values keep the current
    figures.
    """
    country = get_by_code(code)
    if country is None:
        return None

    result = ValidationResult()
    internet_users = _parse_indicator(form, "internet_users", "Internet users", result)
    literacy_rate = _parse_indicator(form, "adult_literacy_rate", "Literacy rate", result)
    result.raise_if_invalid()

    country.apply_edits(
        name=_get(form, "name"),
        internet_users=internet_users,
        adult_literacy_rate=literacy_rate,
    )
    validate(country).raise_if_invalid()
    return update(country)
