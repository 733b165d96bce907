"""Bundled default names: loading them into a store and resetting the store."""

from importlib import resources
from pathlib import Path

import structlog
import yaml

from baby_affinity.names.errors import NameValidationError
from baby_affinity.names.models import Category, NameRecord
from baby_affinity.store.errors import NameStoreError
from baby_affinity.store.models import BulkResult, ItemOutcome, OutcomeStatus
from baby_affinity.store.store import NameStore


logger = structlog.get_logger()

DEFAULT_NAMES_RESOURCE = "default_names.yaml"


def read_default_name_texts(path: Path | None = None) -> dict[Category, list[str]]:
    """Read the raw default name texts per category.

    Args:
        path: Optional YAML file to read instead of the bundled dataset.

    Returns:
        Name texts keyed by category, in file order.
    """
    if path is None:
        content = (
            resources.files("baby_affinity.store")
            .joinpath(DEFAULT_NAMES_RESOURCE)
            .read_text(encoding="utf-8")
        )
    else:
        content = path.read_text(encoding="utf-8")

    parsed: dict[str, list[str] | None] = yaml.safe_load(content) or {}
    return {category: list(parsed.get(category.label) or []) for category in Category}


def _default_outcomes(
    category: Category | None, path: Path | None
) -> list[tuple[str, Category, NameRecord | None, NameValidationError | None]]:
    texts = read_default_name_texts(path)
    categories = list(Category) if category is None else [category]

    entries: list[tuple[str, Category, NameRecord | None, NameValidationError | None]] = []
    for cat in categories:
        for text in texts[cat]:
            try:
                entries.append((text, cat, NameRecord.create(text, cat), None))
            except NameValidationError as e:
                logger.warning(
                    "invalid_default_name_skipped",
                    component="store",
                    text=text,
                    category=cat.label,
                    reason=e.reason,
                )
                entries.append((text, cat, None, e))
    return entries


def get_default_names(
    category: Category | None = None, path: Path | None = None
) -> list[NameRecord]:
    """Build fresh, never-evaluated records for the default names.

    Invalid entries are logged and skipped.

    Args:
        category: Optional category filter; both categories when None.
        path: Optional YAML file to read instead of the bundled dataset.

    Returns:
        Default name records, female names first.
    """
    return [record for _, _, record, _ in _default_outcomes(category, path) if record]


def load_default_names(store: NameStore, path: Path | None = None) -> BulkResult:
    """Insert the default names, skipping names that already exist.

    Args:
        store: Connected name store.
        path: Optional YAML file to read instead of the bundled dataset.

    Returns:
        Per-name outcomes; existing names are reported as DUPLICATE.
    """
    result = BulkResult(operation="load_default_names")
    valid: list[NameRecord] = []

    for text, category, record, error in _default_outcomes(None, path):
        if record is None:
            result.add(ItemOutcome(text, category, OutcomeStatus.INVALID, error=error))
        else:
            valid.append(record)

    result.extend(store.insert_many(valid))

    logger.info("default_names_loaded", component="store", **result.summary())
    return result


def reset_name_data(
    store: NameStore,
    restore_defaults: bool = True,
    path: Path | None = None,
) -> BulkResult:
    """Reset the store.

    With ``restore_defaults`` every stored name gets its default rating,
    zero evaluations, and no favorite flag, and any default names that
    were deleted are inserted again. Without it the store is cleared.

    Args:
        store: Connected name store.
        restore_defaults: Whether to keep names and restore defaults.
        path: Optional YAML file to read instead of the bundled dataset.

    Returns:
        Per-name outcomes.
    """
    existing = store.fetch_all()

    if not restore_defaults:
        result = store.delete_many(existing)
        logger.info("name_data_cleared", component="store", **result.summary())
        return result

    result = BulkResult(operation="reset_name_data")

    for record in existing:
        try:
            updated = store.update(record.reset())
        except NameStoreError as e:
            result.add(ItemOutcome(record.text, record.category, OutcomeStatus.FAILED, error=e))
        else:
            result.add(ItemOutcome(record.text, record.category, OutcomeStatus.UPDATED, record=updated))

    present = {(record.text, record.category) for record in existing}
    missing = [
        record
        for record in get_default_names(path=path)
        if (record.text, record.category) not in present
    ]
    result.extend(store.insert_many(missing))

    logger.info("name_data_reset", component="store", **result.summary())
    return result
