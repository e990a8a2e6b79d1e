"""Data validation utilities using pandera."""

import pandas as pd
from pandera.errors import SchemaErrors
from pandera.pandas import DataFrameSchema

from orgchart.utils.types import ValidationOutcome


def _describe_failure(failure: dict) -> str:
    match failure:
        case {"check": "field_uniqueness", "column": col, "failure_case": val}:
            return f"Duplicate value {val!r} in column '{col}'"
        case {"check": "not_nullable", "column": col, "index": idx}:
            return f"Column '{col}' is missing a value at row {idx}"
        case {"column": col, "check": check, "failure_case": val}:
            return f"Column '{col}' failed check '{check}': {val!r}"
        case _:
            return f"Validation failure: {failure}"


def validate_dataframe(df: pd.DataFrame, schema: DataFrameSchema) -> ValidationOutcome:
    """Validate a DataFrame against a pandera schema, collecting every failure."""
    try:
        schema.validate(df, lazy=True)
        return {"valid": True, "status": "ok", "errors": []}
    except SchemaErrors as e:
        errors = [_describe_failure(row) for row in e.failure_cases.to_dict("records")]
        return {"valid": False, "status": "error", "errors": errors}


def validate_referential_integrity(
    child: pd.DataFrame,
    parent: pd.DataFrame,
    child_key: str,
    parent_key: str,
) -> ValidationOutcome:
    """Validate that all non-null child keys exist in parent."""
    orphans = set(child[child_key].dropna().unique().tolist()) - set(parent[parent_key].unique().tolist())

    match len(orphans):
        case 0:
            return {"valid": True, "status": "ok", "errors": []}
        case n:
            sample = sorted(orphans)[:5]
            return {
                "valid": False,
                "status": "error",
                "errors": [f"Found {n} orphan values in '{child_key}' (sample: {sample})"],
            }
