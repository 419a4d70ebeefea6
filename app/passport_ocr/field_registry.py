from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional


@dataclass(frozen=True)
class FieldSpec:
    key: str
    field_type: str
    label: str
    column_id: Optional[str] = None
    from_mrz: bool = True


def _column(env_name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(env_name)
    if value is not None:
        return value.strip() or None
    return default


FIELDS: List[FieldSpec] = [
    FieldSpec(
        key="first_name",
        field_type="text",
        label="First name",
        column_id=_column("MONDAY_COLUMN_FIRST_NAME", "text_mm0qv8de"),
    ),
    FieldSpec(
        key="last_name",
        field_type="text",
        label="Last name",
        column_id=_column("MONDAY_COLUMN_LAST_NAME", "text_mm0qgd7q"),
    ),
    FieldSpec(
        key="gender",
        field_type="text",
        label="Gender",
        column_id=_column("MONDAY_COLUMN_GENDER", "text_mm0qkzhv"),
    ),
    FieldSpec(
        key="passport_number",
        field_type="text",
        label="Passport number",
        column_id=_column("MONDAY_COLUMN_PASSPORT_NUMBER", "text_mm0qj5f2"),
    ),
    FieldSpec(
        key="national_id_number",
        field_type="text",
        label="National ID number",
        column_id=_column("MONDAY_COLUMN_NATIONAL_ID", "text_mm0qwvat"),
    ),
    FieldSpec(
        key="date_of_birth",
        field_type="date",
        label="Date of birth",
        column_id=_column("MONDAY_COLUMN_DATE_OF_BIRTH", "date_mm0qj1wq"),
    ),
    FieldSpec(
        key="date_of_expiry",
        field_type="date",
        label="Date of expiry",
        column_id=_column("MONDAY_COLUMN_DATE_OF_EXPIRY", "date_mm0q1gcb"),
    ),
    # Not on the MRZ; written only when some other source fills them in.
    FieldSpec(
        key="date_of_issue",
        field_type="date",
        label="Date of issue",
        column_id=_column("MONDAY_COLUMN_DATE_OF_ISSUE", None),
        from_mrz=False,
    ),
    FieldSpec(
        key="issuing_authority",
        field_type="text",
        label="Issuing authority",
        column_id=_column("MONDAY_COLUMN_ISSUING_AUTHORITY", None),
        from_mrz=False,
    ),
    FieldSpec(
        key="place_of_birth",
        field_type="text",
        label="Place of birth",
        column_id=_column("MONDAY_COLUMN_PLACE_OF_BIRTH", None),
        from_mrz=False,
    ),
]


def iter_writable_fields() -> Iterable[FieldSpec]:
    return (spec for spec in FIELDS if spec.column_id)


def field_registry_payload() -> Dict[str, object]:
    return {
        "fields": [
            {
                "key": spec.key,
                "field_type": spec.field_type,
                "label": spec.label,
                "column_id": spec.column_id,
                "from_mrz": spec.from_mrz,
            }
            for spec in FIELDS
        ]
    }
