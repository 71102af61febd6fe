"""
Mortality table: per-sex, per-age-year death probability and life expectancy.

The table is external data. This module validates it on load (records
ascending from age 0, probabilities in [0, 1]) and offers read-only lookups.
Files may be YAML or JSON with the layout::

    male:
      - {ageYear: 0, deathProb: 0.0058, lifeExpectancy: 74.2}
      ...
    female:
      - ...
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..domain.errors import MortalityTableError

logger = logging.getLogger(__name__)


class MortalityRecord(BaseModel):
    """One age-year row of a sex's life table."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    age_year: int = Field(..., ge=0, alias="ageYear")
    death_prob: float = Field(..., ge=0, le=1, alias="deathProb")
    life_expectancy: float = Field(..., ge=0, alias="lifeExpectancy")


class MortalityTable(BaseModel):
    """Ordered records keyed by sex category token ("male", "female")."""

    model_config = ConfigDict(frozen=True)

    records: Dict[str, List[MortalityRecord]]

    @field_validator("records")
    @classmethod
    def ages_ascending_from_zero(
        cls, v: Dict[str, List[MortalityRecord]]
    ) -> Dict[str, List[MortalityRecord]]:
        for sex, rows in v.items():
            ages = [row.age_year for row in rows]
            if ages != list(range(len(ages))):
                raise ValueError(
                    f"ageYear values for '{sex}' must be unique, ascending and start at 0"
                )
        return v

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "MortalityTable":
        """Build a table from a ``{sex: [record, ...]}`` mapping."""
        return cls(records={str(sex).lower(): rows for sex, rows in data.items()})

    def sexes(self) -> List[str]:
        """Sex category tokens present in the table."""
        return list(self.records.keys())

    def has_sex(self, sex: str) -> bool:
        return sex in self.records

    def rows_for(self, sex: str) -> Optional[List[MortalityRecord]]:
        return self.records.get(sex)

    def lookup(self, sex: str, age_year: int) -> Optional[MortalityRecord]:
        """Record for an exact age-year, or None when outside table coverage."""
        rows = self.records.get(sex)
        if not rows or age_year < 0 or age_year >= len(rows):
            return None
        return rows[age_year]


def load_mortality_table(path: Union[str, Path]) -> MortalityTable:
    """Load and validate a mortality table from a YAML or JSON file.

    Args:
        path: File path; ``.json`` is read as JSON, anything else as YAML.

    Returns:
        Validated MortalityTable.

    Raises:
        MortalityTableError: If the file is missing, unparseable or invalid.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise MortalityTableError(f"Mortality table not found: {file_path}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            if file_path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise MortalityTableError(f"Could not read mortality table {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise MortalityTableError(
            f"Mortality table {file_path} must map sex categories to record lists"
        )

    try:
        table = MortalityTable.from_mapping(data)
    except ValidationError as e:
        raise MortalityTableError(f"Invalid mortality table {file_path}: {e}") from e

    logger.info(
        "Loaded mortality table %s (%s)",
        file_path,
        ", ".join(f"{sex}: {len(rows)} ages" for sex, rows in table.records.items()),
    )
    return table
