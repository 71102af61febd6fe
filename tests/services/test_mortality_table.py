"""Tests for mortality table validation and loading."""

import json

import pytest
import yaml

from life_calendar.core.config import DEFAULT_MORTALITY_TABLE_PATH
from life_calendar.domain.errors import MortalityTableError
from life_calendar.services.mortality_table import (
    MortalityRecord,
    MortalityTable,
    load_mortality_table,
)


class TestMortalityRecord:
    def test_camel_case_keys(self):
        record = MortalityRecord.model_validate(
            {"ageYear": 3, "deathProb": 0.0004, "lifeExpectancy": 71.7}
        )
        assert record.age_year == 3
        assert record.death_prob == 0.0004
        assert record.life_expectancy == 71.7

    def test_snake_case_keys(self):
        record = MortalityRecord(age_year=0, death_prob=0.005, life_expectancy=74.0)
        assert record.age_year == 0

    @pytest.mark.parametrize(
        "row",
        [
            {"ageYear": -1, "deathProb": 0.1, "lifeExpectancy": 1.0},
            {"ageYear": 0, "deathProb": 1.5, "lifeExpectancy": 1.0},
            {"ageYear": 0, "deathProb": -0.1, "lifeExpectancy": 1.0},
            {"ageYear": 0, "deathProb": 0.1, "lifeExpectancy": -2.0},
        ],
    )
    def test_out_of_range_values_rejected(self, row):
        with pytest.raises(ValueError):
            MortalityRecord.model_validate(row)


class TestMortalityTable:
    def test_lookup(self, mortality_table):
        assert mortality_table.lookup("male", 30).death_prob == 0.002
        assert mortality_table.lookup("male", 41) is None
        assert mortality_table.lookup("male", -1) is None
        assert mortality_table.lookup("other", 0) is None

    def test_sexes(self, mortality_table):
        assert sorted(mortality_table.sexes()) == ["female", "male"]
        assert mortality_table.has_sex("male")
        assert not mortality_table.has_sex("unknown")

    def test_sex_keys_are_lowercased(self, table_data):
        table = MortalityTable.from_mapping({"Male": table_data["male"]})
        assert table.has_sex("male")

    def test_ages_must_start_at_zero(self, table_data):
        with pytest.raises(ValueError, match="start at 0"):
            MortalityTable.from_mapping({"male": table_data["male"][1:]})

    def test_ages_must_be_ascending_and_unique(self, table_data):
        rows = list(table_data["male"])
        rows[5], rows[6] = rows[6], rows[5]
        with pytest.raises(ValueError):
            MortalityTable.from_mapping({"male": rows})

        duplicated = table_data["male"][:3] + [table_data["male"][2]]
        with pytest.raises(ValueError):
            MortalityTable.from_mapping({"male": duplicated})


class TestLoadMortalityTable:
    def test_bundled_table(self):
        table = load_mortality_table(DEFAULT_MORTALITY_TABLE_PATH)
        assert sorted(table.sexes()) == ["female", "male"]
        for sex in ("male", "female"):
            rows = table.rows_for(sex)
            assert len(rows) == 120
            assert 60 < rows[0].life_expectancy < 90
            assert rows[-1].death_prob == 1.0

    def test_yaml_file(self, tmp_path, table_data):
        path = tmp_path / "table.yaml"
        path.write_text(yaml.safe_dump(table_data), encoding="utf-8")
        table = load_mortality_table(path)
        assert table.lookup("male", 30).life_expectancy == 50.0

    def test_json_file(self, tmp_path, table_data):
        path = tmp_path / "table.json"
        path.write_text(json.dumps(table_data), encoding="utf-8")
        table = load_mortality_table(str(path))
        assert table.lookup("female", 0).life_expectancy == 81.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(MortalityTableError, match="not found"):
            load_mortality_table(tmp_path / "nope.yaml")

    def test_unparseable_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(MortalityTableError, match="Could not read"):
            load_mortality_table(path)

    def test_wrong_top_level_shape(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(MortalityTableError, match="must map"):
            load_mortality_table(path)

    def test_invalid_records(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(
            "male:\n  - {ageYear: 0, deathProb: 2.0, lifeExpectancy: 70}\n",
            encoding="utf-8",
        )
        with pytest.raises(MortalityTableError, match="Invalid mortality table"):
            load_mortality_table(path)
