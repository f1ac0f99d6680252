from __future__ import annotations

import pandas as pd
import pytest

from config import settings
from domain.models.country import Country
from utils import initial_data


def test_rows_from_frame_maps_headers_and_blanks():
    df = pd.DataFrame(
        {
            "Country Code": ["ALB", "CHN"],
            "Name": ["Albania", "China"],
            "Internet_Users": [60.1, float("nan")],
            "Adult Literacy Rate": [None, 96.4],
        }
    )

    rows = initial_data.rows_from_frame(df)

    assert rows == [
        {"code": "ALB", "name": "Albania", "internet_users": "60.1", "adult_literacy_rate": None},
        {"code": "CHN", "name": "China", "internet_users": None, "adult_literacy_rate": "96.4"},
    ]


def test_rows_from_frame_requires_code_and_name():
    with pytest.raises(ValueError, match="code"):
        initial_data.rows_from_frame(pd.DataFrame({"Name": ["Albania"]}))


def test_read_country_rows_from_csv(tmp_path):
    path = tmp_path / "countries.csv"
    path.write_text("Code,Name,Internet Users\nalb,Albania,60.1\nchn,China,\n", encoding="utf-8")

    rows = initial_data.read_country_rows(path)

    assert rows[0] == {"code": "alb", "name": "Albania", "internet_users": "60.1"}
    assert rows[1]["internet_users"] is None


def test_read_country_rows_from_xlsx(tmp_path):
    path = tmp_path / "countries.xlsx"
    pd.DataFrame(
        {"Code": ["ALB"], "Name": ["Albania"], "Internet Users": [60.1], "Adult Literacy Rate": [96.8]}
    ).to_excel(path, index=False, engine="openpyxl")

    rows = initial_data.read_country_rows(path)

    assert rows == [
        {"code": "ALB", "name": "Albania", "internet_users": "60.1", "adult_literacy_rate": "96.8"}
    ]


def test_read_country_rows_rejects_unknown_format(tmp_path):
    with pytest.raises(ValueError):
        initial_data.read_country_rows(tmp_path / "countries.json")


def test_import_countries_skips_invalid_and_duplicate_rows(service):
    service.save(Country.build("ALB", "Albania"))

    summary = initial_data.import_countries(
        [
            {"code": "ALB", "name": "Albania"},
            {"code": "CHN", "name": "China", "internet_users": "50.3"},
            {"code": "XX", "name": "Broken", "adult_literacy_rate": "abc"},
        ]
    )

    assert summary.imported == 1
    assert summary.skipped == 2
    assert summary.errors == ["Row 3 (XX): Literacy rate must be a valid number"]
    assert service.get_by_code("CHN").internet_users == 50.3


def test_check_and_import_data_without_seed_file(monkeypatch, service):
    monkeypatch.setattr(settings, "COUNTRY_SEED_FILE", None)

    assert initial_data.check_and_import_data() is None


def test_check_and_import_data_seeds_empty_store(monkeypatch, service, tmp_path):
    path = tmp_path / "seed.csv"
    path.write_text("Code,Name\nALB,Albania\n", encoding="utf-8")
    monkeypatch.setattr(settings, "COUNTRY_SEED_FILE", str(path))

    summary = initial_data.check_and_import_data()

    assert summary.imported == 1
    assert service.count() == 1
    # second run leaves the populated store alone
    assert initial_data.check_and_import_data() is None
