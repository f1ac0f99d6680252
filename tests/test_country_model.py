from domain.models.country import TABLE_HEADER, Country


def test_build_uppercases_code_without_validating():
    country = Country.build("usa", "", internet_users=150.0)

    assert country.code == "USA"
    assert country.name == ""
    assert country.internet_users == 150.0
    assert country.adult_literacy_rate is None


def test_render_uses_fixed_columns_and_dashes_for_missing_values():
    country = Country.build("USA", "United States", internet_users=87.27)

    assert str(country) == "USA  " + "United States".ljust(32) + " " + "87.27".rjust(10) + " " + "--".rjust(10)


def test_render_formats_two_decimals():
    country = Country.build("ALB", "Albania", 60.1, 96.8)

    assert country.render().endswith("     60.10      96.80")
    assert country.render().startswith("ALB  Albania ")


def test_render_leaves_missing_code_and_name_blank():
    row = Country().render()

    assert row == " " * 3 + "  " + " " * 32 + " " + "--".rjust(10) + " " + "--".rjust(10)
    assert "None" not in row


def test_apply_edits_only_touches_given_fields():
    country = Country.build("BRA", "Brazil", 59.1, 92.6)

    country.apply_edits(name="Brasil")

    assert country == Country.build("BRA", "Brasil", 59.1, 92.6)


def test_from_mongo_ignores_object_id_and_handles_missing_doc():
    doc = {"_id": "abc", "code": "CHN", "name": "China", "internet_users": None, "adult_literacy_rate": 96.4}

    country = Country.from_mongo(doc)

    assert country == Country.build("CHN", "China", None, 96.4)
    assert Country.from_mongo(None) is None
    assert country.to_mongo() == {k: v for k, v in doc.items() if k != "_id"}


def test_table_header_has_rule_line():
    header, rule = TABLE_HEADER.splitlines()
    assert header.startswith("Code  Country")
    assert set(rule) == {"-"}
