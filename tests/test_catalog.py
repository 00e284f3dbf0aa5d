from app.services.exam.catalog import (
    ExamCatalog,
    conducting_body_for,
    exam_sector_for,
    parse_catalog_id
)


def test_bundled_catalog_loads(catalog):
    assert len(catalog) == 6
    names = [exam.name for exam in catalog.exams]
    assert "SSC Exams" in names
    assert "Judiciary Exams" in names


def test_main_exam_lookup_accepts_string_and_int(catalog):
    assert catalog.get_main_exam("2").name == "Banking Exams"
    assert catalog.get_main_exam(2).code == "Banking"


def test_main_exam_miss_is_none(catalog):
    assert catalog.get_main_exam("99") is None
    assert catalog.get_main_exam("abc") is None
    assert catalog.get_main_exam(None) is None
    assert catalog.get_main_exam(True) is None


def test_sub_exam_lookup(catalog):
    banking = catalog.get_main_exam(2)
    sub_exam = catalog.get_sub_exam(banking, "3")
    assert sub_exam.name == "IBPS PO"
    assert sub_exam.code == "BNK-IBPSPO"
    assert catalog.get_sub_exam(banking, "42") is None
    assert catalog.get_sub_exam(banking, "x") is None


def test_from_dict():
    catalog = ExamCatalog.from_dict({
        "exams": [{"id": 10, "name": "Nursing Exams", "code": "Nursing", "sub_exams": []}]
    })
    assert len(catalog) == 1
    assert catalog.get_main_exam("10").sub_exams == []


def test_sector_and_body_defaults():
    assert conducting_body_for("SSC") == "Staff Selection Commission"
    assert exam_sector_for("Judiciary") == "Judicial Services"
    assert conducting_body_for("Astronomy") == "Not Specified"
    assert exam_sector_for("Astronomy") == "Other"


def test_available_options(catalog):
    options = catalog.get_available_exam_options()
    assert [option.id for option in options.main_exams] == [1, 2, 3, 4, 5, 6]
    assert len(options.exam_sectors) == len(set(options.exam_sectors))
    assert "Union Public Service Commission (UPSC)" in options.conducting_bodies


def test_parse_catalog_id():
    assert parse_catalog_id(" 4 ") == 4
    assert parse_catalog_id("4a") is None
    assert parse_catalog_id(False) is None
