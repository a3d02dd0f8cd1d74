import json

from scheduling.schools import classify_subject, load_table, normalize_table

TABLE = normalize_table([
    (("programacion", "redes"), "ING"),
    (("marketing",), "NEG"),
    ({"keywords": ["Redes Sociales"], "school": "DIS"}),
])


def test_first_matching_entry_wins():
    assert classify_subject("Marketing Digital", TABLE, "TC") == "NEG"
    # matches NEG and DIS too, but ING is listed first
    assert classify_subject("Marketing en Redes Sociales", TABLE, "TC") == "ING"
    assert classify_subject("Redes Sociales", TABLE, "TC") == "ING"


def test_match_is_case_insensitive():
    assert classify_subject("PROGRAMACION AVANZADA", TABLE, "TC") == "ING"


def test_unmatched_subject_gets_default():
    assert classify_subject("Historia del Arte", TABLE, "TC") == "TC"
    assert classify_subject(None, TABLE, "TC") == "TC"


def test_normalize_drops_incomplete_entries():
    table = normalize_table([{"keywords": ["x"]}, {"keywords": [], "school": "ING"}, {"keywords": "ingles", "code": "IDI"}])
    assert table == [(("ingles",), "IDI")]


def test_load_table_from_file(tmp_path):
    path = tmp_path / "keywords.json"
    path.write_text(json.dumps([{"keywords": ["Fisica"], "school": "CIE"}]), encoding="utf-8")
    assert load_table(str(path)) == [(("fisica",), "CIE")]


def test_match_ignores_accents_on_both_sides():
    table = normalize_table([(("programación",), "ING"), (("ingles",), "IDI")])
    assert table[0] == (("programacion",), "ING")
    assert classify_subject("Programacion Web", table, "TC") == "ING"
    assert classify_subject("Inglés II", table, "TC") == "IDI"


def test_default_keywords_classify_accented_subjects(service):
    subjects = ["Programación I", "Administración", "Inglés II", "Economía", "Diseno Grafico"]
    assert [service.resolve_school(s) for s in subjects] == ["ING", "NEG", "IDI", "NEG", "DIS"]
