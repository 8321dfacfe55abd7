from studyplanner.init_db import init_db


def test_init_db_creates_missing_tables_once():
    created = init_db()

    assert "users" in created
    assert "study_sessions" in created
    assert init_db() == []
