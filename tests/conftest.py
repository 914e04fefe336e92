import pytest

pytest_plugins = [
    'tests.fixtures.mocks',
    'tests.fixtures.rows',
]


@pytest.fixture(autouse=True)
def no_table_name_config(monkeypatch, tmp_path):
    """Run each test outside any directory holding a table_names.json."""
    monkeypatch.chdir(tmp_path)
