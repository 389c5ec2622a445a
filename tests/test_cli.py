"""CLI commands against an in-memory catalog client."""

import csv
import json
import logging

import pytest
from typer.testing import CliRunner

import cli.main as cli_main
from conftest import PagedClient, make_character
from core.logging_setup import HANDLER_NAME

runner = CliRunner()


class FakeCatalogClient(PagedClient):
    def __init__(self, total_pages=3, *, fail_pages=()):
        super().__init__(total_pages, fail_pages=fail_pages)
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.closed = True

    async def get_character(self, character_id):
        if character_id > 100:
            return None
        return make_character(character_id, f"Character {character_id}")

    async def get_characters(self, ids):
        return [make_character(i, f"Character {i}") for i in ids]


@pytest.fixture
def catalog(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("COLUMNS", "200")
    monkeypatch.setenv("MORTY_CATALOG_FAVORITES_PATH", str(tmp_path / "favorites.json"))
    monkeypatch.setenv("MORTY_CATALOG_STATE_PATH", str(tmp_path / "last_query.txt"))
    monkeypatch.setenv("MORTY_CATALOG_EXPORT_DIR", str(tmp_path / "exports"))
    client = FakeCatalogClient()
    monkeypatch.setattr(cli_main, "_make_client", lambda settings: client)
    yield client
    root = logging.getLogger()
    for handler in [h for h in root.handlers if h.name == HANDLER_NAME]:
        root.removeHandler(handler)


def test_list_json_loads_requested_pages(catalog):
    result = runner.invoke(cli_main.app, ["list", "--name", "rick", "--pages", "2", "--json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert [item["id"] for item in payload] == [1, 2, 3, 4]
    assert [page for _, page in catalog.calls] == [1, 2]
    assert catalog.calls[0][0].name == "rick"
    assert catalog.closed


def test_list_table(catalog):
    result = runner.invoke(cli_main.app, ["list"])

    assert result.exit_code == 0, result.output
    assert "Character 1" in result.stdout
    assert "2 shown" in result.stdout


def test_list_reports_failure(catalog):
    catalog.fail_pages.add(1)

    result = runner.invoke(cli_main.app, ["list"])

    assert result.exit_code == 1
    assert "Error loading characters" in result.output


def test_list_rejects_invalid_filter(catalog):
    result = runner.invoke(cli_main.app, ["list", "--status", "zombie"])
    assert result.exit_code == 2
    assert catalog.calls == []


def test_export_csv_all_pages(catalog, tmp_path):
    output = tmp_path / "chars.csv"
    result = runner.invoke(cli_main.app, ["export", "--output", str(output)])

    assert result.exit_code == 0, result.output
    with output.open(encoding="utf-8", newline="") as fh:
        rows = list(csv.DictReader(fh))
    assert [row["id"] for row in rows] == ["1", "2", "3", "4", "5", "6"]


def test_export_json_default_location(catalog, tmp_path):
    result = runner.invoke(cli_main.app, ["export", "--format", "json", "--pages", "1"])

    assert result.exit_code == 0, result.output
    payload = json.loads((tmp_path / "exports" / "characters.json").read_text(encoding="utf-8"))
    assert [item["id"] for item in payload] == [1, 2]


def test_show(catalog):
    result = runner.invoke(cli_main.app, ["show", "7"])
    assert result.exit_code == 0, result.output
    assert "Character 7" in result.stdout

    missing = runner.invoke(cli_main.app, ["show", "999"])
    assert missing.exit_code == 1
    assert "not found" in missing.stdout


def test_favorites_lifecycle(catalog, tmp_path):
    assert runner.invoke(cli_main.app, ["favorites", "add", "3"]).exit_code == 0
    assert runner.invoke(cli_main.app, ["favorites", "add", "5"]).exit_code == 0
    assert runner.invoke(cli_main.app, ["favorites", "remove", "3"]).exit_code == 0

    assert json.loads((tmp_path / "favorites.json").read_text(encoding="utf-8")) == [5]
    listed = runner.invoke(cli_main.app, ["favorites", "list"])
    assert listed.exit_code == 0, listed.output
    assert "Character 5" in listed.stdout


def test_favorites_list_empty(catalog):
    result = runner.invoke(cli_main.app, ["favorites", "list"])
    assert result.exit_code == 0
    assert "No favorites yet" in result.stdout


def test_browse_scrolls_and_saves_session(catalog, tmp_path):
    result = runner.invoke(
        cli_main.app,
        ["browse", "--query", "name=rick", "--no-banner"],
        input="m\nq\n",
    )

    assert result.exit_code == 0, result.output
    assert [page for _, page in catalog.calls] == [1, 2]
    assert (tmp_path / "last_query.txt").read_text(encoding="utf-8").strip() == "name=rick&page=2"
    assert "Session saved" in result.stdout


def test_browse_resumes_last_session(catalog, tmp_path):
    (tmp_path / "last_query.txt").write_text("status=Dead&page=2\n", encoding="utf-8")

    result = runner.invoke(cli_main.app, ["browse", "--no-banner"], input="q\n")

    assert result.exit_code == 0, result.output
    assert [page for _, page in catalog.calls] == [1, 2]
    assert catalog.calls[0][0].status.value == "Dead"


def test_parse_filter_assignments():
    assert cli_main.parse_filter_assignments("name=rick from=2017-11-01 status=") == {
        "name": "rick",
        "created_start": "2017-11-01",
        "status": None,
    }
    with pytest.raises(ValueError):
        cli_main.parse_filter_assignments("name")
    with pytest.raises(ValueError):
        cli_main.parse_filter_assignments("planet=earth")


def test_parse_filter_assignments_quoted_values():
    assert cli_main.parse_filter_assignments('name="Rick Sanchez" species=\'Mythological Creature\'') == {
        "name": "Rick Sanchez",
        "species": "Mythological Creature",
    }
    assert cli_main.parse_filter_assignments('"name=Morty Smith"') == {"name": "Morty Smith"}
    with pytest.raises(ValueError):
        cli_main.parse_filter_assignments('name="Rick Sanchez')


def test_browse_filter_edit_with_multi_word_name(catalog, tmp_path):
    result = runner.invoke(
        cli_main.app,
        ["browse", "--query", "status=Alive", "--no-banner"],
        input='f name="Rick Sanchez"\nf name="Unclosed\nq\n',
    )

    assert result.exit_code == 0, result.output
    assert catalog.calls[-1][0].name == "Rick Sanchez"
    assert catalog.calls[-1][0].status.value == "Alive"
    assert len(catalog.calls) == 2
    assert "No closing quotation" in result.stdout
    saved = (tmp_path / "last_query.txt").read_text(encoding="utf-8").strip()
    assert saved == "name=Rick+Sanchez&status=Alive"


def test_doctor_run_reports_api_and_paths(catalog, monkeypatch):
    import cli.doctor as doctor

    class FakeDoctorClient(FakeCatalogClient):
        def __init__(self, settings):
            super().__init__(total_pages=42)

    monkeypatch.setattr(doctor, "RickMortyClient", FakeDoctorClient)

    result = runner.invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 0, result.output
    assert "API connectivity" in result.stdout
    assert "in 42 pages" in result.stdout
    assert "FAIL" not in result.stdout


def test_doctor_setup_api_writes_user_env(catalog, monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setattr("sys.platform", "linux")

    result = runner.invoke(
        cli_main.app,
        ["doctor", "setup-api"],
        input="http://localhost:8080/api\n5\n100\n",
    )

    assert result.exit_code == 0, result.output
    text = (tmp_path / "xdg" / "morty-catalog" / ".env").read_text(encoding="utf-8")
    assert "MORTY_CATALOG_API_BASE_URL=http://localhost:8080/api" in text
    assert "MORTY_CATALOG_DEBOUNCE_MS=100" in text
