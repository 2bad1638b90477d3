"""CLI behavior tests."""

import pytest

import gpsearch.cli as cli
from gpsearch import __version__
from gpsearch.errors import FetchError

RECORDS = [
    {"path": "github.com/a/low", "import_count": 3, "stars": 1},
    {"path": "github.com/b/high", "import_count": 50},
    {"path": "github.com/c/mid", "import_count": 10, "fork": True},
]


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point the cache at tmp_path and keep real config files out of the way."""
    cache_dir = tmp_path / "cache"
    cache_dir.mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GPSEARCH_CACHEDIR", str(cache_dir))
    for name in ("GPSEARCH_CACHETIMEOUT", "GPSEARCH_ENDPOINT", "GPSEARCH_CONFIG", "GPSEARCH_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return cache_dir


@pytest.fixture
def fake_client(monkeypatch):
    queries = []

    class FakeClient:
        def __init__(self, settings=None):
            self.settings = settings

        def search(self, query):
            queries.append(query)
            return [dict(r) for r in RECORDS]

    monkeypatch.setattr(cli, "PackageSearchClient", FakeClient)
    return queries


def test_build_query_joins_terms_with_spaces():
    assert cli.build_query(["http", "router"]) == "http router"
    assert cli.build_query(["  mux ", ""]) == "mux"
    assert cli.build_query([]) == ""


def test_no_query_prints_help_and_fails(capsys):
    assert cli.main([]) == 1
    out = capsys.readouterr().out
    assert "No query string is provided" in out
    assert "usage: gpsearch" in out


def test_search_prints_sorted_projection(isolated_env, fake_client, capsys):
    exit_code = cli.main(["-n", "2", "-f", "path", "-f", "import_count", "http", "router"])

    assert exit_code == 0
    assert fake_client == ["http router"]
    assert capsys.readouterr().out.split("\n") == [
        "path: github.com/b/high",
        "import_count: 50",
        "",
        "path: github.com/c/mid",
        "import_count: 10",
        "",
        "",
    ]


def test_default_fields_and_substituted_values(isolated_env, fake_client, capsys):
    assert cli.main(["--reverse", "-f", "stars", "-f", "fork", "-n", "1", "mux"]) == 0
    assert capsys.readouterr().out == "stars: 1\nfork: false\n\n"


def test_second_run_is_served_from_cache(isolated_env, fake_client, capsys):
    assert cli.main(["-f", "path", "mux"]) == 0
    first = capsys.readouterr().out
    assert cli.main(["-f", "path", "mux"]) == 0
    second = capsys.readouterr().out

    assert fake_client == ["mux"]
    assert first == second
    assert first.startswith("Only 3(<10) packages exist, list them all\n")


def test_fetch_error_exits_non_zero_without_partial_output(isolated_env, monkeypatch, capsys):
    class FailingClient:
        def __init__(self, settings=None):
            pass

        def search(self, query):
            raise FetchError("503 Server Error")

    monkeypatch.setattr(cli, "PackageSearchClient", FailingClient)

    assert cli.main(["mux"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Error: 503 Server Error" in captured.err


def test_unusable_cache_dir_is_fatal(isolated_env, fake_client, tmp_path, capsys):
    assert cli.main(["--cache-dir", str(tmp_path / "missing"), "mux"]) == 1
    assert "does not exist" in capsys.readouterr().err
    assert fake_client == []


def test_negative_num_is_rejected(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["-n", "-1", "mux"])
    assert excinfo.value.code == 2


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--version"])
    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_config_file_log_level_applies_before_settings_warnings(isolated_env, fake_client, tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("GPSEARCH_CACHETIMEOUT", "soon")
    (tmp_path / "gpsearch.config.yaml").write_text("log_level: ERROR\n", encoding="utf-8")

    assert cli.main(["-f", "path", "mux"]) == 0
    assert "Invalid" not in capsys.readouterr().err


def test_invalid_timeout_warning_reaches_stderr_by_default(isolated_env, fake_client, monkeypatch, capsys):
    monkeypatch.setenv("GPSEARCH_CACHETIMEOUT", "soon")

    assert cli.main(["-f", "path", "mux"]) == 0
    assert "Invalid GPSEARCH_CACHETIMEOUT value 'soon'" in capsys.readouterr().err


def test_malformed_config_file_is_reported(isolated_env, fake_client, tmp_path, capsys):
    (tmp_path / "gpsearch.config.yaml").write_text("- not\n- a mapping\n", encoding="utf-8")

    assert cli.main(["mux"]) == 1
    assert "must contain a mapping" in capsys.readouterr().err
    assert fake_client == []


def test_help_epilog_lists_known_fields(capsys):
    with pytest.raises(SystemExit):
        cli.main(["--help"])
    out = capsys.readouterr().out
    assert "Fields supported:" in out
    for name in cli.KNOWN_FIELDS:
        assert name in out


def test_describe_fields_aligns_descriptions():
    rows = cli.describe_fields().splitlines()[1:1 + len(cli.KNOWN_FIELDS)]
    assert len({row.index(" : ") for row in rows}) == 1
