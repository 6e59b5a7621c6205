"""
End-to-end tests for the analysis pipeline and the CLI.
The LLM is either disabled or monkeypatched; no network required.
"""

import textwrap

import pytest
from click.testing import CliRunner

import cli as cli_module
from estimator.grid import FixedGridIntensity
from llm import client
from pipeline.orchestrator import LOG_STAGE, LOG_WARNING, Analyzer
from store.results import ResultStore

DOM_SOURCE = textwrap.dedent("""\
    const el = document.querySelector('#app');
    el.textContent = 'hi';
""")


def _project(root):
    (root / "web.js").write_text(DOM_SOURCE)
    (root / "util.py").write_text("def add(a, b):\n    return a + b\n")
    return root


# ── Analyzer ──────────────────────────────────────────────────────────────────

def test_run_heuristic(tmp_path):
    proj = tmp_path / "proj"
    proj.mkdir()
    store = ResultStore(tmp_path / "out" / "results.json")
    logs = []
    analyzer = Analyzer(
        str(_project(proj)),
        use_llm=False,
        user_id="alice",
        grid=FixedGridIntensity(300),
        store=store,
        log_callback=lambda level, msg: logs.append((level, msg)),
    )

    records = analyzer.run()

    by_name = {r.file_name: r for r in records}
    assert set(by_name) == {"web.js", "util.py"}
    assert by_name["web.js"].score == 5
    assert by_name["util.py"].score == 7
    assert by_name["util.py"].language == "py"
    assert all(r.grid_intensity == 300 for r in records)
    assert all(r.user_id == "alice" for r in records)
    assert store.size == 2
    assert sum(1 for level, _ in logs if level == LOG_STAGE) == 5


def test_run_without_saving(tmp_path):
    store = ResultStore(tmp_path / "results.json")
    f = tmp_path / "a.js"
    f.write_text("let a = 1\n")

    Analyzer(str(f), use_llm=False, save=False, store=store).run()

    assert store.size == 0


def test_llm_failure_falls_back_and_warns(tmp_path, monkeypatch):
    def down(*args, **kwargs):
        raise ConnectionError("Cannot reach the LLM endpoint")

    monkeypatch.setattr(client, "OPENROUTER_API_KEY", "test-key")
    monkeypatch.setattr(client, "chat", down)
    f = tmp_path / "web.js"
    f.write_text(DOM_SOURCE)
    logs = []

    records = Analyzer(
        str(f), use_llm=True, save=False,
        grid=FixedGridIntensity(300),
        log_callback=lambda level, msg: logs.append((level, msg)),
    ).run()

    assert records[0].score == 5
    assert any(level == LOG_WARNING and "LLM review failed" in msg for level, msg in logs)


def test_null_llm_reply_falls_back(tmp_path, monkeypatch):
    def empty_reply(payload, api_key, **kwargs):
        return {"choices": [{"message": {"content": None}}]}

    monkeypatch.setattr(client, "OPENROUTER_API_KEY", "test-key")
    monkeypatch.setattr(client, "_post", empty_reply)
    f = tmp_path / "web.js"
    f.write_text(DOM_SOURCE)

    records = Analyzer(str(f), use_llm=True, save=False, grid=FixedGridIntensity(300)).run()

    assert records[0].score == 5


def test_run_empty_directory(tmp_path):
    assert Analyzer(str(tmp_path), use_llm=False, save=False).run() == []


# ── CLI ───────────────────────────────────────────────────────────────────────

def test_cli_grid_night():
    result = CliRunner().invoke(cli_module.cli, ["grid", "--hour", "3"])
    assert result.exit_code == 0
    assert "364" in result.output
    assert "night" in result.output


def test_cli_grid_rejects_bad_hour():
    result = CliRunner().invoke(cli_module.cli, ["grid", "--hour", "24"])
    assert result.exit_code != 0


def test_cli_analyze_and_history(tmp_path, monkeypatch):
    import store.results as results

    monkeypatch.setattr(results, "RESULTS_PATH", tmp_path / "results.json")
    f = tmp_path / "web.js"
    f.write_text(DOM_SOURCE)
    runner = CliRunner()

    result = runner.invoke(
        cli_module.cli,
        ["analyze", str(f), "--no-llm", "--grid-intensity", "250", "--user-id", "alice"],
    )
    assert result.exit_code == 0, result.output
    assert "5/10" in result.output
    assert "DOM" in result.output

    result = runner.invoke(cli_module.cli, ["history", "--user-id", "alice"])
    assert result.exit_code == 0
    assert "Analyses" in result.output
    assert "web.js" in result.output


def test_cli_analyze_rejects_empty_file(tmp_path):
    f = tmp_path / "empty.js"
    f.write_bytes(b"")
    result = CliRunner().invoke(cli_module.cli, ["analyze", str(f), "--no-llm", "--no-save"])
    assert result.exit_code == 1


@pytest.mark.parametrize("value", ["inf", "nan"])
def test_cli_analyze_rejects_non_finite_grid_intensity(tmp_path, value):
    f = tmp_path / "a.js"
    f.write_text("let a = 1\n")
    result = CliRunner().invoke(
        cli_module.cli,
        ["analyze", str(f), "--no-llm", "--no-save", "--grid-intensity", value],
    )
    assert result.exit_code == 1
    assert "finite" in result.output
    assert not isinstance(result.exception, OverflowError)


def test_cli_history_empty(tmp_path, monkeypatch):
    import store.results as results

    monkeypatch.setattr(results, "RESULTS_PATH", tmp_path / "none.json")
    result = CliRunner().invoke(cli_module.cli, ["history"])
    assert result.exit_code == 0
    assert "No analyses" in result.output


def test_cli_check_without_key(monkeypatch):
    monkeypatch.setattr(client, "OPENROUTER_API_KEY", "")
    result = CliRunner().invoke(cli_module.cli, ["check"])
    assert result.exit_code == 1


def test_cli_history_clear(tmp_path, monkeypatch):
    import store.results as results

    path = tmp_path / "results.json"
    path.write_text("[]")
    monkeypatch.setattr(results, "RESULTS_PATH", path)

    result = CliRunner().invoke(cli_module.cli, ["history", "--clear"])

    assert result.exit_code == 0
    assert not path.exists()


def test_cli_check_reports_empty_reply(monkeypatch):
    def empty_reply(payload, api_key, **kwargs):
        return {"choices": [{"message": {"content": None}}]}

    monkeypatch.setattr(client, "OPENROUTER_API_KEY", "test-key")
    monkeypatch.setattr(client, "_post", empty_reply)
    result = CliRunner().invoke(cli_module.cli, ["check"])
    assert result.exit_code == 1
    assert "no text content" in result.output
