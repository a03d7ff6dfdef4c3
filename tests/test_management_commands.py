import json

import requests

from footprints.models import Building


def test_bootstrap_command_loads_collection(app, runner, fake_source):
    result = runner.invoke(args=["buildings", "bootstrap"])

    assert result.exit_code == 0, result.output
    assert "Loaded 5 buildings (0 rows skipped)" in result.output
    with app.app_context():
        assert Building.query.count() == 5


def test_bootstrap_command_is_idempotent(runner, fake_source):
    runner.invoke(args=["buildings", "bootstrap"])
    result = runner.invoke(args=["buildings", "bootstrap"])

    assert result.exit_code == 0
    assert "already loaded (5 buildings)" in result.output


def test_bootstrap_command_reports_empty_source(runner, fake_source):
    fake_source.rows = []
    result = runner.invoke(args=["buildings", "bootstrap"])

    assert result.exit_code == 0
    assert "collection left empty" in result.output


def test_bootstrap_command_fails_on_extract_error(app, runner, fake_source):
    fake_source.responses = [requests.ConnectionError("no route to host")]

    result = runner.invoke(args=["buildings", "bootstrap"])

    assert result.exit_code == 1
    assert "Bootstrap failed" in result.output
    with app.app_context():
        assert Building.query.count() == 0


def test_force_requires_confirmation(app, runner, fake_source, sample_rows):
    runner.invoke(args=["buildings", "bootstrap"])
    fake_source.rows = sample_rows[:1]

    aborted = runner.invoke(args=["buildings", "bootstrap", "--force"], input="n\n")
    assert aborted.exit_code == 1
    with app.app_context():
        assert Building.query.count() == 5

    confirmed = runner.invoke(args=["buildings", "bootstrap", "--force"], input="y\n")
    assert confirmed.exit_code == 0, confirmed.output
    assert "Loaded 1 buildings" in confirmed.output
    with app.app_context():
        assert Building.query.count() == 1


def test_status_command(runner, fake_source):
    before = json.loads(runner.invoke(args=["buildings", "status"]).output)
    assert before["buildings"] == 0
    assert before["load"] is None
    assert before["field_typing"] == "string"
    assert before["query_strategy"] == "store"

    runner.invoke(args=["buildings", "bootstrap"])
    after = json.loads(runner.invoke(args=["buildings", "status"]).output)

    assert after["buildings"] == 5
    assert after["load"]["record_count"] == 5
    assert after["source_url"] == "https://data.example.test/resource/footprints.json"
