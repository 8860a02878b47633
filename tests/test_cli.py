import json

from click.testing import CliRunner

from docdeploy.cli import cli
from docdeploy.errors import CommandExecutionError
from docdeploy.model import CommandExecutorResponse

from conftest import job_data


def _write_job(tmp_path, **payload):
    path = tmp_path / "job.json"
    path.write_text(json.dumps(job_data(**payload)))
    return str(path)


def test_commands_prints_build_and_deploy(tmp_path):
    result = CliRunner().invoke(cli, ["commands", _write_job(tmp_path, isNextGen=True, mutPrefix="abc")])
    assert result.exit_code == 0, result.output
    assert "make next-gen-html" in result.output
    assert "make next-gen-deploy MUT_PREFIX=abc" in result.output


def test_commands_rejects_unpublished_branch(tmp_path):
    result = CliRunner().invoke(cli, ["commands", _write_job(tmp_path, branchName="feature-x")])
    assert result.exit_code == 1


def test_commands_for_staging_accepts_any_branch(tmp_path):
    job_file = _write_job(tmp_path, branchName="feature-x")
    result = CliRunner().invoke(cli, ["commands", job_file, "--env", "staging"])
    assert result.exit_code == 0, result.output
    assert "make stage" in result.output


def test_path_prefix(tmp_path):
    result = CliRunner().invoke(cli, ["path-prefix", _write_job(tmp_path, alias="upcoming")])
    assert result.exit_code == 0
    assert result.output.strip().splitlines()[-1] == "upcoming"


def test_missing_job_file(tmp_path):
    result = CliRunner().invoke(cli, ["path-prefix", str(tmp_path / "nope.json")])
    assert result.exit_code == 1


def test_deploy_requires_cdn_settings(tmp_path, monkeypatch):
    monkeypatch.delenv("FASTLY_SERVICE_ID", raising=False)
    monkeypatch.delenv("FASTLY_TOKEN", raising=False)
    result = CliRunner().invoke(cli, ["deploy", _write_job(tmp_path)])
    assert result.exit_code == 1


def _use_context(monkeypatch, context):
    monkeypatch.setattr("docdeploy.cli._build_context", lambda settings, console: context)


def test_deploy_unauthorized_branch_exits_1(tmp_path, monkeypatch, context, executor):
    _use_context(monkeypatch, context)
    result = CliRunner().invoke(cli, ["deploy", _write_job(tmp_path, branchName="feature-x")])
    assert result.exit_code == 1
    assert "not configured for publish" in result.output
    executor.execute.assert_not_awaited()


def test_deploy_execution_failure_exits_1(tmp_path, monkeypatch, context, executor):
    _use_context(monkeypatch, context)
    executor.execute.side_effect = CommandExecutionError(
        command="make publish && make deploy", exit_code=2, stdout="", stderr="s3: access denied"
    )
    result = CliRunner().invoke(cli, ["deploy", _write_job(tmp_path)])
    assert result.exit_code == 1
    assert "Status: failed" in result.output


def test_deploy_with_unparsable_purge_record_still_succeeds(tmp_path, monkeypatch, context, executor, cdn):
    _use_context(monkeypatch, context)
    executor.execute.return_value = CommandExecutorResponse(output="one\ntwo\nnot json\n")
    result = CliRunner().invoke(cli, ["deploy", _write_job(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "Status: success" in result.output
    assert "CDN was not purged" in result.output
    cdn.purge.assert_not_awaited()


def test_deploy_debug_prints_commands(tmp_path, monkeypatch, context):
    _use_context(monkeypatch, context)
    result = CliRunner().invoke(cli, ["--debug", "deploy", _write_job(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "[DEBUG] ran: make publish && make deploy" in result.output
    assert "CDN: purged" in result.output
