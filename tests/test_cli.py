import json

import commit_checker.collector as collectormod
from commit_checker.cli import run
from commit_checker.models import CommitRecord


def write_event(tmp_path, payload):
    path = tmp_path / "event.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def env_for(tmp_path, event, payload, **inputs):
    env = {
        "GITHUB_EVENT_NAME": event,
        "GITHUB_EVENT_PATH": write_event(tmp_path, payload),
        "INPUT_PATTERN": inputs.pop("pattern", ".*"),
        "INPUT_ERROR": inputs.pop("error", "Commit message check failed"),
    }
    for k, v in inputs.items():
        env[f"INPUT_{k.upper()}"] = v
    return env


def test_push_single_commit_passes(tmp_path):
    env = env_for(tmp_path, "push", {"commits": [{"id": "1", "message": "anything"}]})
    assert run(env) == 0
    # same payload, same outcome
    assert run(env) == 0


def test_push_without_commits_skips(tmp_path, caplog):
    caplog.set_level("INFO")
    env = env_for(tmp_path, "push", {"commits": []}, pattern="^never$")
    assert run(env) == 0
    assert "skipping check" in caplog.text


def test_failure_reports_configured_error(tmp_path, capsys):
    env = env_for(
        tmp_path,
        "pull_request",
        {"pull_request": {"title": "wip", "body": ""}},
        pattern="^(feat|fix): ",
        error="Title must follow conventional commits",
    )
    assert run(env) == 1
    out = capsys.readouterr().out
    assert "::error::Title must follow conventional commits" in out


def test_configuration_error_fails(tmp_path, capsys):
    env = env_for(tmp_path, "push", {"commits": [{"id": "1", "message": "m"}]}, flags="gx")
    assert run(env) == 1
    assert 'FLAGS contains invalid characters "x".' in capsys.readouterr().out


def test_missing_required_input_fails(tmp_path, capsys):
    env = env_for(tmp_path, "push", {"commits": []})
    env["INPUT_PATTERN"] = ""
    assert run(env) == 1
    assert "Input required and not supplied: pattern" in capsys.readouterr().out


def test_check_all_commits_uses_remote_history(tmp_path, monkeypatch):
    created = {}

    class FakeGH:
        def __init__(self, token, base_url=None):
            created["token"] = token

        def fetch_pull_request_commits(self, owner, repo, number, exclude_users=frozenset()):
            return [CommitRecord(message="feat: one"), CommitRecord(message="oops")]

    monkeypatch.setattr(collectormod, "GitHubClient", FakeGH)
    payload = {
        "pull_request": {"title": "feat: title", "body": None, "number": 3},
        "repository": {"name": "repo", "owner": {"login": "octo"}},
    }
    env = env_for(
        tmp_path,
        "pull_request",
        payload,
        pattern="^feat: ",
        checkallcommitmessages="true",
        accesstoken="secret-token",
    )
    assert run(env) == 1
    assert created["token"] == "secret-token"


def test_malformed_commit_reports_payload_error(tmp_path, capsys):
    env = env_for(tmp_path, "push", {"commits": [{"id": 1, "message": "m"}]})
    assert run(env) == 1
    assert "::error::Invalid event payload" in capsys.readouterr().out


def test_invalid_event_json_reports_error(tmp_path, capsys):
    path = tmp_path / "event.json"
    path.write_text("{not json", encoding="utf-8")
    env = {
        "GITHUB_EVENT_NAME": "push",
        "GITHUB_EVENT_PATH": str(path),
        "INPUT_PATTERN": ".*",
        "INPUT_ERROR": "e",
    }
    assert run(env) == 1
    out = capsys.readouterr().out
    assert "::error::" in out
    assert "is not valid JSON" in out


def test_unexpected_error_is_reported(tmp_path, monkeypatch, capsys):
    import commit_checker.cli as climod

    def boom(args):
        raise RuntimeError("kaput")

    monkeypatch.setattr(climod, "check_messages", boom)
    env = env_for(tmp_path, "push", {"commits": [{"id": "1", "message": "m"}]})
    assert run(env) == 1
    assert "::error::kaput" in capsys.readouterr().out


def test_metrics_written_to_textfile(tmp_path, monkeypatch):
    from commit_checker.config import SETTINGS

    target = tmp_path / "checker.prom"
    monkeypatch.setattr(SETTINGS, "metrics_textfile", str(target))
    env = env_for(tmp_path, "push", {"commits": [{"id": "1", "message": "m"}]})
    assert run(env) == 0
    text = target.read_text(encoding="utf-8")
    assert "messages_checked_total" in text
    assert "checks_total" in text
