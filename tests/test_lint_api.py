"""
Tests for the FastAPI lint API - integration over the full pipeline.
"""

from fastapi.testclient import TestClient

from doclint.config import VERSION
from doclint.main import app

client = TestClient(app)


def _entity(path, line, **kwargs):
    return {"path": path, "file": "lib/foo.rb", "line": line, "visibility": "public", **kwargs}


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == VERSION
    assert data["rules"] == 16
    assert "command_cache" in data


def test_lint_empty_request():
    response = client.post("/lint", json={})
    assert response.status_code == 200
    data = response.json()
    assert data["offenses"] == []
    assert data["exit_code"] == 0
    assert data["coverage"] is None


def test_lint_reports_offenses():
    response = client.post(
        "/lint",
        json={
            "entities": [
                _entity("Foo#bar", 3),
                _entity("Foo#baz", 9, docstring="Documented"),
            ],
            "only": ["Documentation/UndocumentedObjects"],
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert data["statistics"] == {"error": 0, "warning": 1, "convention": 0, "total": 1}
    offense = data["offenses"][0]
    assert offense["type"] == "line"
    assert offense["name"] == "UndocumentedObject"
    assert offense["location"] == "lib/foo.rb"
    assert offense["location_line"] == 3
    assert offense["object_name"] == "Foo#bar"
    assert data["coverage"] == {"total": 2, "documented": 1, "coverage": 50.0}
    assert data["exit_code"] == 1


def test_lint_threshold_from_config():
    response = client.post(
        "/lint",
        json={
            "entities": [_entity("Foo#bar", 3)],
            "only": ["Documentation/UndocumentedObjects"],
            "config": {"all_rules": {"fail_on_severity": "error"}},
        },
    )
    assert response.status_code == 200
    assert response.json()["exit_code"] == 0


def test_lint_captured_warnings():
    response = client.post(
        "/lint",
        json={
            "entities": [_entity("Foo#bar", 3, docstring="Documented")],
            "warnings": ["[warn]: Unknown tag @exmaple in file `lib/foo.rb` near line 2"],
            "only": ["Warnings/UnknownTag"],
        },
    )
    data = response.json()
    assert data["statistics"]["error"] == 1
    assert "did you mean '@example'?" in data["offenses"][0]["message"]
    assert data["inconclusive"] == []


def test_lint_unknown_rule_in_config_is_rejected():
    response = client.post("/lint", json={"config": {"Tags/Nope": {"enabled": True}}})
    assert response.status_code == 400
    assert "Tags/Nope" in response.json()["detail"]


def test_lint_unknown_only_rule_is_rejected():
    response = client.post("/lint", json={"only": ["Tags/Nope"]})
    assert response.status_code == 400


def test_lint_validation_error():
    response = client.post("/lint", json={"entities": [{"file": "lib/foo.rb"}]})
    assert response.status_code == 422
    assert "detail" in response.json()


def test_lambda_handler_wraps_app():
    from doclint.handler import handler

    assert handler.app is app


def test_lint_bad_min_coverage_is_rejected():
    response = client.post("/lint", json={"config": {"all_rules": {"min_coverage": "lots"}}})
    assert response.status_code == 400
    assert "min_coverage" in response.json()["detail"]
