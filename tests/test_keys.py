"""
Tests for out-of-band key administration and the manage_keys CLI
"""
import importlib.util
import json
from pathlib import Path

import pytest

from cms_gateway.auth.keys import issue_key, list_keys, revoke_key, validate_permissions
from cms_gateway.utils.crypto import API_KEY_PREFIX, hash_token

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "manage_keys.py"


@pytest.fixture
def manage_keys():
    spec = importlib.util.spec_from_file_location("manage_keys", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_validate_permissions_dedupes_and_rejects_unknown():
    assert validate_permissions(["pages:read", " pages:read", "blog:write"]) == ["pages:read", "blog:write"]
    with pytest.raises(ValueError, match="Invalid permission: pages:delete"):
        validate_permissions(["pages:delete"])


def test_issue_stores_only_the_hash(db):
    key, secret = issue_key(db, "t1", "website", ["pages:read"])

    assert secret.startswith(API_KEY_PREFIX)
    assert key.key_hash == hash_token(secret)
    assert secret not in json.dumps(key.to_dict())
    assert key.key_id.startswith("key_")


def test_issue_defaults_to_read_only(db):
    key, _ = issue_key(db, "t1", "website")
    assert sorted(key.permissions) == ["blog:read", "forms:read", "pages:read", "products:read"]


def test_issue_requires_tenant(db):
    with pytest.raises(ValueError):
        issue_key(db, "", "website")


def test_list_is_per_tenant(db):
    issue_key(db, "t1", "a")
    issue_key(db, "t1", "b")
    issue_key(db, "t2", "c")
    assert sorted(k["name"] for k in list_keys(db, "t1")) == ["a", "b"]


def test_revoke_is_tenant_scoped(db, call):
    key, secret = issue_key(db, "t1", "website", ["pages:read"])

    assert not revoke_key(db, key.key_id, "t2")
    assert call(secret, "t1", resource="pages", action="list").status_code == 200

    assert revoke_key(db, key.key_id, "t1")
    response = call(secret, "t1", resource="pages", action="list")
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid API key"}


class TestCli:

    def test_issue_then_use(self, manage_keys, capsys, call):
        code = manage_keys.main(["issue", "--tenant", "t1", "--name", "site", "--perm", "blog:read"])
        assert code == 0
        issued = json.loads(capsys.readouterr().out)
        assert issued["permissions"] == ["blog:read"]
        assert issued["tenant_id"] == "t1"

        assert call(issued["api_key"], "t1", resource="blog", action="list").status_code == 200
        assert call(issued["api_key"], "t1", resource="pages", action="list").status_code == 400

    def test_issue_rejects_unknown_permission(self, manage_keys, capsys):
        code = manage_keys.main(["issue", "--tenant", "t1", "--name", "site", "--perm", "pages:admin"])
        assert code == 2
        assert "Invalid permission: pages:admin" in capsys.readouterr().err

    def test_list_and_revoke(self, manage_keys, capsys, db):
        key, _ = issue_key(db, "t1", "website")

        assert manage_keys.main(["list", "--tenant", "t1"]) == 0
        listing = json.loads(capsys.readouterr().out)
        assert listing["total"] == 1
        assert "api_key" not in listing["keys"][0]

        assert manage_keys.main(["revoke", "--tenant", "t1", "--key-id", key.key_id]) == 0
        assert manage_keys.main(["revoke", "--tenant", "t1", "--key-id", "key_missing"]) == 1
