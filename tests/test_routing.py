"""
Tests for the permission gate and the dispatch table
"""
import pytest

from cms_gateway.auth.permissions import ALL_PERMISSIONS, CallerContext, norm_permissions
from cms_gateway.outcome import ErrorKind, Outcome
from cms_gateway.routing import ROUTES, Route, resolve
from cms_gateway.services.forms import submit_form


def _caller(*perms):
    return CallerContext(tenant_id="t1", key_id="key_1", permissions=frozenset(perms))


class TestPermissionGate:

    def test_membership(self):
        caller = _caller("pages:read", "blog:write")
        assert caller.has_permission("pages:read")
        assert caller.has_permission("blog:write")
        assert not caller.has_permission("pages:write")
        assert not caller.has_permission("pages")

    def test_norm_permissions_accepts_stored_shapes(self):
        expected = frozenset({"pages:read", "blog:read"})
        assert norm_permissions(["pages:read", "blog:read", "pages:read"]) == expected
        assert norm_permissions('["pages:read", "blog:read"]') == expected
        assert norm_permissions("pages:read, blog:read") == expected
        assert norm_permissions(None) == frozenset()
        assert norm_permissions(42) == frozenset()


class TestRouteTable:

    def test_every_declared_permission_is_in_the_catalog(self):
        for route in ROUTES.values():
            assert route.required_permission is None or route.required_permission in ALL_PERMISSIONS

    def test_only_form_submit_is_public(self):
        public = [pair for pair, route in ROUTES.items() if route.is_public]
        assert public == [("forms", "submit")]
        assert ROUTES[("forms", "submit")].handler is submit_form

    @pytest.mark.parametrize("resource", ["pages", "products", "blog"])
    def test_crud_resources(self, resource):
        assert ROUTES[(resource, "list")].required_permission == f"{resource}:read"
        assert ROUTES[(resource, "get")].required_permission == f"{resource}:read"
        assert ROUTES[(resource, "create")].required_permission == f"{resource}:write"
        assert ROUTES[(resource, "update")].required_permission == f"{resource}:write"

    def test_forms_and_submissions_expose_no_writes(self):
        for action in ("create", "update"):
            assert ("forms", action) not in ROUTES
            assert ("submissions", action) not in ROUTES
        assert ("submissions", "get") not in ROUTES


class TestResolve:

    def test_unknown_resource_or_action(self):
        caller = _caller(*ALL_PERMISSIONS)
        for resource, action in [("users", "list"), ("pages", "delete"), (None, None), ("pages", None)]:
            result = resolve(resource, action, caller)
            assert isinstance(result, Outcome)
            assert result.error == ErrorKind.ROUTE_NOT_FOUND

    def test_missing_permission_is_forbidden(self):
        result = resolve("pages", "create", _caller("pages:read"))
        assert isinstance(result, Outcome)
        assert result.error == ErrorKind.FORBIDDEN

    def test_held_permission_routes(self):
        result = resolve("pages", "list", _caller("pages:read"))
        assert isinstance(result, Route)
        assert result is ROUTES[("pages", "list")]

    def test_submit_needs_no_permission(self):
        result = resolve("forms", "submit", _caller())
        assert isinstance(result, Route)
