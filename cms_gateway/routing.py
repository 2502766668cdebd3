"""
Static dispatch table from (resource, action) to handler and required permission.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, Union

from .auth.permissions import CallerContext
from .outcome import ErrorKind, Outcome
from .services import content
from .services.forms import submit_form


@dataclass(frozen=True)
class Route:
    handler: Callable
    # None marks a public route that skips the permission gate
    required_permission: Optional[str]

    @property
    def is_public(self) -> bool:
        return self.required_permission is None


def _crud(resource: str, service) -> Dict[Tuple[str, str], Route]:
    return {
        (resource, "list"): Route(service.list, f"{resource}:read"),
        (resource, "get"): Route(service.get, f"{resource}:read"),
        (resource, "create"): Route(service.create, f"{resource}:write"),
        (resource, "update"): Route(service.update, f"{resource}:write"),
    }


ROUTES: Dict[Tuple[str, str], Route] = {
    **_crud("pages", content.pages),
    **_crud("products", content.products),
    **_crud("blog", content.blog),
    ("forms", "list"): Route(content.forms.list, "forms:read"),
    ("forms", "get"): Route(content.forms.get, "forms:read"),
    ("forms", "submit"): Route(submit_form, None),
    ("submissions", "list"): Route(content.submissions.list, "submissions:read"),
}


def lookup(resource: Optional[str], action: Optional[str]) -> Optional[Route]:
    return ROUTES.get((resource, action))


def resolve(resource: Optional[str], action: Optional[str], caller: CallerContext) -> Union[Route, Outcome]:
    """Pick the route for a request, or a ROUTE_NOT_FOUND / FORBIDDEN outcome"""
    route = lookup(resource, action)
    if route is None:
        return Outcome.fail(ErrorKind.ROUTE_NOT_FOUND)
    if route.required_permission is not None and not caller.has_permission(route.required_permission):
        return Outcome.fail(ErrorKind.FORBIDDEN)
    return route
