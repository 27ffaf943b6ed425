"""Generators behind the ``make:*`` and ``update:resource`` commands.

``make:*`` has no OpenAPI document to work from: each name is planned as a
conventional five-action CRUD resource (:func:`standard_group`) whose model
holds a single required ``name`` field. Only the artifacts the command asks
for are written, and each one is created only if absent.

``update:resource Product.publishAll`` edits existing files in place: a
``501`` stub method lands above the ``// [codingexpress] methods`` hook of
``ProductController.js`` and a matching ``GET /publish-all`` route above the
``// [codingexpress] routes`` hook of ``productRoutes.js``.
"""

from __future__ import annotations

import logging
import re
import textwrap
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from codingexpress.exceptions import (
    CodingExpressError,
    InvalidUsageError,
    MissingArtifactError,
    NameValidationError,
    RegistrationHookMissing,
)
from codingexpress.generator.emitter import (
    EmittedResource,
    PLACEHOLDER_SCHEMA,
    emit,
    plan_routes,
    standard_group,
)
from codingexpress.generator.naming import kebab_case, resource_names, strip_artifact_suffix
from codingexpress.generator.registrar import (
    METHODS_HOOK,
    ROUTES_HOOK,
    insert_before_hook,
)
from codingexpress.generator.renderer import render_method_stub, render_route_stub, render_routes
from codingexpress.models import ArtifactKind, GeneratedArtifact, ProjectContext, ResourceNames
from codingexpress.output import get_output
from codingexpress.scaffold import project_files
from codingexpress.scaffold.bootstrap import register_resource, write_artifacts
from codingexpress.scaffold.files import atomic_write

logger = logging.getLogger(__name__)

_JS_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class MakeTarget(str, Enum):
    """Which artifacts a ``make:*`` command writes."""

    CONTROLLER = "controller"
    MODEL = "model"
    ROUTE = "route"
    RESOURCE = "resource"


_TARGET_KINDS: dict[MakeTarget, tuple[ArtifactKind, ...]] = {
    MakeTarget.CONTROLLER: (ArtifactKind.CONTROLLER, ArtifactKind.VALIDATOR),
    MakeTarget.MODEL: (ArtifactKind.MODEL,),
    MakeTarget.ROUTE: (ArtifactKind.ROUTE,),
    MakeTarget.RESOURCE: (
        ArtifactKind.MODEL,
        ArtifactKind.VALIDATOR,
        ArtifactKind.CONTROLLER,
        ArtifactKind.ROUTE,
    ),
}
_REGISTERING_TARGETS = (MakeTarget.ROUTE, MakeTarget.RESOURCE)


@dataclass
class MakeResult:
    """Outcome of one ``make:*`` invocation over several names."""

    generated: list[ResourceNames] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def all_failed(self) -> bool:
        return not self.generated and bool(self.failures)


def plan_standard_resource(
    raw_name: str,
    context: ProjectContext,
    connection: str = "default",
) -> EmittedResource:
    """Plan and render the conventional CRUD resource for a CLI name.

    A trailing ``Controller``/``Validator``/``Routes`` is dropped first. A
    singular name is mounted at its ``s`` plural (``Product`` ->
    ``/products``).

    Raises:
        NameValidationError: If the name has no usable characters.
    """
    names = resource_names(strip_artifact_suffix(raw_name.strip()))
    if names.plural == names.lower:
        names = resource_names(names.model, plural=names.lower + "s")
    return emit(standard_group(names), context.orm, PLACEHOLDER_SCHEMA, connection=connection)


def make_one(
    target: MakeTarget,
    raw_name: str,
    context: ProjectContext,
    connection: str = "default",
) -> ResourceNames:
    """Write the artifacts of *target* for one name.

    Route files are mounted in ``app/routes/index.js``; registration
    problems are reported as warnings.

    Raises:
        NameValidationError: If the name is unusable or its files would
            replace the authentication system.
    """
    emitted = plan_standard_resource(raw_name, context, connection=connection)
    kinds = _TARGET_KINDS[target]
    artifacts = [emitted.artifact(kind) for kind in kinds]
    if target is MakeTarget.ROUTE and not (context.root / emitted.plan.names.validator_path).exists():
        artifacts = [_route_without_validator(emitted)]
    artifacts = [artifact for artifact in artifacts if artifact is not None]
    project_files.check_not_reserved(
        emitted.plan.names.model, [artifact.target_path for artifact in artifacts], context.orm
    )
    write_artifacts(context, artifacts)
    if target in _REGISTERING_TARGETS:
        register_resource(context, emitted)
    logger.debug("make:%s %s -> %s", target.value, raw_name, emitted.plan.names.model)
    return emitted.plan.names


def _route_without_validator(emitted: EmittedResource) -> GeneratedArtifact:
    """Route file for a resource whose validator does not exist."""
    plan = emitted.plan
    group = standard_group(plan.names)
    routes = plan_routes(group, plan.controller, has_validator=False)
    return GeneratedArtifact(
        kind=ArtifactKind.ROUTE,
        target_path=plan.names.route_path,
        contents=render_routes(routes),
    )


def make_many(
    target: MakeTarget,
    raw_names: Iterable[str],
    context: ProjectContext,
    connection: str = "default",
) -> MakeResult:
    """Run :func:`make_one` for every name; a failing name does not stop the rest."""
    result = MakeResult()
    for raw_name in raw_names:
        try:
            result.generated.append(make_one(target, raw_name, context, connection=connection))
        except (CodingExpressError, ValueError) as exc:
            result.failures[raw_name] = str(exc)
            get_output().error(str(exc))
    return result


def make_controller(raw_names: Iterable[str], context: ProjectContext) -> MakeResult:
    return make_many(MakeTarget.CONTROLLER, raw_names, context)


def make_model(
    raw_names: Iterable[str],
    context: ProjectContext,
    connection: str = "default",
) -> MakeResult:
    return make_many(MakeTarget.MODEL, raw_names, context, connection=connection)


def make_route(raw_names: Iterable[str], context: ProjectContext) -> MakeResult:
    return make_many(MakeTarget.ROUTE, raw_names, context)


def make_resource(
    raw_names: Iterable[str],
    context: ProjectContext,
    connection: str = "default",
) -> MakeResult:
    return make_many(MakeTarget.RESOURCE, raw_names, context, connection=connection)


# ---------------------------------------------------------------------------
# update:resource
# ---------------------------------------------------------------------------


def parse_method_target(target: str) -> tuple[ResourceNames, str]:
    """Split ``Product.publishAll`` into resource names and a method name.

    Raises:
        InvalidUsageError: If *target* is not ``<Name>.<method>`` or the
            method is not a valid JavaScript identifier.
    """
    resource, sep, method = target.strip().partition(".")
    if not sep or not resource or not method:
        raise InvalidUsageError(
            f"Invalid target '{target}'. Use the format <ResourceName>.<methodName>, "
            "e.g. Product.publishAll"
        )
    if not _JS_IDENTIFIER.match(method):
        raise InvalidUsageError(f"Invalid method name '{method}': it must be a JavaScript identifier.")
    try:
        names = resource_names(strip_artifact_suffix(resource))
    except NameValidationError as exc:
        raise InvalidUsageError(str(exc)) from exc
    return names, method


def has_method(controller_source: str, method_name: str) -> bool:
    pattern = re.compile(rf"^\s*(?:async\s+)?{re.escape(method_name)}\s*\(", re.MULTILINE)
    return pattern.search(controller_source) is not None


def add_controller_method(source: str, method_name: str, summary: Optional[str] = None) -> str:
    """Insert a 501 stub for *method_name* above the methods hook."""
    stub = textwrap.dedent(render_method_stub(method_name, summary)).rstrip("\n")
    return insert_before_hook(source, METHODS_HOOK, ["", *stub.splitlines()])


def add_route_entry(source: str, names: ResourceNames, method_name: str) -> str:
    """Insert ``router.get('/<kebab-method>', ...)`` above the routes hook."""
    line = render_route_stub(names, "get", f"/{kebab_case(method_name)}", method_name).rstrip("\n")
    return insert_before_hook(source, ROUTES_HOOK, [line])


def update_resource(target: str, context: ProjectContext) -> bool:
    """Add one custom method to an existing controller and route file.

    Returns ``False`` when the method already exists; nothing is changed in
    that case.

    Raises:
        InvalidUsageError: See :func:`parse_method_target`.
        MissingArtifactError: If the controller or route file is missing, or
            lacks its hook line.
    """
    names, method_name = parse_method_target(target)
    controller_path = context.root / names.controller_path
    route_path = context.root / names.route_path
    for path, command in (
        (controller_path, "make:controller"),
        (route_path, "make:route"),
    ):
        if not path.is_file():
            raise MissingArtifactError(
                f"{path.relative_to(context.root)} not found. "
                f"Create it first with 'codingexpress {command} {names.model}'."
            )

    controller_source = controller_path.read_text(encoding="utf-8")
    if has_method(controller_source, method_name):
        get_output().warning(
            f"Method '{method_name}' already exists in {names.controller_path}; nothing to do."
        )
        return False

    route_source = route_path.read_text(encoding="utf-8")
    try:
        new_controller = add_controller_method(controller_source, method_name)
        new_routes = add_route_entry(route_source, names, method_name)
    except RegistrationHookMissing as exc:
        raise MissingArtifactError(
            f"{exc} Add the '{METHODS_HOOK}' and '{ROUTES_HOOK}' lines to "
            f"{names.controller_path} and {names.route_path}."
        ) from exc

    atomic_write(controller_path, new_controller)
    get_output().info(f"Updated file: {names.controller_path} (added {method_name})")
    atomic_write(route_path, new_routes)
    get_output().info(
        f"Updated file: {names.route_path} (GET /{kebab_case(method_name)})"
    )
    return True
