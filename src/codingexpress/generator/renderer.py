"""Render generation plans and project files through Jinja2 templates.

Templates live in ``codingexpress/templates/``:

* ``project/`` -- files written once by ``init`` (server, router, config).
* ``auth/`` -- the authentication system.
* ``resource/`` -- the per-resource model, validator, controller and route
  file, plus the stubs ``update:resource`` appends.

The environment keeps trailing newlines and trims block tags, so a template
reads like the JavaScript it produces. Autoescaping is off: nothing rendered
here is HTML.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from codingexpress.models import (
    ArtifactKind,
    ControllerPlan,
    GeneratedArtifact,
    ModelPlan,
    OrmChoice,
    ResourceNames,
    ResourcePlan,
    RoutePlan,
    ValidationRule,
    ValidatorPlan,
)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
"""Path to the Jinja2 template directory (``codingexpress/templates/``)."""

_JS_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_NON_IDENT = re.compile(r"[^A-Za-z0-9_]")

_env: Optional[Environment] = None


def get_environment() -> Environment:
    """Return the shared Jinja2 environment, creating it on first use."""
    global _env
    if _env is None:
        _env = _create_jinja_env()
    return _env


def _create_jinja_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=False),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["js_string"] = js_string
    env.filters["param_access"] = param_access
    env.filters["js_key"] = js_key
    env.filters["prisma_ident"] = prisma_ident
    env.filters["chain_segments"] = chain_segments
    return env


def js_string(value: Any) -> str:
    """Quote *value* as a single-quoted JavaScript string literal."""
    text = str(value).replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{text}'"


def param_access(name: Optional[str]) -> str:
    """``req.params.<name>``, with bracket syntax for names like ``pet-id``."""
    name = name or "id"
    if _JS_IDENTIFIER.match(name):
        return f"req.params.{name}"
    return f"req.params[{js_string(name)}]"


def js_key(name: str) -> str:
    """An object key, quoted only when it is not a plain identifier."""
    return name if _JS_IDENTIFIER.match(name) else js_string(name)


def prisma_ident(name: str) -> str:
    """A Prisma field name for *name*; other characters become underscores."""
    ident = _NON_IDENT.sub("_", name)
    if ident[:1].isdigit():
        ident = "_" + ident
    return ident


def chain_segments(rule: ValidationRule) -> list[str]:
    """Flatten a rule into the calls chained after ``body(field)``."""
    segments: list[str] = []
    for check in rule.checks:
        segments.append(check.call)
        if check.message:
            segments.append(f"withMessage({js_string(check.message)})")
    return segments


def render_template(template_name: str, **context: Any) -> str:
    """Render one template to a string."""
    return get_environment().get_template(template_name).render(**context)


def render_model(plan: ModelPlan) -> str:
    template = (
        "resource/mongoose_model.js.j2"
        if plan.orm.is_document
        else "resource/prisma_model.prisma.j2"
    )
    return render_template(template, names=plan.names, plan=plan)


def render_validator(plan: ValidatorPlan) -> str:
    return render_template("resource/validator.js.j2", names=plan.names, plan=plan)


def render_controller(plan: ControllerPlan) -> str:
    template = (
        "resource/controller_mongoose.js.j2"
        if plan.orm.is_document
        else "resource/controller_prisma.js.j2"
    )
    return render_template(template, names=plan.names, plan=plan)


def render_routes(plan: RoutePlan) -> str:
    return render_template("resource/routes.js.j2", names=plan.names, plan=plan)


def render_resource(plan: ResourcePlan) -> list[GeneratedArtifact]:
    """Render every artifact of *plan*, in model/validator/controller/route order."""
    names = plan.names
    artifacts = [
        GeneratedArtifact(
            kind=ArtifactKind.MODEL,
            target_path=names.model_path(plan.model.orm),
            contents=render_model(plan.model),
        )
    ]
    if plan.validator is not None:
        artifacts.append(
            GeneratedArtifact(
                kind=ArtifactKind.VALIDATOR,
                target_path=names.validator_path,
                contents=render_validator(plan.validator),
            )
        )
    artifacts.append(
        GeneratedArtifact(
            kind=ArtifactKind.CONTROLLER,
            target_path=names.controller_path,
            contents=render_controller(plan.controller),
        )
    )
    artifacts.append(
        GeneratedArtifact(
            kind=ArtifactKind.ROUTE,
            target_path=names.route_path,
            contents=render_routes(plan.routes),
        )
    )
    return artifacts


def render_method_stub(method_name: str, summary: Optional[str] = None) -> str:
    """A controller method answering ``501 Not Implemented``."""
    return render_template("resource/method_stub.js.j2", name=method_name, summary=summary)


def render_route_stub(names: ResourceNames, verb: str, path: str, method_name: str) -> str:
    """One ``router.<verb>(...)`` line guarded by the auth middleware."""
    return render_template(
        "resource/route_stub.js.j2",
        names=names,
        verb=verb,
        path=path,
        name=method_name,
    )


def render_json(data: Any) -> str:
    """Serialize *data* as a two-space indented JSON file body."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def orm_context(orm: OrmChoice) -> dict[str, Any]:
    """Template variables shared by every project-level template."""
    return {"orm": orm.value, "is_document": orm.is_document}
