"""Create a complete Express.js project in one pass.

:func:`bootstrap_project` is the engine behind ``codingexpress init``. The
steps run strictly in order:

1. Load the OpenAPI document, if one is given. A parse failure aborts
   before anything is written.
2. Create the directory skeleton and the static project files.
3. Write ``codingexpress.json``.
4. Generate and register every resource of the document. A failing
   resource is reported and skipped; the others are still generated. A
   resource whose files would replace the authentication system (``User``,
   ``Auth``) fails this way.
5. Write the authentication system and append its ``.env`` settings.
6. Write the Postman collection.
7. Run ``npm install``, ``npm audit`` and ``npm run dev``.

Every file is created only if absent, so re-running ``init`` in an existing
project fills in missing files and leaves the rest untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from codingexpress.config import save_project_config
from codingexpress.exceptions import CodingExpressError, RegistrationError
from codingexpress.generator.emitter import EmittedResource, emit, find_schema
from codingexpress.generator.grouper import group_operations
from codingexpress.generator.registrar import register_in_router
from codingexpress.generator.renderer import render_json
from codingexpress.models import GeneratedArtifact, ProjectContext, ResourceGroup, SpecDocument
from codingexpress.output import get_output
from codingexpress.scaffold import postman, project_files
from codingexpress.scaffold.files import WriteOutcome, create_file_if_absent, ensure_directories
from codingexpress.scaffold.toolchain import NodeToolchain, Toolchain

logger = logging.getLogger(__name__)


@dataclass
class BootstrapResult:
    """What one ``init`` run produced."""

    resources: list[EmittedResource] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    document: Optional[SpecDocument] = None


def write_artifacts(context: ProjectContext, artifacts: list[GeneratedArtifact]) -> list[WriteOutcome]:
    return [
        create_file_if_absent(context.root, artifact.target_path, artifact.contents)
        for artifact in artifacts
    ]


def register_resource(context: ProjectContext, emitted: EmittedResource) -> bool:
    """Mount the resource's routes; registration problems are warnings."""
    names = emitted.plan.names
    try:
        register_in_router(context.root, names)
    except RegistrationError as exc:
        get_output().warning(str(exc))
        return False
    get_output().info(f"Registered routes: /api/{names.plural} -> {names.route_path}")
    return True


def generate_resources(
    context: ProjectContext,
    document: SpecDocument,
    strip_prefix: Optional[str] = None,
) -> BootstrapResult:
    """Emit, write and register every resource of *document*.

    Failures are collected per resource in :attr:`BootstrapResult.failures`.
    """
    result = BootstrapResult(document=document)
    grouping = group_operations(document.operations, strip_prefix=strip_prefix)
    result.warnings.extend(grouping.warnings)
    for warning in grouping.warnings:
        get_output().warning(warning)

    if not grouping.groups:
        get_output().warning("The OpenAPI document defines no operations; no resources generated.")
        return result

    for model_name, group in grouping.groups.items():
        try:
            emitted = _generate_one(context, document, group, grouping.prefix)
        except (CodingExpressError, ValueError) as exc:
            message = str(exc)
            result.failures[model_name] = message
            get_output().error(f"Failed to generate {model_name}: {message}")
            continue
        result.resources.append(emitted)
        result.warnings.extend(emitted.warnings)
    return result


def _generate_one(
    context: ProjectContext,
    document: SpecDocument,
    group: ResourceGroup,
    prefix: str,
) -> EmittedResource:
    names = group.names
    logger.debug("Generating %s from %d operation(s)", names.model, len(group.operations))
    schema = find_schema(document.schemas, names)
    emitted = emit(group, context.orm, schema, prefix=prefix)
    project_files.check_not_reserved(
        names.model, [artifact.target_path for artifact in emitted.artifacts], context.orm
    )
    for warning in emitted.warnings:
        get_output().warning(warning)
    write_artifacts(context, emitted.artifacts)
    register_resource(context, emitted)
    return emitted


def write_project_skeleton(context: ProjectContext) -> None:
    ensure_directories(context.root, project_files.project_directories(context.orm))
    project_files.write_files(context.root, project_files.core_files(context.config))
    save_project_config(context.root, context.config)


def write_auth_system(context: ProjectContext) -> None:
    project_files.write_files(context.root, project_files.auth_files(context.config))
    project_files.append_auth_settings(context.root)


def write_postman_collection(context: ProjectContext, resources: list[EmittedResource]) -> None:
    collection = postman.build_collection(
        context.config.app_name, [emitted.plan for emitted in resources]
    )
    create_file_if_absent(
        context.root,
        postman.collection_filename(context.config.app_name),
        render_json(collection),
    )


def print_summary(result: BootstrapResult) -> None:
    """Generated-resource table on stdout, one row per resource."""
    rows = []
    for emitted in result.resources:
        plan = emitted.plan
        kinds = ", ".join(artifact.kind.value for artifact in emitted.artifacts)
        notes = "placeholder model" if plan.model.placeholder else ""
        rows.append(
            [
                plan.names.model,
                f"/api/{plan.names.plural}",
                str(len(plan.controller.methods)),
                kinds,
                notes,
            ]
        )
    for model_name, message in result.failures.items():
        rows.append([model_name, "", "0", "", f"failed: {message}"])
    if rows:
        get_output().print_table(
            ["Resource", "Mount", "Operations", "Artifacts", "Notes"],
            rows,
            title="Generated resources",
        )


def run_toolchain(
    context: ProjectContext,
    toolchain: Toolchain,
    install: bool = True,
    start_server: bool = True,
) -> None:
    """Install dependencies, audit them and start the dev server.

    Raises:
        DependencyInstallFailure: If ``npm install`` fails; audit and server
            failures are only reported.
    """
    output = get_output()
    if not install:
        output.suggest("Install dependencies: npm install")
        if start_server:
            output.suggest("Start the development server: npm run dev")
        return

    output.info("Installing dependencies...")
    toolchain.install(context.root)
    output.success("Dependencies installed.")

    if not toolchain.audit(context.root):
        output.warning("npm audit reported vulnerabilities.")
        output.suggest("Run `npm audit fix` to address them.")

    if not context.orm.is_document:
        output.suggest("Set DATABASE_URL in .env, then run `npx prisma migrate dev`.")

    if not start_server:
        output.suggest("Start the development server: npm run dev")
        return

    output.info("Starting development server...")
    if not toolchain.run_dev(context.root):
        output.warning("The development server exited with an error.")
        output.suggest("Check the output above, then run `npm run dev` again.")


def bootstrap_project(
    context: ProjectContext,
    spec_source: Optional[str] = None,
    install: bool = True,
    start_server: bool = True,
    strip_prefix: Optional[str] = None,
    toolchain: Optional[Toolchain] = None,
) -> BootstrapResult:
    """Create the project described by *context* under ``context.root``.

    Args:
        context: Project root and its ``{appName, ormChoice}`` config.
        spec_source: Path or URL of an OpenAPI 3.x document. ``None``
            creates a project with only the authentication resource.
        install: Run ``npm install`` and ``npm audit``.
        start_server: Run ``npm run dev`` after installing.
        strip_prefix: Path prefix to drop before grouping, or ``"auto"``.
        toolchain: Package manager runner; defaults to :class:`NodeToolchain`.

    Raises:
        SpecParseError: If the document cannot be loaded. Nothing has been
            written at that point.
        DependencyInstallFailure: If ``npm install`` fails.
    """
    from codingexpress.parser import load_spec_document

    output = get_output()
    document = None
    if spec_source is not None:
        output.info(f"Loading OpenAPI document: {spec_source}")
        document = load_spec_document(spec_source)
        output.info(
            f"Validated: {document.title} v{document.version} (OpenAPI {document.openapi_version})"
        )

    output.info(f"Creating {context.config.app_name} ({context.orm.value}) in {context.root}")
    context.root.mkdir(parents=True, exist_ok=True)
    write_project_skeleton(context)

    if document is not None:
        result = generate_resources(context, document, strip_prefix=strip_prefix)
    else:
        result = BootstrapResult()

    write_auth_system(context)
    write_postman_collection(context, result.resources)
    output.info(
        "A Postman collection has been created. Import "
        f"{postman.collection_filename(context.config.app_name)} into Postman to start testing."
    )

    if document is not None:
        print_summary(result)
    output.success(f"Project {context.config.app_name} created.")

    run_toolchain(context, toolchain or NodeToolchain(), install=install, start_server=start_server)
    return result
