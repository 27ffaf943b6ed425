"""codingexpress -- Scaffold Express.js backends, optionally from OpenAPI 3.x specs.

This package generates the boilerplate of an Express.js API project: the
directory skeleton, server and router files, a JWT/OTP authentication system,
and per-resource models, validators, controllers and route files. Resource
artifacts can be written one by one (``make:*``) or derived from an OpenAPI
document in one pass (``init <spec>``).

Typical workflow::

    codingexpress init --name shop --orm mongoose
    codingexpress make:resource Product Order
    codingexpress update:resource Product.publish

    codingexpress init openapi.yaml --orm prisma

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: Project config (``codingexpress.json``) persistence.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stderr diagnostics and summary tables with Rich support.
    parser: OpenAPI loading, ``$ref`` resolution and decoding.
    generator: Type mapping, classification, grouping, emission, registration.
    scaffold: Project bootstrap, file writing and ``make:*`` orchestration.
"""

__version__ = "1.0.0"
