"""Project scaffolding -- directories, static files, and the Node toolchain.

Sub-modules:

* :mod:`~codingexpress.scaffold.files` -- create-if-absent and atomic writes.
* :mod:`~codingexpress.scaffold.project_files` -- the static files ``init``
  writes (``package.json``, server, router, auth system).
* :mod:`~codingexpress.scaffold.postman` -- the Postman collection.
* :mod:`~codingexpress.scaffold.toolchain` -- ``npm`` subprocesses.
* :mod:`~codingexpress.scaffold.bootstrap` -- the ``init`` pipeline.
* :mod:`~codingexpress.scaffold.makers` -- ``make:*`` and ``update:resource``.
"""
