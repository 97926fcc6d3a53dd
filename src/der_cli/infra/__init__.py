"""Infrastructure layer — operating system, registry and command loading.

Every raw standard-library exception must be caught here and re-raised
as a :class:`~der_cli.exceptions.DerCliError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from der_cli.infra.executor import PackageExecutor
from der_cli.infra.registry import PyPIVersionLookup
from der_cli.infra.system import downgrade_root, require_user_home, resolve_user_home

__all__: list[str] = [
    "PackageExecutor",
    "PyPIVersionLookup",
    "downgrade_root",
    "require_user_home",
    "resolve_user_home",
]
