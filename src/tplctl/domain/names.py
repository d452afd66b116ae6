"""Package-name validation rules for new projects.

Problems come in two tiers, mirroring the registry's own rules:

- **errors** make a name invalid for any package (leading dot, spaces,
  non-URL-safe characters, ...).
- **warnings** only make it invalid for *new* packages (capital letters,
  core module names, excessive length, special characters).

A project name must be free of both to be accepted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from urllib.parse import quote

MAX_NAME_LENGTH = 214

BLACKLISTED_NAMES = frozenset({"node_modules", "favicon.ico"})

# Node.js core modules; a project can't shadow these.
CORE_MODULE_NAMES = frozenset(
    {
        "assert",
        "async_hooks",
        "buffer",
        "child_process",
        "cluster",
        "console",
        "constants",
        "crypto",
        "dgram",
        "diagnostics_channel",
        "dns",
        "domain",
        "events",
        "fs",
        "http",
        "http2",
        "https",
        "inspector",
        "module",
        "net",
        "os",
        "path",
        "perf_hooks",
        "process",
        "punycode",
        "querystring",
        "readline",
        "repl",
        "stream",
        "string_decoder",
        "sys",
        "timers",
        "tls",
        "trace_events",
        "tty",
        "url",
        "util",
        "v8",
        "vm",
        "wasi",
        "worker_threads",
        "zlib",
    }
)

_SCOPED_NAME = re.compile(r"^(?:@([^/]+?)/)?([^/]+?)$")
_SPECIAL_CHARS = re.compile(r"[~'!()*]")


@dataclass(frozen=True)
class NameValidation:
    """Outcome of :func:`validate_project_name`."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid_for_new_packages(self) -> bool:
        return not self.errors and not self.warnings

    @property
    def problems(self) -> list[str]:
        return [*self.errors, *self.warnings]


def _url_safe(value: str) -> bool:
    return quote(value, safe="!~*'()") == value


def validate_project_name(name: str) -> NameValidation:
    """Check *name* against package naming restrictions.

    Examples:
        >>> validate_project_name("my-app").valid_for_new_packages
        True
        >>> validate_project_name("MyApp").warnings
        ['name can no longer contain capital letters']
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not name:
        errors.append("name length must be greater than zero")
        return NameValidation(errors=errors)

    if name.startswith("."):
        errors.append("name cannot start with a period")
    if name.startswith("_"):
        errors.append("name cannot start with an underscore")
    if name.strip() != name:
        errors.append("name cannot contain leading or trailing spaces")
    if name.lower() in BLACKLISTED_NAMES:
        errors.append(f"{name} is a blacklisted name")

    if name.lower() in CORE_MODULE_NAMES:
        warnings.append(f"{name} is a core module name")
    if len(name) > MAX_NAME_LENGTH:
        warnings.append(f"name can no longer contain more than {MAX_NAME_LENGTH} characters")
    if name.lower() != name:
        warnings.append("name can no longer contain capital letters")
    if _SPECIAL_CHARS.search(name.split("/")[-1]):
        warnings.append("name can no longer contain special characters (\"~'!()*\")")

    if not _url_safe(name):
        match = _SCOPED_NAME.match(name)
        scoped_ok = (
            match is not None
            and match.group(1) is not None
            and _url_safe(match.group(1))
            and _url_safe(match.group(2))
        )
        if not scoped_ok:
            errors.append("name can only contain URL-friendly characters")

    return NameValidation(errors=errors, warnings=warnings)
