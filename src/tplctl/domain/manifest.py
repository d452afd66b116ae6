"""Manifest layering — explicit layer list plus one precedence function.

Three layers feed the final ``package.json``:

- **app**: the skeleton written by the scaffold stage.
- **template**: the template's own ``template/package.json`` (optional).
- **override**: the ``package`` block of ``template.json`` (optional),
  filtered through :data:`PACKAGE_BLACKLIST`.

Generic fields resolve ``template < app < override``. Dependency maps and
scripts resolve ``app < template < override`` per key.

INVARIANT: a blacklisted key is never taken from the override layer. It is
dropped before merging, not overridden and restored afterwards.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

Manifest = dict[str, Any]
KeyFilter = Callable[[str], bool]

# Identity and publishing fields a template may not override.
PACKAGE_BLACKLIST: frozenset[str] = frozenset(
    {
        "name",
        "version",
        "description",
        "keywords",
        "bugs",
        "license",
        "author",
        "contributors",
        "files",
        "browser",
        "bin",
        "man",
        "directories",
        "repository",
        "peerDependencies",
        "bundledDependencies",
        "optionalDependencies",
        "engineStrict",
        "os",
        "cpu",
        "preferGlobal",
        "private",
        "publishConfig",
    }
)

SORTED_MAPS = ("dependencies", "devDependencies")
ORDERED_MAPS = ("scripts",)
MERGED_MAPS = (*SORTED_MAPS, *ORDERED_MAPS)

# Root-level keys of template.json superseded by the ``package`` block.
DEPRECATED_DESCRIPTOR_KEYS = ("dependencies", "scripts")


def accept_all(_key: str) -> bool:
    return True


def not_blacklisted(key: str) -> bool:
    return key not in PACKAGE_BLACKLIST


@dataclass(frozen=True)
class ManifestLayer:
    """One named source of manifest fields with a key predicate."""

    name: str
    data: Mapping[str, Any] = field(default_factory=dict)
    accept: KeyFilter = accept_all


def merge_layers(layers: Iterable[ManifestLayer]) -> Manifest:
    """Last-write-wins merge of *layers*, each filtered by its predicate.

    Key order follows first insertion, so a key keeps the position of the
    earliest layer that defined it.
    """
    merged: Manifest = {}
    for layer in layers:
        for key, value in layer.data.items():
            if layer.accept(key):
                merged[key] = value
    return merged


def _sub_map(data: Mapping[str, Any] | None, key: str) -> Mapping[str, Any]:
    if not data:
        return {}
    value = data.get(key)
    return value if isinstance(value, Mapping) else {}


def override_layer_from_descriptor(descriptor: Mapping[str, Any] | None) -> Manifest | None:
    """The ``package`` block of a ``template.json`` document, if any."""
    if not descriptor:
        return None
    package = descriptor.get("package")
    return dict(package) if isinstance(package, Mapping) else None


def deprecated_descriptor_keys(descriptor: Mapping[str, Any] | None) -> list[str]:
    if not descriptor:
        return []
    return [key for key in DEPRECATED_DESCRIPTOR_KEYS if key in descriptor]


def compute_final_manifest(
    app: Mapping[str, Any],
    template: Mapping[str, Any] | None = None,
    override: Mapping[str, Any] | None = None,
) -> Manifest:
    """Merge the three manifest layers into the final manifest.

    ``dependencies`` and ``devDependencies`` come out key-sorted;
    ``scripts`` keep merge insertion order.
    """
    override_filtered = {k: v for k, v in (override or {}).items() if not_blacklisted(k)}

    final = merge_layers(
        [
            ManifestLayer("template", template or {}),
            ManifestLayer("app", app),
            ManifestLayer("override", override_filtered, accept=not_blacklisted),
        ]
    )

    for key in MERGED_MAPS:
        merged = merge_layers(
            [
                ManifestLayer("app", _sub_map(app, key)),
                ManifestLayer("template", _sub_map(template, key)),
                ManifestLayer("override", _sub_map(override_filtered, key)),
            ]
        )
        if key in SORTED_MAPS:
            merged = {name: merged[name] for name in sorted(merged)}
        final[key] = merged

    return final


def render_manifest(manifest: Mapping[str, Any]) -> str:
    """Serialize a manifest the way package managers write it."""
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"
