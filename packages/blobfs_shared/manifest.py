"""Component-manifest model and registry.

Each resource declares one ``ResourceManifest`` in its ``component.py`` so a
composition root can validate ids and dependencies, then build components in
dependency-first order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from threading import RLock
from typing import Final, FrozenSet, Literal, NewType

ComponentId = NewType("ComponentId", str)
ModuleRoot = NewType("ModuleRoot", str)

ResourceKind = Literal["substrate", "adapter"]

_COMPONENT_ID_RE: Final[re.Pattern[str]] = re.compile(r"^[a-z][a-z0-9_]{1,62}$")
_MODULE_ROOT_RE: Final[re.Pattern[str]] = re.compile(
    r"^[a-zA-Z_][a-zA-Z0-9_]*(\.[a-zA-Z_][a-zA-Z0-9_]*)*$"
)


class ManifestError(ValueError):
    """Raised when manifest definitions or registration are invalid."""


@dataclass(frozen=True, slots=True)
class ResourceManifest:
    """Manifest declaration for one substrate/adapter component."""

    id: ComponentId
    kind: ResourceKind
    module_roots: FrozenSet[ModuleRoot]
    depends_on: FrozenSet[ComponentId] = frozenset()

    def __post_init__(self) -> None:
        """Validate resource invariants."""
        validate_component_id(self.id)
        if not str(self.id).startswith(f"{self.kind}_"):
            raise ManifestError(
                f"component id '{self.id}' must start with '{self.kind}_'"
            )
        if len(self.module_roots) == 0:
            raise ManifestError("module_roots must not be empty")
        for root in self.module_roots:
            validate_module_root(root)
        for dependency in self.depends_on:
            validate_component_id(dependency)
        if self.id in self.depends_on:
            raise ManifestError(f"component '{self.id}' cannot depend on itself")


@dataclass(slots=True)
class ManifestRegistry:
    """In-memory registry for resource manifests."""

    _components: dict[ComponentId, ResourceManifest] = field(default_factory=dict)
    _lock: RLock = field(default_factory=RLock)

    def register_component(self, manifest: ResourceManifest) -> None:
        """Register one component manifest with uniqueness validation."""
        with self._lock:
            existing = self._components.get(manifest.id)
            if existing is not None and existing != manifest:
                raise ManifestError(
                    f"duplicate component id with mismatched definition: {manifest.id}"
                )
            self._components[manifest.id] = manifest

    def get_component(self, component_id: ComponentId) -> ResourceManifest:
        """Return one registered component manifest by id."""
        try:
            return self._components[component_id]
        except KeyError as exc:
            raise ManifestError(f"component not registered: {component_id}") from exc

    def list_components(self) -> tuple[ResourceManifest, ...]:
        """Return all registered components sorted by id."""
        return tuple(sorted(self._components.values(), key=lambda item: str(item.id)))

    def build_order(self) -> tuple[ResourceManifest, ...]:
        """Return components ordered so every dependency precedes its dependents.

        Substrates sort ahead of adapters at the same depth, then by id.
        """
        with self._lock:
            ordered: list[ResourceManifest] = []
            visiting: set[ComponentId] = set()
            done: set[ComponentId] = set()

            def visit(manifest: ResourceManifest) -> None:
                if manifest.id in done:
                    return
                if manifest.id in visiting:
                    raise ManifestError(
                        f"dependency cycle detected at component '{manifest.id}'"
                    )
                visiting.add(manifest.id)
                for dependency in sorted(manifest.depends_on):
                    if dependency not in self._components:
                        raise ManifestError(
                            f"component '{manifest.id}' depends on unknown component "
                            f"'{dependency}'"
                        )
                    visit(self._components[dependency])
                visiting.discard(manifest.id)
                done.add(manifest.id)
                ordered.append(manifest)

            for manifest in sorted(
                self._components.values(),
                key=lambda item: (item.kind != "substrate", str(item.id)),
            ):
                visit(manifest)
            return tuple(ordered)


def validate_component_id(value: ComponentId) -> None:
    """Validate component-id format."""
    raw = str(value)
    if not _COMPONENT_ID_RE.fullmatch(raw):
        raise ManifestError(
            f"invalid component id '{raw}'; expected ^[a-z][a-z0-9_]{{1,62}}$"
        )


def validate_module_root(value: ModuleRoot) -> None:
    """Validate Python module-root path format."""
    raw = str(value)
    if not _MODULE_ROOT_RE.fullmatch(raw):
        raise ManifestError(f"invalid module root '{raw}'")


_DEFAULT_REGISTRY = ManifestRegistry()


def register_component(manifest: ResourceManifest) -> ResourceManifest:
    """Register a component manifest in the default process-local registry."""
    _DEFAULT_REGISTRY.register_component(manifest)
    return manifest


def get_registry() -> ManifestRegistry:
    """Return the process-local default manifest registry."""
    return _DEFAULT_REGISTRY


def get_component(component_id: ComponentId) -> ResourceManifest:
    """Return one registered component by id."""
    return _DEFAULT_REGISTRY.get_component(component_id)
