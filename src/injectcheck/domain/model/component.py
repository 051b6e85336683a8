"""Component records produced by the extraction collaborator.

These are read-only inputs. They are NOT validated on construction:
malformed records (blank names or types) are filtered inside detectors.
"""

from __future__ import annotations

from dataclasses import dataclass

from injectcheck.domain.model.enums import ComponentKind


def base_type(type_name: str) -> str:
    """Type name without generic arguments: 'a.List<a.User>' -> 'a.List'."""
    return type_name.split("<", 1)[0]


def simple_name(type_name: str) -> str:
    """Unqualified type name, generic arguments kept.

    'com.x.UserService' -> 'UserService'
    'java.util.List<com.x.User>' -> 'List<com.x.User>'
    """
    base, sep, generics = type_name.partition("<")
    return base.rsplit(".", 1)[-1] + sep + generics


@dataclass(frozen=True, slots=True)
class Dependency:
    """Injection point declared on a component.

    Attributes:
        property_name: Name of the injected property
        target_type: Requested type (possibly fully qualified, possibly generic)
        is_named: Requested with a named qualifier
        named_qualifier: Qualifier string (meaningful only if is_named)
        is_singleton: Consumer expects a singleton-scoped value
        is_factory: Injected as a factory
        is_loadable: Injected lazily
    """

    property_name: str
    target_type: str
    is_named: bool = False
    named_qualifier: str | None = None
    is_singleton: bool = False
    is_factory: bool = False
    is_loadable: bool = False

    @property
    def qualifier(self) -> str | None:
        """Qualifier if named, else None."""
        return self.named_qualifier if self.is_named else None


@dataclass(frozen=True, slots=True)
class Provider:
    """Provider method declared on a component.

    Attributes:
        method_name: Provider method name
        return_type: Declared return type
        provides_type: Overrides return_type when present (e.g. binds an interface)
        is_named: Provided under a named qualifier
        named_qualifier: Qualifier string (meaningful only if is_named)
        is_singleton: Singleton-scoped
        is_into_set: Multibinding contribution to a set
        is_into_list: Multibinding contribution to a list
        is_into_map: Multibinding contribution to a map
    """

    method_name: str
    return_type: str
    provides_type: str | None = None
    is_named: bool = False
    named_qualifier: str | None = None
    is_singleton: bool = False
    is_into_set: bool = False
    is_into_list: bool = False
    is_into_map: bool = False

    @property
    def effective_type(self) -> str:
        """Type this provider supplies: provides_type if present, else return_type."""
        return self.provides_type if self.provides_type is not None else self.return_type

    @property
    def qualifier(self) -> str | None:
        """Qualifier if named, else None."""
        return self.named_qualifier if self.is_named else None

    @property
    def collection_flag_count(self) -> int:
        """Number of multibinding flags set."""
        return sum((self.is_into_set, self.is_into_list, self.is_into_map))

    @property
    def is_collection(self) -> bool:
        """Contributes to a multibinding collection."""
        return self.collection_flag_count > 0

    def supplies(self, type_name: str) -> bool:
        """Exact match of return_type or provides_type."""
        return type_name in (self.return_type, self.provides_type)


@dataclass(frozen=True, slots=True)
class Component:
    """DI component: a class with injection points and/or provider methods.

    Identity key is fully_qualified_name.

    Attributes:
        class_name: Simple class name
        package_name: Package (may be empty)
        kind: Role in the graph
        dependencies: Injection points
        providers: Provider methods
        source_file: Path of the declaring source file, if known
    """

    class_name: str
    package_name: str
    kind: ComponentKind = ComponentKind.COMPONENT
    dependencies: tuple[Dependency, ...] = ()
    providers: tuple[Provider, ...] = ()
    source_file: str | None = None

    @property
    def fully_qualified_name(self) -> str:
        """packageName.className (className alone for the default package)."""
        if not self.package_name:
            return self.class_name
        return f"{self.package_name}.{self.class_name}"

    @property
    def has_graph_information(self) -> bool:
        """Component declares at least one dependency or provider."""
        return bool(self.dependencies or self.providers)

    def provider_path(self, provider: Provider) -> str:
        """Fully qualified method path: pkg.Class.method."""
        return f"{self.fully_qualified_name}.{provider.method_name}"

    def matches_name(self, name: str) -> bool:
        """Name refers to this component (simple or fully qualified)."""
        return name in (self.class_name, self.fully_qualified_name)
