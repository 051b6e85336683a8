"""Tests for application/detectors/unresolved.py.

Tests:
- Lookup order (exact, "unnamed", simple name, generic, inheritance)
- Policy interaction (suspicious providers still resolve, ignored ones do not)
- Issue message, payload and fix text
"""

from injectcheck.application.detectors.providers import ProviderPolicy
from injectcheck.application.detectors.unresolved import (
    UNNAMED_QUALIFIER,
    ProviderIndex,
    UnresolvedDependencyDetector,
    describe_qualifier,
    provider_key,
    unresolved_fix,
)
from injectcheck.domain.model.component import Component, Dependency, Provider
from injectcheck.domain.model.configuration import AnalysisConfig
from injectcheck.domain.model.enums import IssueType, Severity
from injectcheck.domain.model.graph import DependencyGraph
from injectcheck.domain.model.issue import UnresolvedDependencyDetails
from tests.factories import make_component, make_dependency, make_provider

GRAPH = DependencyGraph()
USER_SERVICE = "com.example.UserService"


class FakeOracle:
    """Supertype oracle backed by a dict."""

    def __init__(self, supertypes: dict[str, frozenset[str]]) -> None:
        self._supertypes = supertypes

    def supertypes(self, type_name: str) -> frozenset[str]:
        return self._supertypes.get(type_name, frozenset())


def _consumer(*dependencies: Dependency, source_file: str | None = None) -> Component:
    return make_component("Screen", dependencies=dependencies, source_file=source_file)


def _module(*providers: Provider) -> Component:
    return make_component("AppModule", providers=providers)


class TestHelpers:
    """Tests for key and qualifier descriptions."""

    def test_provider_key(self) -> None:
        assert provider_key("T", None) == "T"
        assert provider_key("T", "q") == "T@q"

    def test_describe_qualifier(self) -> None:
        assert describe_qualifier(None) == "unqualified"
        assert describe_qualifier("q") == "@Named(q)"


class TestProviderIndex:
    """Tests for ProviderIndex.build."""

    def test_indexes_return_and_provides_type(self) -> None:
        module = _module(
            make_provider("bindRepo", "com.example.RepoImpl", provides_type="com.example.Repo")
        )

        index = ProviderIndex.build([module], ProviderPolicy())

        assert ("com.example.RepoImpl", None) in index.exact
        assert ("com.example.Repo", None) in index.exact
        assert ("Repo", None) in index.by_simple_name

    def test_generic_index(self) -> None:
        module = _module(make_provider("provideUsers", "java.util.List<com.example.User>"))

        index = ProviderIndex.build([module], ProviderPolicy())

        assert ("java.util.List", None) in index.generic

    def test_skips_malformed_and_ignored(self) -> None:
        fake = make_component("FakeModule", providers=(make_provider("provideA", "A"),))
        broken = _module(make_provider("provideB", " "))
        policy = ProviderPolicy(ignored_components=frozenset({"FakeModule"}))

        index = ProviderIndex.build([fake, broken], policy)

        assert index.entries == []


class TestResolution:
    """Tests for UnresolvedDependencyDetector.detect."""

    def test_missing_provider_reported(self) -> None:
        consumer = _consumer(make_dependency("userService", USER_SERVICE))

        (issue,) = UnresolvedDependencyDetector().detect([consumer], GRAPH)

        assert issue.type is IssueType.UNRESOLVED_DEPENDENCY
        assert issue.severity is Severity.ERROR
        assert issue.message == (
            "Unresolved dependency: no provider found for com.example.UserService "
            "required by com.example.Screen.userService"
        )
        assert issue.component_name == "com.example.Screen"

    def test_adding_provider_resolves(self) -> None:
        consumer = _consumer(make_dependency("userService", USER_SERVICE))
        module = _module(make_provider("provideUserService", USER_SERVICE))

        assert UnresolvedDependencyDetector().detect([consumer, module], GRAPH) == ()

    def test_explicit_unnamed_qualifier_resolves(self) -> None:
        consumer = _consumer(make_dependency("userService", USER_SERVICE))
        module = _module(make_provider("provideUserService", USER_SERVICE, UNNAMED_QUALIFIER))

        assert UnresolvedDependencyDetector().detect([consumer, module], GRAPH) == ()

    def test_simple_name_resolves(self) -> None:
        consumer = _consumer(make_dependency("userService", "UserService"))
        module = _module(make_provider("provideUserService", USER_SERVICE))

        assert UnresolvedDependencyDetector().detect([consumer, module], GRAPH) == ()

    def test_generic_relaxation_resolves(self) -> None:
        consumer = _consumer(make_dependency("users", "java.util.List<com.example.User>"))
        module = _module(make_provider("provideAdmins", "java.util.List<com.example.Admin>"))

        assert UnresolvedDependencyDetector().detect([consumer, module], GRAPH) == ()

    def test_qualifier_must_match(self) -> None:
        consumer = _consumer(make_dependency("db", "com.example.Db", "main"))
        module = _module(make_provider("provideDb", "com.example.Db"))

        (issue,) = UnresolvedDependencyDetector().detect([consumer, module], GRAPH)

        assert isinstance(issue.details, UnresolvedDependencyDetails)
        assert issue.details.near_misses == ("com.example.AppModule.provideDb (unqualified)",)
        assert "with @Named(main)" in issue.message

    def test_suspicious_provider_still_resolves(self) -> None:
        consumer = _consumer(make_dependency("userService", USER_SERVICE))
        module = _module(make_provider("provideTempUserService", USER_SERVICE))

        assert UnresolvedDependencyDetector().detect([consumer, module], GRAPH) == ()

    def test_ignored_component_does_not_resolve(self) -> None:
        consumer = _consumer(make_dependency("userService", USER_SERVICE))
        module = _module(make_provider("provideUserService", USER_SERVICE))
        config = AnalysisConfig(ignored_component_names=frozenset({"AppModule"}))

        issues = UnresolvedDependencyDetector.from_config(config).detect([consumer, module], GRAPH)

        assert len(issues) == 1

    def test_excluded_consumer_skipped(self) -> None:
        consumer = _consumer(make_dependency("userService", USER_SERVICE))

        issues = UnresolvedDependencyDetector().detect(
            [consumer], GRAPH, frozenset({"com.example.Screen"})
        )

        assert issues == ()

    def test_blank_target_skipped(self) -> None:
        consumer = _consumer(make_dependency("nothing", "  "))

        assert UnresolvedDependencyDetector().detect([consumer], GRAPH) == ()


class TestInheritance:
    """Inheritance matches need a SupertypeOracle."""

    def test_without_oracle_no_match(self) -> None:
        consumer = _consumer(make_dependency("repo", "com.example.Repo"))
        module = _module(make_provider("provideRepo", "com.example.SqlStore"))

        assert len(UnresolvedDependencyDetector().detect([consumer, module], GRAPH)) == 1

    def test_oracle_resolves_subtype(self) -> None:
        consumer = _consumer(make_dependency("repo", "com.example.Repo"))
        module = _module(make_provider("provideRepo", "com.example.SqlStore"))
        oracle = FakeOracle({"com.example.SqlStore": frozenset({"com.example.Repo"})})

        detector = UnresolvedDependencyDetector(oracle=oracle)

        assert detector.detect([consumer, module], GRAPH) == ()


class TestIssueContent:
    """Payload and fix text."""

    def test_payload_and_location(self) -> None:
        consumer = _consumer(
            make_dependency("userService", USER_SERVICE), source_file="app/Screen.kt"
        )

        (issue,) = UnresolvedDependencyDetector().detect([consumer], GRAPH)

        assert issue.source_location == "app/Screen.kt"
        assert issue.details == UnresolvedDependencyDetails(
            target_type=USER_SERVICE,
            property_name="userService",
            is_named=False,
            named_qualifier=None,
            consumer_component="com.example.Screen",
        )

    def test_fix_template(self) -> None:
        fix = unresolved_fix(make_dependency("userService", USER_SERVICE), ())

        assert fix == (
            "Add a provider for com.example.UserService:\n"
            "  @Provides fun provideUserService(): com.example.UserService"
        )

    def test_named_fix_with_hints(self) -> None:
        dependency = make_dependency("db", "com.example.Db", "main", factory=True, loadable=True)

        fix = unresolved_fix(dependency, ("com.example.AppModule.provideDb (unqualified)",))

        lines = fix.splitlines()
        assert lines[0] == "Add a provider for com.example.Db with @Named(main):"
        assert lines[1] == '  @Provides @Named("main") fun provideDb(): com.example.Db'
        assert lines[2].startswith("Factory injection")
        assert lines[3].startswith("Loadable injection")
        assert lines[-1] == "  - com.example.AppModule.provideDb (unqualified)"
