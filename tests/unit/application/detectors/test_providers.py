"""Tests for application/detectors/providers.py.

Tests:
- Structural validity of provider records
- ProviderPolicy heuristics (suspicious names, ignored components)
- Exclusion by simple or fully qualified name, per component and per finding
"""

from injectcheck.application.detectors.providers import (
    ProviderPolicy,
    all_excluded,
    is_blank,
    is_excluded,
    is_well_formed,
)
from injectcheck.domain.model.component import Provider
from injectcheck.domain.model.configuration import AnalysisConfig
from tests.factories import make_component, make_provider


class TestIsBlank:
    """Tests for is_blank."""

    def test_blank_values(self) -> None:
        assert is_blank(None)
        assert is_blank("")
        assert is_blank("   ")

    def test_non_blank(self) -> None:
        assert not is_blank("A")


class TestIsExcluded:
    """Tests for is_excluded."""

    def test_by_fully_qualified_name(self) -> None:
        assert is_excluded(make_component("A"), frozenset({"com.example.A"}))

    def test_by_simple_name(self) -> None:
        assert is_excluded(make_component("A"), frozenset({"A"}))

    def test_not_excluded(self) -> None:
        assert not is_excluded(make_component("A"), frozenset())
        assert not is_excluded(make_component("A"), frozenset({"com.example.B"}))


class TestAllExcluded:
    """Tests for all_excluded."""

    def test_every_owner_excluded(self) -> None:
        owners = [make_component("A"), make_component("B")]

        assert all_excluded(owners, frozenset({"A", "com.example.B"}))

    def test_one_owner_outside_exclusion(self) -> None:
        owners = [make_component("A"), make_component("C")]

        assert not all_excluded(owners, frozenset({"A"}))

    def test_empty_exclusion(self) -> None:
        assert not all_excluded([make_component("A")], frozenset())


class TestIsWellFormed:
    """Tests for is_well_formed."""

    def test_valid(self) -> None:
        assert is_well_formed(make_provider("provideA", "A"))

    def test_blank_method_name(self) -> None:
        assert not is_well_formed(make_provider(" ", "A"))

    def test_blank_return_type(self) -> None:
        assert not is_well_formed(make_provider("provideA", ""))

    def test_blank_provides_type(self) -> None:
        assert not is_well_formed(make_provider("provideA", "A", provides_type=""))

    def test_named_without_qualifier(self) -> None:
        assert not is_well_formed(Provider("provideA", "A", is_named=True, named_qualifier=None))

    def test_several_collection_flags(self) -> None:
        assert is_well_formed(make_provider("provideA", "A", into_list=True))
        assert not is_well_formed(make_provider("provideA", "A", into_set=True, into_list=True))


class TestProviderPolicy:
    """Tests for ProviderPolicy."""

    def test_suspicious_is_case_insensitive_substring(self) -> None:
        policy = ProviderPolicy()

        assert policy.is_suspicious(make_provider("provideTEMPCache", "Cache"))
        assert policy.is_suspicious(make_provider("provideCacheForTests", "Cache"))
        assert not policy.is_suspicious(make_provider("provideCache", "Cache"))

    def test_custom_suspicious_names(self) -> None:
        policy = ProviderPolicy(suspicious_names=("legacy",))

        assert policy.is_suspicious(make_provider("provideLegacyCache", "Cache"))
        assert not policy.is_suspicious(make_provider("provideTempCache", "Cache"))

    def test_ignored_components(self) -> None:
        policy = ProviderPolicy(ignored_components=frozenset({"FakeModule"}))

        assert policy.is_ignored(make_component("FakeModule"))
        assert not policy.is_ignored(make_component("AppModule"))

    def test_from_config(self) -> None:
        config = AnalysisConfig(
            suspicious_provider_names=("mock",),
            ignored_component_names=frozenset({"com.example.Fakes"}),
        )

        policy = ProviderPolicy.from_config(config)

        assert policy.suspicious_names == ("mock",)
        assert policy.ignored_components == frozenset({"com.example.Fakes"})

    def test_active_providers(self) -> None:
        good = make_provider("provideCache", "Cache")
        suspicious = make_provider("provideOldCache", "Cache")
        malformed = make_provider("provideBroken", "")
        module = make_component("M", providers=(good, suspicious, malformed))

        active = list(ProviderPolicy().active_providers([module]))

        assert active == [(module, good)]
