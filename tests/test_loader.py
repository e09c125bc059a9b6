"""Tests for collaborator module loading."""

import pytest

from member_score.loader import DEPENDENCIES, DependencyError, load_dependencies


def test_loads_all_collaborators():
    modules = load_dependencies()
    assert set(modules) == {"i18n", "admin", "public", "integrations"}
    assert hasattr(modules["i18n"], "MemberScoreI18n")
    assert hasattr(modules["admin"], "MemberScoreAdmin")
    assert hasattr(modules["public"], "MemberScorePublic")
    assert hasattr(modules["integrations"], "MembershipPluginIntegrations")


def test_four_dependencies():
    assert len(DEPENDENCIES) == 4


def test_missing_module_is_fatal():
    modules = dict(DEPENDENCIES, settings="member_score.does_not_exist")
    with pytest.raises(DependencyError) as excinfo:
        load_dependencies(modules)
    assert excinfo.value.module == "member_score.does_not_exist"
    assert "does_not_exist" in str(excinfo.value)


def test_dependency_error_is_import_error():
    with pytest.raises(ImportError):
        load_dependencies({"x": "member_score_missing_package"})
