import pytest

from role_authz.scopes import (
    DEFAULT_CONFIG,
    ScopeConfig,
    equal_scopes,
    has_all_scopes,
    has_any_scopes,
    has_scope,
    join_scopes,
    normalize_scopes,
    parse_scopes,
    scope_matches,
    validate_scopes,
)


class TestScopeMatching:
    def test_exact_match(self) -> None:
        assert scope_matches("read", "read") is True

    def test_no_match_different_scope(self) -> None:
        assert scope_matches("read", "write") is False

    def test_global_wildcard_matches_everything(self) -> None:
        assert scope_matches("anything.goes.here", "*") is True
        assert scope_matches("read", "*") is True

    def test_namespace_wildcard_matches_children(self) -> None:
        assert scope_matches("admin.users", "admin.*") is True
        assert scope_matches("admin.users.delete", "admin.*") is True

    def test_namespace_wildcard_does_not_match_bare_namespace(self) -> None:
        assert scope_matches("admin", "admin.*") is False

    def test_namespace_wildcard_does_not_match_sibling_prefix(self) -> None:
        assert scope_matches("adminx.read", "admin.*") is False
        assert scope_matches("users.admin", "admin.*") is False

    def test_nested_namespace_wildcard(self) -> None:
        assert scope_matches("org.tag.read", "org.tag.*") is True
        assert scope_matches("org.credit.read", "org.tag.*") is False

    def test_mid_string_wildcard_only_matches_exactly(self) -> None:
        assert scope_matches("admin.users.read", "admin.*.read") is False
        assert scope_matches("admin.*.read", "admin.*.read") is True

    def test_shorter_scope_does_not_match_longer_pattern(self) -> None:
        assert scope_matches("report", "report.read") is False

    def test_custom_config(self) -> None:
        config = ScopeConfig(separator=",", delimiter=":", wildcard="%")
        assert scope_matches("report:read", "report:%", config=config) is True
        assert scope_matches("report.read", "report.*", config=config) is False
        assert scope_matches("x", "%", config=config) is True


class TestScopeConfig:
    def test_defaults(self) -> None:
        assert DEFAULT_CONFIG == ScopeConfig(separator=" ", delimiter=".", wildcard="*")

    @pytest.mark.parametrize("field", ["separator", "delimiter", "wildcard"])
    def test_rejects_empty_values(self, field: str) -> None:
        with pytest.raises(ValueError, match=field):
            ScopeConfig(**{field: ""})


class TestParseAndJoin:
    def test_parse_splits_on_separator(self) -> None:
        assert parse_scopes("read write admin.users") == ["read", "write", "admin.users"]

    def test_parse_drops_empty_entries(self) -> None:
        assert parse_scopes("  read   write ") == ["read", "write"]

    def test_parse_empty_input(self) -> None:
        assert parse_scopes("") == []
        assert parse_scopes("   ") == []

    def test_parse_with_custom_separator(self) -> None:
        config = ScopeConfig(separator=",")
        assert parse_scopes("read, write,,admin.*", config=config) == ["read", "write", "admin.*"]

    def test_join(self) -> None:
        assert join_scopes(["read", "write", "admin.*"]) == "read write admin.*"
        assert join_scopes([]) == ""


class TestSetOperations:
    def test_has_scope(self) -> None:
        assert has_scope(["admin.*", "read"], "admin.users") is True
        assert has_scope(["admin.*", "read"], "write") is False
        assert has_scope([], "read") is False

    def test_has_all_scopes(self) -> None:
        assert has_all_scopes(["admin.*", "read", "write"], ["admin.users", "read"]) is True
        assert has_all_scopes(["read"], ["read", "write"]) is False

    def test_has_all_scopes_empty_required(self) -> None:
        assert has_all_scopes([], []) is True
        assert has_all_scopes(["read"], []) is True

    def test_has_all_scopes_empty_scopes(self) -> None:
        assert has_all_scopes([], ["read"]) is False

    def test_has_all_scopes_global_wildcard(self) -> None:
        assert has_all_scopes(["*"], ["anything", "else.entirely"]) is True

    def test_has_any_scopes(self) -> None:
        assert has_any_scopes(["read", "write"], ["delete", "read"]) is True
        assert has_any_scopes(["read", "write"], ["delete"]) is False

    def test_has_any_scopes_empty_required(self) -> None:
        assert has_any_scopes([], []) is True

    def test_has_any_scopes_global_wildcard(self) -> None:
        assert has_any_scopes(["*"], ["delete"]) is True


class TestValidateScopes:
    def test_valid_with_wildcards(self) -> None:
        assert validate_scopes(["admin.read", "user.write"], ["admin.*", "user.*", "system.*"]) is True

    def test_invalid_scope(self) -> None:
        assert validate_scopes(["admin.read", "billing.write"], ["admin.*", "user.*"]) is False

    def test_empty_candidates_are_valid(self) -> None:
        assert validate_scopes([], []) is True
        assert validate_scopes([], ["read"]) is True

    def test_empty_allowed_rejects(self) -> None:
        assert validate_scopes(["read"], []) is False

    def test_global_wildcard_allows_everything(self) -> None:
        assert validate_scopes(["a", "b.c"], ["*"]) is True

    def test_large_collections_give_same_result(self) -> None:
        allowed = [f"exact{i}" for i in range(12)] + ["ns.*"]
        valid = ["exact0", "exact5", "exact11", "ns.a", "ns.b.c", "exact3"]
        invalid = valid + ["ns"]

        assert validate_scopes(valid, allowed) is True
        assert validate_scopes(invalid, allowed) is False
        # Small inputs take the plain path and must agree.
        assert validate_scopes(valid[:2], allowed) is True
        assert validate_scopes(["ns"], allowed) is False


class TestNormalizeAndEqual:
    def test_normalize_dedupes_and_sorts(self) -> None:
        assert normalize_scopes(["write", "read", "read"]) == ["read", "write"]
        assert normalize_scopes(["write", "read", "read", "admin.*"]) == ["admin.*", "read", "write"]

    def test_normalize_empty(self) -> None:
        assert normalize_scopes([]) == []

    def test_normalize_large_input(self) -> None:
        scopes = [f"s{i % 7}" for i in range(50)]
        assert normalize_scopes(scopes) == [f"s{i}" for i in range(7)]

    def test_equal_ignores_order(self) -> None:
        assert equal_scopes(["read", "write"], ["write", "read"]) is True

    def test_equal_different_elements(self) -> None:
        assert equal_scopes(["read", "write"], ["read", "delete"]) is False
        assert equal_scopes(["read"], ["read", "write"]) is False

    def test_equal_respects_multiplicity(self) -> None:
        assert equal_scopes(["a", "a", "b"], ["a", "b", "b"]) is False
        assert equal_scopes(["a", "a", "b"], ["b", "a", "a"]) is True

    def test_equal_empty(self) -> None:
        assert equal_scopes([], []) is True
