"""
Tests for identity extraction from claims.
"""

import pytest

import jwt_guard as m


class TestUserId:
    def test_default_claim(self):
        ca = m.ClaimAccess(m.IdentityMapping())
        assert ca.user_id({"userId": "test"}) == "test"

    def test_custom_claim(self):
        ca = m.ClaimAccess(m.IdentityMapping(user_id_claim="sub"))
        assert ca.user_id({"sub": "test", "userId": "other"}) == "test"

    @pytest.mark.parametrize("claims", [{}, {"userId": ""}, {"userId": 42}])
    def test_missing_or_invalid(self, claims: dict[str, object]):
        ca = m.ClaimAccess(m.IdentityMapping())

        with pytest.raises(m.InvalidToken, match="Missing 'userId' claim"):
            ca.user_id(claims)


class TestRoles:
    def test_roles_from_list_filtering_non_strings(self):
        ca = m.ClaimAccess(m.IdentityMapping())
        assert ca.roles({"roles": ["admin", 123, "user", "admin"]}) == ("admin", "user")

    def test_roles_from_single_string(self):
        ca = m.ClaimAccess(m.IdentityMapping())
        assert ca.roles({"roles": "admin"}) == ("admin",)

    def test_roles_missing_is_empty(self):
        ca = m.ClaimAccess(m.IdentityMapping())
        assert ca.roles({}) == ()

    def test_roles_custom_claim(self):
        ca = m.ClaimAccess(m.IdentityMapping(roles_claim="authorities"))
        assert ca.roles({"authorities": ["role1"], "roles": ["x"]}) == ("role1",)


def test_identity():
    ca = m.ClaimAccess(m.IdentityMapping())
    identity = ca.identity({"userId": "test", "roles": ["role1", "role2"]})

    assert identity == m.Identity(user_id="test", roles=("role1", "role2"))
    assert identity.has_role("role1")
    assert not identity.has_role("admin")
