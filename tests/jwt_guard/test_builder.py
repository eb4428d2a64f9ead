import pytest

import jwt_guard as m

SECRET = "my secret"


def test_fluent_build_round_trip():
    token = (
        m.TokenBuilder.create(SECRET)
        .user_id("test")
        .roles(["role1", "role2"])
        .claim("tenant", "acme")
        .expiry_secs(10000)
        .build()
    )

    verified = m.TokenCodec().verify(token, SECRET)
    assert verified.claims["userId"] == "test"
    assert verified.claims["roles"] == ["role1", "role2"]
    assert verified.claims["tenant"] == "acme"
    assert verified.expires_at == verified.issued_at + 10000


def test_build_without_roles_fails_fast():
    builder = m.TokenBuilder.create(SECRET).user_id("test")

    with pytest.raises(m.MissingMandatoryClaims, match="userId and roles"):
        builder.build()


def test_each_build_generates_a_new_token_id():
    builder = (
        m.TokenBuilder.create(SECRET).user_id("test").roles([]).generate_token_id(True)
    )
    codec = m.TokenCodec()

    first = codec.verify(builder.build(), SECRET)
    second = codec.verify(builder.build(), SECRET)

    assert first.token_id != second.token_id


def test_algorithm_switch():
    token = m.TokenBuilder.create(SECRET).algorithm("HS384").user_id("u").roles([]).build()

    verified = m.TokenCodec("HS384").verify(token, SECRET)
    assert verified.header["alg"] == "HS384"


def test_issued_at_can_be_disabled():
    token = m.TokenBuilder.create(SECRET).issued_at(False).user_id("u").roles([]).build()
    assert m.TokenCodec().verify(token, SECRET).issued_at is None


def test_from_token_verifies_first():
    token = m.TokenBuilder.create(SECRET).user_id("u").roles(["r"]).build()

    with pytest.raises(m.InvalidSignature):
        m.TokenBuilder.from_token(token, "wrong secret")


def test_from_token_allows_further_edits():
    token = (
        m.TokenBuilder.create(SECRET)
        .user_id("u")
        .roles(["r"])
        .expiry_secs(60)
        .not_before_leeway(10)
        .build()
    )

    renewed = m.TokenBuilder.from_token(token, SECRET).roles(["r", "admin"]).build()

    verified = m.TokenCodec().verify(renewed, SECRET)
    assert verified.claims["roles"] == ["r", "admin"]
    assert verified.expires_at - verified.issued_at == 60
    assert verified.issued_at - verified.not_before == 10


def test_from_verified_requires_issued_at():
    verified = m.VerifiedToken(claims={"userId": "u", "roles": []}, header={})

    with pytest.raises(m.MissingIssuedAt):
        m.TokenBuilder.from_verified(verified, SECRET)


def test_empty_secret_rejected():
    with pytest.raises(ValueError):
        m.TokenBuilder.create("")


def test_single_string_role_is_not_split():
    token = m.TokenBuilder.create(SECRET).user_id("u").roles("admin").build()

    assert m.TokenCodec().verify(token, SECRET).claims["roles"] == ["admin"]
