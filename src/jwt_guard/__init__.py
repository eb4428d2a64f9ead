"""
Signed-token authentication core with a Flask binding.

High-level flow (per request)
-----------------------------
1. The host says whether the requested resource requires authentication.
2. `ChainExtractor` pulls the raw token from, in order: the custom `X-Auth`
   header, `Authorization: Bearer <token>`, the `access_token` parameter,
   and (when configured) a cookie.
3. `TokenCodec.verify(token, secret)` checks the HMAC signature and expiry.
4. `ClaimAccess` maps the claims to an `Identity` (userId + roles), which is
   attached to the request together with the `TOKEN` auth-type marker.
5. With renewal on, the token is rebuilt (exp/nbf recomputed from a new iat,
   fresh jti) and returned in the `X-Auth` response header.

Security notes
--------------
- Never trust claims until signature verification succeeds.
- Only the configured HMAC algorithm is accepted (no `none`, no asymmetric).
- Rejections always answer 401 with "Please login first" or
  "Token not valid. Cause: <reason>".

Example usage
-------------

.. code-block:: python

    from jwt_guard import AuthConfig, AuthExtension, TokenBuilder

    config = AuthConfig(secret="my secret", renew=True)
    auth = AuthExtension(config)
    auth.init_app(app)

    token = (
        TokenBuilder.create(config.secret)
        .user_id("test")
        .roles(["role1", "role2"])
        .expiry_secs(3600)
        .build()
    )

    @app.route("/protected")
    @auth.require()
    def protected_route():
        return {"user": current_identity().user_id}
"""

# Builder
from .builder import TokenBuilder

# Claims and options
from .claims import ClaimSet

# Codec
from .codec import TokenCodec, Verification, VerifiedToken

# Configuration
from .config import AuthConfig

# Engine
from .engine import AuthDecisionEngine, AuthState, Decision

# Errors
from .errors import (
    AuthError,
    ExpiredToken,
    InvalidPolicy,
    InvalidSignature,
    InvalidToken,
    MalformedToken,
    MissingIssuedAt,
    MissingMandatoryClaims,
    MissingToken,
    PrematureToken,
)

# Extractors
from .extractors import (
    BearerExtractor,
    ChainExtractor,
    CookieExtractor,
    CustomHeaderExtractor,
    Extractor,
    ParameterExtractor,
)

# Flask extension
from .flask_extension import (
    AuthExtension,
    FlaskRequestSource,
    FlaskResponseSink,
    current_identity,
)

# Identity
from .identity import ClaimAccess, Identity, IdentityMapping

# Logging
from .log_config import configure_logging
from .options import OptionsManager, RenewalPolicy

# Protocols
from .protocols import Claims, ClaimValue, NextStage, RequestSource, ResponseSink

__all__ = [
    # Errors
    "AuthError",
    "ExpiredToken",
    "InvalidPolicy",
    "InvalidSignature",
    "InvalidToken",
    "MalformedToken",
    "MissingIssuedAt",
    "MissingMandatoryClaims",
    "MissingToken",
    "PrematureToken",
    # Protocols
    "Claims",
    "ClaimValue",
    "NextStage",
    "RequestSource",
    "ResponseSink",
    # Claims and options
    "ClaimSet",
    "OptionsManager",
    "RenewalPolicy",
    # Codec
    "TokenCodec",
    "Verification",
    "VerifiedToken",
    # Builder
    "TokenBuilder",
    # Identity
    "ClaimAccess",
    "Identity",
    "IdentityMapping",
    # Extractors
    "BearerExtractor",
    "ChainExtractor",
    "CookieExtractor",
    "CustomHeaderExtractor",
    "Extractor",
    "ParameterExtractor",
    # Configuration
    "AuthConfig",
    # Engine
    "AuthDecisionEngine",
    "AuthState",
    "Decision",
    # Flask extension
    "AuthExtension",
    "FlaskRequestSource",
    "FlaskResponseSink",
    "current_identity",
    # Logging
    "configure_logging",
]
