import os

from dotenv import load_dotenv

from jwt_guard import AuthConfig, AuthExtension

load_dotenv()
GLOBAL_CONFIG = {
    "JWT_SECRET": os.environ.get("JWT_SECRET", "change-me"),
    "JWT_RENEW": os.environ.get("JWT_RENEW", "true"),
    "JWT_COOKIE_NAME": os.environ.get("JWT_COOKIE_NAME", "auth_token"),
    "TOKEN_TTL_SECONDS": int(os.environ.get("TOKEN_TTL_SECONDS", "3600")),
    "LOG_LEVEL": os.environ.get("LOG_LEVEL", "info"),
}

# configuration for token verification and renewal
auth_config = AuthConfig.from_mapping(GLOBAL_CONFIG)
# auth will be the ext imported in the Flask app
auth = AuthExtension(auth_config)
