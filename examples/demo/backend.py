from flask import Flask, jsonify, request
from flask_cors import CORS

from examples.demo.app_config import GLOBAL_CONFIG, auth, auth_config
from jwt_guard import TokenBuilder, configure_logging, current_identity

# Demo users; a real deployment checks credentials against its user store.
USERS = {
    "alice": ("wonderland", ["admin", "user"]),
    "bob": ("builder", ["user"]),
}


def create_app() -> Flask:
    """
    Create and configure the demo Flask application.

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)
    auth.init_app(app)

    CORS(
        app,
        origins=["https://localhost:5000", "https://127.0.0.1:5000"],
        supports_credentials=True,
        allow_headers=["Content-Type", "Authorization", auth_config.header_name],
        expose_headers=[auth_config.header_name],
        methods=["GET", "POST", "OPTIONS"],
        max_age=3600,
    )

    @app.post("/login")
    def login():
        """Issue a token for valid demo credentials."""
        body = request.get_json(silent=True) or {}
        user = USERS.get(body.get("username", ""))
        if user is None or user[0] != body.get("password"):
            return jsonify({"status": "denied", "message": "Bad credentials"}), 401

        token = (
            TokenBuilder.create(auth_config.secret, auth_config.algorithm)
            .user_id(body["username"])
            .roles(user[1])
            .expiry_secs(GLOBAL_CONFIG["TOKEN_TTL_SECONDS"])
            .generate_token_id(True)
            .build()
        )
        return jsonify({"status": "success", "token": token}), 200

    @app.get("/api/profile")
    @auth.require()
    def profile():
        identity = current_identity()
        return jsonify(
            {"status": "success", "user": identity.user_id, "roles": list(identity.roles)}
        ), 200

    @app.errorhandler(401)
    def unauthorized(error):
        """Handle unauthorized access errors."""
        return jsonify(
            {
                "status": "denied",
                "message": error.description,
                "authenticated": False,
            }
        ), 401

    return app


if __name__ == "__main__":
    configure_logging(GLOBAL_CONFIG["LOG_LEVEL"])
    create_app().run(port=5001)
