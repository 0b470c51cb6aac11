from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.user_service

    @app.route("/api/users", methods=["GET"], endpoint="users_list")
    def users_list():
        users = service.list(request.args.get("q", ""))
        return jsonify({"success": True, "users": [u.as_dict() for u in users]})

    @app.route("/api/users/<user_id>", methods=["POST"], endpoint="users_update")
    def users_update(user_id: str):
        data = request.get_json(silent=True) or {}
        profile = service.update_profile(
            user_id,
            name=data.get("name"),
            email=data.get("email"),
            phone=data.get("phone"),
            role=data.get("role"),
        )
        return jsonify({"success": True, "user": profile.to_payload(), "message": "User updated successfully!"})
