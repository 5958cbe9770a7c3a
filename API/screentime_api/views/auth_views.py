from flask import Blueprint, jsonify, request, current_app

from ..auth import token_required, simulated_latency
from ..schemas import SignUpSchema, SignInSchema, CreatePasswordSchema, EmailSchema

auth_blueprint = Blueprint('auth', __name__)


@auth_blueprint.route('/auth/signup', methods=['POST'])
@token_required
@simulated_latency
def sign_up():
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid input"}), 400
    payload = SignUpSchema.model_validate(data)
    user = current_app.auth_service.sign_up(payload.email, payload.password, payload.username)
    return jsonify(user.to_dict()), 201


@auth_blueprint.route('/auth/signin', methods=['POST'])
@token_required
@simulated_latency
def sign_in():
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid input"}), 400
    payload = SignInSchema.model_validate(data)
    user = current_app.auth_service.sign_in(payload.email, payload.password, payload.user_tid)
    return jsonify(user.to_dict()), 200


@auth_blueprint.route('/auth/password', methods=['POST'])
@token_required
@simulated_latency
def create_password():
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid input"}), 400
    payload = CreatePasswordSchema.model_validate(data)
    user = current_app.auth_service.create_password(payload.email, payload.password, payload.user_tid)
    return jsonify(user.to_dict()), 200


@auth_blueprint.route('/auth/reset_password', methods=['POST'])
@token_required
@simulated_latency
def reset_password():
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid input"}), 400
    payload = EmailSchema.model_validate(data)
    if current_app.auth_service.reset_password(payload.email):
        return jsonify({"message": "Password reset link sent"}), 200
    return jsonify({"error": "User not found"}), 404


@auth_blueprint.route('/auth/signout/<string:user_oid>', methods=['POST'])
@token_required
def sign_out(user_oid):
    current_app.auth_service.sign_out(user_oid)
    return jsonify({"message": "Signed out"}), 200


@auth_blueprint.route('/auth/session/<string:user_oid>', methods=['GET'])
@token_required
def check_session(user_oid):
    return jsonify({"authenticated": current_app.auth_service.check_session(user_oid)}), 200
