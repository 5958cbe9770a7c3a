from flask import Blueprint, jsonify, request, current_app

from ..auth import token_required, simulated_latency
from ..errors import NotFoundError
from ..schemas import ExtensionRequestSchema, ExtensionResponseSchema

extension_blueprint = Blueprint('extension', __name__)


@extension_blueprint.route('/extension', methods=['POST'])
@token_required
@simulated_latency
def create_extension_request():
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid input"}), 400
    payload = ExtensionRequestSchema.model_validate(data)

    group_oid = payload.group_oid
    if not group_oid:
        group = current_app.group_tracker.fetch_user_group(payload.user_oid)
        if not group:
            raise NotFoundError("Join a group before requesting more time")
        group_oid = group.group_oid

    extension_request = current_app.extension_workflow.create(
        payload.app_id, payload.requested_minutes, payload.reason, payload.user_oid, group_oid)
    return jsonify(extension_request.to_dict()), 201


@extension_blueprint.route('/extension/<string:request_oid>', methods=['GET'])
@token_required
def get_extension_request(request_oid):
    extension_request = current_app.extension_workflow.get_request(request_oid)
    return jsonify(extension_request.to_dict()), 200


@extension_blueprint.route('/extension/<string:request_oid>/response', methods=['POST'])
@token_required
@simulated_latency
def respond_to_extension_request(request_oid):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid input"}), 400
    payload = ExtensionResponseSchema.model_validate(data)
    extension_request = current_app.extension_workflow.record_response(
        request_oid, payload.user_oid, payload.approved, payload.comment)
    return jsonify(extension_request.to_dict()), 201


@extension_blueprint.route('/extension/user/<string:user_oid>', methods=['GET'])
@token_required
def get_user_extension_requests(user_oid):
    requests = current_app.extension_workflow.user_requests(user_oid)
    return jsonify([item.to_dict() for item in requests]), 200


@extension_blueprint.route('/extension/user/<string:user_oid>/awaiting', methods=['GET'])
@token_required
def get_requests_awaiting_response(user_oid):
    requests = current_app.extension_workflow.requests_awaiting(user_oid)
    return jsonify([item.to_dict() for item in requests]), 200
