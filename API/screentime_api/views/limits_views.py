from flask import Blueprint, jsonify, request, current_app

from ..auth import token_required, simulated_latency
from ..schemas import LimitCreateSchema, LimitUpdateSchema, UsageSchema
from ..services import LimitsTracker

limits_blueprint = Blueprint('limits', __name__)


def _tracker(user_oid: str) -> LimitsTracker:
    current_app.auth_service.get_user(user_oid)
    return LimitsTracker(current_app.db, user_oid)


@limits_blueprint.route('/limits/user/<string:user_oid>', methods=['GET'])
@token_required
def get_limits_summary(user_oid):
    tracker = _tracker(user_oid)
    viewer_oid = request.args.get('viewer')
    if viewer_oid:
        return jsonify(tracker.member_summary(viewer_oid)), 200
    return jsonify(tracker.summary()), 200


@limits_blueprint.route('/limits/user/<string:user_oid>', methods=['POST'])
@token_required
@simulated_latency
def add_limit(user_oid):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid input"}), 400
    payload = LimitCreateSchema.model_validate(data)
    limit = _tracker(user_oid).add_limit(payload.app_id, payload.app_name, payload.icon_name,
                                         payload.daily_limit_minutes)
    return jsonify(limit.to_dict()), 201


@limits_blueprint.route('/limits/user/<string:user_oid>/<string:app_id>', methods=['PUT'])
@token_required
@simulated_latency
def update_limit(user_oid, app_id):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid input"}), 400
    payload = LimitUpdateSchema.model_validate(data)
    limit = _tracker(user_oid).update_limit(app_id, payload.daily_limit_minutes)
    return jsonify(limit.to_dict()), 200


@limits_blueprint.route('/limits/user/<string:user_oid>/<string:app_id>', methods=['DELETE'])
@token_required
@simulated_latency
def delete_limit(user_oid, app_id):
    _tracker(user_oid).remove_limit(app_id)
    return jsonify({"message": "Limit deleted successfully"}), 200


@limits_blueprint.route('/limits/user/<string:user_oid>/<string:app_id>/blocked', methods=['GET'])
@token_required
def is_app_blocked(user_oid, app_id):
    return jsonify({"app_id": app_id, "is_blocked": _tracker(user_oid).is_app_blocked(app_id)}), 200


@limits_blueprint.route('/limits/user/<string:user_oid>/usage', methods=['POST'])
@token_required
@simulated_latency
def add_usage(user_oid):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid input"}), 400
    payload = UsageSchema.model_validate(data)
    usage = _tracker(user_oid).add_usage_time(payload.app_id, payload.minutes)
    return jsonify(usage.to_dict()), 200


@limits_blueprint.route('/limits/user/<string:user_oid>/usage/reset', methods=['POST'])
@token_required
@simulated_latency
def reset_usage(user_oid):
    tracker = _tracker(user_oid)
    tracker.reset_usage()
    return jsonify(tracker.summary()), 200
