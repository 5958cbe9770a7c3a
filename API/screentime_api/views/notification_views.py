from flask import Blueprint, jsonify, current_app

from ..auth import token_required
from ..services import LimitsTracker

notification_blueprint = Blueprint('notification', __name__)


@notification_blueprint.route('/notification/user/<string:user_oid>', methods=['GET'])
@token_required
def get_notifications(user_oid):
    items = current_app.notifications.fetch(user_oid)
    return jsonify({
        "notifications": [item.to_dict() for item in items],
        "unread_count": current_app.notifications.unread_count(user_oid),
    }), 200


@notification_blueprint.route('/notification/user/<string:user_oid>/undelivered', methods=['POST'])
@token_required
def take_undelivered_notifications(user_oid):
    items = current_app.notifications.take_undelivered(user_oid)
    return jsonify([item.to_dict() for item in items]), 200


@notification_blueprint.route('/notification/user/<string:user_oid>/<string:notification_oid>/read', methods=['PUT'])
@token_required
def mark_notification_read(user_oid, notification_oid):
    item = current_app.notifications.mark_as_read(user_oid, notification_oid)
    return jsonify(item.to_dict()), 200


@notification_blueprint.route('/notification/user/<string:user_oid>/read', methods=['PUT'])
@token_required
def mark_all_notifications_read(user_oid):
    updated = current_app.notifications.mark_all_as_read(user_oid)
    return jsonify({"updated": updated, "unread_count": 0}), 200


@notification_blueprint.route('/notification/user/<string:user_oid>/<string:notification_oid>', methods=['DELETE'])
@token_required
def delete_notification(user_oid, notification_oid):
    current_app.notifications.delete(user_oid, notification_oid)
    return jsonify({"message": "Notification deleted successfully"}), 200


@notification_blueprint.route('/notification/user/<string:user_oid>', methods=['DELETE'])
@token_required
def clear_notifications(user_oid):
    deleted = current_app.notifications.clear_all(user_oid)
    return jsonify({"deleted": deleted}), 200


@notification_blueprint.route('/notification/user/<string:user_oid>/daily_summary', methods=['POST'])
@token_required
def create_daily_summary(user_oid):
    current_app.auth_service.get_user(user_oid)
    tracker = LimitsTracker(current_app.db, user_oid)
    item = current_app.notifications.build_daily_summary(user_oid, tracker.total_minutes_used,
                                                         tracker.usage_percentage)
    return jsonify(item.to_dict()), 201
