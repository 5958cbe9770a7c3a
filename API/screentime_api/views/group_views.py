from flask import Blueprint, jsonify, request, current_app

from ..auth import token_required, simulated_latency
from ..schemas import GroupCreateSchema, GroupUpdateSchema, InviteSchema, MembershipSchema

group_blueprint = Blueprint('group', __name__)


@group_blueprint.route('/group/<string:group_oid>', methods=['GET'])
@token_required
def get_group_by_oid(group_oid):
    group = current_app.group_tracker.get_group(group_oid)
    return jsonify(group.to_dict())


@group_blueprint.route('/group/user/<string:user_oid>', methods=['GET'])
@token_required
def get_user_group(user_oid):
    group = current_app.group_tracker.fetch_user_group(user_oid)
    if not group:
        return jsonify({"error": "User has no active group"}), 404
    return jsonify(group.to_dict()), 200


@group_blueprint.route('/group/user/<string:user_oid>/invitations', methods=['GET'])
@token_required
def get_user_invitations(user_oid):
    invitations = []
    for member in current_app.group_tracker.pending_invitations(user_oid):
        group = current_app.group_tracker.get_group(member.group_oid)
        invitations.append({"group_oid": group.group_oid, "group_name": group.name, "member": member.to_dict()})
    return jsonify(invitations), 200


@group_blueprint.route('/group/<string:group_oid>/invitations', methods=['GET'])
@token_required
def get_group_invitations(group_oid):
    members = current_app.group_tracker.group_pending_invitations(group_oid)
    return jsonify([member.to_dict() for member in members]), 200


@group_blueprint.route('/group/<string:group_oid>/admin/<string:user_oid>', methods=['GET'])
@token_required
def check_user_admin(group_oid, user_oid):
    return jsonify({"is_admin": current_app.group_tracker.is_user_admin(group_oid, user_oid)}), 200


@group_blueprint.route('/group', methods=['POST'])
@token_required
@simulated_latency
def create_group():
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid input"}), 400
    payload = GroupCreateSchema.model_validate(data)
    group = current_app.group_tracker.create_group(payload.name, payload.description, payload.user_oid)
    return jsonify({"group_oid": group.group_oid}), 201


@group_blueprint.route('/group/<string:group_oid>', methods=['PUT'])
@token_required
@simulated_latency
def update_group(group_oid):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid input"}), 400
    payload = GroupUpdateSchema.model_validate(data)
    group = current_app.group_tracker.update_group(group_oid, payload.user_oid, payload.name, payload.description)
    return jsonify(group.to_dict()), 200


@group_blueprint.route('/group/<string:group_oid>/member', methods=['POST'])
@token_required
@simulated_latency
def invite_member(group_oid):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid input"}), 400
    payload = InviteSchema.model_validate(data)
    member = current_app.group_tracker.invite_user(group_oid, payload.inviter_oid, payload.user_oid)
    return jsonify(member.to_dict()), 201


@group_blueprint.route('/group/<string:group_oid>/accept', methods=['POST'])
@token_required
@simulated_latency
def accept_invitation(group_oid):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid input"}), 400
    payload = MembershipSchema.model_validate(data)
    group = current_app.group_tracker.accept_invitation(group_oid, payload.user_oid)
    return jsonify(group.to_dict()), 200


@group_blueprint.route('/group/<string:group_oid>/decline', methods=['POST'])
@token_required
@simulated_latency
def decline_invitation(group_oid):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid input"}), 400
    payload = MembershipSchema.model_validate(data)
    current_app.group_tracker.decline_invitation(group_oid, payload.user_oid)
    return jsonify({"message": "Invitation declined"}), 200


@group_blueprint.route('/group/<string:group_oid>/member/<string:member_oid>', methods=['DELETE'])
@token_required
@simulated_latency
def remove_member(group_oid, member_oid):
    admin_oid = request.args.get('admin_oid', '')
    current_app.group_tracker.remove_member(group_oid, admin_oid, member_oid)
    return jsonify({"message": "Member removed successfully"}), 200


@group_blueprint.route('/group/<string:group_oid>/leave', methods=['POST'])
@token_required
@simulated_latency
def leave_group(group_oid):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid input"}), 400
    payload = MembershipSchema.model_validate(data)
    group = current_app.group_tracker.leave_group(group_oid, payload.user_oid)
    return jsonify({"message": "Left the group", "group_deleted": group is None}), 200


@group_blueprint.route('/group/<string:group_oid>', methods=['DELETE'])
@token_required
@simulated_latency
def delete_group(group_oid):
    user_oid = request.args.get('user_oid', '')
    current_app.group_tracker.delete_group(group_oid, user_oid)
    return jsonify({"message": "Group deleted successfully"}), 200
