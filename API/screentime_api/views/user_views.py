from flask import Blueprint, jsonify, current_app, request

from ..auth import token_required


user_blueprint = Blueprint('user', __name__)


@user_blueprint.route('/user/<int:user_tid>', methods=['GET'])
@token_required
def get_user_by_tid(user_tid):
    user = current_app.db.users.find_one(user_tid=user_tid)
    if user:
        return jsonify(user.to_dict())
    else:
        return jsonify({"error": "User not found"}), 404


@user_blueprint.route('/user/oid/<string:user_oid>', methods=['GET'])
@token_required
def get_user_by_oid(user_oid):
    user = current_app.auth_service.get_user(user_oid)
    return jsonify(user.to_dict())


@user_blueprint.route('/user/tid_list', methods=['GET'])
@token_required
def get_all_user_tids():
    # только те, кто вошёл через бота
    user_tids = [user.user_tid for user in current_app.db.users if user.user_tid is not None]
    return jsonify({"user_tids": user_tids}), 200


@user_blueprint.route('/user/search', methods=['GET'])
@token_required
def search_users():
    query = request.args.get('username', '')
    users = current_app.group_tracker.search_users(query)
    return jsonify([user.to_dict() for user in users]), 200
