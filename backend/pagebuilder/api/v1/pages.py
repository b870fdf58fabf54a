# pagebuilder/api/v1/pages.py
from flask import request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity
from pagebuilder.application.cms.create_page import create_page as create_page_service
from pagebuilder.application.cms.update_page import update_page as update_page_service
from pagebuilder.application.cms.delete_page import delete_page as delete_page_service
from pagebuilder.application.cms.lookups import require_page
from pagebuilder.models.audit_log import AuditLog
from pagebuilder.normalizers.audit import normalize_audit_log
from pagebuilder.normalizers.page import normalize_page
from pagebuilder.normalizers.pagination import normalize_pagination
from pagebuilder.utils.optimistic_lock import enforce_optimistic_lock
from pagebuilder.utils.pagination import paginate_cursor, parse_limit
from . import v1_bp # import the versioned blueprint


# ------------------------
# Pages
# ------------------------

@v1_bp.route("/pages", methods=["POST"])
@jwt_required(optional=True)
def create_page():
    data = request.get_json(silent=True) or {}
    page = create_page_service(actor_id=get_jwt_identity(), data=data)
    return jsonify(normalize_page(page)), 201


@v1_bp.route("/pages/<page_id>", methods=["GET"])
@jwt_required(optional=True)
def get_page(page_id):
    page = require_page(page_id)
    return jsonify(normalize_page(page))


@v1_bp.route("/pages/<page_id>", methods=["PUT"])
@jwt_required(optional=True)
def update_page(page_id):
    page = require_page(page_id)

    # -----------------------
    # Optimistic Locking Check
    # -----------------------
    enforce_optimistic_lock(page)

    data = request.get_json(silent=True) or {}
    page = update_page_service(page=page, actor_id=get_jwt_identity(), data=data)
    return jsonify(normalize_page(page)), 200


@v1_bp.route("/pages/<page_id>", methods=["DELETE"])
@jwt_required(optional=True)
def delete_page(page_id):
    page = require_page(page_id)
    delete_page_service(page=page, actor_id=get_jwt_identity())
    return jsonify({"message": "Page deleted successfully"}), 200


@v1_bp.route("/pages/<page_id>/activity", methods=["GET"])
@jwt_required(optional=True)
def list_page_activity(page_id):
    require_page(page_id)

    items, cursor = paginate_cursor(
        AuditLog.query.filter_by(entity_type="page", entity_id=page_id),
        model=AuditLog,
        limit=parse_limit(request.args.get("limit"), 20),
        cursor=request.args.get("cursor"),
    )
    return jsonify(normalize_pagination(items, normalize_audit_log, cursor))
