# pagebuilder/api/v1/revisions.py
from flask import request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity
from pagebuilder.application.cms import revision_history
from pagebuilder.application.cms.create_revision import create_revision as create_revision_service
from pagebuilder.application.cms.lookups import require_revision
from pagebuilder.application.cms.publish_revision import publish_revision as publish_revision_service
from pagebuilder.normalizers.pagination import normalize_pagination
from pagebuilder.normalizers.revision import normalize_revision, normalize_revision_node
from . import v1_bp


# ------------------------
# Revision history
# ------------------------

@v1_bp.route("/pages/<page_id>/revisions", methods=["GET"])
@jwt_required(optional=True)
def list_revisions(page_id):
    items, cursor = revision_history.list_revisions(
        page_id=page_id,
        cursor=request.args.get("cursor"),
        limit=request.args.get("limit"),
    )
    return jsonify(normalize_pagination(items, normalize_revision, cursor))


@v1_bp.route("/pages/<page_id>/revisions", methods=["POST"])
@jwt_required(optional=True)
def create_revision(page_id):
    data = request.get_json(silent=True) or {}
    revision = create_revision_service(
        page_id=page_id,
        data=data,
        created_by=get_jwt_identity(),
    )
    return jsonify(normalize_revision(revision, include_widgets=True)), 201


@v1_bp.route("/pages/<page_id>/revisions/tree", methods=["GET"])
@jwt_required(optional=True)
def revision_tree(page_id):
    nodes = revision_history.revision_tree(page_id=page_id)
    return jsonify({
        "page_id": page_id,
        "nodes": [normalize_revision_node(n) for n in nodes],
    })


@v1_bp.route("/pages/<page_id>/revisions/heads", methods=["GET"])
@jwt_required(optional=True)
def revision_heads(page_id):
    heads = revision_history.revision_heads(page_id=page_id)
    return jsonify({
        "page_id": page_id,
        "heads": [normalize_revision(r) for r in heads],
    })


@v1_bp.route("/pages/<page_id>/revisions/published", methods=["GET"])
@jwt_required(optional=True)
def published_revision(page_id):
    revision = revision_history.get_published_revision(page_id=page_id)
    return jsonify({
        "page_id": page_id,
        "revision": normalize_revision(revision, include_widgets=True) if revision else None,
    })


@v1_bp.route("/pages/<page_id>/revisions/hash/<revision_hash>", methods=["GET"])
@jwt_required(optional=True)
def get_revision_by_hash(page_id, revision_hash):
    revision = revision_history.get_revision_by_hash(page_id=page_id, revision_hash=revision_hash)
    return jsonify(normalize_revision(revision, include_widgets=True))


@v1_bp.route("/pages/<page_id>/revisions/<revision_id>", methods=["GET"])
@jwt_required(optional=True)
def get_revision(page_id, revision_id):
    revision = require_revision(page_id, revision_id)
    return jsonify(normalize_revision(revision, include_widgets=True))


@v1_bp.route("/pages/<page_id>/revisions/<revision_id>/publish", methods=["POST"])
@jwt_required(optional=True)
def publish_revision(page_id, revision_id):
    revision = publish_revision_service(
        page_id=page_id,
        revision_id=revision_id,
        published_by=get_jwt_identity(),
    )
    return jsonify({
        "message": "Revision published",
        "revision": normalize_revision(revision, include_widgets=True),
    }), 200
