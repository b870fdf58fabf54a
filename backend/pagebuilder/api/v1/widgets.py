# pagebuilder/api/v1/widgets.py
from flask import request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity
from pagebuilder.application.cms import edit_widgets
from pagebuilder.normalizers.widget import normalize_widget
from . import v1_bp


def _widgets_response(page_id, widgets, status=200):
    return jsonify({
        "page_id": page_id,
        "widgets": [normalize_widget(w) for w in widgets],
    }), status


@v1_bp.route("/pages/<page_id>/widgets", methods=["GET"])
@jwt_required(optional=True)
def list_widgets(page_id):
    widgets = edit_widgets.get_live_widgets(page_id=page_id)
    return _widgets_response(page_id, widgets)


@v1_bp.route("/pages/<page_id>/widgets", methods=["PUT"])
@jwt_required(optional=True)
def replace_widgets(page_id):
    data = request.get_json(silent=True) or {}
    widgets = data.get("widgets")
    if widgets is None:
        widgets = data.get("components")

    written = edit_widgets.replace_widgets(
        page_id=page_id,
        widgets=widgets,
        actor_id=get_jwt_identity(),
    )
    return _widgets_response(page_id, written)


@v1_bp.route("/pages/<page_id>/widgets/changes", methods=["POST"])
@jwt_required(optional=True)
def apply_widget_changes(page_id):
    payload = request.get_json(silent=True) or {}
    written = edit_widgets.apply_widget_changes(
        page_id=page_id,
        payload=payload,
        actor_id=get_jwt_identity(),
    )
    return _widgets_response(page_id, written)


@v1_bp.route("/pages/<page_id>/widgets/<widget_id>/move", methods=["POST"])
@jwt_required(optional=True)
def move_widget(page_id, widget_id):
    data = request.get_json(silent=True) or {}
    written = edit_widgets.move_page_widget(
        page_id=page_id,
        widget_id=widget_id,
        direction=data.get("direction", ""),
        actor_id=get_jwt_identity(),
    )
    return _widgets_response(page_id, written)
