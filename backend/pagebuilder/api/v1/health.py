from flask import jsonify
from pagebuilder.extensions import db
from sqlalchemy import text
from . import v1_bp

@v1_bp.route('/health', methods=['GET'])
def health_check():
    db.session.execute(text("SELECT 1"))
    return jsonify({
        "status": "ok",
        "service": "pagebuilder"
    })
