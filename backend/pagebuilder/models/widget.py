from pagebuilder.extensions import db
from .base import BaseModel

class Widget(BaseModel):
    __tablename__ = "page_widgets"

    page_id = db.Column(db.String(36), db.ForeignKey("pages.id"), nullable=False)
    type = db.Column(db.String(100), nullable=False)  # text, image, hero, button, container, product_list
    position = db.Column(db.Integer, nullable=False, default=0)
    config = db.Column(db.JSON, nullable=False, default=dict)

    # Relationship to owning Page
    page = db.relationship("Page", back_populates="widgets")

    __table_args__ = (
        db.UniqueConstraint("page_id", "position", name="uq_page_widget_position"),
        db.Index("idx_widget_page_position", "page_id", "position"),
    )
