from pagebuilder.extensions import db
from .base import BaseModel
from .soft_delete_mixin import SoftDeleteMixin

PAGE_STATUSES = ("draft", "published")

class Page(BaseModel, SoftDeleteMixin):
    __tablename__ = 'pages'

    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=False, unique=True, index=True)
    status = db.Column(db.String(20), nullable=False, default='draft', index=True)
    color_theme = db.Column(db.String(100), nullable=True)

    # Live widget set (ordered, owned exclusively by the page)
    widgets = db.relationship(
        "Widget",
        back_populates="page",
        order_by="Widget.position",
        cascade="all, delete-orphan"
    )
