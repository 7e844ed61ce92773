from typing import Any, Dict, List
from blockmanager.extensions import db
from .base import BaseModel

# Submitted fields that map onto relationships rather than scalar columns
STRUCTURAL_FIELDS = ("region", "roles")


blocks_roles = db.Table(
    "blocks_roles",
    db.Column("block_id", db.String(36), db.ForeignKey("blocks.id", ondelete="CASCADE"), primary_key=True),
    db.Column("role_id", db.String(36), db.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Block(BaseModel):
    __tablename__ = "blocks"

    copy_id = db.Column(db.String(36), nullable=True)  # source block when duplicated
    handler = db.Column(db.String(100), nullable=False, default="Block", index=True)
    delta = db.Column(db.String(100), nullable=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.String(512), nullable=True)
    body = db.Column(db.Text, nullable=True)
    visibility = db.Column(db.String(20), nullable=False, default="except")  # except | only
    pages = db.Column(db.Text, nullable=True)
    locale = db.Column(db.JSON, default=list)
    status = db.Column(db.Boolean, default=False)
    settings = db.Column(db.JSON, default=dict)

    regions = db.relationship(
        "BlockRegion",
        back_populates="block",
        order_by="BlockRegion.theme",
        cascade="all, delete-orphan"
    )
    roles = db.relationship("Role", secondary=blocks_roles, lazy="selectin")

    __table_args__ = (
        db.UniqueConstraint("handler", "delta", name="uq_block_handler_delta"),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            column.name: getattr(self, column.name)
            for column in self.__table__.columns
        }


def block_columns() -> List[str]:
    """
    Names a submitted block form may address directly.

    Table columns plus the structural "region" and "roles" fields; anything
    else submitted with a block belongs in its settings.
    """
    return list(Block.__table__.columns.keys()) + list(STRUCTURAL_FIELDS)
