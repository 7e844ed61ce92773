from blockmanager.extensions import db
from .base import BaseModel

class BlockRegion(BaseModel):
    __tablename__ = "block_regions"

    block_id = db.Column(db.String(36), db.ForeignKey("blocks.id", ondelete="CASCADE"), nullable=False)
    theme = db.Column(db.String(100), nullable=False)
    region = db.Column(db.String(100), nullable=False)
    ordering = db.Column(db.Integer, nullable=False, default=0)

    # Relationship to parent Block
    block = db.relationship("Block", back_populates="regions")

    __table_args__ = (
        db.UniqueConstraint("block_id", "theme", name="uq_block_region_theme"),
        db.Index("idx_block_region_ordering", "theme", "region", "ordering"),
    )
