from .audit_log import AuditLog
from .block import Block, block_columns
from .block_region import BlockRegion
from .role import Role
from .user import User

__all__ = ["AuditLog", "Block", "BlockRegion", "Role", "User", "block_columns"]
