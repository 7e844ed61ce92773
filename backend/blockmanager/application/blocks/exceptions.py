from typing import Dict


class BlockValidationError(Exception):
    """Submitted block data failed validation; `errors` maps field -> message."""

    def __init__(self, errors: Dict[str, str]):
        super().__init__("Block could not be saved, please check your information.")
        self.errors = errors


class BlockPersistenceError(Exception):
    """The block could not be written, typically a constraint violation."""
