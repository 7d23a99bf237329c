"""Ways of identifying a transaction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .block import BlockId, BlockNumber
from .uint import H256, U64


@dataclass(frozen=True)
class TransactionId:
    """A transaction named by its hash, or by its block and index in that block."""

    hash: Optional[H256] = None
    block: Optional[BlockId] = None
    index: Optional[U64] = None

    def __post_init__(self) -> None:
        if self.hash is not None:
            if self.block is not None or self.index is not None:
                raise ValueError("a transaction is named by hash or by block and index, not both")
            if not isinstance(self.hash, H256):
                raise TypeError(f"transaction hash must be H256, not {self.hash!r}")
            return
        if self.block is None or self.index is None:
            raise ValueError("a transaction needs a hash, or a block and an index")
        if not isinstance(self.block, BlockId):
            raise TypeError(f"block must be a BlockId, not {self.block!r}")
        object.__setattr__(self, "index", U64(self.index))

    @classmethod
    def from_hash(cls, tx_hash: H256) -> TransactionId:
        return cls(hash=tx_hash)

    @classmethod
    def from_block(
        cls, block: Union[BlockId, BlockNumber, H256, int], index: int
    ) -> TransactionId:
        if isinstance(block, H256):
            block = BlockId.from_hash(block)
        elif not isinstance(block, BlockId):
            block = BlockId.from_number(block)
        return cls(block=block, index=U64(index))