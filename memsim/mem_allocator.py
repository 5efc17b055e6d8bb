from collections import namedtuple
from typing import Iterator, List, Optional

class Free:
    """owner of a block nobody holds, use the FREE singleton"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    is_free = True
    name = None

    def __repr__(self):
        return "FREE"

FREE = Free()

class Owned:
    is_free = False

    def __init__(self, name:str):
        assert isinstance(name, str) and name, f"owner name must be a non-empty str, got {name!r}"
        self.name = name

    def __eq__(self, other):
        return isinstance(other, Owned) and other.name == self.name

    def __hash__(self):
        return hash(("Owned", self.name))

    def __repr__(self):
        return f"Owned({self.name!r})"


class BlockInfo(namedtuple("BlockInfo", ["start", "end", "size", "owner"])):
    '''
    read-only view of one block handed out to callers (reporter, tests),
    mutating the allocator never changes an existing BlockInfo
    '''
    __slots__ = ()

    @property
    def is_free(self):
        return self.owner.is_free

    @property
    def status(self):
        return "FREE" if self.owner.is_free else self.owner.name


class MemoryBlock:
    def __init__(self, start_addr, size, owner=FREE):
        self.start_addr = start_addr
        self.size = size
        self.owner = owner

    @property
    def is_free(self):
        return self.owner.is_free

    @property
    def end_addr(self):
        return self.start_addr + self.size - 1

    def info(self):
        return BlockInfo(self.start_addr, self.end_addr, self.size, self.owner)

    def __repr__(self):
        return f"MemoryBlock([{self.start_addr}-{self.end_addr}] {self.owner})"


class FirstFitAllocator:
    '''
    Contiguous address space [0, total_size) kept as an address-ordered,
    gap-free list of blocks. Placement is first-fit with tail split, a
    released block is merged with its free neighbours right away, so no two
    adjacent blocks are ever both free.
    '''
    def __init__(self, total_size=1024):
        if not isinstance(total_size, int) or total_size < 1:
            raise ValueError(f"total size must be a positive integer, got {total_size!r}")
        self.total_size = total_size
        self.used_size = 0
        self._blocks: List[MemoryBlock] = [MemoryBlock(0, total_size)]

    @property
    def free_size(self):
        return self.total_size - self.used_size

    def allocate(self, name:str, size:int) -> Optional[int]:
        if not isinstance(name, str) or not name:
            raise ValueError(f"process name must be a non-empty string, got {name!r}")
        if not isinstance(size, int) or size < 1:
            raise ValueError(f"allocation size must be a positive integer, got {size!r}")

        for i, current in enumerate(self._blocks):
            if current.is_free and current.size >= size:
                if current.size > size:
                    # cut extra free space into a separate block after current
                    self._blocks.insert(i + 1, MemoryBlock(current.start_addr + size, current.size - size))
                    current.size = size
                current.owner = Owned(name)
                self.used_size += size
                return current.start_addr
        return None

    def release(self, name:str) -> Optional[BlockInfo]:
        '''
        free the lowest-address block owned by name, returns the view of that
        block as it was before merging, or None if name owns nothing
        '''
        for i, current in enumerate(self._blocks):
            if not current.is_free and current.owner.name == name:
                released = current.info()
                current.owner = FREE
                self.used_size -= current.size
                self._coalesce(i)
                return released
        return None

    def _coalesce(self, index):
        blocks = self._blocks
        assert blocks[index].is_free
        while index < len(blocks) - 1 and blocks[index + 1].is_free:
            blocks[index].size += blocks[index + 1].size
            del blocks[index + 1]
        while index > 0 and blocks[index - 1].is_free:
            blocks[index - 1].size += blocks[index].size
            del blocks[index]
            index -= 1
        return index

    def find(self, name:str) -> List[BlockInfo]:
        return [b.info() for b in self._blocks if not b.is_free and b.owner.name == name]

    def blocks(self) -> List[BlockInfo]:
        return [b.info() for b in self._blocks]

    def __iter__(self) -> Iterator[BlockInfo]:
        for b in self._blocks:
            yield b.info()

    def __len__(self):
        return len(self._blocks)

    def check_invariants(self):
        blocks = self._blocks
        assert blocks, "block list is empty"
        assert blocks[0].start_addr == 0, f"first block starts at {blocks[0].start_addr}"
        used = 0
        for i, b in enumerate(blocks):
            assert b.size >= 1, f"block {i} has non-positive size {b.size}"
            if not b.is_free:
                used += b.size
            if i + 1 < len(blocks):
                nxt = blocks[i + 1]
                assert nxt.start_addr == b.end_addr + 1, f"gap or overlap between block {i} {b} and {nxt}"
                assert not (b.is_free and nxt.is_free), f"adjacent free blocks {i} and {i + 1} not coalesced"
        assert blocks[-1].end_addr == self.total_size - 1, \
            f"blocks cover [0-{blocks[-1].end_addr}], expected [0-{self.total_size - 1}]"
        assert used == self.used_size, f"used_size is {self.used_size}, blocks hold {used}"

    def __repr__(self):
        return f"FirstFitAllocator(total_size={self.total_size}, blocks={self._blocks})"
