# board.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, List, Optional, Set, Tuple

log = logging.getLogger(__name__)

EMPTY, RED, BLUE, WINNING = 0, 1, 2, 3
SYMBOLS = {EMPTY: ".", RED: "X", BLUE: "O", WINNING: "*"}

# (dc, dr) from (col, row)
OFFSETS = [(0, 1), (0, -1), (-1, 0), (1, 0), (1, -1), (-1, 1)]

NORTH, SOUTH, WEST, EAST = "north", "south", "west", "east"

# RED: top -> bottom, BLUE: left -> right
POLES = {RED: (NORTH, SOUTH), BLUE: (WEST, EAST)}


def other(side: int) -> int:
    return RED if side == BLUE else BLUE


ADJACENCY_CACHE_CELLS = 65536


def _neighbors(n: int, col: int, row: int) -> Tuple[Tuple[int, int], ...]:
    out = []
    for dc, dr in OFFSETS:
        cc, rr = col + dc, row + dr
        if 0 <= cc < n and 0 <= rr < n:
            out.append((cc, rr))
    return tuple(out)


_cached_neighbors = lru_cache(maxsize=ADJACENCY_CACHE_CELLS)(_neighbors)


def neighbor_positions(n: int, col: int, row: int) -> Tuple[Tuple[int, int], ...]:
    # a board bigger than the cache would only churn it
    if n * n > ADJACENCY_CACHE_CELLS:
        return _neighbors(n, col, row)
    return _cached_neighbors(n, col, row)


@dataclass(frozen=True)
class HexCell:
    """Board position with its edge flags. Equal by coordinates only."""

    col: int
    row: int
    size: int = field(compare=False, repr=False)

    @property
    def north(self) -> bool:
        return self.row == 0

    @property
    def south(self) -> bool:
        return self.row == self.size - 1

    @property
    def west(self) -> bool:
        return self.col == 0

    @property
    def east(self) -> bool:
        return self.col == self.size - 1

    def touches(self, pole: str) -> bool:
        return getattr(self, pole)

    def neighbors(self) -> Tuple["HexCell", ...]:
        # plain records, they don't expand their own neighbours
        n = self.size
        return tuple(HexCell(c, r, n) for c, r in neighbor_positions(n, self.col, self.row))


class Board:
    def __init__(self, size: int):
        self.size = size
        self.grid: List[List[int]] = [[EMPTY] * size for _ in range(size)]
        self.winning_path: Optional[Set[HexCell]] = None
        self.winning_side: int = EMPTY

    # ---------- cells ----------
    def cell(self, col: int, row: int) -> HexCell:
        return HexCell(col, row, self.size)

    def index_to_cell(self, index: int) -> HexCell:
        return self.cell(index % self.size, index // self.size)

    def cells_of(self, token: int) -> List[HexCell]:
        n = self.size
        return [HexCell(c, r, n) for r in range(n) for c in range(n) if self.grid[r][c] == token]

    # ---------- mutation ----------
    def place(self, col: int, row: int, token: int):
        self.grid[row][col] = token

    def clear(self, col: int, row: int):
        self.grid[row][col] = EMPTY

    # ---------- queries ----------
    def get(self, col: int, row: int) -> int:
        return self.grid[row][col]

    def is_empty(self, col: int, row: int) -> bool:
        return self.grid[row][col] == EMPTY

    def occupied_by(self, col: int, row: int, token: int) -> bool:
        return self.grid[row][col] == token

    def contains_any(self, token: int) -> bool:
        return any(token in row for row in self.grid)

    def has_won(self, token: int) -> bool:
        if token not in POLES:
            return False
        path = find_winning_path(self, token)
        if path is None:
            return False
        if self.winning_path is None:
            self.winning_path = path
            self.winning_side = token
            log.debug("winning path for %s: %d cells", SYMBOLS[token], len(path))
        return True

    def winning_index(self, token: int) -> Optional[int]:
        """First row-major index whose empty cell would win for `token`."""
        n = self.size
        for r in range(n):
            row = self.grid[r]
            for c in range(n):
                if row[c] != EMPTY:
                    continue
                row[c] = token
                won = find_winning_path(self, token) is not None
                row[c] = EMPTY
                if won:
                    return r * n + c
        return None

    # ---------- winning path overlay ----------
    def winning_path_overlay(self) -> Set[HexCell]:
        path = self.winning_path or set()
        for cell in path:
            self.grid[cell.row][cell.col] = WINNING
        return path

    def restore_path(self, token: int):
        if self.winning_path is None:
            return
        for cell in self.winning_path:
            self.grid[cell.row][cell.col] = token
        self.winning_path = None
        self.winning_side = EMPTY

    def clone(self) -> "Board":
        b = Board(self.size)
        b.grid = [row[:] for row in self.grid]
        b.winning_path = set(self.winning_path) if self.winning_path is not None else None
        b.winning_side = self.winning_side
        return b

    def __str__(self) -> str:
        lines = []
        for r, row in enumerate(self.grid):
            lines.append(" " * r + " ".join(SYMBOLS[v] for v in row))
        return "\n".join(lines) + "\n"


def find_winning_path(board: Board, token: int) -> Optional[Set[HexCell]]:
    """Connectivity search between the two poles of `token`.

    One depth-first probe per start-pole cell, each with its own visited set.
    Returns the chain from the start cell to the first end-pole cell reached,
    plus the same-token neighbours of that terminal cell, or None.
    """
    start_pole, end_pole = POLES[token]
    own = board.cells_of(token)
    starts = [c for c in own if c.touches(start_pole)]
    if not starts or not any(c.touches(end_pole) for c in own):
        return None

    grid = board.grid
    for start in starts:
        parent: Dict[HexCell, Optional[HexCell]] = {start: None}
        stack = [start]
        while stack:
            cur = stack.pop()
            if cur.touches(end_pole):
                return _certify(grid, token, cur, parent)
            for nb in cur.neighbors():
                if nb not in parent and grid[nb.row][nb.col] == token:
                    parent[nb] = cur
                    stack.append(nb)
    return None


def _certify(grid: List[List[int]], token: int, end: HexCell,
             parent: Dict[HexCell, Optional[HexCell]]) -> Set[HexCell]:
    path: Set[HexCell] = set()
    node: Optional[HexCell] = end
    while node is not None:
        path.add(node)
        node = parent[node]
    for nb in end.neighbors():
        if grid[nb.row][nb.col] == token:
            path.add(nb)
    return path
