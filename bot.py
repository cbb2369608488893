# bot.py
from __future__ import annotations

import logging
from collections import deque
from typing import Dict, List, Optional, Sequence, Set, Tuple

from board import BLUE, EAST, EMPTY, RED, SOUTH, Board, neighbor_positions, other
from game import Action, Automated, Human, Move, Place, Player, Swap

log = logging.getLogger(__name__)

Pos = Tuple[int, int]

# куда планировщик ведёт путь: дальний полюс своей стороны
TARGET_POLE = {RED: SOUTH, BLUE: EAST}


def reflect(n: int, col: int, row: int) -> Pos:
    """Точечная симметрия относительно центра доски."""
    mid = n // 2
    return 2 * mid - col, 2 * mid - row


def first_empty(board: Board) -> Optional[Pos]:
    n = board.size
    for r in range(n):
        for c in range(n):
            if board.grid[r][c] == EMPTY:
                return c, r
    return None


def tactical_move(board: Board, side: int) -> Optional[Place]:
    """Выиграть сразу, иначе закрыть немедленную победу соперника."""
    idx = board.winning_index(side)
    if idx is not None:
        cell = board.index_to_cell(idx)
        log.debug("win-now at %d %d", cell.col, cell.row)
        return Place(cell.col, cell.row)

    idx = board.winning_index(other(side))
    if idx is not None:
        cell = board.index_to_cell(idx)
        log.debug("block at %d %d", cell.col, cell.row)
        return Place(cell.col, cell.row)
    return None


class ReactiveBot:
    name = "Реактивный бот"

    def choose(self, board: Board, history: Sequence[Move], side: int,
               swap_allowed: bool = True) -> Action:
        mv = tactical_move(board, side)
        if mv is not None:
            return mv

        n = board.size
        if history:
            # ответ на самый первый ход: меняемся, если его отражение на чётной сумме
            if len(history) == 1 and swap_allowed:
                fc, fr = reflect(n, history[0].col, history[0].row)
                if (fc + fr) % 2 == 0:
                    return Swap()

            last = history[-1]
            c, r = reflect(n, last.col, last.row)
            if board.is_empty(c, r):
                return Place(c, r)

        pos = first_empty(board)
        if pos is None:
            raise AssertionError("no empty cell left on a board without a winner")
        return Place(*pos)


class PathPlannerBot:
    """Кратчайший путь (BFS) от своего последнего камня к целевому краю.

    Если путь перекрыт, камень условно снимается с рабочей копии доски и
    поиск повторяется от более раннего своего хода.
    """

    name = "Планировщик"

    def __init__(self):
        self.rollback: List[Pos] = []

    @property
    def rollback_depth(self) -> int:
        return len(self.rollback)

    def choose(self, board: Board, history: Sequence[Move], side: int,
               swap_allowed: bool = True) -> Action:
        self.rollback = []
        work = board.clone()

        mv = tactical_move(work, side)
        if mv is not None:
            return mv

        # свои камни, от последнего к первому
        own = [(m.col, m.row) for m in reversed(history)
               if m.side == side and work.occupied_by(m.col, m.row, side)]
        banned: Set[Pos] = set()

        for source in own + [None]:
            if source is None or not work.contains_any(side):
                return self._first_move(work, banned)

            path = self._shortest_path(work, source, side, banned)
            if len(path) >= 2 and work.is_empty(*path[1]):
                log.debug("path of %d from %s, rollback depth %d", len(path), source, len(self.rollback))
                return Place(*path[1])

            # путь перекрыт: снимаем камень только на рабочей копии
            work.clear(*source)
            banned.add(source)
            self.rollback.append(source)
            log.debug("rollback %s (depth %d)", source, len(self.rollback))

        raise AssertionError("path planner exhausted every rollback")

    def _first_move(self, board: Board, banned: Set[Pos]) -> Place:
        """Самая западная, затем самая северная свободная клетка."""
        n = board.size
        for c in range(n):
            for r in range(n):
                if board.grid[r][c] == EMPTY and (c, r) not in banned:
                    return Place(c, r)
        raise AssertionError("no free cell for the opening move")

    def _shortest_path(self, board: Board, start: Pos, side: int, banned: Set[Pos]) -> List[Pos]:
        n = board.size
        pole = TARGET_POLE[side]
        prev: Dict[Pos, Optional[Pos]] = {start: None}
        q = deque([start])

        while q:
            cur = q.popleft()
            if board.cell(*cur).touches(pole):
                path = []
                node: Optional[Pos] = cur
                while node is not None:
                    path.append(node)
                    node = prev[node]
                path.reverse()
                return path

            for nb in neighbor_positions(n, cur[0], cur[1]):
                if nb in prev or nb in banned:
                    continue
                if board.grid[nb[1]][nb[0]] not in (EMPTY, side):
                    continue
                prev[nb] = cur
                q.append(nb)
        return []


PLAYER_KINDS = ["human", "reactive", "planner"]


def make_player(kind: str, name: str) -> Player:
    if kind == "reactive":
        return Automated(name, ReactiveBot())
    if kind == "planner":
        return Automated(name, PathPlannerBot())
    return Human(name)
