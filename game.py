# game.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple, Union

from board import BLUE, EMPTY, RED, SYMBOLS, Board, other

log = logging.getLogger(__name__)

MIN_SIZE, MAX_SIZE = 5, 12345


@dataclass(frozen=True)
class Move:
    side: int
    col: int
    row: int


@dataclass(frozen=True)
class Place:
    col: int
    row: int


@dataclass(frozen=True)
class Swap:
    pass


Action = Union[Place, Swap]


class Strategy(Protocol):
    def choose(self, board: Board, history: Sequence[Move], side: int,
               swap_allowed: bool = True) -> Action:
        ...


@dataclass(frozen=True)
class Human:
    name: str


@dataclass(frozen=True)
class Automated:
    name: str
    strategy: Strategy


Player = Union[Human, Automated]


def check_size(size: int) -> int:
    if size % 2 == 0 or not MIN_SIZE <= size <= MAX_SIZE:
        raise ValueError(f"Board size must be odd and between {MIN_SIZE} and {MAX_SIZE}, got {size}")
    return size


class HexGame:
    def __init__(self, size: int = 11, players: Optional[Tuple[Player, Player]] = None):
        self.size = check_size(size)
        self.players: Tuple[Player, Player] = players or (Human("Игрок 1"), Human("Игрок 2"))
        self.reset()

    def reset(self):
        self.board = Board(self.size)
        self.current = RED
        self.winner: int = EMPTY
        self.history: List[Move] = []
        self.swapped = False
        self.path_shown = False

    @property
    def last_move(self) -> Optional[Move]:
        return self.history[-1] if self.history else None

    @property
    def moves_played(self) -> int:
        return len(self.history)

    def in_bounds(self, col: int, row: int) -> bool:
        return 0 <= col < self.size and 0 <= row < self.size

    # ---------- players ----------
    def player_for(self, side: int) -> Player:
        # after a swap player 1 plays BLUE
        first = RED if not self.swapped else BLUE
        return self.players[0] if side == first else self.players[1]

    def player_to_move(self) -> Player:
        return self.player_for(self.current)

    # ---------- moves ----------
    def play(self, col: int, row: int) -> bool:
        if self.winner != EMPTY:
            return False
        if not self.in_bounds(col, row):
            log.debug("rejected %d %d: out of bounds", col, row)
            return False
        if not self.board.is_empty(col, row):
            log.debug("rejected %d %d: occupied", col, row)
            return False

        p = self.current
        self.board.place(col, row, p)
        self.history.append(Move(p, col, row))

        if self.board.has_won(p):
            self.winner = p
            log.info("%s (%s) wins after %d moves", self.player_for(p).name, SYMBOLS[p], self.moves_played)
        else:
            self.current = other(p)
        return True

    def can_swap(self) -> bool:
        return self.winner == EMPTY and not self.swapped and len(self.history) == 1

    def swap(self) -> bool:
        if not self.can_swap():
            log.debug("swap rejected on move %d", self.moves_played + 1)
            return False
        # sides stay on the board, players exchange them; the side to move is unchanged
        self.swapped = True
        log.info("%s swaps", self.player_for(RED).name)
        return True

    def apply(self, action: Action) -> bool:
        if isinstance(action, Swap):
            return self.swap()
        return self.play(action.col, action.row)

    def step_automated(self) -> Optional[Action]:
        """Let the automated player to move act once. None for humans or a finished game."""
        if self.winner != EMPTY:
            return None
        player = self.player_to_move()
        if not isinstance(player, Automated):
            return None
        action = player.strategy.choose(self.snapshot(), self.history_snapshot(), self.current,
                                        swap_allowed=self.can_swap())
        if not self.apply(action):
            raise AssertionError(f"{player.name} proposed an illegal action {action}")
        log.debug("%s -> %s", player.name, action)
        return action

    # ---------- views ----------
    def snapshot(self) -> Board:
        return self.board.clone()

    def history_snapshot(self) -> Tuple[Move, ...]:
        return tuple(self.history)

    def show_winning_path(self, show: bool):
        if self.winner == EMPTY or show == self.path_shown:
            return
        if show:
            self.board.winning_path_overlay()
        else:
            self.board.restore_path(self.winner)
            # keep the path cached for the next toggle
            self.board.has_won(self.winner)
        self.path_shown = show

