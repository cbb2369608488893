import random

import pytest

import board as board_module
from board import (ADJACENCY_CACHE_CELLS, BLUE, EAST, EMPTY, NORTH, RED, SOUTH, WEST, WINNING, Board, HexCell,
                   find_winning_path, neighbor_positions)


def fill(board, token, cells):
    for c, r in cells:
        board.place(c, r, token)
    return board


@pytest.fixture
def board():
    return Board(5)


def test_cells_equal_by_coordinates_only():
    a = HexCell(1, 2, 5)
    b = HexCell(1, 2, 7)
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b}) == 1


def test_neighbors_are_clipped_at_the_edges():
    assert set(neighbor_positions(5, 0, 0)) == {(0, 1), (1, 0)}
    assert set(neighbor_positions(5, 4, 0)) == {(4, 1), (3, 0), (3, 1)}
    assert set(neighbor_positions(5, 2, 2)) == {(2, 3), (2, 1), (1, 2), (3, 2), (3, 1), (1, 3)}


def test_neighbors_do_not_wrap_around():
    for c, r in neighbor_positions(5, 4, 4):
        assert 0 <= c < 5 and 0 <= r < 5
    assert (0, 4) not in neighbor_positions(5, 4, 4)


def test_pole_flags():
    cell = HexCell(0, 4, 5)
    assert cell.west and cell.south
    assert not cell.east and not cell.north
    assert cell.touches("south")
    corner = HexCell(4, 0, 5)
    assert corner.east and corner.north


@pytest.mark.parametrize("col, row, poles", [
    (0, 0, {NORTH, WEST}),
    (4, 4, {SOUTH, EAST}),
    (2, 0, {NORTH}),
    (0, 2, {WEST}),
    (2, 2, set()),
])
def test_touches_every_pole(col, row, poles):
    cell = HexCell(col, row, 5)
    assert {p for p in (NORTH, SOUTH, WEST, EAST) if cell.touches(p)} == poles


def test_large_boards_bypass_the_neighbor_cache():
    n = 301
    assert n * n > ADJACENCY_CACHE_CELLS
    before = board_module._cached_neighbors.cache_info().currsize

    assert set(neighbor_positions(n, 300, 0)) == {(300, 1), (299, 0), (299, 1)}
    assert len(neighbor_positions(n, 150, 150)) == 6
    assert board_module._cached_neighbors.cache_info().currsize == before

    neighbor_positions(5, 1, 1)
    assert board_module._cached_neighbors.cache_info().currsize <= ADJACENCY_CACHE_CELLS


def test_cell_neighbors_are_plain_records():
    nbs = HexCell(2, 2, 5).neighbors()
    assert len(nbs) == 6
    assert all(isinstance(nb, HexCell) and nb.size == 5 for nb in nbs)


def test_empty_board_has_no_winner(board):
    assert not board.has_won(RED)
    assert not board.has_won(BLUE)
    assert board.winning_path is None


def test_vertical_chain_wins_for_red(board):
    chain = [(2, r) for r in range(5)]
    fill(board, RED, chain)

    assert board.has_won(RED)
    assert not board.has_won(BLUE)
    assert board.winning_path == {board.cell(c, r) for c, r in chain}
    assert board.winning_side == RED


def test_horizontal_chain_wins_for_blue(board):
    fill(board, BLUE, [(c, 2) for c in range(5)])
    assert board.has_won(BLUE)
    assert not board.has_won(RED)


def test_anti_diagonal_is_connected_for_both_sides():
    diag = [(4, 0), (3, 1), (2, 2), (1, 3), (0, 4)]
    assert fill(Board(5), RED, diag).has_won(RED)
    assert fill(Board(5), BLUE, diag).has_won(BLUE)


def test_main_diagonal_is_not_connected(board):
    fill(board, RED, [(i, i) for i in range(5)])
    assert not board.has_won(RED)


def test_winding_chain_is_found(board):
    # (1, 2) is a dead end off the chain
    fill(board, RED, [(0, 0), (0, 1), (1, 1), (2, 1), (3, 1), (3, 2), (3, 3), (2, 4), (1, 2)])
    assert board.has_won(RED)
    path = board.winning_path
    assert board.cell(0, 0) in path
    assert board.cell(2, 4) in path
    assert all(board.occupied_by(c.col, c.row, RED) for c in path)


def test_search_fails_fast_without_both_poles(board):
    fill(board, RED, [(2, r) for r in range(4)])
    assert find_winning_path(board, RED) is None


def test_win_is_monotonic(board):
    fill(board, RED, [(2, r) for r in range(5)])
    assert board.has_won(RED)
    for c, r in [(0, 0), (4, 4), (1, 3), (3, 0)]:
        board.place(c, r, RED)
        assert board.has_won(RED)


def test_winning_index_finds_gap(board):
    fill(board, RED, [(2, 0), (2, 1), (2, 3), (2, 4)])
    before = [row[:] for row in board.grid]

    assert board.winning_index(RED) == 2 * 5 + 2
    assert board.winning_index(BLUE) is None
    assert board.grid == before
    assert board.winning_path is None


def test_winning_index_takes_first_in_row_major_order(board):
    fill(board, RED, [(2, 0), (2, 1), (2, 3), (2, 4), (1, 3)])
    # both (1, 2) and (2, 2) close the chain
    assert board.winning_index(RED) == 2 * 5 + 1


def test_winning_index_none_on_empty_board(board):
    assert board.winning_index(RED) is None
    assert board.winning_index(BLUE) is None


@pytest.mark.parametrize("seed", range(6))
def test_winning_index_matches_each_cell_probe(seed):
    rng = random.Random(seed)
    board = Board(7)
    cells = [(c, r) for r in range(7) for c in range(7)]
    rng.shuffle(cells)
    for i, (c, r) in enumerate(cells[:18]):
        board.place(c, r, RED if i % 2 == 0 else BLUE)

    for token in (RED, BLUE):
        if board.has_won(token):
            continue
        winners = []
        for idx, (c, r) in enumerate((c, r) for r in range(7) for c in range(7)):
            if not board.is_empty(c, r):
                continue
            probe = board.clone()
            probe.place(c, r, token)
            if probe.has_won(token):
                winners.append(idx)
        expected = winners[0] if winners else None
        assert board.winning_index(token) == expected


def test_occupancy_queries(board):
    board.place(1, 3, BLUE)
    assert not board.is_empty(1, 3)
    assert board.occupied_by(1, 3, BLUE)
    assert not board.occupied_by(1, 3, RED)
    assert board.contains_any(BLUE)
    assert not board.contains_any(RED)

    board.clear(1, 3)
    assert board.is_empty(1, 3)
    assert not board.contains_any(BLUE)


def test_winning_path_overlay_and_restore(board):
    chain = [(2, r) for r in range(5)]
    fill(board, RED, chain)
    assert board.has_won(RED)

    path = board.winning_path_overlay()
    assert len(path) == 5
    for c, r in chain:
        assert board.get(c, r) == WINNING
        assert not board.is_empty(c, r)

    board.restore_path(RED)
    for c, r in chain:
        assert board.occupied_by(c, r, RED)
    assert board.winning_path is None
    assert board.has_won(RED)


def test_clone_is_independent(board):
    board.place(0, 0, RED)
    copy = board.clone()
    copy.place(1, 1, BLUE)
    copy.clear(0, 0)

    assert board.occupied_by(0, 0, RED)
    assert board.is_empty(1, 1)
    assert copy.size == board.size


def test_index_to_cell(board):
    cell = board.index_to_cell(13)
    assert (cell.col, cell.row) == (3, 2)


def test_text_rendering(board):
    board.place(0, 0, RED)
    board.place(4, 1, BLUE)
    lines = str(board).splitlines()
    assert lines[0] == "X . . . ."
    assert lines[1] == " . . . . O"
    assert lines[4].startswith("    .")
    assert board.get(2, 2) == EMPTY
