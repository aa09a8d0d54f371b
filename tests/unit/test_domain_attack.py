"""Unit tests for ranged attack resolution."""

from __future__ import annotations

from eos.domain.attack import effective_range, generate_attacks
from eos.domain.enums import AttackMode, PieceType, Side
from eos.domain.layout import build_board, placement
from eos.domain.models import Board, PieceID
from eos.domain.rules_config import DEFAULT_RULE_TABLE, RuleEntry
from eos.utils.lattice import parse


def _cells(*names: str) -> frozenset:
    return frozenset(parse(name) for name in names)


def _board(hero: PieceType, others: dict[str, tuple[PieceType, Side]]) -> Board:
    layout = {PieceID("hero"): placement(hero, Side.PLAYER1, "I7")}
    for index, (cell, (piece_type, side)) in enumerate(others.items()):
        layout[PieceID(f"other-{index}")] = placement(piece_type, side, cell)
    return build_board(layout)


def _attacks(board: Board, entry: RuleEntry | None, mode=AttackMode.PRE_MOVE, first=False):
    piece = board.piece(PieceID("hero"))
    return generate_attacks(piece, entry, board.position_of(piece.id), board, mode, first)


def test_archer_hits_enemies_along_clear_diagonals():
    board = _board(
        PieceType.ARCHER,
        {
            "J8": (PieceType.STEWARD, Side.PLAYER2),
            "K9": (PieceType.DEACON, Side.PLAYER2),
            "G5": (PieceType.MINISTER, Side.PLAYER2),
            "F10": (PieceType.SUPREMO, Side.PLAYER2),
            "J6": (PieceType.STEWARD, Side.PLAYER1),
        },
    )

    targets = _attacks(board, DEFAULT_RULE_TABLE.get("Archer"))

    # K9 sits behind J8; J6 is friendly
    assert targets == _cells("J8", "G5", "F10")


def test_sparse_range_skips_missing_distances():
    board = _board(
        PieceType.ARCHER,
        {
            "K9": (PieceType.STEWARD, Side.PLAYER2),
            "F10": (PieceType.STEWARD, Side.PLAYER2),
        },
    )
    entry = RuleEntry.build([1], [1, 3], 1)

    assert _attacks(board, entry) == _cells("F10")


def test_sparse_range_is_blocked_by_nearer_enemy_on_same_diagonal():
    board = _board(
        PieceType.ARCHER,
        {
            "J8": (PieceType.STEWARD, Side.PLAYER2),
            "L10": (PieceType.SUPREMO, Side.PLAYER2),
        },
    )
    entry = RuleEntry.build([1], [1, 3], 1)

    # L10 is three steps out, but J8 stands between
    assert _attacks(board, entry) == _cells("J8")


def test_out_of_range_enemy_is_not_a_target():
    board = _board(PieceType.DEACON, {"L10": (PieceType.STEWARD, Side.PLAYER2)})

    assert _attacks(board, DEFAULT_RULE_TABLE.get("Deacon")) == frozenset()


def test_steward_reaches_two_before_first_move():
    board = _board(PieceType.STEWARD, {"K9": (PieceType.STEWARD, Side.PLAYER2)})
    entry = DEFAULT_RULE_TABLE.get("Steward")

    assert _attacks(board, entry, AttackMode.PRE_MOVE, True) == _cells("K9")
    assert _attacks(board, entry, AttackMode.PRE_MOVE, False) == frozenset()
    assert _attacks(board, entry, AttackMode.POST_MOVE, False) == frozenset()


def test_steward_range_ignores_table():
    board = _board(PieceType.STEWARD, {})
    piece = board.piece(PieceID("hero"))
    wide = RuleEntry.build([1], [1, 2, 3, 4], 1)

    assert effective_range(piece, wide, AttackMode.POST_MOVE, False) == frozenset({1})
    assert effective_range(piece, wide, AttackMode.PRE_MOVE, True) == frozenset({1, 2})


def test_missing_entry_has_no_attacks():
    board = _board(PieceType.CHANCELLOR, {"J8": (PieceType.STEWARD, Side.PLAYER2)})

    assert _attacks(board, None) == frozenset()


def test_attack_generation_does_not_mutate_board():
    board = build_board()
    snapshot = board.clone()
    piece = board.piece(PieceID("p1-archer-a"))

    generate_attacks(
        piece,
        DEFAULT_RULE_TABLE.get(piece.name),
        board.position_of(piece.id),
        board,
        AttackMode.PRE_MOVE,
        True,
    )

    assert board == snapshot
