"""Turn-sync message: the full serializable snapshot of a game.

The message is emitted after every accepted action and can be accepted
wholesale to resynchronize a reconnecting client or to restore a game from
disk.  Cells travel as strings ("I1"); everything else is plain JSON.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from eos.domain.enums import PieceType, Side, TurnPhase, WinCondition, Winner
from eos.domain.models import Board, GameState, MoveLogEntry, Piece, PieceID
from eos.domain.rules_config import DEFAULT_RULE_TABLE, DEFAULT_RULES, RulesConfig, RuleTable
from eos.domain.turn import Game
from eos.utils.lattice import Cell, format_cell, is_valid, parse

FORMAT_VERSION = 1


def _lattice_cell(value: str) -> str:
    cell = parse(value)
    if not is_valid(cell):
        raise ValueError(f"{value} is not a playable lattice cell")
    return value


class PieceRecord(BaseModel):
    """Arena entry for one piece, captured pieces included."""

    id: str
    owner: Side
    type: PieceType
    name: str
    has_moved: bool = False
    move_count: int = Field(default=0, ge=0)


class MoveRecord(BaseModel):
    """Wire form of a move log entry."""

    model_config = ConfigDict(populate_by_name=True)

    player: Side
    piece_id: str
    piece_type_name: str
    piece_type: PieceType
    from_cell: str = Field(alias="from")
    to_cell: str = Field(alias="to")
    turn_number: int = Field(ge=1)
    is_capture: bool = False
    captured_piece_type: PieceType | None = None
    captured_piece_id: str | None = None

    @field_validator("from_cell", "to_cell")
    @classmethod
    def _check_cell(cls, value: str) -> str:
        return _lattice_cell(value)


class TurnSyncMessage(BaseModel):
    """Snapshot exchanged at the session boundary."""

    format_version: int = FORMAT_VERSION
    board: dict[str, str]
    pieces: list[PieceRecord]
    current_turn: Side
    turn_phase: TurnPhase
    move_log: list[MoveRecord] = Field(default_factory=list)
    captured_by_each_side: dict[Side, list[PieceType]] = Field(default_factory=dict)
    winner: Winner | None = None
    win_condition: WinCondition | None = None
    active_piece: str | None = None
    mandatory_move_used: bool = False
    candidate_moves: list[str] = Field(default_factory=list)
    candidate_advance: list[str] = Field(default_factory=list)
    candidate_attacks: list[str] = Field(default_factory=list)

    @field_validator("board")
    @classmethod
    def _check_board(cls, value: dict[str, str]) -> dict[str, str]:
        seen: set[str] = set()
        for piece_id, cell in value.items():
            _lattice_cell(cell)
            if cell in seen:
                raise ValueError(f"two pieces share {cell} (second is {piece_id})")
            seen.add(cell)
        return value

    @field_validator("candidate_moves", "candidate_advance", "candidate_attacks")
    @classmethod
    def _check_cells(cls, value: list[str]) -> list[str]:
        return [_lattice_cell(cell) for cell in value]


def export_snapshot(game: Game) -> TurnSyncMessage:
    """Produce the sync message for the current state of ``game``."""

    state = game.state
    return TurnSyncMessage(
        board={
            str(piece_id): format_cell(cell)
            for piece_id, cell in sorted(state.board.positions().items())
        },
        pieces=[
            PieceRecord(
                id=piece.id,
                owner=piece.owner,
                type=piece.type,
                name=piece.name,
                has_moved=piece.has_moved,
                move_count=piece.move_count,
            )
            for piece in state.board.all_pieces()
        ],
        current_turn=state.current_turn,
        turn_phase=state.turn_phase,
        move_log=[_move_record(entry) for entry in state.move_log],
        captured_by_each_side={side: list(types) for side, types in state.captured_by.items()},
        winner=state.winner,
        win_condition=state.win_condition,
        active_piece=state.active_piece,
        mandatory_move_used=state.mandatory_move_used,
        candidate_moves=_cell_list(state.candidate_moves),
        candidate_advance=_cell_list(state.candidate_advance),
        candidate_attacks=_cell_list(state.candidate_attacks),
    )


def import_snapshot(
    message: TurnSyncMessage,
    *,
    rule_table: RuleTable = DEFAULT_RULE_TABLE,
    rules: RulesConfig = DEFAULT_RULES,
) -> Game:
    """Rebuild a game from a sync message.

    Raises:
        ValueError: If the board references a piece missing from ``pieces``
    """

    records = {record.id: record for record in message.pieces}
    unknown = set(message.board) - set(records)
    if unknown:
        raise ValueError(f"board references unknown pieces: {sorted(unknown)}")
    if message.active_piece is not None and message.active_piece not in message.board:
        raise ValueError(f"active piece {message.active_piece} is not on the board")

    board = Board()
    captured: list[Piece] = []
    for record in message.pieces:
        piece = Piece(
            id=PieceID(record.id),
            owner=record.owner,
            type=record.type,
            name=record.name,
            has_moved=record.has_moved,
            move_count=record.move_count,
        )
        cell = message.board.get(record.id)
        if cell is None:
            captured.append(piece)
        else:
            board.place(piece, parse(cell))
    for piece in captured:
        board.restore_captured(piece)

    captured_by: dict[Side, list[PieceType]] = {side: [] for side in Side}
    for side, types in message.captured_by_each_side.items():
        captured_by[side] = list(types)

    state = GameState(
        board=board,
        current_turn=message.current_turn,
        turn_phase=message.turn_phase,
        move_log=[_move_entry(record) for record in message.move_log],
        captured_by=captured_by,
        winner=message.winner,
        win_condition=message.win_condition,
        active_piece=PieceID(message.active_piece) if message.active_piece else None,
        mandatory_move_used=message.mandatory_move_used,
        candidate_moves=_cell_set(message.candidate_moves),
        candidate_advance=_cell_set(message.candidate_advance),
        candidate_attacks=_cell_set(message.candidate_attacks),
    )
    return Game(state, rule_table=rule_table, rules=rules)


def _cell_list(cells: frozenset[Cell]) -> list[str]:
    return [format_cell(cell) for cell in sorted(cells)]


def _cell_set(cells: list[str]) -> frozenset[Cell]:
    return frozenset(parse(cell) for cell in cells)


def _move_record(entry: MoveLogEntry) -> MoveRecord:
    return MoveRecord(
        player=entry.player,
        piece_id=entry.piece_id,
        piece_type_name=entry.piece_type_name,
        piece_type=entry.piece_type,
        from_cell=format_cell(entry.from_cell),
        to_cell=format_cell(entry.to_cell),
        turn_number=entry.turn_number,
        is_capture=entry.is_capture,
        captured_piece_type=entry.captured_piece_type,
        captured_piece_id=entry.captured_piece_id,
    )


def _move_entry(record: MoveRecord) -> MoveLogEntry:
    return MoveLogEntry(
        player=record.player,
        piece_id=PieceID(record.piece_id),
        piece_type_name=record.piece_type_name,
        piece_type=record.piece_type,
        from_cell=parse(record.from_cell),
        to_cell=parse(record.to_cell),
        turn_number=record.turn_number,
        is_capture=record.is_capture,
        captured_piece_type=record.captured_piece_type,
        captured_piece_id=PieceID(record.captured_piece_id)
        if record.captured_piece_id is not None
        else None,
    )
