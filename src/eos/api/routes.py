"""HTTP routes for the EOS API."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from eos.api.runtime import ApiState
from eos.database import check_database_health
from eos.domain.enums import ActionError, Side, TurnPhase, WinCondition, Winner
from eos.domain.turn import ActionResult, Game
from eos.repository import GameID, dump_rule_table
from eos.snapshot import TurnSyncMessage

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


class GameSummary(BaseModel):
    id: int
    current_turn: Side
    turn_phase: TurnPhase
    winner: Winner | None
    win_condition: WinCondition | None
    move_count: int
    pieces_on_board: dict[Side, int]


class GameDetail(BaseModel):
    id: int
    state: TurnSyncMessage


class CreateGameRequest(BaseModel):
    first_turn: Side = Side.PLAYER1


class SelectRequest(BaseModel):
    piece_id: str = Field(min_length=1)


class CellRequest(BaseModel):
    cell: str = Field(min_length=2, max_length=3)


class ResultRequest(BaseModel):
    winner: Winner
    condition: WinCondition


class ActionResponse(BaseModel):
    ok: bool
    phase: TurnPhase
    captured_piece_id: str | None = None
    winner: Winner | None = None
    state: TurnSyncMessage


class SideScoreResponse(BaseModel):
    captures: int
    points: int
    final: int


class MatchResponse(BaseModel):
    match_id: str
    winner: Winner
    win_condition: WinCondition
    player1_score: int
    player2_score: int
    move_count: int
    finished_at: datetime


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {
        "status": "ok",
        "rules_version": state.settings.rules_version,
        "database": check_database_health(state.engine),
    }


@router.get("/rules")
async def get_rules(state: ApiStateDep) -> dict[str, object]:
    scoring = state.rules.scoring
    return {
        "version": state.settings.rules_version,
        "pieces": dump_rule_table(state.rule_table),
        "piece_values": {str(kind): value for kind, value in scoring.piece_values.items()},
        "solitude_bonus": scoring.solitude_bonus,
        "decisive_bonus": scoring.decisive_bonus,
        "capturable_pieces": scoring.capturable_pieces,
    }


@router.get("/games", response_model=list[GameSummary])
async def list_games(state: ApiStateDep) -> list[GameSummary]:
    return [
        GameSummary.model_validate(state.games.to_summary_dict(game_id, game))
        for game_id, game in state.games.list_games()
    ]


@router.post("/games", response_model=GameDetail, status_code=status.HTTP_201_CREATED)
async def create_game(request: CreateGameRequest, state: ApiStateDep) -> GameDetail:
    game_id, game = state.games.create_game(first_turn=request.first_turn)
    return GameDetail(id=int(game_id), state=state.games.snapshot(game))


@router.get("/games/{game_id}", response_model=GameDetail)
async def get_game(game_id: int, state: ApiStateDep) -> GameDetail:
    game = _load(state, game_id)
    return GameDetail(id=game_id, state=state.games.snapshot(game))


@router.post("/games/{game_id}/select", response_model=ActionResponse)
async def select_piece(game_id: int, request: SelectRequest, state: ApiStateDep) -> ActionResponse:
    return _act(state, game_id, "select", request.piece_id)


@router.post("/games/{game_id}/move", response_model=ActionResponse)
async def move_piece(game_id: int, request: CellRequest, state: ApiStateDep) -> ActionResponse:
    return _act(state, game_id, "move", request.cell)


@router.post("/games/{game_id}/attack", response_model=ActionResponse)
async def attack_cell(game_id: int, request: CellRequest, state: ApiStateDep) -> ActionResponse:
    return _act(state, game_id, "attack", request.cell)


@router.post("/games/{game_id}/end-turn", response_model=ActionResponse)
async def end_turn(game_id: int, state: ApiStateDep) -> ActionResponse:
    return _act(state, game_id, "end_turn")


@router.post("/games/{game_id}/result", response_model=ActionResponse)
async def declare_result(
    game_id: int, request: ResultRequest, state: ApiStateDep
) -> ActionResponse:
    _load(state, game_id)
    result, game = state.games.declare_result(GameID(game_id), request.winner, request.condition)
    return _respond(state, result, game)


@router.get("/games/{game_id}/score", response_model=dict[Side, SideScoreResponse])
async def get_score(game_id: int, state: ApiStateDep) -> dict[Side, SideScoreResponse]:
    game = _load(state, game_id)
    return {
        side: SideScoreResponse(captures=score.captures, points=score.points, final=score.final)
        for side, score in state.games.score(game).items()
    }


@router.get("/matches", response_model=list[MatchResponse])
async def list_matches(state: ApiStateDep) -> list[MatchResponse]:
    return [
        MatchResponse(
            match_id=match.match_id,
            winner=match.winner,
            win_condition=match.win_condition,
            player1_score=match.player1_score,
            player2_score=match.player2_score,
            move_count=match.move_count,
            finished_at=match.finished_at,
        )
        for match in state.archive.list_matches()
    ]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load(state: ApiState, game_id: int) -> Game:
    try:
        return state.games.get_game(GameID(game_id))
    except FileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="game not found") from exc


def _act(state: ApiState, game_id: int, action: str, argument: str | None = None) -> ActionResponse:
    _load(state, game_id)
    result, game = state.games.act(GameID(game_id), action, argument)
    return _respond(state, result, game)


def _respond(state: ApiState, result: ActionResult, game: Game) -> ActionResponse:
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "error": str(result.error or ActionError.ILLEGAL_ACTION),
                "detail": result.detail,
                "phase": str(result.phase),
            },
        )
    return ActionResponse(
        ok=True,
        phase=result.phase,
        captured_piece_id=result.captured_piece_id,
        winner=result.winner,
        state=state.games.snapshot(game),
    )
