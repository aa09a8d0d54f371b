"""JSON-based repository for live EOS games."""

from __future__ import annotations

from pathlib import Path
from typing import NewType

from eos.snapshot import TurnSyncMessage

GameID = NewType("GameID", int)


class JsonGameRepository:
    """Persist games as turn-sync snapshots on disk."""

    def __init__(self, base_path: Path) -> None:
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _path_for(self, game_id: GameID) -> Path:
        return self.base_path / f"game_{int(game_id)}.json"

    def save(self, game_id: GameID, snapshot: TurnSyncMessage) -> Path:
        """Serialize a snapshot to disk and return its path."""

        path = self._path_for(game_id)
        path.write_text(snapshot.model_dump_json(indent=2, by_alias=True), encoding="utf-8")
        return path

    def load(self, game_id: GameID) -> TurnSyncMessage:
        """Load a previously saved snapshot or raise ``FileNotFoundError``."""

        path = self._path_for(game_id)
        data = path.read_bytes()
        return TurnSyncMessage.model_validate_json(data)

    def exists(self, game_id: GameID) -> bool:
        return self._path_for(game_id).exists()

    def list_games(self) -> list[GameID]:
        """Return all game ids currently persisted in the repository."""

        ids: list[GameID] = []
        prefix = "game_"
        suffix = ".json"
        for path in self.base_path.glob("game_*.json"):
            stem = path.name
            if stem.startswith(prefix) and stem.endswith(suffix):
                raw = stem[len(prefix) : -len(suffix)]
                try:
                    ids.append(GameID(int(raw)))
                except ValueError:  # pragma: no cover - ignored malformed file
                    continue
        return sorted(ids, key=int)

    def next_identifier(self) -> GameID:
        existing = self.list_games()
        if not existing:
            return GameID(1)
        return GameID(int(existing[-1]) + 1)

    def delete(self, game_id: GameID) -> None:
        """Remove a snapshot if it exists."""

        path = self._path_for(game_id)
        if path.exists():
            path.unlink()
