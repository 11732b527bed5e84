"""FastAPI application exposing rule sets and game sessions over HTTP."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple
from uuid import uuid4

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, StrictInt

from game import GameError, GameSession, Settings, get_settings
from rulery import (
    CheckedGameRules,
    DocumentFormatError,
    EvaluationError,
    OutcomePolicy,
    PieceModel,
    RuleNotFoundError,
    RuleRepository,
    RulesError,
    load_from_bytes,
)

logger = logging.getLogger(__name__)


@dataclass
class SessionRecord:
    """Tracks a running session and its replay information."""

    session: GameSession
    actions: List[Dict[str, Any]] = field(default_factory=list)
    state_hashes: List[str] = field(default_factory=list)

    def record(self, action: Optional[Dict[str, Any]]) -> None:
        if action is not None:
            self.actions.append(action)
        self.state_hashes.append(self.session.state_hash())


class CreateSessionRequest(BaseModel):
    rules: Optional[str] = Field(default=None, description="Name of a loaded rule set")
    document: Optional[Dict[str, Any]] = Field(default=None, description="Inline rule document")
    policy: Optional[OutcomePolicy] = Field(default=None, description="Win/lose evaluation order")


class SessionResponse(BaseModel):
    session_id: str
    state: Dict[str, Any]


class PosRequest(BaseModel):
    pos: Tuple[StrictInt, StrictInt]


class PlacingRequest(BaseModel):
    model: PieceModel


class StepRequest(BaseModel):
    action: Dict[str, Any]


class StepResponse(BaseModel):
    state: Dict[str, Any]
    done: bool
    info: Dict[str, Any]


class ReplayResponse(BaseModel):
    session_id: str
    rules: str
    actions: List[Dict[str, Any]]
    state_hashes: List[str]


class RuleListResponse(BaseModel):
    rules: List[str]


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, RuleNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, DocumentFormatError):
        return HTTPException(status_code=422, detail={"code": exc.code, "message": str(exc)})
    if isinstance(exc, (RulesError, GameError)):
        return HTTPException(status_code=400, detail={"code": exc.code, "message": str(exc)})
    return HTTPException(status_code=500, detail=str(exc))


class SessionManager:
    """In-memory registry of running sessions."""

    def __init__(self, repository: RuleRepository, default_policy: OutcomePolicy = OutcomePolicy.LOSE_FIRST) -> None:
        self._repository = repository
        self._default_policy = default_policy
        self._sessions: Dict[str, SessionRecord] = {}

    @property
    def repository(self) -> RuleRepository:
        return self._repository

    def create(self, payload: CreateSessionRequest) -> SessionResponse:
        try:
            rules = self._resolve_rules(payload)
        except (RulesError, GameError) as exc:
            raise _http_error(exc) from exc
        session_id = str(uuid4())
        session = GameSession(rules, policy=payload.policy or self._default_policy)
        record = SessionRecord(session=session)
        record.record(None)
        self._sessions[session_id] = record
        logger.info("Created session %s with rules %r", session_id, rules.name)
        return SessionResponse(session_id=session_id, state=session.observation())

    def require_session(self, session_id: str) -> SessionRecord:
        if session_id not in self._sessions:
            raise HTTPException(status_code=404, detail="Session not found")
        return self._sessions[session_id]

    def state(self, session_id: str) -> SessionResponse:
        record = self.require_session(session_id)
        return SessionResponse(session_id=session_id, state=record.session.observation())

    def run(self, session_id: str, action: Dict[str, Any], step: Callable[[GameSession], Any]) -> StepResponse:
        record = self.require_session(session_id)
        session = record.session
        try:
            step(session)
        except (RulesError, GameError) as exc:
            if isinstance(exc, EvaluationError):
                logger.warning("Session %s step %s failed: %s", session_id, action, exc)
            raise _http_error(exc) from exc
        record.record(action)
        return StepResponse(
            state=session.observation(),
            done=session.is_over,
            info={"player_states": {color.value: player.state.value for color, player in session.players}},
        )

    def replay(self, session_id: str) -> ReplayResponse:
        record = self.require_session(session_id)
        return ReplayResponse(
            session_id=session_id,
            rules=record.session.rules.name,
            actions=record.actions,
            state_hashes=record.state_hashes,
        )

    def _resolve_rules(self, payload: CreateSessionRequest) -> CheckedGameRules:
        if payload.document is not None:
            return load_from_bytes(json.dumps(payload.document)).check()
        if payload.rules is not None:
            return self._repository.get(payload.rules)
        return CheckedGameRules.default()


def build_repository(settings: Settings) -> RuleRepository:
    repository = RuleRepository()
    repository.register(CheckedGameRules.default())
    if settings.rules_dir is not None:
        repository.load_directory(settings.rules_dir)
    if settings.rules_path is not None:
        repository.load_from_json(settings.rules_path)
    return repository


def create_app(settings: Optional[Settings] = None, repository: Optional[RuleRepository] = None) -> FastAPI:
    settings = settings or get_settings()
    manager = SessionManager(repository or build_repository(settings), settings.outcome_policy)
    app = FastAPI(title="Rulery Rule Service", version="0.1.0")
    app.state.manager = manager

    @app.get("/healthz")
    def health_check() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/rules", response_model=RuleListResponse)
    def list_rules() -> RuleListResponse:
        return RuleListResponse(rules=manager.repository.names())

    @app.get("/rules/{name}")
    def get_rules(name: str) -> Dict[str, Any]:
        try:
            return manager.repository.get(name).to_dict()
        except RuleNotFoundError as exc:
            raise _http_error(exc) from exc

    @app.post("/sessions", response_model=SessionResponse)
    def create_session(payload: CreateSessionRequest) -> SessionResponse:
        return manager.create(payload)

    @app.get("/sessions/{session_id}", response_model=SessionResponse)
    def get_session(session_id: str) -> SessionResponse:
        return manager.state(session_id)

    @app.post("/sessions/{session_id}/select", response_model=StepResponse)
    def select_piece(session_id: str, payload: PosRequest) -> StepResponse:
        action = {"type": "select", "pos": list(payload.pos)}
        return manager.run(session_id, action, lambda session: session.select_piece(payload.pos))

    @app.post("/sessions/{session_id}/move", response_model=StepResponse)
    def move_piece(session_id: str, payload: PosRequest) -> StepResponse:
        action = {"type": "move", "pos": list(payload.pos)}
        return manager.run(session_id, action, lambda session: session.move_to(payload.pos))

    @app.post("/sessions/{session_id}/placing", response_model=StepResponse)
    def begin_placing(session_id: str, payload: PlacingRequest) -> StepResponse:
        action = {"type": "begin_placing", "model": payload.model.value}
        return manager.run(session_id, action, lambda session: session.begin_placing(payload.model))

    @app.post("/sessions/{session_id}/place", response_model=StepResponse)
    def place_piece(session_id: str, payload: PosRequest) -> StepResponse:
        action = {"type": "place", "pos": list(payload.pos)}
        return manager.run(session_id, action, lambda session: session.place_at(payload.pos))

    @app.post("/sessions/{session_id}/cancel", response_model=StepResponse)
    def cancel(session_id: str) -> StepResponse:
        return manager.run(session_id, {"type": "cancel"}, lambda session: session.cancel())

    @app.post("/sessions/{session_id}/step", response_model=StepResponse)
    def step(session_id: str, payload: StepRequest) -> StepResponse:
        return manager.run(session_id, payload.action, lambda session: session.step(payload.action))

    @app.get("/sessions/{session_id}/replay", response_model=ReplayResponse)
    def get_replay(session_id: str) -> ReplayResponse:
        return manager.replay(session_id)

    return app


_app: Optional[FastAPI] = None


def __getattr__(name: str) -> Any:
    # ``uvicorn api.app:app`` builds the default app on first access, not at import.
    global _app
    if name == "app":
        if _app is None:
            _app = create_app()
        return _app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
