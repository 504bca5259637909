"""FastAPI endpoints for starting, driving and ending live encounters."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from .config import load_settings
from .content import create_content_store
from .dice import Dice
from .engine import InvalidActionError, apply_action
from .initializer import EncounterInitializationError
from .models import EncounterDefinition, MonsterGroup
from .sessions import InMemorySessionRegistry, LiveSession, SessionRegistry
from .state import build_session_view

logger = logging.getLogger(__name__)


class MonsterGroupPayload(BaseModel):
    monster_id: str = Field(min_length=1)
    quantity: int = Field(ge=0, le=100)


class CreateEncounterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    monster_groups: list[MonsterGroupPayload] = Field(default_factory=list)
    encounter_table_id: str | None = None
    player_names: list[str] = Field(default_factory=list)
    scene_description: str = ""
    gm_notes: str = ""

    def to_definition(self) -> EncounterDefinition:
        return EncounterDefinition(
            id=str(uuid.uuid4()),
            name=self.name,
            monster_groups=tuple(MonsterGroup(monster_id=g.monster_id, quantity=g.quantity) for g in self.monster_groups),
            encounter_table_id=self.encounter_table_id,
            player_names=tuple(self.player_names),
            scene_description=self.scene_description,
            gm_notes=self.gm_notes,
        )


class CreateEncounterResponse(BaseModel):
    encounter_id: str
    state: dict[str, Any]


class EncounterStateResponse(BaseModel):
    state: dict[str, Any]
    events: list[dict[str, Any]] = Field(default_factory=list)


class ActionEnvelope(BaseModel):
    action: dict[str, Any]


def _default_registry() -> SessionRegistry:
    settings = load_settings()
    content = create_content_store(settings.database_url, settings.content_path)
    if settings.seed is None:
        return InMemorySessionRegistry(content=content)
    return InMemorySessionRegistry(content=content, dice_factory=lambda: Dice.seeded(settings.seed))


def create_app(registry: SessionRegistry | None = None) -> FastAPI:
    app = FastAPI(title="Skirmish Encounter API", version="0.1.0")
    sessions = registry if registry is not None else _default_registry()
    app.state.sessions = sessions

    def get_registry() -> SessionRegistry:
        return sessions

    def require_session(encounter_id: str, local_registry: SessionRegistry) -> LiveSession:
        session = local_registry.get(encounter_id)
        if session is None:
            raise HTTPException(status_code=404, detail="Encounter not found")
        return session

    @app.post("/api/encounters", response_model=CreateEncounterResponse)
    async def create_encounter(
        payload: CreateEncounterRequest,
        local_registry: SessionRegistry = Depends(get_registry),
    ) -> CreateEncounterResponse:
        try:
            session = await local_registry.start(payload.to_definition())
        except EncounterInitializationError as exc:
            logger.error("Encounter %s could not start: %s", payload.name, exc)
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return CreateEncounterResponse(
            encounter_id=session.session_id,
            state=build_session_view(session.session_id, session.definition.name, session.controller),
        )

    @app.get("/api/encounters/{encounter_id}", response_model=EncounterStateResponse)
    def get_encounter(
        encounter_id: str,
        local_registry: SessionRegistry = Depends(get_registry),
    ) -> EncounterStateResponse:
        session = require_session(encounter_id, local_registry)
        return EncounterStateResponse(
            state=build_session_view(session.session_id, session.definition.name, session.controller)
        )

    @app.post("/api/encounters/{encounter_id}/actions", response_model=EncounterStateResponse)
    def post_action(
        encounter_id: str,
        payload: ActionEnvelope,
        local_registry: SessionRegistry = Depends(get_registry),
    ) -> EncounterStateResponse:
        session = require_session(encounter_id, local_registry)
        try:
            result = apply_action(session.controller, payload.action)
        except InvalidActionError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return EncounterStateResponse(
            state=build_session_view(session.session_id, session.definition.name, session.controller),
            events=result.engine_events,
        )

    @app.delete("/api/encounters/{encounter_id}", status_code=204)
    def end_encounter(
        encounter_id: str,
        local_registry: SessionRegistry = Depends(get_registry),
    ) -> None:
        if not local_registry.end(encounter_id):
            raise HTTPException(status_code=404, detail="Encounter not found")

    return app


app = create_app()
