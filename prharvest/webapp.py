"""HTTP query interface over one review session."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from prharvest.models import OutputFormat
from prharvest.session import ReviewSession

SELECTION_ACTIONS = ("select", "deselect", "ignore", "unignore", "toggle-all")


class IdsRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ids: list[str] = Field(default_factory=list)


def _query_payload(session: ReviewSession) -> dict[str, Any]:
    return session.query().model_dump(mode="json", by_alias=True)


def create_app(session: ReviewSession) -> FastAPI:
    app = FastAPI(title="prharvest", version="0.1.0")

    @app.get("/api/query")
    def query() -> dict[str, Any]:
        return _query_payload(session)

    @app.post("/api/refresh")
    def refresh() -> dict[str, Any]:
        session.refresh()
        return {"ok": True, "found": session.query().found, "status": session.status}

    @app.post("/api/build/{fmt}")
    def build(fmt: str, request: IdsRequest) -> dict[str, str]:
        try:
            resolved = OutputFormat(fmt)
        except ValueError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown output format: {fmt}") from exc
        builders = {
            OutputFormat.PROMPT: session.build_prompt,
            OutputFormat.MARKDOWN: session.build_markdown,
            OutputFormat.JSON: session.build_json,
        }
        return {resolved.value: builders[resolved](request.ids)}

    @app.post("/api/selection/{action}")
    def selection(action: str, request: IdsRequest) -> dict[str, Any]:
        if action not in SELECTION_ACTIONS:
            raise HTTPException(status_code=404, detail=f"Unknown selection action: {action}")
        if action == "toggle-all":
            session.toggle_all()
        else:
            getattr(session, action)(request.ids)
        return _query_payload(session)

    return app
