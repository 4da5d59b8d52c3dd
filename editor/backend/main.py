"""
blockmacro editor backend. Compiles workspaces sent by the block editor and relays run/stop to the macro agent.
Run from repo root: python -m editor.backend.main  (or uvicorn editor.backend.main:app --reload)
"""

import logging
import os
from pathlib import Path
from typing import Any, Iterator

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from blockmacro import __version__
from blockmacro.compiler import compile_workspace
from blockmacro.config import load_settings
from blockmacro.converters import default_registry
from blockmacro.errors import BlockMacroError, TransportError
from blockmacro.toolbox import load_toolbox, toolbox_xml
from blockmacro.transport import AgentClient
from blockmacro.workspace import load_workspace

logger = logging.getLogger(__name__)

settings = load_settings()

app = FastAPI(title="blockmacro Editor API", version=__version__)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


# --- Request/response models ---

class WorkspaceRequest(BaseModel):
    workspace: Any


class CompileResponse(BaseModel):
    ok: bool
    program: dict | None = None
    error: str | None = None


class RunResponse(BaseModel):
    ok: bool
    message: str
    steps: int = 0


class StopResponse(BaseModel):
    ok: bool
    message: str


class BlocksResponse(BaseModel):
    blocks: list[dict]


class ToolboxResponse(BaseModel):
    categories: list[dict]
    xml: str


class MousePosition(BaseModel):
    x: int
    y: int


def get_agent_client() -> Iterator[AgentClient]:
    """One agent client per request; tests override this dependency."""
    with AgentClient(settings.agent_url, timeout=settings.timeout) as client:
        yield client


# --- API routes ---

@app.post("/api/compile", response_model=CompileResponse)
def api_compile(req: WorkspaceRequest) -> CompileResponse:
    """Compile the editor's workspace JSON into the agent program."""
    try:
        program = compile_workspace(load_workspace(req.workspace, path="editor"), default_registry())
    except BlockMacroError as e:
        return CompileResponse(ok=False, error=str(e))
    return CompileResponse(ok=True, program=program.to_dict())


@app.post("/api/run", response_model=RunResponse)
def api_run(req: WorkspaceRequest, client: AgentClient = Depends(get_agent_client)) -> RunResponse:
    """Compile and hand the program to the macro agent."""
    try:
        program = compile_workspace(load_workspace(req.workspace, path="editor"), default_registry())
    except BlockMacroError as e:
        return RunResponse(ok=False, message=str(e))
    status = client.submit_run(program)
    return RunResponse(ok=status.ok, message=status.message, steps=len(program))


@app.post("/api/stop", response_model=StopResponse)
def api_stop(client: AgentClient = Depends(get_agent_client)) -> StopResponse:
    """Emergency stop; the page binds this to its stop button and stop key."""
    status = client.submit_stop()
    return StopResponse(ok=status.ok, message=status.message)


@app.get("/api/blocks", response_model=BlocksResponse)
def api_blocks() -> BlocksResponse:
    """Block definitions (category, fields, sockets) for building the editor palette."""
    return BlocksResponse(blocks=[d.to_dict() for d in default_registry().definitions()])


@app.get("/api/toolbox", response_model=ToolboxResponse)
def api_toolbox() -> ToolboxResponse:
    categories = load_toolbox()
    return ToolboxResponse(categories=[c.to_dict() for c in categories], xml=toolbox_xml(categories))


@app.get("/api/mouse-position", response_model=MousePosition)
def api_mouse_position(client: AgentClient = Depends(get_agent_client)) -> MousePosition:
    """Current pointer position from the agent, used to fill move-to fields."""
    try:
        x, y = client.mouse_position()
    except TransportError as e:
        logger.warning("%s", e)
        raise HTTPException(status_code=502, detail=str(e))
    return MousePosition(x=x, y=y)


# --- Static frontend ---

frontend_path = Path(__file__).resolve().parent.parent / "frontend"
if frontend_path.exists():
    app.mount("/", StaticFiles(directory=str(frontend_path), html=True), name="frontend")


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run(app, host="0.0.0.0", port=port)
