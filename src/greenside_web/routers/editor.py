"""Editor API: drive the map editor's draw modes and edit sessions over HTTP.

Every mutating endpoint returns the editor snapshot so the frontend can
re-sync its toolbar state (draw mode, drawing/editing flags, feature count).
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from loguru import logger
from pydantic import BaseModel, Field

from greenside.draw.bindings import ADD_HEAD_ACTION, DRAW_BUTTONS, IRRIGATION_BUTTONS, find_button
from greenside.editor import MapEditor
from greenside.errors import UnknownModeError
from greenside.layers.store import MAP_KEY
from greenside.render.styles import SOURCE_ID, STATIC_LAYER_IDS

router = APIRouter(prefix="/api/editor", tags=["editor"])


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class ModeRequest(BaseModel):
    """Enter a draw mode, optionally with properties for the next feature."""
    mode: str
    properties: Optional[dict[str, Any]] = None


class KeyRequest(BaseModel):
    key: str


class ButtonRequest(BaseModel):
    title: str


class ClickRequest(BaseModel):
    lng: float = Field(ge=-180.0, le=180.0)
    lat: float = Field(ge=-90.0, le=90.0)


class SelectRequest(BaseModel):
    ids: list[str]


class FeatureUpdate(BaseModel):
    geometry: Optional[dict[str, Any]] = None
    properties: Optional[dict[str, Any]] = None


class FeatureIn(BaseModel):
    type: str = "Feature"
    geometry: Optional[dict[str, Any]] = None
    properties: Optional[dict[str, Any]] = None


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def get_editor(request: Request) -> MapEditor:
    editor = getattr(request.app.state, "editor", None)
    if editor is None:
        raise HTTPException(status_code=503, detail="Editor not initialized")
    return editor


def _require_editing(editor: MapEditor) -> None:
    if not editor.controller.editing:
        raise HTTPException(status_code=409, detail="No edit session active")


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

@router.get("/state")
async def get_state(editor: MapEditor = Depends(get_editor)):
    return editor.snapshot()


@router.get("/map")
async def get_map(editor: MapEditor = Depends(get_editor)):
    """The stored FeatureCollection."""
    return editor.store.get(MAP_KEY)


@router.get("/render")
async def get_render(editor: MapEditor = Depends(get_editor)):
    """What the static layers currently show, plus the drawing overlay."""
    source = editor.map.get_source(SOURCE_ID)
    layers = {}
    for layer_id in STATIC_LAYER_IDS:
        layer = editor.map.get_layer(layer_id)
        if layer is not None:
            layers[layer_id] = layer.get("layout", {}).get("visibility", "visible")
    return {
        "installed": source is not None,
        "data": source.get("data") if source else None,
        "layers": layers,
        "markers_visible": editor.render.markers_visible,
        "overlay": editor.tool.display_features(),
    }


@router.get("/toolbar")
async def get_toolbar():
    def _button(b):
        return {"title": b.title, "classes": list(b.classes), "mode": b.mode, "action": b.action}
    return {
        "draw": [_button(b) for b in DRAW_BUTTONS],
        "irrigation": [_button(b) for b in IRRIGATION_BUTTONS],
    }


# ---------------------------------------------------------------------------
# Drawing
# ---------------------------------------------------------------------------

@router.post("/mode")
async def set_mode(body: ModeRequest, editor: MapEditor = Depends(get_editor)):
    try:
        accepted = editor.trigger(body.mode, body.properties)
    except UnknownModeError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if not accepted:
        raise HTTPException(status_code=409, detail="Editor is read-only or in an edit session")
    return editor.snapshot()


@router.post("/key")
async def press_key(body: KeyRequest, editor: MapEditor = Depends(get_editor)):
    handled = editor.press_key(body.key)
    return {"handled": handled, **editor.snapshot()}


@router.post("/button")
async def click_button(body: ButtonRequest, editor: MapEditor = Depends(get_editor)):
    button = find_button(body.title)
    if button is None:
        raise HTTPException(status_code=404, detail=f"No toolbar button titled {body.title!r}")
    if button.action == ADD_HEAD_ACTION:
        return await add_head(editor)
    if not editor.click_button(body.title):
        raise HTTPException(status_code=409, detail="Editor is read-only or in an edit session")
    return editor.snapshot()


@router.post("/draw/click")
async def draw_click(body: ClickRequest, editor: MapEditor = Depends(get_editor)):
    editor.click(body.lng, body.lat)
    return editor.snapshot()


@router.post("/draw/finish")
async def draw_finish(editor: MapEditor = Depends(get_editor)):
    editor.pipeline.last_result = None
    editor.finish()
    result = editor.pipeline.last_result
    snapshot = editor.snapshot()
    if result is not None and not result.ok:
        snapshot["error"] = result.error
    return snapshot


@router.post("/draw/trash")
async def draw_trash(editor: MapEditor = Depends(get_editor)):
    editor.trash()
    return editor.snapshot()


@router.post("/features/{index}/click")
async def feature_click(index: int, from_canvas: bool = True, editor: MapEditor = Depends(get_editor)):
    """Whether clicking stored feature ``index`` opens its popup."""
    features = (editor.store.get(MAP_KEY) or {}).get("features") or []
    if not 0 <= index < len(features):
        raise HTTPException(status_code=404, detail=f"No feature at index {index}")
    opens = editor.feature_clicked(from_canvas)
    return {"popup": opens, "properties": features[index].get("properties") if opens else None}


# ---------------------------------------------------------------------------
# Edit session
# ---------------------------------------------------------------------------

@router.post("/edit/enter")
async def edit_enter(editor: MapEditor = Depends(get_editor)):
    if not editor.enter_edit():
        raise HTTPException(status_code=409, detail="Editor is read-only or already editing")
    return editor.snapshot()


@router.post("/edit/save")
async def edit_save(editor: MapEditor = Depends(get_editor)):
    _require_editing(editor)
    if not editor.save_edit():
        raise HTTPException(status_code=422, detail="Edited collection has malformed geometry")
    return editor.snapshot()


@router.post("/edit/cancel")
async def edit_cancel(editor: MapEditor = Depends(get_editor)):
    _require_editing(editor)
    editor.cancel_edit()
    return editor.snapshot()


@router.post("/edit/trash")
async def edit_trash(editor: MapEditor = Depends(get_editor)):
    _require_editing(editor)
    editor.session.trash()
    return editor.snapshot()


@router.post("/edit/select")
async def edit_select(body: SelectRequest, editor: MapEditor = Depends(get_editor)):
    _require_editing(editor)
    return {"selected_ids": editor.session.select(body.ids)}


@router.get("/edit/features")
async def edit_features(editor: MapEditor = Depends(get_editor)):
    _require_editing(editor)
    return editor.tool.get_all()


@router.post("/edit/features")
async def edit_add_feature(body: FeatureIn, editor: MapEditor = Depends(get_editor)):
    _require_editing(editor)
    if body.type != "Feature":
        raise HTTPException(status_code=422, detail="Expected a GeoJSON Feature")
    feature_id = editor.session.add_feature(body.model_dump())
    return {"id": feature_id}


@router.patch("/edit/features/{feature_id}")
async def edit_update_feature(
    feature_id: str, body: FeatureUpdate, editor: MapEditor = Depends(get_editor)
):
    _require_editing(editor)
    try:
        return editor.session.update_feature(feature_id, body.geometry, body.properties)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Feature not found: {feature_id}")


# ---------------------------------------------------------------------------
# Irrigation
# ---------------------------------------------------------------------------

@router.post("/irrigation/head")
async def irrigation_head(editor: MapEditor = Depends(get_editor)):
    return await add_head(editor)


async def add_head(editor: MapEditor) -> dict:
    result = await editor.add_head_at_gps()
    if result is None:
        raise HTTPException(status_code=409, detail="Editor is read-only or in an edit session")
    if not result.ok:
        logger.error(f"Sprinkler head rejected: {result.error}")
        raise HTTPException(status_code=422, detail=result.error)
    return {"feature": result.features[0], **editor.snapshot()}
