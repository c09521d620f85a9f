from fastapi import APIRouter, HTTPException
import json

from almanac.definitions import settings as setting_defs
from ..database import db
from ..models.weather import SceneEnvironment

router = APIRouter(prefix="/scenes", tags=["scenes"])

def _decode(value):
    if isinstance(value, str):
        return json.loads(value)
    return value or {}

def _to_summary(row) -> SceneEnvironment:
    flags = _decode(row['flags'])
    environment = _decode(row['environment'])
    return SceneEnvironment(
        id=row['id'],
        name=row['name'],
        is_active=row['is_active'],
        darkness_level=environment.get('darkness_level'),
        climate_zone_override=flags.get(setting_defs.SCENE_CLIMATE_ZONE_OVERRIDE),
    )

@router.get("/", response_model=list[SceneEnvironment])
async def get_scenes():
    """All scenes with their last synchronized darkness."""
    rows = await db.fetch_all("SELECT id, name, is_active, flags, environment FROM scenes ORDER BY id")
    return [_to_summary(row) for row in rows]

@router.get("/{scene_id}")
async def get_scene(scene_id: int):
    """Full environment record for one scene, including lighting channels."""
    row = await db.fetch_one("SELECT id, name, is_active, flags, environment FROM scenes WHERE id = $1", scene_id)
    if not row:
        raise HTTPException(status_code=404, detail="Scene not found")
    return {
        **_to_summary(row).model_dump(),
        "flags": _decode(row['flags']),
        "environment": _decode(row['environment']),
    }
