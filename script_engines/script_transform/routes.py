from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from script_engines.assets.models import AuxiliaryMetadata, FileTypeInfo
from script_engines.assets.service import detect_file_type
from script_engines.common.error_envelope import invalid_request_error
from script_engines.script_transform.lines import has_next_flag, only_set_transform, split_lines, toggle_next
from script_engines.script_transform.models import AnimationSegment, ReconcileResult, SetTransform
from script_engines.script_transform.schemas import (
    CommandsRequest,
    ExportRequest,
    ExportResponse,
    LineRequest,
    LineResponse,
    LinesRequest,
    LinesResponse,
    ParseRequest,
    ParseResponse,
    PlaceFigureRequest,
)
from script_engines.script_transform.service import ScriptTransformService, get_script_service

router = APIRouter(prefix="/script", tags=["script_transform"])


@router.post("/parse", response_model=ParseResponse)
def parse(req: ParseRequest, service: ScriptTransformService = Depends(get_script_service)):
    return ParseResponse(commands=service.parse(req.text, req.scale_x, req.scale_y))


@router.post("/reconcile", response_model=ReconcileResult)
def reconcile(req: CommandsRequest, service: ScriptTransformService = Depends(get_script_service)):
    return service.reconcile(req.commands)


@router.post("/animation", response_model=List[AnimationSegment])
def animation(req: CommandsRequest, service: ScriptTransformService = Depends(get_script_service)):
    return service.animation(req.commands)


@router.post("/export", response_model=ExportResponse)
def export(req: ExportRequest, service: ScriptTransformService = Depends(get_script_service)):
    try:
        script = service.export(
            req.commands,
            canvas_width=req.canvas_width,
            canvas_height=req.canvas_height,
            export_duration=req.export_duration,
            base_width=req.base_width,
            base_height=req.base_height,
            default_easing=req.default_easing,
        )
    except ValueError as exc:
        invalid_request_error(exc, resource_kind="script", action_name="export")
    return ExportResponse(script=script, lines=script.split("\n") if script else [])


@router.post("/lines/toggle-next", response_model=LineResponse)
def toggle_next_line(req: LineRequest):
    line = toggle_next(req.line)
    return LineResponse(line=line, has_next=has_next_flag(line))


@router.post("/lines/set-transform-only", response_model=LinesResponse)
def set_transform_lines(req: LinesRequest):
    return LinesResponse(lines=only_set_transform(split_lines(req.text)))


@router.post("/figures/place", response_model=SetTransform)
def place_figure(req: PlaceFigureRequest, service: ScriptTransformService = Depends(get_script_service)):
    try:
        return service.place_figure(
            req.target,
            req.canvas_width,
            req.canvas_height,
            req.image_width,
            req.image_height,
            preset=req.preset,
        )
    except ValueError as exc:
        invalid_request_error(exc, resource_kind="figure", action_name="place")


@router.get("/assets/type", response_model=FileTypeInfo)
def asset_type(path: str):
    return detect_file_type(path)


@router.get("/assets/metadata", response_model=AuxiliaryMetadata)
def asset_metadata(path: str, service: ScriptTransformService = Depends(get_script_service)):
    return service.figure_metadata(path)
