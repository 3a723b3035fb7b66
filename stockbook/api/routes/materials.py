"""Material catalog endpoints."""

from fastapi import APIRouter, Depends, status

from stockbook.api.dependencies import get_registry
from stockbook.application.dto.requests import CreateMaterialRequest, UpdateMaterialRequest
from stockbook.application.dto.responses import (
    DeleteResponse,
    ErrorResponse,
    MaterialDetailResponse,
    MaterialResponse,
)
from stockbook.core.entities.material import MaterialUpdate
from stockbook.core.services import MaterialRegistryService

router = APIRouter(prefix="/api/materials", tags=["materials"])


@router.post(
    "",
    response_model=MaterialResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_material(
    request: CreateMaterialRequest,
    registry: MaterialRegistryService = Depends(get_registry),
) -> MaterialResponse:
    """Register a material. Stock starts at zero; use stock movements to add it."""
    material = await registry.create_material(
        sku=request.sku,
        name=request.name,
        category=request.category,
        supplier=request.supplier,
        unit_price=request.unit_price,
        reorder_level=request.reorder_level,
    )
    return MaterialResponse.from_entity(material)


@router.get("", response_model=list[MaterialResponse])
async def list_materials(
    registry: MaterialRegistryService = Depends(get_registry),
) -> list[MaterialResponse]:
    """List all materials, newest first."""
    return [MaterialResponse.from_entity(m) for m in await registry.list_materials()]


@router.get(
    "/sku/{sku}",
    response_model=MaterialResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_material_by_sku(
    sku: str,
    registry: MaterialRegistryService = Depends(get_registry),
) -> MaterialResponse:
    """Look up a material by SKU (case-insensitive)."""
    return MaterialResponse.from_entity(await registry.get_material_by_sku(sku))


@router.get(
    "/{material_id}",
    response_model=MaterialDetailResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_material(
    material_id: str,
    registry: MaterialRegistryService = Depends(get_registry),
) -> MaterialDetailResponse:
    """Get a material with its 10 most recent movements."""
    return MaterialDetailResponse.from_detail(await registry.get_material(material_id))


@router.put(
    "/{material_id}",
    response_model=MaterialResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_material(
    material_id: str,
    request: UpdateMaterialRequest,
    registry: MaterialRegistryService = Depends(get_registry),
) -> MaterialResponse:
    """Update descriptive attributes. Quantities cannot be set here."""
    changes = MaterialUpdate.from_dict(request.model_dump(exclude_unset=True))
    material = await registry.update_material(material_id, changes)
    return MaterialResponse.from_entity(material)


@router.delete(
    "/{material_id}",
    response_model=DeleteResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_material(
    material_id: str,
    registry: MaterialRegistryService = Depends(get_registry),
) -> DeleteResponse:
    """Delete a material and all of its stock movements."""
    material = await registry.delete_material(material_id)
    return DeleteResponse(
        message="Material deleted successfully",
        id=material.id,  # type: ignore[arg-type]
    )
