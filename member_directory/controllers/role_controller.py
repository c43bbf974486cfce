# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Role CRUD endpoints.
Thin HTTP layer — delegates ALL logic to RoleService.
"""

from fastapi import APIRouter, Depends, HTTPException
from starlette.responses import Response

from member_directory.core.dependencies import get_role_service
from member_directory.core.exceptions import DirectoryError
from member_directory.models.domain import RoleView
from member_directory.schemas.directory import RoleCreateRequest, RoleUpdateRequest
from member_directory.services.role_service import RoleService

router = APIRouter(prefix="/api/v1", tags=["Roles"])


@router.get("/roles", response_model=list[RoleView])
def list_roles(service: RoleService = Depends(get_role_service)):
    """List all roles."""
    return service.list_roles()


@router.get("/roles/name/{name}", response_model=RoleView)
def get_role_by_name(name: str, service: RoleService = Depends(get_role_service)):
    role = service.get_role_by_name(name)
    if role is None:
        raise HTTPException(status_code=404, detail=f"Role not found: {name}")
    return role


@router.get("/roles/{role_id}", response_model=RoleView)
def get_role(role_id: int, service: RoleService = Depends(get_role_service)):
    role = service.get_role(role_id)
    if role is None:
        raise HTTPException(status_code=404, detail=f"Role not found: {role_id}")
    return role


@router.post("/roles", status_code=201, response_model=RoleView)
def create_role(
    payload: RoleCreateRequest,
    service: RoleService = Depends(get_role_service),
):
    """Create a role with a unique name."""
    try:
        return service.create_role(name=payload.name, description=payload.description)
    except DirectoryError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/roles/{role_id}", response_model=RoleView)
def update_role(
    role_id: int,
    payload: RoleUpdateRequest,
    service: RoleService = Depends(get_role_service),
):
    """Replace a role's name and description."""
    try:
        return service.update_role(
            role_id, name=payload.name, description=payload.description
        )
    except DirectoryError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/roles/{role_id}", status_code=204)
def delete_role(role_id: int, service: RoleService = Depends(get_role_service)):
    """Delete a role no member is assigned to."""
    try:
        service.delete_role(role_id)
    except DirectoryError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Response(status_code=204)
