# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Member CRUD endpoints.
Thin HTTP layer — delegates ALL logic to MemberService.
"""

from fastapi import APIRouter, Depends, HTTPException
from starlette.responses import Response

from member_directory.core.dependencies import get_member_service
from member_directory.core.exceptions import DirectoryError
from member_directory.models.domain import MemberView
from member_directory.schemas.directory import MemberCreateRequest, MemberUpdateRequest
from member_directory.services.member_service import MemberService

router = APIRouter(prefix="/api/v1", tags=["Members"])


@router.get("/members", response_model=list[MemberView])
def list_members(service: MemberService = Depends(get_member_service)):
    """List all members."""
    return service.list_members()


@router.get("/members/active", response_model=list[MemberView])
def list_active_members(service: MemberService = Depends(get_member_service)):
    """List active members only."""
    return service.list_active_members()


@router.get("/members/username/{username}", response_model=MemberView)
def get_member_by_username(
    username: str,
    service: MemberService = Depends(get_member_service),
):
    member = service.get_member_by_username(username)
    if member is None:
        raise HTTPException(status_code=404, detail=f"Member not found: {username}")
    return member


@router.get("/members/{member_id}", response_model=MemberView)
def get_member(member_id: int, service: MemberService = Depends(get_member_service)):
    member = service.get_member(member_id)
    if member is None:
        raise HTTPException(status_code=404, detail=f"Member not found: {member_id}")
    return member


@router.post("/members", status_code=201, response_model=MemberView)
def create_member(
    payload: MemberCreateRequest,
    service: MemberService = Depends(get_member_service),
):
    """Create an active member assigned to an existing role."""
    try:
        return service.create_member(
            username=payload.username,
            display_name=payload.display_name,
            role_id=payload.role_id,
            email=payload.email,
            bio=payload.bio,
            avatar_url=payload.avatar_url,
        )
    except DirectoryError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.api_route("/members/{member_id}", methods=["PATCH", "PUT"], response_model=MemberView)
def update_member(
    member_id: int,
    payload: MemberUpdateRequest,
    service: MemberService = Depends(get_member_service),
):
    """Partially update a member; omitted fields keep their values."""
    try:
        return service.update_member(member_id, payload.changes())
    except DirectoryError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/members/{member_id}", status_code=204)
def delete_member(member_id: int, service: MemberService = Depends(get_member_service)):
    try:
        service.delete_member(member_id)
    except DirectoryError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Response(status_code=204)
