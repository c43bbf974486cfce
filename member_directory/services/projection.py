# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Stored record -> external view. Pure functions, no I/O."""

from member_directory.models.domain import Member, MemberView, Role, RoleView


def to_role_view(role: Role) -> RoleView:
    return RoleView(
        id=role.id,
        name=role.name,
        description=role.description,
        created_at=role.created_at,
        updated_at=role.updated_at,
    )


def to_member_view(member: Member, role: Role) -> MemberView:
    """Flatten a member and its role; the role's id is not exposed."""
    if role.id != member.role_id:
        raise ValueError(
            f"Role {role.id} does not match member {member.id} (role_id={member.role_id})"
        )
    return MemberView(
        id=member.id,
        username=member.username,
        display_name=member.display_name,
        email=member.email,
        bio=member.bio,
        avatar_url=member.avatar_url,
        is_active=member.is_active,
        created_at=member.created_at,
        updated_at=member.updated_at,
        role_name=role.name,
        role_description=role.description,
    )
