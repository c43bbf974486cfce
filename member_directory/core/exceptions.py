# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Directory error taxonomy.

Raised by the service layer, mapped to HTTP statuses by the controllers.
Each class carries the status it maps to and a stable machine code.
"""

from typing import Any


class DirectoryError(Exception):
    """Base exception for the member directory."""

    status_code: int = 500
    code: str = "directory_error"

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class NotFoundError(DirectoryError):
    """Raised when a referenced id does not exist."""

    status_code = 404
    code = "not_found"

    def __init__(self, entity: str, key: Any):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class RoleNotFoundError(NotFoundError):
    """Raised when a member references a role id that does not exist."""

    code = "role_not_found"

    def __init__(self, role_id: Any):
        super().__init__("Role", role_id)


class DuplicateUsernameError(DirectoryError):
    status_code = 400
    code = "duplicate_username"

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username is already in use: {username}")


class DuplicateEmailError(DirectoryError):
    status_code = 400
    code = "duplicate_email"

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email is already in use: {email}")


class DuplicateNameError(DirectoryError):
    status_code = 400
    code = "duplicate_name"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Role name is already in use: {name}")


class RoleInUseError(DirectoryError):
    """Raised when deleting a role that members still reference."""

    status_code = 409
    code = "role_in_use"

    def __init__(self, role_id: Any):
        self.role_id = role_id
        super().__init__(f"Role {role_id} is still assigned to members")


class OperationFailedError(DirectoryError):
    """Raised when the store fails in a way the directory cannot classify."""

    status_code = 500
    code = "operation_failed"
