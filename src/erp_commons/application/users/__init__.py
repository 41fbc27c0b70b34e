"""Users – DTOs and cache-aside service."""
from erp_commons.application.users.dtos import CreateUserDto, UpdateUserDto, UserDto
from erp_commons.application.users.service import UserService

__all__ = ["CreateUserDto", "UpdateUserDto", "UserDto", "UserService"]
