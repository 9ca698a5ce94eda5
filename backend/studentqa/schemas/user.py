from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


ROLES = frozenset({'student', 'reviewer', 'instructor', 'staff', 'admin'})

# Roles allowed to modify answers they do not own
PRIVILEGED_ROLES = frozenset({'instructor', 'staff', 'admin'})


class User(BaseModel):
    """
    Acting user passed to mutating answer operations.

    Accounts are managed elsewhere; only identity and role matter here.
    """

    id: int
    username: str
    role: str = Field(default='student')
    name: str = ''
    email: Optional[EmailStr] = None
    one_time_password: Optional[str] = None

    @field_validator('role')
    @classmethod
    def validate_role(cls, v: str) -> str:
        """Validate role is one of the known roles."""
        v_lower = v.strip().lower()
        if v_lower not in ROLES:
            raise ValueError(f"role must be one of {sorted(ROLES)}, got {v}")
        return v_lower

    @property
    def is_privileged(self) -> bool:
        return self.role in PRIVILEGED_ROLES

    def can_modify(self, owner_id: int) -> bool:
        """Whether this user may edit or delete a record owned by ``owner_id``."""
        return self.id == owner_id or self.is_privileged
