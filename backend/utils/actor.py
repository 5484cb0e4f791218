from typing import Optional

from fastapi import Header

SYSTEM_ACTOR = "system"

def get_actor(x_user_id: Optional[str] = Header(None)) -> str:
    """Identifier recorded in created_by / changed_by columns. Falls back to 'system'."""
    if not x_user_id or not x_user_id.strip():
        return SYSTEM_ACTOR
    return x_user_id.strip()
