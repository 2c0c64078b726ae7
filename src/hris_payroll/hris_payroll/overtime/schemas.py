from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class OvertimeDecision(BaseModel):
    action: Optional[str] = None
    notes: Optional[str] = None
