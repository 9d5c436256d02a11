from pydantic import BaseModel
from typing import Any, Optional


class BATSubmission(BaseModel):
    # Shape, length and item checks all happen in processor.validate_responses
    responses: Optional[Any] = None
