"""
Activity schemas

The request model is applied by hand in the route so that malformed input
can be ignored instead of answered with 422.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class ActiveRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    active: Optional[StrictBool] = Field(None, description="Fade the lights in (true) or out (false)")


class ActiveResponse(BaseModel):
    active: bool = Field(description="Current activation state")
