"""
Base schema for all models.
"""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Validate on attribute assignment
        - Populate by field name or alias
        - Strings are kept verbatim; matching normalizes separately
    """
    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True
    )
