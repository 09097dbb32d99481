"""
# Organization Models

Student organizations are uniquely named and each has an assigned adviser (a user).
Responses replace the raw `adviser_id` with the adviser's username.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from campushub.models.common import ObjectIdStr, utc_now

DEFAULT_ORGANIZATION_DESCRIPTION = "This organization has no description yet."


class OrganizationDocument(BaseModel):
    org_name: str = Field(..., min_length=1, max_length=100, description="Unique organization name")
    description: str = Field(default=DEFAULT_ORGANIZATION_DESCRIPTION, max_length=2000)
    adviser_id: str = Field(..., description="Adviser user id")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class CreateOrganizationRequest(BaseModel):
    org_name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(default=DEFAULT_ORGANIZATION_DESCRIPTION, max_length=2000)
    adviser_id: ObjectIdStr


class UpdateOrganizationRequest(BaseModel):
    org_name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    adviser_id: Optional[ObjectIdStr] = None

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.model_dump(exclude_none=True):
            raise ValueError("At least one field must be provided for update")
        return self


class OrganizationResponse(BaseModel):
    id: str
    org_name: Optional[str] = None
    description: Optional[str] = None
    adviser: Optional[str] = Field(None, description="Adviser username")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrganizationPagination(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class OrganizationListResponse(BaseModel):
    organizations: List[OrganizationResponse]
    pagination: OrganizationPagination
