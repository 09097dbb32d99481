"""
# Report Models

Reports are file-bearing submissions from an organization. Files already live under
`UPLOAD_DIR` and are referenced by relative path. A report starts `pending` and is moved to
`approved` or `rejected` by an administrator; only an approval may carry a message.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from campushub.models.common import DocumentResponse, ObjectIdStr, utc_now

DEFAULT_APPROVAL_MESSAGE = "Your report has been approved."


class ReportType(str, Enum):
    ACTION_PLAN = "actionPlan"
    BYLAWS = "bylaws"
    FINANCIAL = "financial"
    PROPOSAL = "proposal"


class ReportStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReportSortField(str, Enum):
    SUBMITTED_DATE = "submitted_date"
    CREATED_AT = "created_at"
    REPORT_TYPE = "report_type"
    STATUS = "status"


class ReportDocument(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    org_id: str
    submitted_by: str
    report_type: ReportType
    file_paths: List[str] = Field(..., min_length=1)
    status: ReportStatus = ReportStatus.PENDING
    message: Optional[str] = None
    submitted_date: datetime = Field(default_factory=utc_now)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class CreateReportRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    org_id: ObjectIdStr
    report_type: ReportType
    file_paths: List[str] = Field(..., min_length=1)
    status: ReportStatus = ReportStatus.PENDING

    @model_validator(mode="after")
    def path_lengths(self):
        for path in self.file_paths:
            if not path or len(path) > 255:
                raise ValueError("Each file path must be between 1 and 255 characters")
        return self


class UpdateReportStatusRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    status: ReportStatus
    message: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode="after")
    def message_only_on_approval(self):
        if self.status == ReportStatus.APPROVED.value:
            if not self.message:
                self.message = DEFAULT_APPROVAL_MESSAGE
        elif self.message is not None:
            raise ValueError("A message is only allowed when the report is approved")
        return self


class ReportResponse(DocumentResponse):
    org_id: str
    submitted_by: str
    report_type: ReportType
    file_paths: List[str]
    status: ReportStatus
    message: Optional[str] = None
    submitted_date: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReportListResponse(BaseModel):
    count: int
    data: List[ReportResponse]
