from pydantic import BaseModel, EmailStr, ConfigDict, Field
from typing import Optional, List, Dict, Literal
from datetime import datetime

SortDirection = Literal["asc", "desc"]
EventLocationStatus = Literal["upcoming", "available", "closed", "walk-in"]
Workflow = Literal["checkin", "redemption"]


class AttendeeRecord(BaseModel):
    """A customer registration document"""
    id: str
    id_number: str
    id_type: Optional[str] = None
    full_name: str = ""
    email_address: str = ""
    contact_number: str = ""
    customer_type: str = ""
    dealer_company_name: Optional[str] = None
    tshirt_size: Optional[str] = None
    app_downloaded: bool = False
    location_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    # Check-in
    status: Optional[str] = None
    check_time_stamp: Optional[datetime] = None

    # Gift redemption
    redeemed_gift: bool = False
    redemption_time_stamp: Optional[datetime] = None

    model_config = ConfigDict(extra="ignore")


class EventLocationBase(BaseModel):
    location: str
    date: str = "To Be Confirmed"
    time: str = "To Be Confirmed"
    venue: str = "To Be Confirmed"
    status: EventLocationStatus = "upcoming"
    pos: Optional[int] = None
    max_capacity: Optional[int] = Field(default=None, ge=0)


class EventLocationCreate(EventLocationBase):
    pass


class EventLocationUpdate(BaseModel):
    location: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    venue: Optional[str] = None
    status: Optional[EventLocationStatus] = None
    pos: Optional[int] = None
    max_capacity: Optional[int] = Field(default=None, ge=0)


class EventLocationRecord(EventLocationBase):
    id: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class EventLocationUploadResponse(BaseModel):
    success: bool
    message: str
    ids: List[str] = []


class SurveyResponseRecord(BaseModel):
    id: str
    name: str = ""
    email: str = ""
    contact_number: str = ""
    event_location_id: Optional[str] = None
    user_id: Optional[str] = None
    feedback: str = ""
    marketing: int = 0
    ratings: Dict[str, int] = {}
    submitted: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class SortConfig(BaseModel):
    key: Optional[str] = None
    direction: SortDirection = "asc"


class CustomerFilter(BaseModel):
    search: str = ""
    location_id: Optional[str] = None
    status: Optional[str] = None  # exact check-in status, e.g. "checked-in"
    redemption: Optional[Literal["redeemed", "not-redeemed"]] = None


class EventLocationFilter(BaseModel):
    search: str = ""
    status: Optional[EventLocationStatus] = None


class SurveyResponseFilter(BaseModel):
    search: str = ""
    event_location_id: Optional[str] = None


class ScanRequest(BaseModel):
    qr_code: str  # The scanned QR code data


class ScanResponse(BaseModel):
    success: bool
    message: str
    outcome: str
    customer: Optional[AttendeeRecord] = None
    status: Optional[str] = None
    timestamp: Optional[datetime] = None


class ClearStatusResponse(BaseModel):
    success: bool
    message: str


class WorkflowStats(BaseModel):
    workflow: Workflow
    location_id: Optional[str] = None
    total: int
    applied: int
    pending: int


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: dict
