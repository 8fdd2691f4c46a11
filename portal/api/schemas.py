from datetime import datetime
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from portal.core.state_machine import ApplicationStatus, UserStatus
from portal.store.models import ApplicantProfile, IdentityDocuments

Decision = Literal["APPROVED", "REJECTED"]

# Requests --------------------------------------------------------------

class RegisterRequest(BaseModel):
    firstName: str = ""
    lastName: str = ""
    email: str = ""
    phoneNumber: str = ""
    # Accepted for form compatibility; credentials are not stored or checked.
    password: Optional[str] = None

class LoginRequest(BaseModel):
    email: str
    password: Optional[str] = None

class ApplicationForm(BaseModel):
    # Missing fields default to "" so the registry reports every gap at once
    firstName: str = ""
    lastName: str = ""
    dateOfBirth: str = ""
    gender: str = ""
    nationalId: str = ""
    address: str = ""
    city: str = ""
    postalCode: str = ""
    emergencyContact: str = ""
    emergencyPhone: str = ""
    travelReason: Optional[str] = None
    selfieImage: str = ""
    idFrontImage: str = ""
    idBackImage: str = ""

    def profile(self) -> ApplicantProfile:
        return ApplicantProfile(
            firstName=self.firstName,
            lastName=self.lastName,
            dateOfBirth=self.dateOfBirth,
            gender=self.gender,
            nationalId=self.nationalId,
            address=self.address,
            city=self.city,
            postalCode=self.postalCode,
            emergencyContact=self.emergencyContact,
            emergencyPhone=self.emergencyPhone,
            travelReason=self.travelReason or "",
        )

    def documents(self) -> IdentityDocuments:
        return IdentityDocuments(
            selfieImage=self.selfieImage,
            idFrontImage=self.idFrontImage,
            idBackImage=self.idBackImage,
        )

class ReviewRequest(BaseModel):
    decision: Decision
    feedback: Optional[str] = None

class BlockRequest(BaseModel):
    reason: str = ""
    durationDays: int = Field(strict=True)

# Responses -------------------------------------------------------------

class ApplicationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    userId: str
    firstName: str
    lastName: str
    dateOfBirth: str
    gender: str
    nationalId: str
    address: str
    city: str
    postalCode: str
    emergencyContact: str
    emergencyPhone: str
    travelReason: str = ""
    selfieImage: str
    idFrontImage: str
    idBackImage: str
    status: ApplicationStatus
    feedback: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

class ApplicationSummary(BaseModel):
    """Dashboard row: no document payloads."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    userId: str
    firstName: str
    lastName: str
    status: ApplicationStatus
    feedback: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    firstName: str
    lastName: str
    email: str
    phoneNumber: str
    status: UserStatus
    blockedUntil: Optional[datetime] = None
    blockReason: Optional[str] = None
    createdAt: Optional[datetime] = None
    lastLoginAt: Optional[datetime] = None

class SubmitResponse(BaseModel):
    success: bool = True
    applicationId: str

class EligibilityResponse(BaseModel):
    hasActiveApplication: bool

class LoginResponse(BaseModel):
    success: bool
    user: Optional[UserOut] = None
    error: Optional[str] = None
    blockedUntil: Optional[datetime] = None
    blockReason: Optional[str] = None

class ReviewResponse(BaseModel):
    success: bool = True
    application: ApplicationSummary
    notification: str = "skipped"

class StatsResponse(BaseModel):
    applications: Dict[str, int] = Field(default_factory=dict)
    users: Dict[str, int] = Field(default_factory=dict)

class UserList(BaseModel):
    total: int
    users: List[UserOut]
