from dataclasses import dataclass, fields as dc_fields
from datetime import datetime
from typing import Optional

from portal.core.state_machine import ApplicationStatus, UserStatus

# Profile fields the intake form requires (travelReason is the only optional one)
REQUIRED_PROFILE_FIELDS = (
    "firstName",
    "lastName",
    "dateOfBirth",
    "gender",
    "nationalId",
    "address",
    "city",
    "postalCode",
    "emergencyContact",
    "emergencyPhone",
)

DOCUMENT_FIELDS = ("selfieImage", "idFrontImage", "idBackImage")


@dataclass
class ApplicantProfile:
    firstName: str = ""
    lastName: str = ""
    dateOfBirth: str = ""  # YYYY-MM-DD
    gender: str = ""
    nationalId: str = ""
    address: str = ""
    city: str = ""
    postalCode: str = ""
    emergencyContact: str = ""
    emergencyPhone: str = ""
    travelReason: str = ""


@dataclass
class IdentityDocuments:
    # Opaque payloads from the camera capture UI (data URLs or storage references)
    selfieImage: str = ""
    idFrontImage: str = ""
    idBackImage: str = ""


@dataclass
class Application:
    id: str
    userId: str

    # Profile
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
    travelReason: str = ""

    # Documents
    selfieImage: str = ""
    idFrontImage: str = ""
    idBackImage: str = ""

    # Review
    status: ApplicationStatus = ApplicationStatus.PENDING
    feedback: Optional[str] = None  # only on APPROVED/REJECTED

    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    def __post_init__(self):
        self.status = ApplicationStatus(self.status)

    def apply_profile(self, profile: ApplicantProfile) -> None:
        for f in dc_fields(ApplicantProfile):
            setattr(self, f.name, getattr(profile, f.name) or "")

    def apply_documents(self, documents: IdentityDocuments) -> None:
        """Partial update: an empty document keeps the one already on file."""
        for name in DOCUMENT_FIELDS:
            value = getattr(documents, name)
            if value:
                setattr(self, name, value)


@dataclass
class User:
    id: str
    email: str
    firstName: str = ""
    lastName: str = ""
    phoneNumber: str = ""
    status: UserStatus = UserStatus.ACTIVE

    # Present only while BLOCKED
    blockedUntil: Optional[datetime] = None
    blockReason: Optional[str] = None

    createdAt: Optional[datetime] = None
    lastLoginAt: Optional[datetime] = None

    def __post_init__(self):
        self.status = UserStatus(self.status)

    def clear_block(self) -> None:
        self.blockedUntil = None
        self.blockReason = None


@dataclass
class AuthResult:
    """
    Outcome of a login (or access) check.
    status: "OK" | "BLOCKED" | "DELETED"
    """
    status: str
    user: User
    blockedUntil: Optional[datetime] = None
    blockReason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "OK"
