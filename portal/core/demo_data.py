"""
Sample accounts and applications for demos and local dashboards.
Everything goes through the registries, so the usual lifecycle rules apply.
"""
from portal.core.application_registry import ApplicationRegistry
from portal.core.errors import ConflictError
from portal.core.state_machine import ApplicationStatus
from portal.core.user_registry import UserRegistry
from portal.observability.logging import log
from portal.store.models import ApplicantProfile, IdentityDocuments

PLACEHOLDER_SELFIE = "/placeholder.svg?height=300&width=300"
PLACEHOLDER_ID_CARD = "/placeholder.svg?height=200&width=320"

DEMO_USERS = [
    {"firstName": "John", "lastName": "Doe", "email": "john.doe@example.com", "phoneNumber": "+267 71234567"},
    {"firstName": "Alice", "lastName": "Smith", "email": "alice.smith@example.com", "phoneNumber": "+267 72345678"},
    {"firstName": "Michael", "lastName": "Johnson", "email": "michael.johnson@example.com", "phoneNumber": "+267 73456789"},
    {"firstName": "Sarah", "lastName": "Williams", "email": "sarah.williams@example.com", "phoneNumber": "+267 74567890"},
]

# email -> (profile, final status, feedback)
DEMO_APPLICATIONS = {
    "john.doe@example.com": (
        ApplicantProfile(
            firstName="John", lastName="Doe", dateOfBirth="1990-01-01", gender="male",
            nationalId="12345678", address="123 Main St", city="Gaborone", postalCode="00000",
            emergencyContact="Jane Doe", emergencyPhone="+267 71234567", travelReason="Tourism",
        ),
        ApplicationStatus.PENDING,
        None,
    ),
    "alice.smith@example.com": (
        ApplicantProfile(
            firstName="Alice", lastName="Smith", dateOfBirth="1985-05-15", gender="female",
            nationalId="87654321", address="456 Oak St", city="Francistown", postalCode="00000",
            emergencyContact="Bob Smith", emergencyPhone="+267 72345678", travelReason="Business",
        ),
        ApplicationStatus.APPROVED,
        "All documents verified successfully.",
    ),
    "michael.johnson@example.com": (
        ApplicantProfile(
            firstName="Michael", lastName="Johnson", dateOfBirth="1978-11-30", gender="male",
            nationalId="23456789", address="789 Pine St", city="Maun", postalCode="00000",
            emergencyContact="Sarah Johnson", emergencyPhone="+267 73456789", travelReason="Family visit",
        ),
        ApplicationStatus.REJECTED,
        "National ID verification failed. Please submit a clearer copy of your ID.",
    ),
}

# email -> (reason, days)
DEMO_BLOCKS = {
    "sarah.williams@example.com": ("Multiple invalid document submissions", 1),
}


def seed_demo_data(applications: ApplicationRegistry, users: UserRegistry) -> dict:
    """Idempotent: accounts that already exist are left as they are."""
    created_users = 0
    created_apps = 0
    documents = IdentityDocuments(
        selfieImage=PLACEHOLDER_SELFIE,
        idFrontImage=PLACEHOLDER_ID_CARD,
        idBackImage=PLACEHOLDER_ID_CARD,
    )

    for row in DEMO_USERS:
        try:
            user = users.create(row["firstName"], row["lastName"], row["email"], row["phoneNumber"])
        except ConflictError:
            continue
        created_users += 1

        if row["email"] in DEMO_BLOCKS:
            reason, days = DEMO_BLOCKS[row["email"]]
            users.block(user.id, reason, days)

        if row["email"] in DEMO_APPLICATIONS:
            profile, status, feedback = DEMO_APPLICATIONS[row["email"]]
            app = applications.submit(user.id, profile, documents)
            if status != ApplicationStatus.PENDING:
                applications.set_status(app.id, status, feedback)
            created_apps += 1

    log(event="demo_data_seeded", users=created_users, applications=created_apps)
    return {"users": created_users, "applications": created_apps}
