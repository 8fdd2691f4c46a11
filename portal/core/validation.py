from datetime import date
from typing import Dict

from portal.core.errors import ValidationError
from portal.store.models import DOCUMENT_FIELDS, REQUIRED_PROFILE_FIELDS
from portal.utils.time import age_on, parse_birth_date

# Same wording the intake form shows next to each field
FIELD_LABELS = {
    "firstName": "First name",
    "lastName": "Last name",
    "dateOfBirth": "Date of birth",
    "gender": "Gender",
    "nationalId": "National ID",
    "address": "Address",
    "city": "City",
    "postalCode": "Postal code",
    "emergencyContact": "Emergency contact",
    "emergencyPhone": "Emergency phone",
    "selfieImage": "Selfie image",
    "idFrontImage": "ID card front image",
    "idBackImage": "ID card back image",
    "email": "Email",
    "phoneNumber": "Phone number",
}


def _blank(value) -> bool:
    return not isinstance(value, str) or not value.strip()


def check_application_fields(record, today: date, min_age: int) -> None:
    """
    Validate a fully merged application (profile + documents on file).
    Collects every problem before raising so the form can flag them all at once.
    """
    errors: Dict[str, str] = {}
    for name in REQUIRED_PROFILE_FIELDS + DOCUMENT_FIELDS:
        if _blank(getattr(record, name, "")):
            errors[name] = f"{FIELD_LABELS[name]} is required"

    if "dateOfBirth" not in errors:
        try:
            birth = parse_birth_date(record.dateOfBirth)
        except ValueError:
            errors["dateOfBirth"] = "Date of birth must be a valid YYYY-MM-DD date"
        else:
            if age_on(birth, today) < min_age:
                errors["dateOfBirth"] = f"You must be at least {min_age} years old to apply"

    if errors:
        raise ValidationError("Application is incomplete or invalid", errors)


def check_user_fields(first_name: str, last_name: str, email: str, phone_number: str) -> None:
    errors: Dict[str, str] = {}
    for name, value in (
        ("firstName", first_name),
        ("lastName", last_name),
        ("email", email),
        ("phoneNumber", phone_number),
    ):
        if _blank(value):
            errors[name] = f"{FIELD_LABELS[name]} is required"
    if "email" not in errors and "@" not in email:
        errors["email"] = "Email must be a valid address"
    if errors:
        raise ValidationError("User details are incomplete or invalid", errors)


def check_block_request(reason: str, duration_days, min_days: int, max_days: int) -> None:
    # bool is an int subclass; True must not sneak in as a one-day block
    if (
        not isinstance(duration_days, int)
        or isinstance(duration_days, bool)
        or not min_days <= duration_days <= max_days
    ):
        raise ValidationError(
            f"Block duration must be between {min_days} and {max_days} days",
            {"durationDays": f"Must be a whole number of days from {min_days} to {max_days}"},
        )
    if _blank(reason):
        raise ValidationError("Block reason is required", {"reason": "Block reason is required"})
