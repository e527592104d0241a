"""Plain-text body for the credential email."""

from portal.application.dtos.account import CredentialEmail
from portal.domain.enums import UserType

_USER_TYPE_DISPLAY = {UserType.DOCTOR: "Doctor", UserType.PATIENT: "Patient"}


def credential_subject(email: CredentialEmail) -> str:
    display = _USER_TYPE_DISPLAY.get(email.user_type, "User")
    return f"Welcome to UniHealth - Your {display} Account Details"


def credential_text(email: CredentialEmail) -> str:
    display = _USER_TYPE_DISPLAY.get(email.user_type, "User")
    lines = [
        f"WELCOME TO UNIHEALTH - YOUR {display.upper()} ACCOUNT IS READY",
        "",
        f"Hello {email.recipient_name},",
        "",
        f"Your {display.lower()} account has been created by {email.admin_name} "
        f"from {email.clinic_name}.",
        "",
        "YOUR LOGIN CREDENTIALS:",
        f"- Email Address: {email.recipient_email}",
        f"- Password: {email.secret}",
        "",
        f"Sign in at {email.login_url} and change your password after your first login.",
        "",
        "Best regards,",
        email.clinic_name,
    ]
    return "\n".join(lines)
