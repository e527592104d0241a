"""Firestore collection names.

Profiles are keyed by the identity provider user id; admin records live
in ``users`` under the administrator's uid.
"""

from portal.domain.enums import UserType

COLLECTION_DOCTORS = "doctors"
COLLECTION_PATIENTS = "patients"
COLLECTION_USERS = "users"

PROFILE_COLLECTIONS: dict[UserType, str] = {
    UserType.DOCTOR: COLLECTION_DOCTORS,
    UserType.PATIENT: COLLECTION_PATIENTS,
}
