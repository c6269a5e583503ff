from admissions.domain.models import (
    AdmissionReceipt,
    AdmissionTokenRecord,
    EventOccupancy,
    EventSnapshot,
    NewRegistration,
    RegistrationData,
    RegistrationRecord,
    TokenLookup,
)
from admissions.domain.result import Ok, Rejected, Result, Stage
from admissions.domain.value_objects import (
    Capacity,
    ContactId,
    EventId,
    InvalidContactError,
    ReferenceNumber,
    RegistrationId,
    TokenId,
)

__all__ = [
    "AdmissionReceipt",
    "AdmissionTokenRecord",
    "EventOccupancy",
    "EventSnapshot",
    "NewRegistration",
    "RegistrationData",
    "RegistrationRecord",
    "TokenLookup",
    "Ok",
    "Rejected",
    "Result",
    "Stage",
    "Capacity",
    "ContactId",
    "EventId",
    "InvalidContactError",
    "ReferenceNumber",
    "RegistrationId",
    "TokenId",
]
