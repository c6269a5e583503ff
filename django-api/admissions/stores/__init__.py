from admissions.stores.django_store import DjangoAdmissionStore
from admissions.stores.interfaces import (
    AdmissionStore,
    DuplicateReferenceError,
    PersistenceError,
    StoreError,
)
from admissions.stores.memory_store import InMemoryAdmissionStore

__all__ = [
    "AdmissionStore",
    "DjangoAdmissionStore",
    "DuplicateReferenceError",
    "InMemoryAdmissionStore",
    "PersistenceError",
    "StoreError",
]
