"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
Mutations after creation are revision-guarded single-statement updates,
so two writers computing from the same revision can never both commit.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

from asgiref.sync import sync_to_async
from django.db import Error as DjangoDBError
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from core.domain.exceptions import DuplicateLicenseError, StoreUnavailableError
from core.domain.value_objects import BoundedHistory, Email, SoftwareEntitlement
from licenses.domain.license import LicenseRecord
from licenses.domain.license_key import LicenseKey, hash_license_key
from licenses.infrastructure.models import LicenseRecord as LicenseRecordModel
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


def _serialize(value: Any) -> Any:
    """Convert a domain attribute value to its column representation."""
    if isinstance(value, (BoundedHistory, SoftwareEntitlement)):
        return value.to_list()
    if isinstance(value, Email):
        return str(value)
    return value


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Translates database failures into domain exceptions
    """

    def _to_domain(self, model: LicenseRecordModel) -> LicenseRecord:
        """
        Convert Django model to domain entity.

        Args:
            model: Django LicenseRecord model

        Returns:
            LicenseRecord domain entity
        """
        return LicenseRecord(
            id=model.id,
            identifier=model.identifier,
            license_key=LicenseKey(key=model.key, key_hash=model.key_hash),
            expires_at=model.expires_at,
            allowed_software=SoftwareEntitlement(frozenset(model.allowed_software or ())),
            last_activation_at=model.last_activation_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
            last_activation_ip=model.last_activation_ip,
            failure_count=model.failure_count,
            failure_history=BoundedHistory.of(model.failure_history),
            ip_history=BoundedHistory.of(model.ip_history),
            blocked_until=model.blocked_until,
            owner_email=Email(model.owner_email) if model.owner_email else None,
            revision=model.revision,
        )

    def _to_model(self, record: LicenseRecord) -> LicenseRecordModel:
        """
        Convert domain entity to an unsaved Django model.

        Args:
            record: LicenseRecord domain entity

        Returns:
            Django LicenseRecord model
        """
        return LicenseRecordModel(
            id=record.id,
            identifier=record.identifier,
            key=record.license_key.key,
            key_hash=record.license_key.key_hash,
            owner_email=_serialize(record.owner_email),
            expires_at=record.expires_at,
            allowed_software=_serialize(record.allowed_software),
            last_activation_ip=record.last_activation_ip,
            last_activation_at=record.last_activation_at,
            failure_count=record.failure_count,
            failure_history=_serialize(record.failure_history),
            ip_history=_serialize(record.ip_history),
            blocked_until=record.blocked_until,
            revision=record.revision,
        )

    @sync_to_async
    def create(self, record: LicenseRecord) -> LicenseRecord:
        """
        Insert a newly issued license record.

        Args:
            record: LicenseRecord entity to insert

        Returns:
            Saved license record

        Raises:
            DuplicateLicenseError: If the identifier or key is already taken
            StoreUnavailableError: If the database cannot be reached
        """
        model = self._to_model(record)
        try:
            with transaction.atomic():
                model.save(force_insert=True)
        except IntegrityError as e:
            raise DuplicateLicenseError(
                f"A license already exists for identifier {record.identifier!r}"
            ) from e
        except DjangoDBError as e:
            raise StoreUnavailableError(str(e)) from e
        return self._to_domain(model)

    @sync_to_async
    def find_by_key(self, raw_key: str) -> Optional[LicenseRecord]:
        """
        Find a license record by its raw license key.

        Args:
            raw_key: License key presented by the client

        Returns:
            LicenseRecord entity or None if not found
        """
        try:
            model = LicenseRecordModel.objects.filter(key_hash=hash_license_key(raw_key)).first()
        except DjangoDBError as e:
            raise StoreUnavailableError(str(e)) from e
        if model is None:
            return None
        record = self._to_domain(model)
        if not record.license_key.verify_key(raw_key):
            return None
        return record

    @sync_to_async
    def find_by_identifier(self, identifier: str) -> Optional[LicenseRecord]:
        """
        Find a license record by its target identifier.

        Args:
            identifier: Identifier the license was issued to

        Returns:
            LicenseRecord entity or None if not found
        """
        try:
            model = LicenseRecordModel.objects.get(identifier=identifier)
            return self._to_domain(model)
        except LicenseRecordModel.DoesNotExist:
            return None
        except DjangoDBError as e:
            raise StoreUnavailableError(str(e)) from e

    @sync_to_async
    def conditional_write(
        self,
        license_id: uuid.UUID,
        changes: Dict[str, Any],
        expected_revision: int,
    ) -> bool:
        """
        Write changed fields only if the stored revision is unchanged.

        Args:
            license_id: License UUID
            changes: Mutated fields keyed by LicenseRecord attribute name
            expected_revision: Revision the changes were computed from

        Returns:
            True if exactly one row was updated, False on conflict
        """
        fields = {name: _serialize(value) for name, value in changes.items()}
        fields["revision"] = F("revision") + 1
        fields["updated_at"] = timezone.now()
        try:
            updated = LicenseRecordModel.objects.filter(
                id=license_id, revision=expected_revision
            ).update(**fields)
        except DjangoDBError as e:
            raise StoreUnavailableError(str(e)) from e

        if updated != 1:
            logger.debug(
                "Conditional write lost for license %s at revision %s",
                license_id,
                expected_revision,
            )
            return False
        return True

    @sync_to_async
    def find_with_failures(self, blocked_only: bool = True) -> List[LicenseRecord]:
        """
        List license records that recorded IP mismatches.

        Args:
            blocked_only: Only return records whose lockout is in force

        Returns:
            List of LicenseRecord entities, latest lockout first
        """
        queryset = LicenseRecordModel.objects.filter(failure_count__gt=0)
        if blocked_only:
            queryset = queryset.filter(blocked_until__gt=timezone.now())
        try:
            return [self._to_domain(model) for model in queryset.order_by("-blocked_until")]
        except DjangoDBError as e:
            raise StoreUnavailableError(str(e)) from e
