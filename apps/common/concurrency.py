"""
Optimistic concurrency for versioned aggregates.

Order, LoyaltyPointTimer and User carry an integer ``version`` column.
Mutations are written with a compare-and-swap UPDATE that only matches
the version the caller read; a lost race raises ConcurrentUpdateError
and the surrounding atomic block rolls back.
"""
from django.db.models import F
from django.utils import timezone

from .exceptions import ConcurrentUpdateError


def versioned_update(instance, *fields):
    """Persist ``fields`` of ``instance`` if nobody bumped its version meanwhile"""
    model = type(instance)
    values = {field: getattr(instance, field) for field in fields}
    if any(f.name == 'updated_at' for f in model._meta.concrete_fields):
        instance.updated_at = timezone.now()
        values['updated_at'] = instance.updated_at

    updated = model.objects.filter(pk=instance.pk, version=instance.version).update(
        version=F('version') + 1,
        **values
    )
    if not updated:
        raise ConcurrentUpdateError(
            f"{model.__name__} {instance.pk} was modified concurrently",
            model=model.__name__,
            pk=instance.pk,
            expected_version=instance.version,
        )
    instance.version += 1
    return instance
