# Shared handling of the explicit patch objects used by the update operations.
# A field left out of the request body is unchanged. A field sent as null clears a
# nullable column and is rejected for a required one.

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel

from storefront.api.error_handlers import ValidationFailed


def patch_changes(patch: BaseModel, *, required: Iterable[str] = ()) -> dict[str, Any]:
    """Return the fields present in `patch`, rejecting empty patches and nulls for `required` fields."""

    changes = patch.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationFailed(message="No fields were provided to update.")

    nulled = sorted(field for field in required if field in changes and changes[field] is None)
    if nulled:
        raise ValidationFailed(
            message=f"These fields cannot be null: {', '.join(nulled)}.",
            details={"fields": nulled},
        )
    return changes
