#
# Copyright 2026 ABSA Group Limited
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#


"""Read-shape → write-shape mapping for branch protection.

``GET repos/{repo}/branches/{branch}/protection`` and the matching PUT use
different schemas:

- GET wraps flags as ``{"url": ..., "enabled": true}``; PUT wants ``true``.
- GET carries ``url`` / ``*_url`` link fields; PUT rejects them.
- GET returns full user / team / app objects in restriction lists; PUT
  wants logins and slugs.
- PUT requires ``required_status_checks``, ``enforce_admins``,
  ``required_pull_request_reviews`` and ``restrictions`` to be present
  (``null`` allowed).
"""

from __future__ import annotations

from typing import Any

from .models import BranchProtection, CheckEntry, ProtectionUpdate

REQUIRED_PUT_KEYS = (
    "required_status_checks",
    "enforce_admins",
    "required_pull_request_reviews",
    "restrictions",
)

REVIEW_SETTABLE_FIELDS = (
    "dismiss_stale_reviews",
    "require_code_owner_reviews",
    "required_approving_review_count",
    "require_last_push_approval",
)

# Managed through dedicated endpoints, not accepted by PUT .../protection.
DROPPED_KEYS = frozenset({"url", "required_signatures"})


def _is_link_key(key: str) -> bool:
    return key == "url" or key.endswith("_url")


def strip_and_flatten(value: Any) -> Any:
    """Drop link fields and collapse ``{enabled: bool}`` wrappers, recursively."""
    if isinstance(value, dict):
        if "enabled" in value:
            return value["enabled"]
        return {key: strip_and_flatten(item) for key, item in value.items() if not _is_link_key(key)}
    if isinstance(value, list):
        return [strip_and_flatten(item) for item in value]
    return value


def _actor_lists(value: dict[str, Any] | None) -> dict[str, list[str]] | None:
    if value is None:
        return None
    return {
        "users": [str(u.get("login")) for u in value.get("users") or [] if isinstance(u, dict)],
        "teams": [str(t.get("slug")) for t in value.get("teams") or [] if isinstance(t, dict)],
        "apps": [str(a.get("slug")) for a in value.get("apps") or [] if isinstance(a, dict)],
    }


def _status_checks_payload(protection: BranchProtection) -> dict[str, Any] | None:
    rsc = protection.required_status_checks
    if rsc is None:
        return None
    checks = []
    for check in sorted(protection.checks, key=CheckEntry.sort_key):
        item: dict[str, Any] = {"context": check.context}
        if check.app_id is not None:
            item["app_id"] = check.app_id
        checks.append(item)
    return {"strict": bool(rsc.get("strict", False)), "checks": checks}


def _reviews_payload(reviews: dict[str, Any] | None) -> dict[str, Any] | None:
    if reviews is None:
        return None
    out: dict[str, Any] = {key: reviews[key] for key in REVIEW_SETTABLE_FIELDS if key in reviews}
    if "dismissal_restrictions" in reviews:
        out["dismissal_restrictions"] = _actor_lists(reviews.get("dismissal_restrictions")) or {}
    if "bypass_pull_request_allowances" in reviews:
        out["bypass_pull_request_allowances"] = _actor_lists(reviews.get("bypass_pull_request_allowances")) or {}
    return out


def to_update_payload(protection: BranchProtection) -> ProtectionUpdate:
    """Map a read-shape protection document to the PUT request body."""
    raw = protection.raw
    payload: dict[str, Any] = {
        "required_status_checks": _status_checks_payload(protection),
        "enforce_admins": strip_and_flatten(raw.get("enforce_admins")),
        "required_pull_request_reviews": _reviews_payload(raw.get("required_pull_request_reviews")),
        "restrictions": _actor_lists(raw.get("restrictions")),
    }

    for key, value in raw.items():
        if key in REQUIRED_PUT_KEYS or key in DROPPED_KEYS or _is_link_key(key):
            continue
        payload[key] = strip_and_flatten(value)

    return ProtectionUpdate(payload=payload)
