"""
Share links for Retroplan plans.

A plan is serialized to compact JSON and encoded with URL-safe base64 so it
can travel in a ``?plan=`` query parameter. Tokens produced by the browser
planner (standard base64 of a percent-encoded JSON string) decode too.
"""
import base64
import binascii
import json
from typing import Optional
from urllib.parse import parse_qs, unquote, urlencode, urlsplit

from pydantic import ValidationError

from retroplan.constants import IMPORTED_PREFIX
from retroplan.exceptions import ShareDecodeError
from retroplan.models.plan import ProjectPlan, new_id

SHARE_QUERY_PARAM = "plan"


def encode_plan(plan: ProjectPlan) -> str:
    """Encode a complete plan into an embeddable token."""
    payload = json.dumps(plan.to_payload(), separators=(",", ":"), ensure_ascii=False)
    token = base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")
    return token.rstrip("=")


def decode_plan(token: str) -> ProjectPlan:
    """
    Decode a share token back into a plan.

    Raises:
        ShareDecodeError: If the token is not base64, not JSON, lacks an
            ``id`` or a ``phases`` list, or does not describe a valid plan.
            A plan without a ``name`` is not valid: no placeholder name
            is invented for it.
    """
    # Query-string parsing turns a legacy token's "+" into a space.
    token = token.strip().replace(" ", "+")
    try:
        raw = base64.urlsafe_b64decode(token + "=" * (-len(token) % 4)).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise ShareDecodeError(f"Share token is not valid base64: {e}")

    if raw.startswith("%"):
        raw = unquote(raw)

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ShareDecodeError(f"Share token does not contain JSON: {e}")

    if not isinstance(data, dict) or not data.get("id") or not isinstance(data.get("phases"), list):
        raise ShareDecodeError("Shared plan is missing its id or phase list.")

    try:
        return ProjectPlan.model_validate(data)
    except ValidationError as e:
        raise ShareDecodeError(f"Shared plan is invalid: {e}")


def import_shared_plan(token: str) -> Optional[ProjectPlan]:
    """
    Import a shared plan as a new local plan.

    Returns:
        The plan under a fresh id with an "(Imported) " name prefix, or None
        when the token is malformed.
    """
    try:
        plan = decode_plan(token)
    except ShareDecodeError:
        return None
    return plan.with_changes(id=new_id(), name=f"{IMPORTED_PREFIX}{plan.name}")


def share_url(plan: ProjectPlan, base_url: str) -> str:
    """Build a shareable link embedding the plan."""
    return f"{base_url}?{urlencode({SHARE_QUERY_PARAM: encode_plan(plan)})}"


def token_from_url(url: str) -> Optional[str]:
    """Extract the share token from a link, or None if the link carries none."""
    values = parse_qs(urlsplit(url).query).get(SHARE_QUERY_PARAM)
    return values[0] if values else None
