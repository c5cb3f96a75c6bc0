"""
Voucher codec.

A voucher is the per-tenant JSON blob the host stores for a service access
point, e.g.

    {"ServerURL": "http://127.0.0.1:8002/xiaozhi", "Secret": "...",
     "AgentId": "...", "ThingsPanelApiKey": "sk_..."}

It is decoded fresh for every callback and never persisted. Decoding is
best-effort: absent keys become empty strings. Callers decide which fields
they need and check them with require().
"""

from typing import Any

import pydantic
from pydantic import BaseModel, Field

from device_bridge.errors import DecodeError, ValidationError


class Credential(BaseModel):
    remote_base_url: str = Field("", alias="ServerURL")
    secret: str = Field("", alias="Secret", repr=False)
    auth_type: str = Field("", alias="AuthType")
    agent_id: str = Field("", alias="AgentId")
    external_api_key: str = Field("", alias="ThingsPanelApiKey", repr=False)
    external_api_url: str = Field("", alias="ThingsPanelApiURL")

    model_config = {"populate_by_name": True, "frozen": True}


def decode(raw: str) -> Credential:
    try:
        return Credential.model_validate_json(raw)
    except pydantic.ValidationError as e:
        raise DecodeError(f"invalid voucher: {e.error_count()} error(s)", {"errors": _summarize(e)}) from e


def encode(credential: Credential) -> str:
    return credential.model_dump_json(by_alias=True)


def require(credential: Credential, *fields: str) -> None:
    """Raise ValidationError naming every listed field that is empty.

    ``fields`` are attribute names; the error reports the voucher keys the
    tenant actually typed into the form.
    """
    missing = [
        Credential.model_fields[name].alias or name
        for name in fields
        if not getattr(credential, name)
    ]
    if missing:
        raise ValidationError(f"voucher is missing required fields: {', '.join(missing)}", fields=missing)


def _summarize(e: pydantic.ValidationError) -> list[dict[str, Any]]:
    # Drop "input" so a malformed voucher never echoes its secret into logs.
    return [{"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()]
