"""Pydantic models describing directory gateway payloads.

The same shapes are used by JSON snapshot files, so offline runs and
gateway runs validate exports identically.
"""

from __future__ import annotations

from typing import TypedDict

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _serialize_value(value: object) -> object:
    # Registry values travel as strings: booleans as 0/1, multi-strings one per line.
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, list):
        items: list[object] = list(value)  # pyright: ignore[reportUnknownArgumentType]
        if all(isinstance(item, str) for item in items):
            return "\n".join(str(item) for item in items)
    return value


class GatewayBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class LinkPayload(GatewayBaseModel):
    policy_id: str = Field(alias="policyId", min_length=1)
    display_name: str = Field(default="", alias="displayName")
    enabled: bool = True
    enforced: bool = False
    precedence: int


class ScopeLinksResponse(GatewayBaseModel):
    scope: str
    links: list[LinkPayload] = Field(default_factory=list["LinkPayload"])


class SettingPayload(GatewayBaseModel):
    key_path: str = Field(alias="keyPath", min_length=1)
    value_name: str = Field(default="", alias="valueName")
    data_type: str = Field(alias="type")
    value: str

    _coerce_value = field_validator("value", mode="before")(_serialize_value)


class PolicyExportResponse(GatewayBaseModel):
    policy_id: str = Field(alias="policyId", min_length=1)
    display_name: str = Field(default="", alias="displayName")
    machine: list[SettingPayload] = Field(default_factory=list["SettingPayload"])
    user: list[SettingPayload] = Field(default_factory=list["SettingPayload"])


class ErrorResponse(GatewayBaseModel):
    error: str
    message: str = ""


class SettingPayloadInput(TypedDict, total=False):
    keyPath: str
    valueName: str
    type: str
    value: object


class LinkPayloadInput(TypedDict, total=False):
    policyId: str
    displayName: str
    enabled: bool
    enforced: bool
    precedence: int
