# SPDX-License-Identifier: MIT
# Copyright (c) 2025 oplus-updater contributors
"""
Update manifest models.

Typed view of the decrypted update-check answer. JSON names are kept as the
field aliases; absent or null fields decode to their zero value and unknown
fields are ignored.
"""

from __future__ import annotations

from typing import Any, Callable, get_args

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # null means "zero value", same as an absent field; list items included
        if not isinstance(data, dict):
            return data
        out = {}
        for key, value in data.items():
            if value is None:
                continue
            if isinstance(value, list) and any(item is None for item in value):
                zero = cls._item_zero(key)
                value = [zero() if item is None else item for item in value]
            out[key] = value
        return out

    @classmethod
    def _item_zero(cls, key: str) -> Callable[[], Any]:
        """Return a factory for the zero value of a list field's items."""
        for name, info in cls.model_fields.items():
            if key in (name, info.alias):
                args = get_args(info.annotation)
                if args:
                    return args[0]
        return lambda: None


class VabData(_WireModel):
    """A/B streaming update descriptor payload."""
    ota_streaming_property: str = ""
    vab_package_hash: str = Field("", alias="vab_package_hash")
    extra_params: str = Field("", alias="extra_params")
    header: list[str] = []


class VabInfo(_WireModel):
    data: VabData = Field(default_factory=VabData)


class ComponentPackets(_WireModel):
    """Package info of a component: size, URLs, checksum and VAB info."""
    size: str = ""
    vab_info: VabInfo = Field(default_factory=VabInfo)
    manual_url: str = ""
    id: str = ""
    type: str = ""
    url: str = ""
    md5: str = ""


class Component(_WireModel):
    component_id: str = ""
    component_name: str = ""
    component_version: str = ""
    component_packets: ComponentPackets = Field(default_factory=ComponentPackets)


class Description(_WireModel):
    opex: dict[str, Any] = {}
    share: str = ""
    panel_url: str = ""
    url: str = ""
    first_title: str = ""


class Reminder(_WireModel):
    """Per-channel notice/pop schedule."""
    notice: list[int] = []
    pop: list[int] = []
    version: str = ""


class ReminderValue(_WireModel):
    download: Reminder = Field(default_factory=Reminder)
    upgrade: Reminder = Field(default_factory=Reminder)


class Decentralize(_WireModel):
    """Rollout strategy."""
    strategy_version: str = ""
    round: int = 0
    offset: int = 0


class UpdateManifest(_WireModel):
    """Decrypted update-check answer.

    Dump with ``model_dump(by_alias=True)`` to get the service's JSON names back.
    """

    parent: str = ""
    components: list[Component] = []
    security_patch: str = ""
    real_version_name: str = ""
    ota_version: str = ""
    is_nv_description: bool = False
    description: Description = Field(default_factory=Description)
    version_type_id: str = ""
    version_name: str = ""
    rid: str = ""
    reminder_value: ReminderValue = Field(default_factory=ReminderValue)
    is_recruit: bool = False
    real_android_version: str = ""
    opex_info: list[str] = []
    is_secret: bool = False
    real_os_version: str = ""
    os_version: str = ""
    published_time: int = 0
    component_assemble_type: bool = False
    is_v5_gka_version: int = Field(0, alias="isV5GkaVersion")
    google_patch_info: str = ""
    id: str = ""
    color_os_version: str = Field("", alias="colorOSVersion")
    is_confidential: int = 0
    beta_taste_interact: bool = False
    param_flag: int = 0
    reminder_type: int = 0
    notice_type: int = 0
    decentralize: Decentralize = Field(default_factory=Decentralize)
    version_code: int = 0
    silence_update: int = 0
    security_patch_vendor: str = ""
    gka_req: int = 0
    real_ota_version: str = ""
    android_version: str = ""
    night_update_limit: str = ""
    version_type_h5: str = Field("", alias="versionTypeH5")
    aid: str = ""
    nv_id16: str = Field("", alias="nvId16")
    status: str = ""
