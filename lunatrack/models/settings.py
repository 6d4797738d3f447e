"""Pydantic models for the user settings record (``settings.json``)."""

from __future__ import annotations

from pydantic import Field, StrictBool, StrictInt, field_validator

from lunatrack.models.base import LunaBase

DEFAULT_CYCLE_LENGTH = 28
MIN_CYCLE_LENGTH = 15
MAX_CYCLE_LENGTH = 120

# Files the store keeps beside the entries file
RESERVED_FILE_NAMES = frozenset({"settings.json", "inspiration.json"})


def validate_data_file_name(value: str | None) -> str | None:
    """Require a plain file name inside the data directory.

    Raises:
        ValueError: For path separators, "." or "..", or a reserved name.
    """
    if value is None:
        return value
    if "/" in value or "\\" in value or value in (".", ".."):
        raise ValueError("dataFile must be a plain file name without path separators")
    if value.lower() in RESERVED_FILE_NAMES:
        raise ValueError(f"dataFile must not be {value!r}; that name is reserved")
    return value


class SSLConfig(LunaBase):
    """Certificate and key file names, relative to the data dir or absolute."""

    cert_file: str = Field(min_length=1)
    key_file: str = Field(min_length=1)


class CycleSettings(LunaBase):
    """Complete settings record.  Missing keys in older files take defaults."""

    pin: str = ""
    pin_enabled: bool = False
    data_file: str = Field(default="cycles.json", min_length=1)
    default_cycle_length: int = Field(
        default=DEFAULT_CYCLE_LENGTH, ge=MIN_CYCLE_LENGTH, le=MAX_CYCLE_LENGTH
    )
    file_protected: bool = False
    ssl: SSLConfig | None = Field(default=None, alias="SSL")
    http_port: int = 5173
    https_port: int = 7379
    api_port: int | None = None
    enable_ovulation: bool = True

    @field_validator("data_file")
    @classmethod
    def check_data_file(cls, value: str | None) -> str | None:
        return validate_data_file_name(value)


class CycleSettingsUpdate(LunaBase):
    """Partial update; only fields present in the request body are applied."""

    pin: str | None = None
    pin_enabled: bool | None = None
    data_file: str | None = Field(default=None, min_length=1)
    default_cycle_length: int | None = Field(
        default=None, ge=MIN_CYCLE_LENGTH, le=MAX_CYCLE_LENGTH
    )
    file_protected: bool | None = None
    ssl: SSLConfig | None = Field(default=None, alias="SSL")
    http_port: int | None = None
    https_port: int | None = None
    api_port: int | None = None
    enable_ovulation: bool | None = None

    @field_validator("data_file")
    @classmethod
    def check_data_file(cls, value: str | None) -> str | None:
        return validate_data_file_name(value)

    @field_validator(
        "pin",
        "pin_enabled",
        "data_file",
        "default_cycle_length",
        "file_protected",
        "http_port",
        "https_port",
        "enable_ovulation",
    )
    @classmethod
    def reject_null(cls, value: object) -> object:
        # Runs only for fields present in the body; null would wipe a required value.
        if value is None:
            raise ValueError("must not be null")
        return value


# ---------- Single-purpose toggles ----------


class EnableOvulation(LunaBase):
    enable_ovulation: StrictBool


class FileProtected(LunaBase):
    file_protected: StrictBool


class Ports(LunaBase):
    http_port: StrictInt = Field(ge=1, le=65535)
    https_port: StrictInt = Field(ge=1, le=65535)


class SSLSettings(LunaBase):
    ssl: SSLConfig | None = Field(default=None, alias="SSL")
