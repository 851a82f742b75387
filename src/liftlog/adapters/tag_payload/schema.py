"""Pydantic models describing the JSON written to machine tags.

Three shapes are accepted:

- canonical camelCase (``currentSessionId`` / ``priorSessionIds`` /
  ``priorSessionData``)
- the four-slot firmware layout (``session_id_a`` .. ``session_id_d`` with
  ``session_data_b`` .. ``session_data_d``)
- the legacy two-id layout (``session_id_tap_in`` / ``session_id_tap_out`` /
  ``session_data``)
"""

from __future__ import annotations

from typing import Self

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    field_validator,
    model_validator,
)

from liftlog.domain.model import MAX_PRIOR_SESSIONS


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _require_non_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("session id must not be blank")
    return value


def _none_to_empty_list(value: object) -> object:
    return [] if value is None else value


class TagBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class SetPayload(TagBaseModel):
    weight_lbs: NonNegativeFloat = Field(
        validation_alias=AliasChoices("weightLbs", "weight_lbs")
    )
    reps: NonNegativeInt = Field(validation_alias=AliasChoices("reps"))
    duration_ms: NonNegativeInt = Field(
        validation_alias=AliasChoices("durationMs", "duration_ms")
    )


class SessionDataPayload(TagBaseModel):
    started_at_unix: int = Field(
        validation_alias=AliasChoices("startedAtUnix", "started_at_unix", "start_time")
    )
    ended_at_unix: int = Field(
        validation_alias=AliasChoices("endedAtUnix", "ended_at_unix", "end_time")
    )
    sets: list[SetPayload] = Field(default_factory=list[SetPayload])

    _normalize_sets = field_validator("sets", mode="before")(_none_to_empty_list)

    @model_validator(mode="after")
    def _check_order(self) -> Self:
        if self.ended_at_unix < self.started_at_unix:
            raise ValueError("session ends before it starts")
        return self


class MachineFieldsMixin(TagBaseModel):
    version: int | None = Field(default=None, validation_alias=AliasChoices("version", "v"))
    machine_id: str = Field(
        min_length=1, validation_alias=AliasChoices("machineId", "machine_id")
    )
    machine_name: str | None = Field(
        default=None, validation_alias=AliasChoices("machineName", "machine_name")
    )
    machine_type: str | None = Field(
        default=None, validation_alias=AliasChoices("machineType", "machine_type")
    )
    firmware_version: str | None = Field(
        default=None, validation_alias=AliasChoices("firmwareVersion", "fw")
    )
    exercise_id: str | None = Field(
        default=None, validation_alias=AliasChoices("exerciseId", "exercise_id")
    )
    exercise_name: str | None = Field(
        default=None, validation_alias=AliasChoices("exerciseName", "exercise_name")
    )

    _normalize_machine_id = field_validator("machine_id", mode="before")(_blank_to_none)
    _normalize_optional = field_validator(
        "machine_name",
        "machine_type",
        "firmware_version",
        "exercise_id",
        "exercise_name",
        mode="before",
    )(_blank_to_none)


class CanonicalTagPayload(MachineFieldsMixin):
    current_session_id: str = Field(min_length=1, alias="currentSessionId")
    prior_session_ids: list[str] = Field(
        default_factory=list[str],
        max_length=MAX_PRIOR_SESSIONS,
        alias="priorSessionIds",
    )
    prior_session_data: dict[str, SessionDataPayload] = Field(
        default_factory=dict[str, SessionDataPayload],
        alias="priorSessionData",
    )

    _check_current_id = field_validator("current_session_id")(_require_non_blank)
    _normalize_prior_ids = field_validator("prior_session_ids", mode="before")(
        _none_to_empty_list
    )

    @field_validator("prior_session_data", mode="before")
    @classmethod
    def _none_to_empty_mapping(cls, value: object) -> object:
        return {} if value is None else value

    @field_validator("prior_session_ids")
    @classmethod
    def _reject_blank_ids(cls, value: list[str]) -> list[str]:
        if any(not session_id.strip() for session_id in value):
            raise ValueError("prior session ids must be non-empty")
        return value


class SlotTagPayload(MachineFieldsMixin):
    """Firmware layout: slot ``a`` is the fresh tap, ``b``..``d`` are finished sessions."""

    session_id_a: str = Field(min_length=1)
    session_id_b: str | None = None
    session_id_c: str | None = None
    session_id_d: str | None = None
    session_data_b: SessionDataPayload | None = None
    session_data_c: SessionDataPayload | None = None
    session_data_d: SessionDataPayload | None = None

    _check_current_id = field_validator("session_id_a")(_require_non_blank)
    _normalize_slot_ids = field_validator(
        "session_id_b", "session_id_c", "session_id_d", mode="before"
    )(_blank_to_none)

    def prior_slots(self) -> list[tuple[str, SessionDataPayload | None]]:
        slots = (
            (self.session_id_b, self.session_data_b),
            (self.session_id_c, self.session_data_c),
            (self.session_id_d, self.session_data_d),
        )
        return [(session_id, data) for session_id, data in slots if session_id is not None]


class LegacyTagPayload(MachineFieldsMixin):
    session_id_tap_in: str = Field(min_length=1)
    session_id_tap_out: str | None = None
    session_data: SessionDataPayload | None = None

    _check_current_id = field_validator("session_id_tap_in")(_require_non_blank)
    _normalize_tap_out = field_validator("session_id_tap_out", mode="before")(_blank_to_none)


TagPayloadModel = CanonicalTagPayload | SlotTagPayload | LegacyTagPayload
