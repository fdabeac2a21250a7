"""Load, migrate and persist the per-installation settings record."""

from __future__ import annotations

import asyncio
from copy import deepcopy
from typing import Any, Callable, Iterable, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from peerdraft.config import Settings, settings as default_config
from peerdraft.core.exceptions import SettingsNotMigratedError, StorageError, ValidationError
from peerdraft.core.ids import create_random_id
from peerdraft.core.logger import get_logger
from peerdraft.schemas.settings import HobbyPlan, PluginSettings, ProfessionalPlan
from peerdraft.storage import DataStore

logger = get_logger(__name__)

OPERATOR_FIELDS = ("signaling", "subscriptionAPI", "connectAPI", "basePath")
DEFAULT_PLAN: dict[str, Any] = {"type": "hobby", "email": ""}
RECORD_FIELDS = frozenset(field.alias or name for name, field in PluginSettings.model_fields.items())


def operator_endpoints(config: Settings) -> dict[str, Any]:
    return {
        "signaling": list(config.signaling),
        "subscriptionAPI": config.subscription_api,
        "connectAPI": config.connect_api,
        "basePath": config.base_path,
    }


def default_record(config: Settings, id_factory: Callable[[], str] = create_random_id) -> dict[str, Any]:
    """Complete record used for a fresh installation."""
    record = operator_endpoints(config)
    record.update(
        {
            "name": "",
            "oid": id_factory(),
            "plan": dict(DEFAULT_PLAN),
            "duration": 0,
        }
    )
    return record


def force_record(config: Settings) -> dict[str, Any]:
    """Fields that always take the operator's value, whatever was persisted."""
    return operator_endpoints(config)


def merge_records(records: Iterable[Optional[Mapping[str, Any]]]) -> dict[str, Any]:
    """Shallow left-to-right merge: later records win key by key.

    ``None`` records are skipped. Nested values such as ``plan`` are
    replaced wholesale.
    """
    merged: dict[str, Any] = {}
    for record in records:
        if not record:
            continue
        for key, value in record.items():
            merged[key] = deepcopy(value)
    return merged


def _persisted_layer(raw: Any) -> dict[str, Any]:
    if not isinstance(raw, Mapping):
        if raw is not None:
            logger.warning("Ignoring persisted settings of type %s", type(raw).__name__)
        return {}
    # null in a known field means "no value"; unknown keys are carried as-is
    layer = {key: value for key, value in raw.items() if value is not None or key not in RECORD_FIELDS}
    oid = layer.get("oid")
    if isinstance(oid, (int, float)) and not isinstance(oid, bool):
        layer["oid"] = str(oid)
    elif not isinstance(oid, str) or not oid.strip():
        # an empty id was never really assigned
        layer.pop("oid", None)
    return layer


def migrate_record(
    raw: Any,
    defaults: Mapping[str, Any],
    forced: Mapping[str, Any],
) -> PluginSettings:
    """Upgrade a raw persisted record to the current shape.

    Precedence is defaults < persisted < forced. Persisted fields that fail
    validation fall back to their default value.
    """
    merged = merge_records([defaults, _persisted_layer(raw), forced])
    try:
        return PluginSettings.model_validate(merged)
    except PydanticValidationError as exc:
        invalid = sorted({str(error["loc"][0]) for error in exc.errors() if error["loc"]})
        logger.warning("Resetting invalid persisted settings fields to defaults: %s", ", ".join(invalid))
        for key in invalid:
            if key in defaults:
                merged[key] = deepcopy(defaults[key])
            else:
                merged.pop(key, None)
        return PluginSettings.model_validate(merged)


class SettingsStore:
    """Owns every read and write of the persisted settings record."""

    def __init__(
        self,
        data_store: DataStore,
        config: Settings | None = None,
        id_factory: Callable[[], str] = create_random_id,
    ):
        self.data_store = data_store
        self.config = config or default_config
        self.id_factory = id_factory
        self._lock = asyncio.Lock()
        self._migrated = False

    @property
    def migrated(self) -> bool:
        return self._migrated

    async def migrate(self) -> PluginSettings:
        """Merge the persisted record with defaults and forced fields, then persist it."""
        async with self._lock:
            raw = await self.data_store.load_data()
            migrated = migrate_record(
                raw,
                default_record(self.config, self.id_factory),
                force_record(self.config),
            )
            await self.data_store.save_data(migrated.to_record())
            self._migrated = True
        if raw is None:
            logger.info("Created settings for new installation oid=%s", migrated.oid)
        else:
            logger.info("Migrated settings for oid=%s", migrated.oid)
        return migrated

    async def get(self) -> PluginSettings:
        """Return the record as of the last completed save."""
        if not self._migrated:
            raise SettingsNotMigratedError("Settings must be migrated before they are read")
        raw = await self.data_store.load_data()
        if raw is None:
            raise StorageError("Persisted settings disappeared after migration")
        try:
            return PluginSettings.model_validate(raw)
        except PydanticValidationError as exc:
            raise StorageError(f"Persisted settings are invalid: {exc}") from exc

    async def save(self, current: PluginSettings) -> None:
        """Persist the whole record, replacing the previous one."""
        try:
            record = PluginSettings.model_validate(current.to_record()).to_record()
        except PydanticValidationError as exc:
            raise ValidationError(str(exc)) from exc
        await self.data_store.save_data(record)

    async def _update(self, **changes: Any) -> PluginSettings:
        async with self._lock:
            current = await self.get()
            updated = current.model_copy(update=changes)
            await self.save(updated)
        return updated

    async def set_name(self, name: str) -> PluginSettings:
        return await self._update(name=name)

    async def record_duration(self, minutes: float) -> PluginSettings:
        """Write path for the editing engine's usage counter."""
        if isinstance(minutes, bool) or not isinstance(minutes, (int, float)) or minutes < 0:
            raise ValidationError(f"Usage duration must be a non-negative number, got {minutes!r}")
        return await self._update(duration=minutes)

    async def adopt_plan(self, plan: HobbyPlan | ProfessionalPlan) -> PluginSettings:
        """Replace the local plan wholesale with one reported by the subscription service."""
        return await self._update(plan=plan)
