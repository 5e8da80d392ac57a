"""
Persisted application configuration

The configuration lives as a single camelCase JSON blob in a local
key/value storage. Loading runs the stored blob through a versioned
migration chain and deep-merges it onto the built-in defaults so fields
added in newer releases are always present. Fields, list entries and
nested settings that fail validation are dropped one by one so the rest
of the stored settings survive. Storage problems never stop startup:
they are logged, the raw text is kept under a backup key and the
defaults are used instead.
"""

import copy
import json
import logging
import os
from datetime import date as date_type
from typing import Any, Callable, Dict, List, Optional, Tuple, get_args, get_origin

from pydantic import TypeAdapter, ValidationError

from theater_admin.schemas.app_config import AppConfig, build_default_config

logger = logging.getLogger(__name__)

LEGACY_PRICE_TABLES = ("weekday", "weekend", "zorgHeld")
LEGACY_FALLBACK_PRICES = {"standard": 70, "premium": 85}

BACKUP_SUFFIX = ".backup"

# read_config outcomes
LOAD_MISSING = "missing"
LOAD_OK = "ok"
LOAD_REPAIRED = "repaired"
LOAD_UNUSABLE = "unusable"


class LocalStorage:
    """File-backed key/value storage, one JSON text file per key"""

    def __init__(self, directory: str):
        self.directory = directory

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def set_item(self, key: str, value: str) -> None:
        os.makedirs(self.directory, exist_ok=True)
        tmp_path = self._path(key) + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(value)
        os.replace(tmp_path, self._path(key))

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        if os.path.exists(path):
            os.remove(path)


# -------- Migrations --------

def migrate_legacy_prices(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Move weekday/weekend/zorgHeld price tables onto each show type.

    Only configs that still carry ``prices.weekend`` and whose show types
    have no ``priceStandard`` are touched; anything else is returned as is.
    """
    prices = raw.get("prices")
    show_types = raw.get("showTypes")
    if not isinstance(prices, dict) or "weekend" not in prices:
        return raw
    if not isinstance(show_types, list):
        show_types = []
    if any(isinstance(t, dict) and "priceStandard" in t for t in show_types):
        return raw

    migrated = copy.deepcopy(raw)
    tables = migrated["prices"]
    new_types = []
    for show_type in migrated.get("showTypes") or []:
        if not isinstance(show_type, dict):
            new_types.append(show_type)
            continue
        name = str(show_type.get("name", ""))
        table = tables.get("weekday")
        if "Weekend" in name:
            table = tables.get("weekend")
        if "Zorgzame" in name:
            table = tables.get("zorgHeld")
        table = table if isinstance(table, dict) else LEGACY_FALLBACK_PRICES
        new_types.append({
            **show_type,
            "priceStandard": table.get("standard", LEGACY_FALLBACK_PRICES["standard"]),
            "pricePremium": table.get("premium", LEGACY_FALLBACK_PRICES["premium"]),
        })
    if "showTypes" in migrated:
        migrated["showTypes"] = new_types
    for legacy_key in LEGACY_PRICE_TABLES:
        tables.pop(legacy_key, None)
    logger.info("Migrated legacy price tables onto %d show types", len(new_types))
    return migrated


Migration = Tuple[int, Callable[[Dict[str, Any]], Dict[str, Any]]]

# (from_version, transform) pairs; each step moves a blob to from_version + 1
MIGRATIONS: List[Migration] = [
    (0, migrate_legacy_prices),
]

CURRENT_SCHEMA_VERSION = MIGRATIONS[-1][0] + 1


def apply_migrations(raw: Dict[str, Any], migrations: List[Migration] = MIGRATIONS) -> Dict[str, Any]:
    version = raw.get("schemaVersion", 0)
    if not isinstance(version, int):
        version = 0
    for from_version, transform in migrations:
        if from_version < version:
            continue
        raw = dict(transform(raw))
        raw["schemaVersion"] = from_version + 1
        version = from_version + 1
    return raw


# -------- Merge --------

def _is_mapping(value: Any) -> bool:
    return isinstance(value, dict)


def deep_merge(default: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override onto default.

    Mappings recurse; a default list is only ever replaced by another list;
    everything else takes the override unless it is missing or None.
    Inputs are not modified.
    """
    output = copy.deepcopy(default)
    for key, value in override.items():
        current = default.get(key)
        if _is_mapping(current) and _is_mapping(value):
            output[key] = deep_merge(current, value)
        elif isinstance(current, list):
            if isinstance(value, list):
                output[key] = copy.deepcopy(value)
        elif value is not None:
            output[key] = copy.deepcopy(value)
    return output


def merge_config(default: AppConfig, persisted: Dict[str, Any]) -> AppConfig:
    """Strict merge used for patches: any invalid value raises ValidationError"""
    merged = deep_merge(default.model_dump(by_alias=True, mode="json"), persisted)
    return AppConfig.model_validate(merged)


def _is_valid(annotation: Any, value: Any) -> bool:
    try:
        TypeAdapter(annotation).validate_python(value)
    except ValidationError:
        return False
    return True


def repair_fields(merged: Dict[str, Any], default: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """Keep whatever part of a merged blob validates on its own.

    Invalid list entries are dropped, invalid nested settings keep their
    default and any other invalid field falls back to its default. Returns
    the repaired blob and the paths of everything that was dropped.
    """
    repaired: Dict[str, Any] = {}
    dropped: List[str] = []
    for name, field in AppConfig.model_fields.items():
        key = field.alias or name
        if key not in merged:
            continue
        value = merged[key]
        annotation = field.annotation
        if _is_valid(annotation, value):
            repaired[key] = value
        elif get_origin(annotation) is list and isinstance(value, list):
            (item_type,) = get_args(annotation)
            repaired[key] = []
            for index, item in enumerate(value):
                if _is_valid(item_type, item):
                    repaired[key].append(item)
                else:
                    dropped.append(f"{key}[{index}]")
        elif _is_mapping(value) and _is_mapping(default.get(key)):
            kept = copy.deepcopy(default[key])
            for sub_key, sub_value in value.items():
                candidate = {**kept, sub_key: sub_value}
                if _is_valid(annotation, candidate):
                    kept = candidate
                elif sub_value != kept.get(sub_key):
                    dropped.append(f"{key}.{sub_key}")
            repaired[key] = kept
        else:
            dropped.append(key)
            if key in default:
                repaired[key] = default[key]
    return repaired, dropped


def repair_config(default: AppConfig, persisted: Dict[str, Any]) -> Tuple[AppConfig, List[str]]:
    """Lenient merge used on load: see repair_fields"""
    default_data = default.model_dump(by_alias=True, mode="json")
    merged, dropped = repair_fields(deep_merge(default_data, persisted), default_data)
    return AppConfig.model_validate(merged), dropped


# -------- Load / save --------

def default_config() -> AppConfig:
    return build_default_config(CURRENT_SCHEMA_VERSION)


def backup_key(key: str) -> str:
    return f"{key}{BACKUP_SUFFIX}"


def read_config(storage: LocalStorage, key: str, default: AppConfig) -> Tuple[AppConfig, str]:
    """Read, migrate and merge the persisted config.

    Returns the config together with one of the LOAD_* outcomes so callers
    know whether the stored text is safe to overwrite.
    """
    try:
        text = storage.get_item(key)
    except OSError as e:
        logger.error("Error reading config storage key %r: %s", key, e)
        return default, LOAD_UNUSABLE
    if not text:
        return default, LOAD_MISSING

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("Stored config under %r is not valid JSON: %s", key, e)
        return default, LOAD_UNUSABLE
    if not isinstance(raw, dict):
        logger.error("Stored config under %r is not an object", key)
        return default, LOAD_UNUSABLE

    try:
        config, dropped = repair_config(default, apply_migrations(raw))
    except ValidationError as e:
        logger.error("Stored config under %r does not match the config schema: %s", key, e)
        return default, LOAD_UNUSABLE
    if dropped:
        logger.warning("Dropped invalid config entries under %r: %s", key, ", ".join(dropped))
        return config, LOAD_REPAIRED
    return config, LOAD_OK


def load_config(storage: LocalStorage, key: str, default: AppConfig) -> AppConfig:
    """Read, migrate and merge the persisted config; fall back to default"""
    return read_config(storage, key, default)[0]


def save_config(storage: LocalStorage, key: str, config: AppConfig) -> None:
    try:
        storage.set_item(key, config.model_dump_json(by_alias=True))
    except OSError as e:
        logger.error("Error writing config storage key %r: %s", key, e)


class ConfigStore:
    """Holds the current configuration and writes it through on every change"""

    def __init__(self, storage: LocalStorage, key: str, default: Optional[AppConfig] = None):
        self.storage = storage
        self.key = key
        self.default = default or default_config()
        self._config = self.default

    def load(self) -> AppConfig:
        """Load the stored config and write the merged result back.

        A blob that needed repair is copied to the backup key first; one
        that could not be used at all is backed up and left in place.
        """
        self._config, outcome = read_config(self.storage, self.key, self.default)
        if outcome in (LOAD_REPAIRED, LOAD_UNUSABLE):
            self._backup_raw()
        if outcome != LOAD_UNUSABLE:
            save_config(self.storage, self.key, self._config)
        return self._config

    def _backup_raw(self) -> None:
        try:
            text = self.storage.get_item(self.key)
            if text:
                self.storage.set_item(backup_key(self.key), text)
                logger.warning("Kept the stored config under %r", backup_key(self.key))
        except OSError as e:
            logger.error("Error backing up config storage key %r: %s", self.key, e)

    def get(self) -> AppConfig:
        return self._config

    def replace(self, config: AppConfig) -> AppConfig:
        self._config = config.model_copy(update={"schema_version": CURRENT_SCHEMA_VERSION})
        save_config(self.storage, self.key, self._config)
        return self._config

    def update(self, patch: Dict[str, Any]) -> AppConfig:
        """Apply a partial camelCase patch; lists in the patch replace whole lists"""
        return self.replace(merge_config(self._config, patch))

    def record_code_use(self, code: str, reservation_id: Optional[str] = None) -> AppConfig:
        """Count a promo code use or mark a voucher as spent"""
        config = self._config
        promo_codes = [
            p.model_copy(update={"usage_count": p.usage_count + 1}) if p.code == code else p
            for p in config.promo_codes
        ]
        vouchers = [
            v.model_copy(update={
                "status": "used",
                "used_date": date_type.today().isoformat(),
                "used_reservation_id": reservation_id,
            }) if v.code == code else v
            for v in config.theater_vouchers
        ]
        return self.replace(config.model_copy(update={"promo_codes": promo_codes, "theater_vouchers": vouchers}))
