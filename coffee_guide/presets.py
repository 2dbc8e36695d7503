import logging
import time
from dataclasses import asdict, dataclass, replace
from typing import Any, ClassVar, Dict, List, Optional, Union
from uuid import uuid4

from coffee_guide.catalog import (
    BREW_METHODS,
    DEFAULT_GRINDER,
    GRINDERS,
    MOKA_MEDIUM,
    NEUTRAL_HUMIDITY,
    NEUTRAL_TEMPERATURE,
    FixedDose,
    SizedVessel,
    TastingResult,
    WaterDriven,
)
from coffee_guide.errors import ValidationError

logger = logging.getLogger(__name__)


# Used for the inert dose fields of methods that don't read them
FALLBACK_DOSE = 18
FALLBACK_WATER = 250
FALLBACK_MOKA_SIZE = MOKA_MEDIUM


@dataclass(frozen=True)
class Preset:
    id: str
    name: str
    brew_method: str
    grinder: str = DEFAULT_GRINDER
    temperature: int = NEUTRAL_TEMPERATURE     # °C
    humidity: int = NEUTRAL_HUMIDITY           # %
    coffee_dose: float = FALLBACK_DOSE         # g, fixed-dose methods
    water_amount: float = FALLBACK_WATER       # ml, water-driven methods
    moka_size: str = FALLBACK_MOKA_SIZE        # sized-vessel methods
    notes: str = ""
    tasting_result: Optional[TastingResult] = TastingResult.BALANCED


# --- Field updates (one class per editable field) ---
@dataclass(frozen=True)
class SetName:
    value: str
    target: ClassVar[str] = "name"


@dataclass(frozen=True)
class SetGrinder:
    value: str
    target: ClassVar[str] = "grinder"


@dataclass(frozen=True)
class SetTemperature:
    value: int
    target: ClassVar[str] = "temperature"


@dataclass(frozen=True)
class SetHumidity:
    value: int
    target: ClassVar[str] = "humidity"


@dataclass(frozen=True)
class SetCoffeeDose:
    value: float
    target: ClassVar[str] = "coffee_dose"


@dataclass(frozen=True)
class SetWaterAmount:
    value: float
    target: ClassVar[str] = "water_amount"


@dataclass(frozen=True)
class SetMokaSize:
    value: str
    target: ClassVar[str] = "moka_size"


@dataclass(frozen=True)
class SetNotes:
    value: str
    target: ClassVar[str] = "notes"


@dataclass(frozen=True)
class SetTastingResult:
    value: Optional[TastingResult]
    target: ClassVar[str] = "tasting_result"


FieldUpdate = Union[
    SetName,
    SetGrinder,
    SetTemperature,
    SetHumidity,
    SetCoffeeDose,
    SetWaterAmount,
    SetMokaSize,
    SetNotes,
    SetTastingResult,
]


def new_preset_id() -> str:
    # millisecond timestamp + random suffix
    return f"{int(time.time() * 1000)}-{uuid4().hex[:8]}"


def default_preset(brew_method: str, preset_id: str) -> Preset:
    """
    A fresh preset seeded with the method's dose defaults.
    """
    model = BREW_METHODS[brew_method].dose_model

    dose = model.default_dose if isinstance(model, FixedDose) else FALLBACK_DOSE
    water = model.default_water if isinstance(model, WaterDriven) else FALLBACK_WATER
    size = model.default_size if isinstance(model, SizedVessel) else FALLBACK_MOKA_SIZE

    return Preset(
        id=preset_id,
        name=f"New {brew_method}",
        brew_method=brew_method,
        coffee_dose=dose,
        water_amount=water,
        moka_size=size,
    )


# --- Records (persisted form) ---
# keys written by the browser version of the app
_LEGACY_KEYS = {
    "brewMethod": "brew_method",
    "selectedGrinder": "grinder",
    "coffeeDose": "coffee_dose",
    "waterAmount": "water_amount",
    "mokaSize": "moka_size",
    "tastingNotes": "tasting_result",
}

_LEGACY_TASTING = {
    "Equilibrado": TastingResult.BALANCED,
    "Ácido": TastingResult.ACIDIC,
    "Amargo": TastingResult.BITTER,
}


def to_record(preset: Preset) -> Dict[str, Any]:
    record = asdict(preset)
    if preset.tasting_result is not None:
        record["tasting_result"] = TastingResult(preset.tasting_result).value
    return record


def from_record(raw: Dict[str, Any]) -> Preset:
    """
    Build a Preset from a stored record. Missing optional fields get the
    creation defaults; a record without a usable id, method or grinder
    raises ValueError.
    """
    if not isinstance(raw, dict):
        raise ValueError("preset record must be an object")

    data = {_LEGACY_KEYS.get(k, k): v for k, v in raw.items()}

    preset_id = data.get("id")
    if not isinstance(preset_id, str) or not preset_id:
        raise ValueError("preset record has no id")

    method = data.get("brew_method")
    if method not in BREW_METHODS:
        raise ValueError(f"unknown brew method: {method!r}")

    grinder = data.get("grinder", DEFAULT_GRINDER)
    if grinder not in GRINDERS:
        raise ValueError(f"unknown grinder: {grinder!r}")

    base = default_preset(method, preset_id)

    # the browser app treated an empty result as balanced
    tasting = data.get("tasting_result", base.tasting_result)
    if tasting == "":
        tasting = base.tasting_result
    if tasting is not None:
        tasting = _LEGACY_TASTING.get(tasting) or TastingResult(tasting)

    return replace(
        base,
        name=str(data.get("name", base.name)),
        grinder=grinder,
        temperature=int(data.get("temperature", base.temperature)),
        humidity=int(data.get("humidity", base.humidity)),
        coffee_dose=float(data.get("coffee_dose", base.coffee_dose)),
        water_amount=float(data.get("water_amount", base.water_amount)),
        moka_size=str(data.get("moka_size", base.moka_size)),
        notes=str(data.get("notes", "")),
        tasting_result=tasting,
    )


class PresetStore:
    """
    Ordered collection of presets. Every create/update/delete rewrites the
    whole collection to the slot (if one is attached).
    """

    def __init__(self, slot=None, presets: Optional[List[Preset]] = None):
        self._slot = slot
        self._presets: List[Preset] = list(presets or [])

    @classmethod
    def open(cls, slot) -> "PresetStore":
        return cls(slot, slot.load())

    def _persist(self) -> None:
        if self._slot is not None:
            self._slot.write(self._presets)

    def _index(self, preset_id: str) -> Optional[int]:
        for i, p in enumerate(self._presets):
            if p.id == preset_id:
                return i
        return None

    def create(self, brew_method: str) -> Preset:
        preset_id = new_preset_id()
        while self._index(preset_id) is not None:
            preset_id = new_preset_id()

        preset = default_preset(brew_method, preset_id)
        self._presets.append(preset)
        logger.info("created preset %s (%s)", preset.id, brew_method)
        self._persist()
        return preset

    def get(self, preset_id: str) -> Optional[Preset]:
        i = self._index(preset_id)
        return None if i is None else self._presets[i]

    def list(self) -> List[Preset]:
        return list(self._presets)

    def by_category(self) -> Dict[str, List[Preset]]:
        categories: Dict[str, List[Preset]] = {method: [] for method in BREW_METHODS}
        for p in self._presets:
            if p.brew_method in categories:
                categories[p.brew_method].append(p)
        return categories

    def update(self, preset_id: str, change: FieldUpdate) -> bool:
        i = self._index(preset_id)
        if i is None:
            logger.warning("update on missing preset %s (%s)", preset_id, change.target)
            return False

        self._presets[i] = replace(self._presets[i], **{change.target: change.value})
        self._persist()
        return True

    def delete(self, preset_id: str) -> bool:
        """
        Remove a preset. Callers must have asked the user to confirm first.
        """
        i = self._index(preset_id)
        if i is None:
            return False

        removed = self._presets.pop(i)
        logger.info("deleted preset %s (%s)", removed.id, removed.name)
        self._persist()
        return True

    def save(self, preset_id: str) -> Optional[ValidationError]:
        preset = self.get(preset_id)
        if preset is None:
            return ValidationError.MISSING_PRESET
        if not preset.name.strip():
            return ValidationError.EMPTY_NAME
        return None
