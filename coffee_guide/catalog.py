from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union


# --- Brew methods ---
ESPRESSO = "Espresso"
V60 = "V60"
AEROPRESS = "Aeropress"
CHEMEX = "Chemex"
FRENCH_PRESS = "Prensa Francesa"
MOKA = "Moka Italiana"


@dataclass(frozen=True)
class ClickRange:
    low: int
    high: int

    @classmethod
    def point(cls, clicks: int) -> "ClickRange":
        # single calibrated value, kept as a degenerate range
        return cls(clicks, clicks)


@dataclass(frozen=True)
class GrinderProfile:
    name: str
    calibration: Mapping[str, ClickRange]


@dataclass(frozen=True)
class FixedDose:
    ratio: float
    default_dose: float       # grams


@dataclass(frozen=True)
class WaterDriven:
    ratio: float
    default_water: float      # ml


@dataclass(frozen=True)
class VesselSize:
    dose: float               # grams
    water: float              # ml


@dataclass(frozen=True)
class SizedVessel:
    sizes: Mapping[str, VesselSize]
    default_size: str


DoseModel = Union[FixedDose, WaterDriven, SizedVessel]


@dataclass(frozen=True)
class BrewMethod:
    name: str
    dose_model: DoseModel
    description: str


def _calibration(espresso, moka, aeropress, v60, chemex, french_press) -> Mapping[str, ClickRange]:
    by_method = {
        ESPRESSO: espresso,
        MOKA: moka,
        AEROPRESS: aeropress,
        V60: v60,
        CHEMEX: chemex,
        FRENCH_PRESS: french_press,
    }
    return MappingProxyType({m: ClickRange(lo, hi) for m, (lo, hi) in by_method.items()})


# --- Grinder profiles (base click ranges per method) ---
GADNIC_C10 = "Gadnic C10"
COMANDANTE_C40 = "Comandante C40"
TIMEMORE_C2 = "Timemore C2"

GRINDERS: Mapping[str, GrinderProfile] = MappingProxyType({
    GADNIC_C10: GrinderProfile(
        GADNIC_C10,
        _calibration((8, 12), (12, 16), (15, 20), (18, 24), (24, 30), (28, 34)),
    ),
    COMANDANTE_C40: GrinderProfile(
        COMANDANTE_C40,
        _calibration((6, 10), (11, 15), (16, 22), (23, 28), (28, 34), (35, 40)),
    ),
    TIMEMORE_C2: GrinderProfile(
        TIMEMORE_C2,
        _calibration((8, 12), (12, 15), (14, 17), (17, 24), (24, 28), (27, 32)),
    ),
})

DEFAULT_GRINDER = GADNIC_C10


# --- Method config (dose model + short guidance) ---
MOKA_SMALL = "1 Taza (~50ml)"
MOKA_MEDIUM = "3 Tazas (~150ml)"
MOKA_LARGE = "6 Tazas (~300ml)"

BREW_METHODS: Mapping[str, BrewMethod] = MappingProxyType({
    ESPRESSO: BrewMethod(ESPRESSO, FixedDose(ratio=2, default_dose=18), "Typical ratio 1:2 (coffee:water)"),
    V60: BrewMethod(V60, WaterDriven(ratio=16, default_water=250), "Recommended ratio 1:16"),
    AEROPRESS: BrewMethod(AEROPRESS, WaterDriven(ratio=15, default_water=240), "Recommended ratio 1:15"),
    CHEMEX: BrewMethod(CHEMEX, WaterDriven(ratio=16, default_water=500), "Recommended ratio 1:16"),
    FRENCH_PRESS: BrewMethod(FRENCH_PRESS, WaterDriven(ratio=15, default_water=350), "Recommended ratio 1:15"),
    MOKA: BrewMethod(
        MOKA,
        SizedVessel(
            sizes=MappingProxyType({
                MOKA_SMALL: VesselSize(dose=6, water=50),
                MOKA_MEDIUM: VesselSize(dose=15, water=150),
                MOKA_LARGE: VesselSize(dose=25, water=300),
            }),
            default_size=MOKA_MEDIUM,
        ),
        "Fill the basket without tamping and the water up to the valve.",
    ),
})


# --- Input bounds ---
TEMPERATURE_MIN, TEMPERATURE_MAX = -10, 40     # °C
HUMIDITY_MIN, HUMIDITY_MAX = 0, 100            # %
DOSE_MIN, DOSE_MAX = 9, 30                     # g, espresso slider
WATER_MIN, WATER_MAX, WATER_STEP = 150, 1000, 10   # ml

# Neutral points: the corresponding correction term is zero here
NEUTRAL_TEMPERATURE = 15
NEUTRAL_HUMIDITY = 50
NEUTRAL_DOSE = 16


# --- Tasting diagnostic (espresso only) ---
class TastingResult(str, Enum):
    BALANCED = "Balanced"
    ACIDIC = "Acidic"
    BITTER = "Bitter"


TASTING_ADVICE: Mapping[TastingResult, str] = MappingProxyType({
    TastingResult.ACIDIC: (
        "A sour or acidic taste usually means under-extraction. Try a finer grind, "
        "raise the water temperature or extend the extraction time."
    ),
    TastingResult.BITTER: (
        "A bitter or astringent taste usually means over-extraction. Try a coarser grind, "
        "lower the water temperature or shorten the extraction time."
    ),
    TastingResult.BALANCED: "Congratulations! You pulled a balanced, delicious extraction.",
})


def tasting_advice(brew_method: str, result: Optional[TastingResult]) -> Optional[str]:
    """
    Advisory text for an espresso tasting result. None for every other method.
    """
    if brew_method != ESPRESSO or result is None:
        return None
    return TASTING_ADVICE[TastingResult(result)]


def needs_adjustment(result: Optional[TastingResult]) -> bool:
    return result is not None and TastingResult(result) is not TastingResult.BALANCED


# --- Proportions guide (display only) ---
PROPORTIONS_GUIDE: Tuple[Tuple[str, Tuple[Tuple[str, str], ...]], ...] = (
    ("Black coffee", (
        ("Espresso / Lungo", "20 g coffee → 40 g (espresso) or 60 g (lungo)"),
        ("Doppio / Doppio Lungo", "40 g coffee → 80 g (doppio) or 100+ g (lungo doppio)"),
        ("Ristretto", "20 g coffee → 20–25 g drink"),
        ("Long Black (Americano)", "2 espresso shots + 100–120 ml hot water"),
        ("Filter", "1:15 to 1:17 (e.g. 20 g coffee → 300–340 g water)"),
        ("Batch Brew", "Same as filter, brewed in batches"),
    )),
    ("Cold coffee", (
        ("Cold Brew", "1:8 to 1:10 (e.g. 100 g coffee → 800–1000 g cold water, steeped 12–18 h)"),
        ("Lemon Cold Brew", "Crushed ice + 2 tbsp lemon syrup + 40 ml cold brew + sparkling water + lemon peel"),
        ("Iced Flat White", "Espresso + 100 ml cold textured milk"),
        ("Iced Latte", "Espresso + 150–180 ml cold milk"),
        ("Iced Magic", "60 ml ristretto + 150 ml steamed milk"),
        ("Hoppy Espresso", "Espresso + cold hop soda"),
    )),
    ("Coffee with milk", (
        ("Macchiato", "Espresso + a spoonful of milk foam"),
        ("Magic", "60 ml ristretto + 150 ml steamed milk"),
        ("Cappu", "Espresso + 80 ml milk + 80 ml foam (1:1:1)"),
        ("Latte", "Espresso + 150–200 ml milk with little foam"),
        ("Flat White", "Espresso + 120 ml textured milk (less foam than a cappuccino)"),
        ("Mocaccino", "Espresso + 120 ml milk + 20–30 g chocolate or syrup"),
        ("Vanilla Latte", "Espresso + 150–200 ml milk + 10–20 ml vanilla syrup"),
    )),
    ("Useful facts", (
        ("Classic espresso", "20 g coffee → 40 g drink"),
        ("Ristretto", "20 g coffee → 20–25 g drink"),
        ("Lungo", "20 g coffee → 50–60 g drink"),
        ("Americano", "2 espresso shots + hot water to taste"),
        ("Filter", "Ratio 1:15 to 1:17"),
        ("Cold Brew", "Cold steep for 12–18 h, 1:8 or 1:10"),
    )),
)
