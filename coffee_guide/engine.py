from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from coffee_guide.catalog import (
    BREW_METHODS,
    GRINDERS,
    HUMIDITY_MAX,
    HUMIDITY_MIN,
    NEUTRAL_DOSE,
    NEUTRAL_HUMIDITY,
    NEUTRAL_TEMPERATURE,
    TEMPERATURE_MAX,
    TEMPERATURE_MIN,
    ClickRange,
    FixedDose,
    GrinderProfile,
    SizedVessel,
    WaterDriven,
)
from coffee_guide.errors import UnknownSizeError, UnsupportedCombinationError
from coffee_guide.presets import Preset


@dataclass(frozen=True)
class Corrections:
    neutral_temperature: float
    temperature_coefficient: float
    neutral_humidity: float
    humidity_coefficient: float
    neutral_dose: float
    dose_coefficient: float


DEFAULT_CORRECTIONS = Corrections(
    neutral_temperature=NEUTRAL_TEMPERATURE,
    temperature_coefficient=0.1,
    neutral_humidity=NEUTRAL_HUMIDITY,
    humidity_coefficient=0.07,
    neutral_dose=NEUTRAL_DOSE,
    dose_coefficient=0.2,
)


@dataclass(frozen=True)
class Recommendation:
    grinder: str
    brew_method: str
    effective_dose: float
    temperature_adjustment: float
    humidity_adjustment: float
    dose_adjustment: float
    total_adjustment: float
    click_min: int
    click_max: int
    clicks: int

    @property
    def range_label(self) -> str:
        return f"{self.click_min} - {self.click_max}"


def _dec(x) -> Decimal:
    # via str() so 0.1 is the decimal 0.1, not its binary neighbour
    return x if isinstance(x, Decimal) else Decimal(str(x))


def round_half_away(x, places: int = 0) -> Decimal:
    quantum = Decimal(1).scaleb(-places)
    return _dec(x).quantize(quantum, rounding=ROUND_HALF_UP)


def round_clicks(x) -> int:
    return int(round_half_away(x))


def effective_dose(
    brew_method: str,
    coffee_dose: float,
    water_amount: float,
    moka_size: str,
) -> float:
    """
    Grams of coffee actually used, read from whichever input the method's
    dose model treats as authoritative.
    """
    model = BREW_METHODS[brew_method].dose_model

    if isinstance(model, FixedDose):
        return float(coffee_dose)
    if isinstance(model, WaterDriven):
        return float(round_half_away(_dec(water_amount) / _dec(model.ratio), 1))
    if isinstance(model, SizedVessel):
        size = model.sizes.get(moka_size)
        if size is None:
            raise UnknownSizeError(brew_method, moka_size)
        return float(size.dose)

    raise TypeError(f"unhandled dose model: {model!r}")


def base_range(grinder: GrinderProfile, brew_method: str) -> ClickRange:
    base = grinder.calibration.get(brew_method)
    if base is None:
        raise UnsupportedCombinationError(grinder.name, brew_method)
    return base


def recommend(
    grinder: GrinderProfile,
    brew_method: str,
    temperature: int,
    humidity: int,
    dose_g: float,
    corrections: Optional[Corrections] = None,
) -> Recommendation:
    """
    Base click range for grinder+method, shifted by linear temperature,
    humidity and dose corrections. Pure; call again whenever an input changes.
    """
    c = corrections or DEFAULT_CORRECTIONS

    if not TEMPERATURE_MIN <= temperature <= TEMPERATURE_MAX:
        raise ValueError(f"temperature must be within {TEMPERATURE_MIN}..{TEMPERATURE_MAX} °C")
    if not HUMIDITY_MIN <= humidity <= HUMIDITY_MAX:
        raise ValueError(f"humidity must be within {HUMIDITY_MIN}..{HUMIDITY_MAX} %")

    base = base_range(grinder, brew_method)

    # decimal arithmetic keeps exact .5 totals exact
    temp_adj = (_dec(temperature) - _dec(c.neutral_temperature)) * _dec(c.temperature_coefficient)
    hum_adj = (_dec(humidity) - _dec(c.neutral_humidity)) * _dec(c.humidity_coefficient)
    dose_adj = (_dec(dose_g) - _dec(c.neutral_dose)) * _dec(c.dose_coefficient)
    total = temp_adj + hum_adj + dose_adj

    calc_min = round_clicks(base.low + total)
    calc_max = round_clicks(base.high + total)
    final_min, final_max = min(calc_min, calc_max), max(calc_min, calc_max)

    return Recommendation(
        grinder=grinder.name,
        brew_method=brew_method,
        effective_dose=dose_g,
        temperature_adjustment=float(temp_adj),
        humidity_adjustment=float(hum_adj),
        dose_adjustment=float(dose_adj),
        total_adjustment=float(total),
        click_min=final_min,
        click_max=final_max,
        clicks=round_clicks((final_min + final_max) / 2),
    )


def recommend_for(preset: Preset, corrections: Optional[Corrections] = None) -> Recommendation:
    grinder = GRINDERS.get(preset.grinder)
    if grinder is None:
        raise UnsupportedCombinationError(preset.grinder, preset.brew_method)

    dose = effective_dose(
        preset.brew_method,
        coffee_dose=preset.coffee_dose,
        water_amount=preset.water_amount,
        moka_size=preset.moka_size,
    )
    return recommend(
        grinder,
        preset.brew_method,
        temperature=preset.temperature,
        humidity=preset.humidity,
        dose_g=dose,
        corrections=corrections,
    )
