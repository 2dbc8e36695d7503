import streamlit as st

from coffee_guide.app_logging import configure_logging
from coffee_guide.catalog import (
    BREW_METHODS,
    DOSE_MAX,
    DOSE_MIN,
    ESPRESSO,
    GRINDERS,
    HUMIDITY_MAX,
    HUMIDITY_MIN,
    PROPORTIONS_GUIDE,
    TEMPERATURE_MAX,
    TEMPERATURE_MIN,
    WATER_MAX,
    WATER_MIN,
    WATER_STEP,
    FixedDose,
    SizedVessel,
    TastingResult,
    WaterDriven,
    needs_adjustment,
    tasting_advice,
)
from coffee_guide.config import get_settings
from coffee_guide.engine import effective_dose, recommend_for
from coffee_guide.errors import UnknownSizeError, ValidationError, WeatherError
from coffee_guide.presets import (
    PresetStore,
    SetCoffeeDose,
    SetGrinder,
    SetHumidity,
    SetMokaSize,
    SetName,
    SetNotes,
    SetTastingResult,
    SetTemperature,
    SetWaterAmount,
)
from coffee_guide.storage import JsonPresetSlot
from coffee_guide.weather import OpenMeteoClient, apply_conditions


settings = get_settings()
configure_logging(settings.log_level)


@st.cache_resource
def get_store() -> PresetStore:
    return PresetStore.open(JsonPresetSlot(settings.presets_path))


@st.cache_resource
def get_weather_client() -> OpenMeteoClient:
    return OpenMeteoClient.create(settings.weather_base_url, timeout=settings.weather_timeout)


store = get_store()
state = st.session_state
state.setdefault("view", "menu")
state.setdefault("active_id", None)
state.setdefault("pending_delete", None)


def open_preset(preset_id: str) -> None:
    state["active_id"] = preset_id
    state["view"] = "calculator"


def back_to_menu() -> None:
    state["active_id"] = None
    state["view"] = "menu"


def clamp(x, lo, hi):
    return max(lo, min(hi, x))


def sync(preset, change) -> None:
    # only write when the widget value actually moved
    if getattr(preset, change.target) != change.value:
        store.update(preset.id, change)


def sync_moved(preset, change, shown) -> None:
    # shown is what the widget started from (clamped/rounded); an untouched
    # widget must not write that back over the stored value
    if change.value != shown:
        sync(preset, change)


def render_guide() -> None:
    with st.expander("Proportions guide"):
        for title, rows in PROPORTIONS_GUIDE:
            st.markdown(f"**{title}**")
            st.table([{"Drink": drink, "Proportion": proportion} for drink, proportion in rows])


def render_menu() -> None:
    st.title("Coffee Guide ☕")

    pending = state["pending_delete"]
    if pending is not None:
        preset_id, name = pending
        st.warning(f"Are you sure you want to delete the recipe '{name}'?")
        yes, no = st.columns(2)
        if yes.button("Delete", type="primary"):
            store.delete(preset_id)
            state["pending_delete"] = None
            st.rerun()
        if no.button("Cancel"):
            state["pending_delete"] = None
            st.rerun()

    for category, items in store.by_category().items():
        with st.expander(f"{category} ({len(items)})", expanded=bool(items)):
            if not items:
                st.caption("No recipes here yet. Add one with the + button!")
            for preset in items:
                name_col, del_col = st.columns([5, 1])
                if name_col.button(preset.name or "(unnamed)", key=f"open-{preset.id}"):
                    open_preset(preset.id)
                    st.rerun()
                if del_col.button("✕", key=f"del-{preset.id}", help=f"Delete {preset.name}"):
                    state["pending_delete"] = (preset.id, preset.name)
                    st.rerun()
            if st.button("+ Add", key=f"add-{category}"):
                open_preset(store.create(category).id)
                st.rerun()

    st.divider()
    render_guide()


def render_weather(preset) -> None:
    st.subheader("Today's conditions")

    lat_col, lon_col = st.columns(2)
    latitude = lat_col.number_input(
        "Latitude", min_value=-90.0, max_value=90.0,
        value=settings.default_latitude or 0.0, step=0.1, key="latitude",
    )
    longitude = lon_col.number_input(
        "Longitude", min_value=-180.0, max_value=180.0,
        value=settings.default_longitude or 0.0, step=0.1, key="longitude",
    )

    if st.button("Use my location"):
        with st.spinner("Loading..."):
            try:
                conditions = get_weather_client().current(latitude, longitude)
            except WeatherError:
                st.error("Something went wrong while fetching the weather.")
            else:
                apply_conditions(store, preset.id, conditions)
                fresh = store.get(preset.id)
                # sliders below haven't been drawn yet this run
                state[f"temperature-{preset.id}"] = fresh.temperature
                state[f"humidity-{preset.id}"] = fresh.humidity


def render_calculator(preset_id: str) -> None:
    preset = store.get(preset_id)
    if preset is None:
        back_to_menu()
        st.rerun()
        return

    method = BREW_METHODS[preset.brew_method]
    model = method.dose_model

    if st.button("⌂ Menu"):
        back_to_menu()
        st.rerun()

    name = st.text_input("Recipe name", value=preset.name, key=f"name-{preset.id}")
    sync(preset, SetName(name))

    grinders = list(GRINDERS)
    grinder = st.selectbox(
        "Grinder", grinders, index=grinders.index(preset.grinder), key=f"grinder-{preset.id}"
    )
    sync(preset, SetGrinder(grinder))

    with st.expander("Recommended amounts"):
        st.write(method.description)
        if isinstance(model, SizedVessel):
            st.write("Dose per size:")
            for label, size in model.sizes.items():
                st.write(f"- {label}: **{size.dose:g}g**")

    if isinstance(model, FixedDose):
        shown_dose = float(clamp(round(preset.coffee_dose * 2) / 2, DOSE_MIN, DOSE_MAX))
        dose = st.slider(
            "Coffee (g)", min_value=float(DOSE_MIN), max_value=float(DOSE_MAX), step=0.5,
            value=shown_dose, key=f"dose-{preset.id}",
        )
        sync_moved(preset, SetCoffeeDose(dose), shown_dose)
    elif isinstance(model, WaterDriven):
        shown_water = clamp(int(round(preset.water_amount)), WATER_MIN, WATER_MAX)
        water = st.slider(
            "Water (ml)", min_value=WATER_MIN, max_value=WATER_MAX, step=WATER_STEP,
            value=shown_water, key=f"water-{preset.id}",
        )
        sync_moved(preset, SetWaterAmount(water), shown_water)
        suggested = effective_dose(preset.brew_method, preset.coffee_dose, water, preset.moka_size)
        st.caption(f"Suggested coffee: **{suggested:g}g**")
    else:
        sizes = list(model.sizes)
        known = preset.moka_size in sizes
        if not known:
            st.warning(f"'{preset.moka_size}' is not a Moka pot size. Pick a size to continue.")
        size = st.selectbox(
            "Moka pot size", sizes, index=sizes.index(preset.moka_size) if known else None,
            placeholder="Choose a size", key=f"moka-{preset.id}",
        )
        if size is not None:
            sync(preset, SetMokaSize(size))

    render_weather(preset)
    preset = store.get(preset.id)

    shown_temperature = clamp(preset.temperature, TEMPERATURE_MIN, TEMPERATURE_MAX)
    temperature = st.slider(
        "Temperature (°C)", min_value=TEMPERATURE_MIN, max_value=TEMPERATURE_MAX,
        value=shown_temperature, key=f"temperature-{preset.id}",
    )
    sync_moved(preset, SetTemperature(temperature), shown_temperature)
    shown_humidity = clamp(preset.humidity, HUMIDITY_MIN, HUMIDITY_MAX)
    humidity = st.slider(
        "Humidity (%)", min_value=HUMIDITY_MIN, max_value=HUMIDITY_MAX,
        value=shown_humidity, key=f"humidity-{preset.id}",
    )
    sync_moved(preset, SetHumidity(humidity), shown_humidity)
    st.caption("Weather data is an approximation. Adjust by hand for more precision.")

    notes = st.text_area(
        "Brew notes", value=preset.notes, placeholder="e.g. Colombian beans, medium roast...",
        key=f"notes-{preset.id}",
    )
    sync(preset, SetNotes(notes))

    if preset.brew_method == ESPRESSO:
        results = list(TastingResult)
        shown_tasting = preset.tasting_result or TastingResult.BALANCED
        tasting = st.selectbox(
            "Tasting diagnostic", results, index=results.index(shown_tasting),
            format_func=lambda r: r.value, key=f"tasting-{preset.id}",
        )
        sync_moved(preset, SetTastingResult(tasting), shown_tasting)
        if needs_adjustment(tasting):
            st.info(tasting_advice(preset.brew_method, tasting))

    try:
        rec = recommend_for(store.get(preset.id))
    except UnknownSizeError:
        st.error("No recommendation until a Moka pot size is chosen.")
        return
    st.divider()
    st.metric("Recommended clicks", rec.clicks)
    st.write(f"**Range:** {rec.range_label}")
    st.caption(f"Effective dose {rec.effective_dose:g}g, adjustment {rec.total_adjustment:+.2f} clicks")

    if st.button("Save", type="primary"):
        error = store.save(preset.id)
        if error is ValidationError.EMPTY_NAME:
            st.error("Please give your recipe a name before saving.")
        elif error is None:
            back_to_menu()
            st.rerun()

    st.caption("Note: this is a guide. Adjust to your taste and the beans you use.")


if state["view"] == "calculator" and state["active_id"]:
    render_calculator(state["active_id"])
else:
    render_menu()
