"""Tests for the controller's update and render functions."""

from __future__ import annotations

import pytest

from debloater.core import controller
from debloater.core.commands import FetchPackageDetails, LoadPackages, QueryDeviceAndCatalog
from debloater.core.errors import ControllerError
from debloater.core.models.catalog import Catalog
from debloater.core.models.device import NO_DEVICE_LABEL
from debloater.core.models.event import (
    Event,
    ExpertModeToggled,
    ListScreenEvent,
    NavigateToAbout,
    NavigateToList,
    NavigateToSettings,
    PackageSelected,
    PackagesLoaded,
    RequestRefresh,
    SearchChanged,
    SettingsScreenEvent,
    StartupLoadCompleted,
)
from debloater.core.models.state import AppState, ListPhase, ScreenId

from tests.helpers.catalog import make_catalog, make_packages


def _started(label: str = "Pixel 6", catalog: Catalog | None = None) -> AppState:
    state, _ = controller.update(
        AppState(),
        StartupLoadCompleted(device_label=label, catalog=catalog if catalog is not None else make_catalog()),
    )
    return state


def _loaded(state: AppState) -> AppState:
    state, _ = controller.update(
        state,
        ListScreenEvent(
            inner=PackagesLoaded(
                generation=state.load_generation,
                catalog=make_catalog(),
                packages=tuple(make_packages()),
            )
        ),
    )
    return state


class _Unknown(Event):
    pass


class TestInit:
    def test_initial_state_and_startup_command(self):
        state, command = controller.init()
        assert state == AppState()
        assert state.active_screen is ScreenId.LIST
        assert state.device_label == NO_DEVICE_LABEL
        assert state.list_state.phase is ListPhase.LOADING
        assert command == QueryDeviceAndCatalog(generation=0)


_SCREEN_FOR = {
    NavigateToAbout: ScreenId.ABOUT,
    NavigateToSettings: ScreenId.SETTINGS,
    NavigateToList: ScreenId.LIST,
}

_NAVIGATION_SEQUENCES = [
    [NavigateToAbout(), NavigateToSettings(), NavigateToList()],
    [NavigateToList(), NavigateToList()],
    [NavigateToSettings(), NavigateToAbout(), NavigateToAbout(), NavigateToList()],
    [NavigateToAbout(), NavigateToList(), NavigateToSettings(), NavigateToSettings()],
    [NavigateToSettings(), NavigateToList(), NavigateToAbout(), NavigateToSettings(), NavigateToList()],
]


class TestNavigation:
    @pytest.mark.parametrize("sequence", _NAVIGATION_SEQUENCES)
    @pytest.mark.parametrize("loaded", [True, False])
    def test_every_step_keeps_all_screen_states(self, sequence, loaded):
        state = _loaded(_started()) if loaded else AppState()
        rows, generation = state.list_state.rows, state.load_generation

        for event in sequence:
            state, cmd = controller.update(state, event)
            assert cmd is None
            assert state.active_screen is _SCREEN_FOR[type(event)]
            assert state.list_state is not None
            assert state.settings_state is not None
            assert state.about_state is not None
            assert state.list_state.rows == rows
            assert state.load_generation == generation

    def test_about_round_trip_keeps_list_state(self):
        state = _loaded(_started())
        state, _ = controller.update(state, ListScreenEvent(inner=SearchChanged(text="bips")))
        before = state.list_state

        state, _ = controller.update(state, NavigateToAbout())
        state, _ = controller.update(state, NavigateToList())

        assert state.list_state == before
        assert state.list_state.search == "bips"

    def test_navigate_to_list_pushes_settings(self):
        state = _loaded(_started())
        state, _ = controller.update(state, NavigateToSettings())
        state, _ = controller.update(
            state, SettingsScreenEvent(inner=ExpertModeToggled(enabled=True))
        )
        assert state.settings_state.expert_mode is True
        assert state.list_state.settings.expert_mode is False

        state, _ = controller.update(state, NavigateToList())
        assert state.list_state.settings.expert_mode is True


class TestRefresh:
    @pytest.mark.parametrize("screen_event", [NavigateToAbout(), NavigateToSettings(), NavigateToList()])
    def test_refresh_from_any_screen_resets_list(self, screen_event):
        state = _loaded(_started())
        state, _ = controller.update(state, screen_event)
        generation = state.load_generation

        state, command = controller.update(state, RequestRefresh())

        assert state.active_screen is ScreenId.LIST
        assert state.load_generation == generation + 1
        assert state.list_state.phase is ListPhase.LOADING
        assert state.list_state.rows == ()
        assert command == LoadPackages(generation=generation + 1, refresh_device=True)

    def test_refresh_keeps_settings(self):
        state = _started()
        state, _ = controller.update(
            state, SettingsScreenEvent(inner=ExpertModeToggled(enabled=True))
        )
        state, _ = controller.update(state, RequestRefresh())
        assert state.list_state.settings.expert_mode is True

    def test_stale_result_is_discarded(self):
        state = _started()
        stale_generation = state.load_generation
        state, _ = controller.update(state, RequestRefresh())

        late = ListScreenEvent(
            inner=PackagesLoaded(
                generation=stale_generation,
                catalog=make_catalog(),
                packages=tuple(make_packages()),
            )
        )
        new_state, command = controller.update(state, late)

        assert new_state is state
        assert command is None
        assert new_state.list_state.phase is ListPhase.LOADING

    def test_refresh_result_updates_device_label(self):
        state, _ = controller.update(_started(), RequestRefresh())
        state, _ = controller.update(
            state,
            ListScreenEvent(
                inner=PackagesLoaded(
                    generation=state.load_generation,
                    device_label="samsung SM-G991B",
                    catalog=make_catalog(),
                )
            ),
        )
        assert state.device_label == "samsung SM-G991B"
        assert state.list_state.phase is ListPhase.EMPTY


class TestStartup:
    def test_startup_sets_label_and_loads_packages(self):
        catalog = make_catalog()
        state, command = controller.update(
            AppState(), StartupLoadCompleted(device_label="Pixel 6", catalog=catalog)
        )
        assert state.device_label == "Pixel 6"
        assert state.load_generation == 1
        assert command == LoadPackages(generation=1, catalog=catalog)

    def test_repeated_startup_result_is_discarded(self):
        state = _loaded(_started())
        new_state, command = controller.update(
            state, StartupLoadCompleted(device_label="Pixel 7", catalog=make_catalog())
        )
        assert new_state is state
        assert command is None
        assert new_state.device_label == "Pixel 6"

    def test_late_startup_result_after_refresh_is_discarded(self):
        _, startup = controller.init()
        state, refresh = controller.update(AppState(), RequestRefresh())

        late = StartupLoadCompleted(
            generation=startup.generation, device_label=NO_DEVICE_LABEL, catalog=make_catalog()
        )
        new_state, command = controller.update(state, late)
        assert new_state is state
        assert command is None

        state, _ = controller.update(
            new_state,
            ListScreenEvent(
                inner=PackagesLoaded(
                    generation=refresh.generation,
                    device_label="Pixel 6",
                    catalog=make_catalog(),
                    packages=tuple(make_packages()),
                )
            ),
        )
        assert state.device_label == "Pixel 6"
        assert state.load_generation == 1
        assert len(state.list_state.rows) == 3


    def test_failed_catalog_still_loads_packages(self):
        state, command = controller.update(
            AppState(),
            StartupLoadCompleted(device_label="Pixel 6", catalog=Catalog.empty("missing")),
        )
        assert isinstance(command, LoadPackages)
        assert command.catalog.error == "missing"

        state, _ = controller.update(
            state,
            ListScreenEvent(inner=PackagesLoaded(generation=1, catalog=command.catalog)),
        )
        assert state.list_state.phase is ListPhase.ERROR


class TestListDelegation:
    def test_pixel_scenario(self):
        state = _loaded(_started())
        assert state.list_state.phase is ListPhase.READY
        assert [r.id for r in state.list_state.rows] == [
            "com.android.bips",
            "com.android.systemui",
            "com.google.android.youtube",
        ]
        texts = controller.render(state).texts()
        assert "Device: Pixel 6" in texts
        assert "2 of 3 packages shown" in texts

    def test_package_selection_returns_details_command(self):
        state = _loaded(_started())
        state, command = controller.update(
            state, ListScreenEvent(inner=PackageSelected(package_id="com.android.bips"))
        )
        assert state.list_state.selected == "com.android.bips"
        assert command == FetchPackageDetails(
            generation=state.load_generation, package_id="com.android.bips"
        )


class TestErrors:
    def test_unknown_event_raises(self):
        with pytest.raises(ControllerError):
            controller.update(AppState(), _Unknown())


class TestRender:
    def test_render_is_pure(self):
        state = _loaded(_started())
        assert controller.render(state) == controller.render(state)

    def test_navigation_bar(self):
        root = controller.render(AppState())
        buttons = [b for b in root.find_all("button") if b.props.get("role") == "primary"]
        assert [b.props["text"] for b in buttons] == ["Refresh", "Apps", "About", "Settings"]
        assert [b.on_press for b in buttons] == [
            RequestRefresh(),
            NavigateToList(),
            NavigateToAbout(),
            NavigateToSettings(),
        ]
        assert f"Device: {NO_DEVICE_LABEL}" in root.texts()

    def test_loading_body(self):
        assert "Loading packages from the phone..." in controller.render(AppState()).texts()

    def test_list_events_are_wrapped(self):
        root = controller.render(_loaded(_started()))
        row = next(b for b in root.find_all("button") if b.props["text"] == "com.android.bips")
        assert row.on_press == ListScreenEvent(inner=PackageSelected(package_id="com.android.bips"))

    def test_settings_events_are_wrapped(self):
        state, _ = controller.update(AppState(), NavigateToSettings())
        root = controller.render(state)
        expert = root.find_all("checkbox")[0]
        assert expert.on_input.build(True) == SettingsScreenEvent(
            inner=ExpertModeToggled(enabled=True)
        )

    def test_about_body(self):
        state, _ = controller.update(AppState(), NavigateToAbout())
        assert "Universal Android Debloater" in controller.render(state).texts()
