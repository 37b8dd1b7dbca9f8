"""Unit tests for WaveParameters and WaveField."""

from dataclasses import FrozenInstanceError
import logging

import numpy as np
import pytest

from wavegrid.core import ColorState, GridConfig, GridLayout, WaveField, WaveParameters, classify


class TestWaveParameters:
    """Tests for WaveParameters."""

    def test_defaults(self):
        params = WaveParameters()
        assert params.wave_speed == 3.0
        assert params.envelope_period == 8.0
        assert params.min_amplitude == 0.5
        assert params.max_amplitude == 2.0
        assert params.wave_density == 0.5
        assert params.vertical_amplitude_mod == 0.7

    def test_default_colors(self):
        params = WaveParameters()
        assert params.base_color == (1.0, 1.0, 1.0)
        assert params.peak_color == (0.0, 0.0, 1.0)
        assert params.trough_color == (1.0, 1.0, 0.0)

    def test_colors_normalized(self):
        params = WaveParameters(base_color="#ff0000", peak_color=(0.0, 1.0, 0.0))
        assert params.base_color == (1.0, 0.0, 0.0)
        assert params.peak_color == (0.0, 1.0, 0.0)

    def test_color_for(self):
        params = WaveParameters()
        assert params.color_for(ColorState.PEAK) == params.peak_color
        assert params.color_for(ColorState.TROUGH) == params.trough_color
        assert params.color_for(ColorState.BASE) == params.base_color

    def test_frozen(self):
        params = WaveParameters()
        with pytest.raises(FrozenInstanceError):
            params.wave_density = 0.0
        with pytest.raises(FrozenInstanceError):
            params.peak_color = "red"


class TestWaveFieldCreation:
    """Tests for WaveField setup."""

    def test_accepts_config_or_layout(self, small_grid_config):
        from_config = WaveField(small_grid_config)
        from_layout = WaveField(GridLayout(small_grid_config))
        assert from_config.shape == from_layout.shape == (5, 7)

    def test_cells_start_at_base(self, small_grid_config, default_params):
        field = WaveField(small_grid_config, default_params)
        colors = field.color_array()

        assert colors.shape == (5, 7, 3)
        assert np.all(colors == 1.0)
        assert np.all(field.previous_sines() == 0.0)

    def test_no_output_before_first_step(self, small_grid_config):
        field = WaveField(small_grid_config)
        assert field.frame_count == 0
        assert field.last_time is None
        assert np.allclose(field.displaced_positions(), field.layout.positions_array())


class TestColumnScenario:
    """3x1 frozen wave: row sines are sin(0), sin(-1), sin(-2)."""

    def test_row_sines(self, column_field):
        frames = column_field.step(0.0)
        sines = [f.sine for f in frames]
        assert np.allclose(sines, [0.0, np.sin(-1.0), np.sin(-2.0)])

    def test_displacement(self, column_field):
        params = column_field.params
        frames = column_field.step(0.0)

        # E(0) = max_amplitude; rows 0 and 2 are edge rows, row 1 is the middle
        assert frames[0].displacement == pytest.approx(0.0)
        assert frames[1].displacement == pytest.approx(params.max_amplitude * np.sin(-1.0))
        assert frames[2].displacement == pytest.approx(
            params.max_amplitude * params.vertical_amplitude_mod * np.sin(-2.0)
        )

    def test_row_two_enters_trough(self, column_field):
        frames = column_field.step(0.0)

        assert frames[0].transition is None
        assert frames[1].transition is None
        assert frames[2].transition is ColorState.TROUGH
        assert frames[2].color == column_field.params.trough_color
        assert column_field.cells[2, 0].color == column_field.params.trough_color

    def test_previous_sine_updated(self, column_field):
        column_field.step(0.0)
        assert np.allclose(
            column_field.previous_sines()[:, 0],
            [0.0, np.sin(-1.0), np.sin(-2.0)],
        )

    def test_repeat_step_same_output(self, column_field):
        first = column_field.step(0.0)
        second = column_field.step(0.0)

        for a, b in zip(first, second):
            assert a.displacement == b.displacement
            assert np.array_equal(a.position, b.position)
        # Target color is unchanged by the repeat
        assert second[2].color == first[2].color


class TestWaveFieldStep:
    """Tests for the per-frame step."""

    def test_only_x_is_displaced(self, small_grid_config):
        field = WaveField(small_grid_config)
        for frame in field.step(0.37):
            initial = field.cells[frame.row, frame.col].initial_position
            assert frame.position[1] == initial[1]
            assert frame.position[2] == initial[2]
            assert frame.position[0] == pytest.approx(initial[0] + frame.displacement)

    def test_columns_in_a_row_move_together(self, small_grid_config):
        field = WaveField(small_grid_config)
        field.step(1.3)
        sampled = field.sample(1.3)
        assert np.allclose(sampled, sampled[:, :1])

    def test_sample_matches_step(self, small_grid_config):
        field = WaveField(small_grid_config)
        sampled = field.sample(2.1)
        frames = field.step(2.1)

        for frame in frames:
            assert frame.displacement == pytest.approx(sampled[frame.row, frame.col])

    def test_sample_does_not_mutate(self, small_grid_config):
        field = WaveField(small_grid_config)
        field.sample(5.0)
        assert np.all(field.previous_sines() == 0.0)
        assert field.frame_count == 0

    def test_displacement_within_envelope(self, small_grid_config):
        field = WaveField(small_grid_config)
        for t in np.linspace(0.0, 20.0, 101):
            assert np.all(np.abs(field.sample(t)) <= field.params.max_amplitude + 1e-12)

    def test_bookkeeping(self, small_grid_config):
        field = WaveField(small_grid_config)
        field.run([0.0, 0.1, 0.2])
        assert field.frame_count == 3
        assert field.last_time == 0.2

    def test_displaced_positions_follow_last_step(self, small_grid_config):
        field = WaveField(small_grid_config)
        frames = field.step(0.8)
        positions = field.displaced_positions()

        for frame in frames:
            assert np.allclose(positions[frame.row, frame.col], frame.position)

    def test_time_going_backwards_logged_and_evaluated(self, small_grid_config, caplog):
        field = WaveField(small_grid_config)
        field.step(1.0)

        with caplog.at_level(logging.DEBUG, logger="wavegrid.core.wave_field"):
            frames = field.step(0.5)

        assert "time went backwards" in caplog.text
        assert field.last_time == 0.5
        sampled = field.sample(0.5)
        for frame in frames:
            assert frame.displacement == sampled[frame.row, frame.col]

    def test_transitions_match_single_cell_rule(self, small_grid_config):
        field = WaveField(small_grid_config)
        for t in np.arange(0.0, 4.0, 0.07):
            previous = field.previous_sines()
            for frame in field.step(float(t)):
                assert frame.transition is classify(frame.sine, previous[frame.row, frame.col])

    def test_single_row_grid(self):
        params = WaveParameters(vertical_amplitude_mod=0.4)
        field = WaveField(GridConfig(rows=1, columns=4), params)
        frames = field.step(0.5)

        expected = field.envelope(0.5) * 0.4 * np.sin(params.wave_speed * 0.5)
        assert len(frames) == 4
        for frame in frames:
            assert frame.displacement == pytest.approx(expected)


class TestPeakFlash:
    """A crest produces a flash: peak color on the way up, base after."""

    def test_flash_over_a_crest(self):
        params = WaveParameters(wave_speed=1.0, wave_density=0.0)
        field = WaveField(GridConfig(rows=1, columns=1), params)
        cell = field.cells[0, 0]

        # sin crosses 0.9 on the way up near t = 1.12 and peaks at π/2
        states = []
        for t in np.arange(0.0, 3.0, 0.05):
            states.append(field.step(float(t))[0].transition)

        first_peak = states.index(ColorState.PEAK)
        first_base = states.index(ColorState.BASE)
        assert first_peak < first_base
        assert all(s is ColorState.PEAK for s in states[first_peak:first_base])
        assert cell.color == params.base_color

    def test_trough_then_base(self):
        params = WaveParameters(wave_speed=1.0, wave_density=0.0)
        field = WaveField(GridConfig(rows=1, columns=1), params)

        colors = [field.step(float(t))[0].color for t in np.arange(3.0, 6.5, 0.05)]
        assert params.trough_color in colors
        assert colors[-1] == params.base_color


class TestMissingCells:
    """Released cells are skipped and keep their state."""

    def test_released_cell_skipped(self, column_field):
        column_field.cells.release(2, 0)
        frames = column_field.step(0.0)

        assert [f.row for f in frames] == [0, 1]
        cell = column_field.cells[2, 0]
        assert cell.previous_sine == 0.0
        assert cell.color == column_field.params.base_color

    def test_released_cell_resumes_after_attach(self, column_field, recording_target):
        column_field.cells.release(2, 0)
        column_field.step(0.0)
        column_field.cells.attach(2, 0, recording_target)

        frames = column_field.step(0.0)
        assert frames[2].transition is ColorState.TROUGH


class TestRenderTarget:
    """Tests for pushing updates into host render objects."""

    def test_attach_shows_current_color(self, column_field, recording_target):
        column_field.cells.attach(1, 0, recording_target)
        assert recording_target.colors == [column_field.params.base_color]
        assert np.allclose(recording_target.positions[0], column_field.cells[1, 0].initial_position)

    def test_attach_after_transition_shows_that_color(self, column_field, recording_target):
        column_field.step(0.0)
        column_field.cells.attach(2, 0, recording_target)
        assert recording_target.colors == [column_field.params.trough_color]

    def test_position_every_frame_color_on_transition(self, column_field, recording_target):
        params = column_field.params
        column_field.cells.attach(2, 0, recording_target)

        column_field.step(0.0)
        # One push from attach, one from the step
        assert len(recording_target.positions) == 2
        assert recording_target.colors == [params.base_color, params.trough_color]

    def test_no_color_push_without_transition(self, column_field, recording_target):
        column_field.cells.attach(1, 0, recording_target)

        column_field.run([0.0, 0.0, 1.0, 2.0])
        assert len(recording_target.positions) == 5
        # Only the initial push from attach
        assert recording_target.colors == [column_field.params.base_color]


class TestReset:
    """Tests for WaveField.reset."""

    def test_reset_restores_initial_state(self, column_field):
        column_field.run([0.0, 0.5])
        column_field.reset()

        assert column_field.frame_count == 0
        assert column_field.last_time is None
        assert np.all(column_field.previous_sines() == 0.0)
        assert np.all(column_field.color_array() == 1.0)
        assert np.allclose(column_field.displaced_positions(), column_field.layout.positions_array())
