"""Tests for the fragmentation engine."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from storyboard_composer.engine import (
    AnimationFragmenter,
    CandidateTimes,
    SpriteFragmenter,
    build_fragment,
    clip_command,
    continuity_commands,
    fragment_sprite,
    fragmenter_for,
    fragmentation_times,
    is_fragmentable,
    is_splittable,
    plan_window,
    target_size,
)
from storyboard_composer.errors import ExportError
from storyboard_composer.types import (
    Animation,
    Command,
    CommandKind,
    LoopCommand,
    LoopType,
    OsbEasing,
    ParameterCommand,
    ParameterType,
    PropertyTimeline,
    Sprite,
    ValueCommand,
    Vector2,
)

from conftest import add_moves


@dataclass(frozen=True)
class BlinkCommand(Command):
    """A command kind the engine does not know about."""

    start: int
    end: int

    @property
    def start_time(self) -> int:
        return self.start

    @property
    def end_time(self) -> int:
        return self.end


def fade(start, end, start_value, end_value, easing=OsbEasing.NONE) -> ValueCommand:
    return ValueCommand(CommandKind.FADE, easing, start, end, start_value, end_value)


class TestClassifier:
    """Tests for splittability and fragmentability."""

    def test_linear_is_splittable(self):
        """Test linear commands may be cut."""
        assert is_splittable(fade(0, 100, 0.0, 1.0))

    def test_eased_is_not_splittable(self):
        """Test eased commands with a duration may not be cut."""
        assert not is_splittable(fade(0, 100, 0.0, 1.0, OsbEasing.OUT_QUAD))

    def test_eased_instant_is_splittable(self):
        """Test instants are splittable whatever their easing."""
        assert is_splittable(fade(100, 100, 0.0, 1.0, OsbEasing.OUT_QUAD))

    def test_parameter_is_splittable(self):
        """Test parameter flags are splittable."""
        assert is_splittable(ParameterCommand(ParameterType.FLIP_V, 0, 1000, OsbEasing.IN))

    def test_groups_are_not_splittable(self):
        """Test loops are never cut."""
        assert not is_splittable(LoopCommand(0, 2, [fade(0, 100, 0.0, 1.0)]))

    def test_small_sprite_not_fragmentable(self, small_sprite):
        """Test sprites under their limit are not fragmentable."""
        assert not is_fragmentable(small_sprite)

    def test_long_sprite_fragmentable(self, long_move_sprite):
        """Test sprites over their limit are fragmentable."""
        assert is_fragmentable(long_move_sprite)

    def test_overlap_disables_fragmentation(self, long_move_sprite):
        """Test overlapping timelines disable fragmentation."""
        long_move_sprite.move(10, 30, Vector2(0, 0), Vector2(5, 5))
        assert not is_fragmentable(long_move_sprite)


class TestCandidateTimes:
    """Tests for the candidate time set."""

    def test_inclusive_range(self):
        """Test both ends of the range are candidates."""
        candidates = CandidateTimes(0, 10)
        assert len(candidates) == 11
        assert candidates.first == 0
        assert candidates.last == 10

    def test_remove_between_is_exclusive(self):
        """Test removal keeps the interval endpoints."""
        candidates = CandidateTimes(0, 10)
        candidates.remove_between(2, 5)
        assert 2 in candidates
        assert 3 not in candidates
        assert 4 not in candidates
        assert 5 in candidates
        assert len(candidates) == 9

    def test_remove_between_with_limit(self):
        """Test removal can be limited to times below a bound."""
        candidates = CandidateTimes(0, 10)
        candidates.remove_between(5, 20, below=10)
        assert list(candidates) == [0, 1, 2, 3, 4, 5, 10]

    def test_remove_below(self):
        """Test removing every earlier time."""
        candidates = CandidateTimes(0, 10)
        candidates.remove_below(4)
        assert candidates.first == 4

    def test_neighbours(self):
        """Test finding the nearest candidates around a time."""
        candidates = CandidateTimes(0, 10)
        candidates.remove_between(2, 6)
        assert candidates.largest_below(5) == 2
        assert candidates.smallest_above(2) == 6
        assert candidates.largest_below(0) is None

    def test_fractional_times_are_not_candidates(self):
        """Test only integer times are members."""
        assert 2.5 not in CandidateTimes(0, 10)

    def test_eased_interior_removed(self):
        """Test no split falls inside an eased command."""
        commands = [fade(0, 300, 0.0, 1.0), fade(100, 200, 0.0, 1.0, OsbEasing.IN_SINE)]
        candidates = fragmentation_times(commands)
        assert 100 in candidates
        assert 150 not in candidates
        assert 200 in candidates
        assert len(candidates) == 301 - 99

    def test_empty_command_list(self):
        """Test planning requires commands."""
        with pytest.raises(ValueError):
            fragmentation_times([])


class TestPlanner:
    """Tests for segment window planning."""

    def test_target_size_balances_last_two(self):
        """Test the last two fragments are balanced."""
        assert target_size(450, 300) == 225
        assert target_size(451, 300) == 226
        assert target_size(600, 300) == 300
        assert target_size(900, 300) == 300
        assert target_size(200, 300) == 300

    def test_small_remainder_takes_everything(self):
        """Test a remainder under the target ends past the last candidate."""
        commands = [fade(i * 10, i * 10 + 10, 0.0, 1.0) for i in range(5)]
        candidates = fragmentation_times(commands)
        assert plan_window(commands, candidates, 300) == (0, 51)

    def test_window_ends_at_first_command_that_does_not_fit(self):
        """Test the window ends where the overflowing command starts."""
        commands = [fade(i * 10, i * 10 + 10, 0.0, 1.0) for i in range(10)]
        candidates = fragmentation_times(commands)
        assert plan_window(commands, candidates, 4) == (0, 40)

    def test_reserved_slots_shrink_window(self):
        """Test continuity commands count against the limit."""
        commands = [fade(i * 10, i * 10 + 10, 0.0, 1.0) for i in range(10)]
        candidates = fragmentation_times(commands)
        assert plan_window(commands, candidates, 4, reserved=1) == (0, 30)

    def test_window_snaps_down_to_candidate(self):
        """Test the window end snaps below an eased command."""
        commands = [fade(i * 10, i * 10 + 10, 0.0, 1.0) for i in range(10)]
        commands.append(ValueCommand(CommandKind.SCALE, OsbEasing.IN, 35, 45, 1.0, 2.0))
        candidates = fragmentation_times(commands)
        assert plan_window(commands, candidates, 5) == (0, 35)

    def test_crowded_start_still_progresses(self):
        """Test a window never ends at its own start."""
        commands = [fade(0, 0, 0.0, 1.0) for _ in range(10)]
        commands.append(fade(5, 5, 1.0, 0.0))
        candidates = fragmentation_times(commands)
        assert plan_window(commands, candidates, 3) == (0, 1)


class TestSegmentBuilder:
    """Tests for clipping and continuity injection."""

    def test_command_inside_window_unchanged(self):
        """Test commands within the window are kept as-is."""
        command = fade(10, 20, 0.0, 1.0)
        assert clip_command(command, 0, 100) is command

    def test_clip_linear_command(self):
        """Test clipping recomputes boundary values."""
        command = ValueCommand(
            CommandKind.MOVE, OsbEasing.NONE, 0, 100, Vector2(0, 0), Vector2(100, 0)
        )
        clipped = clip_command(command, 50, 200)
        assert (clipped.start_time, clipped.end_time) == (50, 100)
        assert clipped.start_value == Vector2(50, 0)
        assert clipped.end_value == Vector2(100, 0)

    def test_clip_eased_command_is_an_error(self):
        """Test cutting through an eased command is a programming error."""
        with pytest.raises(AssertionError):
            clip_command(fade(0, 100, 0.0, 1.0, OsbEasing.OUT), 50, 200)

    def test_clip_unknown_command(self):
        """Test unknown command kinds are rejected."""
        with pytest.raises(ExportError):
            clip_command(BlinkCommand(0, 100), 50, 200)

    def test_continuity_commands(self):
        """Test every animated property is seeded at the fragment start."""
        timelines = {
            CommandKind.FADE: PropertyTimeline(CommandKind.FADE, [fade(0, 100, 0.0, 1.0)]),
            CommandKind.MOVE: PropertyTimeline(
                CommandKind.MOVE,
                [ValueCommand(CommandKind.MOVE, OsbEasing.NONE, 200, 300, Vector2(1, 2), Vector2(3, 4))],
            ),
            CommandKind.ROTATE: PropertyTimeline(CommandKind.ROTATE),
        }
        seeded = continuity_commands(timelines, 150, [])
        assert [c.kind for c in seeded] == [CommandKind.MOVE, CommandKind.FADE]
        assert seeded[0].start_value == Vector2(1, 2)
        assert seeded[1].start_value == 1.0
        for command in seeded:
            assert command.start_time == command.end_time == 150
            assert command.easing == OsbEasing.NONE

    def test_continuity_skips_started_properties(self):
        """Test properties with a command at the start are not seeded."""
        timelines = {CommandKind.FADE: PropertyTimeline(CommandKind.FADE, [fade(0, 100, 0.0, 1.0)])}
        assert continuity_commands(timelines, 50, [fade(50, 100, 0.5, 1.0)]) == []

    def test_build_fragment(self):
        """Test a fragment clips straddling commands and reports leftovers."""
        commands = [fade(0, 100, 0.0, 1.0), fade(100, 100, 1.0, 0.5), fade(100, 200, 0.5, 0.0)]
        timelines = {CommandKind.FADE: PropertyTimeline(CommandKind.FADE, commands)}
        fragment, leftover = build_fragment((50, 100), commands, timelines)
        assert (fragment.start_time, fragment.end_time) == (50, 100)
        assert len(fragment) == 1
        assert fragment.commands[0].start_value == pytest.approx(0.5)
        # The instant at the window end carries over to the next fragment
        assert leftover == commands[1:]


class TestFragmenter:
    """Tests for whole-sprite fragmentation."""

    def test_small_sprite_single_copy(self, small_sprite):
        """Test a sprite under its limit comes out whole and unchanged."""
        outputs = fragment_sprite(small_sprite)
        assert len(outputs) == 1
        assert outputs[0] is not small_sprite
        assert outputs[0].commands == small_sprite.commands

    def test_overlapping_sprite_single_copy(self, long_move_sprite):
        """Test overlapping timelines yield one sprite whatever the count."""
        long_move_sprite.move(10, 30, Vector2(0, 0), Vector2(5, 5))
        outputs = fragment_sprite(long_move_sprite)
        assert len(outputs) == 1
        assert outputs[0].commands == long_move_sprite.commands

    def test_empty_sprite(self):
        """Test a sprite without commands yields one empty copy."""
        outputs = fragment_sprite(Sprite("sb/dot.png"))
        assert len(outputs) == 1
        assert not outputs[0].has_commands

    def test_long_sprite_balanced_split(self, long_move_sprite):
        """Test 450 linear moves split into two balanced sprites."""
        outputs = fragment_sprite(long_move_sprite)
        assert len(outputs) == 2
        counts = [sprite.command_count for sprite in outputs]
        assert counts == [225, 225]

    def test_source_not_mutated(self, long_move_sprite):
        """Test fragmenting leaves the source sprite untouched."""
        before = long_move_sprite.commands
        fragment_sprite(long_move_sprite)
        assert long_move_sprite.commands == before

    def test_continuity_command_leads_fragment(self, faded_move_sprite):
        """Test a new fragment is seeded with the carried-over fade."""
        outputs = fragment_sprite(faded_move_sprite)
        assert len(outputs) == 2
        first = outputs[1].commands[0]
        assert first.kind == CommandKind.FADE
        assert first.start_time == first.end_time == 4500
        assert first.start_value == 1.0
        assert abs(outputs[0].command_count - outputs[1].command_count) <= 1

    def test_split_command_values_match(self, long_fade_sprite):
        """Test both pieces of a split command agree at the boundary."""
        outputs = fragment_sprite(long_fade_sprite)
        assert len(outputs) == 2
        first_fade = outputs[0].timeline(CommandKind.FADE).commands[-1]
        second_fade = outputs[1].timeline(CommandKind.FADE).commands[0]
        assert first_fade.end_time == second_fade.start_time == 4500
        expected = long_fade_sprite.timeline(CommandKind.FADE).value_at(4500)
        assert first_fade.end_value == pytest.approx(expected)
        assert second_fade.start_value == pytest.approx(expected)

    def test_reassembled_timeline_matches(self, long_fade_sprite):
        """Test fragments reproduce the source values over their windows."""
        fragmenter = SpriteFragmenter(long_fade_sprite)
        fragments = list(fragmenter.fragments())
        outputs = fragmenter.fragment()
        for fragment, output in zip(fragments, outputs):
            end = min(fragment.end_time, long_fade_sprite.end_time + 1)
            for t in range(fragment.start_time, end, 7):
                for kind in (CommandKind.MOVE, CommandKind.FADE):
                    expected = long_fade_sprite.timeline(kind).value_at(t)
                    rebuilt = output.timeline(kind).value_at(t)
                    if kind == CommandKind.MOVE:
                        assert rebuilt.x == pytest.approx(expected.x)
                        assert rebuilt.y == pytest.approx(expected.y)
                    else:
                        assert rebuilt == pytest.approx(expected)

    def test_fragments_respect_limit(self):
        """Test no fragment exceeds the command limit."""
        sprite = Sprite("sb/dot.png", max_command_count=50)
        sprite.fade(0, 100, 0.0, 1.0)
        sprite.scale(0, 100, 1.0, 2.0)
        add_moves(sprite, 400, step=20, duration=10, offset=200)
        outputs = fragment_sprite(sprite)
        assert len(outputs) > 2
        assert all(output.command_count <= 50 for output in outputs)
        moves = [c for output in outputs for c in output.timeline(CommandKind.MOVE).commands if c.start_time != c.end_time]
        assert len(moves) == 400

    def test_eased_command_never_clipped(self, eased_rotate_sprite):
        """Test an eased command lands whole in exactly one fragment."""
        rotate = eased_rotate_sprite.timeline(CommandKind.ROTATE).commands[0]
        candidates = fragmentation_times(eased_rotate_sprite.commands)
        assert not any(0 < t < 5000 for t in candidates)

        outputs = fragment_sprite(eased_rotate_sprite)
        assert len(outputs) == 2
        holders = [output for output in outputs if rotate in output.commands]
        assert len(holders) == 1

    def test_first_fragment_seeds_move(self, eased_rotate_sprite):
        """Test a fragment starting before the first move is seeded with it."""
        first = fragment_sprite(eased_rotate_sprite)[0].commands[0]
        assert first.kind == CommandKind.MOVE
        assert first.start_time == 0
        assert first.start_value == Vector2(0, 0)

    def test_parameter_and_loop_across_split(self):
        """Test flags are narrowed at the split and loops stay whole."""
        sprite = Sprite("sb/dot.png")
        sprite.flip_h(0, 9000)
        add_moves(sprite, 450, step=20, duration=20)
        sprite.start_loop_group(1000, 2)
        sprite.fade(0, 100, 0.0, 1.0)
        loop = sprite.end_group()

        outputs = fragment_sprite(sprite)
        assert len(outputs) == 2
        assert all(output.command_count <= 300 for output in outputs)

        flips = [output.timeline(ParameterType.FLIP_H).commands for output in outputs]
        assert [len(f) for f in flips] == [1, 1]
        first, second = flips[0][0], flips[1][0]
        assert first.parameter == second.parameter == ParameterType.FLIP_H
        assert first.start_time == 0
        assert first.end_time == second.start_time
        assert second.end_time == 9000
        assert second.start_time == outputs[1].start_time

        holders = [output for output in outputs if loop in output.commands]
        assert len(holders) == 1
        assert sum(isinstance(c, LoopCommand) for output in outputs for c in output.commands) == 1

    def test_unknown_command_aborts(self, long_move_sprite):
        """Test unknown commands in a fragmented sprite are fatal."""
        long_move_sprite.add_command(BlinkCommand(100, 200))
        with pytest.raises(ExportError):
            fragment_sprite(long_move_sprite)


class TestAnimationFragmenter:
    """Tests for frame animation fragmentation."""

    def test_fragmenter_for(self, loop_once_animation, small_sprite):
        """Test animations get their own fragmenter."""
        assert isinstance(fragmenter_for(loop_once_animation), AnimationFragmenter)
        assert type(fragmenter_for(small_sprite)) is SpriteFragmenter

    def test_loop_once_tail_becomes_sprite(self, loop_once_animation):
        """Test fragments after the single loop are plain sprites."""
        outputs = fragment_sprite(loop_once_animation)
        assert len(outputs) == 2
        assert isinstance(outputs[0], Animation)
        assert type(outputs[1]) is Sprite
        assert outputs[1].start_time >= loop_once_animation.animation_end_time

    def test_zero_delay_loop_once_stays_animation(self):
        """Test an animation without frame timing keeps its header."""
        animation = Animation("sb/spark.png", 10, 0, loop_type=LoopType.LOOP_ONCE)
        animation.fade(500, 1000, 1.0, 0.0)
        outputs = fragment_sprite(animation)
        assert len(outputs) == 1
        assert isinstance(outputs[0], Animation)

    def test_loop_once_candidates(self, loop_once_animation):
        """Test no fragment can start inside the single loop."""
        candidates = AnimationFragmenter(loop_once_animation).fragmentation_times()
        assert not any(0 < t < 1000 for t in candidates)
        assert 1000 in candidates
        assert 1500 in candidates

    def test_loop_forever_starts_on_cycles(self, loop_forever_animation):
        """Test repeating animation fragments start on cycle boundaries."""
        fragmenter = AnimationFragmenter(loop_forever_animation)
        fragments = list(fragmenter.fragments())
        assert len(fragments) == 2
        for fragment in fragments:
            assert fragment.start_time % 1000 == 0

        outputs = fragmenter.fragment()
        assert all(isinstance(output, Animation) for output in outputs)
        assert all(output.loop_type == loop_forever_animation.loop_type for output in outputs)

    def test_loop_forever_keeps_last_candidate(self, loop_forever_animation):
        """Test the final time stays a candidate inside a partial cycle."""
        candidates = AnimationFragmenter(loop_forever_animation).fragmentation_times()
        assert list(candidates) == [0, 1000, 2000, 3000, 4000, 4800]
