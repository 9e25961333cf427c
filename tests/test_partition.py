"""Tests for splitting a scene into arrange groups."""

import pytest

from bedarrange.arrange import (
    ArrangeTask,
    DefaultItemConverter,
    ModelScene,
    PartitionGroup,
    SceneObject,
    extract_selected,
)
from bedarrange.models import INSET_EPSILON, ArrangeItem, ArrangeSettings, BedShape


def make_scene(flags):
    """Scene with one 20x20 object per (selected, printable) pair."""
    objects = [
        SceneObject(id=f"o{i}", width=20.0, depth=20.0, selected=selected, printable=printable)
        for i, (selected, printable) in enumerate(flags)
    ]
    return ModelScene(objects, bed=BedShape(256.0, 256.0), settings=ArrangeSettings())


def ids(items):
    return [item.id for item in items]


class TestPartitionGroup:
    """Tests for PartitionGroup."""

    def test_swap(self):
        """Test swapping selected and unselected lists."""
        a = ArrangeItem("a", 10, 10)
        b = ArrangeItem("b", 10, 10)
        group = PartitionGroup(selected=[a], unselected=[b])

        group.swap()

        assert group.selected == [b]
        assert group.unselected == [a]
        assert len(group) == 2


class TestExtractSelected:
    """Tests for extract_selected."""

    @pytest.fixture
    def mixed_scene(self):
        """Scene covering all four flag combinations, interleaved."""
        return make_scene([
            (True, True),    # o0 printable selected
            (False, True),   # o1 printable unselected
            (True, False),   # o2 unprintable selected
            (False, False),  # o3 unprintable unselected
            (True, True),    # o4 printable selected
            (False, False),  # o5 unprintable unselected
            (False, True),   # o6 printable unselected
        ])

    def test_groups_by_flags(self, mixed_scene):
        """Test each object lands in the group matching its flags."""
        task = ArrangeTask.create(mixed_scene)

        assert ids(task.printable.selected) == ["o0", "o4"]
        assert ids(task.printable.unselected) == ["o1", "o6"]
        assert ids(task.unprintable.selected) == ["o2"]
        assert ids(task.unprintable.unselected) == ["o3", "o5"]

    def test_partition_is_bijection(self, mixed_scene):
        """Test every object appears in exactly one group."""
        task = ArrangeTask.create(mixed_scene)

        all_ids = (
            ids(task.printable.selected) + ids(task.printable.unselected)
            + ids(task.unprintable.selected) + ids(task.unprintable.unselected)
        )
        assert sorted(all_ids) == sorted(obj.id for obj in mixed_scene.objects)
        assert len(all_ids) == len(set(all_ids))

    def test_printable_flag_copied(self, mixed_scene):
        """Test converted items keep their printability."""
        task = ArrangeTask.create(mixed_scene)

        assert all(item.printable for item in task.printable.selected + task.printable.unselected)
        assert not any(item.printable for item in task.unprintable.selected + task.unprintable.unselected)

    def test_unselected_items_are_inset(self, mixed_scene):
        """Test unselected items shrink by the inset on every side."""
        task = ArrangeTask.create(mixed_scene)

        for item in task.printable.selected + task.unprintable.selected:
            assert item.inset == 0.0
            assert item.width == 20.0

        for item in task.printable.unselected + task.unprintable.unselected:
            assert item.inset == -INSET_EPSILON
            assert item.width == pytest.approx(20.0 - 2 * INSET_EPSILON)
            assert item.depth == pytest.approx(20.0 - 2 * INSET_EPSILON)

    def test_empty_selection_selects_all(self):
        """Test selecting nothing gives the same working set as selecting everything."""
        flags = [(False, True), (False, False), (False, True), (False, False)]
        none_selected = ArrangeTask.create(make_scene(flags))
        all_selected = ArrangeTask.create(make_scene([(True, p) for _, p in flags]))

        assert ids(none_selected.printable.selected) == ids(all_selected.printable.selected) == ["o0", "o2"]
        assert ids(none_selected.unprintable.selected) == ids(all_selected.unprintable.selected) == ["o1", "o3"]
        assert none_selected.printable.unselected == []
        assert none_selected.unprintable.unselected == []

    def test_fallback_keeps_groups_apart(self):
        """Test the select-all swap never moves items between printability groups."""
        task = ArrangeTask.create(make_scene([(False, False), (False, True)]))

        assert ids(task.printable.selected) == ["o1"]
        assert ids(task.unprintable.selected) == ["o0"]

    def test_no_fallback_with_unprintable_selection(self):
        """Test a selection in either group disables the fallback."""
        task = ArrangeTask.create(make_scene([(False, True), (True, False), (False, True)]))

        assert task.printable.selected == []
        assert ids(task.printable.unselected) == ["o0", "o2"]
        assert ids(task.unprintable.selected) == ["o1"]

    def test_empty_scene(self):
        """Test an empty scene gives four empty groups."""
        task = ArrangeTask.create(make_scene([]))

        assert task.printable.selected == []
        assert task.printable.unselected == []
        assert task.unprintable.selected == []
        assert task.unprintable.unselected == []
        assert task.selected_count == 0

    def test_custom_converter(self, mixed_scene):
        """Test the converter receives the inset for each object."""
        calls = []

        class RecordingConverter(DefaultItemConverter):
            def convert(self, obj, inset):
                calls.append((obj.id, inset))
                return super().convert(obj, inset)

        task = ArrangeTask()
        extract_selected(task, mixed_scene, RecordingConverter())

        assert [obj_id for obj_id, _ in calls] == [obj.id for obj in mixed_scene.objects]
        assert dict(calls)["o0"] == 0.0
        assert dict(calls)["o1"] == -INSET_EPSILON


class TestCreate:
    """Tests for ArrangeTask.create."""

    def test_copies_settings_and_bed(self):
        """Test the task takes settings and bed from the scene."""
        settings = ArrangeSettings(part_spacing=2.0)
        bed = BedShape(180.0, 180.0)
        scene = ModelScene([SceneObject("a", 10, 10)], bed=bed, settings=settings)

        task = ArrangeTask.create(scene)

        assert task.settings == settings
        assert task.bed == bed

    def test_scene_errors_propagate(self):
        """Test faults raised while enumerating the scene propagate."""

        class BrokenScene:
            def settings(self):
                return ArrangeSettings()

            def bed(self):
                return BedShape()

            def for_each_arrangeable(self, visit):
                raise RuntimeError("corrupt model")

        with pytest.raises(RuntimeError, match="corrupt model"):
            ArrangeTask.create(BrokenScene())
