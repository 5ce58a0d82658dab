import pytest

from jextile.config import DisplayPreferences, EditorSettings
from jextile.core.exceptions import InvalidDocumentError
from jextile.core.models import SelectionState
from jextile.core import selection as sel
from jextile.ui.controllers.grid_controller import GridController, KeyEvent


def S(focus, selected, anchor):
    return SelectionState(focus, frozenset(selected), anchor)


def press(controller, key, **mods):
    return controller.handle_key(KeyEvent(key, **mods))


# ---------------------------
# Fakes
# ---------------------------

class FailingSaveHandler:
    def __call__(self, document, meta):
        raise OSError("disk full")


# ---------------------------
# Loading
# ---------------------------

def test_load_document_starts_fresh_history(controller, people):
    assert controller.current_document() == people
    assert controller.meta.name == "people.json"
    assert controller.meta.size == 321
    assert controller.can_undo() is False
    assert controller.can_redo() is False
    assert controller.path == ()
    assert [item.name for item in controller.visible_items] == [0, 1, 2]


def test_invalid_load_keeps_previous_state(controller, people):
    controller.click_item(1)
    with pytest.raises(InvalidDocumentError) as exc_info:
        controller.load_document([1, 2, 3], "numbers.json", 5)
    assert "valid list of objects" in str(exc_info.value)
    assert controller.error == str(exc_info.value)
    assert controller.current_document() == people
    assert controller.meta.name == "people.json"
    assert controller.selection == sel.single(1)


def test_load_wraps_single_object():
    ctrl = GridController()
    ctrl.load_document({"id": 7}, "one.json")
    assert ctrl.current_document() == [{"id": 7}]


def test_reset_document_clears_everything(controller):
    controller.activate_item(0)
    controller.reset_document()
    assert controller.current_document() is None
    assert controller.meta is None
    assert controller.path == ()
    assert controller.visible_items == []
    assert controller.can_undo() is False


# ---------------------------
# Navigation
# ---------------------------

def test_drill_into_container_and_back(controller):
    controller.click_item(0)
    controller.set_search_term("ada")
    assert controller.activate_item(0) is True
    assert controller.path == (0,)
    assert controller.selection == sel.EMPTY
    assert controller.search_term == ""

    controller.click_item(2)
    assert controller.drill_up() is True
    assert controller.path == ()
    assert controller.selection == sel.EMPTY
    assert controller.drill_up() is False


def test_activate_primitive_opens_detail_without_changing_path(controller):
    controller.activate_item(0)
    # items of people[0]: id, Title, tags, address
    assert controller.activate_item(1) is True
    assert controller.path == (0,)
    assert controller.detail.value == "Ada"
    assert controller.detail.full_path == (0, "Title")


def test_breadcrumb_jump(controller):
    controller.activate_item(0)
    controller.activate_item(3)  # address
    assert controller.breadcrumbs() == [("people.json", 0), ("0", 1), ("address", 2)]
    assert controller.jump_to(1) is True
    assert controller.path == (0,)
    assert controller.jump_to(1) is False


# ---------------------------
# Selection & search
# ---------------------------

def test_pointer_selection(controller):
    controller.click_item(0)
    controller.click_item(2, shift=True)
    assert controller.selection == S(2, {0, 1, 2}, 0)
    controller.click_item(1, ctrl=True)
    assert controller.selection == S(1, {0, 2}, 1)
    controller.click_background()
    assert controller.selection == sel.EMPTY


def test_click_out_of_range_is_ignored(controller):
    assert controller.click_item(9) == sel.EMPTY


def test_search_filters_and_clamps_selection(controller):
    controller.click_item(2)
    items = controller.set_search_term("grace")
    assert [item.name for item in items] == [1]
    assert controller.selection.focused_index == 0
    assert controller.selection.selected_indices == frozenset()
    assert controller.set_search_term("")[0].name == 0


def test_search_to_empty_list_clears_selection(controller):
    controller.click_item(1)
    controller.set_search_term("no such text")
    assert controller.visible_items == []
    assert controller.selection == sel.EMPTY


# ---------------------------
# Delete / undo / redo
# ---------------------------

def test_scenario_delete_then_undo():
    ctrl = GridController()
    ctrl.load_document([{"id": 1, "Title": "A"}], "one.json", 20)

    result = ctrl.delete_selection()
    assert result.success is False
    assert ctrl.current_document() == [{"id": 1, "Title": "A"}]

    ctrl.selection = S(0, set(), 0)
    assert press(ctrl, "Delete") is True
    assert ctrl.current_document() == []
    assert ctrl.selection == sel.EMPTY

    assert press(ctrl, "z", ctrl=True) is True
    assert ctrl.current_document() == [{"id": 1, "Title": "A"}]


def test_delete_inside_drilled_object(controller, people):
    controller.activate_item(0)
    controller.click_item(0)  # "id"
    result = controller.delete_selection()
    assert result.success is True
    assert "id" not in controller.current_document()[0]
    assert controller.current_document()[1] is people[1]
    assert controller.selection.focused_index == 0


def test_delete_multiple_then_undo_redo(controller, people):
    controller.click_item(0)
    controller.click_item(2, ctrl=True)
    controller.delete_selection()
    assert controller.current_document() == [people[1]]
    assert controller.selection == S(0, set(), 0)

    assert controller.undo() is True
    assert controller.current_document() == people
    assert controller.redo() is True
    assert controller.current_document() == [people[1]]


def test_delete_item_control_respects_selection(controller, people):
    controller.click_item(0)
    controller.click_item(1, ctrl=True)
    controller.delete_item(2)  # not selected: only item 2 goes
    assert controller.current_document() == people[:2]
    controller.click_item(0)
    controller.click_item(1, ctrl=True)
    controller.delete_item(1)  # selected: whole selection goes
    assert controller.current_document() == []


def test_delete_in_filtered_view_removes_real_entries(controller, people):
    controller.set_search_term("edsger")
    controller.click_item(0)
    controller.delete_selection()
    assert controller.current_document() == people[:2]


def test_undo_shrinking_list_clamps_focus(controller):
    controller.activate_item(0)
    controller.activate_item(2)  # tags: ["math", "engines"]
    controller.open_detail()
    controller.save_detail(["math", "engines", "extra"])
    controller.click_item(2)
    assert controller.undo() is True
    assert len(controller.visible_items) == 2
    assert controller.selection.focused_index == 1
    assert controller.selection.selected_indices == frozenset()


def test_undo_bounded_by_max_history():
    ctrl = GridController(settings=EditorSettings(max_history=2))
    ctrl.load_document([{"v": i} for i in range(5)], "v.json")
    for _ in range(3):
        ctrl.selection = sel.single(0)
        ctrl.delete_selection()
    assert ctrl.undo() and ctrl.undo()
    assert ctrl.undo() is False
    assert len(ctrl.current_document()) == 4


# ---------------------------
# Reorder
# ---------------------------

def test_move_selection_to_front(controller, people):
    controller.click_item(2)
    result = controller.move_selection(0)
    assert result.success is True
    assert controller.current_document() == [people[2], people[0], people[1]]
    assert controller.selection == S(0, {0}, 0)


def test_move_disabled_while_filtering(controller, people):
    controller.set_search_term("a")
    controller.click_item(0)
    result = controller.move_selection(2)
    assert result.success is False
    assert controller.current_document() == people


def test_ctrl_arrow_moves_block(controller, people):
    controller.click_item(0)
    controller.click_item(1, shift=True)
    assert press(controller, "ArrowRight", ctrl=True) is True
    assert controller.current_document() == [people[2], people[0], people[1]]
    assert controller.selection == S(1, {1, 2}, 1)

    assert press(controller, "ArrowLeft", ctrl=True) is True
    assert controller.current_document() == people
    assert controller.selection == S(0, {0, 1}, 0)


def test_ctrl_arrow_reorders_object_keys(controller):
    controller.activate_item(1)  # {"id", "Title", "tags", "active"}
    controller.click_item(3)
    press(controller, "ArrowUp", ctrl=True)
    assert list(controller.current_document()[1].keys()) == ["id", "Title", "active", "tags"]


# ---------------------------
# Drag and drop
# ---------------------------

def test_drag_commit_uses_start_snapshot(controller, people):
    assert controller.begin_drag(0) is True
    assert controller.selection == sel.single(0)
    assert controller.drag_over(2, pointer_x=80, item_left=0, item_width=100) == 3
    assert controller.drag_target == 3

    # Live selection changes mid-gesture do not affect the commit
    controller.click_item(1)
    result = controller.end_drag()
    assert result.success is True
    assert controller.current_document() == [people[1], people[2], people[0]]
    assert controller.selection == S(2, {2}, 2)
    assert controller.drag_target is None


def test_drag_selected_block(controller, people):
    controller.click_item(0)
    controller.click_item(1, shift=True)
    controller.begin_drag(1)
    controller.drag_over(2, pointer_x=99, item_left=0, item_width=100)
    controller.drop()
    controller.end_drag()
    assert controller.current_document() == [people[2], people[0], people[1]]
    assert controller.selection == S(1, {1, 2}, 1)


def test_drag_without_target_is_discarded(controller, people):
    controller.begin_drag(1)
    result = controller.end_drag()
    assert result.success is False
    assert controller.current_document() == people
    assert controller.can_undo() is False


def test_drag_refused_while_filtering(controller):
    controller.set_search_term("ada")
    assert controller.begin_drag(0) is False


def test_navigation_cancels_drag(controller, people):
    controller.begin_drag(0)
    controller.drag_over(1, 0, 0, 100)
    controller.activate_item(1)
    assert controller.end_drag().success is False
    assert controller.current_document() == people


# ---------------------------
# Detail view
# ---------------------------

def test_save_detail_writes_back_through_history(controller, people):
    controller.activate_item(0)
    controller.open_detail(3)  # address
    assert controller.detail.full_path == (0, "address")
    result = controller.save_detail({"city": "Paris"})
    assert result.success is True
    assert controller.detail is None
    assert controller.current_document()[0]["address"] == {"city": "Paris"}
    assert controller.current_document()[1] is people[1]
    assert controller.can_undo() is True


def test_save_detail_invalid_root_is_rejected(controller, people):
    controller.open_detail()
    assert controller.detail.full_path == ()
    assert controller.detail.name == "people.json"
    result = controller.save_detail({"not": "a list"})
    assert result.success is False
    assert controller.current_document() == people
    assert controller.error
    assert controller.detail is not None


# ---------------------------
# Keyboard surface
# ---------------------------

def test_arrow_navigation_respects_grid_columns(controller):
    controller.set_display_width(800)  # two columns
    press(controller, "ArrowDown")
    assert controller.selection == sel.single(0)
    press(controller, "ArrowDown")
    assert controller.selection == sel.single(2)
    press(controller, "ArrowLeft", shift=True)
    assert controller.selection == S(1, {1, 2}, 2)


def test_enter_drills_and_shift_tab_goes_up(controller):
    press(controller, "ArrowRight")
    assert press(controller, "Enter") is True
    assert controller.path == (0,)
    assert press(controller, "Tab", shift=True) is True
    assert controller.path == ()


def test_enter_without_focus_is_not_consumed(controller):
    assert press(controller, "Enter") is False


def test_search_focus_and_escape(controller):
    press(controller, "ArrowRight")
    assert press(controller, "s") is True
    assert controller.search_focused is True
    # Typing keys belong to the search field
    assert press(controller, "Delete") is False
    assert press(controller, "z", ctrl=True) is False
    assert press(controller, "Escape") is True
    assert controller.search_focused is False
    assert controller.selection == sel.single(0)
    assert press(controller, "Escape") is True
    assert controller.selection == sel.EMPTY
    assert press(controller, "Escape") is False


def test_d_opens_detail_and_blocks_grid_keys(controller):
    assert press(controller, "d") is True
    assert controller.detail.full_path == ()
    assert press(controller, "ArrowRight") is False
    controller.close_detail()
    press(controller, "ArrowRight")
    press(controller, "d")
    assert controller.detail.full_path == (0,)


def test_redo_shortcuts(controller, people):
    controller.click_item(0)
    press(controller, "Delete")
    press(controller, "z", meta=True)
    assert controller.current_document() == people
    press(controller, "Z", ctrl=True, shift=True)
    assert len(controller.current_document()) == 2
    press(controller, "z", ctrl=True)
    press(controller, "y", ctrl=True)
    assert len(controller.current_document()) == 2


def test_ctrl_s_saves_through_handler(controller, save_handler, people):
    assert press(controller, "s", ctrl=True) is True
    document, meta = save_handler.calls[0]
    assert document == people
    assert meta.name == "people.json"


def test_open_detail_owns_save_and_history_shortcuts(controller, save_handler, people):
    controller.click_item(0)
    press(controller, "Delete")
    controller.open_detail(0)
    opened = controller.detail

    assert press(controller, "s", ctrl=True) is False
    assert save_handler.calls == []
    assert press(controller, "z", ctrl=True) is False
    assert press(controller, "y", meta=True) is False
    assert controller.current_document() == people[1:]
    assert controller.detail is opened


def test_shift_enter_drills_up_while_search_focused(controller):
    controller.activate_item(0)
    press(controller, "s")
    assert controller.search_focused is True
    assert press(controller, "Enter", shift=True) is True
    assert controller.path == ()
    assert controller.search_focused is False


def test_save_failure_is_reported(people):
    ctrl = GridController(save_handler=FailingSaveHandler())
    ctrl.load_document(people, "people.json")
    assert ctrl.save() is False
    assert "disk full" in ctrl.error


def test_save_without_document_is_noop(save_handler):
    ctrl = GridController(save_handler=save_handler)
    assert ctrl.save() is False
    assert save_handler.calls == []


# ---------------------------
# Display helpers
# ---------------------------

def test_item_heading_follows_display_preferences(people):
    prefs = DisplayPreferences(show_title=True, show_subtitle=True, title_key="title", subtitle_key="id")
    ctrl = GridController(settings=EditorSettings(display=prefs))
    ctrl.load_document(people, "people.json")
    assert ctrl.item_heading(ctrl.visible_items[0]) == ("Ada", 1)

    plain = GridController()
    plain.load_document(people, "people.json")
    assert plain.item_heading(plain.visible_items[0]) == (None, None)
    assert plain.item_preview(plain.visible_items[2]).endswith("...")
