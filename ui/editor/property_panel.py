"""
Property panel - one widget per editable field, generated from the field model
"""

import logging

import gi
gi.require_version('Gtk', '3.0')
from gi.repository import Gtk
from typing import Any, Dict, Optional

from core.editor.field_model import (
    CHOICE_KINDS,
    MENU_FIELD_MODEL,
    TOGGLE_KINDS,
    FieldKind,
    FieldModel,
)

logger = logging.getLogger(__name__)


class PropertyPanel:
    """Side panel editing the selected menu node"""

    def __init__(self, field_models: Optional[Dict[str, FieldModel]] = None):
        self.field_models = field_models or MENU_FIELD_MODEL
        self.on_property_changed = None
        self.current_item_id = None

        # Flag to prevent event loops
        self._is_loading = False

        self.widgets: Dict[str, Gtk.Widget] = {}
        self.icon_preview = None
        self.container = None

    def create_panel(self):
        """Create the panel frame with a labelled row per field"""
        frame = Gtk.Frame(label="Properties")
        frame.set_shadow_type(Gtk.ShadowType.IN)

        grid = Gtk.Grid()
        grid.set_column_spacing(10)
        grid.set_row_spacing(8)
        grid.set_margin_top(10)
        grid.set_margin_bottom(10)
        grid.set_margin_start(10)
        grid.set_margin_end(10)

        for row, model in enumerate(self.field_models.values()):
            label = Gtk.Label(label=f"{model.name}:")
            label.set_xalign(0)
            grid.attach(label, 0, row, 1, 1)

            widget = self._create_widget(model)
            widget.set_hexpand(True)
            grid.attach(widget, 1, row, 1, 1)

        frame.add(grid)
        self.container = frame
        self.clear()
        return frame

    # === WIDGET FACTORY ===

    def _create_widget(self, model: FieldModel) -> Gtk.Widget:
        if model.kind in TOGGLE_KINDS:
            widget = Gtk.CheckButton()
            widget.connect("toggled", self._on_toggled, model.key)
            self.widgets[model.key] = widget
            return widget

        if model.kind in CHOICE_KINDS:
            # Entry-backed so values outside the list can still be typed
            widget = Gtk.ComboBoxText.new_with_entry()
            for label in model.enums:
                widget.append_text(label)
            widget.connect("changed", self._on_combo_changed, model.key)
            self.widgets[model.key] = widget
            return widget

        entry = Gtk.Entry()
        entry.set_placeholder_text(model.name)
        entry.connect("changed", self._on_entry_changed, model.key)
        self.widgets[model.key] = entry

        if model.kind != FieldKind.ICON:
            return entry

        icon_box = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=5)
        self.icon_preview = Gtk.Image()
        self.icon_preview.set_size_request(24, 24)
        icon_box.pack_start(entry, True, True, 0)
        icon_box.pack_start(self.icon_preview, False, False, 5)
        return icon_box

    # === PROPERTY HANDLERS ===

    def _emit(self, key: str, value: Any):
        if not self._is_loading and self.current_item_id and self.on_property_changed:
            self.on_property_changed(key, value)

    def _on_entry_changed(self, entry, key):
        text = entry.get_text()
        if self.field_models[key].kind != FieldKind.ICON:
            self._emit(key, text)
            return

        self._update_icon_preview(text)
        self._emit(key, text or None)

    def _on_toggled(self, checkbox, key):
        self._emit(key, checkbox.get_active())

    def _on_combo_changed(self, combo, key):
        text = combo.get_child().get_text()
        self._emit(key, text or None)

    def _update_icon_preview(self, icon_text):
        """Update icon preview image"""
        if self.icon_preview is None:
            return

        theme = Gtk.IconTheme.get_default()
        if icon_text and theme is not None and theme.has_icon(icon_text):
            self.icon_preview.set_from_icon_name(icon_text, Gtk.IconSize.BUTTON)
        else:
            self.icon_preview.clear()

    # === LOADING ===

    def load_item(self, node):
        """Show node's fields without echoing them back as edits"""
        if node is None:
            self.clear()
            return

        self._is_loading = True
        try:
            self.current_item_id = node.id
            for key, widget in self.widgets.items():
                self._set_widget_value(self.field_models[key], widget, getattr(node, key, None))
            if self.container:
                self.container.set_sensitive(True)
        finally:
            self._is_loading = False

    def _set_widget_value(self, model: FieldModel, widget, value):
        if model.kind in TOGGLE_KINDS:
            widget.set_active(bool(value))
        elif model.kind in CHOICE_KINDS:
            labels = {stored: label for label, stored in model.enums.items()}
            widget.get_child().set_text(labels.get(value, value or ""))
        else:
            widget.set_text("" if value is None else str(value))
            if model.kind == FieldKind.ICON:
                self._update_icon_preview(value)

    def clear(self):
        """Empty every widget and disable the panel"""
        self._is_loading = True
        try:
            self.current_item_id = None
            for key, widget in self.widgets.items():
                model = self.field_models[key]
                self._set_widget_value(model, widget, model.default)
            if self.container:
                self.container.set_sensitive(False)
        finally:
            self._is_loading = False
