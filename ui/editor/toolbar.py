"""
Editor toolbar: save, reload and a status line
"""

import gi
gi.require_version('Gtk', '3.0')
from gi.repository import Gtk, GLib


class Toolbar:
    """Toolbar with the save button and unsaved-changes indicator"""

    def __init__(self):
        # Callbacks
        self.on_save = None
        self.on_reload = None

        # UI widgets
        self.save_btn = None
        self.reload_btn = None
        self.status_label = None
        self.unsaved_indicator = None

        self._message_source = None

    def create_toolbar(self):
        """Create the toolbar"""
        toolbar = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=5)
        toolbar.set_margin_top(5)
        toolbar.set_margin_bottom(5)
        toolbar.set_margin_start(5)
        toolbar.set_margin_end(5)

        self.save_btn = Gtk.Button.new_with_label("Save")
        self.save_btn.set_tooltip_text("Save the menu")
        self.save_btn.connect("clicked", self._on_save_clicked)
        toolbar.pack_start(self.save_btn, False, False, 0)

        self.reload_btn = Gtk.Button.new_with_label("Reload")
        self.reload_btn.set_tooltip_text("Discard edits and load the stored menu")
        self.reload_btn.connect("clicked", self._on_reload_clicked)
        toolbar.pack_start(self.reload_btn, False, False, 0)

        toolbar.pack_start(Gtk.Separator(orientation=Gtk.Orientation.VERTICAL), False, False, 5)

        # Status area (expands)
        self.status_label = Gtk.Label(label="Ready")
        self.status_label.set_xalign(0)
        self.status_label.get_style_context().add_class("dim-label")
        toolbar.pack_start(self.status_label, True, True, 0)

        # Unsaved changes indicator
        self.unsaved_indicator = Gtk.Label(label="")
        self.unsaved_indicator.set_markup("<span foreground='orange' size='large'>●</span>")
        self.unsaved_indicator.set_tooltip_text("Unsaved changes")
        self.unsaved_indicator.set_no_show_all(True)
        toolbar.pack_end(self.unsaved_indicator, False, False, 5)

        return toolbar

    def _on_save_clicked(self, button):
        if self.on_save:
            self.on_save()

    def _on_reload_clicked(self, button):
        if self.on_reload:
            self.on_reload()

    def set_saving(self, saving: bool):
        """Block another save while one is in flight"""
        self.save_btn.set_sensitive(not saving)
        self.reload_btn.set_sensitive(not saving)
        if saving:
            self.show_message("Saving...", 0)

    def show_message(self, message: str, duration: int = 3):
        """Show a message in the status area"""
        if self._message_source:
            GLib.source_remove(self._message_source)
            self._message_source = None

        self.status_label.set_text(message)
        if duration > 0:
            self._message_source = GLib.timeout_add_seconds(duration, self._clear_message)

    def _clear_message(self):
        """Clear the status message"""
        self._message_source = None
        self.status_label.set_text("Ready")
        return False

    def set_unsaved_changes(self, has_changes: bool):
        """Update unsaved changes indicator"""
        self.unsaved_indicator.set_visible(has_changes)
