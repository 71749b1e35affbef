import logging
import threading

import gi
gi.require_version('Gtk', '3.0')
from gi.repository import Gtk, GLib

from network.menu_client import MenuClientError
from ui.editor.property_panel import PropertyPanel
from ui.editor.toolbar import Toolbar
from ui.editor.tree_manager import TreeManager

logger = logging.getLogger(__name__)


class EditorMainWindow:
    def __init__(self, menu_model, save_handler, client):
        self.model = menu_model
        self.save_handler = save_handler
        self.client = client

        self.window = None
        self.tree_manager = None
        self.property_panel = None
        self.toolbar = None

        self._init_ui()

    def _init_ui(self):
        self.window = Gtk.Window()
        self.window.set_title("Menu Editor")
        self.window.set_default_size(1000, 700)
        self.window.connect("destroy", self.on_window_destroy)

        main_vbox = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=0)
        self.window.add(main_vbox)

        self.toolbar = Toolbar()
        self.toolbar.on_save = self.on_save
        self.toolbar.on_reload = self.on_reload
        main_vbox.pack_start(self.toolbar.create_toolbar(), False, False, 0)

        content_hbox = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=5)
        content_hbox.set_margin_top(5)
        content_hbox.set_margin_bottom(5)
        content_hbox.set_margin_start(5)
        content_hbox.set_margin_end(5)
        main_vbox.pack_start(content_hbox, True, True, 0)

        self.tree_manager = TreeManager(self.model, parent_window=self.window)
        self.tree_manager.on_selection_changed = self.on_tree_selection_changed
        self.tree_manager.on_tree_changed = self.on_tree_changed

        self.property_panel = PropertyPanel()
        self.property_panel.on_property_changed = self.on_property_changed

        content_hbox.pack_start(self.tree_manager.create_nav_panel(), True, True, 0)
        content_hbox.pack_start(self.property_panel.create_panel(), False, False, 0)

        self.tree_manager.rebuild_tree()
        self.window.show_all()

        logger.info("Editor UI initialized")

    def run(self):
        Gtk.main()

    def on_window_destroy(self, window):
        if self.model.has_changes():
            logger.warning(f"Closing with unsaved changes: {self.model.tracker.get_change_summary()}")
        Gtk.main_quit()

    def on_tree_selection_changed(self, item_id):
        selection = self.model.selection
        self.property_panel.load_item(selection.snapshot if selection.panel_open else None)

    def on_tree_changed(self):
        self.property_panel.load_item(self.model.selected)
        self.toolbar.set_unsaved_changes(self.model.has_changes())

    def on_property_changed(self, field, value):
        if not self.model.change_field(field, value):
            return

        selected = self.model.selected
        logger.debug(f"Property: {selected.id}.{field} = {value!r}")

        self.tree_manager.update_item_title(selected.id, selected.title)
        if field == 'type':
            # Type defaults rewrite other fields too
            self.property_panel.load_item(selected)
        self.toolbar.set_unsaved_changes(True)

    # ===== Save / reload =====

    def on_save(self):
        if self.save_handler.is_saving:
            return

        self.toolbar.set_saving(True)
        thread = threading.Thread(target=self._save_worker, daemon=True)
        thread.start()

    def _save_worker(self):
        result = self.save_handler.save(self.model)
        GLib.idle_add(self._on_save_finished, result)

    def _on_save_finished(self, result):
        self.save_handler.apply(self.model, result)
        self.toolbar.set_saving(False)
        self.toolbar.show_message(result.message)
        if result.ok:
            self.toolbar.set_unsaved_changes(self.model.has_changes())
        return False

    def on_reload(self):
        try:
            document = self.client.fetch_menu()
        except MenuClientError as e:
            logger.error(f"Reload failed: {e}")
            self.toolbar.show_message("Could not load the menu")
            return

        self.model.load_document(document)
        self.tree_manager.rebuild_tree()
        self.property_panel.clear()
        self.toolbar.set_unsaved_changes(False)
        self.toolbar.show_message("Reloaded")
