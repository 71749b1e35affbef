"""
Tree manager - Works directly with MenuModel for immediate updates
"""

import logging

import gi
gi.require_version('Gtk', '3.0')
from gi.repository import Gtk, Gdk
from typing import Optional

from core.editor.drag import DragEnd

logger = logging.getLogger(__name__)

DRAG_TARGET = "MENUBOARD_NODE"


class TreeManager:
    """Manages tree view synchronized with MenuModel"""

    def __init__(self, menu_model, parent_window=None):
        self.model = menu_model
        self.parent_window = parent_window

        # Callbacks
        self.on_selection_changed = None
        self.on_tree_changed = None

        # Track expanded rows
        self.expanded_rows = set()

        # Tree store: title, item_id
        self.tree_store = Gtk.TreeStore(str, str)

        self.treeview = Gtk.TreeView(model=self.tree_store)
        self.treeview.connect("row-expanded", self._on_row_expanded)
        self.treeview.connect("row-collapsed", self._on_row_collapsed)

        text_renderer = Gtk.CellRendererText()
        text_column = Gtk.TreeViewColumn("Menu Items", text_renderer, text=0)
        text_column.set_expand(True)
        self.treeview.append_column(text_column)

        # Drag and drop stays inside this widget; the model decides what a drop means
        targets = [Gtk.TargetEntry.new(DRAG_TARGET, Gtk.TargetFlags.SAME_WIDGET, 0)]
        self.treeview.enable_model_drag_source(
            Gdk.ModifierType.BUTTON1_MASK, targets, Gdk.DragAction.MOVE
        )
        self.treeview.enable_model_drag_dest(targets, Gdk.DragAction.MOVE)
        self.treeview.connect("drag-data-get", self._on_drag_data_get)
        self.treeview.connect("drag-data-received", self._on_drag_data_received)

        # Selection
        self.selection = self.treeview.get_selection()
        self.selection.set_mode(Gtk.SelectionMode.SINGLE)
        self._selection_handler = self.selection.connect("changed", self._on_selection_changed)

    def create_nav_panel(self):
        """Create navigation panel with tree and buttons"""
        frame = Gtk.Frame(label="Menu Items")
        frame.set_shadow_type(Gtk.ShadowType.IN)

        vbox = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=5)
        vbox.set_margin_top(5)
        vbox.set_margin_bottom(5)
        vbox.set_margin_start(5)
        vbox.set_margin_end(5)

        scrolled = Gtk.ScrolledWindow()
        scrolled.set_policy(Gtk.PolicyType.AUTOMATIC, Gtk.PolicyType.AUTOMATIC)
        scrolled.add(self.treeview)
        vbox.pack_start(scrolled, True, True, 0)

        vbox.pack_start(self._create_nav_buttons(), False, False, 0)

        frame.add(vbox)
        return frame

    def _create_nav_buttons(self):
        """Create navigation buttons"""
        hbox = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=2)

        self.add_btn = Gtk.Button(label="Add")
        self.add_btn.set_tooltip_text("Add a top-level menu")
        self.add_btn.connect("clicked", self.on_add)

        self.submenu_btn = Gtk.Button(label="Sub-Menu")
        self.submenu_btn.set_tooltip_text("Add a sub-menu under the selected menu")
        self.submenu_btn.connect("clicked", self.on_submenu)

        self.remove_btn = Gtk.Button(label="Remove")
        self.remove_btn.set_tooltip_text("Remove selected menu")
        self.remove_btn.connect("clicked", self.on_remove)

        self.up_btn = Gtk.Button(label="Up")
        self.up_btn.set_tooltip_text("Move menu up")
        self.up_btn.connect("clicked", self.on_up)

        self.down_btn = Gtk.Button(label="Down")
        self.down_btn.set_tooltip_text("Move menu down")
        self.down_btn.connect("clicked", self.on_down)

        for button in (self.add_btn, self.submenu_btn, self.remove_btn, self.up_btn, self.down_btn):
            hbox.pack_start(button, True, True, 0)

        self._update_buttons()
        return hbox

    def rebuild_tree(self):
        """Rebuild entire tree from model while preserving expansion and selection"""
        selected_id = self.model.selection.selected_id

        # Repopulating fires "changed"; the model already knows the selection
        self.selection.handler_block(self._selection_handler)
        try:
            self.tree_store.clear()
            for item in self.model.items:
                self._add_item_to_tree(None, item)

            self._restore_expansion()
            if selected_id:
                self._select_item(selected_id)
        finally:
            self.selection.handler_unblock(self._selection_handler)

        self._update_buttons()

    def _add_item_to_tree(self, parent_iter, item):
        """Add item and its children to tree"""
        tree_iter = self.tree_store.append(parent_iter, [item.title, item.id])
        for child in item.children:
            self._add_item_to_tree(tree_iter, child)

    def _restore_expansion(self):
        for item_id in list(self.expanded_rows):
            tree_iter = self._find_iter_by_id(item_id)
            if tree_iter:
                self.treeview.expand_to_path(self.tree_store.get_path(tree_iter))
            else:
                self.expanded_rows.discard(item_id)

    def update_item_title(self, item_id: str, title: str):
        """Refresh one row's label without rebuilding"""
        tree_iter = self._find_iter_by_id(item_id)
        if tree_iter:
            self.tree_store.set_value(tree_iter, 0, title)

    def _on_row_expanded(self, treeview, treeiter, treepath):
        self.expanded_rows.add(self.tree_store.get_value(treeiter, 1))

    def _on_row_collapsed(self, treeview, treeiter, treepath):
        self.expanded_rows.discard(self.tree_store.get_value(treeiter, 1))

    # ===== Event Handlers =====

    def _on_selection_changed(self, selection):
        """Handle tree selection change"""
        item_id = self._get_selected_item_id()
        if item_id:
            self.model.select(item_id)
        else:
            self.model.clear_selection()

        self._update_buttons()
        if self.on_selection_changed:
            self.on_selection_changed(item_id)

    def on_add(self, button):
        node = self.model.add_root()
        self.model.select(node.id)
        self._changed()

    def on_submenu(self, button):
        selected_id = self._get_selected_item_id()
        if not selected_id:
            return

        child = self.model.add_child(selected_id)
        if child is None:
            return

        self.expanded_rows.add(selected_id)
        self.model.select(child.id)
        self._changed()

    def on_remove(self, button):
        """Remove selected item after confirmation"""
        selected_id = self._get_selected_item_id()
        if not selected_id:
            return

        node = self.model.request_delete(selected_id)
        if node is None:
            return

        if self._confirm_delete(node):
            self.model.confirm_delete()
            self._changed()
        else:
            self.model.cancel_delete()

    def on_up(self, button):
        selected_id = self._get_selected_item_id()
        if selected_id and self.model.move_up(selected_id):
            self._changed()

    def on_down(self, button):
        selected_id = self._get_selected_item_id()
        if selected_id and self.model.move_down(selected_id):
            self._changed()

    def _on_drag_data_get(self, treeview, drag_context, data, info, time):
        item_id = self._get_selected_item_id()
        if item_id:
            data.set_text(item_id, -1)

    def _on_drag_data_received(self, treeview, drag_context, x, y, data, info, time):
        """Drop over a sibling reorders that sibling list; anything else is ignored"""
        # The default handler would move rows in the store behind the model's back
        treeview.stop_emission_by_name("drag-data-received")

        active_id = data.get_text()
        drop_info = treeview.get_dest_row_at_pos(x, y)
        over_id = None
        if drop_info:
            path, _position = drop_info
            over_id = self.tree_store[path][1]

        moved = False
        if active_id:
            event = DragEnd(active_id=active_id, over_id=over_id)
            moved = self.model.drag_end(event, self.model.parent_of(active_id))

        drag_context.finish(moved, False, time)
        if moved:
            self._changed()

    def _changed(self):
        self.rebuild_tree()
        if self.on_tree_changed:
            self.on_tree_changed()

    def _confirm_delete(self, node) -> bool:
        text = f'Delete the menu "{node.title}"?'
        if node.has_children():
            text += " Its sub-menus will be deleted too."

        dialog = Gtk.MessageDialog(
            transient_for=self.parent_window,
            modal=True,
            message_type=Gtk.MessageType.QUESTION,
            buttons=Gtk.ButtonsType.OK_CANCEL,
            text="Delete menu",
        )
        dialog.format_secondary_text(text)
        response = dialog.run()
        dialog.destroy()
        return response == Gtk.ResponseType.OK

    # ===== Helper Methods =====

    def _update_buttons(self):
        if not hasattr(self, 'submenu_btn'):
            return
        selected_id = self._get_selected_item_id()
        has_selection = selected_id is not None
        self.submenu_btn.set_sensitive(has_selection and self.model.can_add_child(selected_id))
        self.remove_btn.set_sensitive(has_selection)
        self.up_btn.set_sensitive(has_selection)
        self.down_btn.set_sensitive(has_selection)

    def _get_selected_item_id(self) -> Optional[str]:
        """Get ID of currently selected item"""
        model, treeiter = self.selection.get_selected()
        if treeiter:
            return model[treeiter][1]
        return None

    def _find_iter_by_id(self, item_id: str, parent_iter=None):
        """Find tree iter by item ID"""
        it = self.tree_store.iter_children(parent_iter) if parent_iter else self.tree_store.get_iter_first()

        while it:
            if self.tree_store.get_value(it, 1) == item_id:
                return it

            if self.tree_store.iter_has_child(it):
                result = self._find_iter_by_id(item_id, it)
                if result:
                    return result

            it = self.tree_store.iter_next(it)

        return None

    def _select_item(self, item_id: str):
        """Select item in tree"""
        tree_iter = self._find_iter_by_id(item_id)
        if tree_iter:
            path = self.tree_store.get_path(tree_iter)
            self.treeview.expand_to_path(path)
            self.selection.select_iter(tree_iter)
            self.treeview.scroll_to_cell(path, None, False, 0, 0)
