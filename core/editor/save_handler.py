"""
Save handler for editor changes
"""

import logging
import threading
from typing import List, NamedTuple, Optional

from core.editor.node import MenuNode
from core.menu.schema import MenuValidationError, validate_menu
from network.menu_client import MenuClientError

logger = logging.getLogger(__name__)

SAVE_OK = "Menu saved"
SAVE_FAILED = "An error occurred while saving the menu"
SAVE_IN_PROGRESS = "Save already in progress"


class SaveResult(NamedTuple):
    """Outcome of one save; the model is only touched when it is applied"""
    ok: bool
    message: str
    document_id: Optional[str] = None
    tree: Optional[List[MenuNode]] = None


class SaveHandler:
    """Writes the whole tree as one menu document through the API client"""

    def __init__(self, client):
        self.client = client
        self._save_lock = threading.Lock()

    @property
    def is_saving(self) -> bool:
        return self._save_lock.locked()

    def save(self, model) -> SaveResult:
        """Validate and send the menu without writing to the model.

        Safe to call from a worker thread: the tree and document id are read
        once up front, and the caller applies the result on the UI thread
        with apply().
        """
        if not self._save_lock.acquire(blocking=False):
            logger.warning("Save requested while another save is in flight")
            return SaveResult(False, SAVE_IN_PROGRESS)

        try:
            return self._save(model)
        finally:
            self._save_lock.release()

    def _save(self, model) -> SaveResult:
        tree = model.items
        document_id = model.document_id
        items = model.to_document_items(tree)

        try:
            validate_menu({'items': items})
        except MenuValidationError as e:
            logger.warning(f"SaveHandler: not saving, {e.message}")
            return SaveResult(False, e.message)

        logger.info(f"SaveHandler: saving {len(items)} root item(s) to document {document_id}")

        try:
            if document_id:
                document = self.client.update_menu(document_id, items)
            else:
                created = self.client.create_menu(items)
                document = created[0] if created else None
        except MenuClientError as e:
            logger.error(f"SaveHandler: save failed: {e}")
            return SaveResult(False, SAVE_FAILED)

        if document and document.get('id'):
            document_id = document['id']

        logger.info(f"SaveHandler: saved menu document {document_id}")
        return SaveResult(True, SAVE_OK, document_id, tree)

    @staticmethod
    def apply(model, result: SaveResult) -> None:
        """Record a successful save on the model; call from the UI thread"""
        if result.ok:
            model.apply_save(result.document_id, result.tree)
