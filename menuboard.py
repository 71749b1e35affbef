#!/usr/bin/env python3
"""
menuboard - forum menu service
Serves the menu document over HTTP, or moves it in and out of JSON files
"""

import argparse
import logging
import sys
import time

from core.menu.builder import format_menu
from core.menu.schema import MenuValidationError
from network.menu_api import MenuAPIServer
from storage.database import Database
from storage.import_export import ImportExportManager
from storage.menu_store import MenuStore, MenuStoreError
from utils.config import DEFAULT_CONFIG_DIR, ConfigManager
from utils.logging import setup_logging

logger = logging.getLogger("menuboard")


def build_parser():
    parser = argparse.ArgumentParser(description="menuboard - forum menu service")
    parser.add_argument("--host", help="Address to bind (default from config)")
    parser.add_argument("--port", type=int, help="Port to listen on (default from config)")
    parser.add_argument("--config-dir", default=str(DEFAULT_CONFIG_DIR),
                        help="Configuration and database directory")
    parser.add_argument("--debug", action="store_true",
                        help="Enable debug output")
    
    actions = parser.add_mutually_exclusive_group()
    actions.add_argument("--export", metavar="FILE", help="Export the stored menu to FILE and exit")
    actions.add_argument("--import", dest="import_file", metavar="FILE",
                         help="Import a menu from FILE and exit")
    actions.add_argument("--show", action="store_true", help="Print the stored menu and exit")
    return parser


def main(argv=None):
    """Main entry point"""
    args = build_parser().parse_args(argv)
    
    config = ConfigManager(args.config_dir)
    setup_logging(debug=args.debug, log_file=config.get("logging.file"))
    
    db = Database(config.config_dir, config.get("storage.db_name", "menuboard.db"))
    store = MenuStore(db)
    
    if args.export or args.import_file:
        manager = ImportExportManager(store, config.get("import_export.directory"))
        try:
            if args.export:
                manager.export_to_file(args.export)
            else:
                if store.get_menu():
                    db.backup()
                manager.import_from_file(args.import_file)
        except MenuValidationError as e:
            logger.error(f"Menu rejected: {e.message}")
            return 1
        except (OSError, ValueError, MenuStoreError) as e:
            logger.error(str(e))
            return 1
        return 0
    
    if args.show:
        document = store.get_menu()
        print(format_menu(document['items']) if document else "(no menu saved)")
        return 0
    
    server = MenuAPIServer(
        store,
        host=args.host or config.get("server.host", "127.0.0.1"),
        port=args.port if args.port is not None else config.get("server.port", 8720),
    )
    if not server.start():
        return 1
    
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        server.stop()
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
