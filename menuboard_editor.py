#!/usr/bin/env python3
"""
menuboard editor - desktop tree editor for the forum menu
Loads the menu from the API, edits it in memory and saves it back
"""

import argparse
import logging
import sys

from core.editor.menu_model import MenuModel
from core.editor.save_handler import SaveHandler
from network.menu_client import MenuClient, MenuClientError
from utils.config import DEFAULT_CONFIG_DIR, ConfigManager
from utils.logging import setup_logging

logger = logging.getLogger("menuboard.editor")


def build_parser():
    parser = argparse.ArgumentParser(description="menuboard editor")
    parser.add_argument("--api-url", help="Menu API base URL (default from config)")
    parser.add_argument("--config-dir", default=str(DEFAULT_CONFIG_DIR),
                        help="Configuration directory")
    parser.add_argument("--debug", action="store_true",
                        help="Enable debug output")
    return parser


def main(argv=None):
    """Main entry point"""
    args = build_parser().parse_args(argv)

    config = ConfigManager(args.config_dir)
    setup_logging(debug=args.debug, log_file=config.get("logging.file"))

    client = MenuClient(
        args.api_url or config.get("editor.api_url"),
        timeout=config.get("editor.request_timeout", 5),
    )

    try:
        document = client.fetch_menu()
    except MenuClientError as e:
        logger.error(f"Could not load the menu: {e}")
        return 1

    model = MenuModel.from_document(
        document,
        max_depth=config.get("editor.max_depth", 2),
        id_length=config.get("editor.id_length", 11),
    )
    if args.debug:
        model.print_debug()

    # GTK is only needed once there is something to edit
    from ui.editor.main_window import EditorMainWindow

    window = EditorMainWindow(model, SaveHandler(client), client)
    window.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
