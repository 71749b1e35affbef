# network/menu_api.py
import json
import logging
import threading
from http.server import HTTPServer, BaseHTTPRequestHandler
from urllib.parse import urlparse

from core.menu.builder import MenuBuilder
from core.menu.schema import MenuValidationError, validate_menu, validated_items
from storage.menu_store import MenuNotFoundError

logger = logging.getLogger(__name__)


class MenuAPIHandler(BaseHTTPRequestHandler):
    """HTTP API for the site menu document"""
    
    def __init__(self, *args, menu_store=None, **kwargs):
        self.menu_store = menu_store
        super().__init__(*args, **kwargs)
    
    def do_GET(self):
        """Handle GET requests"""
        path = urlparse(self.path).path
        
        if path == '/menu':
            self._dispatch(self._get_menu)
        elif path == '/menu/nav':
            self._dispatch(self._get_navigation)
        else:
            self._send_error(404, 'NOT_FOUND', f"No route for {path}")
    
    def do_POST(self):
        """Handle POST requests"""
        if urlparse(self.path).path == '/menu':
            self._dispatch(self._create_menu)
        else:
            self._send_error(404, 'NOT_FOUND', f"No route for {self.path}")
    
    def do_PUT(self):
        """Handle PUT requests"""
        if urlparse(self.path).path == '/menu':
            self._dispatch(self._update_menu)
        else:
            self._send_error(404, 'NOT_FOUND', f"No route for {self.path}")
    
    def do_OPTIONS(self):
        """Handle CORS preflight"""
        self.send_response(200)
        self.send_header('Access-Control-Allow-Origin', '*')
        self.send_header('Access-Control-Allow-Methods', 'GET, POST, PUT, OPTIONS')
        self.send_header('Access-Control-Allow-Headers', 'Content-Type')
        self.send_header('Content-Length', '0')
        self.end_headers()
    
    # ===== Routes =====
    
    def _get_menu(self):
        self._send_json(200, self.menu_store.get_menu())
    
    def _get_navigation(self):
        self._send_json(200, MenuBuilder(self.menu_store).build_navigation())
    
    def _create_menu(self):
        menu = validate_menu(self._read_json())
        created = self.menu_store.create_menu(validated_items(menu))
        self._send_json(200, created)
    
    def _update_menu(self):
        menu = validate_menu(self._read_json(), require_id=True)
        document = self.menu_store.update_menu(menu.id, validated_items(menu))
        self._send_json(200, document)
    
    # ===== Plumbing =====
    
    def _dispatch(self, route):
        """Run a route, turning failures into error responses"""
        try:
            route()
        except MenuValidationError as e:
            self._send_error(400, 'BAD_REQUEST', e.message)
        except MenuNotFoundError as e:
            self._send_error(404, 'NOT_FOUND', str(e))
        except Exception as e:
            logger.exception(f"{self.command} {self.path} failed: {e}")
            self._send_error(500, 'INTERNAL_SERVER_ERROR', "Internal server error")
    
    def _read_json(self):
        try:
            content_length = int(self.headers.get('Content-Length') or 0)
        except ValueError:
            raise MenuValidationError("Invalid Content-Length header")
        # Negative lengths would read until the client hangs up
        body = self.rfile.read(content_length) if content_length > 0 else b''
        try:
            return json.loads(body.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError):
            raise MenuValidationError("Request body is not valid JSON")
    
    def _send_json(self, status, payload):
        body = json.dumps(payload, ensure_ascii=False).encode('utf-8')
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Access-Control-Allow-Origin', '*')
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)
    
    def _send_error(self, status, code, message, details=None):
        self._send_json(status, {
            'success': False,
            'error': {
                'code': code,
                'message': message,
                'details': details
            }
        })
    
    def log_message(self, format, *args):
        """Override to use our logger"""
        logger.debug(f"HTTP {self.address_string()} - {format % args}")


class MenuAPIServer:
    """HTTP server for the menu API"""
    
    def __init__(self, menu_store, host='127.0.0.1', port=8720):
        self.host = host
        self.port = port
        self.menu_store = menu_store
        self.server = None
        self.thread = None
    
    def start(self):
        """Start the API server in a background thread"""
        try:
            handler = lambda *args: MenuAPIHandler(
                *args, menu_store=self.menu_store
            )
            
            self.server = HTTPServer((self.host, self.port), handler)
            # Port 0 asks the OS for a free port
            self.port = self.server.server_address[1]
            self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)
            self.thread.start()
            logger.info(f"Menu API server started on http://{self.host}:{self.port}")
            return True
        except OSError as e:
            logger.error(f"Failed to start API server: {e}")
            return False
    
    @property
    def url(self):
        return f"http://{self.host}:{self.port}"
    
    def stop(self):
        """Stop the API server"""
        if self.server:
            self.server.shutdown()
            self.server.server_close()
            self.server = None
            logger.info("Menu API server stopped")
