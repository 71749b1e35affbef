"""
HTTP client for the menu API
"""

import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class MenuClientError(Exception):
    """Request failed in transport or the server answered with an error"""
    
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class MenuClient:
    """Talks to the menu API over HTTP"""
    
    def __init__(self, base_url: str, timeout: float = 5, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
    
    def fetch_menu(self) -> Optional[Dict[str, Any]]:
        """The stored menu document, or None"""
        return self._request('GET', '/menu')
    
    def fetch_navigation(self) -> List[Dict[str, Any]]:
        return self._request('GET', '/menu/nav')
    
    def create_menu(self, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return self._request('POST', '/menu', {'items': items})
    
    def update_menu(self, document_id: str, items: List[Dict[str, Any]]) -> Dict[str, Any]:
        return self._request('PUT', '/menu', {'id': document_id, 'items': items})
    
    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.debug(f"{method} {url} failed: {e}")
            raise MenuClientError(f"Could not reach {url}: {e}") from e
        
        if not response.ok:
            message = self._error_message(response)
            logger.debug(f"{method} {url} -> {response.status_code}: {message}")
            raise MenuClientError(message, status=response.status_code)
        
        try:
            return response.json()
        except ValueError as e:
            raise MenuClientError(f"Invalid response from {url}", status=response.status_code) from e
    
    def _error_message(self, response: requests.Response) -> str:
        """Server-provided message from the error envelope, if any"""
        try:
            data = response.json()
        except ValueError:
            return f"HTTP {response.status_code}"
        
        if isinstance(data, dict) and isinstance(data.get('error'), dict):
            return data['error'].get('message') or f"HTTP {response.status_code}"
        return f"HTTP {response.status_code}"
