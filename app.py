"""
Lobby Session Engine - collaborative video queue server

Flask-SocketIO backend that lets independent lobbies share a vote-ordered
video queue and a host-driven playback clock. app.py is purely server
setup and handler registration; lobby logic lives in lobby/.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional
from flask import Flask
from flask_socketio import SocketIO
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from config import settings
from lobby import LobbyRegistry, PlaybackSyncCoordinator
from handlers import register_socket_handlers, register_api_handlers

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

def lobby_lock_factory(async_mode: str) -> Callable[[], Any]:
    """
    Pick the per-lobby lock type for a Socket.IO async mode.
    
    Under eventlet every handler is a greenlet on one OS thread; the
    lock must block other greenlets, so it is a green semaphore there
    (not reentrant).
    
    Args:
        async_mode: The SocketIO async_mode in use
    
    Returns:
        Zero-argument callable building one lock
    """
    if async_mode == 'eventlet':
        from eventlet.semaphore import Semaphore
        return lambda: Semaphore(1)
    return threading.RLock

def create_app(overrides: Optional[Dict[str, Any]] = None, registry: Optional[LobbyRegistry] = None):
    """
    Application factory that creates and configures the Flask app.
    
    Args:
        overrides: Config values that replace the environment settings
        registry: Lobby registry to serve (a fresh one by default)
    
    Returns:
        Configured Flask app with SocketIO
    """
    
    # Flask configuration
    app = Flask(__name__)
    app.config.update(settings.as_dict())
    app.config.update(overrides or {})
    
    cors_origins = app.config['CORS_ORIGINS']
    if cors_origins != '*':
        cors_origins = [origin.strip() for origin in cors_origins.split(',')]
    
    # CORS configuration for the browser client
    CORS(app, origins=cors_origins)
    
    # ProxyFix for deployment behind reverse proxy
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1)
    
    # SocketIO configuration
    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=app.config['SOCKETIO_ASYNC_MODE'],
        ping_timeout=app.config['PING_TIMEOUT'],
        ping_interval=app.config['PING_INTERVAL']
    )
    
    # Lobby session engine
    if registry is None:
        registry = LobbyRegistry(lock_factory=lobby_lock_factory(app.config['SOCKETIO_ASYNC_MODE']))
    app.extensions['lobby_registry'] = registry
    
    # Register handlers (pure routing layer)
    logger.info("Registering handlers...")
    register_socket_handlers(socketio, registry, PlaybackSyncCoordinator())
    register_api_handlers(app, registry)
    
    logger.info("Application initialization complete")
    
    return app, socketio

def main():
    """Main entry point for development server."""
    
    # Create the application
    app, socketio = create_app()
    
    port = app.config['PORT']
    debug = app.config['DEBUG']
    
    logger.info(f"Server listening on port {port}")
    logger.info(f"Debug mode: {debug}")
    logger.info(f"CORS origins: {app.config['CORS_ORIGINS']}")
    
    # Run the server
    socketio.run(app, debug=debug, port=port, host='0.0.0.0')

if __name__ == '__main__':
    main()
