"""
Socket.IO Event Handlers for the lobby session engine.

Pure routing layer: resolves each inbound event to a lobby session,
runs the matching session operation under that lobby's lock, hands
the resulting notifications to the broadcast gateway and maps the
result to the acknowledgement reply. Contains no lobby logic.
"""

import logging
from typing import Any, Callable, Dict, Optional
from flask import request, current_app
from flask_socketio import join_room
from lobby import LobbyRegistry, LobbyResult, ErrorCode, PlaybackSyncCoordinator
from utils.constants import INBOUND_EVENTS
from utils.helpers import normalize_display_name
from .gateway import BroadcastGateway

logger = logging.getLogger(__name__)

INTERNAL_ERROR_REPLY = {'error': 'Internal server error'}

def _payload(data: Any) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}

def _connection_id(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None

def _queue_index(value: Any) -> Any:
    """Accept integral JSON numbers (2 or 2.0); anything else stays invalid."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value

def register_socket_handlers(socketio, registry: LobbyRegistry,
                             coordinator: Optional[PlaybackSyncCoordinator] = None):
    """
    Register all Socket.IO event handlers.

    Args:
        socketio: SocketIO instance
        registry: Lobby registry owning every session
        coordinator: Playback sync relay (a fresh one by default)
    """
    gateway = BroadcastGateway(socketio)
    coordinator = coordinator or PlaybackSyncCoordinator()

    def run(lobby_id: Any, operation: Callable, joining: Optional[str] = None,
            evict: bool = True) -> LobbyResult:
        """
        Apply one operation to a lobby atomically.

        The lobby lock is held until every notification has been handed
        to the gateway, so the next event for the same lobby always sees
        (and broadcasts after) a finished state.

        Args:
            lobby_id: Target lobby
            operation: Callable taking the LobbySession, returning a LobbyResult
            joining: Connection to put in the lobby room on success
            evict: Take removed connections out of the lobby room
        """
        with registry.session_scope(lobby_id) as session:
            if session is None:
                return LobbyResult.fail(ErrorCode.LOBBY_NOT_FOUND)

            result = operation(session)

            if result.success and joining:
                registry.track_connection(joining, session.lobby_id)
                gateway.enter(session.lobby_id, joining)

            for connection_id in result.removed_connections:
                registry.untrack_connection(connection_id, session.lobby_id)
            if evict and result.removed_connections:
                gateway.evict(session.lobby_id, result.removed_connections)

            gateway.deliver(result.notifications)

            if result.removed_connections:
                registry.destroy_if_empty(session.lobby_id)
            return result

    def reply(result: LobbyResult):
        if result.error:
            logger.info(f"Request from {request.sid} failed: {result.error.message}")
        return result.to_reply()

    @socketio.on('connect')
    def handle_connect():
        """Handle client connection."""
        logger.info(f"A user connected: {request.sid}")

    @socketio.on('disconnect')
    def handle_disconnect(reason=None):
        """Remove the connection from every lobby it was in."""
        sid = request.sid
        logger.info(f"User disconnected: {sid}")

        for lobby_id in registry.lobbies_for_connection(sid):
            try:
                run(lobby_id, lambda session: session.leave(sid), evict=False)
            except Exception as e:
                logger.error(f"Error handling disconnect from lobby {lobby_id}: {e}")

    @socketio.on(INBOUND_EVENTS['CREATE_LOBBY'])
    def handle_create_lobby(host_name=None):
        """Host creates a lobby."""
        try:
            if isinstance(host_name, dict):
                host_name = host_name.get('hostName') or host_name.get('userName')
            name = normalize_display_name(host_name, current_app.config['MAX_DISPLAY_NAME_LENGTH'])

            session = registry.create_lobby(request.sid, name)
            join_room(session.lobby_id)
            return {'lobbyId': session.lobby_id}

        except Exception as e:
            logger.error(f"Error creating lobby: {e}")
            return INTERNAL_ERROR_REPLY

    @socketio.on(INBOUND_EVENTS['JOIN_LOBBY'])
    def handle_join_lobby(data=None):
        """User joins a lobby and gets the full lobby state back."""
        try:
            data = _payload(data)
            sid = request.sid
            name = normalize_display_name(data.get('userName'),
                                          current_app.config['MAX_DISPLAY_NAME_LENGTH'])

            result = run(data.get('lobbyId'), lambda session: session.join(sid, name), joining=sid)
            return reply(result)

        except Exception as e:
            logger.error(f"Error joining lobby: {e}")
            return INTERNAL_ERROR_REPLY

    @socketio.on(INBOUND_EVENTS['LEAVE_LOBBY'])
    def handle_leave_lobby(data=None):
        """User leaves a lobby without disconnecting."""
        try:
            data = _payload(data)
            sid = request.sid
            return reply(run(data.get('lobbyId'), lambda session: session.leave(sid)))

        except Exception as e:
            logger.error(f"Error leaving lobby: {e}")
            return INTERNAL_ERROR_REPLY

    @socketio.on(INBOUND_EVENTS['SEND_MESSAGE'])
    def handle_send_message(data=None):
        """Text chat."""
        try:
            data = _payload(data)
            sid = request.sid
            max_length = current_app.config['MAX_MESSAGE_LENGTH']
            result = run(data.get('lobbyId'),
                         lambda session: session.send_message(sid, data.get('message'), max_length))
            return reply(result)

        except Exception as e:
            logger.error(f"Error sending message: {e}")
            return INTERNAL_ERROR_REPLY

    @socketio.on(INBOUND_EVENTS['ADD_VIDEO'])
    def handle_add_video(data=None):
        """Add a video to the queue."""
        try:
            data = _payload(data)
            sid = request.sid
            return reply(run(data.get('lobbyId'), lambda session: session.add_video(sid, data.get('url'))))

        except Exception as e:
            logger.error(f"Error adding video: {e}")
            return INTERNAL_ERROR_REPLY

    @socketio.on(INBOUND_EVENTS['SKIP_VIDEO'])
    def handle_skip_video(data=None):
        """Host skips the current video."""
        try:
            data = _payload(data)
            sid = request.sid
            return reply(run(data.get('lobbyId'), lambda session: session.skip_video(sid)))

        except Exception as e:
            logger.error(f"Error skipping video: {e}")
            return INTERNAL_ERROR_REPLY

    @socketio.on(INBOUND_EVENTS['DELETE_VIDEO'])
    def handle_delete_video(data=None):
        """Host deletes a video from the queue."""
        try:
            data = _payload(data)
            sid = request.sid
            index = _queue_index(data.get('index'))
            return reply(run(data.get('lobbyId'), lambda session: session.delete_video(sid, index)))

        except Exception as e:
            logger.error(f"Error deleting video: {e}")
            return INTERNAL_ERROR_REPLY

    @socketio.on(INBOUND_EVENTS['LIKE_VIDEO'])
    def handle_like_video(data=None):
        """Like (or undo a like on) the current video."""
        try:
            data = _payload(data)
            sid = request.sid
            undo = bool(data.get('undo'))
            return reply(run(data.get('lobbyId'), lambda session: session.like_video(sid, undo)))

        except Exception as e:
            logger.error(f"Error liking video: {e}")
            return INTERNAL_ERROR_REPLY

    @socketio.on(INBOUND_EVENTS['DISLIKE_VIDEO'])
    def handle_dislike_video(data=None):
        """Dislike (or undo a dislike on) the current video."""
        try:
            data = _payload(data)
            sid = request.sid
            undo = bool(data.get('undo'))
            return reply(run(data.get('lobbyId'), lambda session: session.dislike_video(sid, undo)))

        except Exception as e:
            logger.error(f"Error disliking video: {e}")
            return INTERNAL_ERROR_REPLY

    @socketio.on(INBOUND_EVENTS['KICK_USER'])
    def handle_kick_user(data=None):
        """Host kicks a user from the lobby."""
        try:
            data = _payload(data)
            sid = request.sid
            target = _connection_id(data.get('userSocketId'))
            return reply(run(data.get('lobbyId'), lambda session: session.kick(sid, target)))

        except Exception as e:
            logger.error(f"Error kicking user: {e}")
            return INTERNAL_ERROR_REPLY

    @socketio.on(INBOUND_EVENTS['BAN_USER'])
    def handle_ban_user(data=None):
        """Host bans a user from the lobby."""
        try:
            data = _payload(data)
            sid = request.sid
            target = _connection_id(data.get('userSocketId'))
            return reply(run(data.get('lobbyId'), lambda session: session.ban(sid, target)))

        except Exception as e:
            logger.error(f"Error banning user: {e}")
            return INTERNAL_ERROR_REPLY

    @socketio.on(INBOUND_EVENTS['TRANSFER_HOST'])
    def handle_transfer_host(data=None):
        """Host hands the host role to another user."""
        try:
            data = _payload(data)
            sid = request.sid
            new_host = _connection_id(data.get('newHostSocketId'))
            return reply(run(data.get('lobbyId'), lambda session: session.transfer_host(sid, new_host)))

        except Exception as e:
            logger.error(f"Error transferring host: {e}")
            return INTERNAL_ERROR_REPLY

    @socketio.on(INBOUND_EVENTS['REQUEST_SYNC'])
    def handle_request_sync(data=None):
        """A member asks for the host's current playback position."""
        try:
            data = _payload(data)
            sid = request.sid
            run(data.get('lobbyId'), lambda session: coordinator.on_request_sync(session, sid))

        except Exception as e:
            logger.error(f"Error requesting sync: {e}")

    @socketio.on(INBOUND_EVENTS['HOST_SYNC'])
    def handle_host_sync(data=None):
        """Host answers a sync request with its current time and state."""
        try:
            data = _payload(data)
            sid = request.sid
            run(data.get('lobbyId'), lambda session: coordinator.on_host_sync_response(
                session, sid, data.get('requester'), data.get('time'), data.get('state')))

        except Exception as e:
            logger.error(f"Error relaying host sync: {e}")

    @socketio.on(INBOUND_EVENTS['SYNC_PLAY'])
    def handle_sync_play(data=None):
        """Host started playback."""
        try:
            data = _payload(data)
            sid = request.sid
            run(data.get('lobbyId'), lambda session: coordinator.on_host_play(session, sid, data.get('time')))

        except Exception as e:
            logger.error(f"Error relaying play: {e}")

    @socketio.on(INBOUND_EVENTS['SYNC_PAUSE'])
    def handle_sync_pause(data=None):
        """Host paused playback."""
        try:
            data = _payload(data)
            sid = request.sid
            run(data.get('lobbyId'), lambda session: coordinator.on_host_paused(session, sid, data.get('time')))

        except Exception as e:
            logger.error(f"Error relaying pause: {e}")

    @socketio.on(INBOUND_EVENTS['SYNC_END'])
    def handle_sync_end(data=None):
        """Host's video ended."""
        try:
            data = _payload(data)
            sid = request.sid
            run(data.get('lobbyId'), lambda session: coordinator.on_host_ended(session, sid))

        except Exception as e:
            logger.error(f"Error relaying end: {e}")

    logger.info("Socket.IO handlers registered successfully")
