"""
WebSocket Event Handlers

Handles WebSocket events for live key delivery and end-of-game alerts.
"""

from flask import request
from flask_socketio import emit, join_room, leave_room
from ..config.game_settings import ENTER
from ..services.game_service import get_game_service
from ..utils.game_logger import game_logger

# Server that end-of-game alerts go out through (the most recently registered)
_socketio = None

GAME_ENDED_LISTENER = 'websocket_game_ended'


def _room(player_id):
    return f"game_{player_id}"


def broadcast_game_ended(player_id, engine, status):
    """Push the end-of-game alert to everyone watching this game."""
    if _socketio is None:
        return
    game_service = get_game_service()
    _socketio.emit('game_ended', {
        'player_id': player_id,
        'status': status.value,
        'answer': engine.secret_word.upper(),
        'share': game_service.share_message(player_id) if game_service else engine.share_text()
    }, room=_room(player_id))


def attach_game_service(game_service):
    """Hook the end-of-game broadcast into a game service, once."""
    if game_service:
        game_service.add_status_listener(broadcast_game_ended, name=GAME_ENDED_LISTENER)


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""
    global _socketio
    _socketio = socketio

    attach_game_service(get_game_service())

    @socketio.on('connect')
    def handle_connect():
        """Handle WebSocket connection."""
        pass

    @socketio.on('join_game')
    def handle_join_game(data):
        """Join a game room for real-time updates."""
        game_service = get_game_service()
        if not game_service:
            emit('error', {'error': 'Game service unavailable'})
            return

        player_id = (data or {}).get('player_id')
        if not player_id:
            emit('error', {'error': 'Player ID is required'})
            return

        state = game_service.game_view(player_id)
        if state is None:
            emit('error', {'error': 'Game not found'})
            return

        # The service may have been created after the handlers were registered
        attach_game_service(game_service)
        join_room(_room(player_id))
        game_logger.log_user_action(request, 'join_game', player_id)

        emit('game_state_update', {
            'success': True,
            'state': state
        })

    @socketio.on('leave_game')
    def handle_leave_game(data):
        """Leave a game room."""
        player_id = (data or {}).get('player_id')
        if player_id:
            leave_room(_room(player_id))
            game_logger.log_user_action(request, 'leave_game', player_id)

    @socketio.on('key_pressed')
    def handle_key_pressed(data):
        """Apply a key event and broadcast the new state to the room."""
        try:
            game_service = get_game_service()
            if not game_service:
                emit('error', {'error': 'Game service unavailable'})
                return

            data = data or {}
            player_id = data.get('player_id')
            key = data.get('key')
            if not player_id or not isinstance(key, str) or not key.strip():
                emit('error', {'error': 'Player ID and key are required'})
                return

            engine = game_service.get_engine(player_id)
            if engine is None:
                emit('error', {'error': 'Game not found'})
                return

            game_logger.log_user_action(request, 'key_pressed', player_id, key=key)

            if engine.is_over and key.strip().upper() == ENTER:
                emit('share', {'share': game_service.share_message(player_id)})
                return

            changed = game_service.press_key(player_id, key)
            if changed:
                socketio.emit('game_state_update', {
                    'success': True,
                    'state': game_service.game_view(player_id)
                }, room=_room(player_id))

        except Exception as e:
            game_logger.log_error(request, e, 'key_pressed', (data or {}).get('player_id'))
            emit('error', {'error': str(e)})
