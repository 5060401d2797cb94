"""
Game Controller

Handles all game-related HTTP endpoints.
"""

from flask import Blueprint, request, jsonify
from ..config.game_settings import ENTER
from ..services.game_service import get_game_service
from ..utils.game_logger import game_logger

game_bp = Blueprint('game', __name__)


def _service_unavailable():
    return jsonify({
        'success': False,
        'error': 'Game service unavailable'
    }), 500


def _game_not_found(action, player_id):
    error_response = {
        'success': False,
        'error': 'Game not found'
    }
    game_logger.log_server_response(request, action, False, error_response, player_id)
    return jsonify(error_response), 404


@game_bp.route('/game', methods=['POST'])
def start_game():
    """Start today's game, or resume a saved one."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable()

        data = request.get_json(silent=True) or {}
        player_id = data.get('player_id')
        day_index = data.get('day_index')

        if day_index is not None and (type(day_index) is not int or day_index < 0):
            error_response = {
                'success': False,
                'error': 'day_index must be a non-negative integer'
            }
            game_logger.log_server_response(request, 'start_game', False, error_response, player_id)
            return jsonify(error_response), 400

        game_logger.log_user_action(request, 'start_game', player_id, day_index=day_index)

        player_id, engine = game_service.start_game(player_id, day_index)

        response_data = {
            'success': True,
            'player_id': player_id,
            'state': game_service.game_view(player_id)
        }

        game_logger.log_server_response(
            request, 'start_game', True, response_data, player_id,
            word_length=engine.word_length, tries=engine.tries
        )

        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'start_game')
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'start_game', False, error_response)
        return jsonify(error_response), 500


@game_bp.route('/game/<player_id>/state', methods=['GET'])
def get_state(player_id):
    """Get current game state."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable()

        game_logger.log_user_action(request, 'get_state', player_id)

        state = game_service.game_view(player_id)
        if state is None:
            return _game_not_found('get_state', player_id)

        response_data = {
            'success': True,
            'state': state
        }

        game_logger.log_server_response(
            request, 'get_state', True, response_data, player_id,
            current_row=state['current_row'], status=state['status']
        )

        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'get_state', player_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'get_state', False, error_response, player_id)
        return jsonify(error_response), 500


@game_bp.route('/game/<player_id>/key', methods=['POST'])
def press_key(player_id):
    """Deliver one keyboard key to the game."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable()

        data = request.get_json(silent=True)
        if not data or not isinstance(data.get('key'), str) or not data['key'].strip():
            error_response = {
                'success': False,
                'error': 'Key is required'
            }
            game_logger.log_server_response(request, 'press_key', False, error_response, player_id)
            return jsonify(error_response), 400

        key = data['key']
        game_logger.log_user_action(request, 'press_key', player_id, key=key)

        engine = game_service.get_engine(player_id)
        if engine is None:
            return _game_not_found('press_key', player_id)

        # After the game is over ENTER shares the result instead
        if engine.is_over and key.strip().upper() == ENTER:
            response_data = {
                'success': True,
                'changed': False,
                'state': game_service.game_view(player_id),
                'share': game_service.share_message(player_id)
            }
            game_logger.log_server_response(request, 'press_key', True, response_data, player_id, shared=True)
            return jsonify(response_data)

        changed = game_service.press_key(player_id, key)

        response_data = {
            'success': True,
            'changed': bool(changed),
            'state': game_service.game_view(player_id)
        }

        game_logger.log_server_response(
            request, 'press_key', True, response_data, player_id,
            key=key, changed=bool(changed), status=engine.status.value
        )

        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'press_key', player_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'press_key', False, error_response, player_id)
        return jsonify(error_response), 500


@game_bp.route('/game/<player_id>/share', methods=['GET'])
def share(player_id):
    """Get the shareable color grid for the committed rows."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable()

        game_logger.log_user_action(request, 'share', player_id)

        message = game_service.share_message(player_id)
        if message is None:
            return _game_not_found('share', player_id)

        response_data = {
            'success': True,
            'share': message
        }
        game_logger.log_server_response(request, 'share', True, response_data, player_id)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'share', player_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'share', False, error_response, player_id)
        return jsonify(error_response), 500


@game_bp.route('/game/<player_id>', methods=['DELETE'])
def end_game(player_id):
    """Drop a game session from memory."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable()

        game_logger.log_user_action(request, 'end_game', player_id)

        success = game_service.end_game(player_id)

        response_data = {
            'success': success
        }

        game_logger.log_server_response(request, 'end_game', success, response_data, player_id)

        if success:
            game_logger.log_game_event(player_id, 'game_closed', request.remote_addr)

        return jsonify(response_data), (200 if success else 404)

    except Exception as e:
        game_logger.log_error(request, e, 'end_game', player_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'end_game', False, error_response, player_id)
        return jsonify(error_response), 500


@game_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    try:
        game_service = get_game_service()

        game_logger.log_user_action(request, 'health_check')

        response_data = {
            'status': 'healthy',
            'active_games': len(game_service.games) if game_service else 0,
            'log_stats': game_logger.get_log_stats(),
            'storage': type(game_service.writer.store).__name__ if game_service else None
        }

        game_logger.log_server_response(request, 'health_check', True, response_data)

        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'health_check')
        error_response = {
            'status': 'error',
            'error': str(e)
        }
        game_logger.log_server_response(request, 'health_check', False, error_response)
        return jsonify(error_response), 500
