from flask import Blueprint, jsonify, request, current_app
from werkzeug.exceptions import HTTPException

from wordrooms.errors import RoomError
from wordrooms.services.rooms.lifecycle import (
    create_room as svc_create_room,
    join_room as svc_join_room,
    leave_room as svc_leave_room,
    poll_room as svc_poll_room,
    start_room as svc_start_room,
)
from wordrooms.services.rooms.scoring import get_results as svc_get_results
from wordrooms.services.rooms.submissions import submit_words as svc_submit_words


rooms = Blueprint('rooms', __name__)


def _params() -> dict:
    """Flat parameters from the query string, form data and JSON body (JSON wins)."""
    params = dict(request.args.items())
    params.update(request.form.items())
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        params.update(data)
    return params


@rooms.errorhandler(RoomError)
def handle_room_error(err: RoomError):
    current_app.logger.info(f"[room-error] {request.method} {request.path} kind={err.kind} error={err.message}")
    return jsonify(err.to_dict()), err.status_code


@rooms.errorhandler(Exception)
def handle_unexpected(err: Exception):
    if isinstance(err, HTTPException):
        return err
    current_app.logger.exception(f"[room-error] {request.method} {request.path} unexpected failure")
    return jsonify({'error': 'Internal error', 'kind': 'internal'}), 500


@rooms.route('/create', methods=['POST'])
def create_room():
    data = _params()
    return jsonify(svc_create_room(data.get('player'), data.get('boardCode'))), 201


@rooms.route('/<string:room_id>/join', methods=['POST'])
def join_room(room_id):
    return jsonify(svc_join_room(room_id, _params().get('player')))


@rooms.route('/<string:room_id>', methods=['GET'])
def poll_room(room_id):
    return jsonify(svc_poll_room(room_id))


@rooms.route('/<string:room_id>/start', methods=['POST'])
def start_room(room_id):
    return jsonify(svc_start_room(room_id))


@rooms.route('/<string:room_id>/words', methods=['POST'])
def submit_words(room_id):
    data = _params()
    return jsonify(svc_submit_words(room_id, data.get('player'), data.get('words', '')))


@rooms.route('/<string:room_id>/results', methods=['GET'])
def get_results(room_id):
    return jsonify(svc_get_results(room_id))


@rooms.route('/<string:room_id>/leave', methods=['POST'])
def leave_room(room_id):
    return jsonify(svc_leave_room(room_id, _params().get('player')))
