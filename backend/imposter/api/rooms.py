from flask import Blueprint, current_app, jsonify

rooms = Blueprint('rooms', __name__)


@rooms.route('/categories', methods=['GET'])
def list_categories():
    """Category names for the lobby picker. Word lists never leave the server."""
    service = current_app.extensions['imposter']
    return jsonify({'categories': service.categories()})


@rooms.route('/rooms/<string:room_code>', methods=['GET'])
def get_room_summary(room_code):
    """
    Public lobby info for a room code, e.g. to check an invite link
    before asking for a name.
    """
    summary = current_app.extensions['imposter'].public_summary(room_code)
    if summary is None:
        return jsonify({'error': 'Room not found'}), 404
    return jsonify(summary), 200
