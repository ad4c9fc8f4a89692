from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Imposter game server!'})

@main.route('/health')
def health():
    service = current_app.extensions['imposter']
    return jsonify({'status': 'ok', 'rooms': len(service.registry)})
