from imposter import create_app, socketio

app = create_app()

if __name__ == '__main__':
    app.logger.info(f"IMPOSTER game running at http://localhost:{app.config['PORT']}")
    # Use SocketIO server to enable websockets
    socketio.run(app, host=app.config['HOST'], port=app.config['PORT'], allow_unsafe_werkzeug=True)
