import eventlet
eventlet.monkey_patch()

from sentinel import create_app
from sentinel.extensions import socketio

app = create_app()

if __name__ == '__main__':
    socketio.run(app, debug=app.config.get("DEBUG", False), port=int(app.config.get("PORT", 3001)))
