import logging

from flask_jwt_extended import decode_token, get_jwt, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from flask_socketio import ConnectionRefusedError, join_room
from jwt.exceptions import PyJWTError

from sentinel.extensions import socketio

logger = logging.getLogger(__name__)

OPERATORS_ROOM = "operators"
OPERATOR_ROLES = ("admin", "mission_control")


def user_room(user_id):
    return f"user_{user_id}"


def _connection_claims(auth):
    """
    Claims of the connecting client's access token.
    Taken from the handshake `auth` payload when present, otherwise from the
    Authorization header or the `token` cookie of the handshake request.
    """
    token = auth.get("token") if isinstance(auth, dict) else None
    if token:
        return decode_token(token)
    verify_jwt_in_request()
    return get_jwt()


@socketio.on("connect")
def handle_connect(auth=None):
    try:
        claims = _connection_claims(auth)
    except (JWTExtendedException, PyJWTError) as e:
        logger.info(f"Socket connection refused: {e}")
        raise ConnectionRefusedError("Authentication required")

    join_room(user_room(claims["sub"]))
    if claims.get("role") in OPERATOR_ROLES:
        join_room(OPERATORS_ROOM)
    logger.debug(f"Socket connected for user {claims['sub']} ({claims.get('role')})")
