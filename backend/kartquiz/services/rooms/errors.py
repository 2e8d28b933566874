"""Rejections raised by room and quiz services.

Each error carries a short machine-readable ``code`` so transport layers can
report it to the requesting connection without inspecting the message.
"""


class RoomError(Exception):
    code = 'error'
    default_message = 'Request rejected'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'code': self.code, 'message': self.message}


class RoomNotFound(RoomError):
    code = 'not-found'
    default_message = 'Room does not exist'


class QuizNotFound(RoomError):
    code = 'not-found'
    default_message = 'Quiz not found'


class RoomExists(RoomError):
    code = 'already-exists'
    default_message = 'A room with that code already exists'


class Forbidden(RoomError):
    code = 'unauthorized'
    default_message = 'Not allowed for this connection'


class InvalidState(RoomError):
    code = 'invalid-state'
    default_message = 'Not allowed in the current room state'


class InvalidPayload(RoomError):
    code = 'invalid-payload'
    default_message = 'Malformed request'
