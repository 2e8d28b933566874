from functools import wraps

from flask import current_app, request
from flask_socketio import close_room, emit, join_room

from kartquiz import socketio
from kartquiz.services.rooms import session
from kartquiz.services.rooms.errors import Forbidden, InvalidPayload, RoomError


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _room_code(data) -> str:
    code = data.get('roomCode')
    if code is None or not str(code).strip():
        raise InvalidPayload('roomCode is required')
    return str(code).strip().upper()


def intent(name, locked=True):
    """Wrap a gateway handler: validate the payload shape, hold the registry
    lock, and turn RoomError into a rejection for the requester only."""
    def decorator(method):
        @wraps(method)
        def wrapper(self, data=None):
            if data is None:
                data = {}
            if not isinstance(data, dict):
                self._reject(name, InvalidPayload('payload must be an object'))
                return
            if not locked:
                try:
                    return method(self, data)
                except RoomError as exc:
                    self._reject(name, exc)
                return
            with self.registry.lock:
                try:
                    return method(self, data)
                except RoomError as exc:
                    self._reject(name, exc)
        return wrapper
    return decorator


class RoomEventGateway:
    """Maps inbound Socket.IO intents onto room session operations.

    Events go to one of three audiences: the requester (plain ``emit``),
    the room host (``to=host sid``) or everyone in the room (``to=code``).
    """

    def __init__(self, registry, quizzes, surface_rejections=True,
                 allow_room_replace=False, default_host_name='Quiz Master'):
        self.registry = registry
        self.quizzes = quizzes
        self.surface_rejections = surface_rejections
        self.allow_room_replace = allow_room_replace
        self.default_host_name = default_host_name

    # ---- helpers ----

    def _reject(self, intent_name, exc: RoomError) -> None:
        current_app.logger.warning(
            f"[rejected] intent={intent_name} sid={_get_sid()} code={exc.code} reason={exc.message}"
        )
        if self.surface_rejections:
            emit('intent-rejected', {'intent': intent_name, **exc.to_dict()})

    def _room(self, data):
        room = self.registry.require(_room_code(data))
        self.registry.touch(room)
        return room

    def _host_room(self, data):
        room = self.registry.require(_room_code(data))
        if not room.is_host(_get_sid()):
            raise Forbidden('Only the host can do that')
        self.registry.touch(room)
        return room

    # ---- connection lifecycle ----

    def on_connect(self, auth=None):
        emit('connected', {'sid': _get_sid()})

    def on_disconnect(self, reason=None):
        sid = _get_sid()
        with self.registry.lock:
            for room in self.registry.all():
                if session.remove_player(room, sid):
                    emit('player-list-updated', {'players': session.player_list(room)}, to=room.code)
                    current_app.logger.info(f"[player-left] code={room.code} sid={sid}")
            for room in session.destroy_if_host(self.registry, sid):
                emit('host-disconnected', {'roomCode': room.code}, to=room.code)
                close_room(room.code)
                current_app.logger.info(f"[room-closed] code={room.code} host={sid} (host disconnected)")

    # ---- room intents ----

    @intent('create-room')
    def on_create_room(self, data):
        sid = _get_sid()
        code = _room_code(data)
        title = data.get('quizTitle')
        title = title.strip() if isinstance(title, str) else ''
        host_name = data.get('hostName')
        host_name = (host_name.strip() if isinstance(host_name, str) else '') or self.default_host_name
        replaced = code in self.registry
        try:
            self.registry.create(code, title, sid, host_name, replace=self.allow_room_replace)
        except RoomError as exc:
            current_app.logger.warning(f"[create-failed] code={code} sid={sid} reason={exc.message}")
            emit('room-created', {'roomCode': code, 'success': False, 'message': exc.message})
            return
        if replaced:
            # Members of the old room must not hear the new room's events
            close_room(code)
            current_app.logger.warning(f"[room-replaced] code={code} host={sid}")
        join_room(code)
        emit('room-created', {'roomCode': code, 'success': True})
        current_app.logger.info(f"[room-created] code={code} host={sid}")

    @intent('set-questions')
    def on_set_questions(self, data):
        room = self._host_room(data)
        count = session.set_questions(room, data.get('questions'))
        emit('questions-set', {'success': True, 'count': count})
        current_app.logger.info(f"[questions-set] code={room.code} count={count}")

    @intent('join-room')
    def on_join_room(self, data):
        sid = _get_sid()
        try:
            room = self._room(data)
            player = session.add_player(room, sid, data.get('playerName'))
        except RoomError as exc:
            current_app.logger.warning(f"[join-failed] sid={sid} reason={exc.message}")
            emit('join-error', {'message': exc.message, 'code': exc.code})
            return
        join_room(room.code)
        emit('join-success', {'roomCode': room.code, 'playerId': sid, 'quizTitle': room.title})
        emit('player-list-updated', {'players': session.player_list(room)}, to=room.code)
        current_app.logger.info(f"[player-joined] code={room.code} sid={sid} name={player.name}")

    @intent('start-quiz')
    def on_start_quiz(self, data):
        room = self._host_room(data)
        view = session.start(room)
        emit('quiz-started', view, to=room.code)
        current_app.logger.info(f"[quiz-started] code={room.code} questions={len(room.questions)}")

    @intent('submit-guess')
    def on_submit_guess(self, data):
        sid = _get_sid()
        room = self._room(data)
        guess_count, total_players = session.submit_guess(room, sid, data.get('lat'), data.get('lng'))
        emit('guess-count-updated', {'guessCount': guess_count, 'totalPlayers': total_players}, to=room.host.id)
        emit('guess-submitted', {'success': True})
        current_app.logger.info(f"[guess] code={room.code} sid={sid} count={guess_count}/{total_players}")

    @intent('show-results')
    def on_show_results(self, data):
        room = self._host_room(data)
        payload = session.show_results(room)
        emit('results-ready', payload, to=room.code)
        current_app.logger.info(
            f"[results] code={room.code} question={payload['questionNumber']} guesses={len(payload['results'])}"
        )

    @intent('next-question')
    def on_next_question(self, data):
        room = self._host_room(data)
        event, payload = session.advance(room)
        emit(event, payload, to=room.code)
        current_app.logger.info(f"[{event}] code={room.code} state={room.state}")

    # ---- saved quiz catalog ----

    @intent('get-saved-quizzes', locked=False)
    def on_get_saved_quizzes(self, data):
        emit('saved-quizzes-list', {'quizzes': self.quizzes.list_all()})

    @intent('save-quiz', locked=False)
    def on_save_quiz(self, data):
        try:
            quiz = self.quizzes.save(data.get('id'), data.get('title'), data.get('questions'))
        except RoomError as exc:
            emit('quiz-saved', {'success': False, 'message': exc.message})
            return
        emit('quiz-saved', {'success': True, 'id': quiz['id']})
        current_app.logger.info(f"[quiz-saved] id={quiz['id']} title={quiz['title']}")

    @intent('load-quiz', locked=False)
    def on_load_quiz(self, data):
        try:
            quiz = self.quizzes.require(data.get('id'))
        except RoomError as exc:
            emit('quiz-loaded', {'success': False, 'message': exc.message})
            return
        emit('quiz-loaded', {'success': True, 'quiz': quiz})
        current_app.logger.info(f"[quiz-loaded] id={quiz['id']}")

    @intent('delete-quiz', locked=False)
    def on_delete_quiz(self, data):
        quiz_id = data.get('id')
        deleted = self.quizzes.delete(quiz_id)
        emit('quiz-deleted', {'success': True, 'id': quiz_id})
        current_app.logger.info(f"[quiz-deleted] id={quiz_id} existed={deleted}")


def register_socketio_handlers(gateway, namespace='/') -> None:
    """Bind the gateway's handlers to the shared SocketIO instance."""
    socketio.on_event('connect', gateway.on_connect, namespace=namespace)
    socketio.on_event('disconnect', gateway.on_disconnect, namespace=namespace)
    socketio.on_event('create-room', gateway.on_create_room, namespace=namespace)
    socketio.on_event('set-questions', gateway.on_set_questions, namespace=namespace)
    socketio.on_event('join-room', gateway.on_join_room, namespace=namespace)
    socketio.on_event('start-quiz', gateway.on_start_quiz, namespace=namespace)
    socketio.on_event('submit-guess', gateway.on_submit_guess, namespace=namespace)
    socketio.on_event('show-results', gateway.on_show_results, namespace=namespace)
    socketio.on_event('next-question', gateway.on_next_question, namespace=namespace)
    socketio.on_event('get-saved-quizzes', gateway.on_get_saved_quizzes, namespace=namespace)
    socketio.on_event('save-quiz', gateway.on_save_quiz, namespace=namespace)
    socketio.on_event('load-quiz', gateway.on_load_quiz, namespace=namespace)
    socketio.on_event('delete-quiz', gateway.on_delete_quiz, namespace=namespace)
