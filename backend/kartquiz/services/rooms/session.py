"""State machine and mutation rules for a single room.

Callers resolve the room and check host authority first; these functions
only enforce what depends on room state (current phase, roster membership).
"""

import random
from typing import List, Optional, Tuple

from .errors import Forbidden, InvalidState
from .room import (
    FINISHED,
    LOBBY,
    QUESTION,
    RESULTS,
    Coordinate,
    Player,
    Room,
    parse_questions,
)
from .scoring import distance, round_half_up, score

DEFAULT_PLAYER_NAME = 'Player'


def _require_state(room: Room, state: str, action: str) -> None:
    if room.state != state:
        raise InvalidState(f'Cannot {action} while room is in {room.state}')


def _join_order(room: Room):
    return {sid: index for index, sid in enumerate(room.scores)}


def _player(room: Room, sid: str) -> Optional[Player]:
    return room.players.get(sid) or room.departed.get(sid)


def player_list(room: Room) -> List[dict]:
    return [player.to_dict() for player in room.players.values()]


def question_view(room: Room) -> dict:
    return room.question.public_view(room.current_question + 1, len(room.questions))


def set_questions(room: Room, questions) -> int:
    _require_state(room, LOBBY, 'change questions')
    room.questions = parse_questions(questions)
    return len(room.questions)


def add_player(room: Room, sid: str, name, rng=random) -> Player:
    if room.is_host(sid):
        raise Forbidden('The host cannot join as a player')
    name = name.strip() if isinstance(name, str) else ''
    name = name or DEFAULT_PLAYER_NAME
    player = room.players.get(sid)
    if player is not None:
        player.name = name
        return player
    player = room.departed.pop(sid, None)
    if player is None:
        player = Player(id=sid, name=name, color=f'hsl({int(rng.random() * 360)}, 70%, 60%)')
    else:
        player.name = name
    room.players[sid] = player
    room.scores.setdefault(sid, 0)
    return player


def start(room: Room) -> dict:
    _require_state(room, LOBBY, 'start the quiz')
    if not room.questions:
        raise InvalidState('Cannot start a quiz without questions')
    room.state = QUESTION
    room.current_question = 0
    room.guesses.clear()
    return question_view(room)


def submit_guess(room: Room, sid: str, lat, lng) -> Tuple[int, int]:
    if sid not in room.players:
        raise Forbidden('Only players in the room can guess')
    _require_state(room, QUESTION, 'submit a guess')
    room.guesses[sid] = Coordinate.parse(lat, lng)
    return len(room.guesses), len(room.players)


def show_results(room: Room) -> dict:
    _require_state(room, QUESTION, 'show results')
    question = room.question
    room.state = RESULTS
    results = []
    for sid, guess in room.guesses.items():
        player = room.players[sid]
        km = distance(question.answer, guess)
        points = score(km, question.max_distance)
        room.scores[sid] = room.scores.get(sid, 0) + points
        results.append({
            'playerId': sid,
            'playerName': player.name,
            'playerColor': player.color,
            'guess': guess.to_dict(),
            'distance': round_half_up(km),
            'points': points,
            'totalScore': room.scores[sid],
        })
    order = _join_order(room)
    results.sort(key=lambda r: (-r['totalScore'], order[r['playerId']]))
    return {
        'correctAnswer': question.answer.to_dict(),
        'results': results,
        'questionNumber': room.current_question + 1,
        'totalQuestions': len(room.questions),
    }


def leaderboard(room: Room) -> List[dict]:
    """Everyone who ever joined, highest score first; ties keep join order."""
    entries = []
    for sid, total in room.scores.items():
        player = _player(room, sid)
        entries.append({
            'playerId': sid,
            'playerName': player.name if player else DEFAULT_PLAYER_NAME,
            'score': total,
            'connected': sid in room.players,
        })
    # sorted() is stable, so equal scores stay in join order
    return sorted(entries, key=lambda e: -e['score'])


def advance(room: Room) -> Tuple[str, dict]:
    _require_state(room, RESULTS, 'advance')
    room.guesses.clear()
    if room.current_question + 1 < len(room.questions):
        room.current_question += 1
        room.state = QUESTION
        return 'next-question-ready', question_view(room)
    room.current_question = len(room.questions)
    room.state = FINISHED
    board = leaderboard(room)
    return 'quiz-finished', {'leaderboard': board, 'winner': board[0] if board else None}


def remove_player(room: Room, sid: str) -> bool:
    player = room.players.pop(sid, None)
    if player is None:
        return False
    room.guesses.pop(sid, None)
    room.departed[sid] = player
    return True


def destroy_if_host(registry, sid: str) -> List[Room]:
    hosted = [room for room in registry.all() if room.is_host(sid)]
    for room in hosted:
        registry.delete(room.code)
    return hosted
