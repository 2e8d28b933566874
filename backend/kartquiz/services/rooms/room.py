import math
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .errors import InvalidPayload

LOBBY = 'lobby'
QUESTION = 'question'
RESULTS = 'results'
FINISHED = 'finished'


def _number(value, name: str) -> float:
    # Clients may send numbers from text inputs, so numeric strings are accepted
    if isinstance(value, bool) or value is None:
        raise InvalidPayload(f'{name} must be a number')
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidPayload(f'{name} must be a number')
    if not math.isfinite(number):
        raise InvalidPayload(f'{name} must be a finite number')
    return number


def _optional_str(value, name: str) -> Optional[str]:
    if value is None or value == '':
        return None
    if not isinstance(value, str):
        raise InvalidPayload(f'{name} must be a string')
    return value


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float

    @classmethod
    def parse(cls, lat, lng) -> 'Coordinate':
        lat = _number(lat, 'lat')
        lng = _number(lng, 'lng')
        if not -90 <= lat <= 90:
            raise InvalidPayload('lat must be between -90 and 90')
        if not -180 <= lng <= 180:
            # Maps panned across the antimeridian report unwrapped longitudes
            lng = ((lng + 180) % 360) - 180
        return cls(lat, lng)

    def __iter__(self):
        yield self.lat
        yield self.lng

    def to_dict(self):
        return {'lat': self.lat, 'lng': self.lng}


@dataclass
class Host:
    id: str
    name: str


@dataclass
class Player:
    id: str
    name: str
    color: str

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'color': self.color}


@dataclass
class Question:
    text: str
    answer: Coordinate
    max_distance: float
    image_url: Optional[str] = None
    audio_url: Optional[str] = None
    time_limit: int = 0

    @classmethod
    def from_dict(cls, data) -> 'Question':
        if not isinstance(data, dict):
            raise InvalidPayload('question must be an object')
        text = data.get('text')
        if not isinstance(text, str):
            raise InvalidPayload('question text is required')
        time_limit = data.get('timeLimit')
        time_limit = int(_number(time_limit, 'timeLimit')) if time_limit not in (None, '') else 0
        if time_limit < 0:
            raise InvalidPayload('timeLimit must not be negative')
        return cls(
            text=text,
            answer=Coordinate.parse(data.get('correctLat'), data.get('correctLng')),
            max_distance=_number(data.get('maxDistance'), 'maxDistance'),
            image_url=_optional_str(data.get('imageUrl'), 'imageUrl'),
            audio_url=_optional_str(data.get('audioUrl'), 'audioUrl'),
            time_limit=time_limit,
        )

    def to_dict(self):
        return {
            'text': self.text,
            'imageUrl': self.image_url,
            'audioUrl': self.audio_url,
            'correctLat': self.answer.lat,
            'correctLng': self.answer.lng,
            'maxDistance': self.max_distance,
            'timeLimit': self.time_limit,
        }

    def public_view(self, number: int, total: int):
        """What players see while guessing. Never includes the answer."""
        return {
            'questionNumber': number,
            'totalQuestions': total,
            'text': self.text,
            'imageUrl': self.image_url,
            'audioUrl': self.audio_url,
            'maxDistance': self.max_distance,
            'timeLimit': self.time_limit,
        }


def parse_questions(items) -> List[Question]:
    if not isinstance(items, list):
        raise InvalidPayload('questions must be a list')
    questions = []
    for index, item in enumerate(items):
        try:
            questions.append(Question.from_dict(item))
        except InvalidPayload as exc:
            raise InvalidPayload(f'question {index + 1}: {exc.message}')
    return questions


@dataclass
class Room:
    code: str
    title: str
    host: Host
    players: Dict[str, Player] = field(default_factory=dict)
    questions: List[Question] = field(default_factory=list)
    current_question: int = 0
    state: str = LOBBY
    guesses: Dict[str, Coordinate] = field(default_factory=dict)
    scores: Dict[str, int] = field(default_factory=dict)
    # Players who left; their scores stay on the leaderboard
    departed: Dict[str, Player] = field(default_factory=dict)
    created_at: float = field(default_factory=time.time)
    last_activity: float = field(default_factory=time.time)

    @property
    def question(self) -> Optional[Question]:
        if 0 <= self.current_question < len(self.questions):
            return self.questions[self.current_question]
        return None

    def is_host(self, sid: str) -> bool:
        return self.host.id == sid
