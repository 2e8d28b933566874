from flask import Blueprint, current_app, jsonify, request

from kartquiz.services.rooms.errors import RoomError

quizzes = Blueprint('quizzes', __name__)


def _store():
    return current_app.extensions['quiz_store']


@quizzes.route('', methods=['GET'])
def list_quizzes():
    return jsonify(_store().list_all())


@quizzes.route('/<string:quiz_id>', methods=['GET'])
def get_quiz(quiz_id):
    quiz = _store().get(quiz_id)
    if not quiz:
        return jsonify({'error': 'Quiz not found'}), 404
    return jsonify(quiz)


@quizzes.route('', methods=['POST'])
def save_quiz():
    """
    Creates or replaces a saved quiz. The id is generated when omitted.
    """
    data = request.get_json(silent=True) or {}
    try:
        quiz = _store().save(data.get('id'), data.get('title'), data.get('questions'))
    except RoomError as exc:
        return jsonify({'error': exc.message}), 400
    current_app.logger.info(f"[quiz-saved] id={quiz['id']} title={quiz['title']} via=http")
    return jsonify(quiz), 201


@quizzes.route('/<string:quiz_id>', methods=['DELETE'])
def delete_quiz(quiz_id):
    deleted = _store().delete(quiz_id)
    current_app.logger.info(f"[quiz-deleted] id={quiz_id} existed={deleted} via=http")
    return jsonify({'success': True, 'id': quiz_id})
