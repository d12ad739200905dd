import logging

from flask import Blueprint, abort, current_app, jsonify
from flask_login import current_user, login_required

from ..models import Message
from ..schemas import ConversationCreateRequest, MessageCreateRequest, parse_json
from ..services.assistant import chat_reply
from ..storage import storage

logger = logging.getLogger(__name__)

chat_bp = Blueprint('chat', __name__)


def _get_conversation_or_404(conversation_id):
    conversation = storage.conversations.get(conversation_id, current_user.id)
    if conversation is None:
        abort(404, description='Conversation not found')
    return conversation


@chat_bp.route('/conversations', methods=['GET'])
@login_required
def list_conversations():
    return jsonify([c.to_dict() for c in storage.conversations.list(current_user.id)])


@chat_bp.route('/conversations', methods=['POST'])
@login_required
def create_conversation():
    data = parse_json(ConversationCreateRequest)
    conversation = storage.conversations.create(current_user.id, data.title)
    return jsonify(conversation.to_dict()), 201


@chat_bp.route('/conversations/<id:conversation_id>', methods=['GET'])
@login_required
def get_conversation(conversation_id):
    conversation = _get_conversation_or_404(conversation_id)
    return jsonify(conversation.to_dict(include_messages=True))


@chat_bp.route('/conversations/<id:conversation_id>', methods=['DELETE'])
@login_required
def delete_conversation(conversation_id):
    conversation = _get_conversation_or_404(conversation_id)
    storage.conversations.delete(conversation)
    return '', 204


@chat_bp.route('/conversations/<id:conversation_id>/messages', methods=['POST'])
@login_required
def send_message(conversation_id):
    conversation = _get_conversation_or_404(conversation_id)
    data = parse_json(MessageCreateRequest)

    storage.conversations.add_message(conversation.id, Message.ROLE_USER, data.content)
    history = storage.conversations.recent_messages(
        conversation.id, current_app.config['CHAT_HISTORY_LIMIT']
    )
    try:
        reply = chat_reply(history)
    except Exception:
        logger.exception(f"Assistant failed to reply in conversation {conversation.id}")
        return jsonify({'message': 'Failed to get a response'}), 500

    message = storage.conversations.add_message(conversation.id, Message.ROLE_ASSISTANT, reply)
    return jsonify(message.to_dict()), 201
