#!/usr/bin/env python3
"""
Conversation service - messages between a seeker's agent and an employer.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from database.models import Conversation
from database.repository import MarketplaceRepository
from ..exceptions import NotFoundException, ValidationException

logger = logging.getLogger(__name__)


def sender_type_for(role: str) -> str:
    return 'employer' if role == 'employer' else 'agent'


class ConversationService:
    """Service for conversation access and messaging."""

    def __init__(self, db: Session, notifier: Optional[Any] = None):
        self.repo = MarketplaceRepository(db)
        self.notifier = notifier

    def _get_conversation(self, conversation_id: Any, user_id: Any, role: str) -> Conversation:
        conversation = self.repo.conversations.get_for_participant(conversation_id, user_id, role)
        if conversation is None:
            raise NotFoundException('Conversation not found')
        return conversation

    def list_messages(self, conversation_id: Any, user_id: Any, role: str) -> List[Dict[str, Any]]:
        self._get_conversation(conversation_id, user_id, role)
        return [m.to_dict() for m in self.repo.conversations.list_messages(conversation_id)]

    def post_message(
        self,
        conversation_id: Any,
        user_id: Any,
        role: str,
        content: str,
        api_key_id: Optional[Any] = None
    ) -> Dict[str, Any]:
        if not content or not content.strip():
            raise ValidationException('Message content is required')

        conversation = self._get_conversation(conversation_id, user_id, role)
        sender_type = sender_type_for(role)
        message = self.repo.conversations.add_message(conversation.id, sender_type, content)

        self.repo.activity.log(
            user_id=user_id,
            api_key_id=api_key_id,
            action='send_message',
            resource_type='message',
            resource_id=message.id,
            details={'conversation_id': str(conversation.id), 'sender_type': sender_type},
        )
        self.repo.flush()

        application = conversation.application
        if role == 'employer':
            recipient_user_id = application.job_seeker.user_id
        else:
            recipient_user_id = application.job_posting.employer.user_id
        result = message.to_dict()
        application_id = str(application.id)
        self.repo.commit()

        if self.notifier is not None:
            try:
                self.notifier.notify_user(recipient_user_id, 'new_message', {
                    'conversation_id': result['conversation_id'],
                    'message_id': result['id'],
                    'application_id': application_id,
                    'sender_type': sender_type,
                })
            except Exception as e:
                logger.error(f"Failed to schedule message notification for user {recipient_user_id}: {e}")
        return result

    def mark_read(self, conversation_id: Any, user_id: Any, role: str) -> int:
        """Mark the other side's unread messages as read."""
        self._get_conversation(conversation_id, user_id, role)
        count = self.repo.conversations.mark_read(conversation_id, sender_type_for(role))
        self.repo.commit()
        return count
