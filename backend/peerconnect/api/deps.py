"""FastAPI dependency providers wiring services to shared infrastructure.

The realtime channel manager and the outbound HTTP client live on
``app.state`` (created in ``peerconnect.main``); every service that publishes
events receives the manager through these providers.
"""

from __future__ import annotations

from typing import Optional

import httpx
from fastapi import Depends, Request

from peerconnect.domain.discussions.repo import DiscussionsRepository
from peerconnect.domain.discussions.service import DiscussionService
from peerconnect.domain.discussions.visibility import VisibilityResolver
from peerconnect.domain.materials.repo import MaterialsRepository
from peerconnect.domain.materials.service import MaterialsService
from peerconnect.domain.materials.storage import MaterialStorage
from peerconnect.domain.messaging.repo import MessagingRepository
from peerconnect.domain.messaging.service import MessagingService
from peerconnect.domain.moderation.classifier import OpenAIClassifier
from peerconnect.domain.moderation.gate import ModerationGate
from peerconnect.domain.moderation.keywords import KeywordGate
from peerconnect.domain.modules.repo import ModulesRepository
from peerconnect.domain.modules.service import ModulesService
from peerconnect.domain.notifications.notifier import EventNotifier
from peerconnect.domain.notifications.repo import NotificationsRepository
from peerconnect.domain.notifications.service import NotificationService
from peerconnect.domain.users.service import UsersService
from peerconnect.realtime.channels import RealtimeChannelManager
from peerconnect.settings import settings


def get_channels(request: Request) -> RealtimeChannelManager:
	return request.app.state.channels


def get_notifier(channels: RealtimeChannelManager = Depends(get_channels)) -> EventNotifier:
	return EventNotifier(NotificationsRepository(), channels)


def get_visibility() -> VisibilityResolver:
	return VisibilityResolver(ModulesRepository())


def get_moderation_gate(request: Request) -> ModerationGate:
	keywords = KeywordGate(settings.moderation_banned_keywords)
	http: Optional[httpx.AsyncClient] = getattr(request.app.state, "http", None)
	if not settings.moderation_ai_enabled or not settings.openai_api_key or http is None:
		return ModerationGate(keywords)
	classifier = OpenAIClassifier(
		http=http,
		api_key=settings.openai_api_key,
		base_url=settings.openai_base_url,
		model=settings.moderation_model,
		request_timeout=settings.moderation_timeout_seconds,
	)
	return ModerationGate(keywords, classifier)


def get_discussion_service(
	channels: RealtimeChannelManager = Depends(get_channels),
	notifier: EventNotifier = Depends(get_notifier),
	visibility: VisibilityResolver = Depends(get_visibility),
	moderation: ModerationGate = Depends(get_moderation_gate),
) -> DiscussionService:
	return DiscussionService(DiscussionsRepository(), visibility, notifier, moderation, channels)


def get_messaging_service(channels: RealtimeChannelManager = Depends(get_channels)) -> MessagingService:
	return MessagingService(MessagingRepository(), channels)


def get_materials_service(notifier: EventNotifier = Depends(get_notifier)) -> MaterialsService:
	return MaterialsService(MaterialsRepository(), notifier, MaterialStorage(settings.upload_root))


def get_notification_service() -> NotificationService:
	return NotificationService()


def get_modules_service() -> ModulesService:
	return ModulesService()


def get_users_service() -> UsersService:
	return UsersService()
