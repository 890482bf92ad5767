from storage.repositories.conversation_repository import ConversationRepository
from storage.repositories.preferences_repository import PreferencesRepository
from storage.repositories.gamification_repository import GamificationRepository

__all__ = ["ConversationRepository", "PreferencesRepository", "GamificationRepository"]
