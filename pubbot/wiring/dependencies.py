from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from pubbot.core.config import settings
from pubbot.application.ports.knowledge_base import KnowledgeBasePort
from pubbot.application.ports.llm import LLMPort
from pubbot.application.ports.reservation_api import ReservationApiPort
from pubbot.application.ports.session_store import SessionStorePort
from pubbot.application.use_cases.answer_question import AnswerQuestionUseCase
from pubbot.application.use_cases.handle_reservation_message import HandleReservationMessageUseCase
from pubbot.application.use_cases.reservation_conversation import ReservationConversationManager
from pubbot.infrastructure.knowledge.pub_info import PubInfoStore
from pubbot.infrastructure.llm.mock_llm import MockLLM
from pubbot.infrastructure.llm.openai_llm import OpenAILLM
from pubbot.infrastructure.reservations.http_client import ReservationApiClient
from pubbot.infrastructure.reservations.mock_client import MockReservationApi
from pubbot.infrastructure.store.memory_store import MemorySessionStore


@lru_cache
def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


@lru_cache
def get_llm() -> LLMPort:
    if settings.OPENAI_API_KEY and settings.OPENAI_API_KEY.strip():
        return OpenAILLM()
    return MockLLM()


@lru_cache
def get_knowledge_base() -> KnowledgeBasePort:
    return PubInfoStore(data_dir=settings.PUB_DATA_DIR, timezone=get_timezone())


@lru_cache
def get_session_store() -> SessionStorePort:
    return MemorySessionStore()


@lru_cache
def get_reservation_api() -> ReservationApiPort:
    logger = logging.getLogger(__name__)
    if settings.RESERVATION_USE_MOCK or (
        not settings.RESERVATION_API_URL and settings.ENV.lower() in {"dev", "local"}
    ):
        logger.info("Using MockReservationApi (ENV=%s)", settings.ENV)
        return MockReservationApi()

    # Missing URL/key surfaces on the first call as ReservationConfigError
    logger.info("Using ReservationApiClient base_url present=%s", bool(settings.RESERVATION_API_URL))
    return ReservationApiClient(
        base_url=settings.RESERVATION_API_URL,
        api_key=settings.RESERVATION_API_KEY,
        timeout_seconds=settings.RESERVATION_TIMEOUT_SECONDS,
        max_retries=settings.RESERVATION_MAX_RETRIES,
    )


def get_conversation_manager() -> ReservationConversationManager:
    return ReservationConversationManager(api=get_reservation_api(), timezone=get_timezone())


def get_handle_reservation_message_use_case() -> HandleReservationMessageUseCase:
    return HandleReservationMessageUseCase(
        store=get_session_store(),
        manager=get_conversation_manager(),
    )


def get_answer_question_use_case() -> AnswerQuestionUseCase:
    return AnswerQuestionUseCase(llm=get_llm(), kb=get_knowledge_base())
