import logging

from fastapi import Request

from stk_relay.config import Settings
from stk_relay.providers.base import BaseProvider
from stk_relay.providers.lipia import LipiaProvider
from stk_relay.providers.simulated import SimulatedProvider

logger = logging.getLogger(__name__)


def build_provider(settings: Settings) -> BaseProvider:
    """Pick the live or demo provider once, at startup."""
    if settings.demo_mode:
        provider = SimulatedProvider()
    else:
        provider = LipiaProvider(
            api_key=settings.LIPIA_API_KEY,
            base_url=settings.LIPIA_BASE_URL,
            timeout=settings.PROVIDER_TIMEOUT_SECONDS,
        )
    logger.info(
        "%s provider initialized. Demo mode: %s",
        provider.provider_name, "ON" if provider.demo_mode else "OFF",
    )
    return provider


def get_provider(request: Request) -> BaseProvider:
    return request.app.state.provider
