# app/domains/tag/tasks.py

import logging
from typing import Any, Dict

from app.core.database import get_async_session_context
from app.domains.tag import services as tag_services

logger = logging.getLogger(__name__)


async def release_auto_tag_reservations_task(ctx: Dict[str, Any]) -> Dict[str, Any]:
    """
    ARQ cron 으로 매일 밤 실행되어, 남아 있는 자동 태그 예약을 모두 해제합니다.
    """
    logger.info("Background job started: releasing auto tag reservations")
    async with get_async_session_context() as db:
        released = await tag_services.stop_all_auto_tags(db)
    logger.info("Background job finished: %d reservation(s) released", released)
    return {"status": "ok", "released_count": released}
