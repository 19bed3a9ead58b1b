import logging

from storefront.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging() -> None:
    """앱 시작 시 한 번 호출. uvicorn이 이미 핸들러를 붙였으면 레벨만 맞춘다."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("storefront").setLevel(settings.LOG_LEVEL.upper())
