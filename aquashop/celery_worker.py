# aquashop/celery_worker.py
from celery import Celery

from aquashop.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "aquashop",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# taski musza byc zaimportowane zeby Celery je zarejestrowal
celery_app.conf.imports = (
    "aquashop.services.notification_service",
)

celery_app.conf.timezone = "UTC"
