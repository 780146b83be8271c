"""
Prometheus metrics.

- FastAPI: request count, latency (Instrumentator)
- Stability: exceptions_total, db_errors_total
- Business: photo uploads, likes, deletes, logins, registrations
"""
from prometheus_client import REGISTRY, Counter, Gauge, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

from timeline.config import get_settings

# --- Stability ---
exceptions_total = Counter(
    "timeline_exceptions_total",
    "Total unhandled exceptions",
    registry=REGISTRY,
)
db_errors_total = Counter(
    "timeline_db_errors_total",
    "Total database session/transaction errors",
    registry=REGISTRY,
)

# --- Auth ---
user_registration_total = Counter(
    "timeline_user_registration_total",
    "Total registration attempts",
    ["result"],  # success | failure
    registry=REGISTRY,
)
user_login_total = Counter(
    "timeline_user_login_total",
    "Total login attempts",
    ["result"],  # success | failure
    registry=REGISTRY,
)
login_duration_seconds = Histogram(
    "timeline_login_duration_seconds",
    "Login request duration in seconds",
    ["result"],
    buckets=(0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 3.0, 5.0),
    registry=REGISTRY,
)

# --- Photos ---
photo_upload_total = Counter(
    "timeline_photo_upload_total",
    "Total number of photo upload attempts",
    ["upload_method", "result"],  # upload_method: url | file, result: success | rejected | failure
    registry=REGISTRY,
)
photo_upload_file_size_bytes = Histogram(
    "timeline_photo_upload_file_size_bytes",
    "Accepted photo upload file size in bytes",
    buckets=(1024, 10240, 102400, 512000, 1024000, 2048000, 5242880),  # 1KB to 5MB
    registry=REGISTRY,
)
photo_like_total = Counter(
    "timeline_photo_like_total",
    "Total number of like operations",
    ["result"],  # success | not_found
    registry=REGISTRY,
)
photo_delete_total = Counter(
    "timeline_photo_delete_total",
    "Total number of delete operations",
    ["result"],  # success | not_found
    registry=REGISTRY,
)


# --- Identity ---
app_info = Gauge(
    "timeline_app_info",
    "Application identity (labels only, value is 1)",
    ["app", "version", "environment"],
    registry=REGISTRY,
)


def setup_prometheus(app) -> None:
    """
    Register FastAPI instrumentation and expose /metrics.
    """
    settings = get_settings()
    app_info.labels(
        app=settings.app_name,
        version=settings.app_version,
        environment=settings.environment.value,
    ).set(1)

    # status 라벨을 2xx 대신 구체 코드(200, 201, 404 등)로 노출
    Instrumentator(should_group_status_codes=False).instrument(app).expose(
        app, endpoint="/metrics"
    )
