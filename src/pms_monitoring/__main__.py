"""Command-line entry point: ``python -m pms_monitoring``."""

from .monitor_service import run_monitor
from .service_runner import run_async_service
from .settings import SERVICE_NAME


def main() -> None:
    run_async_service(
        run_monitor,
        service_name=SERVICE_NAME,
        shutdown_message="PMS monitoring stopped",
    )


if __name__ == "__main__":
    main()
