import logging

import psutil

logger = logging.getLogger(__name__)


def log_system_status(
    store_name: str,
    total_sessions: int,
    evicted: int = 0,
    include_process_rss: bool = True,
) -> None:
    """Log Store and system resource stats after an eviction pass."""
    try:
        vm = psutil.virtual_memory()
        process_rss_mb: int | None = None
        if include_process_rss:
            try:
                current_process = psutil.Process()
                process_rss_mb = current_process.memory_info().rss // (1024**2)
            except Exception:
                process_rss_mb = None

        msg = (
            f"Store={store_name} | sessions={total_sessions} | evicted={evicted} | "
            f"RAM used={vm.percent:.1f}% "
            f"({vm.used // (1024**2)}MB/{vm.total // (1024**2)}MB)"
            + (
                f" | Process RSS={process_rss_mb}MB"
                if process_rss_mb is not None
                else ""
            )
        )
        logger.info(msg)
    except Exception as exc:  # pragma: no cover
        logger.debug(f"Failed to log system status: {exc}")
