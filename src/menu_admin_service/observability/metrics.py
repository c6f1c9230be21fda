"""Custom metrics for the menu admin service."""

from opentelemetry import metrics

# Get meter for menu admin service
meter = metrics.get_meter("menu-admin-svc")

login_attempt_counter = meter.create_counter(
    name="admin_login_attempts_total",
    description="Total number of admin login attempts by outcome",
    unit="1",
)

rate_limit_rejection_counter = meter.create_counter(
    name="rate_limit_rejections_total",
    description="Total number of requests rejected by a rate limiter",
    unit="1",
)

menu_mutation_counter = meter.create_counter(
    name="menu_mutations_total",
    description="Total number of menu create/update/delete operations by outcome",
    unit="1",
)


def record_login_attempt(outcome: str) -> None:
    """Record an admin login attempt.

    Args:
        outcome: One of "success", "invalid_password", "missing_password", "rate_limited"
    """
    login_attempt_counter.add(1, {"outcome": outcome})


def record_rate_limit_rejection(limiter: str) -> None:
    """Record a request rejected by a rate limiter.

    Args:
        limiter: Name of the limiter that rejected the request
    """
    rate_limit_rejection_counter.add(1, {"limiter": limiter})


def record_menu_mutation(operation: str, success: bool = True) -> None:
    """Record a menu mutation.

    Args:
        operation: The operation performed ("create", "update", "delete")
        success: Whether the mutation was persisted and verified
    """
    menu_mutation_counter.add(1, {"operation": operation, "success": success})
