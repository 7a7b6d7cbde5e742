"""
Health Check

Performs connectivity checks for the generation model and the database.
"""

from typing import Callable

from faq_emergence.domain.entities import HealthCheckResult
from faq_emergence.infrastructure.model_clients.base import ModelClient
from faq_emergence.infrastructure.persistence.database import Database


HEALTH_CHECK_PROMPT = "Reply with only 'OK' if you can read this message."


def health_check_model(
    model_name: str,
    create_client_fn: Callable[[str], ModelClient],
) -> HealthCheckResult:
    """
    Execute a health check for the generation model.

    Args:
        model_name: Name of the model to check
        create_client_fn: Function to create a model client

    Returns:
        HealthCheckResult: Health check result
    """
    try:
        client = create_client_fn(model_name)
        response = client.generate(HEALTH_CHECK_PROMPT)
        if not response.output:
            return HealthCheckResult(
                component=model_name,
                success=False,
                latency_ms=response.latency_ms,
                error=f"{model_name} returned an empty response",
            )
        return HealthCheckResult(
            component=model_name,
            success=True,
            latency_ms=response.latency_ms,
            error=None
        )
    except Exception as e:
        return HealthCheckResult(
            component=model_name,
            success=False,
            latency_ms=None,
            error=str(e)
        )


def run_health_check(
    model_name: str,
    database: Database,
    create_client_fn: Callable[[str], ModelClient] | None = None,
) -> tuple[bool, list[HealthCheckResult]]:
    """
    Check the model and the database, printing one line per component.

    Uses faq_emergence.infrastructure.model_clients.create_client if create_client_fn is not specified.

    Args:
        model_name: Generation model name
        database: Database holding the parameter store
        create_client_fn: Function to create a model client (optional)

    Returns:
        tuple: (True if every component is healthy, list of all check results)
    """
    if create_client_fn is None:
        from faq_emergence.infrastructure.model_clients import create_client
        create_client_fn = create_client

    print("=== Health Check ===\n")
    results = [
        health_check_model(model_name, create_client_fn),
        database.health_check(),
    ]

    for result in results:
        print(f"  {result.component}... ", end="")
        if result.success:
            print(f"OK ({result.latency_ms}ms)")
        else:
            # Display only the first 100 characters of the error message
            error_short = result.error[:100] if result.error else "Unknown error"
            print("FAILED")
            print(f"    Error: {error_short}")

    print()
    return all(r.success for r in results), results
