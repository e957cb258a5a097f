"""
Configuration validation for IntelHub.

Checks run during application startup so misconfiguration is reported with
actionable messages instead of failing on the first request.
"""

from __future__ import annotations

from typing import Any

from .auth.factory import get_auth_providers, get_form_providers
from .config import settings
from .database.connection import test_database_connection
from .logging import get_logger

logger = get_logger(__name__)

DEFAULT_SESSION_SECRET = "change-me-in-production"


class ValidationError(Exception):
    """Raised when application validation fails."""


def _is_production() -> bool:
    return settings.environment.lower() in ("production", "prod")


async def validate_database_connection() -> dict[str, Any]:
    """Validate that the database is accessible and responsive."""
    results: dict[str, Any] = {"valid": True, "warnings": [], "errors": []}

    success, error_message = await test_database_connection()
    if success:
        logger.info("Database connection validation successful")
    else:
        results["valid"] = False
        results["errors"].append(error_message)
        logger.error("Database connection validation failed", error=error_message)

    return results


async def validate_auth_configuration() -> dict[str, Any]:
    """
    Validate authentication providers and session settings.

    Unknown strategies are errors. Having no form provider only warns, since
    API tokens still authenticate.
    """
    results: dict[str, Any] = {
        "valid": True,
        "warnings": [],
        "errors": [],
        "auth_info": {"providers": list(settings.auth_providers)},
    }

    try:
        providers = get_auth_providers()
    except ValueError as e:
        results["valid"] = False
        results["errors"].append(str(e))
        logger.error("Invalid authentication provider configuration", error=str(e))
        return results

    if not get_form_providers(providers):
        warning = "No form provider configured, users cannot log in with a password"
        results["warnings"].append(warning)
        logger.warning(warning)

    if settings.session_secret == DEFAULT_SESSION_SECRET:
        if _is_production():
            error = "INTELHUB_SESSION_SECRET must be set in production"
            results["valid"] = False
            results["errors"].append(error)
            logger.error(error)
        else:
            results["warnings"].append("Using the default session secret")

    if _is_production() and not settings.session_cookie_secure:
        results["warnings"].append("Session cookie is not marked secure in production")

    return results


async def validate_startup_configuration() -> dict[str, Any]:
    """Run every startup check and combine their results."""
    logger.info("Starting application configuration validation")

    db_results = await validate_database_connection()
    auth_results = await validate_auth_configuration()

    combined_results = {
        "overall_valid": db_results["valid"] and auth_results["valid"],
        "database": db_results,
        "auth": auth_results,
        "environment": {
            "environment": settings.environment,
            "debug": settings.debug,
        },
    }

    if combined_results["overall_valid"]:
        logger.info("Application configuration validation completed successfully")
    else:
        logger.error(
            "Application configuration validation failed",
            errors=db_results["errors"] + auth_results["errors"],
        )

    warnings = db_results["warnings"] + auth_results["warnings"]
    if warnings:
        logger.warning("Configuration warnings detected", warnings=warnings)

    return combined_results


def get_startup_recommendations(validation_results: dict[str, Any]) -> list[str]:
    recommendations = []

    if not validation_results.get("database", {}).get("valid", False):
        recommendations.append(
            "Database connection failed - check that PostgreSQL is running and accessible"
        )
        return recommendations

    if not validation_results["auth"]["auth_info"]["providers"]:
        recommendations.append("Configure INTELHUB_AUTH_PROVIDERS to enable password logins")

    if not validation_results["overall_valid"]:
        recommendations.append("Fix configuration errors before deploying to production")

    return recommendations
