"""Main application entry point for the sales tally service.

This module provides the FastAPI application factory and configuration
for running the service on the shop's device.
"""

import logging
import os
from typing import Any

import boto3
from fastapi import FastAPI

from sales_tally_service.handlers.api_handler import create_app
from sales_tally_service.observability import configure_logging, setup_observability
from sales_tally_service.repositories.state_repository import ShiftStateRepository
from sales_tally_service.services.aggregation_service import DEFAULT_TOP_SELLERS
from sales_tally_service.services.checkout_service import CheckoutSession
from sales_tally_service.services.shift_service import ShiftService

logger = logging.getLogger(__name__)


def get_dynamodb_resource() -> Any:
    """Create DynamoDB resource with appropriate configuration.

    A local endpoint (DynamoDB Local on the device) is used when
    DYNAMODB_ENDPOINT is set; otherwise the default AWS credential chain applies.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID", "local"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY", "local"),
        )

    logger.info(f"Using AWS DynamoDB in region {region}")
    return boto3.resource("dynamodb", region_name=region)


def get_top_sellers_limit() -> int:
    """Read TOP_SELLERS_LIMIT, falling back to the default on bad input."""
    raw = os.getenv("TOP_SELLERS_LIMIT", str(DEFAULT_TOP_SELLERS))
    try:
        limit = int(raw)
    except ValueError:
        logger.warning(f"Invalid TOP_SELLERS_LIMIT {raw!r}, using {DEFAULT_TOP_SELLERS}")
        return DEFAULT_TOP_SELLERS
    return max(0, limit)


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Creates the DynamoDB resource and state repository
    3. Seeds the business name from BUSINESS_NAME when none is stored
    4. Creates the shift service and checkout session
    5. Creates the FastAPI app and sets up observability

    Returns:
        Configured FastAPI application instance
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Initializing sales tally service...")

    table_name = os.getenv("DYNAMODB_STATE_TABLE", "shift-tally-state")
    state_repository = ShiftStateRepository(
        dynamodb_resource=get_dynamodb_resource(), table_name=table_name
    )
    logger.info(f"State repository configured - table: {table_name}")

    # Seed only; a name set through the API is never overwritten
    business_name = os.getenv("BUSINESS_NAME", "").strip()
    if business_name and not state_repository.load_business_name():
        state_repository.save_business_name(business_name)

    shift_service = ShiftService(
        state_repository=state_repository,
        top_sellers_limit=get_top_sellers_limit(),
    )

    # Cart lives for the life of the process and is never persisted
    app = create_app(shift_service=shift_service, checkout_session=CheckoutSession())
    setup_observability(app)

    logger.info("Sales tally service initialized successfully")
    return app


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "8001"))
    host = os.getenv("HOST", "127.0.0.1")

    logger.info(f"Starting server on {host}:{port}")

    uvicorn.run(
        "sales_tally_service.main:create_application",
        factory=True,
        host=host,
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
