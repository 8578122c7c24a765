"""
PyTest configuration and fixtures for the Maturity Optimizer.

This module provides shared test fixtures: optimizer configurations,
baseline chromosomes, goal sets and HTTP test clients.
"""

import os
import sys
from typing import Generator, AsyncGenerator, Dict, Any
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import AsyncClient, ASGITransport

# Add project root to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

# Keep test runs local: no token, no console noise
os.environ.setdefault("LOGFIRE_TOKEN", "")
os.environ.setdefault("LOGFIRE_CONSOLE", "false")

from main import app
from src.core.config import settings
from src.optimizer.core.alleles import Allele, ComparisonOperator
from src.optimizer.core.catalog import ImplementationGroup
from src.optimizer.core.chromosome import Chromosome
from src.optimizer.core.config import OptimizerConfig, create_test_config
from src.optimizer.goals.conditions import Condition
from src.optimizer.goals.strategic import StrategicGoals


# Override settings for testing
settings.environment = "testing"
settings.logfire_environment = "testing"
settings.optimizer_max_seconds = 30.0


@pytest.fixture
def test_config() -> OptimizerConfig:
    """Small, seeded configuration."""
    return create_test_config()


@pytest.fixture
def ig1_baseline() -> Chromosome:
    """IG1 chromosome with every gene at 0.33."""
    return Chromosome(ImplementationGroup.IG1, default=Allele.L33)


@pytest.fixture
def ig1_goals() -> StrategicGoals:
    """Empty goal set for IG1."""
    return StrategicGoals(ImplementationGroup.IG1)


@pytest.fixture
def asset_goal_ig1(ig1_goals) -> StrategicGoals:
    """IG1 goal set with a single asset-level goal ``>= 0.6``."""
    ig1_goals.add_goal(Condition(ComparisonOperator.GREATER_OR_EQUAL, 0.6))
    return ig1_goals


@pytest.fixture
def sample_case_data() -> Dict[str, Any]:
    """Case file content for an IG1 asset."""
    return {
        "name": "web-frontend",
        "implementation_group": "IG1",
        "default_level": 0.33,
        "current_state": {
            "PR_AC_CSC_4_7": 0.0,
            "ID_AM_CSC_1_1": 0.67,
        },
        "goals": [
            {"level": "asset", "operator": ">=", "threshold": 0.5},
            {"level": "function", "key": "PR", "operator": ">=", "threshold": 0.5},
        ],
        "constraints": [
            {"level": "gene", "key": "ID_AM_CSC_1_1", "operator": "=", "threshold": 0.67},
        ],
    }


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create a test client."""
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client
