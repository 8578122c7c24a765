"""
Test suite for the main FastAPI application.

Tests the core application functionality including health endpoints,
middleware, error handling, the catalog and the optimization endpoint.
"""

import threading
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from httpx import AsyncClient

from main import app
from src.optimizer.core.engine import EvolutionEngine


class TestHealthEndpoints:
    """Test health check endpoints."""

    def test_root_endpoint(self, client: TestClient):
        """Test the root endpoint returns expected response."""
        response = client.get("/")
        assert response.status_code == 200

        data = response.json()
        assert data["message"] == "Maturity Optimizer API"
        assert data["status"] == "operational"
        assert data["version"] == "1.0.0"
        assert "docs" in data
        assert "health" in data

    def test_health_check_endpoint(self, client: TestClient):
        """Test the health check endpoint."""
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert data["service"] == "maturity-optimizer-api"
        assert data["environment"] == "testing"  # Set in conftest.py
        assert data["version"] == "1.0.0"

        assert data["checks"]["api"] == "operational"
        assert data["checks"]["optimizer"] == "operational"

    @pytest.mark.asyncio
    async def test_root_endpoint_async(self, async_client: AsyncClient):
        """Test the root endpoint with async client."""
        response = await async_client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "operational"


class TestMiddleware:
    """Test application middleware."""

    def test_cors_headers(self, client: TestClient):
        """Test CORS headers are set for cross-origin requests."""
        origin = "http://example.com"
        response = client.get("/", headers={"Origin": origin})

        # Credentialed CORS echoes the caller's origin rather than a wildcard
        assert "access-control-allow-origin" in response.headers
        assert response.headers["access-control-allow-origin"] in (origin, "*")
        assert response.headers["access-control-allow-credentials"] == "true"

    def test_process_time_header(self, client: TestClient):
        """Test that process time header is added to responses."""
        response = client.get("/")

        assert "x-process-time" in response.headers
        assert float(response.headers["x-process-time"]) >= 0

    def test_request_id_header(self, client: TestClient):
        """Test that request ID header is added to responses."""
        response = client.get("/")

        assert "x-request-id" in response.headers
        assert len(response.headers["x-request-id"]) == 36  # UUID4 format with dashes


class TestErrorHandling:
    """Test error handling and exception middleware."""

    def test_404_not_found(self, client: TestClient):
        """Test 404 error handling."""
        response = client.get("/non-existent-endpoint")
        assert response.status_code == 404

        data = response.json()
        assert data["status_code"] == 404
        assert "error" in data
        assert "timestamp" in data

    def test_method_not_allowed(self, client: TestClient):
        """Test 405 method not allowed."""
        response = client.post("/health")  # Health endpoint only accepts GET
        assert response.status_code == 405


class TestCatalogEndpoint:
    """Test the gene catalog endpoint."""

    def test_ig1_catalog(self, client: TestClient):
        response = client.get("/api/v1/catalog/IG1")
        assert response.status_code == 200

        data = response.json()
        assert data["implementation_group"] == "IG1"
        assert data["gene_count"] == 47
        assert [f["code"] for f in data["functions"]] == ["ID", "PR", "DE", "RS"]
        categories = [c for f in data["functions"] for c in f["categories"]]
        assert len(categories) == 15
        assert sum(len(c["genes"]) for c in categories) == 47

    @pytest.mark.parametrize("group,count", [("ig2", 107), ("3", 167)])
    def test_group_aliases(self, client: TestClient, group, count):
        response = client.get(f"/api/v1/catalog/{group}")
        assert response.status_code == 200
        assert response.json()["gene_count"] == count

    def test_unknown_group(self, client: TestClient):
        response = client.get("/api/v1/catalog/IG7")
        assert response.status_code == 404
        assert "IG7" in response.json()["error"]


class TestOptimizationEndpoint:
    """Test the optimization endpoint."""

    def test_empty_case_converges_immediately(self, client: TestClient):
        response = client.post("/api/v1/optimizations", json={
            "case": {"name": "empty", "implementation_group": "IG1", "default_level": 0.33},
            "population_size": 10,
            "generations": 5,
            "random_seed": 1,
        })
        assert response.status_code == 200

        data = response.json()
        assert data["converged"] is True
        assert data["generations"] == 1
        assert data["termination_reason"] == "converged"
        assert data["unsatisfied"] == []
        assert len(data["best_state"]) == 47
        assert set(data["function_scores"]) == {"ID", "PR", "DE", "RS"}

    def test_sample_case(self, client: TestClient, sample_case_data):
        response = client.post("/api/v1/optimizations", json={
            "case": sample_case_data,
            "population_size": 30,
            "generations": 200,
            "random_seed": 7,
        })
        assert response.status_code == 200

        data = response.json()
        assert data["name"] == "web-frontend"
        assert data["scores"]["feasible"] is True
        assert data["best_state"]["ID_AM_CSC_1_1"] == 0.67
        if data["converged"]:
            assert data["asset_score"] >= 0.5 - 1e-6
            assert data["function_scores"]["PR"] >= 0.5 - 1e-6
            assert data["unsatisfied"] == []
        changed = {change["gene"]: change for change in data["changed_genes"]}
        for gene, change in changed.items():
            assert change["current"] != change["target"]
            assert data["best_state"][gene] == change["target"]

    @pytest.mark.asyncio
    async def test_optimization_async(self, async_client: AsyncClient, sample_case_data):
        response = await async_client.post("/api/v1/optimizations", json={
            "case": sample_case_data,
            "population_size": 10,
            "generations": 3,
            "random_seed": 3,
        })
        assert response.status_code == 200
        assert response.json()["generations"] <= 3

    @pytest.mark.asyncio
    async def test_optimization_runs_off_the_event_loop(self, async_client: AsyncClient, sample_case_data):
        """Evolution runs on a worker thread, not on the thread serving requests."""
        original_run = EvolutionEngine.run
        threads = []

        def recording_run(engine):
            threads.append(threading.get_ident())
            return original_run(engine)

        with patch.object(EvolutionEngine, "run", recording_run):
            response = await async_client.post("/api/v1/optimizations", json={
                "case": sample_case_data,
                "population_size": 10,
                "generations": 2,
                "random_seed": 5,
            })

        assert response.status_code == 200
        assert len(threads) == 1
        assert threads[0] != threading.get_ident()

    def test_unknown_gene_rejected(self, client: TestClient, sample_case_data):
        sample_case_data["current_state"]["NOT_A_GENE"] = 0.33
        response = client.post("/api/v1/optimizations", json={"case": sample_case_data})
        assert response.status_code == 422

    def test_invalid_operator_rejected(self, client: TestClient, sample_case_data):
        sample_case_data["goals"][0]["operator"] = "!="
        response = client.post("/api/v1/optimizations", json={"case": sample_case_data})
        assert response.status_code == 422

    def test_population_limit(self, client: TestClient, sample_case_data):
        response = client.post("/api/v1/optimizations", json={
            "case": sample_case_data,
            "population_size": 1_000_000,
        })
        assert response.status_code == 422
        assert "population_size" in response.json()["error"]

    def test_inconsistent_configuration(self, client: TestClient, sample_case_data):
        response = client.post("/api/v1/optimizations", json={
            "case": sample_case_data,
            "population_size": 2,
            "elite_size": 5,
        })
        assert response.status_code == 422


class TestApplicationConfiguration:
    """Test application configuration and metadata."""

    def test_openapi_schema(self, client: TestClient):
        """Test OpenAPI schema generation."""
        response = client.get("/api/openapi.json")
        assert response.status_code == 200

        schema = response.json()
        assert schema["info"]["title"] == "Maturity Optimizer"
        assert schema["info"]["version"] == "1.0.0"
        assert "/api/v1/optimizations" in schema["paths"]
        assert "/api/v1/catalog/{group}" in schema["paths"]

    def test_docs_endpoint(self, client: TestClient):
        """Test API documentation endpoint."""
        response = client.get("/api/docs")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
