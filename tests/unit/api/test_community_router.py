"""Tests for the community analysis endpoints."""

from __future__ import annotations

import pytest
from conftest import SIX_MEMBER_ROSTER, TWO_SUBGROUP_ROSTER
from fastapi.testclient import TestClient

from api.main import create_app


@pytest.fixture
def client():
    with TestClient(create_app()) as client:
        yield client


class TestAnalyzeEndpoint:
    def test_six_member_community(self, client):
        response = client.post(
            "/api/community/analyze", json={"community_id": "six", "members": SIX_MEMBER_ROSTER}
        )
        assert response.status_code == 200

        data = response.json()
        assert data["community_id"] == "six"
        assert data["isolation_count"] == 1
        assert data["hole_count"] == 1
        assert data["bridge_count"] == 0
        assert data["decomposition"]["relationship_count"] == 4
        assert data["decomposition"]["health_strategy"] == "whole_graph"
        assert data["decomposition"]["isolation_risk"] == [4]
        assert data["priorities"][0] == {"member_id": 4, "priority": 80.0}
        assert data["report"].startswith("Community analysis: six\n")

    def test_members_carry_derived_scores(self, client):
        response = client.post("/api/community/analyze", json={"members": SIX_MEMBER_ROSTER})
        members = {m["id"]: m for m in response.json()["decomposition"]["members"]}
        assert members[4]["boundary_score"] == pytest.approx(1.0)
        assert members[1]["boundary_score"] == pytest.approx(0.0)

    def test_request_min_strength(self, client):
        response = client.post(
            "/api/community/analyze", json={"members": SIX_MEMBER_ROSTER, "min_strength": 10}
        )
        assert response.status_code == 200
        assert response.json()["decomposition"]["relationship_count"] == 0
        assert response.json()["decomposition"]["relationships"] == []

    def test_config_environment(self, monkeypatch, client):
        monkeypatch.setenv("CONFIG_GRAPH_MIN_STRENGTH", "10")
        response = client.post("/api/community/analyze", json={"members": SIX_MEMBER_ROSTER})
        assert response.json()["decomposition"]["relationship_count"] == 0

    def test_duplicate_member_ids(self, client):
        members = [{"id": 1}, {"id": 1}]
        response = client.post("/api/community/analyze", json={"members": members})
        assert response.status_code == 422
        assert "already in community" in response.json()["detail"]

    def test_invalid_rating(self, client):
        response = client.post("/api/community/analyze", json={"members": [{"id": 1, "last_rating": 9}]})
        assert response.status_code == 422

    def test_negative_min_strength(self, client):
        response = client.post("/api/community/analyze", json={"members": [], "min_strength": -1})
        assert response.status_code == 422

    def test_empty_roster(self, client):
        response = client.post("/api/community/analyze", json={"members": []})
        assert response.status_code == 200
        data = response.json()
        assert data["health_score"] == pytest.approx(100.0)
        assert data["event_times"] == []
        assert data["priorities"] == []


class TestDecompositionEndpoint:
    def test_two_subgroups(self, client):
        payload = {
            "community_id": "two",
            "members": TWO_SUBGROUP_ROSTER,
            "subgroup_a": "floor2",
            "subgroup_b": "chess",
        }
        response = client.post("/api/community/decomposition", json=payload)
        assert response.status_code == 200

        data = response.json()
        assert data["subgroup_a"] == "floor2"
        assert data["overlap_size"] == 1
        assert data["bridge_members"] == [3]
        assert data["is_cohesive"] is True
        assert data["health_strategy"] == "decomposition"
        assert "Decomposition over floor2 and chess" in data["diagnosis"]

    def test_subgroups_required(self, client):
        response = client.post("/api/community/decomposition", json={"members": TWO_SUBGROUP_ROSTER})
        assert response.status_code == 422


class TestFiltrationEndpoint:
    def test_filtration(self, client):
        response = client.post("/api/community/filtration", json={"members": TWO_SUBGROUP_ROSTER})
        assert response.status_code == 200

        data = response.json()
        assert data["max_strength"] > 0
        assert data["threshold"] == pytest.approx(0.3 * data["max_strength"])
        for barcode in data["barcodes"]:
            assert barcode["dimension"] == 0
            assert barcode["birth"] == 0.0

    def test_no_relationships(self, client):
        response = client.post(
            "/api/community/filtration", json={"members": SIX_MEMBER_ROSTER, "min_strength": 10}
        )
        assert response.json()["barcodes"] == []
        assert response.json()["max_strength"] == 1.0


class TestHealthEndpoint:
    def test_healthy(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "reslife-api"
        assert data["config"]["validated"] is True
