"""Tests for CorsPolicy — pure policy derivation from the deployment mode."""

import dataclasses

import pytest

from l2rr2l_api.core.cors_policy import DEV_ORIGINS, CorsPolicy


def test_production_disables_cors():
    policy = CorsPolicy.for_deployment_mode("production")
    assert not policy.enabled
    assert policy.allowed_origins == ()


@pytest.mark.parametrize("mode", ["development", "test", "", "Production", "staging"])
def test_any_other_mode_permits_exactly_dev_origins(mode):
    policy = CorsPolicy.for_deployment_mode(mode)
    assert policy.enabled
    assert set(policy.allowed_origins) == {
        "http://localhost:5173", "http://127.0.0.1:5173",
    }


def test_credentials_always_allowed():
    assert CorsPolicy.for_deployment_mode("production").allow_credentials
    assert CorsPolicy.for_deployment_mode("development").allow_credentials


def test_allows_only_listed_origins():
    policy = CorsPolicy.for_deployment_mode("development")
    for origin in DEV_ORIGINS:
        assert policy.allows(origin)
    assert not policy.allows("http://evil.example.com")
    assert not policy.allows("http://localhost:3000")
    assert not policy.allows(None)


def test_production_allows_nothing():
    policy = CorsPolicy.for_deployment_mode("production")
    assert not policy.allows("http://localhost:5173")


def test_policy_is_immutable():
    policy = CorsPolicy.for_deployment_mode("development")
    with pytest.raises(dataclasses.FrozenInstanceError):
        policy.allow_credentials = False
