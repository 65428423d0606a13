"""Pytest configuration and shared fixtures."""

import pytest
import os
import logging
from unittest.mock import Mock

# Disable logging during tests to reduce noise
logging.disable(logging.CRITICAL)


@pytest.fixture(autouse=True)
def clean_env():
    """Clean environment variables before each test."""
    env_vars_to_clean = [
        "OPENFDA_BASE_URL",
        "OPENFDA_API_KEY",
        "OPENFDA_REQUEST_TIMEOUT",
        "LOG_LEVEL",
    ]

    # Store original values
    original_values = {}
    for var in env_vars_to_clean:
        original_values[var] = os.environ.get(var)
        if var in os.environ:
            del os.environ[var]

    yield

    # Restore original values
    for var, value in original_values.items():
        if value is not None:
            os.environ[var] = value
        elif var in os.environ:
            del os.environ[var]


@pytest.fixture
def sample_label_record():
    """A trimmed openFDA drug label record."""
    return {
        "set_id": "b1c2d3e4-0000-4a5b-9c8d-1234567890ab",
        "id": "f0e1d2c3-1111-4b2a-8d7c-0987654321fe",
        "version": "7",
        "effective_time": "20240115",
        "indications_and_usage": [
            "Uses temporarily relieves minor aches and pains due to: headache, toothache, backache."
        ],
        "warnings": ["Allergy alert: Ibuprofen may cause a severe allergic reaction."],
        "dosage_and_administration": ["Adults: take 1 tablet every 4 to 6 hours while symptoms persist."],
        "openfda": {
            "brand_name": ["Advil"],
            "generic_name": ["IBUPROFEN"],
            "manufacturer_name": ["Haleon US Holdings LLC"],
            "product_ndc": ["0573-0150"],
            "package_ndc": ["0573-0150-20"],
            "route": ["ORAL"],
        },
    }


@pytest.fixture
def sample_label_response(sample_label_record):
    """A search response carrying one label."""
    return {
        "meta": {
            "disclaimer": "Do not rely on openFDA to make decisions regarding medical care.",
            "last_updated": "2024-06-01",
            "results": {"skip": 0, "limit": 3, "total": 1},
        },
        "results": [sample_label_record],
    }


@pytest.fixture
def make_response():
    """Factory for mocked ``requests`` responses."""

    def _make(status_code=200, json_data=None, text="", reason="OK"):
        response = Mock()
        response.status_code = status_code
        response.reason = reason
        response.text = text
        if isinstance(json_data, Exception):
            response.json.side_effect = json_data
        else:
            response.json.return_value = json_data
        return response

    return _make
