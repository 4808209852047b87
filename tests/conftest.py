"""
Pytest configuration and shared fixtures

This file contains test fixtures that can be used across all tests.
The fixtures build small documents shaped like the Austin "Food Establishment
Inspection Scores" ``rows.json`` export, so no test needs the network.

Learn more: https://docs.pytest.org/en/stable/fixture.html
"""

import json

import pytest

# Socrata system columns come first in every rows.json export
SYSTEM_COLUMNS = ["sid", "id", "position", "created_at", "updated_at", "meta"]
DATA_COLUMNS = [
    "Restaurant Name",
    "Zip Code",
    "Inspection Date",
    "Score",
    "Address",
    "Facility ID",
    "Process Description",
]

# 2013-01-16T00:00:00Z
JAN_16_2013 = 1358294400


def location(street, city="AUSTIN", state="TX", zip_code="78701",
             latitude="30.26392", longitude="-97.74431"):
    """Build a Socrata location array with a JSON-encoded human address."""
    human_address = json.dumps(
        {"address": street, "city": city, "state": state, "zip": zip_code}
    )
    return [human_address, latitude, longitude, None, False]


@pytest.fixture
def make_row():
    """
    Factory for one raw row aligned with SYSTEM_COLUMNS + DATA_COLUMNS.

    Scope: function (created fresh for each test)
    """
    counter = {"sid": 0}

    def _make_row(name="111 Murphys Deli", street="111 CONGRESS AVE",
                  facility_id="10637887", date=JAN_16_2013, score="96",
                  address=None, **location_kwargs):
        counter["sid"] += 1
        sid = counter["sid"]
        if address is None:
            address = location(street, **location_kwargs)
        return [
            sid, f"row-{sid}", sid, 1372868120, 1372868120, None,
            name, "78701", date, score, address, facility_id,
            "Routine Inspection",
        ]

    return _make_row


@pytest.fixture
def make_document():
    """
    Factory wrapping raw rows in a rows.json document.

    Scope: function (created fresh for each test)
    """
    def _make_document(rows, columns=None):
        names = columns if columns is not None else SYSTEM_COLUMNS + DATA_COLUMNS
        return {
            "meta": {"view": {"id": "ecmv-9xxi", "columns": [{"name": n} for n in names]}},
            "data": rows,
        }

    return _make_document


@pytest.fixture
def murphys_record():
    """
    The named-field record for the reference "111 Murphys Deli" row.

    Scope: function (created fresh for each test)
    """
    return {
        "Restaurant Name": "111 Murphys Deli",
        "Zip Code": "78701",
        "Inspection Date": JAN_16_2013,
        "Score": "96",
        "Address": location("111 CONGRESS AVE"),
        "Facility ID": "10637887",
        "Process Description": "Routine Inspection",
    }


@pytest.fixture
def sample_document(make_row, make_document):
    """
    A document with three inspections of two businesses.

    Rows 0 and 2 are the same facility; row 2 carries a different name and
    street to exercise first-seen-wins.
    """
    return make_document([
        make_row(),
        make_row(name="Hoover's Cooking", street="2002 MANOR RD",
                 facility_id="2800365", date=JAN_16_2013 + 86400, score="88",
                 zip_code="78722", latitude="30.28357", longitude="-97.71987"),
        make_row(name="Murphys Deli (renamed)", street="113 CONGRESS AVE",
                 date=JAN_16_2013 + 2 * 86400, score="100"),
    ])


# Mark tests based on their type for selective running
def pytest_configure(config):
    """
    Register custom pytest markers.

    This allows us to run specific test categories:
    - pytest -m unit        (run only unit tests)
    - pytest -m integration (run only integration tests)
    - pytest -m "not slow"  (skip slow tests)
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (isolated, fast)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (touches the filesystem end to end)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running (>1 second)"
    )
