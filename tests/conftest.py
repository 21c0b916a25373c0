from datetime import date, datetime, timezone as dt_timezone

import pytest
from django.contrib.auth import get_user_model

from warranties.models import Warranty


# 07:07 in Asia/Kolkata on 2026-03-10
RUN_AT = datetime(2026, 3, 10, 1, 37, tzinfo=dt_timezone.utc)
TODAY = date(2026, 3, 10)


@pytest.fixture
def now():
    return RUN_AT


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def user(db):
    return get_user_model().objects.create_user(
        username="asha",
        email="asha@login.example",
        notification_email="a@x.com",
        first_name="Asha",
        last_name="Rao",
        password="not-used",
    )


@pytest.fixture
def other_user(db):
    return get_user_model().objects.create_user(
        username="ben",
        email="ben@x.com",
        password="not-used",
    )


@pytest.fixture
def make_warranty(db, user):
    def factory(**fields):
        fields.setdefault("owner", user)
        fields.setdefault("product_name", "Espresso Machine")
        fields.setdefault("purchase_date", date(2025, 3, 17))
        fields.setdefault("expiry_date", date(2026, 3, 17))
        return Warranty.objects.create(**fields)

    return factory
