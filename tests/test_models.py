from datetime import date, timedelta
from unittest import mock

import pytest
from django.core.exceptions import ValidationError
from django.db import DatabaseError

from warranties.exceptions import PersistenceError
from warranties.models import Warranty


pytestmark = pytest.mark.django_db


# ============================================================
# USER
# ============================================================

def test_delivery_email_prefers_notification_email(user):
    assert user.delivery_email == "a@x.com"


def test_delivery_email_falls_back_to_login_email(other_user):
    assert other_user.delivery_email == "ben@x.com"


def test_display_name_falls_back_to_username(user, other_user):
    assert user.display_name == "Asha Rao"
    assert other_user.display_name == "ben"


# ============================================================
# DEFAULTS
# ============================================================

def test_new_warranty_defaults(make_warranty):
    warranty = make_warranty()

    assert warranty.reminder_preference == Warranty.ReminderPreference.ONE_WEEK
    assert warranty.last_notified_at is None
    assert warranty.created_at is not None
    assert warranty.updated_at is not None


def test_expiry_may_precede_purchase(make_warranty):
    warranty = make_warranty(
        purchase_date=date(2026, 1, 1),
        expiry_date=date(2025, 1, 1),
    )
    warranty.full_clean()


def test_product_name_is_required(user):
    warranty = Warranty(
        owner=user,
        product_name="",
        purchase_date=date(2026, 1, 1),
        expiry_date=date(2027, 1, 1),
    )
    with pytest.raises(ValidationError) as excinfo:
        warranty.full_clean()

    assert "product_name" in excinfo.value.message_dict


def test_days_until_expiry(make_warranty, today):
    warranty = make_warranty(expiry_date=today + timedelta(days=7))

    assert warranty.days_until_expiry(today) == 7
    assert not warranty.is_expired(today)
    assert warranty.is_expired(today + timedelta(days=8))


# ============================================================
# OWNER-SCOPED ACCESS
# ============================================================

def test_for_owner_lists_only_own_warranties_by_expiry(make_warranty, user, other_user):
    later = make_warranty(product_name="TV", expiry_date=date(2027, 5, 1))
    sooner = make_warranty(product_name="Phone", expiry_date=date(2026, 5, 1))
    make_warranty(owner=other_user, product_name="Laptop")

    assert list(Warranty.objects.for_owner(user)) == [sooner, later]


def test_get_for_owner_hides_other_users_records(make_warranty, user, other_user):
    warranty = make_warranty()

    assert Warranty.objects.get_for_owner(warranty.pk, user) == warranty
    with pytest.raises(Warranty.DoesNotExist):
        Warranty.objects.get_for_owner(warranty.pk, other_user)


def test_update_for_owner_cannot_change_owner(make_warranty, user, other_user):
    warranty = make_warranty()

    updated = Warranty.objects.update_for_owner(
        warranty.pk,
        user,
        brand="Breville",
        owner=other_user,
        owner_id=other_user.pk,
    )

    updated.refresh_from_db()
    assert updated.brand == "Breville"
    assert updated.owner == user


def test_update_for_owner_rejects_other_user(make_warranty, other_user):
    warranty = make_warranty()

    with pytest.raises(Warranty.DoesNotExist):
        Warranty.objects.update_for_owner(warranty.pk, other_user, brand="X")


def test_delete_for_owner(make_warranty, user, other_user):
    warranty = make_warranty()

    assert Warranty.objects.delete_for_owner(warranty.pk, other_user) is False
    assert Warranty.objects.filter(pk=warranty.pk).exists()

    assert Warranty.objects.delete_for_owner(warranty.pk, user) is True
    assert not Warranty.objects.filter(pk=warranty.pk).exists()


# ============================================================
# DUE FOR REMINDER
# ============================================================

def test_due_for_reminder_matches_target_dates_only(make_warranty, today, now):
    targets = [today + timedelta(days=1), today + timedelta(days=7), date(2026, 4, 10)]
    due = [make_warranty(product_name=f"due {d}", expiry_date=d) for d in targets]
    make_warranty(product_name="today", expiry_date=today)
    make_warranty(product_name="two days", expiry_date=today + timedelta(days=2))
    make_warranty(product_name="thirty days", expiry_date=today + timedelta(days=30))

    found = Warranty.objects.due_for_reminder(targets, now - timedelta(hours=12))

    assert set(found) == set(due)


def test_due_for_reminder_applies_suppression_window(make_warranty, today, now):
    target = today + timedelta(days=7)
    not_before = now - timedelta(hours=12)

    never = make_warranty(product_name="never", expiry_date=target)
    stale = make_warranty(
        product_name="stale", expiry_date=target,
        last_notified_at=now - timedelta(hours=13),
    )
    make_warranty(
        product_name="recent", expiry_date=target,
        last_notified_at=now - timedelta(hours=2),
    )
    make_warranty(
        product_name="boundary", expiry_date=target,
        last_notified_at=not_before,
    )

    found = Warranty.objects.due_for_reminder([target], not_before)

    assert set(found) == {never, stale}


# ============================================================
# MARK NOTIFIED
# ============================================================

def test_mark_notified_persists_timestamp(make_warranty, now):
    warranty = make_warranty()

    warranty.mark_notified(now)

    warranty.refresh_from_db()
    assert warranty.last_notified_at == now


def test_mark_notified_only_writes_notification_fields(make_warranty, now):
    warranty = make_warranty(brand="Breville")
    Warranty.objects.filter(pk=warranty.pk).update(brand="Sage")

    warranty.mark_notified(now)

    warranty.refresh_from_db()
    assert warranty.brand == "Sage"


def test_mark_notified_wraps_database_errors(make_warranty, now):
    warranty = make_warranty()

    with mock.patch.object(Warranty, "save", side_effect=DatabaseError("disk full")):
        with pytest.raises(PersistenceError) as excinfo:
            warranty.mark_notified(now)

    assert isinstance(excinfo.value.__cause__, DatabaseError)


def test_mark_notified_fails_for_deleted_row(make_warranty, now):
    warranty = make_warranty()
    Warranty.objects.filter(pk=warranty.pk).delete()

    with pytest.raises(PersistenceError):
        warranty.mark_notified(now)
