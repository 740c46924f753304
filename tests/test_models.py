"""
Tests for model-level constraints on statuses, media types and ratings.
"""
import pytest
from sqlalchemy.exc import IntegrityError

from eventhub import models
from eventhub.core.database import one_of


def test_one_of_builds_in_clause():
    assert one_of("status", ("scheduled", "active")) == "status IN ('scheduled', 'active')"


def test_unknown_event_status_is_rejected(db, make_user):
    host = make_user("Host")
    db.add(models.Event(name="Odd", host_id=host.id, lat=0.0, lon=0.0, status="postponed"))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


@pytest.mark.parametrize("status", models.ATTENDEE_STATUSES)
def test_known_attendee_statuses_are_accepted(db, make_user, make_event, status):
    host = make_user("Host")
    guest = make_user("Guest")
    event = make_event(host)

    db.add(models.EventAttendee(user_id=guest.id, event_id=event.id, status=status))
    db.commit()

    stored = db.query(models.EventAttendee).filter_by(event_id=event.id).one()
    assert stored.status == status


def test_unknown_media_type_is_rejected(db, make_user, make_event):
    host = make_user("Host")
    event = make_event(host)

    db.add(models.Media(type="audio", user_id=host.id, event_id=event.id))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_rating_outside_range_is_rejected(db, make_user, make_event):
    host = make_user("Host")
    guest = make_user("Guest")
    event = make_event(host)

    db.add(models.EventAttendee(user_id=guest.id, event_id=event.id, status="attending", rating=6))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()
