"""
Tests for the HTTP surface: discover rankings, recommendation settings and
media uploads with rollback on processing failure.
"""
import io

import pytest

from eventhub import models
from eventhub.api import upload as upload_api
from eventhub.core.exceptions import JobFailure


class FakeProcessor:
    """Stands in for the media processor; writes nothing, records calls."""

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    async def process(self, media_type, id, input_path, output_dir):
        self.calls.append((media_type, id, input_path, output_dir))
        if self.fail:
            raise JobFailure(id, f"Job {id} failed: ffmpeg exploded")

    async def process_avatar(self, id, input_path, output_dir):
        self.calls.append(("avatar", id, input_path, output_dir))
        if self.fail:
            raise JobFailure(id)


@pytest.fixture
def fake_processor(monkeypatch):
    processor = FakeProcessor()
    monkeypatch.setattr(upload_api, "media_processor", processor)
    return processor


def test_ping(client):
    resp = client.get("/api/ping")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Pong"


def test_discover_ranks_events(client, db, make_user, make_tag, make_event):
    music = make_tag("music")
    sports = make_tag("sports")
    friend = make_user("Friend")
    host = make_user("Host")
    me = make_user("Me", lat=52.52, lon=13.405, favourite_tags=[music], followees=[friend])

    # Host's past event was rated 4 and 2 -> host rating 3
    rater1, rater2 = make_user("R1"), make_user("R2")
    make_event(host, name="Last year", status="completed", attendees=[(rater1, 4), (rater2, 2)])

    plain = make_event(make_user("Other"), name="Plain", lat=40.0, lon=-3.7, tags=[sports])
    matching = make_event(host, name="Matching", lat=52.5, lon=13.4, tags=[music], attendees=[(friend, None)])

    db.add(models.Media(type="image", user_id=me.id, event_id=plain.id, file_available=True))
    db.add(models.Media(type="image", user_id=me.id, event_id=plain.id, file_available=False))
    db.commit()

    resp = client.get("/api/discover", params={"user_id": me.id})
    assert resp.status_code == 200
    data = resp.json()

    assert [e["name"] for e in data] == ["Matching", "Plain"]
    assert data[0]["host_rating"] == pytest.approx(3.0)
    assert data[0]["tags"] == ["music"]
    assert data[1]["media_count"] == 1
    assert data[0]["score"] > data[1]["score"]
    # completed events are not candidates
    assert "Last year" not in [e["name"] for e in data]
    assert matching.id == data[0]["id"]


def test_discover_unknown_user(client):
    resp = client.get("/api/discover", params={"user_id": "nobody"})
    assert resp.status_code == 404


def test_discover_without_events_is_client_error(client, make_user):
    me = make_user("Me")
    resp = client.get("/api/discover", params={"user_id": me.id})
    assert resp.status_code == 400


def test_recommendation_settings_default_and_update(client, make_user):
    me = make_user("Me")

    resp = client.get(f"/api/users/{me.id}/recommendation-settings")
    assert resp.status_code == 200
    assert resp.json() == {
        "tag_intersection_weight": 1.0,
        "followee_intersection_weight": 1.0,
        "average_event_rating_weight": 1.0,
        "distance_weight": 1.0,
        "media_count_weight": 1.0,
    }

    body = {
        "tag_intersection_weight": 2.0,
        "followee_intersection_weight": 0.0,
        "average_event_rating_weight": 0.5,
        "distance_weight": 3.0,
        "media_count_weight": 1.5,
    }
    resp = client.post(f"/api/users/{me.id}/recommendation-settings", json=body)
    assert resp.status_code == 200
    assert resp.json() == body

    assert client.get(f"/api/users/{me.id}/recommendation-settings").json() == body


def test_recommendation_settings_reject_negative_weights(client, make_user):
    me = make_user("Me")
    body = {
        "tag_intersection_weight": -1.0,
        "followee_intersection_weight": 0.0,
        "average_event_rating_weight": 0.0,
        "distance_weight": 0.0,
        "media_count_weight": 0.0,
    }
    resp = client.post(f"/api/users/{me.id}/recommendation-settings", json=body)
    assert resp.status_code == 422


def test_settings_affect_discover(client, make_user, make_tag, make_event):
    music = make_tag("music")
    friend = make_user("Friend")
    me = make_user("Me", favourite_tags=[music], followees=[friend])
    host = make_user("Host")
    make_event(host, name="Tagged", tags=[music])
    make_event(host, name="Social", attendees=[(friend, None)])

    zero = {
        "tag_intersection_weight": 0.0,
        "followee_intersection_weight": 5.0,
        "average_event_rating_weight": 0.0,
        "distance_weight": 0.0,
        "media_count_weight": 0.0,
    }
    client.post(f"/api/users/{me.id}/recommendation-settings", json=zero)

    data = client.get("/api/discover", params={"user_id": me.id}).json()
    assert [e["name"] for e in data] == ["Social", "Tagged"]


def test_upload_clip_marks_media_available(client, db, media_dirs, fake_processor, make_user, make_event):
    media_root, upload_root = media_dirs
    me = make_user("Me")
    event = make_event(me)

    resp = client.post(
        "/api/upload/clip",
        data={"user_id": me.id, "event_id": event.id},
        files={"file": ("clip.mp4", io.BytesIO(b"fake video"), "video/mp4")},
    )
    assert resp.status_code == 200
    media_id = resp.json()["id"]

    media = db.query(models.Media).filter(models.Media.id == media_id).one()
    assert media.type == "video"
    assert media.file_available is True

    media_type, job_id, input_path, output_dir = fake_processor.calls[0]
    assert (media_type, job_id) == ("video", media_id)
    assert input_path.endswith(f"{media_id}.mp4")
    assert output_dir == str(media_root / "video" / media_id)
    # raw upload is removed after processing
    assert list(upload_root.iterdir()) == []


def test_upload_failure_rolls_back(client, db, media_dirs, monkeypatch, make_user, make_event):
    media_root, upload_root = media_dirs
    monkeypatch.setattr(upload_api, "media_processor", FakeProcessor(fail=True))
    me = make_user("Me")
    event = make_event(me)

    resp = client.post(
        "/api/upload/image",
        data={"user_id": me.id, "event_id": event.id},
        files={"file": ("pic.jpg", io.BytesIO(b"fake image"), "image/jpeg")},
    )
    assert resp.status_code == 500

    assert db.query(models.Media).count() == 0
    assert list((media_root / "image").iterdir()) == []
    assert list(upload_root.iterdir()) == []


def test_upload_avatar_uses_user_id(client, media_dirs, fake_processor, make_user):
    media_root, _ = media_dirs
    me = make_user("Me")

    resp = client.post(
        "/api/upload/avatar",
        data={"user_id": me.id},
        files={"file": ("me.png", io.BytesIO(b"fake"), "image/png")},
    )
    assert resp.status_code == 200
    assert resp.json()["id"] == me.id
    assert fake_processor.calls[0][0] == "avatar"
    assert fake_processor.calls[0][3] == str(media_root / "avatar" / me.id)


def test_upload_requires_existing_event(client, fake_processor, make_user):
    me = make_user("Me")
    resp = client.post(
        "/api/upload/clip",
        data={"user_id": me.id, "event_id": "missing"},
        files={"file": ("clip.mp4", io.BytesIO(b"x"), "video/mp4")},
    )
    assert resp.status_code == 404
    assert fake_processor.calls == []
