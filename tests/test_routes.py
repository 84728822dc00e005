"""HTTP tests for login, registration, logout, profile and listings (TestClient, SQLite, temp upload dir)."""

import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from stagefront.core.config import Settings
from stagefront.core.context import build_context
from stagefront.core.security import SessionSigner
from stagefront.main import create_app
from stagefront.models import Band, Base, Event, User, user_bands
from stagefront.services.credentials import CredentialStoreError

COOKIE = "stagefront_session"


class RouteTestCase(unittest.TestCase):
    """Builds an app around an in-memory database and a throwaway upload directory."""

    session_secret: str | None = "route-test-secret"

    def setUp(self) -> None:
        self.upload_dir = tempfile.mkdtemp()
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        settings = Settings(
            _env_file=None,
            DATABASE_URL="sqlite://",
            SESSION_SECRET=self.session_secret,
            SESSION_COOKIE_NAME=COOKIE,
            BCRYPT_ROUNDS=4,
            UPLOAD_DIR=self.upload_dir,
            MAX_UPLOAD_BYTES=1024,
        )
        self.ctx = build_context(settings, engine=engine)
        self.client = TestClient(create_app(self.ctx))

    def tearDown(self) -> None:
        self.client.close()
        self.ctx.close()
        shutil.rmtree(self.upload_dir, ignore_errors=True)

    def register(self, email: str = "ana@example.com", password: str = "guitar-hero", role: str = "musician", files=None, **extra: str):
        form = {"username": email, "password": password, "role": role, "name": "Ana", "description": "Hi"}
        form.update(extra)
        return self.client.post("/register", data=form, files=files, follow_redirects=False)

    def login(self, email: str = "ana@example.com", password: str = "guitar-hero"):
        return self.client.post(
            "/login",
            data={"username": email, "password": password},
            follow_redirects=False,
        )

    def stored_files(self) -> list[Path]:
        return [p for p in Path(self.upload_dir).rglob("*") if p.is_file()]

    def db(self):
        return self.ctx.session_factory()


class TestForms(RouteTestCase):
    def test_login_form(self) -> None:
        resp = self.client.get("/login")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([f["name"] for f in resp.json()["fields"]], ["username", "password"])

    def test_register_form_lists_roles(self) -> None:
        resp = self.client.get("/register")
        self.assertEqual(resp.status_code, 200)
        role = next(f for f in resp.json()["fields"] if f["name"] == "role")
        self.assertEqual(role["options"], ["musician", "band_member", "event_organizer"])

    def test_root_and_health(self) -> None:
        self.assertEqual(self.client.get("/").status_code, 200)
        health = self.client.get("/health").json()
        self.assertEqual(health["status"], "ok")
        self.assertEqual(health["database"], "connected")


class TestRegistration(RouteTestCase):
    def test_register_signs_in_and_redirects_to_profile(self) -> None:
        resp = self.register()
        self.assertEqual(resp.status_code, 303)
        self.assertEqual(resp.headers["location"], "/profile")
        self.assertIn(COOKIE, self.client.cookies)

        profile = self.client.get("/profile")
        self.assertEqual(profile.status_code, 200)
        body = profile.json()
        self.assertEqual(body["view"], "musician")
        self.assertEqual(body["user"]["email"], "ana@example.com")

    def test_register_stores_media(self) -> None:
        resp = self.register(
            files={
                "profile_picture": ("me.png", b"png-bytes", "image/png"),
                "audio": ("demo.mp3", b"mp3-bytes", "audio/mpeg"),
            }
        )
        self.assertEqual(resp.status_code, 303)
        user = self.client.get("/profile").json()["user"]
        self.assertTrue(user["profile_picture"].startswith("images/profile_picture-"))
        self.assertTrue(user["profile_picture"].endswith("-me.png"))
        self.assertTrue(user["audio"].startswith("audio/audio-"))
        self.assertIsNone(user["video"])
        self.assertEqual(self.client.get("/uploads/" + user["audio"]).content, b"mp3-bytes")

    def test_duplicate_email_redirects_to_login(self) -> None:
        self.register()
        other = TestClient(self.client.app)
        resp = other.post(
            "/register",
            data={"username": "ana@example.com", "password": "x", "role": "musician"},
            follow_redirects=False,
        )
        self.assertEqual(resp.status_code, 303)
        self.assertEqual(resp.headers["location"], "/login")
        self.assertNotIn(COOKIE, other.cookies)
        with self.db() as db:
            self.assertEqual(db.query(User).filter(User.email == "ana@example.com").count(), 1)

    def test_duplicate_email_discards_uploaded_media(self) -> None:
        self.register()
        self.assertEqual(self.stored_files(), [])
        resp = self.register(files={"video": ("clip.mp4", b"video-bytes", "video/mp4")})
        self.assertEqual(resp.headers["location"], "/login")
        self.assertEqual(self.stored_files(), [])

    def test_oversized_upload_rejected(self) -> None:
        resp = self.register(files={"video": ("big.mp4", b"x" * 2048, "video/mp4")})
        self.assertEqual(resp.status_code, 413)
        with self.db() as db:
            self.assertEqual(db.query(User).count(), 0)

    def test_missing_required_field(self) -> None:
        resp = self.client.post("/register", data={"username": "a@b.c", "password": "pw"})
        self.assertEqual(resp.status_code, 422)

    def test_store_failure_is_500_and_cleans_up(self) -> None:
        with patch(
            "stagefront.services.registration.find_user_by_email",
            AsyncMock(side_effect=CredentialStoreError("Database error during user lookup by email.")),
        ):
            resp = self.register(files={"audio": ("a.mp3", b"a", "audio/mpeg")})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["detail"], "Internal Server Error")
        self.assertEqual(self.stored_files(), [])


class TestLogin(RouteTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.register()
        self.client.cookies.clear()

    def test_success_redirects_to_profile(self) -> None:
        resp = self.login()
        self.assertEqual(resp.status_code, 303)
        self.assertEqual(resp.headers["location"], "/profile")
        self.assertEqual(self.client.get("/profile").status_code, 200)

    def test_failures_are_indistinguishable(self) -> None:
        unknown = self.login(email="nobody@example.com")
        wrong = self.login(password="not-it")
        for resp in (unknown, wrong):
            self.assertEqual(resp.status_code, 303)
            self.assertEqual(resp.headers["location"], "/login")
            self.assertNotIn("set-cookie", resp.headers)
        self.assertEqual(unknown.content, wrong.content)

    def test_empty_form_redirects_to_login(self) -> None:
        resp = self.client.post("/login", data={}, follow_redirects=False)
        self.assertEqual(resp.headers["location"], "/login")

    def test_hasher_malfunction_is_500(self) -> None:
        with self.db() as db:
            db.add(User(email="broken@example.com", password_hash="garbage", role="musician"))
            db.commit()
        resp = self.login(email="broken@example.com", password="whatever")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["detail"], "Internal Server Error")

    def test_logout_clears_session(self) -> None:
        self.login()
        resp = self.client.get("/logout", follow_redirects=False)
        self.assertEqual(resp.status_code, 303)
        self.assertEqual(resp.headers["location"], "/")
        self.assertNotIn(COOKIE, self.client.cookies)
        profile = self.client.get("/profile", follow_redirects=False)
        self.assertEqual(profile.headers["location"], "/login")


class TestProfileRoute(RouteTestCase):
    def test_without_session_redirects_to_login(self) -> None:
        resp = self.client.get("/profile", follow_redirects=False)
        self.assertEqual(resp.status_code, 303)
        self.assertEqual(resp.headers["location"], "/login")
        self.assertNotIn("email", resp.text)

    def test_forged_cookie_redirects(self) -> None:
        self.register()
        self.client.cookies.clear()
        forged = SessionSigner("someone-elses-secret").dump(1)
        self.client.cookies.set(COOKIE, forged)
        resp = self.client.get("/profile", follow_redirects=False)
        self.assertEqual(resp.headers["location"], "/login")

    def test_session_for_deleted_user_redirects(self) -> None:
        self.client.cookies.set(COOKIE, self.ctx.signer.dump(404))
        resp = self.client.get("/profile", follow_redirects=False)
        self.assertEqual(resp.headers["location"], "/login")

    def test_unknown_role_is_404(self) -> None:
        self.register(role="roadie")
        resp = self.client.get("/profile")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "Profile not found")

    def test_band_member_profile_lists_bands(self) -> None:
        self.register(role="band_member")
        with self.db() as db:
            user = db.query(User).filter(User.email == "ana@example.com").one()
            db.add_all([Band(id=3, name="Threes", description=""), Band(id=4, name="Fours", description="")])
            db.flush()
            db.execute(user_bands.insert(), [{"user_id": user.id, "band_id": 3}])
            db.commit()
        body = self.client.get("/profile").json()
        self.assertEqual(body["view"], "band")
        self.assertEqual([b["id"] for b in body["bands"]], [3])

    def test_profile_lookup_failure_is_500(self) -> None:
        self.register(role="event_organizer")
        with patch(
            "stagefront.api.v1.profile.resolve_profile",
            AsyncMock(side_effect=CredentialStoreError("Database error during organizer events lookup.")),
        ):
            resp = self.client.get("/profile")
        self.assertEqual(resp.status_code, 500)


class TestProfileWithoutConfiguredSecret(RouteTestCase):
    session_secret = None

    def test_cookie_signed_with_placeholder_secret_redirects(self) -> None:
        self.register()
        self.client.cookies.clear()
        forged = SessionSigner("change-me-in-production").dump(1)
        self.client.cookies.set(COOKIE, forged)
        resp = self.client.get("/profile", follow_redirects=False)
        self.assertEqual(resp.status_code, 303)
        self.assertEqual(resp.headers["location"], "/login")

    def test_own_session_still_works(self) -> None:
        self.register()
        resp = self.client.get("/profile", follow_redirects=False)
        self.assertEqual(resp.status_code, 200)


class TestListings(RouteTestCase):
    def test_empty_listings(self) -> None:
        self.assertEqual(self.client.get("/artists").json(), {"artists": []})
        self.assertEqual(self.client.get("/bands").json(), {"bands": []})
        self.assertEqual(self.client.get("/events").json(), {"events": []})

    def test_add_event_anonymously_with_image(self) -> None:
        resp = self.client.post(
            "/add-event",
            data={"title": "Jam night", "description": "Bring an amp"},
            files={"image": ("poster.jpg", b"jpg", "image/jpeg")},
            follow_redirects=False,
        )
        self.assertEqual(resp.status_code, 303)
        self.assertEqual(resp.headers["location"], "/events")
        event = self.client.get("/events").json()["events"][0]
        self.assertEqual(event["title"], "Jam night")
        self.assertIsNone(event["organizer_id"])
        self.assertTrue(event["image_url"].startswith("/uploads/images/image-"))
        self.assertEqual(self.client.get(event["image_url"]).content, b"jpg")

    def test_events_newest_first_and_organizer_attached(self) -> None:
        self.register(role="event_organizer")
        self.client.post("/add-event", data={"title": "First"})
        self.client.post("/add-event", data={"title": "Second"})
        events = self.client.get("/events").json()["events"]
        self.assertEqual([e["title"] for e in events], ["Second", "First"])
        self.assertTrue(all(e["organizer_id"] is not None for e in events))
        profile = self.client.get("/profile").json()
        self.assertEqual({e["title"] for e in profile["events"]}, {"First", "Second"})

    def test_listing_failure_is_500(self) -> None:
        with patch(
            "stagefront.api.v1.listings.list_bands",
            AsyncMock(side_effect=CredentialStoreError("Database error during band listing.")),
        ):
            resp = self.client.get("/bands")
        self.assertEqual(resp.status_code, 500)

    def test_seeded_rows_are_listed(self) -> None:
        with self.db() as db:
            db.add(Event(title="Seeded", description="from fixtures"))
            db.add(Band(name="Seeded band", description=""))
            db.commit()
        self.assertEqual(self.client.get("/events").json()["events"][0]["title"], "Seeded")
        self.assertEqual(self.client.get("/bands").json()["bands"][0]["name"], "Seeded band")
