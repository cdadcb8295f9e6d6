import sys
import unittest
from datetime import date, datetime
from pathlib import Path
from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


# Ensure `backend/` and the repository root are on sys.path so `import app...` works
REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT / "backend"))
sys.path.insert(0, str(REPO_ROOT))

from app.db.db import Base  # noqa: E402
from app.dependencies.db import get_db  # noqa: E402
from app.dependencies.services import get_offers_fetcher  # noqa: E402
from app.main import app  # noqa: E402
from app.models.cache_entry import CacheEntry  # noqa: E402
from engine.models import Offer  # noqa: E402

USER_HEADER = {"x-user-id": "user_a"}

GOLD_CARD = {
    "bin": "378282",
    "card_product_name": "Gold Card",
    "issuing_bank": "American Express",
    "network": "amex",
    "country": "US",
    "points_balance": 12000,
}


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        engine = create_engine(
            "sqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(bind=engine)
        self.Session = sessionmaker(bind=engine)

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()


class UserCardsApiTests(ApiTestCase):

    def test_add_and_list(self):
        resp = self.client.post("/api/v1/user_cards", json=GOLD_CARD, headers=USER_HEADER)
        self.assertEqual(resp.status_code, 201)
        card = resp.json()
        self.assertEqual(card["user_id"], "user_a")
        self.assertEqual(card["card_product_name"], "Gold Card")

        resp = self.client.get("/api/v1/user_cards", headers=USER_HEADER)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([c["id"] for c in resp.json()], [card["id"]])

        # other users see nothing
        resp = self.client.get("/api/v1/user_cards", headers={"x-user-id": "user_b"})
        self.assertEqual(resp.json(), [])

    def test_missing_user_header_returns_401(self):
        resp = self.client.get("/api/v1/user_cards")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"]["error"]["code"], "UNAUTHORIZED")

    def test_invalid_bin_returns_400(self):
        resp = self.client.post("/api/v1/user_cards", json={**GOLD_CARD, "bin": "12ab"}, headers=USER_HEADER)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"]["code"], "VALIDATION_ERROR")

    def test_update_card(self):
        card_id = self.client.post("/api/v1/user_cards", json=GOLD_CARD, headers=USER_HEADER).json()["id"]

        resp = self.client.put(
            f"/api/v1/user_cards/{card_id}",
            json={"points_balance": 15000, "last4_digits": "0005"},
            headers=USER_HEADER,
        )

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["points_balance"], 15000)
        self.assertEqual(resp.json()["last4_digits"], "0005")
        self.assertEqual(resp.json()["card_product_name"], "Gold Card")

    def test_update_with_null_name_returns_400(self):
        card_id = self.client.post("/api/v1/user_cards", json=GOLD_CARD, headers=USER_HEADER).json()["id"]

        resp = self.client.put(
            f"/api/v1/user_cards/{card_id}",
            json={"card_product_name": None},
            headers=USER_HEADER,
        )

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"]["code"], "VALIDATION_ERROR")
        cards = self.client.get("/api/v1/user_cards", headers=USER_HEADER).json()
        self.assertEqual(cards[0]["card_product_name"], "Gold Card")

    def test_update_other_users_card_returns_404(self):
        card_id = self.client.post("/api/v1/user_cards", json=GOLD_CARD, headers=USER_HEADER).json()["id"]

        resp = self.client.put(
            f"/api/v1/user_cards/{card_id}",
            json={"points_balance": 1},
            headers={"x-user-id": "user_b"},
        )

        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"]["error"]["code"], "NOT_FOUND")

    def test_delete_card(self):
        card_id = self.client.post("/api/v1/user_cards", json=GOLD_CARD, headers=USER_HEADER).json()["id"]

        resp = self.client.delete(f"/api/v1/user_cards/{card_id}", headers=USER_HEADER)
        self.assertEqual(resp.status_code, 204)

        resp = self.client.delete(f"/api/v1/user_cards/{card_id}", headers=USER_HEADER)
        self.assertEqual(resp.status_code, 404)


class NotificationsApiTests(ApiTestCase):

    def _ingest(self, offers):
        return self.client.post(
            "/api/v1/notifications/ingest",
            json={
                "card_issuer": "American Express",
                "card_name": "Gold Card",
                "country": "US",
                "offers": offers,
            },
        )

    def test_ingest_dedupes_and_fans_out(self):
        self.client.post("/api/v1/user_cards", json=GOLD_CARD, headers=USER_HEADER)
        offer = {"type": "new_offer", "title": "Double Points on Dining", "start_date": "2025-03-01"}

        first = self._ingest([offer])
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json()["new_notifications"], 1)
        self.assertEqual(first.json()["user_notifications_created"], 1)

        second = self._ingest([{**offer, "title": "double points on dining"}])
        self.assertEqual(second.json()["new_notifications"], 0)
        self.assertEqual(second.json()["duplicates"], 1)

        resp = self.client.get("/api/v1/notifications", headers=USER_HEADER)
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["unread_count"], 1)
        self.assertEqual(body["notifications"][0]["title"], "Double Points on Dining")
        self.assertFalse(body["notifications"][0]["read"])

    def test_mark_all_as_read(self):
        self.client.post("/api/v1/user_cards", json=GOLD_CARD, headers=USER_HEADER)
        self._ingest([{"type": "transfer_bonus", "title": "30% bonus to Delta", "start_date": "2025-03-01"}])

        resp = self.client.patch("/api/v1/notifications", json={"mark_all_as_read": True}, headers=USER_HEADER)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["updated"], 1)

        body = self.client.get("/api/v1/notifications", headers=USER_HEADER).json()
        self.assertEqual(body["unread_count"], 0)

    def test_mark_read_without_target_returns_400(self):
        resp = self.client.patch("/api/v1/notifications", json={}, headers=USER_HEADER)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"]["error"]["code"], "VALIDATION_ERROR")

    def test_refresh_fetches_held_card_types(self):
        self.client.post("/api/v1/user_cards", json=GOLD_CARD, headers=USER_HEADER)
        fetcher = MagicMock(return_value=[
            Offer(
                title="Double Points on Dining",
                description="",
                type="new_offer",
                start_date=date(2025, 3, 1),
            ),
        ])
        app.dependency_overrides[get_offers_fetcher] = lambda: fetcher

        resp = self.client.post("/api/v1/notifications/refresh")

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["processed"], 1)
        self.assertEqual(body["new_notifications"], 1)
        self.assertEqual(body["user_notifications_created"], 1)
        self.assertEqual(body["messages"], [])
        card_type = fetcher.call_args.args[0]
        self.assertEqual((card_type.bank, card_type.card_name), ("American Express", "Gold Card"))

    def test_refresh_reports_provider_failures(self):
        self.client.post("/api/v1/user_cards", json=GOLD_CARD, headers=USER_HEADER)
        app.dependency_overrides[get_offers_fetcher] = lambda: MagicMock(side_effect=RuntimeError("timeout"))

        body = self.client.post("/api/v1/notifications/refresh").json()

        self.assertEqual(body["errors"], 1)
        self.assertEqual(body["messages"], ["American Express Gold Card: timeout"])

    def test_refresh_purges_stale_cache(self):
        with self.Session() as db:
            db.add(CacheEntry(
                namespace="promotions",
                cache_key="promotions|Gold Card|American Express|US|",
                payload="{}",
                stored_at=datetime(2020, 1, 1),
            ))
            db.commit()
        app.dependency_overrides[get_offers_fetcher] = lambda: MagicMock(return_value=[])

        resp = self.client.post("/api/v1/notifications/refresh")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["cache_entries_purged"], 1)
        with self.Session() as db:
            self.assertEqual(db.query(CacheEntry).count(), 0)

    def test_refresh_without_provider_returns_503(self):
        resp = self.client.post("/api/v1/notifications/refresh")

        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp.json()["detail"]["error"]["code"], "PROVIDER_UNAVAILABLE")

    def test_unknown_offer_type_returns_400(self):
        resp = self._ingest([{"type": "lottery", "title": "Win a car", "start_date": "2025-03-01"}])
        self.assertEqual(resp.status_code, 400)


if __name__ == "__main__":
    unittest.main()
