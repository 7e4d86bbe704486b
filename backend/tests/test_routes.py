"""HTTP contract tests for the reconciliation API."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from time import perf_counter, sleep
import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient
import httpx
from sqlalchemy import delete
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from cardops.db.dependencies import get_db
from cardops.db.session import build_engine
from cardops.main import app
from cardops.models.base import Base
from cardops.models.history_entry import HistoryEntry
from cardops.models.operator import Operator
from cardops.models.proposal import Proposal
from cardops.models.validation_issue import ValidationIssue
from cardops.routers import uploads
from cardops.schemas.batch import BatchResult

CSV_FEED = (
    b"CPF,MATRICULA,NOME,EMPREGADOR,PROPOSTA30,VALOR_CONTRATO\n"
    b"11111111111,1,Ana,INSS BENEF SEG,P-1,\"1.000,00\"\n"
    b"22222222222,2,,ACME,,\n"
)


class RouteTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.engine = build_engine(
            "sqlite+pysqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autoflush=False, autocommit=False, future=True)
        Base.metadata.create_all(cls.engine)

        def _override_get_db() -> Iterator[Session]:
            db = cls.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = _override_get_db
        # No context manager: the lifespan warm-up would target the configured database.
        cls.client = TestClient(app)

    @classmethod
    def tearDownClass(cls) -> None:
        app.dependency_overrides.pop(get_db, None)
        Base.metadata.drop_all(cls.engine)
        cls.engine.dispose()

    def setUp(self) -> None:
        with self.SessionLocal() as db:
            db.execute(delete(HistoryEntry))
            db.execute(delete(ValidationIssue))
            db.execute(delete(Proposal))
            db.execute(delete(Operator))
            db.commit()
        response = self.client.post("/operators", json={"name": "Desk 1"})
        self.assertEqual(response.status_code, 201)
        self.operator_id = response.json()["data"]["id"]

    def _upload(self, source_type: str = "ESTEIRA", operator_id: int | None = None, filename: str = "feed.csv"):
        return self.client.post(
            "/uploads/spreadsheet",
            data={"source_type": source_type, "operator_id": str(operator_id or self.operator_id)},
            files={"file": (filename, CSV_FEED, "text/csv")},
        )

    def test_health(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_upload_reconciles_rows(self) -> None:
        response = self._upload()

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual((data["total"], data["inserted"], data["errors"]), (2, 2, 0))
        self.assertEqual(data["operator_score"], 100)

        proposal = self.client.get("/proposals/11111111111_1").json()["data"]
        self.assertEqual(proposal["logo_code"], 61)
        self.assertEqual(proposal["digitization_status"], "DIGITIZED")

    def test_upload_rejects_bad_input(self) -> None:
        self.assertEqual(self._upload(filename="feed.pdf").status_code, 400)
        self.assertEqual(self._upload(source_type="PAYROLL").status_code, 422)
        self.assertEqual(self._upload(operator_id=9999).status_code, 404)

    def test_validate_annotates_rows(self) -> None:
        self._upload()

        response = self.client.post(
            "/uploads/validate",
            data={"operator_id": str(self.operator_id)},
            files={"file": ("check.csv", b"CPF,MATRICULA\n11111111111,1\n33333333333,3\n", "text/csv")},
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["stats"]["validated"], 1)
        self.assertEqual(data["stats"]["not_found"], 1)
        self.assertEqual(
            [row["VALIDATION_STATUS"] for row in data["validated_rows"]],
            ["VALIDATED", "NOT_FOUND"],
        )

    def test_issue_resolution_conflict(self) -> None:
        created = self.client.post(
            "/validations",
            json={"unique_id": "5_5", "issue_type": "DUPLICATE", "description": "Manual flag"},
        )
        self.assertEqual(created.status_code, 201)
        issue_id = created.json()["data"]["id"]

        first = self.client.put(f"/validations/{issue_id}/resolve", json={"operator_id": self.operator_id})
        second = self.client.put(f"/validations/{issue_id}/resolve", json={"operator_id": self.operator_id})

        self.assertEqual(first.status_code, 200)
        self.assertTrue(first.json()["data"]["resolved"])
        self.assertEqual(first.json()["data"]["resolved_by"], self.operator_id)
        self.assertEqual(second.status_code, 409)
        self.assertEqual(self.client.put("/validations/9999/resolve", json={"operator_id": 1}).status_code, 404)

    def test_issue_listing_and_summary(self) -> None:
        self.client.post("/validations", json={"unique_id": "5_5", "issue_type": "NOT_FOUND", "description": "x"})
        self.client.post("/validations", json={"unique_id": "6_6", "issue_type": "DUPLICATE", "description": "y"})

        listed = self.client.get("/validations", params={"issue_type": "NOT_FOUND"}).json()["data"]
        summary = self.client.get("/validations/summary").json()["data"]

        self.assertEqual([issue["unique_id"] for issue in listed], ["5_5"])
        self.assertEqual(summary["total"], 2)
        self.assertEqual(self.client.get("/validations/9999").status_code, 404)
        self.assertEqual(self.client.post("/validations", json={"unique_id": "7_7"}).status_code, 422)

    def test_proposal_audit_and_issues(self) -> None:
        self._upload()

        audited = self.client.post("/proposals/22222222222_2/audit", json={"operator_id": self.operator_id})
        issues = self.client.get("/proposals/22222222222_2/validations")

        self.assertEqual(audited.status_code, 200)
        self.assertEqual([issue["description"] for issue in audited.json()["data"]], ["Name is missing"])
        self.assertEqual(len(issues.json()["data"]), 1)
        self.assertEqual(self.client.get("/proposals/00_0").status_code, 404)

    def test_operator_fields_edit(self) -> None:
        self._upload()

        response = self.client.put(
            "/proposals/11111111111_1",
            json={"operator_id": self.operator_id, "situation": "APPROVED", "extractor": "desk", "utilization": "50%"},
        )
        missing = self.client.put("/proposals/00_0", json={"operator_id": self.operator_id, "situation": "X"})

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual((data["situation"], data["extractor"], data["utilization"]), ("APPROVED", "desk", "50%"))
        self.assertEqual(missing.status_code, 404)

    def test_operator_history(self) -> None:
        self._upload()

        operator = self.client.get(f"/operators/{self.operator_id}").json()["data"]
        history = self.client.get(f"/operators/{self.operator_id}/history").json()["data"]

        self.assertEqual(operator["records_processed"], 2)
        self.assertEqual([entry["action"] for entry in history], ["UPLOAD", "INSERT", "INSERT"])
        self.assertEqual(self.client.get("/operators/9999").status_code, 404)


class UploadConcurrencyTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        def _no_db() -> Iterator[None]:
            yield None

        app.dependency_overrides[get_db] = _no_db

    def tearDown(self) -> None:
        app.dependency_overrides.pop(get_db, None)

    async def test_running_upload_does_not_block_other_requests(self) -> None:
        def _slow_batch(db, rows, source_type, operator_id) -> BatchResult:
            sleep(1.0)
            return BatchResult(source_type=str(source_type.value), operator_id=operator_id, total=len(rows))

        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:

            async def _health_after_delay() -> float:
                await asyncio.sleep(0.1)
                started = perf_counter()
                response = await client.get("/health")
                self.assertEqual(response.status_code, 200)
                return perf_counter() - started

            with patch.object(uploads, "process_batch", side_effect=_slow_batch):
                upload, health_elapsed = await asyncio.gather(
                    client.post(
                        "/uploads/spreadsheet",
                        data={"source_type": "ESTEIRA", "operator_id": "1"},
                        files={"file": ("feed.csv", CSV_FEED, "text/csv")},
                    ),
                    _health_after_delay(),
                )

        self.assertEqual(upload.status_code, 200)
        self.assertEqual(upload.json()["data"]["total"], 2)
        self.assertLess(health_elapsed, 0.6)


if __name__ == "__main__":
    unittest.main()
