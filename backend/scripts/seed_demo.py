"""Seed a demo operator and reconcile two small spreadsheet feeds.

Usage (from repository root):
    python backend/scripts/seed_demo.py

Usage (from backend directory):
    python scripts/seed_demo.py
    # or
    python -m scripts.seed_demo
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sqlalchemy import delete

# Make `cardops` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from cardops.db.session import SessionLocal
from cardops.models.history_entry import HistoryEntry
from cardops.models.operator import Operator
from cardops.models.proposal import Proposal
from cardops.models.validation_issue import ValidationIssue
from cardops.reconciliation.types import SourceType
from cardops.services.operators import create_operator
from cardops.services.reconciliation import process_batch
from cardops.services.validation import validate_batch


DEFAULT_OPERATOR_NAME = "Demo Operator"


def build_demo_feeds() -> dict[SourceType, list[dict[str, str | None]]]:
    """Return deterministic rows for an intake feed and a production feed."""

    esteira = [
        {"CPF": "01234567890", "MATRICULA": "1001", "NOME": "Ana Souza", "EMPREGADOR": "GOV GOIAS SEG",
         "VALOR_CONTRATO": "5.000,00", "VALOR_PARCELA": "250,00", "PRAZO": "24"},
        {"CPF": "98765432100", "MATRICULA": "2002", "NOME": "Bruno Lima", "EMPREGADOR": "INSS BENEF SEG",
         "VALOR_CONTRATO": "1200", "VALOR_PARCELA": "100", "PRAZO": "12"},
        {"CPF": "11122233344", "MATRICULA": "3003", "NOME": None, "EMPREGADOR": "ACME LTDA",
         "VALOR_CONTRATO": None, "VALOR_PARCELA": None, "PRAZO": None},
        {"CPF": None, "MATRICULA": "4004", "NOME": "No Identity", "EMPREGADOR": None,
         "VALOR_CONTRATO": None, "VALOR_PARCELA": None, "PRAZO": None},
    ]
    prod_prom = [
        {"CPF": "01234567890", "MATRICULA": "1001", "PROPOSTA30": "PX-1001"},
        {"CPF": "55566677788", "MATRICULA": "5005", "NOME": "Carla Dias", "PROPOSTA30": "PX-5005"},
    ]
    return {SourceType.ESTEIRA: esteira, SourceType.PROD_PROM: prod_prom}


def reset_demo_data(db) -> None:
    """Remove every reconciliation record so the demo starts clean."""

    db.execute(delete(HistoryEntry))
    db.execute(delete(ValidationIssue))
    db.execute(delete(Proposal))
    db.execute(delete(Operator))
    db.commit()


def parse_args() -> argparse.Namespace:
    """Parse script CLI arguments."""

    parser = argparse.ArgumentParser(description="Seed demo proposals by reconciling sample feeds.")
    parser.add_argument(
        "--operator-name",
        default=DEFAULT_OPERATOR_NAME,
        help=f"Name of the operator importing the feeds (default: {DEFAULT_OPERATOR_NAME})",
    )
    parser.add_argument(
        "--no-reset",
        action="store_true",
        help="Do not delete existing proposals, issues and operators before seeding.",
    )
    return parser.parse_args()


def main() -> None:
    """Seed demo data and print a short summary."""

    args = parse_args()
    feeds = build_demo_feeds()

    with SessionLocal() as db:
        if not args.no_reset:
            reset_demo_data(db)

        operator = create_operator(db, args.operator_name)
        results = [
            process_batch(db, rows, source_type, operator.id)
            for source_type, rows in feeds.items()
        ]
        validation = validate_batch(
            db,
            [{"CPF": "01234567890", "MATRICULA": "1001"}, {"CPF": "00000000000", "MATRICULA": "9"}],
            operator.id,
        )
        operator_id = operator.id

    print("Seed complete")
    print(f"operator_id={operator_id}")
    for result in results:
        print(
            f"{result.source_type}: inserted={result.inserted} updated={result.updated} "
            f"duplicates={result.duplicates} errors={result.errors} score={result.operator_score}"
        )
    print(f"validation: validated={validation.stats.validated} not_found={validation.stats.not_found}")
    print()
    print("Inspect:")
    print(f"  GET /operators/{operator_id}/history")
    print("  GET /proposals/01234567890_1001")
    print("  GET /validations?resolved=false")


if __name__ == "__main__":
    main()
