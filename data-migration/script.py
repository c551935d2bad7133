"""
This script fills the database with data for development and demos.

Two modes:
- `seed`: insert a set of sample campaigns, income/expense transactions and
  invoices (derived fields, numbering and statuses go through the same
  services the API uses).
- `import`: load transactions from normalized CSV files (columns: date,
  type, category, amount, description, optional notes) into the database.

Usage (from the project root, so `db` and `models` are importable):
    PYTHONPATH=. python data-migration/script.py seed [--reset]
    PYTHONPATH=. python data-migration/script.py import data-migration/normalized
"""


from __future__ import annotations

import argparse
import logging
from datetime import datetime
from pathlib import Path

import pandas as pd

from db import SessionLocal, engine, Base
from models import Campaign, Invoice, Transaction
from app.errors import ValidationError
from app.services.campaigns import create_campaign
from app.services.invoices import create_invoice, mark_invoice_paid
from app.services.transactions import build_transaction, create_transaction

logger = logging.getLogger("seed")

NORMALIZED_DIR = Path("data-migration/normalized")

SAMPLE_CAMPAIGNS = [
    {
        "name": "Summer Sale Facebook Campaign",
        "platform": "Facebook",
        "start_date": datetime(2025, 6, 1),
        "end_date": datetime(2025, 6, 30),
        "budget": 5000,
        "leads_generated": 250,
        "conversions": 45,
        "status": "completed",
    },
    {
        "name": "Google Ads - Product Launch",
        "platform": "Google",
        "start_date": datetime(2025, 7, 1),
        "end_date": datetime(2025, 7, 31),
        "budget": 8000,
        "leads_generated": 320,
        "conversions": 68,
        "status": "completed",
    },
    {
        "name": "Email Marketing - Newsletter",
        "platform": "Email",
        "start_date": datetime(2025, 8, 1),
        "end_date": datetime(2025, 8, 31),
        "budget": 1500,
        "leads_generated": 180,
        "conversions": 52,
        "status": "completed",
    },
    {
        "name": "Facebook Lead Generation Campaign",
        "platform": "Facebook",
        "start_date": datetime(2025, 9, 1),
        "end_date": datetime(2025, 9, 30),
        "budget": 6000,
        "leads_generated": 145,
        "conversions": 38,
        "status": "completed",
    },
    {
        "name": "Google Search Ads - Brand Awareness",
        "platform": "Google",
        "start_date": datetime(2025, 10, 1),
        "end_date": datetime(2025, 12, 31),
        "budget": 4500,
        "leads_generated": 200,
        "conversions": 41,
        "status": "active",
    },
]

SAMPLE_TRANSACTIONS = [
    {"type": "income", "category": "project", "amount": 15000, "date": datetime(2025, 6, 15),
     "description": "Website redesign project"},
    {"type": "income", "category": "deposit", "amount": 5000, "date": datetime(2025, 7, 2),
     "description": "Retainer deposit"},
    {"type": "expense", "category": "salary", "amount": 8000, "date": datetime(2025, 6, 30),
     "description": "June salaries"},
    {"type": "expense", "category": "subscription", "amount": 250, "date": datetime(2025, 7, 5),
     "description": "Design tools subscription"},
    {"type": "expense", "category": "marketing", "amount": 5000, "date": datetime(2025, 6, 1),
     "description": "Summer Sale Facebook Campaign budget"},
    {"type": "expense", "category": "utilities", "amount": 320, "date": datetime(2025, 7, 10),
     "description": "Office electricity and internet"},
]

SAMPLE_INVOICES = [
    {
        "client_name": "Acme Corporation",
        "client_email": "billing@acme.example",
        "items": [
            {"description": "Website development", "quantity": 1, "price": 20000},
            {"description": "Hosting setup", "quantity": 1, "price": 5000},
        ],
        "tax_rate": 10,
        "issue_date": datetime(2025, 9, 1),
        "due_date": datetime(2025, 9, 30),
        "paid": True,
    },
    {
        "client_name": "Globex Ltd",
        "items": [
            {"description": "SEO audit", "quantity": 1, "price": 18000},
        ],
        "tax_rate": 10,
        "issue_date": datetime(2025, 10, 1),
        "due_date": datetime(2026, 12, 31),
        "paid": False,
    },
    {
        "client_name": "Initech",
        "items": [
            {"description": "Consulting hours", "quantity": 12, "price": 150},
        ],
        "issue_date": datetime(2025, 5, 1),
        "due_date": datetime(2025, 5, 31),
        "paid": False,
    },
]


def seed(reset: bool = False) -> None:
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    try:
        if reset:
            for model in (Transaction, Campaign, Invoice):
                for row in session.query(model).all():
                    session.delete(row)
            session.commit()
            logger.info("Cleared existing data")

        for data in SAMPLE_CAMPAIGNS:
            create_campaign(session, data)

        for data in SAMPLE_TRANSACTIONS:
            create_transaction(session, data)

        for data in SAMPLE_INVOICES:
            data = dict(data)
            paid = data.pop("paid")
            invoice = create_invoice(session, data)
            if paid:
                mark_invoice_paid(session, invoice.id, payment_date=invoice.due_date)

        logger.info(
            "Seeded %d campaigns, %d transactions, %d invoices",
            session.query(Campaign).count(),
            session.query(Transaction).count(),
            session.query(Invoice).count(),
        )
    finally:
        session.close()


def _none_if_nan(x):
    if pd.isna(x):
        return None
    s = str(x).strip()
    return None if s == "" or s.lower() == "nan" else s


def import_normalized_csvs_to_db(folder: Path = NORMALIZED_DIR, batch_size: int = 1000) -> int:
    """
    Import every *.csv in `folder` as transactions. Rows that fail validation
    are skipped and logged; any other error rolls back the current file.
    """
    folder = Path(folder)
    csv_files = sorted(folder.glob("*.csv"))
    if not csv_files:
        raise FileNotFoundError(f"No CSV files found in: {folder.resolve()}")

    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    total_inserted = 0

    try:
        for f in csv_files:
            df = pd.read_csv(f)

            # normalize headers
            df.columns = df.columns.str.strip().str.lower()

            required = {"date", "type", "category", "amount", "description"}
            missing = required - set(df.columns)
            if missing:
                raise ValueError(f"{f.name}: missing required columns: {sorted(missing)}")

            if "notes" not in df.columns:
                df["notes"] = None

            # drop fully empty rows
            df = df.dropna(how="all").copy()

            df["date"] = pd.to_datetime(df["date"], format="ISO8601")
            df["amount"] = pd.to_numeric(
                df["amount"].astype(str).str.replace(" ", "", regex=False).str.replace(",", ".", regex=False),
                errors="raise",
            )

            objs = []
            for i, row in enumerate(df.itertuples(index=False), start=1):
                data = {
                    "type": _none_if_nan(row.type),
                    "category": _none_if_nan(row.category),
                    "amount": float(row.amount),
                    "date": row.date.to_pydatetime(),
                    "description": _none_if_nan(row.description),
                    "notes": _none_if_nan(row.notes),
                }
                try:
                    objs.append(build_transaction(data))
                except ValidationError as exc:
                    logger.warning("%s row %d skipped: %s", f.name, i, exc.message)

            # insert in batches
            for start in range(0, len(objs), batch_size):
                session.add_all(objs[start : start + batch_size])
                session.commit()

            total_inserted += len(objs)
            logger.info("Imported %d rows from %s", len(objs), f.name)

        logger.info("DONE. Total inserted: %d", total_inserted)
        return total_inserted

    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    parser = argparse.ArgumentParser(description="Seed or import business manager data")
    sub = parser.add_subparsers(dest="command", required=True)

    seed_cmd = sub.add_parser("seed", help="insert sample data")
    seed_cmd.add_argument("--reset", action="store_true", help="delete existing rows first")

    import_cmd = sub.add_parser("import", help="import transactions from CSV files")
    import_cmd.add_argument("folder", nargs="?", default=str(NORMALIZED_DIR))

    args = parser.parse_args()
    if args.command == "seed":
        seed(reset=args.reset)
    else:
        import_normalized_csvs_to_db(Path(args.folder))
