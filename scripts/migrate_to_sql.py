"""One-off migration script: rates data file (JSON) -> SQL database."""
from __future__ import annotations

import sys
from pathlib import Path

# Make the rates_api package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rates_api.core.config import get_settings
from rates_api.db.create_tables import create_all
from rates_api.db.models import RateRecord
from rates_api.db.session import get_session
from rates_api.repositories.json_storage import load_rates


def migrate(data_file: Path | None = None) -> int:
    """Copy every rate (disabled ones included) keeping ids and provenance."""
    settings = get_settings()
    path = Path(data_file or settings.data_file)
    if not path.exists():
        path = settings.seed_file
    rates = load_rates(path)
    create_all()
    with get_session() as session:
        for rate in rates:
            session.merge(
                RateRecord(
                    id=rate.id,
                    title=rate.title,
                    amount=rate.amount,
                    description=rate.description,
                    currency=rate.currency.value,
                    rate_type=rate.rate_type.value,
                    created_at=rate.created_at,
                    created_by=rate.created_by,
                    modified_at=rate.modified_at,
                    modified_by=rate.modified_by,
                    disabled=rate.disabled,
                )
            )
        session.commit()
    return len(rates)


if __name__ == "__main__":
    total = migrate(Path(sys.argv[1]) if len(sys.argv) > 1 else None)
    print(f"{total} rates migrated to SQL successfully.")
