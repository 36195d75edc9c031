import os
import json
import logging
from datetime import datetime
from dotenv import load_dotenv

from db import init_db, get_db
from college_recommendation.models import RecCollege

load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DATA_PATH = os.environ.get(
    "COLLEGES_DATA_PATH",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "colleges.json"),
)


def load_entries(path: str = DATA_PATH) -> list:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of colleges")
    return data


def upload_colleges(entries: list) -> int:
    init_db()
    count = 0
    with get_db() as db:
        for entry in entries:
            if not entry.get("id") or not entry.get("name"):
                logger.warning(f"Skipping entry without id/name: {entry}")
                continue
            RecCollege.upsert(db, {**entry, "updated_at": datetime.utcnow()})
            count += 1
    logger.info(f"✅ Upserted {count} colleges into rec_colleges")
    return count


if __name__ == "__main__":
    upload_colleges(load_entries())
