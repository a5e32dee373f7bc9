import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "backend"))

from dotenv import load_dotenv
from sqlalchemy import text

load_dotenv(pathlib.Path(__file__).resolve().parents[1] / ".env")

from turfbook.database import SessionLocal
from turfbook.models.generated import Venues
from turfbook.redis_client import redis_client


def main():
    db = SessionLocal()
    try:
        print("DB OK:", db.execute(text("SELECT 1")).scalar())
        print("Venues:", db.query(Venues).count())
    finally:
        db.close()
    print("Redis OK:", redis_client.ping())


if __name__ == "__main__":
    main()
