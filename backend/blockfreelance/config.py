import os

from dotenv import load_dotenv

load_dotenv()

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Static root and home of the data files
PUBLIC_DIR = os.path.abspath(os.getenv("PUBLIC_DIR", os.getcwd()))

DATA_FILENAME = "project.json"
LEGACY_FILENAME = "projects.json"
ENTRY_FILENAME = "blockfreelance_modern.html"

MAX_BODY_BYTES = 1_000_000
