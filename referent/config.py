from pathlib import Path
from dotenv import load_dotenv
import os

BASE_DIR = Path(__file__).resolve().parents[1]
load_dotenv(BASE_DIR / '.env')

BOT_TOKEN = os.getenv('BOT_TOKEN')
CHANNEL_ID = os.getenv('CHANNEL_ID')
DEBUG_MODE = os.getenv('DEBUG_MODE', 'False').lower() in ('1', 'true', 'yes')

# fetch
FETCH_TIMEOUT = float(os.getenv('FETCH_TIMEOUT', 15))
USER_AGENT = os.getenv(
    'USER_AGENT',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
)
ACCEPT_LANGUAGE = os.getenv('ACCEPT_LANGUAGE', 'en-US,en;q=0.9')

# extraction heuristics
MIN_CONTENT_LENGTH = int(os.getenv('MIN_CONTENT_LENGTH', 100))
CONTAINER_PARAGRAPH_MIN = int(os.getenv('CONTAINER_PARAGRAPH_MIN', 20))
FALLBACK_PARAGRAPH_MIN = int(os.getenv('FALLBACK_PARAGRAPH_MIN', 50))
DATE_LOCALE = os.getenv('DATE_LOCALE', 'ru').lower()
DATE_CLASS_SUBSTRINGS = tuple(
    s.strip() for s in os.getenv('DATE_CLASS_SUBSTRINGS', 'date,time').split(',') if s.strip()
)
