# config.py
import os

from dotenv import load_dotenv

from domain.models import DEFAULT_BUSINESS_NAME as _DEFAULT_BUSINESS_NAME
from domain.models import DEFAULT_PRODUCT as _DEFAULT_PRODUCT

load_dotenv()

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")
SCHEMA = os.getenv("SCHEMA", "public")
ORDERS_TABLE = os.getenv("ORDERS_TABLE", "orders")

BUSINESS_NAME = os.getenv("BUSINESS_NAME", _DEFAULT_BUSINESS_NAME)
DEFAULT_PRODUCT = os.getenv("DEFAULT_PRODUCT", _DEFAULT_PRODUCT)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
