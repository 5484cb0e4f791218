from fastapi import FastAPI
from dotenv import load_dotenv

load_dotenv()
from fastapi.middleware.cors import CORSMiddleware
from database import Base, engine
from datetime import datetime
import os
import models  # noqa: F401  registers every table on Base.metadata
import routers.purchase_orders as purchase_orders
import routers.purchase_tax_invoices as purchase_tax_invoices
import routers.sales_tax_invoices as sales_tax_invoices
import routers.inventory as inventory
import routers.app_config as app_config
import routers.audit_log as audit_log
import logging


LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
os.makedirs(LOG_DIR, exist_ok=True) # Create the log directory if it doesn't exist

# Create a unique log file name based on current date/time
current_time_str = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
LOG_FILE = os.path.join(LOG_DIR, f"app_{current_time_str}.log")

# Configure the root logger
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    filename=LOG_FILE, # Log to a file
    filemode='a' # Append to the file if it exists
)

# Also add a StreamHandler to output logs to the console
console_handler = logging.StreamHandler()
console_handler.setLevel(LOG_LEVEL)
console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
logging.getLogger().addHandler(console_handler) # Add to the root logger

logger = logging.getLogger(__name__)
logger.info("Application starting up...")
# --- End Logging Configuration ---


# Create database tables
Base.metadata.create_all(bind=engine)


app = FastAPI(
    title="Order Ledger API",
    version="1.0.0",
    description="Purchase orders, tax invoices and inventory kept in step by reconciliation",
)


allowed_origins_str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173"
)

# Split the string into a list, stripping any whitespace
allowed_origins = [origin.strip() for origin in allowed_origins_str.split(',')]

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(purchase_orders.router)
app.include_router(purchase_tax_invoices.router)
app.include_router(sales_tax_invoices.router)
app.include_router(inventory.router)
app.include_router(app_config.router)
app.include_router(audit_log.router)

@app.get("/")
async def test_route():
    return {"message": "Welcome to the Order Ledger API!"}
