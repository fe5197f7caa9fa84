"""Application-wide constants and configuration values."""

from pathlib import Path
from typing import Final

# Exit Codes
EXIT_SUCCESS: Final[int] = 0
EXIT_GENERAL_ERROR: Final[int] = 1

# Default Paths
DEFAULT_CONFIG_DIR: Final[Path] = Path.home() / ".qbo-query"
DEFAULT_CONFIG_FILE: Final[str] = "config.json"
DEFAULT_LOG_FILE: Final[str] = "app.log"

# Per-project credential storage, relative to the working directory
CREDENTIALS_DIR_NAME: Final[str] = ".qbo-query"
CREDENTIALS_FILE_NAME: Final[str] = "credentials.local.json"
GITIGNORE_PATTERN: Final[str] = ".qbo-query/*.local.*"

# Remote endpoints
PRODUCTION_API_BASE_URL: Final[str] = "https://quickbooks.api.intuit.com"
SANDBOX_API_BASE_URL: Final[str] = "https://sandbox-quickbooks.api.intuit.com"
TOKEN_URL: Final[str] = "https://oauth.platform.intuit.com/oauth2/v1/tokens/bearer"
MINOR_VERSION: Final[int] = 75

# Token lifetimes (in seconds)
DEFAULT_TOKEN_LIFETIME: Final[int] = 3600
TOKEN_REFRESH_MARGIN: Final[int] = 300  # 5 minutes

# Timeouts (in seconds)
DEFAULT_REQUEST_TIMEOUT: Final[int] = 30

# Query limits
MAX_RESULTS_PER_PAGE: Final[int] = 1000
DEFAULT_QUERY_BY: Final[str] = "MetaData.LastUpdatedTime"

# Logging Configuration
LOG_MAX_BYTES: Final[int] = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT: Final[int] = 5

# Validation Patterns
ENTITY_NAME_PATTERN: Final[str] = r"^[A-Za-z]+$"

# CLI command name -> QuickBooks entity
ENTITY_COMMANDS: Final[dict[str, str]] = {
    "customers": "Customer",
    "vendors": "Vendor",
    "employees": "Employee",
    "accounts": "Account",
    "items": "Item",
    "invoices": "Invoice",
    "bills": "Bill",
    "purchases": "Purchase",
    "deposits": "Deposit",
    "payments": "Payment",
    "timeactivities": "TimeActivity",
    "estimates": "Estimate",
    "salesreceipts": "SalesReceipt",
    "creditmemos": "CreditMemo",
    "journalentries": "JournalEntry",
}

# Entities carrying TxnDate; these sort by transaction date before Id
TRANSACTION_ENTITIES: Final[frozenset[str]] = frozenset(
    {
        "Invoice",
        "Bill",
        "Purchase",
        "Deposit",
        "Payment",
        "TimeActivity",
        "Estimate",
        "SalesReceipt",
        "CreditMemo",
        "JournalEntry",
    }
)

# Entities that support ID -> FullyQualifiedName reference maps
REFERENCE_ENTITIES: Final[tuple[str, ...]] = ("Account", "Customer", "Vendor")
