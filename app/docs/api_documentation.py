"""
API documentation metadata for the Swagger UI.
"""

API_INFO = {
    "title": "Savings Goals API",
    "version": "1.0.0",
    "description": (
        "Personal savings tracker.\n\n"
        "- Goals whose balance is derived from deposits and withdrawals.\n"
        "- Savings challenges and periodic reminders.\n"
        "- Compound-growth calculator and dashboard summary.\n"
        "- Import of on-chain Deposited/Withdrawn events."
    ),
    "license": {"name": "MIT", "url": "https://opensource.org/licenses/MIT"},
}

TAGS = [
    {"name": "Health", "description": "Liveness check"},
    {"name": "Goals", "description": "Savings goals, progress and chain imports"},
    {"name": "Transactions", "description": "Deposits and withdrawals per goal"},
    {"name": "Challenges", "description": "Time-boxed savings challenges"},
    {"name": "Reminders", "description": "Contribution reminders per goal"},
    {"name": "Calculator", "description": "Return on investment projections"},
    {"name": "Dashboard", "description": "Aggregated savings overview"},
]
