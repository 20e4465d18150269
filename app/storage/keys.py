GOALS_KEY = "web3_savings_goals"
TRANSACTIONS_KEY = "web3_savings_transactions"
CHALLENGES_KEY = "web3_savings_challenges"
REMINDERS_KEY = "web3_savings_reminders"

ALL_COLLECTION_KEYS = (GOALS_KEY, TRANSACTIONS_KEY, CHALLENGES_KEY, REMINDERS_KEY)
