from __future__ import annotations

TAG_TRANSACTIONS = "Transactions"
ERROR_TRANSACTION_NOT_FOUND = "Transaction not found"
ERROR_VALIDATION = "Validation error"

TRANSACTION_ID_PARAM = {
    "transaction_id": {
        "in": "path",
        "description": "Transaction id",
        "type": "string",
        "required": True,
    }
}

TRANSACTION_LIST_DOC = {
    "description": "List transactions newest first, optionally for one goal.",
    "tags": [TAG_TRANSACTIONS],
    "responses": {200: {"description": "Transaction list"}},
}

TRANSACTION_CREATE_DOC = {
    "description": (
        "Record a deposit or withdrawal. The goal's currentAmount is adjusted "
        "in the same write; it never drops below zero."
    ),
    "tags": [TAG_TRANSACTIONS],
    "responses": {
        201: {"description": "Transaction recorded"},
        400: {"description": ERROR_VALIDATION},
    },
}

TRANSACTION_GET_DOC = {
    "description": "Return one transaction.",
    "tags": [TAG_TRANSACTIONS],
    "params": TRANSACTION_ID_PARAM,
    "responses": {
        200: {"description": "Transaction found"},
        404: {"description": ERROR_TRANSACTION_NOT_FOUND},
    },
}

TRANSACTION_UPDATE_DOC = {
    "description": (
        "Edit a transaction. The previous effect on the goal is reversed and "
        "the new one applied."
    ),
    "tags": [TAG_TRANSACTIONS],
    "params": TRANSACTION_ID_PARAM,
    "responses": {
        200: {"description": "Transaction updated"},
        400: {"description": ERROR_VALIDATION},
        404: {"description": ERROR_TRANSACTION_NOT_FOUND},
    },
}

TRANSACTION_DELETE_DOC = {
    "description": "Delete a transaction and reverse its effect on the goal.",
    "tags": [TAG_TRANSACTIONS],
    "params": TRANSACTION_ID_PARAM,
    "responses": {
        200: {"description": "Transaction deleted"},
        404: {"description": ERROR_TRANSACTION_NOT_FOUND},
    },
}
