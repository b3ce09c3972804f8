from typing import Optional

CONVERSATION_ID_SEPARATOR = "_"


def canonical_wallet(wallet: Optional[str]) -> str:
    """Wallet addresses are case-insensitive; the lowercase form is the identity."""
    return (wallet or "").strip().lower()


def conversation_id(wallet_a: str, wallet_b: str) -> str:
    """Key of the conversation between two wallets, independent of argument order."""
    first, second = sorted([canonical_wallet(wallet_a), canonical_wallet(wallet_b)])
    return f"{first}{CONVERSATION_ID_SEPARATOR}{second}"
