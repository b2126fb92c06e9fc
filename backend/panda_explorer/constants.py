"""
Application Constants

Centralized constants for cache lifetimes, the CoinGecko symbol table,
the staking catalogue and the filter vocabulary used by the listings.
"""

from types import MappingProxyType
from typing import Dict, Mapping, Tuple

# Cache TTL (seconds)
HISTORY_CACHE_TTL_BY_DAYS: Mapping[int, int] = MappingProxyType({
    1: 5 * 60,  # Intraday series move quickly
    7: 15 * 60,
    30: 30 * 60,
})
HISTORY_CACHE_TTL_DEFAULT = 60 * 60  # Any other day range

DEFAULT_PAGE_SIZE = 25

# Wallet / transaction categories
CATEGORY_CRYPTO = "crypto"
CATEGORY_FIAT = "fiat"
CATEGORY_ALL = "all"
TRANSACTION_CATEGORIES = (CATEGORY_ALL, CATEGORY_CRYPTO, CATEGORY_FIAT)

# Filter values accepted by Bitpanda's listing endpoints
TRADE_SIDES = ("buy", "sell")
TRANSACTION_KINDS = ("buy", "sell", "deposit", "withdrawal", "transfer", "refund", "ico")
TRANSACTION_STATUSES = ("pending", "processing", "finished", "canceled")

# Bitpanda symbol -> (CoinGecko id, display name)
# Built once at import; never mutated.
SYMBOL_MAPPING: Mapping[str, Tuple[str, str]] = MappingProxyType({
    "BTC": ("bitcoin", "Bitcoin"),
    "ETH": ("ethereum", "Ethereum"),
    "XRP": ("ripple", "XRP"),
    "ADA": ("cardano", "Cardano"),
    "SOL": ("solana", "Solana"),
    "DOT": ("polkadot", "Polkadot"),
    "DOGE": ("dogecoin", "Dogecoin"),
    "SHIB": ("shiba-inu", "Shiba Inu"),
    "MATIC": ("matic-network", "Polygon"),
    "LTC": ("litecoin", "Litecoin"),
    "LINK": ("chainlink", "Chainlink"),
    "UNI": ("uniswap", "Uniswap"),
    "AVAX": ("avalanche-2", "Avalanche"),
    "XLM": ("stellar", "Stellar"),
    "ATOM": ("cosmos", "Cosmos"),
    "ETC": ("ethereum-classic", "Ethereum Classic"),
    "XMR": ("monero", "Monero"),
    "BCH": ("bitcoin-cash", "Bitcoin Cash"),
    "ALGO": ("algorand", "Algorand"),
    "VET": ("vechain", "VeChain"),
    "FIL": ("filecoin", "Filecoin"),
    "AAVE": ("aave", "Aave"),
    "SAND": ("the-sandbox", "The Sandbox"),
    "MANA": ("decentraland", "Decentraland"),
    "AXS": ("axie-infinity", "Axie Infinity"),
    "APE": ("apecoin", "ApeCoin"),
    "CRO": ("crypto-com-chain", "Cronos"),
    "NEAR": ("near", "NEAR Protocol"),
    "TRX": ("tron", "TRON"),
    "EOS": ("eos", "EOS"),
    "BEST": ("bitpanda-ecosystem-token", "Bitpanda Ecosystem Token"),
    "PAN": ("pantos", "Pantos"),
    "USDT": ("tether", "Tether"),
    "USDC": ("usd-coin", "USD Coin"),
    "DAI": ("dai", "Dai"),
    "XAU": ("pax-gold", "Gold (PAXG)"),
    "XAG": ("silver-token", "Silver"),
})

# Staking catalogue (approximate APYs, maintained by hand)
STAKING_ASSETS: Tuple[Dict[str, object], ...] = (
    {"symbol": "ETH", "name": "Ethereum", "estimated_apy": "3.5", "min_apy": "3.0", "max_apy": "4.0",
     "lock_period_days": 0, "minimum_stake": "0.01", "reward_frequency": "Weekly",
     "staking_type": "Proof of Stake", "description": "Native Ethereum staking"},
    {"symbol": "SOL", "name": "Solana", "estimated_apy": "6.0", "min_apy": "5.5", "max_apy": "7.0",
     "lock_period_days": 0, "minimum_stake": "0.1", "reward_frequency": "Every 2-3 days",
     "staking_type": "Proof of Stake", "description": "High throughput, low fees"},
    {"symbol": "ADA", "name": "Cardano", "estimated_apy": "4.5", "min_apy": "4.0", "max_apy": "5.0",
     "lock_period_days": 0, "minimum_stake": "1", "reward_frequency": "Every 5 days (epoch)",
     "staking_type": "Proof of Stake", "description": "No lock-up period"},
    {"symbol": "DOT", "name": "Polkadot", "estimated_apy": "12.0", "min_apy": "10.0", "max_apy": "14.0",
     "lock_period_days": 28, "minimum_stake": "1", "reward_frequency": "Daily",
     "staking_type": "Nominated PoS", "description": "High APY, 28-day unbonding"},
    {"symbol": "ATOM", "name": "Cosmos", "estimated_apy": "18.0", "min_apy": "15.0", "max_apy": "20.0",
     "lock_period_days": 21, "minimum_stake": "0.1", "reward_frequency": "Instant",
     "staking_type": "Proof of Stake", "description": "One of the highest APYs"},
    {"symbol": "AVAX", "name": "Avalanche", "estimated_apy": "8.0", "min_apy": "7.0", "max_apy": "9.0",
     "lock_period_days": 14, "minimum_stake": "0.1", "reward_frequency": "Daily",
     "staking_type": "Proof of Stake", "description": "Fast, scalable network"},
    {"symbol": "MATIC", "name": "Polygon", "estimated_apy": "5.0", "min_apy": "4.0", "max_apy": "6.0",
     "lock_period_days": 0, "minimum_stake": "1", "reward_frequency": "Weekly",
     "staking_type": "Proof of Stake", "description": "Ethereum layer 2"},
    {"symbol": "NEAR", "name": "NEAR Protocol", "estimated_apy": "9.5", "min_apy": "8.0", "max_apy": "11.0",
     "lock_period_days": 2, "minimum_stake": "0.1", "reward_frequency": "Every 12 hours",
     "staking_type": "Proof of Stake", "description": "Sharded for scalability"},
    {"symbol": "XTZ", "name": "Tezos", "estimated_apy": "5.5", "min_apy": "5.0", "max_apy": "6.0",
     "lock_period_days": 0, "minimum_stake": "0.1", "reward_frequency": "Every 3 days",
     "staking_type": "Liquid PoS", "description": "Self-amending blockchain"},
    {"symbol": "ALGO", "name": "Algorand", "estimated_apy": "5.0", "min_apy": "4.0", "max_apy": "6.0",
     "lock_period_days": 0, "minimum_stake": "0.1", "reward_frequency": "Instant",
     "staking_type": "Pure PoS", "description": "Automatic staking"},
    {"symbol": "TRX", "name": "TRON", "estimated_apy": "4.0", "min_apy": "3.5", "max_apy": "5.0",
     "lock_period_days": 3, "minimum_stake": "1", "reward_frequency": "Daily",
     "staking_type": "Delegated PoS", "description": "Entertainment-focused network"},
    {"symbol": "BEST", "name": "Bitpanda Ecosystem Token", "estimated_apy": "8.0", "min_apy": "5.0",
     "max_apy": "12.0", "lock_period_days": 0, "minimum_stake": "1", "reward_frequency": "Weekly",
     "staking_type": "Rewards Program", "description": "Bitpanda native token with VIP perks"},
)

STAKING_DISCLAIMER = "APYs are estimates and may change. Check bitpanda.com for current rates."
